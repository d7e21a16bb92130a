"""Data quality validation for fetched dividend profiles."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from divrecon.models.profile import DividendProfile, PayFrequency


@dataclass
class ValidationCheck:
    """Single validation check result."""

    name: str
    passed: bool
    message: str = ""


@dataclass
class ValidationResult:
    """Aggregate validation result."""

    checks: list[ValidationCheck] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(c.passed for c in self.checks)

    @property
    def failed_checks(self) -> list[ValidationCheck]:
        return [c for c in self.checks if not c.passed]


def validate_profile(profile: DividendProfile) -> ValidationResult:
    """Run all quality checks on a dividend profile.

    Checks:
        1. Finite amount and yield (no NaN/Inf)
        2. Non-negative annual amount
        3. Non-negative yield
        4. Frequency consistency (zero payers carry UNKNOWN frequency)
        5. Date order (pay date not before ex-date)
    """
    result = ValidationResult()

    # 1. Finite values
    bad = [
        name for name, val in (
            ("annual_amount", profile.annual_amount),
            ("yield_percent", profile.yield_percent),
        )
        if math.isnan(val) or math.isinf(val)
    ]
    if bad:
        result.checks.append(
            ValidationCheck("finite_values", False, f"NaN/Inf in {', '.join(bad)}")
        )
        return result
    result.checks.append(ValidationCheck("finite_values", True))

    # 2. Amount
    if profile.annual_amount < 0:
        result.checks.append(ValidationCheck(
            "non_negative_amount", False, f"annual_amount={profile.annual_amount}",
        ))
    else:
        result.checks.append(ValidationCheck("non_negative_amount", True))

    # 3. Yield
    if profile.yield_percent < 0:
        result.checks.append(ValidationCheck(
            "non_negative_yield", False, f"yield_percent={profile.yield_percent}",
        ))
    else:
        result.checks.append(ValidationCheck("non_negative_yield", True))

    # 4. Frequency consistency
    if profile.annual_amount == 0 and profile.pay_frequency not in (
        PayFrequency.UNKNOWN, PayFrequency.SPECIAL,
    ):
        result.checks.append(ValidationCheck(
            "frequency_consistency", False,
            f"zero payer reported as {profile.pay_frequency.value}",
        ))
    else:
        result.checks.append(ValidationCheck("frequency_consistency", True))

    # 5. Date order
    if (
        profile.next_ex_date is not None
        and profile.next_pay_date is not None
        and profile.next_pay_date < profile.next_ex_date
    ):
        result.checks.append(ValidationCheck(
            "date_order", False,
            f"pay date {profile.next_pay_date} before ex-date {profile.next_ex_date}",
        ))
    else:
        result.checks.append(ValidationCheck("date_order", True))

    return result
