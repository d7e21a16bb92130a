"""Parquet snapshots of a DividendStore.

Layout: one row per identity, columns as in ``SNAPSHOT_COLUMNS``.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import pandas as pd

from divrecon.logging import get_logger
from divrecon.models.profile import DividendProfile, PayFrequency
from divrecon.store import DividendStore

logger = get_logger(__name__)

SNAPSHOT_COLUMNS = [
    "identity",
    "annual_amount",
    "yield_percent",
    "pay_frequency",
    "next_ex_date",
    "next_pay_date",
    "is_fund",
    "source",
    "fetched_at",
]


def save_snapshot(store: DividendStore, path: Path | str) -> int:
    """Write every stored profile to ``path``. Returns the row count."""
    fp = Path(path)
    fp.parent.mkdir(parents=True, exist_ok=True)
    df = _profiles_to_df(store.items())
    df.to_parquet(fp, compression="snappy", index=False)
    logger.info("Saved %d dividend profiles to %s", len(df), fp)
    return len(df)


def load_snapshot(path: Path | str, store: DividendStore) -> int:
    """Seed ``store`` from a snapshot written by ``save_snapshot``.

    Rows that cannot be turned into a profile are skipped with a warning.
    Returns the number of profiles loaded.
    """
    fp = Path(path)
    df = pd.read_parquet(fp)
    loaded = 0
    for _, row in df.iterrows():
        try:
            identity, profile = _row_to_profile(row)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping snapshot row %r: %s", row.get("identity"), e)
            continue
        store.put(identity, profile)
        loaded += 1
    logger.info("Loaded %d dividend profiles from %s", loaded, fp)
    return loaded


# ---- helpers ----

def _profiles_to_df(items: list[tuple[str, DividendProfile]]) -> pd.DataFrame:
    records = [
        {
            "identity": identity,
            "annual_amount": p.annual_amount,
            "yield_percent": p.yield_percent,
            "pay_frequency": p.pay_frequency.value,
            "next_ex_date": p.next_ex_date,
            "next_pay_date": p.next_pay_date,
            "is_fund": p.is_fund,
            "source": p.source,
            "fetched_at": p.fetched_at,
        }
        for identity, p in items
    ]
    return pd.DataFrame(records, columns=SNAPSHOT_COLUMNS)


def _optional_date(value: Any) -> date | None:
    if value is None or pd.isna(value):
        return None
    return pd.Timestamp(value).date()


def _row_to_profile(row: pd.Series) -> tuple[str, DividendProfile]:
    identity = str(row["identity"]).strip()
    if not identity:
        raise ValueError("empty identity")
    fetched_at = row.get("fetched_at")
    profile = DividendProfile(
        symbol=identity,
        annual_amount=float(row["annual_amount"]),
        yield_percent=float(row["yield_percent"]) if pd.notna(row.get("yield_percent")) else 0.0,
        pay_frequency=PayFrequency(row["pay_frequency"]),
        next_ex_date=_optional_date(row.get("next_ex_date")),
        next_pay_date=_optional_date(row.get("next_pay_date")),
        is_fund=bool(row.get("is_fund", False)),
        source=str(row.get("source") or "snapshot"),
        fetched_at=(
            pd.Timestamp(fetched_at).to_pydatetime()
            if fetched_at is not None and pd.notna(fetched_at) else None
        ),
    )
    return identity, profile
