"""EnrichmentFetcher — provider chain -> validate -> fallback."""

from __future__ import annotations

from dataclasses import replace

from divrecon.errors import DividendDataError, DividendDataErrorCode, FetchError
from divrecon.logging import get_logger
from divrecon.models.profile import DividendProfile
from divrecon.providers.base import BaseDividendProvider
from divrecon.quality import validate_profile

logger = get_logger(__name__)


class EnrichmentFetcher:
    """Look up one identity's dividend profile from external providers.

    Tries each provider in order. Retryable errors and failed validation
    fall through to the next provider; non-retryable errors end the chain.
    The fetcher never retries a provider; that is left to the next
    reconciliation run.
    """

    def __init__(
        self,
        providers: list[BaseDividendProvider],
        validate: bool = True,
    ) -> None:
        if not providers:
            raise ValueError("EnrichmentFetcher needs at least one provider")
        self.providers = providers
        self.validate = validate

    def fetch(self, identity: str) -> DividendProfile:
        """Fetch a profile for ``identity``.

        Returns:
            The provider's profile, keyed to ``identity``. A zero-dividend
            profile is a successful result.

        Raises:
            FetchError: every provider failed, or one failed non-retryably.
        """
        last_error: DividendDataError | None = None
        for provider in self.providers:
            try:
                profile = provider.fetch_profile(identity)

                if self.validate:
                    result = validate_profile(profile)
                    if not result.passed:
                        msgs = "; ".join(c.message for c in result.failed_checks)
                        raise DividendDataError(
                            f"Validation failed: {msgs}",
                            code=DividendDataErrorCode.VALIDATION_FAILED,
                            retryable=True,
                        )

                if profile.symbol != identity:
                    profile = replace(profile, symbol=identity)
                return profile

            except DividendDataError as e:
                logger.debug(
                    "Provider %s failed for %s: %s", provider.name, identity, e.message,
                )
                if not e.retryable:
                    raise FetchError(
                        identity, e.message, code=e.code, retryable=False,
                    ) from e
                last_error = e
                continue

        error = last_error or DividendDataError(
            "All providers failed", code=DividendDataErrorCode.NO_DATA, retryable=True,
        )
        raise FetchError(
            identity, error.message, code=error.code, retryable=error.retryable,
        ) from last_error
