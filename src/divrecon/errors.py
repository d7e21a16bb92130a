"""Dividend data error types."""

from __future__ import annotations

from enum import Enum


class DividendDataErrorCode(Enum):
    """Error classification codes."""

    RATE_LIMITED = "rate_limited"
    AUTH_FAILED = "auth_failed"
    NOT_FOUND = "not_found"
    TIMEOUT = "timeout"
    PROVIDER_ERROR = "provider_error"
    MALFORMED_PAYLOAD = "malformed_payload"
    VALIDATION_FAILED = "validation_failed"
    NO_DATA = "no_data"


class DividendDataError(Exception):
    """Dividend data exception with error code and retryable flag.

    Attributes:
        message: Human-readable error description.
        code: Structured error code for programmatic handling.
        retryable: Whether the caller may try another provider (or a later run).
    """

    def __init__(
        self,
        message: str,
        code: DividendDataErrorCode = DividendDataErrorCode.PROVIDER_ERROR,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable


class FetchError(DividendDataError):
    """Enrichment of a single identity failed.

    Raised by ``EnrichmentFetcher.fetch``; the reconciler counts it and
    leaves the identity absent from the store so a later run retries it.
    """

    def __init__(
        self,
        identity: str,
        message: str,
        code: DividendDataErrorCode = DividendDataErrorCode.PROVIDER_ERROR,
        retryable: bool = True,
    ) -> None:
        super().__init__(message, code=code, retryable=retryable)
        self.identity = identity
