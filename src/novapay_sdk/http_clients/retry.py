"""
Retry policy for the signed transport

Only failures that are safe and useful to repeat are retried: rate limiting,
server errors other than 501, and network level transport errors. Everything
deterministic (encoding, signing, decoding, configuration, other 4xx) and any
cancellation is terminal.
"""

from dataclasses import dataclass

from ..exceptions import ConfigurationError, ErrorKind

STATUS_TOO_MANY_REQUESTS = 429
STATUS_NOT_IMPLEMENTED = 501

DEFAULT_MAX_ATTEMPTS = 1
DEFAULT_INITIAL_WAIT = 0.3


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry budget with exponential backoff.

    Attributes:
        max_attempts: Total attempts per call, including the first one
        initial_wait: Seconds to wait before the first retry, doubled after
            each retryable failure
    """
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    initial_wait: float = DEFAULT_INITIAL_WAIT

    def __post_init__(self):
        """Validate retry policy"""
        if self.max_attempts < 1:
            raise ConfigurationError("retry attempts must be > 0", "INVALID_RETRY_ATTEMPTS")
        if self.initial_wait <= 0:
            raise ConfigurationError("retry wait must be > 0", "INVALID_RETRY_WAIT")

    def wait_for(self, retry_number: int) -> float:
        """Wait before the given retry (1 = wait after the first failure)."""
        return self.initial_wait * (2 ** (retry_number - 1))


def is_retryable_status(status_code: int) -> bool:
    return status_code == STATUS_TOO_MANY_REQUESTS or (
        status_code >= 500 and status_code != STATUS_NOT_IMPLEMENTED
    )


def is_retryable(error: BaseException) -> bool:
    """
    Decide whether a failed attempt may be repeated.

    Args:
        error: Exception raised by one transport attempt

    Returns:
        bool: True for 429, 5xx other than 501, and transport errors
    """
    if error is None:
        return False
    kind = getattr(error, 'kind', None)
    if kind is ErrorKind.STATUS:
        return is_retryable_status(error.status_code)
    return kind is ErrorKind.TRANSPORT
