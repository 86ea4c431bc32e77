"""
HTTP client module for NovaPay SDK

Signed JSON transport with bounded retries, cancellation and traffic recording.
"""

from .context import CallContext
from .retry import (
    RetryPolicy,
    is_retryable,
    is_retryable_status,
)
from .signed_client import (
    SignedHttpClient,
    HttpResult,
    create_session,
    decode_response,
    new_request_id,
)

__all__ = [
    'CallContext',
    'RetryPolicy',
    'is_retryable',
    'is_retryable_status',
    'SignedHttpClient',
    'HttpResult',
    'create_session',
    'decode_response',
    'new_request_id',
]
