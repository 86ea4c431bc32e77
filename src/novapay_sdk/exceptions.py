"""
Exception classes for NovaPay Python SDK

Every SDK error carries an ``ErrorKind`` tag assigned where the failure happens,
so retry classification and caller branching are a single check on ``kind``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, List


class ErrorKind(str, Enum):
    """Failure classes produced by the SDK"""
    ENCODE = "encode"
    SIGN = "sign"
    VERIFY = "verify"
    STATUS = "status"
    TRANSPORT = "transport"
    DECODE = "decode"
    CANCELLED = "cancelled"
    DEADLINE_EXCEEDED = "deadline_exceeded"
    CONFIG = "config"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


class VerificationFailure(str, Enum):
    """Reasons a signature verification can fail"""
    KEY_NOT_CONFIGURED = "key_not_configured"
    UNSUPPORTED_ALGORITHM = "unsupported_algorithm"
    EMPTY_SIGNATURE = "empty_signature"
    MALFORMED_SIGNATURE = "malformed_signature"
    MISMATCH = "mismatch"


class NovaPaySDKError(Exception):
    """Base exception for all NovaPay SDK errors"""

    kind = ErrorKind.UNKNOWN

    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}


class ConfigurationError(NovaPaySDKError):
    """Exception raised for invalid or missing client configuration"""
    kind = ErrorKind.CONFIG


class UnsupportedHashAlgorithmError(ConfigurationError):
    """Exception raised when a signature hash algorithm name is not recognized"""

    def __init__(self, algorithm: Any):
        super().__init__(
            f"unsupported signature hash algorithm: {algorithm!r}",
            "UNSUPPORTED_HASH_ALGORITHM",
            {'algorithm': algorithm},
        )
        self.algorithm = algorithm


class KeyParseError(ConfigurationError):
    """Exception raised when an RSA key cannot be parsed from PEM"""
    pass


@dataclass
class FieldError:
    """Single invalid request field"""
    field: str
    message: str


class ValidationError(NovaPaySDKError):
    """Exception raised when a request is missing required fields or contains invalid data"""

    kind = ErrorKind.VALIDATION

    def __init__(self, fields: Optional[List[FieldError]] = None):
        self.fields: List[FieldError] = list(fields or [])
        super().__init__(self._format(), "VALIDATION_ERROR")

    def _format(self) -> str:
        if not self.fields:
            return "validation error"
        if len(self.fields) == 1:
            fe = self.fields[0]
            if not fe.field:
                return f"validation error: {fe.message}"
            return f"validation error: {fe.field}: {fe.message}"
        return f"validation error: {len(self.fields)} fields"

    def add(self, field: str, message: str) -> None:
        self.fields.append(FieldError(field, message))
        self.args = (self._format(),)

    def has_errors(self) -> bool:
        return bool(self.fields)

    def __str__(self) -> str:
        return self._format()


class EncodeError(NovaPaySDKError):
    """Exception raised when a request body cannot be serialized to JSON"""
    kind = ErrorKind.ENCODE


class SigningError(NovaPaySDKError):
    """Exception raised when a request body cannot be signed"""
    kind = ErrorKind.SIGN


class VerificationError(NovaPaySDKError):
    """Exception raised when an x-sign signature does not verify"""

    kind = ErrorKind.VERIFY

    def __init__(self, message: str, reason: VerificationFailure, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, reason.value.upper(), details)
        self.reason = reason


class TransportError(NovaPaySDKError):
    """Exception raised for network level failures (connection, timeout, DNS)"""

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, "TRANSPORT_ERROR", {'cause': repr(cause)} if cause else None)
        self.cause = cause


class HTTPStatusError(NovaPaySDKError):
    """Exception raised for a non-2xx HTTP response"""

    kind = ErrorKind.STATUS
    preview_limit = 512

    def __init__(self, status_code: int, body: bytes = b""):
        self.status_code = status_code
        self.body = bytes(body or b"")
        super().__init__(self._format(), "HTTP_STATUS_ERROR", {'status_code': status_code})

    def _format(self) -> str:
        if not self.body:
            return f"unexpected status: {self.status_code}"
        preview = self.body[:self.preview_limit].decode('utf-8', errors='replace')
        return f"unexpected status: {self.status_code}: {preview}"


class APIError(HTTPStatusError):
    """Non-2xx response returned by a NovaPay API method"""

    preview_limit = 1024

    def __init__(self, status_code: int, body: bytes = b""):
        super().__init__(status_code, body)
        self.error_code = "API_ERROR"

    def _format(self) -> str:
        if not self.body:
            return f"novapay api error: status {self.status_code}"
        preview = self.body[:self.preview_limit].decode('utf-8', errors='replace')
        return f"novapay api error: status {self.status_code}: {preview}"


class DecodeError(NovaPaySDKError):
    """Exception raised when a 2xx response body does not match the expected shape"""

    kind = ErrorKind.DECODE

    def __init__(self, message: str, status_code: int, body: bytes):
        super().__init__(message, "DECODE_ERROR", {'status_code': status_code})
        self.status_code = status_code
        self.body = body


class CancelledError(NovaPaySDKError):
    """Exception raised when the caller cancels a call"""

    kind = ErrorKind.CANCELLED

    def __init__(self, message: str = "call cancelled"):
        super().__init__(message, "CANCELLED")


class DeadlineExceededError(NovaPaySDKError):
    """Exception raised when a call runs past its deadline"""

    kind = ErrorKind.DEADLINE_EXCEEDED

    def __init__(self, message: str = "call deadline exceeded"):
        super().__init__(message, "DEADLINE_EXCEEDED")
