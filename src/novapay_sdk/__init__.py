"""
NovaPay Python SDK
Signed client for the NovaPay Acquiring, Checkout and Comfort APIs
"""

import logging

from .version import __version__
from .client import (
    NovaPayClient,
    AcquiringService,
    CheckoutService,
    ComfortService,
    create_client,
    create_client_with_recorder,
    join_url,
)
from .config import ClientConfig
from .canonical_json import (
    encode_body,
    marshal,
    marshal_indent,
    pretty_json,
)
from .exceptions import (
    ErrorKind,
    VerificationFailure,
    NovaPaySDKError,
    ConfigurationError,
    UnsupportedHashAlgorithmError,
    KeyParseError,
    FieldError,
    ValidationError,
    EncodeError,
    SigningError,
    VerificationError,
    TransportError,
    HTTPStatusError,
    APIError,
    DecodeError,
    CancelledError,
    DeadlineExceededError,
)
from .http_clients import (
    CallContext,
    RetryPolicy,
    SignedHttpClient,
    HttpResult,
    is_retryable,
)
from .log import (
    LogLevel,
    create_default_logger,
    create_nop_logger,
)
from .recorder import (
    Recorder,
    RecordedEvent,
    NopRecorder,
    LoggingRecorder,
    MemoryRecorder,
)
from .run_options import RunOptions, dry_run
from .signing import (
    HashAlgorithm,
    RSASigner,
    parse_rsa_private_key_pem,
    parse_rsa_public_key_pem,
    load_rsa_private_key_file,
    load_rsa_public_key_file,
    generate_rsa_key_pair,
)
from . import models

# Library logging stays silent unless the application configures handlers
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    '__version__',
    'NovaPayClient',
    'AcquiringService',
    'CheckoutService',
    'ComfortService',
    'create_client',
    'create_client_with_recorder',
    'join_url',
    'ClientConfig',
    'encode_body',
    'marshal',
    'marshal_indent',
    'pretty_json',
    'ErrorKind',
    'VerificationFailure',
    'NovaPaySDKError',
    'ConfigurationError',
    'UnsupportedHashAlgorithmError',
    'KeyParseError',
    'FieldError',
    'ValidationError',
    'EncodeError',
    'SigningError',
    'VerificationError',
    'TransportError',
    'HTTPStatusError',
    'APIError',
    'DecodeError',
    'CancelledError',
    'DeadlineExceededError',
    'CallContext',
    'RetryPolicy',
    'SignedHttpClient',
    'HttpResult',
    'is_retryable',
    'LogLevel',
    'create_default_logger',
    'create_nop_logger',
    'Recorder',
    'RecordedEvent',
    'NopRecorder',
    'LoggingRecorder',
    'MemoryRecorder',
    'RunOptions',
    'dry_run',
    'HashAlgorithm',
    'RSASigner',
    'parse_rsa_private_key_pem',
    'parse_rsa_public_key_pem',
    'load_rsa_private_key_file',
    'load_rsa_public_key_file',
    'generate_rsa_key_pair',
    'models',
]
