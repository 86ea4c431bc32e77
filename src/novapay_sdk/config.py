"""
Client configuration for NovaPay Python SDK

``ClientConfig`` collects base URLs, transport settings, keys and the hash
algorithm used for each API family. External API (Acquiring/Checkout) signs
with SHA-256 and Comfort API with SHA-1 unless configured otherwise.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Union

from cryptography.hazmat.primitives.asymmetric import rsa

from .consts import DEFAULT_ACQUIRING_BASE_URL, DEFAULT_COMFORT_BASE_URL
from .exceptions import ConfigurationError
from .http_clients.retry import DEFAULT_INITIAL_WAIT, DEFAULT_MAX_ATTEMPTS, RetryPolicy
from .http_clients.signed_client import DEFAULT_TIMEOUT
from .recorder import Recorder
from .signing import (
    HashAlgorithm,
    load_rsa_private_key_file,
    load_rsa_public_key_file,
    parse_rsa_private_key_pem,
    parse_rsa_public_key_pem,
)

ENV_PREFIX = "NOVAPAY_"

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


@dataclass
class ClientConfig:
    """
    NovaPay client configuration

    Attributes:
        acquiring_base_url: Base URL for Acquiring endpoints
        checkout_base_url: Base URL for Checkout endpoints
        comfort_base_url: Base URL for Comfort endpoints
        comfort_merchant_id: Value of the x-merchant-id header for Comfort calls
        timeout: Per-attempt HTTP timeout in seconds
        retry_attempts: Total attempts per call
        retry_wait: Initial backoff wait in seconds
        log_http_bodies: Log request/response bodies instead of sizes
        external_hash: x-sign digest for Acquiring/Checkout
        comfort_hash: x-sign digest for Comfort
        private_key: Merchant key used to sign requests
        public_key: NovaPay key used to verify callbacks
        logger: SDK logger (package logger when omitted)
        recorder: Optional traffic observer
    """
    acquiring_base_url: str = DEFAULT_ACQUIRING_BASE_URL
    checkout_base_url: str = DEFAULT_ACQUIRING_BASE_URL
    comfort_base_url: str = DEFAULT_COMFORT_BASE_URL
    comfort_merchant_id: str = ""
    timeout: float = DEFAULT_TIMEOUT
    retry_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_wait: float = DEFAULT_INITIAL_WAIT
    log_http_bodies: bool = False
    external_hash: Union[HashAlgorithm, str] = HashAlgorithm.SHA256
    comfort_hash: Union[HashAlgorithm, str] = HashAlgorithm.SHA1
    private_key: Optional[rsa.RSAPrivateKey] = None
    public_key: Optional[rsa.RSAPublicKey] = None
    logger: Optional[logging.Logger] = field(default=None, repr=False)
    recorder: Optional[Recorder] = field(default=None, repr=False)

    def __post_init__(self):
        """Validate configuration"""
        for name in ('acquiring_base_url', 'checkout_base_url', 'comfort_base_url'):
            if not getattr(self, name):
                raise ConfigurationError(f"{name.replace('_', ' ')} is empty", "INVALID_BASE_URL")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be > 0", "INVALID_TIMEOUT")
        self.comfort_merchant_id = (self.comfort_merchant_id or "").strip()
        self.external_hash = HashAlgorithm.parse(self.external_hash)
        self.comfort_hash = HashAlgorithm.parse(self.comfort_hash)
        # raises ConfigurationError on bad attempts/wait
        self.retry_policy()

    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.retry_attempts, initial_wait=self.retry_wait)

    def with_private_key_pem(self, pem_data: Union[str, bytes]) -> 'ClientConfig':
        self.private_key = parse_rsa_private_key_pem(pem_data)
        return self

    def with_private_key_file(self, path: Union[str, Path]) -> 'ClientConfig':
        self.private_key = load_rsa_private_key_file(path)
        return self

    def with_public_key_pem(self, pem_data: Union[str, bytes]) -> 'ClientConfig':
        self.public_key = parse_rsa_public_key_pem(pem_data)
        return self

    def with_public_key_file(self, path: Union[str, Path]) -> 'ClientConfig':
        self.public_key = load_rsa_public_key_file(path)
        return self

    def with_signature_hash(self, algorithm: Union[HashAlgorithm, str]) -> 'ClientConfig':
        """Use one digest algorithm for both API families."""
        parsed = HashAlgorithm.parse(algorithm)
        self.external_hash = parsed
        self.comfort_hash = parsed
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> 'ClientConfig':
        """
        Build configuration from ``NOVAPAY_*`` environment variables.

        Recognized variables: ACQUIRING_BASE_URL, CHECKOUT_BASE_URL,
        COMFORT_BASE_URL, COMFORT_MERCHANT_ID, TIMEOUT, RETRY_ATTEMPTS,
        RETRY_WAIT, LOG_HTTP_BODIES, EXTERNAL_HASH, COMFORT_HASH,
        PRIVATE_KEY_PATH, PUBLIC_KEY_PATH. Keyword overrides win over the
        environment.

        Raises:
            ConfigurationError: If a value cannot be parsed or a key file is invalid
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            value = env.get(ENV_PREFIX + name)
            if value is None or not value.strip():
                return None
            return value.strip()

        kwargs = {}
        for name in ('acquiring_base_url', 'checkout_base_url', 'comfort_base_url',
                     'comfort_merchant_id', 'external_hash', 'comfort_hash'):
            value = get(name.upper())
            if value is not None:
                kwargs[name] = value

        for name, conv in (('timeout', float), ('retry_attempts', int), ('retry_wait', float)):
            value = get(name.upper())
            if value is None:
                continue
            try:
                kwargs[name] = conv(value)
            except ValueError as e:
                raise ConfigurationError(
                    f"invalid {ENV_PREFIX}{name.upper()}: {value!r}", "INVALID_ENVIRONMENT"
                ) from e

        log_bodies = get('LOG_HTTP_BODIES')
        if log_bodies is not None:
            kwargs['log_http_bodies'] = log_bodies.lower() in _TRUE_VALUES

        kwargs.update(overrides)
        config = cls(**kwargs)

        private_key_path = get('PRIVATE_KEY_PATH')
        if private_key_path and config.private_key is None:
            config.with_private_key_file(private_key_path)
        public_key_path = get('PUBLIC_KEY_PATH')
        if public_key_path and config.public_key is None:
            config.with_public_key_file(public_key_path)
        return config
