"""
RSA PKCS#1 v1.5 signer for the NovaPay x-sign header

The signer is shared read-only between concurrent calls. A missing key is only
reported when the matching operation is used, so a verify-only client can be
built without a private key.
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Optional, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import padding, rsa
from cryptography.hazmat.primitives.asymmetric.utils import Prehashed

from ..exceptions import (
    SigningError,
    UnsupportedHashAlgorithmError,
    VerificationError,
    VerificationFailure,
)
from .types import HashAlgorithm, digest


def decode_signature_base64(signature: str) -> bytes:
    """
    Decode an x-sign value.

    Surrounding whitespace is trimmed. Standard (padded) base64 is tried first,
    then unpadded base64, since some proxies strip trailing ``=``.

    Raises:
        VerificationError: With reason EMPTY_SIGNATURE or MALFORMED_SIGNATURE
    """
    value = (signature or "").strip()
    if not value:
        raise VerificationError("signature: empty signature", VerificationFailure.EMPTY_SIGNATURE)

    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        std_err = e

    try:
        if '=' in value or len(value) % 4 == 1:
            raise binascii.Error("invalid unpadded base64 length or padding")
        return base64.b64decode(value + '=' * (-len(value) % 4), validate=True)
    except (binascii.Error, ValueError) as raw_err:
        raise VerificationError(
            f"signature: invalid base64 signature: std={std_err}; raw={raw_err}",
            VerificationFailure.MALFORMED_SIGNATURE,
            {'std_error': str(std_err), 'raw_error': str(raw_err)},
        ) from raw_err


@dataclass(frozen=True)
class RSASigner:
    """
    Signs and verifies x-sign values with RSA PKCS#1 v1.5.

    Attributes:
        private_key: RSA private key used by ``sign`` (optional)
        public_key: RSA public key used by ``verify`` (optional)
        hash_algorithm: Digest algorithm name or ``HashAlgorithm``
    """
    private_key: Optional[rsa.RSAPrivateKey] = None
    public_key: Optional[rsa.RSAPublicKey] = None
    hash_algorithm: Union[HashAlgorithm, str] = HashAlgorithm.SHA256

    def sign(self, body: bytes) -> str:
        """
        Sign the exact body bytes.

        Returns:
            str: Standard base64 (padded) signature

        Raises:
            SigningError: If no private key is configured, the hash algorithm
                is unsupported, or the RSA primitive fails
        """
        if self.private_key is None:
            raise SigningError("signature: private key is not configured", "PRIVATE_KEY_NOT_CONFIGURED")
        try:
            algo, sum_ = digest(self.hash_algorithm, body)
        except UnsupportedHashAlgorithmError as e:
            raise SigningError(str(e), e.error_code, e.details) from e

        try:
            sig = self.private_key.sign(sum_, padding.PKCS1v15(), Prehashed(algo))
        except (ValueError, TypeError) as e:
            raise SigningError(f"signature: rsa sign: {e}", "RSA_SIGN_FAILED") from e
        return base64.b64encode(sig).decode('ascii')

    def verify(self, body: bytes, signature: str) -> None:
        """
        Verify an x-sign value against the received body bytes.

        Raises:
            VerificationError: ``reason`` tells a missing key, empty input,
                malformed base64 and a cryptographic mismatch apart
        """
        if self.public_key is None:
            raise VerificationError(
                "signature: public key is not configured",
                VerificationFailure.KEY_NOT_CONFIGURED,
            )
        sig = decode_signature_base64(signature)
        try:
            algo, sum_ = digest(self.hash_algorithm, body)
        except UnsupportedHashAlgorithmError as e:
            raise VerificationError(str(e), VerificationFailure.UNSUPPORTED_ALGORITHM, e.details) from e

        try:
            self.public_key.verify(sig, sum_, padding.PKCS1v15(), Prehashed(algo))
        except InvalidSignature as e:
            raise VerificationError("signature: verify failed", VerificationFailure.MISMATCH) from e

    def with_hash(self, hash_algorithm: Union[HashAlgorithm, str]) -> 'RSASigner':
        """Copy of this signer using another digest algorithm."""
        return RSASigner(self.private_key, self.public_key, hash_algorithm)
