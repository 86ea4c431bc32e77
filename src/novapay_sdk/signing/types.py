"""
Type definitions for x-sign request signing

NovaPay External API (Acquiring/Checkout) signs with SHA-256, the Comfort API
with SHA-1. Both use RSA PKCS#1 v1.5.
"""

from enum import Enum
from typing import Any, Protocol, Tuple, Union, runtime_checkable

from cryptography.hazmat.primitives import hashes

from ..exceptions import UnsupportedHashAlgorithmError


class HashAlgorithm(str, Enum):
    """Digest algorithms supported for x-sign signatures"""
    SHA256 = "SHA-256"
    SHA1 = "SHA-1"

    @classmethod
    def parse(cls, value: Union['HashAlgorithm', str, None]) -> 'HashAlgorithm':
        """
        Resolve a hash algorithm name, accepting common aliases.

        An empty name selects SHA-256.

        Raises:
            UnsupportedHashAlgorithmError: If the name is not recognized
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.SHA256
        if not isinstance(value, str):
            raise UnsupportedHashAlgorithmError(value)

        normalized = value.strip().upper()
        if normalized in ("", "SHA-256", "SHA256"):
            return cls.SHA256
        if normalized in ("SHA-1", "SHA1"):
            return cls.SHA1
        raise UnsupportedHashAlgorithmError(value)


_HASHES = {
    HashAlgorithm.SHA256: hashes.SHA256,
    HashAlgorithm.SHA1: hashes.SHA1,
}


def digest(algorithm: Union[HashAlgorithm, str, None], data: bytes) -> Tuple[hashes.HashAlgorithm, bytes]:
    """
    Compute the message digest used as input to the RSA primitive.

    Returns:
        Tuple of (cryptography hash instance, digest bytes)
    """
    algo = _HASHES[HashAlgorithm.parse(algorithm)]()
    h = hashes.Hash(algo)
    h.update(data)
    return algo, h.finalize()


@runtime_checkable
class Signer(Protocol):
    """Produces the x-sign header value for a request body"""

    def sign(self, body: bytes) -> str:
        ...


@runtime_checkable
class Verifier(Protocol):
    """Checks an x-sign value against a received body"""

    def verify(self, body: bytes, signature: str) -> Any:
        ...
