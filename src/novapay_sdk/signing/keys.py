"""
RSA key loading for x-sign signing and verification

Private keys are accepted as PKCS#1 ("RSA PRIVATE KEY") or PKCS#8
("PRIVATE KEY") PEM blocks, public keys as PKIX ("PUBLIC KEY") or PKCS#1
("RSA PUBLIC KEY") blocks. Only the first PEM block in the input is used.
"""

import re
from pathlib import Path
from typing import Tuple, Union

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from ..exceptions import KeyParseError

PRIVATE_KEY_BLOCK_TYPES = ("RSA PRIVATE KEY", "PRIVATE KEY")
PUBLIC_KEY_BLOCK_TYPES = ("PUBLIC KEY", "RSA PUBLIC KEY")

_PEM_BLOCK = re.compile(
    rb'-----BEGIN ([A-Z0-9 ]+)-----\r?\n.*?-----END \1-----',
    re.DOTALL,
)


def _first_pem_block(pem_data: Union[str, bytes]) -> Tuple[str, bytes]:
    if isinstance(pem_data, str):
        pem_data = pem_data.encode('utf-8')
    match = _PEM_BLOCK.search(pem_data or b"")
    if match is None:
        raise KeyParseError("invalid PEM (no block)", "INVALID_PEM")
    return match.group(1).decode('ascii'), match.group(0)


def parse_rsa_private_key_pem(pem_data: Union[str, bytes]) -> rsa.RSAPrivateKey:
    """
    Parse a PEM encoded RSA private key.

    Raises:
        KeyParseError: On malformed PEM, unsupported block type or non-RSA key
    """
    block_type, block = _first_pem_block(pem_data)
    if block_type not in PRIVATE_KEY_BLOCK_TYPES:
        raise KeyParseError(
            f"unsupported private key type: {block_type!r}",
            "UNSUPPORTED_KEY_TYPE",
            {'block_type': block_type},
        )

    label = "PKCS#1" if block_type == "RSA PRIVATE KEY" else "PKCS#8"
    try:
        key = serialization.load_pem_private_key(block, password=None)
    except (ValueError, TypeError) as e:
        raise KeyParseError(f"parse {label} private key: {e}", "INVALID_PRIVATE_KEY") from e

    if not isinstance(key, rsa.RSAPrivateKey):
        raise KeyParseError(
            f"{label} key is not RSA (got {type(key).__name__})",
            "NOT_RSA_KEY",
        )
    return key


def parse_rsa_public_key_pem(pem_data: Union[str, bytes]) -> rsa.RSAPublicKey:
    """
    Parse a PEM encoded RSA public key.

    Raises:
        KeyParseError: On malformed PEM, unsupported block type or non-RSA key
    """
    block_type, block = _first_pem_block(pem_data)
    if block_type not in PUBLIC_KEY_BLOCK_TYPES:
        raise KeyParseError(
            f"unsupported public key type: {block_type!r}",
            "UNSUPPORTED_KEY_TYPE",
            {'block_type': block_type},
        )

    label = "PKIX" if block_type == "PUBLIC KEY" else "PKCS#1"
    try:
        key = serialization.load_pem_public_key(block)
    except (ValueError, TypeError) as e:
        raise KeyParseError(f"parse {label} public key: {e}", "INVALID_PUBLIC_KEY") from e

    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyParseError(
            f"{label} key is not RSA (got {type(key).__name__})",
            "NOT_RSA_KEY",
        )
    return key


def _read_key_file(path: Union[str, Path]) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise KeyParseError(f"read key file {path}: {e}", "KEY_FILE_UNREADABLE") from e


def load_rsa_private_key_file(path: Union[str, Path]) -> rsa.RSAPrivateKey:
    """Read a PEM file and parse it as an RSA private key."""
    return parse_rsa_private_key_pem(_read_key_file(path))


def load_rsa_public_key_file(path: Union[str, Path]) -> rsa.RSAPublicKey:
    """Read a PEM file and parse it as an RSA public key."""
    return parse_rsa_public_key_pem(_read_key_file(path))


def generate_rsa_key_pair(key_size: int = 2048) -> Tuple[rsa.RSAPrivateKey, rsa.RSAPublicKey]:
    """Generate a fresh RSA key pair (public exponent 65537)."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    return private_key, private_key.public_key()


def format_private_key_pem(private_key: rsa.RSAPrivateKey, pkcs8: bool = True) -> bytes:
    """Serialize an RSA private key as unencrypted PKCS#8 or PKCS#1 PEM."""
    fmt = serialization.PrivateFormat.PKCS8 if pkcs8 else serialization.PrivateFormat.TraditionalOpenSSL
    return private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=fmt,
        encryption_algorithm=serialization.NoEncryption(),
    )


def format_public_key_pem(public_key: rsa.RSAPublicKey, pkix: bool = True) -> bytes:
    """Serialize an RSA public key as PKIX or PKCS#1 PEM."""
    fmt = serialization.PublicFormat.SubjectPublicKeyInfo if pkix else serialization.PublicFormat.PKCS1
    return public_key.public_bytes(encoding=serialization.Encoding.PEM, format=fmt)
