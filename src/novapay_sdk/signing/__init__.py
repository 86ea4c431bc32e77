"""
NovaPay Python SDK - Request Signing Module

RSA PKCS#1 v1.5 x-sign signatures over exact request/callback body bytes.
"""

from .types import (
    HashAlgorithm,
    Signer,
    Verifier,
    digest,
)

from .rsa_signer import (
    RSASigner,
    decode_signature_base64,
)

from .keys import (
    PRIVATE_KEY_BLOCK_TYPES,
    PUBLIC_KEY_BLOCK_TYPES,
    parse_rsa_private_key_pem,
    parse_rsa_public_key_pem,
    load_rsa_private_key_file,
    load_rsa_public_key_file,
    generate_rsa_key_pair,
    format_private_key_pem,
    format_public_key_pem,
)

# Public API exports
__all__ = [
    'HashAlgorithm',
    'Signer',
    'Verifier',
    'digest',
    'RSASigner',
    'decode_signature_base64',
    'PRIVATE_KEY_BLOCK_TYPES',
    'PUBLIC_KEY_BLOCK_TYPES',
    'parse_rsa_private_key_pem',
    'parse_rsa_public_key_pem',
    'load_rsa_private_key_file',
    'load_rsa_public_key_file',
    'generate_rsa_key_pair',
    'format_private_key_pem',
    'format_public_key_pem',
]
