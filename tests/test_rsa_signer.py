"""
Unit tests for RSA x-sign signing, verification and key parsing
"""

import base64

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

from novapay_sdk.canonical_json import marshal
from novapay_sdk.exceptions import (
    ErrorKind,
    KeyParseError,
    SigningError,
    UnsupportedHashAlgorithmError,
    VerificationError,
    VerificationFailure,
)
from novapay_sdk.signing import (
    HashAlgorithm,
    RSASigner,
    decode_signature_base64,
    format_private_key_pem,
    format_public_key_pem,
    load_rsa_private_key_file,
    parse_rsa_private_key_pem,
    parse_rsa_public_key_pem,
)


class TestHashAlgorithm:
    """Test hash algorithm name parsing"""

    @pytest.mark.parametrize("name", ["SHA-256", "sha256", "Sha-256", "", None])
    def test_sha256_aliases(self, name):
        assert HashAlgorithm.parse(name) is HashAlgorithm.SHA256

    @pytest.mark.parametrize("name", ["SHA-1", "sha1", " SHA1 "])
    def test_sha1_aliases(self, name):
        assert HashAlgorithm.parse(name) is HashAlgorithm.SHA1

    def test_unknown_algorithm(self):
        with pytest.raises(UnsupportedHashAlgorithmError) as exc_info:
            HashAlgorithm.parse("MD5")
        assert exc_info.value.kind is ErrorKind.CONFIG


class TestRSASigner:
    """Test signing and verification"""

    def test_end_to_end_sign_and_verify(self, private_key, public_key):
        """Sign with SHA-256, verify with the public half, fail with SHA-1"""
        signer = RSASigner(private_key=private_key, public_key=public_key, hash_algorithm="SHA-256")
        body = marshal({"id": "123", "status": "ok"})

        signature = signer.sign(body)
        signer.verify(body, signature)

        with pytest.raises(VerificationError) as exc_info:
            signer.with_hash(HashAlgorithm.SHA1).verify(body, signature)
        assert exc_info.value.reason is VerificationFailure.MISMATCH

    def test_signature_is_padded_standard_base64(self, private_key):
        signature = RSASigner(private_key=private_key).sign(b"{}")
        assert len(base64.b64decode(signature, validate=True)) == private_key.key_size // 8

    def test_flipped_byte_fails_verification(self, private_key, public_key):
        signer = RSASigner(private_key=private_key, public_key=public_key)
        body = bytearray(marshal({"amount": 100, "merchant_id": "m1"}))
        signature = signer.sign(bytes(body))

        body[5] ^= 0x01
        with pytest.raises(VerificationError) as exc_info:
            signer.verify(bytes(body), signature)
        assert exc_info.value.reason is VerificationFailure.MISMATCH

    def test_empty_body_signature_is_deterministic(self, private_key, public_key):
        signer = RSASigner(private_key=private_key, public_key=public_key, hash_algorithm=HashAlgorithm.SHA1)
        assert signer.sign(b"") == signer.sign(b"")
        signer.verify(b"", signer.sign(b""))

    def test_whitespace_and_stripped_padding_tolerated(self, private_key, public_key):
        signer = RSASigner(private_key=private_key, public_key=public_key)
        body = b'{"id":"1"}'
        signature = signer.sign(body)

        signer.verify(body, f"  {signature}\n")
        signer.verify(body, signature.rstrip("="))

    def test_sign_without_private_key(self, public_key):
        with pytest.raises(SigningError) as exc_info:
            RSASigner(public_key=public_key).sign(b"{}")
        assert exc_info.value.kind is ErrorKind.SIGN

    def test_verify_without_public_key(self, private_key):
        signer = RSASigner(private_key=private_key)
        with pytest.raises(VerificationError) as exc_info:
            signer.verify(b"{}", signer.sign(b"{}"))
        assert exc_info.value.reason is VerificationFailure.KEY_NOT_CONFIGURED

    def test_unsupported_hash_is_signing_error(self, private_key):
        with pytest.raises(SigningError):
            RSASigner(private_key=private_key, hash_algorithm="SHA-512").sign(b"{}")


class TestDecodeSignature:
    """Test x-sign decoding"""

    def test_empty_signature(self):
        with pytest.raises(VerificationError) as exc_info:
            decode_signature_base64("   ")
        assert exc_info.value.reason is VerificationFailure.EMPTY_SIGNATURE

    def test_malformed_signature(self):
        with pytest.raises(VerificationError) as exc_info:
            decode_signature_base64("not*base64!")
        assert exc_info.value.reason is VerificationFailure.MALFORMED_SIGNATURE

    def test_raw_base64(self):
        assert decode_signature_base64("YWJj") == b"abc"
        assert decode_signature_base64("YWI") == b"ab"


class TestKeyParsing:
    """Test PEM key parsing"""

    def test_private_key_pkcs8_and_pkcs1(self, private_key):
        for pkcs8 in (True, False):
            pem = format_private_key_pem(private_key, pkcs8=pkcs8)
            parsed = parse_rsa_private_key_pem(pem)
            assert parsed.private_numbers() == private_key.private_numbers()

    def test_public_key_pkix_and_pkcs1(self, public_key):
        for pkix in (True, False):
            pem = format_public_key_pem(public_key, pkix=pkix).decode('ascii')
            parsed = parse_rsa_public_key_pem(pem)
            assert parsed.public_numbers() == public_key.public_numbers()

    def test_not_pem(self):
        with pytest.raises(KeyParseError):
            parse_rsa_private_key_pem(b"garbage")

    def test_wrong_block_type(self, public_key):
        with pytest.raises(KeyParseError):
            parse_rsa_private_key_pem(format_public_key_pem(public_key))

    def test_non_rsa_key_rejected(self):
        ec_key = ec.generate_private_key(ec.SECP256R1())
        pem = ec_key.private_bytes(
            serialization.Encoding.PEM,
            serialization.PrivateFormat.PKCS8,
            serialization.NoEncryption(),
        )
        with pytest.raises(KeyParseError):
            parse_rsa_private_key_pem(pem)

    def test_load_from_file(self, tmp_path, private_key):
        path = tmp_path / "merchant.pem"
        path.write_bytes(format_private_key_pem(private_key))
        assert load_rsa_private_key_file(path).private_numbers() == private_key.private_numbers()

    def test_missing_file(self, tmp_path):
        with pytest.raises(KeyParseError):
            load_rsa_private_key_file(tmp_path / "missing.pem")
