"""
Unit tests for client configuration
"""

import pytest

from novapay_sdk.config import ClientConfig
from novapay_sdk.consts import DEFAULT_ACQUIRING_BASE_URL, DEFAULT_COMFORT_BASE_URL
from novapay_sdk.exceptions import ConfigurationError, KeyParseError, UnsupportedHashAlgorithmError
from novapay_sdk.signing import HashAlgorithm, format_private_key_pem, format_public_key_pem


class TestClientConfig:
    """Test configuration defaults and validation"""

    def test_defaults(self):
        config = ClientConfig()
        assert config.acquiring_base_url == DEFAULT_ACQUIRING_BASE_URL
        assert config.checkout_base_url == DEFAULT_ACQUIRING_BASE_URL
        assert config.comfort_base_url == DEFAULT_COMFORT_BASE_URL
        assert config.timeout == 30.0
        assert config.retry_attempts == 1
        assert config.retry_wait == 0.3
        assert config.log_http_bodies is False
        assert config.external_hash is HashAlgorithm.SHA256
        assert config.comfort_hash is HashAlgorithm.SHA1
        assert config.private_key is None

    def test_validation(self):
        with pytest.raises(ConfigurationError, match="acquiring base url is empty"):
            ClientConfig(acquiring_base_url="")
        with pytest.raises(ConfigurationError, match="timeout must be > 0"):
            ClientConfig(timeout=0)
        with pytest.raises(ConfigurationError, match="retry attempts must be > 0"):
            ClientConfig(retry_attempts=0)
        with pytest.raises(ConfigurationError, match="retry wait must be > 0"):
            ClientConfig(retry_wait=-1)
        with pytest.raises(UnsupportedHashAlgorithmError):
            ClientConfig(comfort_hash="MD5")

    def test_hash_names_normalized(self):
        config = ClientConfig(external_hash="sha1", comfort_hash="")
        assert config.external_hash is HashAlgorithm.SHA1
        assert config.comfort_hash is HashAlgorithm.SHA256

    def test_with_signature_hash(self):
        config = ClientConfig().with_signature_hash("SHA-256")
        assert config.external_hash is HashAlgorithm.SHA256
        assert config.comfort_hash is HashAlgorithm.SHA256

    def test_key_helpers(self, tmp_path, private_key, public_key):
        pub_path = tmp_path / "novapay.pub.pem"
        pub_path.write_bytes(format_public_key_pem(public_key))

        config = ClientConfig().with_private_key_pem(format_private_key_pem(private_key, pkcs8=False))
        config.with_public_key_file(pub_path)

        assert config.private_key.private_numbers() == private_key.private_numbers()
        assert config.public_key.public_numbers() == public_key.public_numbers()

        with pytest.raises(KeyParseError):
            config.with_public_key_pem("-----BEGIN CERTIFICATE-----\nAAAA\n-----END CERTIFICATE-----")


class TestFromEnv:
    """Test loading configuration from NOVAPAY_* variables"""

    def test_from_env(self, tmp_path, private_key):
        key_path = tmp_path / "merchant.pem"
        key_path.write_bytes(format_private_key_pem(private_key))
        env = {
            'NOVAPAY_ACQUIRING_BASE_URL': "https://api-ecom.novapay.ua",
            'NOVAPAY_COMFORT_MERCHANT_ID': "123",
            'NOVAPAY_TIMEOUT': "12.5",
            'NOVAPAY_RETRY_ATTEMPTS': "3",
            'NOVAPAY_RETRY_WAIT': "0.5",
            'NOVAPAY_LOG_HTTP_BODIES': "true",
            'NOVAPAY_COMFORT_HASH': "SHA-256",
            'NOVAPAY_PRIVATE_KEY_PATH': str(key_path),
            'NOVAPAY_CHECKOUT_BASE_URL': "   ",
        }

        config = ClientConfig.from_env(env)

        assert config.acquiring_base_url == "https://api-ecom.novapay.ua"
        assert config.checkout_base_url == DEFAULT_ACQUIRING_BASE_URL
        assert config.comfort_merchant_id == "123"
        assert config.timeout == 12.5
        assert config.retry_attempts == 3
        assert config.retry_wait == 0.5
        assert config.log_http_bodies is True
        assert config.comfort_hash is HashAlgorithm.SHA256
        assert config.private_key.private_numbers() == private_key.private_numbers()

    def test_overrides_win(self):
        config = ClientConfig.from_env({'NOVAPAY_TIMEOUT': "5"}, timeout=7.0)
        assert config.timeout == 7.0

    def test_invalid_number(self):
        with pytest.raises(ConfigurationError, match="NOVAPAY_RETRY_ATTEMPTS"):
            ClientConfig.from_env({'NOVAPAY_RETRY_ATTEMPTS': "many"})
