"""
Shared fixtures for NovaPay SDK tests
"""

import pytest

from novapay_sdk.signing import generate_rsa_key_pair


@pytest.fixture(scope="session")
def rsa_key_pair():
    """One RSA key pair for the whole run"""
    return generate_rsa_key_pair()


@pytest.fixture(scope="session")
def private_key(rsa_key_pair):
    return rsa_key_pair[0]


@pytest.fixture(scope="session")
def public_key(rsa_key_pair):
    return rsa_key_pair[1]
