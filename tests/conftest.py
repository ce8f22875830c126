# tests/conftest.py
import pytest

from certgen.crypto.issuer import generate_rsa_key

TEST_BITS = 1024


class MemoryStore:
    """Keeps saved artifacts in a dict keyed by (name, kind)."""

    def __init__(self):
        self.saved = {}

    def save(self, name, kind, der_bytes):
        self.saved[(name, kind)] = der_bytes


class CountingKeyGenerator:
    def __init__(self):
        self.calls = []

    def __call__(self, bits):
        self.calls.append(bits)
        return generate_rsa_key(TEST_BITS)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def keygen():
    return CountingKeyGenerator()


@pytest.fixture(scope="session")
def spare_key():
    return generate_rsa_key(TEST_BITS)
