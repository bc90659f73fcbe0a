# CipherCompat test configuration
# Shared fixtures and an in-memory fake provider

import pytest

from ciphercompat.engine import (
    CipherFactory, CipherProvider, CipherRegistry, CipherTransform,
    TransformNotSupported,
)


class FakeTransform(CipherTransform):
    """Identity 'cipher' that records how the session drives it."""

    def __init__(self, name: str, block: int):
        self._name          = name
        self._block         = block
        self.inits          = []
        self.updates        = []
        self.finalize_calls = 0
        self.final_output   = b"\xaa" * block

    def init(self, direction, key, iv=None):
        self.inits.append((direction, bytes(key), iv))

    def update(self, data):
        self.updates.append(bytes(data))
        return bytes(data)

    def finalize(self):
        self.finalize_calls += 1
        return self.final_output

    @property
    def block_size(self):
        return self._block

    @property
    def algorithm(self):
        return self._name


class FakeProvider(CipherProvider):

    BLOCK_SIZES = {"RC4": 0, "DES": 8, "DESEDE": 8, "BLOWFISH": 8}

    def __init__(self, transforms=None, creatable=None, max_key_bits=None,
                 fail_listing=False, fail_max_key=False):
        if transforms is None:
            transforms = {
                "AES":      frozenset({"CBC", "ECB", "CFB", "OFB"}),
                "DES":      frozenset({"CBC", "ECB"}),
                "Blowfish": frozenset({"CBC"}),
                "RC4":      frozenset({"NONE"}),
            }
        if creatable is None:
            creatable = {"AES", "DES", "DESEDE", "BLOWFISH", "RC4"}
        self.transforms   = transforms
        self.creatable    = {c.upper() for c in creatable}
        self.max_key_bits = max_key_bits
        self.fail_listing = fail_listing
        self.fail_max_key = fail_max_key
        self.list_calls   = 0
        self.created      = []

    def list_cipher_transforms(self):
        self.list_calls += 1
        if self.fail_listing:
            raise RuntimeError("listing unavailable")
        return self.transforms

    def create_transform(self, name):
        algorithm = name.split("/")[0].upper()
        if algorithm not in self.creatable:
            raise TransformNotSupported(f"unsupported ({name})")
        transform = FakeTransform(name, self.BLOCK_SIZES.get(algorithm, 16))
        self.created.append(transform)
        return transform

    def max_allowed_key_length(self, name):
        if self.fail_max_key:
            raise RuntimeError("policy unavailable")
        return self.max_key_bits


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def fake_registry(fake_provider):
    return CipherRegistry(fake_provider)


@pytest.fixture
def aes_key():
    return bytes(range(16))


@pytest.fixture
def aes_iv():
    return bytes(range(16, 32))


@pytest.fixture
def plaintext():
    return b"The quick brown fox jumps over the lazy dog" * 3


def require_cipher(name: str) -> None:
    if not CipherFactory.is_available(name):
        pytest.skip(f"{name} not supported by this OpenSSL build")
