"""
Tests for the cryptography-backed provider and its transforms.
"""

import warnings

import pytest
from cryptography.hazmat.decrepit.ciphers import algorithms as decrepit
from cryptography.utils import CryptographyDeprecationWarning

from ciphercompat.engine import (
    CipherSession, CryptographyProvider, Direction, TransformNotSupported,
)
from ciphercompat.engine import provider as provider_module

from conftest import require_cipher

KEY = bytes(range(16))
IV  = bytes(range(16, 32))


@pytest.fixture
def provider():
    return CryptographyProvider()


def run(transform, direction, data, key=KEY, iv=IV):
    transform.init(direction, key, iv)
    out = transform.update(data) if data else b""
    return out + transform.finalize()


class TestDiscovery:

    def test_aes_modes(self, provider):
        modes = provider.list_cipher_transforms()["AES"]
        assert {"CBC", "ECB", "CFB", "OFB", "CTR"} <= modes

    def test_listing_is_cached(self, provider):
        assert (provider.list_cipher_transforms()
                is provider.list_cipher_transforms())

    def test_max_key_length(self, provider):
        assert provider.max_allowed_key_length("AES/CBC/PKCS5Padding") >= 256
        assert provider.max_allowed_key_length("NOPE/CBC/NoPadding") is None

    def test_max_key_length_policy(self):
        capped = CryptographyProvider({"aes": 128})
        assert capped.max_allowed_key_length("AES/CBC/PKCS5Padding") == 128


class TestCreateTransform:

    def test_block_size(self, provider):
        assert provider.create_transform("AES/CBC/PKCS5Padding").block_size == 16
        assert provider.create_transform("DESede/CBC/PKCS5Padding").block_size == 8

    def test_case_insensitive_algorithm(self, provider):
        transform = provider.create_transform("aes/cbc/PKCS5Padding")
        assert transform.algorithm == "aes/cbc/PKCS5Padding"

    def test_rc4_is_stream(self, provider):
        if "RC4" not in provider.list_cipher_transforms():
            pytest.skip("RC4 not available")
        assert provider.create_transform("RC4").block_size == 0

    @pytest.mark.parametrize("name", [
        "NOPE/CBC/PKCS5Padding",
        "AES/PCBC/PKCS5Padding",
        "AES/CTS/PKCS5Padding",
        "AES/XTS/NoPadding",
        "AES/CBC/SSL3Padding",
        "AES/CBC/PKCS1Padding",
        "AES/CBC",
    ])
    def test_unsupported(self, provider, name):
        with pytest.raises(TransformNotSupported):
            provider.create_transform(name)


class TestTransform:

    def test_nist_cbc_vector(self, provider):
        # NIST SP 800-38A F.2.1
        key = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
        iv  = bytes.fromhex("000102030405060708090a0b0c0d0e0f")
        pt  = bytes.fromhex("6bc1bee22e409f96e93d7e117393172a")
        transform = provider.create_transform("AES/CBC/NoPadding")
        ct = run(transform, Direction.ENCRYPT, pt, key, iv)
        assert ct.hex() == "7649abac8119b246cee98e9b12e9197d"

    def test_pkcs5_round_trip(self, provider):
        transform = provider.create_transform("AES/CBC/PKCS5Padding")
        ct = run(transform, Direction.ENCRYPT, b"x" * 20)
        assert len(ct) == 32
        assert run(transform, Direction.DECRYPT, ct) == b"x" * 20

    def test_iso10126_round_trip(self, provider):
        transform = provider.create_transform("AES/CBC/ISO10126Padding")
        ct = run(transform, Direction.ENCRYPT, b"y" * 21)
        assert len(ct) == 32
        assert run(transform, Direction.DECRYPT, ct) == b"y" * 21

    def test_update_buffers_partial_blocks(self, provider):
        transform = provider.create_transform("AES/CBC/PKCS5Padding")
        transform.init(Direction.ENCRYPT, KEY, IV)
        assert len(transform.update(b"a" * 20)) == 16

    def test_finalize_rearms(self, provider):
        transform = provider.create_transform("AES/CBC/PKCS5Padding")
        first = run(transform, Direction.ENCRYPT, b"hello")
        second = transform.update(b"hello") + transform.finalize()
        assert first == second

    def test_unaligned_without_padding_fails(self, provider):
        transform = provider.create_transform("AES/CBC/NoPadding")
        transform.init(Direction.ENCRYPT, KEY, IV)
        transform.update(b"z" * 5)
        with pytest.raises(ValueError):
            transform.finalize()

    def test_decrypt_finalize_without_input(self, provider):
        transform = provider.create_transform("AES/CBC/PKCS5Padding")
        transform.init(Direction.DECRYPT, KEY, IV)
        assert transform.finalize() == b""

    def test_stream_mode_has_no_padding(self, provider):
        transform = provider.create_transform("AES/CFB/PKCS5Padding")
        ct = run(transform, Direction.ENCRYPT, b"abc")
        assert len(ct) == 3
        assert run(transform, Direction.DECRYPT, ct) == b"abc"

    def test_bad_key_size(self, provider):
        transform = provider.create_transform("AES/CBC/PKCS5Padding")
        with pytest.raises(ValueError):
            transform.init(Direction.ENCRYPT, b"short", IV)

    def test_ecb_ignores_iv(self, provider):
        transform = provider.create_transform("AES/ECB/NoPadding")
        a = run(transform, Direction.ENCRYPT, b"q" * 16, iv=None)
        b = run(transform, Direction.ENCRYPT, b"q" * 16, iv=IV)
        assert a == b


class TestLibraryLocations:

    def test_moved_algorithms_come_from_decrepit(self):
        for key, name in (("CAMELLIA", "Camellia"), ("SEED", "SEED"),
                          ("DESEDE", "TripleDES"), ("RC4", "ARC4")):
            expected = getattr(decrepit, name, None)
            if expected is None:
                continue
            assert provider_module._ALGORITHMS[key][1] is expected

    @pytest.mark.parametrize("name", [
        "DES-CBC", "DES-EDE3-CBC", "AES-128-CFB8", "AES-128-OFB",
        "AES-128-CFB", "CAMELLIA-128-ECB",
    ])
    def test_no_deprecation_warnings(self, name):
        require_cipher(name)
        with warnings.catch_warnings():
            warnings.simplefilter("error", CryptographyDeprecationWarning)
            enc = CipherSession(name).encrypt()
            key = bytes(range(enc.key_len))
            enc.key = key
            ct = enc.update(b"sixteen byte msg") + enc.final()

            dec = CipherSession(name).decrypt()
            dec.key = key
            assert dec.update(ct) + dec.final() == b"sixteen byte msg"

    def test_single_des_vector(self, provider):
        key = bytes.fromhex("133457799bbcdff1")
        pt  = bytes.fromhex("0123456789abcdef")
        with warnings.catch_warnings():
            warnings.simplefilter("error", CryptographyDeprecationWarning)
            transform = provider.create_transform("DES/ECB/NoPadding")
            ct = run(transform, Direction.ENCRYPT, pt, key, None)
        assert ct.hex() == "85e813540f0ab405"
