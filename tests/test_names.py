"""
Unit tests for OpenSSL cipher name parsing.
"""

import pytest

from ciphercompat.engine import CipherSpec, parse, to_external_name


class TestParse:

    def test_base_version_mode(self):
        spec = parse("AES-256-CBC")
        assert spec.base == "AES"
        assert spec.version == "256"
        assert spec.mode == "CBC"
        assert spec.padding == "PKCS5Padding"
        assert spec.provider_transform == "AES/CBC/PKCS5Padding"

    def test_base_only_defaults_to_cbc(self):
        spec = parse("AES")
        assert spec.version is None
        assert spec.mode == "CBC"
        assert spec.provider_transform == "AES/CBC/PKCS5Padding"

    def test_base_mode(self):
        spec = parse("DES-ECB")
        assert spec.version is None
        assert spec.mode == "ECB"

    def test_unknown_mode_becomes_version(self):
        spec = parse("AES-256")
        assert spec.version == "256"
        assert spec.mode == "CBC"

    def test_extra_tokens_ignored(self):
        spec = parse("AES-128-CBC-HMAC-SHA1")
        assert (spec.base, spec.version, spec.mode) == ("AES", "128", "CBC")

    def test_blowfish_alias(self):
        spec = parse("BF-CBC")
        assert spec.base == "Blowfish"
        assert spec.provider_transform == "Blowfish/CBC/PKCS5Padding"

    def test_cast_maps_to_cast5(self):
        spec = parse("CAST-CBC")
        assert spec.base == "CAST"
        assert spec.provider_transform == "CAST5/CBC/PKCS5Padding"

    def test_des_ede3_maps_to_desede(self):
        spec = parse("DES-EDE3-CFB")
        assert spec.base == "DES"
        assert spec.version == "EDE3"
        assert spec.provider_transform == "DESede/CFB/PKCS5Padding"

    def test_des_ede_stays_des(self):
        assert parse("DES-EDE-CBC").provider_transform == "DES/CBC/PKCS5Padding"

    def test_cfb1_collapses_to_cfb(self):
        spec = parse("AES-128-CFB1")
        assert spec.mode == "CFB"
        assert spec.provider_transform == "AES/CFB/PKCS5Padding"

    def test_cfb8_kept(self):
        assert parse("AES-128-CFB8").mode == "CFB8"

    def test_lowercase_mode_canonicalised(self):
        assert parse("aes-128-cbc").provider_transform == "aes/CBC/PKCS5Padding"

    def test_rc4_collapses(self):
        spec = parse("RC4")
        assert spec.mode == "NONE"
        assert spec.padding == "NoPadding"
        assert spec.provider_transform == "RC4"

    def test_rc4_with_key_size(self):
        spec = parse("RC4-40")
        assert spec.version == "40"
        assert spec.provider_transform == "RC4"

    def test_xts_is_not_demoted(self):
        spec = parse("AES-128-XTS")
        assert spec.mode == "XTS"
        assert spec.version == "128"

    def test_real_name(self):
        assert parse("DES-EDE3-CBC").real_name == "DESede"
        assert parse("RC4").real_name == "RC4"

    @pytest.mark.parametrize("name", ["", "-", "---", "x-y-z-w", "AES-"])
    def test_parse_is_total(self, name):
        assert isinstance(parse(name), CipherSpec)

    @pytest.mark.parametrize("padding, expected", [
        (None,               "PKCS5Padding"),
        ("pkcs5padding",     "PKCS5Padding"),
        ("NoPadding",        "NoPadding"),
        ("nopadding",        "NoPadding"),
        ("0",                "NoPadding"),
        (0,                  "NoPadding"),
        (1,                  "PKCS5Padding"),
        ("ISO10126Padding",  "ISO10126Padding"),
        ("pkcs1",            "PKCS1Padding"),
        ("SSL3Padding",      "SSL3Padding"),
        ("bogus",            "PKCS5Padding"),
    ])
    def test_padding_table(self, padding, expected):
        spec = parse("AES-128-CBC", padding)
        assert spec.padding == expected
        assert spec.provider_transform == f"AES/CBC/{expected}"


class TestExternalName:

    @pytest.mark.parametrize("name, bits", [
        ("AES-128-CBC",  128),
        ("AES-192-CFB8", 192),
        ("AES-256-OFB",  256),
        ("AES-256-ECB",  256),
        ("DES-64-CBC",   64),
        ("DES-EDE3-CBC", 192),
        ("BF-128-CBC",   128),
    ])
    def test_round_trip(self, name, bits):
        spec = parse(name)
        assert to_external_name(spec.provider_transform, bits) == name

    def test_cfb1_round_trips_as_cfb(self):
        spec = parse("AES-128-CFB1")
        assert to_external_name(spec.provider_transform, 128) == "AES-128-CFB"

    def test_fallback_key_length(self):
        assert to_external_name("AES/OFB/NoPadding", 192) == "AES-192-OFB"

    def test_single_part_defaults_to_cbc(self):
        assert to_external_name("Blowfish", 128) == "BF-128-CBC"

    def test_desede(self):
        assert to_external_name("DESede/ECB/NoPadding", 168) == "DES-EDE3-ECB"

    @pytest.mark.parametrize("transform", ["AES/CBC", "A/B/C/D"])
    def test_malformed(self, transform):
        assert to_external_name(transform, 128) is None
