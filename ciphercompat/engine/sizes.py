"""
Key and IV length rules for OpenSSL cipher names.

Lengths come from the name alone; the provider is consulted only for
the largest key its policy allows.
"""

import logging
from typing import NamedTuple

from .base  import CipherProvider
from .names import CipherSpec

logger = logging.getLogger("CipherCompat.Sizes")

# Bases whose version token is a key size in bits ("AES-256").
_SIZED_BASES = frozenset({"AES", "RC2", "RC4"})

DEFAULT_KEY_LEN = 16


class KeyIvLengths(NamedTuple):
    key_len: int
    iv_len:  int


def key_iv_lengths(spec: CipherSpec,
                   provider: CipherProvider | None = None) -> KeyIvLengths:
    """
    Return ``(key_len, iv_len)`` in bytes for *spec*.

    Rules, first match wins:

    1. AES / RC2 / RC4 with a numeric version → version // 8
    2. DES → 24 for EDE3, else 8; IV 8
    3. RC4 → 16; IV 0
    4. anything else → 16, clamped to the provider's maximum

    Only plain ASCII digits count as a key size; "AES-2_56" falls back
    to the default.

    IV defaults to 16 for AES, 0 for RC4 and 8 for everything else.
    RC4 is a stream cipher, so sized names such as "RC4-40" get no IV
    either, although the general rule would give them 8.
    """
    base    = spec.base.upper()
    key_len = -1
    iv_len  = -1

    version = spec.version
    if (base in _SIZED_BASES and version is not None
            and version.isascii() and version.isdigit()):
        key_len = int(version) // 8

    if key_len == -1:
        if base == "DES":
            iv_len  = 8
            key_len = 24 if (spec.version or "").upper() == "EDE3" else 8
        elif base == "RC4":
            iv_len  = 0
            key_len = DEFAULT_KEY_LEN
        else:
            key_len = DEFAULT_KEY_LEN
            max_len = _max_key_len(spec, provider)
            if max_len is not None and max_len < key_len:
                key_len = max_len

    if iv_len == -1:
        if base == "AES":
            iv_len = 16
        elif base == "RC4":
            iv_len = 0
        else:
            iv_len = 8

    return KeyIvLengths(key_len, iv_len)


def _max_key_len(spec: CipherSpec,
                 provider: CipherProvider | None) -> int | None:
    if provider is None:
        return None
    try:
        bits = provider.max_allowed_key_length(spec.provider_transform)
    except Exception as exc:
        logger.debug("max key length query failed for %s: %s",
                     spec.provider_transform, exc)
        return None
    if bits is None or bits < 0:
        return None
    return bits // 8
