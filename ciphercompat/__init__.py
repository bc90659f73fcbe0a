"""
CipherCompat — OpenSSL cipher names, key/IV sizing and legacy key
derivation on top of the ``cryptography`` package.
"""

from .config import Settings
from .engine import (
    CipherSession, CipherFactory, CipherSpec, Direction, NamedBase,
    CipherError, ciphers, derive_key_iv, key_iv_lengths, parse,
    to_external_name,
)

__version__ = Settings.APP_VERSION

__all__ = [
    "Settings", "CipherSession", "CipherFactory", "CipherSpec",
    "Direction", "NamedBase", "CipherError", "ciphers", "derive_key_iv",
    "key_iv_lengths", "parse", "to_external_name",
]
