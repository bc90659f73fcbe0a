"""
CipherCompat engine — OpenSSL-compatible cipher sessions over the
``cryptography`` provider.
"""

# ── names & sizes ────────────────────────────────────────────────
from .names  import CipherSpec, parse, to_external_name
from .sizes  import KeyIvLengths, key_iv_lengths
from .kdf    import KeyAndIv, derive_key_iv
from .digest import Digest, DigestProvider

# ── provider ─────────────────────────────────────────────────────
from .base     import CipherProvider, CipherTransform, Direction
from .provider import CryptographyProvider, get_default_provider

# ── sessions ─────────────────────────────────────────────────────
from .registry       import (
    CipherRegistry, ciphers, get_default_registry, is_supported_cipher,
)
from .session        import CipherSession
from .cipher_factory import CipherFactory, NamedBase

from .errors import (
    CipherError, UnsupportedCipher, AlreadyInitialized, NotInitialized,
    KeyTooShort, IvTooShort, KeyNotSet, InvalidSaltLength, EmptyInput,
    UnsupportedDigest, TransformNotSupported,
    ProviderInitFailure, ProviderOperationFailure,
)

__all__ = [
    # names & sizes
    "CipherSpec", "parse", "to_external_name",
    "KeyIvLengths", "key_iv_lengths",
    "KeyAndIv", "derive_key_iv",
    "Digest", "DigestProvider",
    # provider
    "CipherProvider", "CipherTransform", "Direction",
    "CryptographyProvider", "get_default_provider",
    # sessions
    "CipherRegistry", "ciphers", "get_default_registry",
    "is_supported_cipher", "CipherSession", "CipherFactory", "NamedBase",
    # errors
    "CipherError", "UnsupportedCipher", "AlreadyInitialized",
    "NotInitialized", "KeyTooShort", "IvTooShort", "KeyNotSet",
    "InvalidSaltLength", "EmptyInput", "UnsupportedDigest",
    "TransformNotSupported", "ProviderInitFailure",
    "ProviderOperationFailure",
]
