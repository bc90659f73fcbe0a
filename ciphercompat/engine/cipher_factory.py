"""
CipherFactory — session creation and discovery.

Usage:
    cipher = CipherFactory.create("AES-256-CBC")
    cipher = CipherFactory.named(NamedBase.BF, "CBC")     # "BF-CBC"
    cipher = CipherFactory.aes(256, "CFB")                # "AES-256-CFB"

    for name in CipherFactory.list_ciphers():
        print(CipherFactory.get_info(name))
"""

import logging
from enum import Enum

from .registry import CipherRegistry, get_default_registry
from .session  import CipherSession

logger = logging.getLogger("CipherCompat.CipherFactory")


class NamedBase(str, Enum):
    """Cipher families that can be built from a base plus arguments."""
    AES   = "AES"
    CAST5 = "CAST5"
    BF    = "BF"
    DES   = "DES"
    IDEA  = "IDEA"
    RC2   = "RC2"
    RC4   = "RC4"
    RC5   = "RC5"


AES_KEY_BITS = (128, 192, 256)


def named_cipher_name(base: NamedBase | str, *args) -> str:
    """``("AES", 128, "CBC")`` → ``"AES-128-CBC"``."""
    if not isinstance(base, NamedBase):
        base = NamedBase(base.upper())
    return "-".join([base.value, *(str(a) for a in args)])


def aes_cipher_name(key_bits: int | str, mode: str | None = None) -> str:
    """``(256, None)`` → ``"AES-256-CBC"``."""
    if int(key_bits) not in AES_KEY_BITS:
        raise ValueError(
            f"AES key size must be one of {AES_KEY_BITS}, got {key_bits}"
        )
    return f"AES-{int(key_bits)}-{mode or 'CBC'}"


class CipherFactory:
    """
    Create sessions by name and report what the provider supports.
    """

    # ── factory methods ──────────────────────────────────────────

    @classmethod
    def create(cls, cipher_name: str, padding=None,
               registry: CipherRegistry | None = None) -> CipherSession:
        """
        Create a session for *cipher_name*.

        Parameters
        ----------
        cipher_name : str
            OpenSSL cipher name, e.g. ``"DES-EDE3-CBC"``.
        padding : str, optional
            Padding token; PKCS5 when omitted.
        registry : CipherRegistry, optional
            Defaults to the process-wide registry.
        """
        session = CipherSession(cipher_name, registry=registry)
        if padding is not None:
            session.padding = padding
        logger.debug(
            "Created session: %s (key=%d bytes, iv=%d bytes)",
            session.name, session.key_len, session.iv_len,
        )
        return session

    @classmethod
    def named(cls, base: NamedBase | str, *args,
              registry: CipherRegistry | None = None) -> CipherSession:
        """Build ``BASE-arg1-arg2…`` and create it."""
        return cls.create(named_cipher_name(base, *args), registry=registry)

    @classmethod
    def aes(cls, key_bits: int | str, mode: str | None = None,
            registry: CipherRegistry | None = None) -> CipherSession:
        """AES128 / AES192 / AES256 shortcut; mode defaults to CBC."""
        return cls.create(aes_cipher_name(key_bits, mode), registry=registry)

    # ── discovery ────────────────────────────────────────────────

    @classmethod
    def list_ciphers(cls, registry: CipherRegistry | None = None) -> list[str]:
        """Supported names, uppercase, in registry order."""
        return list((registry or get_default_registry()).supported())

    @classmethod
    def ciphers(cls, registry: CipherRegistry | None = None) -> list[str]:
        """Supported names in both upper- and lowercase."""
        return (registry or get_default_registry()).ciphers()

    @classmethod
    def is_available(cls, cipher_name: str,
                     registry: CipherRegistry | None = None) -> bool:
        return (registry or get_default_registry()).is_supported(cipher_name)

    @classmethod
    def get_info(cls, cipher_name: str,
                 registry: CipherRegistry | None = None) -> dict:
        """Return metadata for a cipher."""
        session = CipherSession(cipher_name, registry=registry)
        return {
            "name":       session.name,
            "key_bits":   session.key_len * 8,
            "iv_bytes":   session.iv_len,
            "block_size": session.block_size(),
            "stream":     session.is_stream_cipher,
            "transform":  session.algorithm,
        }

    @classmethod
    def get_all_info(cls, registry: CipherRegistry | None = None) -> list[dict]:
        return [
            cls.get_info(name, registry=registry)
            for name in cls.list_ciphers(registry=registry)
        ]
