"""
Registry of OpenSSL cipher names the provider can serve.

The candidate list is fixed (the names OpenSSL itself ships); each
candidate is kept if the provider reports its algorithm/mode pair, or,
failing that, if the provider can actually build the transform.  The
result is computed once per registry and never changes afterwards.
"""

import logging
import threading

from .base     import CipherProvider
from .errors   import CipherError
from .names    import parse
from .provider import get_default_provider

logger = logging.getLogger("CipherCompat.Registry")

CANDIDATE_BASES = (
    "AES-128", "AES-192", "AES-256",
    "BF", "DES", "DES-EDE", "DES-EDE3",
    "RC2", "CAST5",
    "Camellia-128", "Camellia-192", "Camellia-256",
    "SEED",
)

CANDIDATE_SUFFIXES = ("", "-CBC", "-CFB", "-CFB1", "-CFB8", "-ECB", "-OFB")

CANDIDATE_OTHERS = (
    "AES128", "AES192", "AES256",
    "BLOWFISH",
    "RC2-40-CBC", "RC2-64-CBC",
    "RC4", "RC4-40",
    "CAST", "CAST-CBC",
)


def candidate_names() -> list[str]:
    names = [base + suffix
             for base in CANDIDATE_BASES
             for suffix in CANDIDATE_SUFFIXES]
    names.extend(CANDIDATE_OTHERS)
    return names


class CipherRegistry:
    """Lazily computed, immutable set of supported cipher names."""

    def __init__(self, provider: CipherProvider):
        self._provider    = provider
        self._names       = ()
        self._initialized = False
        self._lock        = threading.Lock()

    @property
    def provider(self) -> CipherProvider:
        return self._provider

    def supported(self) -> tuple[str, ...]:
        """Uppercased supported names, in candidate order."""
        if self._initialized:
            return self._names
        with self._lock:
            if not self._initialized:
                self._names = self._compute()
                self._initialized = True
        return self._names

    def is_supported(self, name: str) -> bool:
        return name.upper() in self.supported()

    def ciphers(self) -> list[str]:
        """Every supported name followed by its lowercase form."""
        result = []
        for name in self.supported():
            result.append(name)
            result.append(name.lower())
        return result

    # ── internals ────────────────────────────────────────────────
    def _compute(self) -> tuple[str, ...]:
        try:
            transforms = self._provider.list_cipher_transforms()
        except Exception as exc:
            logger.warning("Provider transform listing failed: %s", exc)
            transforms = {}
        by_base = {name.upper(): modes for name, modes in transforms.items()}

        names = []
        for candidate in candidate_names():
            if self._check(candidate, by_base):
                upper = candidate.upper()
                if upper not in names:
                    names.append(upper)
        logger.info("%d cipher names supported", len(names))
        return tuple(names)

    def _check(self, candidate: str,
               by_base: dict[str, frozenset[str]]) -> bool:
        spec  = parse(candidate)
        modes = by_base.get(spec.base.upper())
        if modes is not None and spec.mode in modes:
            # key size is not verified here, e.g. RC2-40
            return True
        logger.debug("%s: probing transform %s",
                     candidate, spec.provider_transform)
        try:
            self._provider.create_transform(spec.provider_transform)
        except CipherError:
            return False
        return True


_default_registry: CipherRegistry | None = None
_default_lock = threading.Lock()


def get_default_registry() -> CipherRegistry:
    """Process-wide registry over the default provider."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                _default_registry = CipherRegistry(get_default_provider())
    return _default_registry


def ciphers() -> list[str]:
    return get_default_registry().ciphers()


def is_supported_cipher(name: str) -> bool:
    return get_default_registry().is_supported(name)
