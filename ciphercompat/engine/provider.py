"""
Cipher provider backed by the ``cryptography`` package.

Transforms are addressed with JCE-style names:

    "AES/CBC/PKCS5Padding"
    "DESede/CFB/NoPadding"
    "Blowfish/ECB/ISO10126Padding"
    "RC4"

Legacy algorithms (3DES, Blowfish, CAST5, IDEA, SEED, RC2, RC4) come
from ``cryptography.hazmat.decrepit``.  Whether the linked OpenSSL
actually implements an algorithm/mode pair is found out by probing the
backend once per provider.
"""

import os
import logging
import threading

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.decrepit.ciphers import algorithms as decrepit

try:
    from cryptography.hazmat.decrepit.ciphers import modes as decrepit_modes
except ImportError:
    # older releases keep CFB, CFB8 and OFB in primitives
    decrepit_modes = modes

from ..config import Settings
from .base    import CipherProvider, CipherTransform, Direction
from .errors  import TransformNotSupported

logger = logging.getLogger("CipherCompat.Provider")


def _decrepit_algorithm(name: str) -> type | None:
    # moved names are looked up in decrepit first so the deprecated
    # primitives alias is never touched
    cls = getattr(decrepit, name, None)
    if cls is None:
        cls = getattr(algorithms, name, None)
    return cls


# ── algorithm table ──────────────────────────────────────────────
# uppercase JCE name -> (canonical name, algorithm class, probe key bytes)
_TRIPLE_DES = getattr(decrepit, "TripleDES", None)

_ALGORITHMS: dict[str, tuple[str, type | None, int]] = {
    "AES":      ("AES",      algorithms.AES,                  16),
    "CAMELLIA": ("Camellia", _decrepit_algorithm("Camellia"), 16),
    "SEED":     ("SEED",     _decrepit_algorithm("SEED"),     16),
    "DESEDE":   ("DESede",   _TRIPLE_DES,                     24),
    "DES":      ("DES",      _TRIPLE_DES,                     8),
    "BLOWFISH": ("Blowfish", _decrepit_algorithm("Blowfish"), 16),
    "CAST5":    ("CAST5",    _decrepit_algorithm("CAST5"),    16),
    "IDEA":     ("IDEA",     _decrepit_algorithm("IDEA"),     16),
    "RC2":      ("RC2",      _decrepit_algorithm("RC2"),      16),
    "RC4":      ("RC4",      _decrepit_algorithm("ARC4"),     16),
}

for _name, (_, _cls, _) in _ALGORITHMS.items():
    if _cls is None:
        logger.warning(
            "%s not available in this cryptography version", _name
        )

_IV_MODES: dict[str, type] = {
    "CBC":  modes.CBC,
    "CFB":  decrepit_modes.CFB,
    "CFB8": decrepit_modes.CFB8,
    "OFB":  decrepit_modes.OFB,
    "CTR":  modes.CTR,
}

BLOCK_MODE_NAMES = ("CBC", "CFB", "CFB8", "OFB", "CTR", "ECB")

# Modes whose input must be a whole number of blocks.
_ALIGNED_MODES = frozenset({"CBC", "ECB"})

SUPPORTED_PADDINGS: dict[str, str] = {
    "PKCS5PADDING":    "PKCS5Padding",
    "ISO10126PADDING": "ISO10126Padding",
    "NOPADDING":       "NoPadding",
}


def _block_bytes(algorithm_cls: type) -> int:
    return getattr(algorithm_cls, "block_size", 0) // 8


def _make_algorithm(algorithm_cls: type, key: bytes):
    if algorithm_cls is _TRIPLE_DES and len(key) == 8:
        # single DES is EDE with K1 = K2 = K3
        key = key * 3
    return algorithm_cls(key)


def _make_mode(mode: str, block: int, iv: bytes | None):
    if mode == "ECB":
        return modes.ECB()
    if mode == "NONE":
        return None
    if iv is None:
        iv = bytes(block)
    return _IV_MODES[mode](iv)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  ISO 10126 padding (random fill, count byte last)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class _ISO10126Padder:

    def __init__(self, block: int):
        self._block  = block
        self._buffer = b""

    def update(self, data: bytes) -> bytes:
        self._buffer += data
        cut = len(self._buffer) // self._block * self._block
        out, self._buffer = self._buffer[:cut], self._buffer[cut:]
        return out

    def finalize(self) -> bytes:
        count = self._block - len(self._buffer)
        return self._buffer + os.urandom(count - 1) + bytes([count])


class _ISO10126Unpadder:

    def __init__(self, block: int):
        self._block  = block
        self._buffer = b""

    def update(self, data: bytes) -> bytes:
        self._buffer += data
        # hold back the last full block, it may carry the padding
        cut = max(len(self._buffer) // self._block - 1, 0) * self._block
        out, self._buffer = self._buffer[:cut], self._buffer[cut:]
        return out

    def finalize(self) -> bytes:
        if len(self._buffer) != self._block:
            raise ValueError("Invalid padding bytes.")
        count = self._buffer[-1]
        if not 1 <= count <= self._block:
            raise ValueError("Invalid padding bytes.")
        return self._buffer[:-count]


class ISO10126:

    def __init__(self, block_size: int):
        self._block = block_size // 8

    def padder(self) -> _ISO10126Padder:
        return _ISO10126Padder(self._block)

    def unpadder(self) -> _ISO10126Unpadder:
        return _ISO10126Unpadder(self._block)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Transform
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class CryptographyTransform(CipherTransform):
    """
    One cipher context plus optional padding layer.

    ``finalize()`` re-arms the transform with the key and IV from the
    last ``init()``, so it behaves like a freshly initialised cipher.
    """

    def __init__(self, name: str, algorithm_cls: type,
                 mode: str, padding: str):
        self._name          = name
        self._algorithm_cls = algorithm_cls
        self._mode          = mode
        self._padding       = padding
        self._block         = _block_bytes(algorithm_cls)
        self._ctx           = None
        self._pad_ctx       = None
        self._params        = None
        self._fed           = 0

    # ── properties ───────────────────────────────────────────────
    @property
    def algorithm(self) -> str:
        return self._name

    @property
    def block_size(self) -> int:
        return self._block

    @property
    def mode(self) -> str:
        return self._mode

    # ── lifecycle ────────────────────────────────────────────────
    def init(self, direction: Direction, key: bytes,
             iv: bytes | None = None) -> None:
        algorithm = _make_algorithm(self._algorithm_cls, bytes(key))
        mode      = _make_mode(self._mode, self._block, iv)
        cipher    = Cipher(algorithm, mode)

        if direction is Direction.ENCRYPT:
            ctx = cipher.encryptor()
        else:
            ctx = cipher.decryptor()

        scheme = self._padding_scheme()
        if scheme is None:
            pad_ctx = None
        elif direction is Direction.ENCRYPT:
            pad_ctx = scheme.padder()
        else:
            pad_ctx = scheme.unpadder()

        self._ctx     = ctx
        self._pad_ctx = pad_ctx
        self._params  = (direction, bytes(key), iv)
        self._fed     = 0

    def update(self, data: bytes) -> bytes:
        if self._ctx is None:
            raise RuntimeError(f"{self._name}: transform not initialised")
        self._fed += len(data)
        if self._pad_ctx is None:
            return self._ctx.update(data)
        if self._encrypting:
            return self._ctx.update(self._pad_ctx.update(data))
        return self._pad_ctx.update(self._ctx.update(data))

    def finalize(self) -> bytes:
        if self._ctx is None:
            raise RuntimeError(f"{self._name}: transform not initialised")
        try:
            if self._pad_ctx is None:
                return self._ctx.finalize()
            if self._encrypting:
                tail = self._ctx.update(self._pad_ctx.finalize())
                return tail + self._ctx.finalize()
            tail = self._ctx.finalize()
            if self._fed == 0:
                # nothing was decrypted since init
                return b""
            return self._pad_ctx.update(tail) + self._pad_ctx.finalize()
        finally:
            self.init(*self._params)

    # ── helpers ──────────────────────────────────────────────────
    @property
    def _encrypting(self) -> bool:
        return self._params[0] is Direction.ENCRYPT

    def _padding_scheme(self):
        if self._block == 0 or self._mode not in _ALIGNED_MODES:
            return None
        if self._padding == "PKCS5Padding":
            return sym_padding.PKCS7(self._block * 8)
        if self._padding == "ISO10126Padding":
            return ISO10126(self._block * 8)
        return None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Provider
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class CryptographyProvider(CipherProvider):
    """
    Resolve JCE-style transform names to ``cryptography`` ciphers.

    Parameters
    ----------
    key_length_policy : dict, optional
        Per-algorithm upper bound on key length in bits, keyed by
        uppercase algorithm name.  Defaults to
        ``Settings.KEY_LENGTH_POLICY``.
    """

    def __init__(self, key_length_policy: dict[str, int] | None = None):
        if key_length_policy is None:
            key_length_policy = Settings.KEY_LENGTH_POLICY
        self._policy     = {k.upper(): v for k, v in key_length_policy.items()}
        self._transforms = None
        self._lock       = threading.Lock()

    # ── discovery ────────────────────────────────────────────────
    def list_cipher_transforms(self) -> dict[str, frozenset[str]]:
        if self._transforms is None:
            with self._lock:
                if self._transforms is None:
                    self._transforms = self._probe_all()
        return self._transforms

    def _probe_all(self) -> dict[str, frozenset[str]]:
        found = {}
        for canonical, algorithm_cls, key_bytes in _ALGORITHMS.values():
            if algorithm_cls is None:
                continue
            if _block_bytes(algorithm_cls) == 0:
                candidates = ("NONE",)
            else:
                candidates = BLOCK_MODE_NAMES
            supported = frozenset(
                m for m in candidates
                if self._probe(algorithm_cls, key_bytes, m)
            )
            if supported:
                found[canonical] = supported
        logger.debug("Provider transforms: %s", found)
        return found

    @staticmethod
    def _probe(algorithm_cls: type, key_bytes: int, mode: str) -> bool:
        block = _block_bytes(algorithm_cls)
        try:
            Cipher(
                _make_algorithm(algorithm_cls, bytes(key_bytes)),
                _make_mode(mode, block, bytes(block)),
            ).encryptor()
        except (UnsupportedAlgorithm, ValueError, TypeError):
            return False
        return True

    # ── factory ──────────────────────────────────────────────────
    def create_transform(self, name: str) -> CryptographyTransform:
        parts = name.split("/")
        entry = _ALGORITHMS.get(parts[0].upper())
        if entry is None or entry[1] is None or len(parts) not in (1, 3):
            raise TransformNotSupported(
                f"unsupported cipher algorithm ({name})"
            )
        canonical, algorithm_cls, _ = entry
        stream = _block_bytes(algorithm_cls) == 0

        if len(parts) == 1:
            mode, padding = ("NONE" if stream else "ECB"), "PKCS5PADDING"
        else:
            mode, padding = parts[1].upper(), parts[2].upper()

        if stream:
            if mode not in ("NONE", "ECB"):
                raise TransformNotSupported(
                    f"unsupported cipher mode ({name})"
                )
            mode = "NONE"

        supported = self.list_cipher_transforms().get(canonical, frozenset())
        if mode not in supported:
            raise TransformNotSupported(f"unsupported cipher mode ({name})")
        if padding not in SUPPORTED_PADDINGS:
            raise TransformNotSupported(
                f"unsupported cipher padding ({name})"
            )

        logger.debug("Created transform %s", name)
        return CryptographyTransform(
            name, algorithm_cls, mode, SUPPORTED_PADDINGS[padding],
        )

    # ── policy ───────────────────────────────────────────────────
    def max_allowed_key_length(self, name: str) -> int | None:
        algorithm = name.split("/", 1)[0].upper()
        entry = _ALGORITHMS.get(algorithm)
        if entry is None or entry[1] is None:
            return None
        key_sizes = getattr(entry[1], "key_sizes", None)
        bits = max(key_sizes) if key_sizes else None
        cap = self._policy.get(algorithm)
        if cap is not None:
            bits = cap if bits is None else min(bits, cap)
        return bits


_default_provider: CryptographyProvider | None = None
_default_lock = threading.Lock()


def get_default_provider() -> CryptographyProvider:
    """Process-wide provider instance."""
    global _default_provider
    if _default_provider is None:
        with _default_lock:
            if _default_provider is None:
                _default_provider = CryptographyProvider()
    return _default_provider
