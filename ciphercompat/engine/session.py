"""
Stateful OpenSSL-compatible cipher session.

A session is built once per cipher name and then driven the OpenSSL
way::

    cipher = CipherSession("AES-256-CBC")
    cipher.encrypt()
    cipher.key = key
    cipher.iv  = iv
    ct = cipher.update(b"attack at dawn") + cipher.final()

Key and IV may be set in any order and any number of times.  The
provider transform is primed lazily, on the first ``update()`` or
``final()`` after something invalidated it.

Two legacy behaviours are reproduced on purpose:

* After ``final()`` a block cipher with an IV in play is immediately
  re-primed with the trailing ciphertext block as the new IV, so the
  session can keep going with more ``update()`` / ``final()`` calls.
* ``encrypt(password)`` / ``decrypt(password)`` derive key material
  from a password with a fixed seed.  This calling convention is
  deprecated; use :meth:`CipherSession.pkcs5_keyivgen`.
"""

import copy
import logging
import warnings

from ..config import Settings
from ..utils  import SecureRandom
from .base     import CipherProvider, CipherTransform, Direction
from .digest   import DigestProvider
from .errors   import (
    AlreadyInitialized, CipherError, EmptyInput, InvalidSaltLength,
    IvTooShort, KeyNotSet, KeyTooShort, NotInitialized,
    ProviderInitFailure, ProviderOperationFailure, UnsupportedCipher,
)
from .kdf      import derive_key_iv
from .names    import CipherSpec, parse
from .registry import CipherRegistry, get_default_registry
from .sizes    import key_iv_lengths

logger = logging.getLogger("CipherCompat.Session")


class CipherSession:
    """
    One cipher context: name, key material, direction and IV chain.

    Parameters
    ----------
    name : str, optional
        OpenSSL cipher name, e.g. ``"AES-128-CBC"``.  When omitted the
        session must be set up later with :meth:`initialize`.
    registry : CipherRegistry, optional
        Registry used to validate *name* and to reach the provider.
        Defaults to the process-wide registry.
    """

    def __init__(self, name: str | None = None,
                 registry: CipherRegistry | None = None):
        self._registry  = registry or get_default_registry()
        self._transform: CipherTransform | None = None

        self._name:     str | None        = None
        self._spec:     CipherSpec | None = None
        self._padding                     = None
        self._key_len          = -1
        self._iv_len           = -1
        self._generate_key_len = -1

        self._key:         bytes | None = None
        self._current_iv:  bytes | None = None
        self._original_iv: bytes | None = None
        self._last_iv:     bytes | None = None

        self._direction   = Direction.ENCRYPT
        self._initialized = False

        if name is not None:
            self.initialize(name)

    # ── construction ─────────────────────────────────────────────

    @property
    def provider(self) -> CipherProvider:
        return self._registry.provider

    def initialize(self, name: str) -> "CipherSession":
        """Bind the session to cipher *name*."""
        if not self._registry.is_supported(name):
            raise UnsupportedCipher(f"unsupported cipher algorithm ({name})")
        if self._transform is not None:
            raise AlreadyInitialized("Cipher already initialized!")
        self._update_cipher(name, self._padding)
        return self

    def _update_cipher(self, name: str, padding) -> None:
        spec    = parse(name, padding)
        lengths = key_iv_lengths(spec, self.provider)

        self._name    = name.upper()
        self._padding = padding
        self._spec    = spec
        self._key_len = lengths.key_len
        self._iv_len  = lengths.iv_len
        if spec.base.upper() == "DES":
            self._generate_key_len = self._key_len // 8 * 7
        else:
            self._generate_key_len = -1

        self._transform   = self._create_transform(spec)
        self._initialized = False
        logger.debug("Session bound to %s (%s, key=%d, iv=%d)",
                     self._name, spec.provider_transform,
                     self._key_len, self._iv_len)

    def _create_transform(self, spec: CipherSpec) -> CipherTransform:
        try:
            return self.provider.create_transform(spec.provider_transform)
        except CipherError as exc:
            raise UnsupportedCipher(exc.message) from exc

    def _check_initialized(self) -> None:
        if self._transform is None:
            raise NotInitialized("Cipher not initialized!")

    # ── copy ─────────────────────────────────────────────────────

    def __copy__(self) -> "CipherSession":
        self._check_initialized()
        other = CipherSession(registry=self._registry)
        other._name             = self._name
        other._spec             = self._spec
        other._padding          = self._padding
        other._key_len          = self._key_len
        other._iv_len           = self._iv_len
        other._generate_key_len = self._generate_key_len
        other._direction        = self._direction
        other._key              = self._key
        other._current_iv       = self._current_iv
        other._original_iv      = self._current_iv
        other._initialized      = False
        other._transform        = other._create_transform(self._spec)
        return other

    def copy(self) -> "CipherSession":
        return copy.copy(self)

    # ── accessors ────────────────────────────────────────────────

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def spec(self) -> CipherSpec | None:
        return self._spec

    @property
    def key_len(self) -> int:
        return self._key_len

    @key_len.setter
    def key_len(self, value: int) -> None:
        self._key_len = int(value)

    @property
    def iv_len(self) -> int:
        return self._iv_len

    @property
    def generate_key_len(self) -> int:
        """Key bytes worth generating; DES keys carry parity bits."""
        if self._generate_key_len == -1:
            return self._key_len
        return self._generate_key_len

    @property
    def direction(self) -> Direction:
        return self._direction

    @property
    def initialized(self) -> bool:
        """True while the transform is primed for the current direction."""
        return self._initialized

    @property
    def algorithm(self) -> str:
        self._check_initialized()
        return self._transform.algorithm

    @property
    def is_stream_cipher(self) -> bool:
        self._check_initialized()
        return self._transform.block_size == 0

    def block_size(self) -> int:
        """Provider block size; 1 for stream ciphers, as OpenSSL reports."""
        self._check_initialized()
        if self.is_stream_cipher:
            return 1
        return self._transform.block_size

    # ── key / iv ─────────────────────────────────────────────────

    @property
    def key(self) -> bytes | None:
        return self._key

    @key.setter
    def key(self, value: bytes) -> None:
        self.set_key(value)

    def set_key(self, value: bytes) -> None:
        """Install *value* as the key; longer keys are truncated."""
        self._check_initialized()
        value = bytes(value)
        if len(value) < self._key_len:
            raise KeyTooShort("key length too short")
        self._key = value[:self._key_len]

    @property
    def iv(self) -> bytes | None:
        return self._current_iv

    @iv.setter
    def iv(self, value: bytes) -> None:
        self.set_iv(value)

    def set_iv(self, value: bytes) -> None:
        """Install the leading ``iv_len`` bytes of *value* as the IV."""
        self._check_initialized()
        value = bytes(value)
        if len(value) < self._iv_len:
            raise IvTooShort("iv length too short")
        self._current_iv  = value[:self._iv_len]
        self._original_iv = self._current_iv
        if not self.is_stream_cipher:
            self._initialized = False

    def random_key(self) -> bytes:
        """Install and return a fresh random key."""
        self._check_initialized()
        key = SecureRandom.generate_key(self._key_len)
        self.set_key(key)
        return key

    def random_iv(self) -> bytes:
        """Install and return a fresh random IV."""
        self._check_initialized()
        iv = SecureRandom.generate_iv(self._iv_len)
        self.set_iv(iv)
        return iv

    # ── padding ──────────────────────────────────────────────────

    @property
    def padding(self):
        return self._spec.padding if self._spec else None

    @padding.setter
    def padding(self, value) -> None:
        self.set_padding(value)

    def set_padding(self, value) -> None:
        """Switch padding; the transform is rebuilt, key and IV kept."""
        self._check_initialized()
        self._update_cipher(self._name, value)

    # ── direction ────────────────────────────────────────────────

    def encrypt(self, password: bytes | None = None,
                iv: bytes | None = None) -> "CipherSession":
        """Select encryption.  *password* and *iv* are deprecated."""
        return self.select_direction(Direction.ENCRYPT, password, iv)

    def decrypt(self, password: bytes | None = None,
                iv: bytes | None = None) -> "CipherSession":
        """Select decryption.  *password* and *iv* are deprecated."""
        return self.select_direction(Direction.DECRYPT, password, iv)

    def select_direction(self, direction: Direction,
                         password: bytes | None = None,
                         iv: bytes | None = None) -> "CipherSession":
        self._current_iv  = self._original_iv
        self._direction   = direction
        self._initialized = False
        if password is not None:
            self._legacy_key_setup(bytes(password), iv)
        return self

    def _legacy_key_setup(self, password: bytes, iv: bytes | None) -> None:
        self._check_initialized()
        warnings.warn(
            f"key derivation by {type(self).__name__}.{self._direction.value}"
            f"() is deprecated; use {type(self).__name__}.pkcs5_keyivgen()"
            " instead",
            DeprecationWarning,
            stacklevel=4,
        )
        seed = Settings.LEGACY_IV_SEED[:self._iv_len]
        seed = seed.ljust(self._iv_len, b"\0")
        if iv is not None:
            seed = bytes(iv)[:self._iv_len]

        # the seed doubles as salt, as OpenSSL's old EVP_BytesToKey call did
        result = derive_key_iv(
            self._key_len, self._iv_len,
            DigestProvider.digest(Settings.KDF_DIGEST),
            seed, password, Settings.KDF_ITERATIONS,
        )
        self._key         = result.key
        self._current_iv  = seed
        self._original_iv = seed

    def pkcs5_keyivgen(self, password: bytes, salt: bytes | None = None,
                       iterations: int | None = None,
                       digest: str | None = None) -> None:
        """
        Derive key and IV from *password* with EVP_BytesToKey and prime.

        Parameters
        ----------
        salt : bytes, optional
            Exactly 8 bytes when given.
        iterations : int, optional
            Defaults to ``Settings.KDF_ITERATIONS`` (2048).
        digest : str, optional
            Digest name, defaults to MD5.
        """
        self._check_initialized()
        if salt is not None and len(salt) != Settings.SALT_SIZE:
            raise InvalidSaltLength("salt must be an 8-octet string")
        if iterations is None:
            iterations = Settings.KDF_ITERATIONS

        result = derive_key_iv(
            self._key_len, self._iv_len,
            DigestProvider.digest(digest or Settings.KDF_DIGEST),
            salt, bytes(password), iterations,
        )
        self._key         = result.key
        self._current_iv  = result.iv
        self._original_iv = result.iv
        self._prime()

    # ── streaming ────────────────────────────────────────────────

    def update(self, data: bytes) -> bytes:
        """Feed *data*; return the output the provider has ready."""
        data = bytes(data)
        if not data:
            raise EmptyInput("data must not be empty")
        self._check_initialized()

        if not self._initialized:
            self._prime()

        try:
            out = self._transform.update(data)
        except Exception as exc:
            raise ProviderOperationFailure(str(exc)) from exc

        if self._current_iv is not None:
            self._chain(out if self._direction is Direction.ENCRYPT else data)
        return out

    def __lshift__(self, data: bytes) -> bytes:
        warnings.warn(
            f"{type(self).__name__} << is deprecated; use "
            f"{type(self).__name__}.update() instead",
            DeprecationWarning,
            stacklevel=2,
        )
        return self.update(data)

    def final(self) -> bytes:
        """
        Flush the transform.

        Stream ciphers return ``b""`` and keep their key stream.  Block
        ciphers with an IV in play are re-primed with the chained IV.
        """
        self._check_initialized()
        if not self._initialized:
            self._prime()

        if self.is_stream_cipher:
            return b""

        try:
            out = self._transform.finalize()
        except Exception as exc:
            raise ProviderOperationFailure(str(exc)) from exc

        if self._current_iv is not None:
            self._chain(out)
            self._current_iv = self._last_iv
            self._prime()
        return out

    def reset(self) -> "CipherSession":
        """Re-prime with the original IV (block ciphers only)."""
        self._check_initialized()
        if not self.is_stream_cipher:
            self._current_iv = self._original_iv
            self._prime()
        return self

    # ── internals ────────────────────────────────────────────────

    def _chain(self, chunk: bytes) -> None:
        if self._last_iv is None:
            self._last_iv = bytes(self._iv_len)
        if len(chunk) >= self._iv_len:
            self._last_iv = chunk[len(chunk) - self._iv_len:]

    def _prime(self) -> None:
        self._check_initialized()
        if self._key is None:
            raise KeyNotSet("key not specified")

        mode = self._spec.mode
        iv   = None
        if mode != "ECB":
            if self._current_iv is None:
                # no IV yet, start out with all zeros
                self._current_iv = bytes(self._iv_len)
            if mode != "NONE":
                iv = self._current_iv

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "prime %s: transform=%s direction=%s key=%d iv=%d "
                "block=%d padding=%s",
                self._name, self._spec.provider_transform,
                self._direction.value, len(self._key),
                len(self._current_iv or b""), self._transform.block_size,
                self._spec.padding,
            )

        try:
            self._transform.init(self._direction, self._key, iv)
        except Exception as exc:
            raise ProviderInitFailure(
                f"{exc}: the key or IV was rejected by the provider "
                "(wrong length or restricted by key length policy)"
            ) from exc
        self._initialized = True

    def __repr__(self) -> str:
        return (f"<CipherSession {self._name} key_len={self._key_len} "
                f"iv_len={self._iv_len} {self._direction.value}>")
