"""
Abstract interfaces for the cryptographic provider.

The session layer never touches a concrete cipher library directly.
It asks a :class:`CipherProvider` for transforms by JCE-style name
("AES/CBC/PKCS5Padding", "RC4") and drives them through the
init / update / finalize cycle defined by :class:`CipherTransform`.
"""

from abc import ABC, abstractmethod
from enum import Enum


class Direction(Enum):
    ENCRYPT = "encrypt"
    DECRYPT = "decrypt"


class CipherTransform(ABC):
    """
    A live cipher transform owned by a single session.

    After :meth:`finalize` the transform returns to the state of its
    last :meth:`init` call (same direction, key and IV).
    """

    @abstractmethod
    def init(self, direction: Direction, key: bytes,
             iv: bytes | None = None) -> None:
        """Prime the transform with key material for *direction*."""

    @abstractmethod
    def update(self, data: bytes) -> bytes:
        """Feed *data*; return whatever output is ready."""

    @abstractmethod
    def finalize(self) -> bytes:
        """Flush buffered data (applying padding) and re-arm."""

    @property
    @abstractmethod
    def block_size(self) -> int:
        """Block size in bytes, 0 for stream ciphers."""

    @property
    @abstractmethod
    def algorithm(self) -> str:
        """Transform name as understood by the provider."""


class CipherProvider(ABC):

    @abstractmethod
    def list_cipher_transforms(self) -> dict[str, frozenset[str]]:
        """Map each algorithm name to the set of modes it supports."""

    @abstractmethod
    def create_transform(self, name: str) -> CipherTransform:
        """Build a transform, or raise TransformNotSupported."""

    @abstractmethod
    def max_allowed_key_length(self, name: str) -> int | None:
        """Maximum key length in bits, or None when unknown."""
