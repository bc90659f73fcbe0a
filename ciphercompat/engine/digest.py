"""
Resettable message digests backed by ``cryptography`` hashes.
"""

from cryptography.hazmat.primitives import hashes

from .errors import UnsupportedDigest


# Canonical name (uppercase, no dashes) -> hash algorithm class
_ALGORITHMS: dict[str, type] = {
    "MD5":      hashes.MD5,
    "SHA1":     hashes.SHA1,
    "SHA224":   hashes.SHA224,
    "SHA256":   hashes.SHA256,
    "SHA384":   hashes.SHA384,
    "SHA512":   hashes.SHA512,
    "SHA3224":  hashes.SHA3_224,
    "SHA3256":  hashes.SHA3_256,
    "SHA3384":  hashes.SHA3_384,
    "SHA3512":  hashes.SHA3_512,
    "SM3":      hashes.SM3,
}


def _canonical(name: str) -> str:
    return name.upper().replace("-", "").replace("_", "")


class Digest:
    """A digest context that can be reset and reused."""

    def __init__(self, algorithm: hashes.HashAlgorithm):
        self._algorithm = algorithm
        self._ctx       = hashes.Hash(algorithm)

    @property
    def name(self) -> str:
        return self._algorithm.name

    @property
    def digest_size(self) -> int:
        return self._algorithm.digest_size

    def reset(self) -> None:
        self._ctx = hashes.Hash(self._algorithm)

    def update(self, data: bytes) -> None:
        self._ctx.update(data)

    def finalize(self) -> bytes:
        """Return the digest and leave the context reset."""
        out = self._ctx.finalize()
        self.reset()
        return out


class DigestProvider:
    """Look up digests by OpenSSL-ish name ("MD5", "SHA-256", ...)."""

    @staticmethod
    def is_supported(name: str) -> bool:
        return _canonical(name) in _ALGORITHMS

    @staticmethod
    def digest(name: str) -> Digest:
        algorithm = _ALGORITHMS.get(_canonical(name))
        if algorithm is None:
            raise UnsupportedDigest(f"unsupported digest algorithm ({name})")
        return Digest(algorithm())

    @staticmethod
    def list_digests() -> list[str]:
        return sorted(_ALGORITHMS)
