"""
Exception hierarchy for the cipher engine.

Every error raised by a session derives from :class:`CipherError`, so
callers that only care about "the cipher failed" can catch one type.
"""


class CipherError(Exception):
    """Base class for all cipher engine errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedCipher(CipherError):
    """Cipher name is not in the supported registry."""


class AlreadyInitialized(CipherError):
    """initialize() called on a session that already has a transform."""


class NotInitialized(CipherError):
    """Session was created without a cipher name."""


class KeyTooShort(CipherError):
    pass


class IvTooShort(CipherError):
    pass


class KeyNotSet(CipherError):
    """Transform priming attempted before any key was installed."""


class InvalidSaltLength(CipherError):
    pass


class EmptyInput(CipherError, ValueError):
    """update() called with zero-length data."""


class UnsupportedDigest(CipherError):
    pass


class TransformNotSupported(CipherError):
    """The provider cannot build the requested transform."""


class ProviderInitFailure(CipherError):
    """Key or IV was rejected while priming the provider transform."""


class ProviderOperationFailure(CipherError):
    """The provider failed during update or finalize."""
