"""
OpenSSL EVP_BytesToKey key/IV derivation.

This is the legacy password-to-key scheme used by ``openssl enc`` and
by OpenSSL's ``pkcs5_keyivgen``: digest blocks are chained

    D_1 = H^n(password ‖ salt)
    D_i = H^n(D_{i-1} ‖ password ‖ salt)

and the concatenation D_1 ‖ D_2 ‖ … is cut into key bytes followed by
IV bytes.  It is kept for interoperability only; it is not a modern
KDF.
"""

from typing import NamedTuple

from ..config import Settings
from .digest  import Digest, DigestProvider


class KeyAndIv(NamedTuple):
    key: bytes
    iv:  bytes


def derive_key_iv(key_len: int, iv_len: int,
                  digest: Digest | str,
                  salt: bytes | None,
                  password: bytes | None,
                  iterations: int = 1) -> KeyAndIv:
    """
    Derive ``key_len`` key bytes and ``iv_len`` IV bytes from *password*.

    Parameters
    ----------
    digest : Digest or str
        Digest context, or a digest name looked up via DigestProvider.
    salt : bytes or None
        Only the first 8 bytes are used.  Anything shorter than 8 bytes
        is treated as no salt; callers validate length beforehand.
    password : bytes or None
        An absent or empty password yields all-zero key and IV.
    iterations : int
        Digest rounds per block (the OpenSSL ``count``).
    """
    key = bytearray(key_len)
    iv  = bytearray(iv_len)

    if not password:
        return KeyAndIv(bytes(key), bytes(iv))

    if isinstance(digest, str):
        digest = DigestProvider.digest(digest)
    if salt is not None and len(salt) < Settings.SALT_SIZE:
        salt = None

    key_ix = iv_ix = 0
    block  = b""
    first  = True

    while key_ix < key_len or iv_ix < iv_len:
        digest.reset()
        if not first:
            digest.update(block)
        first = False
        digest.update(password)
        if salt is not None:
            digest.update(salt[:Settings.SALT_SIZE])
        block = digest.finalize()

        for _ in range(1, iterations):
            digest.reset()
            digest.update(block)
            block = digest.finalize()

        i = 0
        while key_ix < key_len and i < len(block):
            key[key_ix] = block[i]
            key_ix += 1
            i += 1
        while iv_ix < iv_len and i < len(block):
            iv[iv_ix] = block[i]
            iv_ix += 1
            i += 1

    return KeyAndIv(bytes(key), bytes(iv))
