"""
Random key and IV material for cipher sessions.
"""

import os


class SecureRandom:
    """OS-backed random bytes sized by the session's key/IV lengths."""

    @staticmethod
    def generate_key(key_len: int) -> bytes:
        if key_len < 0:
            raise ValueError(f"key length must not be negative: {key_len}")
        return os.urandom(key_len)

    @staticmethod
    def generate_iv(iv_len: int) -> bytes:
        # stream ciphers have iv_len 0 and get b""
        if iv_len < 0:
            raise ValueError(f"iv length must not be negative: {iv_len}")
        return os.urandom(iv_len)
