import os


class Settings:
    """Centralised library configuration."""

    # ── application ──────────────────────────────────────────────
    APP_NAME    = "CipherCompat"
    APP_VERSION = "1.0.0"

    # ── cipher defaults ──────────────────────────────────────────
    DEFAULT_MODE    = "CBC"
    DEFAULT_PADDING = "PKCS5Padding"

    # ── key derivation ───────────────────────────────────────────
    KDF_DIGEST     = "MD5"
    KDF_ITERATIONS = 2048
    SALT_SIZE      = 8           # bytes, EVP_BytesToKey salt

    # Seed used as salt and IV by the deprecated encrypt(password)
    # calling convention.
    LEGACY_IV_SEED = b"OpenSSL for Ruby rulez!"

    # ── key length policy ────────────────────────────────────────
    # Upper bound in bits per provider algorithm name (uppercase),
    # e.g. {"BLOWFISH": 128}.  Empty means unlimited.
    KEY_LENGTH_POLICY: dict[str, int] = {}

    # ── logging ──────────────────────────────────────────────────
    LOG_LEVEL       = os.environ.get("CIPHERCOMPAT_LOG_LEVEL", "WARNING")
    LOG_FORMAT      = "[%(asctime)s] [%(levelname)-8s] %(name)-28s — %(message)s"
    LOG_DATE_FORMAT = "%H:%M:%S"
