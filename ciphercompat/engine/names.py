"""
OpenSSL-style cipher name parsing.

OpenSSL names ciphers as dash-separated tokens, "AES-256-CBC",
"DES-EDE3-CFB", "BF-CBC", "RC4".  Providers address transforms with
JCE-style strings instead, "AES/CBC/PKCS5Padding", "DESede/CFB/...",
"Blowfish/CBC/...", "RC4".  This module converts in both directions.

Parsing never fails: any string yields a CipherSpec.  Whether the
result names something the provider can actually build is decided
later, when a session is created.
"""

from dataclasses import dataclass

from ..config import Settings

# ── lookup tables (canonical uppercase keys) ─────────────────────

BLOCK_MODES: dict[str, str] = {
    "CBC":  "CBC",
    "CFB":  "CFB",
    "CFB1": "CFB1",
    "CFB8": "CFB8",
    "ECB":  "ECB",
    "OFB":  "OFB",
    "CTR":  "CTR",
    "CTS":  "CTS",     # not an OpenSSL mode
    "PCBC": "PCBC",    # not an OpenSSL mode
    "NONE": "NONE",
}

# Accepted as a mode although no provider here implements it.
PASSTHROUGH_MODES = frozenset({"XTS"})

PADDINGS: dict[str, str] = {
    "PKCS5PADDING":    "PKCS5Padding",
    "PKCS5":           "PKCS5Padding",
    "1":               "PKCS5Padding",
    "NOPADDING":       "NoPadding",
    "0":               "NoPadding",
    "ISO10126PADDING": "ISO10126Padding",
    "ISO10126":        "ISO10126Padding",
    "PKCS1PADDING":    "PKCS1Padding",
    "PKCS1":           "PKCS1Padding",
    "SSL3PADDING":     "SSL3Padding",
    "SSL3":            "SSL3Padding",
}

BASE_ALIASES: dict[str, str] = {
    "BF":       "Blowfish",
    "BLOWFISH": "Blowfish",
    "CAMELLIA": "Camellia",
}

# Provider algorithm name -> (external base, implied version)
_EXTERNAL_BASES: dict[str, tuple[str, str | None]] = {
    "DESEDE":   ("DES", "EDE3"),
    "BLOWFISH": ("BF", None),
}


@dataclass(frozen=True)
class CipherSpec:
    """Structured form of an OpenSSL cipher name."""

    name:               str
    base:               str
    version:            str | None
    mode:               str
    padding:            str
    provider_transform: str

    @property
    def real_name(self) -> str:
        """Provider algorithm name, without mode and padding."""
        return self.provider_transform.split("/", 1)[0]


def normalize_padding(padding) -> str:
    if padding is None:
        return Settings.DEFAULT_PADDING
    return PADDINGS.get(str(padding).upper(), Settings.DEFAULT_PADDING)


def parse(name: str, padding=None) -> CipherSpec:
    """
    Parse *name* into a :class:`CipherSpec`.

    ``BASE``               → mode defaults to CBC
    ``BASE-MODE``          → e.g. "BF-CBC"
    ``BASE-VERSION-MODE``  → e.g. "AES-256-CFB"; extra tokens ignored

    A mode token that is not a known block mode is reinterpreted as the
    version, so "AES-256" parses as version 256, mode CBC.
    """
    parts   = name.split("-")
    base    = parts[0]
    version = None
    mode    = Settings.DEFAULT_MODE
    if len(parts) == 2:
        mode = parts[1]
    elif len(parts) > 2:
        version, mode = parts[1], parts[2]

    padding_type = normalize_padding(padding)

    base = BASE_ALIASES.get(base.upper(), base)
    base_upper = base.upper()

    if base_upper == "CAST":
        real_name = "CAST5"
    elif base_upper == "DES" and (version or "").upper() == "EDE3":
        real_name = "DESede"
    else:
        real_name = base

    mode_upper = mode.upper()
    if mode_upper in BLOCK_MODES:
        mode = BLOCK_MODES[mode_upper]
        if mode == "CFB1":
            # bit-level CFB is addressed as plain CFB by providers
            mode = "CFB"
    elif mode_upper in PASSTHROUGH_MODES:
        mode = mode_upper
    else:
        version, mode = mode, Settings.DEFAULT_MODE

    if real_name.upper() == "RC4":
        mode, padding_type = "NONE", "NoPadding"
        transform = "RC4"
    else:
        transform = f"{real_name}/{mode}/{padding_type}"

    return CipherSpec(
        name=name,
        base=base,
        version=version,
        mode=mode,
        padding=padding_type,
        provider_transform=transform,
    )


def to_external_name(transform: str, key_len_bits: int) -> str | None:
    """
    Map a provider transform name back to ``BASE-VERSION-MODE``.

    Returns None when *transform* is neither "ALG" nor "ALG/MODE/PAD".
    *key_len_bits* fills in the version when the name carries none.
    """
    parts = transform.split("/")
    if len(parts) not in (1, 3):
        return None

    base    = parts[0]
    version = None
    mode    = parts[1] if len(parts) == 3 else None

    if mode is None or mode.upper() not in BLOCK_MODES:
        version, mode = mode, Settings.DEFAULT_MODE

    external = _EXTERNAL_BASES.get(base.upper())
    if external is not None:
        base = external[0]
        version = external[1] or version

    if version is None:
        version = str(key_len_bits)
    return f"{base}-{version}-{mode}"
