"""Charset classification and lookup.

Charset names found in MIME headers are resolved against the Python codec
registry and reported under their MIME preferred name, so ``ascii`` and
``us-ascii`` both come back as :data:`US_ASCII`.
"""

from __future__ import annotations

import codecs
from dataclasses import dataclass

import charset_normalizer
import structlog

logger = structlog.get_logger()


@dataclass(frozen=True)
class Charset:
    """A resolved charset: MIME preferred name plus the Python codec name."""

    name: str
    codec: str

    def __str__(self) -> str:
        return self.name


# Python codec name -> MIME preferred name (RFC 2978 / IANA registry).
_MIME_NAMES: dict[str, str] = {
    "ascii": "US-ASCII",
    "latin-1": "ISO-8859-1",
    "iso8859-1": "ISO-8859-1",
    "iso8859-2": "ISO-8859-2",
    "iso8859-3": "ISO-8859-3",
    "iso8859-4": "ISO-8859-4",
    "iso8859-5": "ISO-8859-5",
    "iso8859-6": "ISO-8859-6",
    "iso8859-7": "ISO-8859-7",
    "iso8859-8": "ISO-8859-8",
    "iso8859-9": "ISO-8859-9",
    "iso8859-13": "ISO-8859-13",
    "iso8859-15": "ISO-8859-15",
    "utf-8": "UTF-8",
    "utf-16": "UTF-16",
    "utf-16-be": "UTF-16BE",
    "utf-16-le": "UTF-16LE",
    "utf-32": "UTF-32",
    "utf-7": "UTF-7",
    "koi8-r": "KOI8-R",
    "koi8-u": "KOI8-U",
    "cp1250": "windows-1250",
    "cp1251": "windows-1251",
    "cp1252": "windows-1252",
    "cp1253": "windows-1253",
    "cp1254": "windows-1254",
    "cp1257": "windows-1257",
    "shift_jis": "Shift_JIS",
    "euc_jp": "EUC-JP",
    "iso2022_jp": "ISO-2022-JP",
    "euc_kr": "EUC-KR",
    "gb2312": "GB2312",
    "gbk": "GBK",
    "gb18030": "GB18030",
    "big5": "Big5",
}

# Text codecs Python registers that are not MIME charsets.
_NOT_CHARSETS = frozenset(
    {
        "undefined",
        "idna",
        "punycode",
        "unicode-escape",
        "unicode_escape",
        "raw-unicode-escape",
        "raw_unicode_escape",
        "charmap",
        "mbcs",
        "oem",
    }
)

US_ASCII = Charset("US-ASCII", "ascii")
ISO_8859_1 = Charset("ISO-8859-1", "latin-1")
UTF_8 = Charset("UTF-8", "utf-8")

_cache: dict[str, Charset] = {c.name: c for c in (US_ASCII, ISO_8859_1, UTF_8)}


def is_ascii(text: str) -> bool:
    """Return True if every character of *text* is 7-bit ASCII."""
    return all(ord(ch) < 128 for ch in text)


def lookup(name: str | None) -> Charset | None:
    """Resolve a charset name, or return None if it cannot be resolved.

    Never raises: ``None``, empty, malformed and unknown names all yield
    None, as do codecs that are not text encodings (``base64``, ``rot13``)
    and Python-only codecs such as ``idna`` or ``undefined``.
    """
    if not isinstance(name, str):
        return None
    name = name.strip().strip('"')
    if not name:
        return None

    try:
        info = codecs.lookup(name)
    except (LookupError, ValueError, TypeError):
        return None
    if not getattr(info, "_is_text_encoding", True) or info.name in _NOT_CHARSETS:
        return None

    mime_name = _MIME_NAMES.get(info.name, info.name.upper())
    charset = _cache.get(mime_name)
    if charset is None:
        charset = _cache.setdefault(mime_name, Charset(mime_name, info.name))
    return charset


def decode(data: bytes, charset_name: str | None = None) -> str:
    """Decode *data* using the declared charset, detecting it if that fails.

    Falls back to charset detection and finally to UTF-8 with replacement
    characters, so the result is always a string.
    """
    charset = lookup(charset_name)
    if charset is not None:
        try:
            return data.decode(charset.codec)
        except UnicodeError:
            logger.debug("charset_decode_failed", charset=charset.name)
    elif charset_name:
        logger.debug("charset_unknown", charset=charset_name)

    detected = charset_normalizer.from_bytes(data).best()
    if detected is not None:
        return str(detected)

    return data.decode("utf-8", errors="replace")
