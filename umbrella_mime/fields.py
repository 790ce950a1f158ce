"""Factories that encode semantic values into header fields.

These produce raw values ready to be written: non-ASCII text becomes RFC 2047
encoded-words, dates use the RFC 5322 format and parameters are quoted.
"""

from __future__ import annotations

import email.utils
from datetime import datetime, tzinfo
from email.header import Header as _EncodedHeader

from .charset import is_ascii
from .field import (
    ContentDispositionField,
    ContentTransferEncodingField,
    ContentTypeField,
    DateTimeField,
    Field,
    UnstructuredField,
)

MESSAGE_ID = "Message-ID"
SUBJECT = "Subject"
DATE = "Date"
CONTENT_TYPE = "Content-Type"
CONTENT_TRANSFER_ENCODING = "Content-Transfer-Encoding"
CONTENT_DISPOSITION = "Content-Disposition"

_TSPECIALS = set('()<>@,;:\\"/[]?= \t')


def encode_text(name: str, text: str) -> str:
    """Encode unstructured *text* for use as the raw value of field *name*."""
    if is_ascii(text) and "=?" not in text and "\r" not in text and "\n" not in text:
        return text
    return _EncodedHeader(text, "utf-8", header_name=name).encode(linesep="\r\n")


def unstructured(name: str, text: str) -> UnstructuredField:
    return UnstructuredField(name, encode_text(name, text))


def subject(text: str) -> UnstructuredField:
    return unstructured(SUBJECT, text)


def date(value: datetime, zone: tzinfo | None = None, name: str = DATE) -> DateTimeField:
    """Build a date field, formatting *value* in *zone* (host zone if None).

    RFC 5322 dates carry whole seconds, so microseconds are dropped.  A
    naive *value* is taken to be in the host zone.
    """
    value = value.replace(microsecond=0)
    local = value.astimezone(zone) if zone is not None else value.astimezone()
    return DateTimeField(name, email.utils.format_datetime(local))


def message_id(hostname: str | None = None) -> Field:
    """Build a fresh Message-ID.

    The identifier combines the time, the process id and 64 random bits; the
    right-hand side is *hostname*, or ``localhost`` when none is given.
    """
    return Field(MESSAGE_ID, email.utils.make_msgid(domain=hostname or "localhost"))


def content_type(mime_type: str, **params: str) -> ContentTypeField:
    return ContentTypeField(CONTENT_TYPE, _with_params(mime_type, params))


def content_transfer_encoding(encoding: str) -> ContentTransferEncodingField:
    return ContentTransferEncodingField(CONTENT_TRANSFER_ENCODING, encoding)


def content_disposition(disposition: str, filename: str | None = None) -> ContentDispositionField:
    params = {"filename": filename} if filename is not None else {}
    return ContentDispositionField(CONTENT_DISPOSITION, _with_params(disposition, params))


def _with_params(value: str, params: dict[str, str]) -> str:
    parts = [value]
    for key, param in params.items():
        param = str(param)
        if is_ascii(param):
            parts.append(f"{key}={_quote(param)}")
        else:
            # RFC 2231 extended notation keeps non-ASCII values intact.
            parts.append(f"{key}*={email.utils.encode_rfc2231(param, 'utf-8')}")
    return "; ".join(parts)


def _quote(value: str) -> str:
    if value and not any(ch in _TSPECIALS for ch in value):
        return value
    return f'"{email.utils.quote(value)}"'
