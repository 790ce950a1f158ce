"""Header fields: raw name/value pairs with typed, lazily decoded views.

A field keeps the raw value exactly as it arrived (or as it will be
written).  Typed subclasses decode that value on first access; a value that
cannot be decoded is recorded on ``parse_error`` and the accessor returns
None instead of raising.
"""

from __future__ import annotations

import email.errors
import email.utils
import re
from datetime import datetime
from email.header import decode_header, make_header
from email.headerregistry import HeaderRegistry
from types import MappingProxyType
from typing import Any

from . import charset

# RFC 5322 unfolding: drop CRLF that is followed by white space.
_FOLD_RE = re.compile(r"\r?\n(?=[ \t])")

_registry = HeaderRegistry()


def unfold(raw_value: str) -> str:
    return _FOLD_RE.sub("", raw_value)


class Field:
    """A header field with an uninterpreted value."""

    def __init__(self, name: str, raw_value: str) -> None:
        self._name = name
        self._raw_value = raw_value

    @property
    def name(self) -> str:
        return self._name

    @property
    def raw_value(self) -> str:
        return self._raw_value

    @property
    def body(self) -> str:
        """The unfolded raw value without surrounding white space."""
        return unfold(self._raw_value).strip()

    @property
    def parse_error(self) -> str | None:
        return None

    def matches(self, name: str) -> bool:
        return self._name.lower() == name.lower()

    def copy(self) -> Field:
        return type(self)(self._name, self._raw_value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Field):
            return NotImplemented
        return (
            type(self) is type(other)
            and self._name == other._name
            and self._raw_value == other._raw_value
        )

    def __hash__(self) -> int:
        return hash((type(self), self._name, self._raw_value))

    def __str__(self) -> str:
        return f"{self._name}: {self._raw_value}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._name!r}, {self._raw_value!r})"


class UnstructuredField(Field):
    """Free text such as Subject; encoded-words are decoded to plain text."""

    _value: str | None = None

    @property
    def value(self) -> str:
        if self._value is None:
            self._value = _decode_words(self.body)
        return self._value


class DateTimeField(Field):
    """An RFC 5322 date-time value such as Date or Resent-Date."""

    _parsed = False
    _date: datetime | None = None
    _error: str | None = None

    @property
    def date(self) -> datetime | None:
        self._parse()
        return self._date

    @property
    def parse_error(self) -> str | None:
        self._parse()
        return self._error

    def _parse(self) -> None:
        if self._parsed:
            return
        self._parsed = True
        try:
            self._date = email.utils.parsedate_to_datetime(self.body)
        except (TypeError, ValueError, IndexError, OverflowError) as exc:
            self._error = f"invalid date {self.body!r}: {exc}"


class _RegistryField(Field):
    """Base for MIME fields parsed through :mod:`email.headerregistry`."""

    _header: Any = None

    @property
    def _parsed(self) -> Any:
        if self._header is None:
            self._header = _registry(self._name, self.body)
        return self._header

    @property
    def parameters(self) -> MappingProxyType:
        return self._parsed.params

    @property
    def parse_error(self) -> str | None:
        defects = self._parsed.defects
        if not defects:
            return None
        return "; ".join(str(d) or type(d).__name__ for d in defects)


class ContentTypeField(_RegistryField):
    """Content-Type: media type, subtype and parameters."""

    @property
    def mime_type(self) -> str:
        return self._parsed.content_type

    @property
    def media_type(self) -> str:
        return self._parsed.maintype

    @property
    def sub_type(self) -> str:
        return self._parsed.subtype

    @property
    def boundary(self) -> str | None:
        return self.parameters.get("boundary")

    @property
    def charset(self) -> str | None:
        return self.parameters.get("charset")

    def is_multipart(self) -> bool:
        return self.media_type == "multipart"


class ContentTransferEncodingField(Field):
    """Content-Transfer-Encoding, lower-cased, defaulting to 7bit."""

    @property
    def encoding(self) -> str:
        return self.body.lower() or "7bit"


class ContentDispositionField(_RegistryField):
    """Content-Disposition: inline/attachment plus parameters."""

    @property
    def disposition_type(self) -> str | None:
        return self._parsed.content_disposition

    @property
    def filename(self) -> str | None:
        return self.parameters.get("filename")


FIELD_TYPES: dict[str, type[Field]] = {
    "content-type": ContentTypeField,
    "content-transfer-encoding": ContentTransferEncodingField,
    "content-disposition": ContentDispositionField,
    "date": DateTimeField,
    "resent-date": DateTimeField,
    "message-id": Field,
    "resent-message-id": Field,
    "content-id": Field,
    "in-reply-to": Field,
    "references": Field,
}


def parse_field(name: str, raw_value: str) -> Field:
    """Create the typed field registered for *name* (UnstructuredField if none)."""
    field_type = FIELD_TYPES.get(name.lower(), UnstructuredField)
    return field_type(name, raw_value)


def _decode_words(text: str) -> str:
    if "=?" not in text:
        return text
    try:
        return str(make_header(decode_header(text)))
    except (LookupError, UnicodeError, email.errors.HeaderParseError):
        pass

    # Unknown or lying charset in an encoded-word: decode chunk by chunk.
    try:
        chunks = decode_header(text)
    except (UnicodeError, email.errors.HeaderParseError):
        return text
    parts: list[str] = []
    for chunk, chunk_charset in chunks:
        if isinstance(chunk, str):
            parts.append(chunk)
        else:
            parts.append(charset.decode(chunk, chunk_charset or "us-ascii"))
    return "".join(parts)
