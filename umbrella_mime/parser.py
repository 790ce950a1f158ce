"""MimeStreamParser — turns raw RFC 822 bytes into structural parse events.

Tokenizing is done by ``email.parser.BytesParser`` with the ``compat32``
policy, which keeps header values exactly as they appear on the wire.  The
resulting tree is walked depth-first and reported to a
:class:`~umbrella_mime.events.ContentHandler`; transfer encodings are
decoded before a body event is emitted.
"""

from __future__ import annotations

import email.parser
import email.policy
import io
from email.message import Message as StdlibMessage
from typing import BinaryIO

import structlog

from . import charset
from .config import ParserConfig
from .events import ContentHandler
from .exceptions import MimeFormatError, MimeLimitError

logger = structlog.get_logger()

_NESTED_MESSAGE_TYPES = ("message/rfc822", "message/global")


class MimeStreamParser:
    """Stateless tokenizer: raw bytes → events on a ContentHandler."""

    def __init__(self, config: ParserConfig | None = None) -> None:
        self._config = config or ParserConfig()

    def parse(self, source: bytes | BinaryIO, handler: ContentHandler) -> None:
        raw_bytes = self._read(source)
        msg = email.parser.BytesParser(policy=email.policy.compat32).parsebytes(raw_bytes)

        handler.start_message()
        self._walk(msg, handler)
        handler.end_message()

    def _read(self, source: bytes | BinaryIO) -> bytes:
        limit = self._config.max_content_length
        if isinstance(source, (bytes, bytearray, memoryview)):
            raw_bytes = bytes(source)
        else:
            raw_bytes = source.read() if limit is None else source.read(limit + 1)
        if limit is not None and len(raw_bytes) > limit:
            raise MimeLimitError(f"message exceeds max_content_length of {limit} bytes")
        return raw_bytes

    # ------------------------------------------------------------------
    # Tree walk
    # ------------------------------------------------------------------

    def _walk(self, part: StdlibMessage, handler: ContentHandler) -> None:
        self._check_defects(part)
        self._emit_header(part, handler)

        content_type = part.get_content_type()
        if not part.is_multipart():
            payload = part.get_payload(decode=True)
            handler.body(io.BytesIO(payload or b""))
            return

        if content_type in _NESTED_MESSAGE_TYPES:
            nested = part.get_payload(0)
            handler.start_message()
            self._walk(nested, handler)
            handler.end_message()
            return

        if part.get_content_maintype() == "message":
            # message/delivery-status and friends hold bare header blocks.
            blocks = b"".join(sub.as_bytes(policy=email.policy.compat32) for sub in part.get_payload())
            handler.body(io.BytesIO(blocks))
            return

        handler.start_multipart(part.get_boundary() or "")
        if part.preamble is not None:
            handler.preamble(part.preamble)
        for sub in part.get_payload():
            handler.start_body_part()
            self._walk(sub, handler)
            handler.end_body_part()
        if part.epilogue is not None:
            handler.epilogue(part.epilogue)
        handler.end_multipart()

    def _emit_header(self, part: StdlibMessage, handler: ContentHandler) -> None:
        items = list(part.raw_items())
        limit = self._config.max_header_count
        if len(items) > limit:
            if self._config.strict:
                raise MimeLimitError(f"entity has {len(items)} header fields, limit is {limit}")
            logger.warning("mime_header_fields_truncated", count=len(items), limit=limit)
            items = items[:limit]

        handler.start_header()
        for name, value in items:
            handler.field(name, _raw_header_value(value))
        handler.end_header()

    def _check_defects(self, part: StdlibMessage) -> None:
        if not part.defects:
            return
        names = [type(defect).__name__ for defect in part.defects]
        if self._config.strict:
            raise MimeFormatError(f"malformed MIME entity: {', '.join(names)}")
        logger.warning("mime_defects", defects=names, content_type=part.get_content_type())


def _raw_header_value(value: str) -> str:
    """Undo the parser's surrogate escaping of 8-bit header bytes."""
    if not any("\udc80" <= ch <= "\udcff" for ch in value):
        return value
    raw = value.encode("ascii", "surrogateescape")
    return charset.decode(raw, "utf-8")
