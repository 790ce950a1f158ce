"""MessageWriter — serialises an entity tree back to RFC 822 bytes."""

from __future__ import annotations

import base64
import io
import quopri
import shutil
from typing import BinaryIO

from .body import Body, SingleBody
from .entity import Entity
from .exceptions import UnrecognizedBodyTypeError
from .multipart import Multipart

CRLF = b"\r\n"


class MessageWriter:
    """Writes header fields verbatim and re-applies transfer encodings to leaf bodies."""

    def to_bytes(self, entity: Entity) -> bytes:
        out = io.BytesIO()
        self.write_entity(entity, out)
        return out.getvalue()

    def write_entity(self, entity: Entity, out: BinaryIO) -> None:
        if entity.header is not None:
            for field in entity.header:
                out.write(_to_crlf(f"{field.name}: {field.raw_value}"))
                out.write(CRLF)
        out.write(CRLF)
        if entity.body is not None:
            self.write_body(entity.body, out, entity.content_transfer_encoding)

    def write_body(self, body: Body, out: BinaryIO, transfer_encoding: str = "7bit") -> None:
        if isinstance(body, Entity):
            self.write_entity(body, out)
        elif isinstance(body, Multipart):
            self._write_multipart(body, out)
        elif isinstance(body, SingleBody):
            self._write_single(body, out, transfer_encoding)
        else:
            raise UnrecognizedBodyTypeError(f"cannot write body of type {type(body).__name__}")

    def _write_multipart(self, multipart: Multipart, out: BinaryIO) -> None:
        if not multipart.boundary:
            raise ValueError("multipart body has no boundary")
        delimiter = b"--" + multipart.boundary.encode("ascii")

        if multipart.preamble:
            out.write(_to_crlf(multipart.preamble))
            out.write(CRLF)
        for part in multipart.body_parts:
            out.write(delimiter + CRLF)
            self.write_entity(part, out)
            out.write(CRLF)
        out.write(delimiter + b"--" + CRLF)
        if multipart.epilogue:
            out.write(_to_crlf(multipart.epilogue))

    def _write_single(self, body: SingleBody, out: BinaryIO, transfer_encoding: str) -> None:
        if transfer_encoding == "base64":
            out.write(base64.encodebytes(body.read()).replace(b"\n", CRLF))
        elif transfer_encoding == "quoted-printable":
            encoded = quopri.encodestring(body.read().replace(CRLF, b"\n"))
            out.write(encoded.replace(b"\n", CRLF))
        else:
            with body.open() as stream:
                shutil.copyfileobj(stream, out)


def _to_crlf(text: str) -> bytes:
    return text.replace("\r\n", "\n").replace("\n", "\r\n").encode("utf-8", "surrogateescape")
