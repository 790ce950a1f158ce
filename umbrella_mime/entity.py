"""Entity: a header plus an owned body, the node type of a MIME tree."""

from __future__ import annotations

import weakref
from typing import Any

from . import fields
from .bodies import StringTextBody
from .body import Body, SingleBody
from .exceptions import BodyOwnershipError, UnrecognizedBodyTypeError
from .field import ContentDispositionField, ContentTransferEncodingField, ContentTypeField
from .header import Header
from .multipart import Multipart, generate_boundary


class Entity:
    """A MIME entity: an optional :class:`Header` and an optional :class:`Body`.

    Reading never allocates a header: :attr:`header` is None until one is
    assigned or :meth:`ensure_header` is called by a mutating accessor.
    The body is exclusively owned; ``parent`` is a weak, lookup-only
    reference to the enclosing entity.
    """

    def __init__(self) -> None:
        self._header: Header | None = None
        self._body: Body | None = None
        self._parent_ref: weakref.ReferenceType[Entity] | None = None
        self._in_multipart = False

    # ------------------------------------------------------------------
    # Tree position
    # ------------------------------------------------------------------

    @property
    def parent(self) -> Entity | None:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def _set_parent(self, entity: Entity | None) -> None:
        self._parent_ref = weakref.ref(entity) if entity is not None else None

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------

    @property
    def header(self) -> Header | None:
        return self._header

    @header.setter
    def header(self, header: Header | None) -> None:
        self._header = header

    def ensure_header(self) -> Header:
        """Return the header, creating and attaching an empty one if needed."""
        if self._header is None:
            self._header = Header()
        return self._header

    def _get_field(self, name: str) -> Any:
        if self._header is None:
            return None
        return self._header.get_field(name)

    # ------------------------------------------------------------------
    # Body
    # ------------------------------------------------------------------

    @property
    def body(self) -> Body | None:
        return self._body

    def set_body(self, body: Body, mime_type: str | None = None, **params: str) -> None:
        """Attach *body*, optionally setting Content-Type to *mime_type*.

        Raises :class:`BodyOwnershipError` if this entity already has a body
        or *body* still belongs to another entity.
        """
        if self._body is not None:
            raise BodyOwnershipError("entity already has a body; remove it first")
        if body.parent is not None or getattr(body, "_in_multipart", False):
            raise BodyOwnershipError("body is owned by another entity; remove it there first")
        if body is self:
            raise BodyOwnershipError("an entity cannot be its own body")

        if mime_type is not None:
            self.ensure_header().set_field(fields.content_type(mime_type, **params))
        self._body = body
        body._set_parent(self)

    def remove_body(self) -> Body | None:
        """Detach and return the body, leaving its storage intact."""
        body, self._body = self._body, None
        if body is not None:
            body._set_parent(None)
        return body

    def set_text(self, text: str, subtype: str = "plain", charset: str = "utf-8") -> None:
        self.set_body(StringTextBody(text, charset), f"text/{subtype}", charset=charset)

    def set_multipart(self, multipart: Multipart) -> None:
        if not multipart.boundary:
            multipart.boundary = generate_boundary()
        self.set_body(multipart, f"multipart/{multipart.subtype}", boundary=multipart.boundary)

    def set_message(self, message: Entity) -> None:
        self.set_body(message, "message/rfc822")  # type: ignore[arg-type]

    def dispose(self) -> None:
        """Release storage held anywhere below this entity."""
        if self._body is not None:
            self._body.dispose()

    def __enter__(self) -> Entity:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()

    # ------------------------------------------------------------------
    # MIME metadata
    # ------------------------------------------------------------------

    @property
    def mime_type(self) -> str:
        """Content-Type media type, or the RFC 2045 default for this position."""
        field: ContentTypeField | None = self._get_field(fields.CONTENT_TYPE)
        if field is not None and field.parse_error is None:
            return field.mime_type
        parent = self.parent
        if parent is not None and parent.mime_type == "multipart/digest":
            return "message/rfc822"
        return "text/plain"

    @property
    def charset(self) -> str:
        field: ContentTypeField | None = self._get_field(fields.CONTENT_TYPE)
        if field is not None and field.charset:
            return field.charset
        return "us-ascii"

    @property
    def content_transfer_encoding(self) -> str:
        field: ContentTransferEncodingField | None = self._get_field(fields.CONTENT_TRANSFER_ENCODING)
        if field is None:
            return "7bit"
        return field.encoding

    @property
    def filename(self) -> str | None:
        field: ContentDispositionField | None = self._get_field(fields.CONTENT_DISPOSITION)
        if field is None:
            return None
        return field.filename

    def is_multipart(self) -> bool:
        return self.mime_type.startswith("multipart/") and isinstance(self._body, Multipart)

    # ------------------------------------------------------------------
    # Copy
    # ------------------------------------------------------------------

    def copy(self) -> Entity:
        """Deep copy of this entity, detached from the tree (``parent`` is None).

        Raises :class:`~umbrella_mime.exceptions.UnsupportedCopyError` if a
        single body below cannot be duplicated and
        :class:`~umbrella_mime.exceptions.UnrecognizedBodyTypeError` for a
        body of any other kind than Message, Multipart or SingleBody.
        """
        other = type(self)()
        if self._header is not None:
            other._header = self._header.copy()
        if self._body is not None:
            other.set_body(copy_body(self._body))
        return other

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.mime_type}>"


class BodyPart(Entity):
    """An entity contained in a :class:`Multipart`."""


def copy_body(body: Body) -> Body:
    """Copy a body according to its variant."""
    from .message import Message

    if isinstance(body, Message):
        return body.copy()
    if isinstance(body, Multipart):
        return body.copy()
    if isinstance(body, SingleBody):
        return body.copy()
    raise UnrecognizedBodyTypeError(f"cannot copy body of type {type(body).__name__}")
