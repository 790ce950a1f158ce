"""Body base classes.

A body is one of three closed variants: a nested
:class:`~umbrella_mime.message.Message`, a
:class:`~umbrella_mime.multipart.Multipart`, or a :class:`SingleBody` leaf.
"""

from __future__ import annotations

import abc
import shutil
import weakref
from typing import TYPE_CHECKING, BinaryIO

from . import charset as charset_util
from .exceptions import UnsupportedCopyError

if TYPE_CHECKING:
    from .entity import Entity


class Body(abc.ABC):
    """Content owned by exactly one entity.

    ``parent`` is a weak back-reference used for lookups only; it never
    keeps the owning entity alive.
    """

    _parent_ref: weakref.ReferenceType[Entity] | None = None

    @property
    def parent(self) -> Entity | None:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def _set_parent(self, entity: Entity | None) -> None:
        self._parent_ref = weakref.ref(entity) if entity is not None else None

    @abc.abstractmethod
    def dispose(self) -> None:
        """Release any storage held by this body."""


class SingleBody(Body):
    """Leaf content readable as a byte stream."""

    @abc.abstractmethod
    def open(self) -> BinaryIO:
        """Return a new binary stream over the content."""

    def read(self) -> bytes:
        with self.open() as stream:
            return stream.read()

    def write_to(self, out: BinaryIO) -> None:
        with self.open() as stream:
            shutil.copyfileobj(stream, out)

    def copy(self) -> SingleBody:
        """Return an independent copy of this body.

        Raises :class:`UnsupportedCopyError` unless the concrete body can
        duplicate its content.
        """
        raise UnsupportedCopyError(f"{type(self).__name__} does not support copy()")

    def dispose(self) -> None:
        pass


class BinaryBody(SingleBody):
    """Leaf content without a character set."""


class TextBody(SingleBody):
    """Leaf content holding encoded text in a declared charset."""

    def __init__(self, mime_charset: str = "us-ascii") -> None:
        self._mime_charset = mime_charset

    @property
    def mime_charset(self) -> str:
        return self._mime_charset

    @property
    def text(self) -> str:
        """The content decoded with its charset (detected if that fails)."""
        return charset_util.decode(self.read(), self._mime_charset)
