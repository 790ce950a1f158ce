"""Multipart bodies: an ordered list of body parts between a preamble and an epilogue."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from .body import Body
from .exceptions import BodyOwnershipError

if TYPE_CHECKING:
    from .entity import Entity


def generate_boundary() -> str:
    return f"=_Part_{uuid.uuid4().hex}"


class Multipart(Body):
    """A multipart body.

    Body parts report the entity that owns this multipart as their parent,
    so assigning the multipart to an entity re-parents every part.
    """

    def __init__(
        self,
        subtype: str = "mixed",
        boundary: str | None = None,
        preamble: str = "",
        epilogue: str = "",
    ) -> None:
        self.subtype = subtype
        self.boundary = boundary
        self.preamble = preamble
        self.epilogue = epilogue
        self._body_parts: list[Entity] = []

    def _set_parent(self, entity: Entity | None) -> None:
        super()._set_parent(entity)
        for part in self._body_parts:
            part._set_parent(entity)

    @property
    def body_parts(self) -> list[Entity]:
        return list(self._body_parts)

    @property
    def count(self) -> int:
        return len(self._body_parts)

    def add_body_part(self, part: Entity, index: int | None = None) -> None:
        """Insert *part* at *index* (append if None)."""
        if part._in_multipart or part.parent is not None:
            raise BodyOwnershipError("body part already belongs to a multipart")
        part._set_parent(self.parent)
        if index is None:
            self._body_parts.append(part)
        else:
            self._body_parts.insert(index, part)
        part._in_multipart = True

    def remove_body_part(self, index: int) -> Entity:
        """Detach and return the part at *index*."""
        part = self._body_parts.pop(index)
        part._set_parent(None)
        part._in_multipart = False
        return part

    def replace_body_part(self, part: Entity, index: int) -> Entity:
        """Put *part* at *index* and return the detached part it replaces."""
        if part._in_multipart:
            raise BodyOwnershipError("body part already belongs to a multipart")
        old = self.remove_body_part(index)
        self.add_body_part(part, index)
        return old

    def copy(self) -> Multipart:
        """Deep copy: boundary, preamble, epilogue and every body part in order."""
        other = Multipart(self.subtype, self.boundary, self.preamble, self.epilogue)
        try:
            for part in self._body_parts:
                other.add_body_part(part.copy())
        except Exception:
            other.dispose()
            raise
        return other

    def dispose(self) -> None:
        for part in self._body_parts:
            part.dispose()

    def __repr__(self) -> str:
        return f"Multipart({self.subtype!r}, parts={len(self._body_parts)})"
