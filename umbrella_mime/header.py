"""The header of an entity: an ordered list of fields."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .field import Field


class Header:
    """Insertion-ordered header fields.

    Duplicate names are allowed and keep their order (Received, Resent-*).
    Lookups compare names case-insensitively and return the first match.
    """

    def __init__(self, fields: Iterable[Field] = ()) -> None:
        self._fields: list[Field] = list(fields)

    def add_field(self, field: Field) -> None:
        """Append *field* after all existing fields."""
        self._fields.append(field)

    def get_field(self, name: str) -> Field | None:
        """Return the first field called *name*, or None."""
        for field in self._fields:
            if field.matches(name):
                return field
        return None

    def get_fields(self, name: str | None = None) -> list[Field]:
        """Return all fields, or all fields called *name*, in order."""
        if name is None:
            return list(self._fields)
        return [f for f in self._fields if f.matches(name)]

    def set_field(self, field: Field) -> None:
        """Replace the first field with the same name and drop the others.

        The replacement keeps the position of the field it replaces; if no
        field has that name, *field* is appended.
        """
        replaced = False
        kept: list[Field] = []
        for existing in self._fields:
            if existing.matches(field.name):
                if not replaced:
                    kept.append(field)
                    replaced = True
                continue
            kept.append(existing)
        if not replaced:
            kept.append(field)
        self._fields = kept

    def remove_fields(self, name: str) -> int:
        """Remove every field called *name*.  Returns how many were removed."""
        before = len(self._fields)
        self._fields = [f for f in self._fields if not f.matches(name)]
        return before - len(self._fields)

    def copy(self) -> Header:
        return Header(f.copy() for f in self._fields)

    def __iter__(self) -> Iterator[Field]:
        return iter(list(self._fields))

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get_field(name) is not None

    def __str__(self) -> str:
        return "".join(f"{field}\r\n" for field in self._fields)

    def __repr__(self) -> str:
        return f"Header({self._fields!r})"
