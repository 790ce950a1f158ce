"""Exception hierarchy for the MIME entity model.

Structural and storage failures abort the construction or copy in
progress.  Field-level decode failures never surface here: typed fields
keep them on ``parse_error`` and their accessors return ``None``.
"""

from __future__ import annotations


class MimeError(Exception):
    """Base class for every error raised by :mod:`umbrella_mime`."""


class StructuralProtocolError(MimeError):
    """The event source broke the start/end nesting discipline."""


class UnsupportedCopyError(MimeError, NotImplementedError):
    """A single body without duplication support was asked to copy itself."""


class UnrecognizedBodyTypeError(MimeError, TypeError):
    """A body is neither a Message, a Multipart nor a SingleBody."""


class BodyOwnershipError(MimeError, RuntimeError):
    """A body or body part would end up owned by two entities."""


class StorageIOError(MimeError, OSError):
    """Reading or writing body content failed.

    ``context`` names the builder frame that was active, e.g.
    ``"message/multipart/part[1]"``.
    """

    def __init__(self, message: str, *, context: str = "") -> None:
        super().__init__(message)
        self.context = context

    def __str__(self) -> str:
        base = super().__str__()
        if self.context:
            return f"{base} (while building {self.context})"
        return base


class MimeFormatError(MimeError):
    """Malformed input rejected in strict parsing mode."""


class MimeLimitError(MimeError):
    """A configured parser or builder limit was exceeded."""
