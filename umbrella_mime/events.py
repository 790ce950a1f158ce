"""Structural parse events and the ContentHandler interface that consumes them.

A tokenizer reports a message as a well-nested sequence of events.  It can
either call the handler method for each event directly (push) or produce
:class:`Event` objects that are fed to :meth:`ContentHandler.handle` (pull).
"""

from __future__ import annotations

import abc
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO


class EventType(str, Enum):
    """Kinds of structural events, in the order they may be nested."""

    START_MESSAGE = "start_message"
    END_MESSAGE = "end_message"
    START_HEADER = "start_header"
    FIELD = "field"
    END_HEADER = "end_header"
    START_MULTIPART = "start_multipart"
    PREAMBLE = "preamble"
    START_BODY_PART = "start_body_part"
    END_BODY_PART = "end_body_part"
    EPILOGUE = "epilogue"
    END_MULTIPART = "end_multipart"
    BODY = "body"


@dataclass(frozen=True)
class Event:
    """One structural event with its payload, if any.

    ``name``/``value`` are set for FIELD, ``boundary`` for START_MULTIPART,
    ``text`` for PREAMBLE/EPILOGUE and ``content`` for BODY.
    """

    type: EventType
    name: str | None = None
    value: str | None = None
    boundary: str | None = None
    text: str | None = None
    content: BinaryIO | None = None

    @classmethod
    def start_message(cls) -> Event:
        return cls(EventType.START_MESSAGE)

    @classmethod
    def end_message(cls) -> Event:
        return cls(EventType.END_MESSAGE)

    @classmethod
    def start_header(cls) -> Event:
        return cls(EventType.START_HEADER)

    @classmethod
    def field(cls, name: str, value: str) -> Event:
        return cls(EventType.FIELD, name=name, value=value)

    @classmethod
    def end_header(cls) -> Event:
        return cls(EventType.END_HEADER)

    @classmethod
    def start_multipart(cls, boundary: str) -> Event:
        return cls(EventType.START_MULTIPART, boundary=boundary)

    @classmethod
    def preamble(cls, text: str) -> Event:
        return cls(EventType.PREAMBLE, text=text)

    @classmethod
    def start_body_part(cls) -> Event:
        return cls(EventType.START_BODY_PART)

    @classmethod
    def end_body_part(cls) -> Event:
        return cls(EventType.END_BODY_PART)

    @classmethod
    def epilogue(cls, text: str) -> Event:
        return cls(EventType.EPILOGUE, text=text)

    @classmethod
    def end_multipart(cls) -> Event:
        return cls(EventType.END_MULTIPART)

    @classmethod
    def body(cls, content: BinaryIO) -> Event:
        return cls(EventType.BODY, content=content)


class ContentHandler(abc.ABC):
    """Receives the structural events of one message."""

    @abc.abstractmethod
    def start_message(self) -> None: ...

    @abc.abstractmethod
    def end_message(self) -> None: ...

    @abc.abstractmethod
    def start_header(self) -> None: ...

    @abc.abstractmethod
    def field(self, name: str, raw_value: str) -> None: ...

    @abc.abstractmethod
    def end_header(self) -> None: ...

    @abc.abstractmethod
    def start_multipart(self, boundary: str) -> None: ...

    @abc.abstractmethod
    def preamble(self, text: str) -> None: ...

    @abc.abstractmethod
    def start_body_part(self) -> None: ...

    @abc.abstractmethod
    def end_body_part(self) -> None: ...

    @abc.abstractmethod
    def epilogue(self, text: str) -> None: ...

    @abc.abstractmethod
    def end_multipart(self) -> None: ...

    @abc.abstractmethod
    def body(self, content: BinaryIO) -> None:
        """Leaf content, already decoded from its transfer encoding."""

    def handle(self, event: Event) -> None:
        """Dispatch a single :class:`Event` to the matching method."""
        if event.type is EventType.FIELD:
            self.field(event.name or "", event.value or "")
        elif event.type is EventType.START_MULTIPART:
            self.start_multipart(event.boundary or "")
        elif event.type is EventType.PREAMBLE:
            self.preamble(event.text or "")
        elif event.type is EventType.EPILOGUE:
            self.epilogue(event.text or "")
        elif event.type is EventType.BODY:
            if event.content is None:
                raise ValueError("body event without content")
            self.body(event.content)
        else:
            getattr(self, event.type.value)()
