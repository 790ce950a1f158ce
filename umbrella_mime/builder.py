"""MessageBuilder — populates an entity tree from structural parse events."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import BinaryIO, NoReturn

import structlog

from .bodies import StorageBinaryBody, StorageTextBody
from .config import ParserConfig
from .entity import BodyPart, Entity
from .events import ContentHandler, Event
from .exceptions import MimeLimitError, StorageIOError, StructuralProtocolError
from .field import parse_field
from .header import Header
from .message import Message
from .multipart import Multipart
from .storage import MemoryStorageProvider, StorageProvider

logger = structlog.get_logger()

_MESSAGE = "message"
_BODY_PART = "part"
_MULTIPART = "multipart"


@dataclass
class _Frame:
    kind: str
    node: Entity | Multipart
    label: str
    in_header: bool = False
    header_done: bool = False
    epilogue_seen: bool = False


class MessageBuilder(ContentHandler):
    """Builds *entity* from a strictly nested event stream.

    Every start event pushes a frame and the matching end event pops it.
    An event that does not fit the current frame raises
    :class:`StructuralProtocolError`; after any failure the builder is
    aborted and rejects further events.  The partially built tree is left
    to the caller to discard.
    """

    def __init__(
        self,
        entity: Entity,
        storage_provider: StorageProvider | None = None,
        config: ParserConfig | None = None,
    ) -> None:
        self._entity = entity
        self._storage_provider = storage_provider or MemoryStorageProvider()
        self._max_depth = (config or ParserConfig()).max_nesting_depth
        self._stack: list[_Frame] = []
        self._started = False
        self._aborted = False

    @property
    def entity(self) -> Entity:
        return self._entity

    @property
    def is_complete(self) -> bool:
        return self._started and not self._stack and not self._aborted

    def build(self, events: Iterable[Event]) -> Entity:
        """Feed every event in *events* and return the finished entity."""
        for event in events:
            self.handle(event)
        if not self.is_complete:
            self._fail("event stream ended before the message was complete")
        return self._entity

    # ------------------------------------------------------------------
    # Messages and body parts
    # ------------------------------------------------------------------

    def start_message(self) -> None:
        self._check_live()
        if not self._started:
            self._started = True
            self._push(_Frame(_MESSAGE, self._entity, _MESSAGE))
            return
        if not self._stack:
            self._fail("start_message after the message was complete")

        frame = self._expect_entity_awaiting_body("start_message")
        message = Message()
        frame.node.set_body(message)
        self._push(_Frame(_MESSAGE, message, _MESSAGE))

    def end_message(self) -> None:
        self._check_live()
        self._pop(_MESSAGE, "end_message")
        if not self._stack:
            logger.debug("message_built", entity=type(self._entity).__name__)

    def start_body_part(self) -> None:
        self._check_live()
        frame = self._expect(_MULTIPART, "start_body_part")
        if frame.epilogue_seen:
            self._fail("start_body_part after the epilogue")
        multipart: Multipart = frame.node  # type: ignore[assignment]
        part = BodyPart()
        multipart.add_body_part(part)
        self._push(_Frame(_BODY_PART, part, f"{_BODY_PART}[{multipart.count - 1}]"))

    def end_body_part(self) -> None:
        self._check_live()
        self._pop(_BODY_PART, "end_body_part")

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------

    def start_header(self) -> None:
        self._check_live()
        frame = self._expect_entity("start_header")
        if frame.in_header or frame.header_done:
            self._fail("start_header for an entity that already has a header")
        if frame.node.body is not None:
            self._fail("start_header after the body")
        frame.node.header = Header()
        frame.in_header = True

    def field(self, name: str, raw_value: str) -> None:
        self._check_live()
        frame = self._expect_entity("field")
        if not frame.in_header:
            self._fail("field outside start_header/end_header")
        frame.node.header.add_field(parse_field(name, raw_value))

    def end_header(self) -> None:
        self._check_live()
        frame = self._expect_entity("end_header")
        if not frame.in_header:
            self._fail("end_header without start_header")
        frame.in_header = False
        frame.header_done = True

    # ------------------------------------------------------------------
    # Multipart
    # ------------------------------------------------------------------

    def start_multipart(self, boundary: str) -> None:
        self._check_live()
        frame = self._expect_entity_awaiting_body("start_multipart")
        entity: Entity = frame.node  # type: ignore[assignment]
        subtype = "mixed"
        if entity.mime_type.startswith("multipart/"):
            subtype = entity.mime_type.split("/", 1)[1]
        multipart = Multipart(subtype, boundary)
        entity.set_body(multipart)
        self._push(_Frame(_MULTIPART, multipart, _MULTIPART))

    def preamble(self, text: str) -> None:
        self._check_live()
        frame = self._expect(_MULTIPART, "preamble")
        multipart: Multipart = frame.node  # type: ignore[assignment]
        if multipart.count or frame.epilogue_seen:
            self._fail("preamble after the first body part")
        multipart.preamble = text

    def epilogue(self, text: str) -> None:
        self._check_live()
        frame = self._expect(_MULTIPART, "epilogue")
        frame.node.epilogue = text  # type: ignore[union-attr]
        frame.epilogue_seen = True

    def end_multipart(self) -> None:
        self._check_live()
        self._pop(_MULTIPART, "end_multipart")

    # ------------------------------------------------------------------
    # Leaf content
    # ------------------------------------------------------------------

    def body(self, content: BinaryIO) -> None:
        """Store *content* through the storage provider and attach it."""
        self._check_live()
        frame = self._expect_entity_awaiting_body("body")
        entity: Entity = frame.node  # type: ignore[assignment]

        try:
            storage = self._storage_provider.store(content)
        except OSError as exc:
            self._aborted = True
            context = self._context()
            logger.warning("body_storage_failed", context=context, error=str(exc))
            raise StorageIOError(f"failed to store body content: {exc}", context=context) from exc

        if entity.mime_type.startswith("text/"):
            entity.set_body(StorageTextBody(storage, entity.charset))
        else:
            entity.set_body(StorageBinaryBody(storage))
        logger.debug("body_stored", context=self._context(), mime_type=entity.mime_type)

    # ------------------------------------------------------------------
    # Stack discipline
    # ------------------------------------------------------------------

    def _check_live(self) -> None:
        if self._aborted:
            raise StructuralProtocolError("construction was aborted by an earlier error")

    def _push(self, frame: _Frame) -> None:
        if len(self._stack) >= self._max_depth:
            self._aborted = True
            raise MimeLimitError(
                f"nesting deeper than {self._max_depth} levels at {self._context()}"
            )
        self._stack.append(frame)

    def _pop(self, kind: str, event: str) -> _Frame:
        frame = self._expect(kind, event)
        if frame.in_header:
            self._fail(f"{event} inside an unfinished header")
        return self._stack.pop()

    def _expect(self, kind: str, event: str) -> _Frame:
        if not self._stack:
            self._fail(f"{event} outside of any open {kind}")
        frame = self._stack[-1]
        if frame.kind != kind:
            self._fail(f"{event} while a {frame.kind} is open")
        return frame

    def _expect_entity(self, event: str) -> _Frame:
        if not self._stack:
            self._fail(f"{event} outside of any open message or body part")
        frame = self._stack[-1]
        if frame.kind == _MULTIPART:
            self._fail(f"{event} directly inside a multipart")
        return frame

    def _expect_entity_awaiting_body(self, event: str) -> _Frame:
        frame = self._expect_entity(event)
        if frame.in_header:
            self._fail(f"{event} inside an unfinished header")
        if frame.node.body is not None:
            self._fail(f"{event} for an entity that already has a body")
        return frame

    def _context(self) -> str:
        return "/".join(frame.label for frame in self._stack) or "<top>"

    def _fail(self, reason: str) -> NoReturn:
        self._aborted = True
        context = self._context()
        logger.warning("mime_protocol_violation", reason=reason, context=context)
        raise StructuralProtocolError(f"{reason} (at {context})")
