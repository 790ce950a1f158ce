"""Umbrella MIME — an in-memory entity tree for RFC 2045 messages.

Public API re-exported here for convenience::

    from umbrella_mime import Message, MessageBuilder, Multipart
"""

from .bodies import (
    BodyFactory,
    BytesBinaryBody,
    StorageBinaryBody,
    StorageTextBody,
    StreamBody,
    StringTextBody,
)
from .body import BinaryBody, Body, SingleBody, TextBody
from .builder import MessageBuilder
from .charset import US_ASCII, UTF_8, Charset, is_ascii, lookup
from .config import MimeConfig, ParserConfig, StorageConfig
from .entity import BodyPart, Entity
from .events import ContentHandler, Event, EventType
from .exceptions import (
    BodyOwnershipError,
    MimeError,
    MimeFormatError,
    MimeLimitError,
    StorageIOError,
    StructuralProtocolError,
    UnrecognizedBodyTypeError,
    UnsupportedCopyError,
)
from .field import (
    ContentDispositionField,
    ContentTransferEncodingField,
    ContentTypeField,
    DateTimeField,
    Field,
    UnstructuredField,
    parse_field,
)
from .header import Header
from .logging import setup_logging
from .message import Message
from .multipart import Multipart
from .parser import MimeStreamParser
from .storage import (
    MemoryStorageProvider,
    StorageProvider,
    TempFileStorageProvider,
    ThresholdStorageProvider,
    create_storage_provider,
)
from .writer import MessageWriter

__all__ = [
    "BinaryBody",
    "Body",
    "BodyFactory",
    "BodyOwnershipError",
    "BodyPart",
    "BytesBinaryBody",
    "Charset",
    "ContentDispositionField",
    "ContentHandler",
    "ContentTransferEncodingField",
    "ContentTypeField",
    "DateTimeField",
    "Entity",
    "Event",
    "EventType",
    "Field",
    "Header",
    "MemoryStorageProvider",
    "Message",
    "MessageBuilder",
    "MessageWriter",
    "MimeConfig",
    "MimeError",
    "MimeFormatError",
    "MimeLimitError",
    "MimeStreamParser",
    "Multipart",
    "ParserConfig",
    "SingleBody",
    "StorageBinaryBody",
    "StorageConfig",
    "StorageIOError",
    "StorageProvider",
    "StorageTextBody",
    "StreamBody",
    "StringTextBody",
    "StructuralProtocolError",
    "TempFileStorageProvider",
    "TextBody",
    "ThresholdStorageProvider",
    "US_ASCII",
    "UTF_8",
    "UnrecognizedBodyTypeError",
    "UnstructuredField",
    "UnsupportedCopyError",
    "create_storage_provider",
    "is_ascii",
    "lookup",
    "parse_field",
    "setup_logging",
]
