"""Concrete single bodies and the factory that stores them."""

from __future__ import annotations

import io
from typing import BinaryIO

from .body import BinaryBody, TextBody
from .charset import lookup
from .storage import MemoryStorageProvider, MultiReferenceStorage, Storage, StorageProvider


class StorageBinaryBody(BinaryBody):
    """Binary content held in a storage backend.  Copies share the storage."""

    def __init__(self, storage: Storage | MultiReferenceStorage) -> None:
        if not isinstance(storage, MultiReferenceStorage):
            storage = MultiReferenceStorage(storage)
        self._storage = storage
        self._disposed = False

    def open(self) -> BinaryIO:
        return self._storage.open()

    def copy(self) -> StorageBinaryBody:
        self._storage.add_reference()
        return StorageBinaryBody(self._storage)

    def dispose(self) -> None:
        """Release this body's reference to the storage.  Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        self._storage.delete()


class StorageTextBody(TextBody):
    """Encoded text held in a storage backend.  Copies share the storage."""

    def __init__(self, storage: Storage | MultiReferenceStorage, mime_charset: str = "us-ascii") -> None:
        super().__init__(mime_charset)
        if not isinstance(storage, MultiReferenceStorage):
            storage = MultiReferenceStorage(storage)
        self._storage = storage
        self._disposed = False

    def open(self) -> BinaryIO:
        return self._storage.open()

    def copy(self) -> StorageTextBody:
        self._storage.add_reference()
        return StorageTextBody(self._storage, self.mime_charset)

    def dispose(self) -> None:
        """Release this body's reference to the storage.  Idempotent."""
        if self._disposed:
            return
        self._disposed = True
        self._storage.delete()


class BytesBinaryBody(BinaryBody):
    """Binary content kept in memory."""

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)

    def open(self) -> BinaryIO:
        return io.BytesIO(self._data)

    def copy(self) -> BytesBinaryBody:
        return BytesBinaryBody(self._data)


class StringTextBody(TextBody):
    """Text kept in memory and encoded with *mime_charset* on read."""

    def __init__(self, text: str, mime_charset: str = "utf-8") -> None:
        resolved = lookup(mime_charset)
        if resolved is None:
            raise ValueError(f"Unsupported charset: {mime_charset}")
        super().__init__(mime_charset)
        self._text = text
        self._codec = resolved.codec

    @property
    def text(self) -> str:
        return self._text

    def open(self) -> BinaryIO:
        return io.BytesIO(self._text.encode(self._codec))

    def copy(self) -> StringTextBody:
        return StringTextBody(self._text, self.mime_charset)


class StreamBody(BinaryBody):
    """Wraps a caller-supplied stream that can be read exactly once.

    It cannot be duplicated, so copying an entity that holds one raises
    :class:`~umbrella_mime.exceptions.UnsupportedCopyError`.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream: BinaryIO | None = stream

    def open(self) -> BinaryIO:
        if self._stream is None:
            raise ValueError("StreamBody content has already been consumed")
        stream, self._stream = self._stream, None
        return stream

    def dispose(self) -> None:
        if self._stream is not None:
            self._stream.close()
            self._stream = None


class BodyFactory:
    """Creates storage-backed bodies through a :class:`StorageProvider`."""

    def __init__(self, storage_provider: StorageProvider | None = None) -> None:
        self._storage_provider = storage_provider or MemoryStorageProvider()

    @property
    def storage_provider(self) -> StorageProvider:
        return self._storage_provider

    def binary_body(self, content: bytes | BinaryIO) -> StorageBinaryBody:
        return StorageBinaryBody(self._store(content))

    def text_body(
        self,
        content: str | bytes | BinaryIO,
        mime_charset: str = "us-ascii",
    ) -> StorageTextBody:
        """Store text.  A ``str`` is encoded with *mime_charset* first."""
        if isinstance(content, str):
            resolved = lookup(mime_charset)
            if resolved is None:
                raise ValueError(f"Unsupported charset: {mime_charset}")
            content = content.encode(resolved.codec)
        return StorageTextBody(self._store(content), mime_charset)

    def _store(self, content: bytes | BinaryIO) -> Storage:
        if isinstance(content, (bytes, bytearray, memoryview)):
            content = io.BytesIO(bytes(content))
        return self._storage_provider.store(content)

