"""Storage backends for body content.

Body bytes are written through a :class:`StorageSink`, which is sealed into
an immutable :class:`Storage`.  A sink that is left without being sealed is
aborted, whichever way the ``with`` block exits, so a failed write never
leaks a temporary file.
"""

from __future__ import annotations

import abc
import io
import os
import tempfile
from pathlib import Path
from typing import BinaryIO

import structlog

from .config import StorageConfig

logger = structlog.get_logger()

CHUNK_SIZE = 64 * 1024


class Storage(abc.ABC):
    """Immutable stored content that can be read any number of times."""

    @abc.abstractmethod
    def open(self) -> BinaryIO:
        """Return a fresh binary stream positioned at the start."""

    @abc.abstractmethod
    def delete(self) -> None:
        """Release the underlying resources.  Idempotent."""


class StorageSink(abc.ABC):
    """Write-once destination that becomes a :class:`Storage` when sealed."""

    def __init__(self) -> None:
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, data: bytes) -> int:
        if self._closed:
            raise ValueError("write to a sealed or aborted storage sink")
        self._write(data)
        return len(data)

    def seal(self) -> Storage:
        """Finish writing and return the stored content."""
        if self._closed:
            raise ValueError("storage sink already sealed or aborted")
        self._closed = True
        return self._seal()

    def abort(self) -> None:
        """Discard everything written so far.  No-op once closed."""
        if self._closed:
            return
        self._closed = True
        self._abort()

    def __enter__(self) -> StorageSink:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.abort()

    @abc.abstractmethod
    def _write(self, data: bytes) -> None: ...

    @abc.abstractmethod
    def _seal(self) -> Storage: ...

    @abc.abstractmethod
    def _abort(self) -> None: ...


class StorageProvider(abc.ABC):
    """Allocates sinks for body content."""

    @abc.abstractmethod
    def new_sink(self) -> StorageSink:
        """Return an empty, writable sink."""

    def store(self, stream: BinaryIO) -> Storage:
        """Drain *stream* into a new sink and seal it."""
        with self.new_sink() as sink:
            while chunk := stream.read(CHUNK_SIZE):
                sink.write(chunk)
            return sink.seal()


# ----------------------------------------------------------------------
# In-memory
# ----------------------------------------------------------------------


class MemoryStorage(Storage):
    def __init__(self, data: bytes) -> None:
        self._data: bytes | None = data

    def open(self) -> BinaryIO:
        if self._data is None:
            raise ValueError("storage has been deleted")
        return io.BytesIO(self._data)

    def delete(self) -> None:
        self._data = None

    def __len__(self) -> int:
        return len(self._data or b"")


class _MemorySink(StorageSink):
    def __init__(self) -> None:
        super().__init__()
        self._buffer = io.BytesIO()

    def _write(self, data: bytes) -> None:
        self._buffer.write(data)

    def _seal(self) -> Storage:
        return MemoryStorage(self._buffer.getvalue())

    def _abort(self) -> None:
        self._buffer = io.BytesIO()


class MemoryStorageProvider(StorageProvider):
    """Keeps every body in memory."""

    def new_sink(self) -> StorageSink:
        return _MemorySink()


# ----------------------------------------------------------------------
# Temporary files
# ----------------------------------------------------------------------


class TempFileStorage(Storage):
    def __init__(self, path: Path) -> None:
        self._path = path
        self._deleted = False

    @property
    def path(self) -> Path:
        return self._path

    def open(self) -> BinaryIO:
        if self._deleted:
            raise ValueError("storage has been deleted")
        return open(self._path, "rb")

    def delete(self) -> None:
        if self._deleted:
            return
        self._deleted = True
        self._path.unlink(missing_ok=True)
        logger.debug("temp_storage_deleted", path=str(self._path))


class _TempFileSink(StorageSink):
    def __init__(self, directory: str | None, prefix: str) -> None:
        super().__init__()
        self._file = tempfile.NamedTemporaryFile(
            mode="wb", dir=directory, prefix=prefix, suffix=".tmp", delete=False
        )

    def _write(self, data: bytes) -> None:
        self._file.write(data)

    def _seal(self) -> Storage:
        self._file.close()
        return TempFileStorage(Path(self._file.name))

    def _abort(self) -> None:
        self._file.close()
        Path(self._file.name).unlink(missing_ok=True)


class TempFileStorageProvider(StorageProvider):
    """Writes every body to its own temporary file."""

    def __init__(self, directory: str | os.PathLike | None = None, prefix: str = "umbrella-mime-") -> None:
        self._directory = os.fspath(directory) if directory is not None else None
        self._prefix = prefix
        if self._directory is not None and not os.path.isdir(self._directory):
            raise ValueError(f"Not a directory: {self._directory}")

    def new_sink(self) -> StorageSink:
        return _TempFileSink(self._directory, self._prefix)


# ----------------------------------------------------------------------
# Threshold: memory first, spill to a backend when large
# ----------------------------------------------------------------------


class _ThresholdSink(StorageSink):
    def __init__(self, backend: StorageProvider, threshold: int) -> None:
        super().__init__()
        self._backend = backend
        self._threshold = threshold
        self._head = io.BytesIO()
        self._tail: StorageSink | None = None

    def _write(self, data: bytes) -> None:
        if self._tail is not None:
            self._tail.write(data)
            return
        if self._head.tell() + len(data) <= self._threshold:
            self._head.write(data)
            return
        self._tail = self._backend.new_sink()
        self._tail.write(self._head.getvalue())
        self._tail.write(data)
        self._head = io.BytesIO()

    def _seal(self) -> Storage:
        if self._tail is None:
            return MemoryStorage(self._head.getvalue())
        return self._tail.seal()

    def _abort(self) -> None:
        if self._tail is not None:
            self._tail.abort()
        self._head = io.BytesIO()


class ThresholdStorageProvider(StorageProvider):
    """Keeps small bodies in memory and hands larger ones to *backend*."""

    def __init__(self, backend: StorageProvider, threshold: int = 2048) -> None:
        if threshold < 0:
            raise ValueError("threshold must not be negative")
        self._backend = backend
        self._threshold = threshold

    def new_sink(self) -> StorageSink:
        return _ThresholdSink(self._backend, self._threshold)


# ----------------------------------------------------------------------
# Shared storage for body copies
# ----------------------------------------------------------------------


class MultiReferenceStorage(Storage):
    """Reference-counted wrapper so copied bodies can share one storage.

    Each holder calls :meth:`delete` once; the wrapped storage is deleted
    when the last reference goes away.
    """

    def __init__(self, storage: Storage) -> None:
        self._storage = storage
        self._references = 1

    @property
    def references(self) -> int:
        return self._references

    def add_reference(self) -> None:
        if self._references == 0:
            raise ValueError("storage has been deleted")
        self._references += 1

    def open(self) -> BinaryIO:
        if self._references == 0:
            raise ValueError("storage has been deleted")
        return self._storage.open()

    def delete(self) -> None:
        if self._references == 0:
            return
        self._references -= 1
        if self._references == 0:
            self._storage.delete()


def create_storage_provider(config: StorageConfig | None = None) -> StorageProvider:
    """Build the storage provider selected by *config*."""
    config = config or StorageConfig()
    if config.backend == "memory":
        return MemoryStorageProvider()
    files = TempFileStorageProvider(config.temp_dir, config.temp_prefix)
    if config.backend == "tempfile":
        return files
    return ThresholdStorageProvider(files, config.threshold_bytes)
