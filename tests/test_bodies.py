"""Tests for umbrella_mime.body and umbrella_mime.bodies."""

from __future__ import annotations

import io

import pytest

from umbrella_mime.bodies import (
    BodyFactory,
    BytesBinaryBody,
    StorageBinaryBody,
    StorageTextBody,
    StreamBody,
    StringTextBody,
)
from umbrella_mime.exceptions import UnsupportedCopyError
from umbrella_mime.storage import MemoryStorage, MultiReferenceStorage


class TestStorageBodies:
    def test_copy_shares_storage_until_last_dispose(self):
        shared = MultiReferenceStorage(MemoryStorage(b"data"))
        body = StorageBinaryBody(shared)
        clone = body.copy()
        assert shared.references == 2

        body.dispose()
        assert clone.read() == b"data"
        clone.dispose()
        with pytest.raises(ValueError):
            clone.read()

    def test_repeated_dispose_releases_one_reference(self):
        shared = MultiReferenceStorage(MemoryStorage(b"data"))
        body = StorageTextBody(shared)
        clone = body.copy()

        body.dispose()
        body.dispose()
        assert shared.references == 1
        assert clone.read() == b"data"

    def test_text_body_decodes_with_its_charset(self):
        body = StorageTextBody(MemoryStorage("café".encode("iso-8859-1")), "iso-8859-1")
        assert body.text == "café"
        assert body.copy().mime_charset == "iso-8859-1"

    def test_write_to(self):
        out = io.BytesIO()
        StorageBinaryBody(MemoryStorage(b"abc")).write_to(out)
        assert out.getvalue() == b"abc"


class TestInMemoryBodies:
    def test_bytes_body_copy(self):
        body = BytesBinaryBody(b"\x00\x01")
        clone = body.copy()
        assert clone is not body
        assert clone.read() == b"\x00\x01"

    def test_string_text_body_encodes_on_read(self):
        body = StringTextBody("grüß", "utf-8")
        assert body.read() == "grüß".encode("utf-8")
        assert body.text == "grüß"

    def test_string_text_body_unknown_charset(self):
        with pytest.raises(ValueError, match="Unsupported charset"):
            StringTextBody("x", "x-no-such-charset")


class TestStreamBody:
    def test_single_read(self):
        body = StreamBody(io.BytesIO(b"once"))
        assert body.read() == b"once"
        with pytest.raises(ValueError):
            body.open()

    def test_copy_is_unsupported(self):
        body = StreamBody(io.BytesIO(b"once"))
        with pytest.raises(UnsupportedCopyError):
            body.copy()

    def test_unsupported_copy_is_not_implemented_error(self):
        with pytest.raises(NotImplementedError):
            StreamBody(io.BytesIO()).copy()

    def test_dispose_closes_stream(self):
        stream = io.BytesIO(b"x")
        StreamBody(stream).dispose()
        assert stream.closed


class TestBodyFactory:
    def test_binary_body_from_bytes(self, storage_provider):
        body = BodyFactory(storage_provider).binary_body(b"\xff\xfe")
        assert isinstance(body, StorageBinaryBody)
        assert body.read() == b"\xff\xfe"

    def test_binary_body_from_stream(self, storage_provider):
        body = BodyFactory(storage_provider).binary_body(io.BytesIO(b"streamed"))
        assert body.read() == b"streamed"

    def test_text_body_encodes_str(self, storage_provider):
        body = BodyFactory(storage_provider).text_body("naïve", "iso-8859-1")
        assert body.read() == "naïve".encode("iso-8859-1")
        assert body.text == "naïve"
        assert body.mime_charset == "iso-8859-1"

    def test_text_body_unknown_charset(self, storage_provider):
        with pytest.raises(ValueError):
            BodyFactory(storage_provider).text_body("x", "x-no-such-charset")

    def test_default_provider_is_memory(self):
        assert BodyFactory().text_body(b"plain").text == "plain"
