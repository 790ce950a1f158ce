"""Tests for umbrella_mime.charset."""

from __future__ import annotations

import pytest

from umbrella_mime import charset
from umbrella_mime.charset import ISO_8859_1, US_ASCII, UTF_8, is_ascii, lookup

SWISS_GERMAN_HELLO = "Grüezi_zämä"
RUSSIAN_HELLO = "Всем_привет"


class TestIsAscii:
    def test_all_ascii(self):
        assert is_ascii("Like hello and stuff")

    def test_non_ascii(self):
        assert not is_ascii(SWISS_GERMAN_HELLO)
        assert not is_ascii(RUSSIAN_HELLO)

    def test_empty_string(self):
        assert is_ascii("")

    def test_boundary_code_points(self):
        assert is_ascii(chr(127))
        assert not is_ascii(chr(128))

    def test_control_characters_are_ascii(self):
        assert is_ascii("\x00\t\r\n")


class TestLookup:
    def test_ascii_aliases_resolve_to_us_ascii(self):
        assert lookup("us-ascii") == US_ASCII
        assert lookup("ascii") == US_ASCII
        assert lookup("ascii") is lookup("us-ascii")

    def test_case_insensitive(self):
        assert lookup("UTF-8") is lookup("utf8")
        assert lookup("Utf-8") == UTF_8

    def test_latin1_aliases(self):
        assert lookup("latin1") == ISO_8859_1
        assert lookup("ISO-8859-1") == ISO_8859_1

    def test_windows_charset_uses_mime_name(self):
        assert lookup("cp1252").name == "windows-1252"
        assert lookup("windows-1252").name == "windows-1252"

    def test_quoted_name(self):
        assert lookup('"utf-8"') == UTF_8

    def test_none_input(self):
        assert lookup(None) is None

    def test_unknown_name(self):
        assert lookup("whatever") is None
        assert lookup("whatever-unknown") is None

    @pytest.mark.parametrize("name", ["", "   ", "base64", "rot13", "hex"])
    def test_malformed_or_non_text_codecs(self, name):
        assert lookup(name) is None

    @pytest.mark.parametrize(
        "name", ["undefined", "idna", "punycode", "unicode_escape", "raw_unicode_escape", "charmap"]
    )
    def test_python_only_codecs_are_not_charsets(self, name):
        assert lookup(name) is None

    def test_non_string_input(self):
        assert lookup(42) is None  # type: ignore[arg-type]

    def test_str_is_mime_name(self):
        assert str(US_ASCII) == "US-ASCII"


class TestDecode:
    def test_declared_charset(self):
        data = SWISS_GERMAN_HELLO.encode("iso-8859-1")
        assert charset.decode(data, "iso-8859-1") == SWISS_GERMAN_HELLO

    def test_unknown_charset_falls_back(self):
        assert charset.decode(b"plain words", "x-no-such-charset") == "plain words"

    def test_wrong_charset_falls_back_to_detection(self):
        text = "Всем привет! Это тестовое сообщение, написанное по-русски."
        assert charset.decode(text.encode("utf-8"), "us-ascii") == text

    def test_no_charset(self):
        assert charset.decode(b"abc") == "abc"

    def test_python_only_codec_falls_back(self):
        assert charset.decode(b"hello", "undefined") == "hello"
