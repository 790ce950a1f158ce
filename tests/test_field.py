"""Tests for umbrella_mime.field and umbrella_mime.fields."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from umbrella_mime import fields
from umbrella_mime.field import (
    ContentDispositionField,
    ContentTransferEncodingField,
    ContentTypeField,
    DateTimeField,
    Field,
    UnstructuredField,
    parse_field,
)


class TestParseField:
    def test_registered_types(self):
        assert type(parse_field("Content-Type", "text/plain")) is ContentTypeField
        assert type(parse_field("date", "Sun, 01 Jun 2025 12:00:00 +0000")) is DateTimeField
        assert type(parse_field("CONTENT-TRANSFER-ENCODING", "base64")) is ContentTransferEncodingField
        assert type(parse_field("Content-Disposition", "inline")) is ContentDispositionField

    def test_message_id_is_plain_field(self):
        assert type(parse_field("Message-ID", "<a@b>")) is Field

    def test_unknown_names_are_unstructured(self):
        field = parse_field("X-Custom", "value")
        assert type(field) is UnstructuredField
        assert field.name == "X-Custom"

    def test_name_case_preserved(self):
        assert parse_field("sUbJeCt", "x").name == "sUbJeCt"


class TestField:
    def test_body_unfolds_and_strips(self):
        field = Field("References", " <a@b>\r\n <c@d>\r\n\t<e@f> ")
        assert field.body == "<a@b> <c@d>\t<e@f>"
        assert field.raw_value == " <a@b>\r\n <c@d>\r\n\t<e@f> "

    def test_matches_case_insensitively(self):
        assert Field("Subject", "x").matches("SUBJECT")
        assert not Field("Subject", "x").matches("Subjects")

    def test_copy_preserves_type_and_value(self):
        field = DateTimeField("Date", "Sun, 01 Jun 2025 12:00:00 +0000")
        clone = field.copy()
        assert clone is not field
        assert type(clone) is DateTimeField
        assert clone == field

    def test_equality_includes_type(self):
        assert Field("Subject", "x") != UnstructuredField("Subject", "x")

    def test_str(self):
        assert str(Field("Subject", "hi")) == "Subject: hi"


class TestUnstructuredField:
    def test_plain_text(self):
        assert UnstructuredField("Subject", "Hello").value == "Hello"

    def test_encoded_word(self):
        field = UnstructuredField("Subject", "=?utf-8?q?Gr=C3=BCezi?=")
        assert field.value == "Grüezi"

    def test_mixed_encoded_and_plain(self):
        field = UnstructuredField("Subject", "Re: =?iso-8859-1?q?z=E4m=E4?= again")
        assert field.value == "Re: zämä again"

    def test_unknown_charset_does_not_raise(self):
        field = UnstructuredField("Subject", "=?x-unknown?q?abc?=")
        assert field.value == "abc"
        assert field.parse_error is None


class TestDateTimeField:
    def test_parses_date(self):
        field = DateTimeField("Date", "Sun, 01 Jun 2025 12:00:00 +0200")
        assert field.date == datetime(2025, 6, 1, 10, 0, tzinfo=timezone.utc)
        assert field.parse_error is None

    def test_folded_value(self):
        field = DateTimeField("Date", "Sun, 01 Jun 2025\r\n 12:00:00 +0000")
        assert field.date == datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)

    def test_invalid_date_is_localized(self):
        field = DateTimeField("Date", "not a date")
        assert field.date is None
        assert "not a date" in field.parse_error


class TestContentTypeField:
    def test_parameters(self):
        field = ContentTypeField("Content-Type", 'Multipart/Mixed; boundary="B 1"; charset=UTF-8')
        assert field.mime_type == "multipart/mixed"
        assert field.media_type == "multipart"
        assert field.sub_type == "mixed"
        assert field.boundary == "B 1"
        assert field.charset == "UTF-8"
        assert field.is_multipart()

    def test_missing_parameters(self):
        field = ContentTypeField("Content-Type", "text/html")
        assert field.boundary is None
        assert field.charset is None
        assert not field.is_multipart()
        assert field.parse_error is None

    def test_garbage_records_parse_error(self):
        field = ContentTypeField("Content-Type", "garbage")
        assert field.parse_error is not None


class TestOtherMimeFields:
    def test_transfer_encoding_lowercased(self):
        assert ContentTransferEncodingField("Content-Transfer-Encoding", " Base64 ").encoding == "base64"

    def test_transfer_encoding_default(self):
        assert ContentTransferEncodingField("Content-Transfer-Encoding", "").encoding == "7bit"

    def test_disposition(self):
        field = ContentDispositionField("Content-Disposition", 'attachment; filename="report.pdf"')
        assert field.disposition_type == "attachment"
        assert field.filename == "report.pdf"


class TestFieldFactories:
    def test_ascii_subject_kept_verbatim(self):
        field = fields.subject("hello")
        assert field.raw_value == "hello"
        assert field.value == "hello"

    def test_non_ascii_subject_encoded(self):
        field = fields.subject("Grüezi zämä")
        assert field.raw_value.startswith("=?utf-8?")
        assert field.raw_value.isascii()
        assert field.value == "Grüezi zämä"

    def test_lookalike_encoded_word_is_encoded(self):
        field = fields.subject("=?utf-8?q?trick?=")
        assert field.raw_value != "=?utf-8?q?trick?="
        assert field.value == "=?utf-8?q?trick?="

    def test_line_breaks_cannot_inject_fields(self):
        field = fields.subject("hi\r\nBcc: victim@example.com")
        assert "\r\nBcc:" not in field.raw_value

    def test_date_with_zone(self):
        zone = timezone(timedelta(hours=-5))
        value = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)
        field = fields.date(value, zone)
        assert field.raw_value == "Sun, 01 Jun 2025 07:00:00 -0500"
        assert field.date == value

    def test_message_id_with_hostname(self):
        field = fields.message_id("mail.example.com")
        assert field.name == "Message-ID"
        assert field.body.startswith("<")
        assert field.body.endswith("@mail.example.com>")

    def test_message_id_without_hostname(self):
        assert fields.message_id().body.endswith("@localhost>")

    def test_message_ids_differ(self):
        assert fields.message_id().body != fields.message_id().body

    def test_content_type_quotes_when_needed(self):
        field = fields.content_type("multipart/mixed", boundary="a b")
        assert field.raw_value == 'multipart/mixed; boundary="a b"'
        assert field.boundary == "a b"

    def test_content_type_plain_token(self):
        assert fields.content_type("text/plain", charset="utf-8").raw_value == "text/plain; charset=utf-8"

    def test_disposition_non_ascii_filename(self):
        field = fields.content_disposition("attachment", filename="résumé.pdf")
        assert "filename*=" in field.raw_value
        assert field.filename == "résumé.pdf"
