"""Shared test fixtures for the umbrella_mime test suite."""

from __future__ import annotations

import io
import logging
from email import encoders
from email.mime.base import MIMEBase
from email.mime.message import MIMEMessage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.policy import compat32

import pytest

from umbrella_mime.body import SingleBody
from umbrella_mime.entity import Entity
from umbrella_mime.events import Event
from umbrella_mime.logging import LOGGER_NAME
from umbrella_mime.multipart import Multipart
from umbrella_mime.storage import MemoryStorageProvider


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo setup_logging() calls so handlers never outlive a captured stream."""
    logger = logging.getLogger(LOGGER_NAME)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


@pytest.fixture
def storage_provider() -> MemoryStorageProvider:
    return MemoryStorageProvider()


@pytest.fixture
def multipart_events() -> list[Event]:
    """Two header fields, then a multipart with one 'hello' body part."""
    return [
        Event.start_message(),
        Event.start_header(),
        Event.field("Subject", "Greetings"),
        Event.field("Content-Type", 'multipart/mixed; boundary="B"'),
        Event.end_header(),
        Event.start_multipart("B"),
        Event.start_body_part(),
        Event.start_header(),
        Event.end_header(),
        Event.body(io.BytesIO(b"hello")),
        Event.end_body_part(),
        Event.end_multipart(),
        Event.end_message(),
    ]


# ------------------------------------------------------------------
# Sample EML builders
# ------------------------------------------------------------------


@pytest.fixture
def plain_eml_bytes() -> bytes:
    msg = MIMEText("Hello, World!", "plain")
    msg["Subject"] = "Test Subject"
    msg["From"] = "sender@example.com"
    msg["To"] = "recipient@example.com"
    msg["Message-ID"] = "<test-001@example.com>"
    msg["Date"] = "Sun, 01 Jun 2025 12:00:00 +0000"
    return msg.as_bytes()


@pytest.fixture
def multipart_eml_bytes() -> bytes:
    """multipart/mixed: alternative(text, html), a PDF attachment, a forwarded message."""
    msg = MIMEMultipart("mixed")
    msg["Subject"] = "Multipart Email"
    msg["From"] = "sender@example.com"
    msg["To"] = "recipient@example.com"
    msg["Message-ID"] = "<multi-001@example.com>"
    msg["Date"] = "Sun, 01 Jun 2025 12:00:00 +0000"
    msg.preamble = "This is a multi-part message in MIME format."

    alt = MIMEMultipart("alternative")
    alt.attach(MIMEText("Plain body", "plain"))
    alt.attach(MIMEText("<p>HTML body</p>", "html"))
    msg.attach(alt)

    part = MIMEBase("application", "pdf")
    part.set_payload(b"%PDF-1.4 fake pdf content")
    encoders.encode_base64(part)
    part.add_header("Content-Disposition", "attachment", filename="report.pdf")
    msg.attach(part)

    inner = MIMEText("Forwarded body", "plain")
    inner["Subject"] = "Inner"
    msg.attach(MIMEMessage(inner))

    return msg.as_bytes(policy=compat32.clone(linesep="\r\n"))


# ------------------------------------------------------------------
# Tree comparison
# ------------------------------------------------------------------


def _same_tree(left: Entity, right: Entity) -> bool:
    left_fields = [(f.name, f.raw_value, type(f)) for f in (left.header or [])]
    right_fields = [(f.name, f.raw_value, type(f)) for f in (right.header or [])]
    if left_fields != right_fields:
        return False

    a, b = left.body, right.body
    if a is None or b is None:
        return a is None and b is None
    if type(a) is not type(b):
        return False
    if isinstance(a, Entity):
        return _same_tree(a, b)
    if isinstance(a, Multipart):
        return (
            (a.subtype, a.boundary, a.preamble, a.epilogue)
            == (b.subtype, b.boundary, b.preamble, b.epilogue)
            and a.count == b.count
            and all(_same_tree(x, y) for x, y in zip(a.body_parts, b.body_parts))
        )
    if isinstance(a, SingleBody):
        return a.read() == b.read()
    return False


@pytest.fixture
def same_tree():
    """Structural equality: field order, nesting and leaf content."""
    return _same_tree
