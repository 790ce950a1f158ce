"""Entry point for the MIME package.

Usage::

    python -m umbrella_mime message.eml   # print the entity tree outline
"""

from __future__ import annotations

import sys

import structlog

from .body import SingleBody, TextBody
from .config import MimeConfig
from .entity import Entity
from .exceptions import MimeError
from .logging import LOGGER_NAME, setup_logging
from .message import Message
from .multipart import Multipart

logger = structlog.get_logger(LOGGER_NAME)


def outline(entity: Entity, depth: int = 0) -> list[str]:
    """Describe *entity* and everything below it, one indented line per node."""
    indent = "  " * depth
    line = f"{indent}{entity.mime_type}"
    if isinstance(entity, Message) and entity.get_subject() is not None:
        line += f"  subject={entity.get_subject()!r}"
    if entity.filename:
        line += f"  filename={entity.filename!r}"

    body = entity.body
    if isinstance(body, SingleBody):
        line += f"  {len(body.read())} bytes"
        if isinstance(body, TextBody):
            line += f" ({body.mime_charset})"
    lines = [line]

    if isinstance(body, Message):
        lines.extend(outline(body, depth + 1))
    elif isinstance(body, Multipart):
        for part in body.body_parts:
            lines.extend(outline(part, depth + 1))
    return lines


def main(argv: list[str] | None = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: python -m umbrella_mime <message.eml>", file=sys.stderr)
        sys.exit(1)

    config = MimeConfig()
    setup_logging(json=config.log_json, level=config.log_level)

    path = argv[0]
    try:
        with open(path, "rb") as fp, Message.parse(fp, config) as message:
            for line in outline(message):
                print(line)
    except (OSError, MimeError) as exc:
        logger.error("message_parse_failed", path=path, error=str(exc))
        sys.exit(2)


if __name__ == "__main__":
    main()
