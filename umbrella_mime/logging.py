"""Structured logging for the ``umbrella_mime`` logger namespace.

Library modules log through ``structlog.get_logger()``, which names each
stdlib logger after its module, so everything the package emits lives
under ``umbrella_mime.*``.  :func:`setup_logging` attaches a handler to that
namespace only; the root logger of an embedding process is never touched.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog

LOGGER_NAME = "umbrella_mime"

_HANDLER_NAME = "umbrella_mime.setup_logging"


def setup_logging(
    *,
    json: bool = True,
    level: str = "INFO",
    stream: TextIO | None = None,
) -> logging.Handler:
    """Route ``umbrella_mime`` log events to *stream* (stderr if None).

    Parameters
    ----------
    json:
        If *True* (the default), output JSON lines.  If *False*, use a
        human-friendly console renderer.
    level:
        Level name for the ``umbrella_mime`` logger (e.g. ``"DEBUG"``).
        Builder and storage progress is logged at debug; malformed input
        and protocol violations at warning.
    stream:
        Text stream the handler writes to.

    Calling it again replaces the handler installed by the previous call.
    The package logger stops propagating, so events are not rendered twice
    by root handlers.  structlog itself is only configured when the process
    has not configured it already.

    Returns the installed handler.
    """
    if not structlog.is_configured():
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    if json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    package_logger = logging.getLogger(LOGGER_NAME)
    for existing in list(package_logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(level.upper())
    package_logger.propagate = False
    return handler
