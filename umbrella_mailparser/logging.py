"""Structured logging setup for the mail parser CLI and embedding services."""

from __future__ import annotations

import logging
import sys

import structlog

from .config import MailParserSettings


def setup_logging(
    settings: MailParserSettings | None = None,
    *,
    json: bool | None = None,
    level: str | None = None,
) -> None:
    """Route structlog and stdlib logging through one stderr handler.

    Explicit ``json`` / ``level`` arguments win over *settings*; without
    either the values come from ``MailParserSettings`` (``MAILPARSER_LOG_*``).
    Logs go to stderr so the CLI can keep stdout for its JSON output.
    """
    settings = settings or MailParserSettings()
    use_json = settings.log_json if json is None else json
    level_name = (level or settings.log_level).upper()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if use_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level_name)
