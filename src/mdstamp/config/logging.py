"""structlog setup for the mdstamp CLI.

Records from structlog and from stdlib ``logging`` alike go through one
``ProcessorFormatter`` on stderr: console lines by default, JSON lines with
``--log-json``. While a document is being stamped its path is bound as
``document`` context (see :func:`document_context`), so every line says
which file it concerns.
"""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any, TextIO

import structlog

LOGGER_NAME = "mdstamp"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route all logging through structlog.

    Args:
        verbose: DEBUG for the ``mdstamp`` loggers; WARNING otherwise.
            Third-party loggers stay at WARNING either way.
        log_json: Render JSON lines instead of console output.
        stream: Destination, ``sys.stderr`` by default.
    """
    stream = stream or sys.stderr
    processors = _shared_processors()

    if log_json:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=processors,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)
    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)


def document_context(path: Path | str) -> AbstractContextManager[Any]:
    """Bind ``document=<path>`` to every log record emitted inside the block."""
    return structlog.contextvars.bound_contextvars(document=str(path))
