"""structlog configuration for cmdsrv.

Log lines always go to the log file (``--log-file``, default
``default.log``). With ``--debug`` they are mirrored to stderr and the
``cmdsrv`` logger tree drops to DEBUG.

Two renderers:
- Console (default): key=value lines, colored only on a TTY
- JSON (--log-json): structured JSON lines
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import structlog


def configure_logging(
    *,
    debug: bool = False,
    log_json: bool = False,
    log_file: Path | None = None,
) -> None:
    """Configure structlog processors and output routing.

    Args:
        debug: Enable DEBUG-level output and mirror logs to stderr.
        log_json: Use JSON renderer instead of console renderer.
        log_file: File that receives every log line. None disables it.
    """
    app_level = logging.DEBUG if debug else logging.INFO

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    def _formatter(*, colors: bool) -> structlog.stdlib.ProcessorFormatter:
        if log_json:
            renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        else:
            renderer = structlog.dev.ConsoleRenderer(colors=colors)
        return structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )

    handlers: list[logging.Handler] = []
    if log_file is not None:
        # delay=True: the file only appears once something is logged
        file_handler = logging.FileHandler(log_file, encoding="utf-8", delay=True)
        file_handler.setFormatter(_formatter(colors=False))
        handlers.append(file_handler)
    if debug:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setFormatter(_formatter(colors=sys.stderr.isatty()))
        handlers.append(stderr_handler)

    root_logger = logging.getLogger()
    for old in root_logger.handlers:
        old.close()
    root_logger.handlers.clear()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("cmdsrv").setLevel(app_level)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
