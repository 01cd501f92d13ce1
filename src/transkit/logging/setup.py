"""
Structured logging configuration.

Two independent pipelines:
1. File (JSON) — if config.file is set. Captures everything (DEBUG+).
2. Console (stderr) — level controlled by -v.

Default behaviour (no -v): only warnings and errors reach the console, so a
missing translation file or a failing provider is visible without noise.

With -v: adds INFO. With -vv: adds DEBUG. With --quiet: silences the console.
"""

import logging
import sys
from pathlib import Path

import structlog

from ..config.schema import LoggingConfig

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(
    config: LoggingConfig,
    json_output: bool = False,
    quiet: bool = False,
) -> None:
    """Configure logging with a file pipeline and a console pipeline.

    Args:
        config: Logging configuration (level, file, verbose)
        json_output: If True, the console renders JSON instead of text
        quiet: If True, no console handler is installed
    """
    logging.root.handlers.clear()
    structlog.reset_defaults()

    # Root logger lets everything through; handlers filter by level
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[],
    )

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    # ── Pipeline 1: JSON file ─────────────────────────────────────────────
    if config.file:
        file_path = Path(config.file)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(str(file_path), encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=structlog.processors.JSONRenderer(),
                foreign_pre_chain=shared_processors,
            )
        )
        logging.root.addHandler(file_handler)

    # ── Pipeline 2: Console ───────────────────────────────────────────────
    if not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(_console_level(config))
        renderer = (
            structlog.processors.JSONRenderer()
            if json_output
            else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        )
        console_handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                processor=renderer,
                foreign_pre_chain=shared_processors,
            )
        )
        logging.root.addHandler(console_handler)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def _console_level(config: LoggingConfig) -> int:
    """Console level: the more verbose of config.level and the -v count.

    Without -v  → config.level (default WARNING)
    -v          → INFO (commits, provider detection)
    -vv         → DEBUG (cache hits, retries, store writes)
    """
    by_verbose = {0: logging.WARNING, 1: logging.INFO}.get(config.verbose, logging.DEBUG)
    return min(by_verbose, _LEVELS[config.level])
