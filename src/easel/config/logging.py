"""structlog configuration for easel.

The runtime logs through stdlib ``logging`` (one logger per module). While
an extension hook runs, the manager binds ``extension=<id>`` with
:func:`extension_log_context`, so any record emitted inside plugin code is
attributed to the extension that caused it.

``configure_logging`` is what the CLI calls:

- Human (default): console renderer on stderr
- JSON (--log-json): one JSON object per line on stderr
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager

import structlog

# Third-party loggers that stay at WARNING even with --verbose.
_QUIET_LOGGERS = ("pluggy", "asyncio")


@contextmanager
def extension_log_context(extension_id: str, hook: str) -> Iterator[None]:
    """Attach *extension_id* and *hook* to every record logged in the block."""
    with structlog.contextvars.bound_contextvars(extension=extension_id, hook=hook):
        yield


def _shared_processors(log_json: bool) -> list[structlog.types.Processor]:
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if log_json:
        processors.append(structlog.processors.format_exc_info)
    return processors


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route ``easel.*`` records (and structlog loggers) to stderr.

    Args:
        verbose: DEBUG for easel loggers. Otherwise only WARNING and above,
            which covers overwrite, validation and plugin-failure notices.
        log_json: Use the JSON renderer instead of the console renderer.
    """
    shared = _shared_processors(log_json)
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("easel").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
