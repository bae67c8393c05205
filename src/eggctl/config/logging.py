"""structlog configuration for eggctl.

Everything eggctl logs goes to stderr so stdout stays clean for results.
Modules log through the standard library (``logging.getLogger(__name__)``);
structlog's ``ProcessorFormatter`` renders those records either as colored
console lines or, with ``--log-json``, as one JSON object per line.

:func:`operation_context` binds the running operation and its input files,
so every line logged while a request is processed can be traced back to it.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog

PACKAGE_LOGGER = "eggctl"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route eggctl and library logging to stderr through structlog.

    Args:
        verbose: Show eggctl's DEBUG lines (which tier each variable was
            resolved from, which files were read, which rules were
            skipped).  Otherwise only warnings and errors are shown.
        log_json: Emit JSON lines instead of console-formatted lines.
    """
    shared = _shared_processors()
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
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)


@contextmanager
def operation_context(op: str, **inputs: Any) -> Iterator[None]:
    """Attach ``op`` and the given input paths to every log line in the block.

    ``None`` inputs (optional files that were not given) are left out.
    """
    fields = {k: str(v) for k, v in inputs.items() if v is not None}
    with structlog.contextvars.bound_contextvars(op=op, **fields):
        yield
