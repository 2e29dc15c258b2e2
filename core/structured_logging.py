"""
Scan correlation for log records.

Every record emitted while a scan runs is stamped with three fields taken from
context variables:

- ``run_id``: one id per CLI invocation, also used to name the run report.
- ``phase``: the pipeline stage (``seed``, ``scan`` or ``export``).
- ``header``: the header file currently being scanned.

Fields that are not bound render as ``-``.
"""

from __future__ import annotations

import contextvars
import logging
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator

UNSET = "-"

_RUN_ID_VAR: contextvars.ContextVar[str] = contextvars.ContextVar("run_id", default=UNSET)
_PHASE_VAR: contextvars.ContextVar[str] = contextvars.ContextVar("phase", default=UNSET)
_HEADER_VAR: contextvars.ContextVar[str] = contextvars.ContextVar("header", default=UNSET)

# LogRecord attribute -> context variable supplying it
_SCAN_CONTEXT: Dict[str, contextvars.ContextVar[str]] = {
    "run_id": _RUN_ID_VAR,
    "phase": _PHASE_VAR,
    "header": _HEADER_VAR,
}

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | run_id=%(run_id)s | phase=%(phase)s | "
    "header=%(header)s | %(name)s | %(message)s"
)


class _ScanContextFilter(logging.Filter):
    """Copy the bound scan context onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for attribute, var in _SCAN_CONTEXT.items():
            setattr(record, attribute, var.get())
        return True


def configure_structured_logging(level: int = logging.INFO, fmt: str = LOG_FORMAT) -> None:
    """Route root logging through ``fmt`` with scan context on every handler.

    Existing root handlers are reformatted rather than replaced, so handlers
    installed by a host application (or pytest) keep working.
    """
    root_logger = logging.getLogger()
    if root_logger.handlers:
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            handler.setFormatter(logging.Formatter(fmt))
    else:
        logging.basicConfig(level=level, format=fmt)

    for handler in root_logger.handlers:
        if not any(isinstance(f, _ScanContextFilter) for f in handler.filters):
            handler.addFilter(_ScanContextFilter())


def set_run_id(run_id: str | None = None) -> str:
    """Bind the run id for the rest of the process, generating one if needed."""
    value = run_id or uuid.uuid4().hex
    _RUN_ID_VAR.set(value)
    return value


def get_run_id() -> str:
    return _RUN_ID_VAR.get()


@contextmanager
def _bind(var: contextvars.ContextVar[str], value: str) -> Iterator[None]:
    token = var.set(value)
    try:
        yield
    finally:
        var.reset(token)


def phase_scope(phase: str):
    """Tag records emitted inside the block with a pipeline stage."""
    return _bind(_PHASE_VAR, phase)


def header_scope(header: str):
    """Tag records emitted inside the block with the header being scanned."""
    return _bind(_HEADER_VAR, str(header))
