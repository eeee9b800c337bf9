"""Root logging setup for a gate run.

`configure_logging` is called once from the composition root. Records up to
INFO go to stdout and WARNING+ to stderr, so a CI log viewer keeps failures
visible; every record is tagged with the pipeline run id.
"""

from __future__ import annotations

import contextvars
import logging
import sys

# "<run_id>.<attempt>", set by main before polling starts
run_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "run_id", default="-"
)

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s run=%(run_id)s: %(message)s"


def _coerce_level(level: int | str | None) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    key = str(level).upper().strip()
    return logging.getLevelNamesMapping().get(key, logging.INFO)


class _RunLogFilter(logging.Filter):
    """Keeps records inside [min_level, max_level] and stamps the run id."""

    def __init__(self, min_level: int, max_level: int = logging.CRITICAL):
        super().__init__()
        self.min_level = min_level
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        record.run_id = run_id_var.get()
        return self.min_level <= record.levelno <= self.max_level


def _stream_handler(stream, min_level: int, max_level: int = logging.CRITICAL) -> logging.Handler:
    handler = logging.StreamHandler(stream=stream)
    handler.setLevel(min_level)
    handler.addFilter(_RunLogFilter(min_level, max_level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def configure_logging(level: int | str | None = None, quiet_http_client: bool = True) -> None:
    """Replace the root handlers with the stdout/stderr pair.

    aiohttp's own loggers are raised to WARNING when `quiet_http_client` is set.
    """
    numeric_level = _coerce_level(level)
    root = logging.getLogger()
    root.setLevel(numeric_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    root.addHandler(_stream_handler(sys.stdout, logging.DEBUG, logging.INFO))
    root.addHandler(_stream_handler(sys.stderr, logging.WARNING))

    if quiet_http_client:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)

    logging.getLogger("changegate").debug("logging configured level=%s", numeric_level)
