"""JSON-lines logging for blockmark.

Each record renders as one JSON object per line, so a session's decode,
encode and save activity can be grepped or piped into ``jq``::

    {"ts": "2025-07-01T12:00:00.123456+00:00", "level": "INFO",
     "logger": "blockmark.vault", "message": "Document written",
     "op": "write", "name": "notes/today.md", "bytes": 412}

Callers attach structured fields through the ``extra_fields`` key::

    log = get_logger("blockmark.transcoder")
    log.debug("Markdown decoded", extra={"extra_fields": {"op": "decode", "blocks": 12}})

The default level can be set without code changes through the
``BLOCKMARK_LOG_LEVEL`` environment variable.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

LEVEL_ENV_VAR = "BLOCKMARK_LOG_LEVEL"

_RESERVED_KEYS = frozenset({"ts", "level", "logger", "message"})


class StructuredFormatter(logging.Formatter):
    """Render a :class:`logging.LogRecord` as a single JSON line.

    Guaranteed keys are ``ts`` (ISO-8601 UTC, taken from the record's
    creation time), ``level``, ``logger`` and ``message``.  Fields from
    ``extra_fields`` are merged at top level; a field whose name collides
    with a guaranteed key is kept under ``extra_<name>`` instead.

    When the record carries an exception, its traceback is written to
    ``exception``; a ``code`` attribute on the exception (as on every
    :class:`~blockmark.errors.BlockmarkError`) is also written to
    ``error_code``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = self._base_entry(record)

        for key, value in (getattr(record, "extra_fields", None) or {}).items():
            entry[f"extra_{key}" if key in _RESERVED_KEYS else key] = value

        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
            code = getattr(record.exc_info[1], "code", None)
            if code is not None:
                entry["error_code"] = code

        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str, ensure_ascii=False)

    @staticmethod
    def _base_entry(record: logging.LogRecord) -> dict[str, Any]:
        return {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }


class _JsonLinesHandler(logging.StreamHandler):
    """Stream handler preconfigured with :class:`StructuredFormatter`."""

    def __init__(self, stream: Any | None = None) -> None:
        super().__init__(stream or sys.stderr)
        self.setFormatter(StructuredFormatter())


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.environ.get(LEVEL_ENV_VAR) or logging.DEBUG
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def get_logger(
    name: str = "blockmark",
    *,
    level: int | str | None = None,
    stream: Any | None = None,
) -> logging.Logger:
    """Return the logger *name* with a JSON-lines handler attached.

    Parameters
    ----------
    name:
        Logger name, conventionally the dotted module path
        (``"blockmark.vault.session"``).
    level:
        Minimum level as an ``int`` or a case-insensitive name.  When
        omitted, ``BLOCKMARK_LOG_LEVEL`` is consulted, then ``DEBUG``.
    stream:
        Output stream.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        The configured logger.  It does not propagate to the root logger.
        Only the first call for a given *name* attaches a handler and sets
        the level; later calls return the logger unchanged.

    Raises
    ------
    ValueError
        If *level* (or the environment variable) names no known level.
    """
    logger = logging.getLogger(name)
    if any(isinstance(handler, _JsonLinesHandler) for handler in logger.handlers):
        return logger

    logger.setLevel(_resolve_level(level))
    logger.addHandler(_JsonLinesHandler(stream))
    logger.propagate = False
    return logger
