from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Dict

LOG_LEVEL_ENV = "DOCS_SEARCH_LOG_LEVEL"


class _PlainFormatter(logging.Formatter):
    """Single-line stderr formatter; adds timestamps and source location at DEBUG."""

    default_fmt = "%(levelname)s %(name)s - %(message)s"
    verbose_fmt = "%(asctime)s %(levelname)s %(name)s %(filename)s:%(lineno)d - %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"

    def __init__(self, debug: bool = False) -> None:
        super().__init__(fmt=self.verbose_fmt if debug else self.default_fmt, datefmt=self.datefmt)


class _JsonFormatter(logging.Formatter):
    """One JSON object per record, for build logs collected by CI."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "line": f"{record.filename}:{record.lineno}",
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _coerce_level(level: str | int | None) -> int:
    if isinstance(level, int):
        return level
    name = (level or "").strip().upper()
    if name in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
        return getattr(logging, name)
    return logging.INFO


def setup_logging(level: str | int | None = None, json_logs: bool = False) -> int:
    """
    Configure the root logger for a CLI run or the web app.

    Explicit `level` wins over the DOCS_SEARCH_LOG_LEVEL env var; INFO otherwise.
    Returns the effective level.
    """
    final_level = _coerce_level(level or os.getenv(LOG_LEVEL_ENV) or logging.INFO)

    root = logging.getLogger()
    root.setLevel(final_level)
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream=sys.stderr)
    if json_logs:
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(_PlainFormatter(debug=final_level <= logging.DEBUG))
    root.addHandler(handler)

    for noisy in ("httpx", "multipart", "uvicorn.access"):
        logging.getLogger(noisy).setLevel(max(final_level, logging.WARNING))
    return final_level
