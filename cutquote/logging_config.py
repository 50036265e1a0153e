"""
Logging configuration for cutquote.
Call setup_logging() once at startup (app lifespan or CLI).
"""
import json
import logging
from datetime import datetime, timezone
from typing import Optional

from cutquote.server.settings.config import settings


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log collectors."""

    def format(self, record):
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        for key in ("quote_number", "items", "total", "duration_ms", "route"):
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        return json.dumps(entry, default=str, ensure_ascii=False)


class HumanFormatter(logging.Formatter):
    """Readable console format."""

    def __init__(self):
        super().__init__("%(asctime)s [%(levelname).1s] %(name)s: %(message)s", "%H:%M:%S")


def setup_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: log level name (default: settings.log_level)
        json_logs: JSON lines instead of the human format (default: settings.json_logs)
    """
    if level is None:
        level = settings.log_level
    if json_logs is None:
        json_logs = settings.json_logs

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    console = logging.StreamHandler()
    console.setFormatter(JSONFormatter() if json_logs else HumanFormatter())
    root.addHandler(console)

    # Quiet noisy libs
    for name in ("asyncio", "playwright", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("cutquote").info("Logging initialized (level=%s)", level)
