from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

# loggers with a dedicated file next to app.log
DEDICATED_LOGS = {
    "stockflow.purchases": "purchases.log",
    "stockflow.sales": "sales.log",
}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def _file_handler(path: Path, level: int) -> RotatingFileHandler:
    fh = RotatingFileHandler(path, maxBytes=2_000_000, backupCount=5, encoding="utf-8")
    fh.setFormatter(JsonFormatter(datefmt="%Y-%m-%d %H:%M:%S"))
    fh.setLevel(level)
    fh.set_name(f"stockflow:{path.name}")
    return fh


def _installed(logger: logging.Logger, name: str) -> bool:
    return any(h.get_name() == name for h in logger.handlers)


def setup_logging(logs_dir: Path, level: int = logging.INFO, *, console: bool = False) -> None:
    """Install the JSON file handlers. Safe to call more than once."""
    logs_dir = Path(logs_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(level)
    if not _installed(root, "stockflow:app.log"):
        root.addHandler(_file_handler(logs_dir / "app.log", level))
        root.addHandler(_file_handler(logs_dir / "errors.log", logging.ERROR))

    for name, filename in DEDICATED_LOGS.items():
        logger = logging.getLogger(name)
        logger.setLevel(level)
        if not _installed(logger, f"stockflow:{filename}"):
            logger.addHandler(_file_handler(logs_dir / filename, level))

    if console and not _installed(root, "stockflow:console"):
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("%(asctime)s | %(name)s | %(levelname)s | %(message)s", "%Y-%m-%d %H:%M:%S"))
        sh.setLevel(level)
        sh.set_name("stockflow:console")
        root.addHandler(sh)
