# app/utils/logging.py
import json
import logging
from datetime import datetime, timezone

from app.utils.settings import LOG_LEVEL


class JSONFormatter(logging.Formatter):
    """Jedna linia JSON na wpis (ELK / Loki)."""

    def format(self, record):
        log_record = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": record.name,
            "level": record.levelname,
            "message": record.getMessage(),
            "context": {
                "module": record.module,
                "line": record.lineno,
            },
        }
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_record, ensure_ascii=False)


def get_logger(name: str, level: str | int | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level or LOG_LEVEL)

    # handler tylko raz, get_logger jest wolany w kazdym module
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)

    return logger
