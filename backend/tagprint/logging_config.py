"""
Логирование сервиса печати.

Рендеры пишут итоги пакета через extra (шаблон, число ценников, деградации),
поэтому оба форматтера выводят эти поля: JSON для production,
строка "ключ=значение" для development.
"""

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

from tagprint.config import get_settings

# Поля, которые LogRecord заводит сам. Всё остальное пришло из extra.
_RECORD_FIELDS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

_NOISY_LOGGERS = ("PIL", "fontTools", "uvicorn.access")


def record_extra(record: logging.LogRecord) -> dict[str, Any]:
    """Поля, переданные в logger.*(..., extra={...})."""
    return {k: v for k, v in vars(record).items() if k not in _RECORD_FIELDS}


class JSONFormatter(logging.Formatter):
    """
    Одна JSON строка на запись.

    {"timestamp": "...", "level": "INFO", "logger": "tagprint.services.price_tags_pdf",
     "message": "...", "template": "3x8", "labels": 24, ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_extra(record),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False, default=str)


class HumanFormatter(logging.Formatter):
    """Читаемая строка, extra поля дописываются в конец."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = record_extra(record)
        if not extra:
            return line
        fields = " ".join(f"{key}={value}" for key, value in extra.items())
        head, sep, tail = line.partition("\n")
        return f"{head} | {fields}{sep}{tail}"


def setup_logging() -> None:
    """Один stdout handler на root; формат и уровень из настроек."""
    settings = get_settings()

    log_level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(HumanFormatter() if settings.debug else JSONFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("tagprint").setLevel(log_level)
