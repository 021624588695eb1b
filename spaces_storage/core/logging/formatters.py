"""
Форматтеры логов.

- PrettyFormatter: цветной вывод для консоли
- CustomJsonFormatter: JSON-строки для файлов и сборщиков логов
"""

import logging
from datetime import datetime, timezone

from pythonjsonlogger.json import JsonFormatter

from spaces_storage.core.settings import settings


class PrettyFormatter(logging.Formatter):
    """Цветной форматтер для консоли."""

    def __init__(self) -> None:
        super().__init__(fmt=settings.logging.PRETTY_FORMAT)


class CustomJsonFormatter(JsonFormatter):
    """
    JSON форматтер с дополнительными полями.

    Добавляет в каждую запись timestamp в UTC, уровень и имя логгера.
    """

    def __init__(self) -> None:
        super().__init__(fmt=settings.logging.JSON_FORMAT)

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["logger"] = record.name
