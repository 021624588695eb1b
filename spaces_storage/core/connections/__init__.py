"""
Модуль подключений.

Предоставляет клиенты и контекстные менеджеры для внешних сервисов:
- S3Client, S3ContextManager: Работа с DigitalOcean Spaces
"""

from .storage import S3Client, S3ContextManager

__all__ = [
    "S3Client",
    "S3ContextManager",
]
