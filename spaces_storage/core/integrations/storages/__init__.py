"""
Модуль интеграции с хранилищами.

Предоставляет классы для работы с файловым хранилищем:
- AbstractStorageBackend: Контракт адаптера хранилища и правила именования
- SpacesStorage: Адаптер для DigitalOcean Spaces с вариантами размеров изображений
"""

from .base import AbstractStorageBackend, remove_leading_slashes
from .spaces import SpacesStorage

__all__ = [
    "AbstractStorageBackend",
    "SpacesStorage",
    "remove_leading_slashes",
]
