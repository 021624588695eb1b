"""
Базовые классы подключений к внешним сервисам.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any


class BaseClient(ABC):
    """
    Базовый клиент внешнего сервиса.

    Attributes:
        logger (logging.Logger): Логгер для записи событий подключения
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def connect(self) -> Any:
        """Создаёт подключение к сервису."""

    @abstractmethod
    async def close(self) -> None:
        """Закрывает подключение."""


class BaseContextManager(ABC):
    """
    Базовый асинхронный контекстный менеджер подключения.
    """

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def __aenter__(self) -> Any:
        pass

    @abstractmethod
    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        pass
