"""
Базовый модуль адаптера хранилища.

Предоставляет абстрактный класс AbstractStorageBackend (контракт, который
хост ожидает от адаптера хранилища) и общие правила именования файлов:
каталог по дате, очистка имени, подбор уникального имени.
"""

import logging
import posixpath
import re
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import PurePosixPath
from typing import Any, Awaitable, Callable, Optional

from spaces_storage.core.exceptions import UniqueKeyExhaustedError
from spaces_storage.schemas.v1.storage import (ReadOptionsSchema,
                                               StorageImageSchema)

_UNSAFE_CHARS = re.compile(r"[^\w@.]", re.ASCII)


def remove_leading_slashes(value: str) -> str:
    """Убирает один ведущий слэш из ключа."""
    return value[1:] if value.startswith("/") else value


class AbstractStorageBackend(ABC):
    """
    Абстрактный интерфейс адаптера хранилища.

    Определяет контракт для реализаций и общие правила именования.

    Attributes:
        max_unique_attempts (int): Предел попыток подбора уникального имени
        logger (logging.Logger): Логгер для класса
    """

    def __init__(self, max_unique_attempts: int = 100):
        self.max_unique_attempts = max_unique_attempts
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    async def exists(self, file_name: str, target_dir: Optional[str] = None) -> bool:
        """
        Проверяет существование файла в хранилище.

        Args:
            file_name: Имя файла
            target_dir: Каталог файла

        Returns:
            bool: True если файл существует
        """

    @abstractmethod
    async def save(self, image: StorageImageSchema, target_dir: Optional[str] = None) -> str:
        """
        Сохраняет файл и возвращает URL, по которому его нужно запрашивать.

        Args:
            image: Загруженный файл (имя, путь к временному файлу, тип)
            target_dir: Каталог для сохранения

        Returns:
            str: URL сохранённого файла
        """

    @abstractmethod
    async def delete(self, file_name: str, target_dir: Optional[str] = None) -> bool:
        """
        Удаляет файл из хранилища.

        Returns:
            bool: True если файл удалён
        """

    @abstractmethod
    async def read(self, options: Optional[ReadOptionsSchema] = None) -> bytes:
        """
        Читает файл по его URL.

        Returns:
            bytes: Содержимое файла
        """

    @abstractmethod
    def serve(self) -> Callable[..., Awaitable[Any]]:
        """
        Возвращает обработчик запросов для раздачи файлов.
        """

    def get_target_dir(self, base_dir: Optional[str] = None) -> str:
        """
        Каталог по умолчанию: base_dir/ГГГГ/ММ.

        Args:
            base_dir: Базовый каталог (может быть пустым)

        Returns:
            str: Каталог для текущего месяца
        """
        now = datetime.now()
        year, month = now.strftime("%Y"), now.strftime("%m")
        if base_dir:
            return posixpath.join(base_dir, year, month)
        return posixpath.join(year, month)

    @staticmethod
    def get_sanitized_file_name(file_name: str) -> str:
        """Заменяет все символы, кроме букв, цифр, _, @ и точки, на дефис."""
        return _UNSAFE_CHARS.sub("-", file_name)

    async def get_unique_file_name(self, image: StorageImageSchema, target_dir: str) -> str:
        """
        Подбирает свободный ключ для исходного имени файла.

        Args:
            image: Загруженный файл
            target_dir: Каталог для сохранения

        Returns:
            str: Ключ вида target_dir/имя[-N].расширение
        """
        path = PurePosixPath(image.name)
        name = self.get_sanitized_file_name(path.stem)
        return await self.generate_unique(target_dir, name, path.suffix)

    async def generate_unique(
        self, directory: str, name: str, suffix: str = "", attempt: int = 0
    ) -> str:
        """
        Подбирает ключ, которого ещё нет в хранилище.

        На попытке 0 используется name + suffix, далее name-N + suffix.
        Каждая попытка делает одну проверку exists().

        Args:
            directory: Каталог
            name: Очищенное имя файла без расширения
            suffix: Окончание имени (расширение или метка размера)
            attempt: Номер первой попытки

        Returns:
            str: Ключ directory/filename

        Raises:
            UniqueKeyExhaustedError: Свободное имя не найдено за max_unique_attempts попыток
        """
        for current in range(attempt, attempt + self.max_unique_attempts):
            file_name = f"{name}-{current}{suffix}" if current else f"{name}{suffix}"
            if not await self.exists(file_name, directory):
                return posixpath.join(directory, file_name)
            self.logger.debug("Имя %s занято в %s", file_name, directory)

        self.logger.error(
            "Не найдено свободное имя для %s в %s за %d попыток",
            name,
            directory,
            self.max_unique_attempts,
        )
        raise UniqueKeyExhaustedError(directory, name, self.max_unique_attempts)
