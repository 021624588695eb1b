"""
Модуль для работы с облачным хранилищем.

Предоставляет классы для управления подключением к DigitalOcean Spaces
(S3-совместимому хранилищу):
- S3Client: Клиент для установки и управления подключением к S3
- S3ContextManager: Контекстный менеджер для автоматического управления подключением
"""

from typing import Any

from aioboto3 import Session
from botocore.config import Config as BotocoreConfig
from botocore.exceptions import ClientError

from spaces_storage.core.settings import SpacesSettings

from .base import BaseClient, BaseContextManager


class S3Client(BaseClient):
    """
    Клиент для работы с DigitalOcean Spaces.

    Attributes:
        settings (SpacesSettings): Параметры подключения к Spaces
        session (Session | None): Сессия AWS для работы с S3
        client_context (Any | None): Контекст клиента S3
    """

    def __init__(self, settings: SpacesSettings) -> None:
        super().__init__()
        self.settings = settings
        self.session = None
        self.client_context = None

    def _addressing_style(self) -> str:
        # "auto": localhost/127.0.0.1 -> path (MinIO), остальное -> virtual
        if self.settings.ADDRESSING_STYLE != "auto":
            return self.settings.ADDRESSING_STYLE
        endpoint = self.settings.ENDPOINT or ""
        if "localhost" in endpoint or "127.0.0.1" in endpoint:
            return "path"
        return "virtual"

    async def connect(self) -> Any:
        """
        Создает клиент S3.

        Returns:
            Any: Контекст клиента S3 для выполнения операций с хранилищем

        Raises:
            ValueError: Если не заданы ключи доступа
            ClientError: При ошибке создания клиента
        """
        s3_config = BotocoreConfig(s3={"addressing_style": self._addressing_style()})
        if not self.settings.KEY or not self.settings.SECRET:
            self.logger.warning("Ключи Spaces не заданы, S3 клиент недоступен")
            raise ValueError("GHOST_DO_KEY и GHOST_DO_SECRET обязательны для работы с Spaces")

        try:
            self.logger.debug("Создание клиента S3...")
            self.session = Session(
                aws_access_key_id=self.settings.KEY.get_secret_value(),
                aws_secret_access_key=self.settings.SECRET.get_secret_value(),
                region_name=self.settings.REGION,
            )
            self.client_context = self.session.client(
                **self.settings.s3_params,
                config=s3_config,
            )
            self.logger.debug("Клиент S3 создан для бакета %s", self.settings.BUCKET)
            return self.client_context
        except ClientError as e:
            error_details = (
                e.response["Error"] if hasattr(e, "response") else "Нет деталей"
            )
            self.logger.error(
                "Ошибка создания S3 клиента: %s\nДетали: %s", e, error_details
            )
            raise

    async def close(self) -> None:
        if self.client_context:
            self.client_context = None
            self.logger.debug("Клиент S3 закрыт")


class S3ContextManager(BaseContextManager):
    """
    Контекстный менеджер для S3.

    Example:
        async with S3ContextManager(settings) as s3:
            await s3.put_object(...)
    """

    def __init__(self, settings: SpacesSettings) -> None:
        super().__init__()
        self.s3_client = S3Client(settings)
        self.client_context = None

    async def __aenter__(self):
        self.client_context = await self.s3_client.connect()
        return await self.client_context.__aenter__()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.client_context:
            await self.client_context.__aexit__(exc_type, exc_val, exc_tb)
        await self.s3_client.close()
