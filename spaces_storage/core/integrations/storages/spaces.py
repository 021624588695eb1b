"""
Адаптер хранилища DigitalOcean Spaces.

Предоставляет класс SpacesStorage, реализующий контракт хоста
(exists/save/delete/read/serve) поверх S3 API Spaces. Растровые изображения
перед загрузкой уменьшаются до каждого профиля размера, варианты
загружаются параллельно.
"""

import asyncio
import posixpath
import re
from contextlib import AsyncExitStack
from pathlib import Path, PurePosixPath
from typing import (Any, AsyncContextManager, AsyncIterator, Callable, Dict,
                    List, Mapping, Optional, Union)

from botocore.exceptions import BotoCoreError, ClientError
from fastapi import Request
from fastapi.responses import StreamingResponse

from spaces_storage.core.connections import S3ContextManager
from spaces_storage.core.exceptions import NotFoundError, NotManagedByStoreError
from spaces_storage.core.integrations.images import ImageResizer
from spaces_storage.core.settings import SpacesSettings
from spaces_storage.schemas.v1.storage import (ReadOptionsSchema,
                                               SizeProfileSchema,
                                               StorageImageSchema)

from .base import AbstractStorageBackend, remove_leading_slashes

ClientFactory = Callable[[], AsyncContextManager[Any]]

_TRAILING_SLASH = re.compile(r"/$|\\$")


async def _settle(*operations) -> List[Any]:
    """
    Дожидается завершения всех операций и только потом пробрасывает первую ошибку.

    Незавершённые операции не отменяются.
    """
    results = await asyncio.gather(*operations, return_exceptions=True)
    errors = [result for result in results if isinstance(result, BaseException)]
    if errors:
        raise errors[0]
    return results


class SpacesStorage(AbstractStorageBackend):
    """
    Адаптер хранилища для DigitalOcean Spaces.

    Attributes:
        settings (SpacesSettings): Итоговые настройки (config + окружение)
        resizer (ImageResizer): Обработчик изображений
        space_url (str): Публичный корневой URL Space
        bucket_name (str): Название Space
    """

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        resizer: Optional[ImageResizer] = None,
        client_factory: Optional[ClientFactory] = None,
        settings: Optional[SpacesSettings] = None,
    ):
        """
        Args:
            config: Настройки от хоста; переменные GHOST_DO_* имеют приоритет
            resizer: Обработчик изображений (по умолчанию Pillow, если установлен)
            client_factory: Фабрика асинхронного контекста S3 клиента
            settings: Готовые настройки вместо config
        """
        self.settings = settings or SpacesSettings.from_config(config)
        super().__init__(max_unique_attempts=self.settings.MAX_UNIQUE_ATTEMPTS)
        self.resizer = resizer or ImageResizer(output_format=self.settings.OUTPUT_FORMAT)
        self._client_factory = client_factory or (
            lambda: S3ContextManager(self.settings)
        )
        self.space_url = self.settings.SPACE_URL
        self.bucket_name = self.settings.BUCKET

    def _url(self, key: str) -> str:
        return f"{self.space_url}/{key}"

    def _default_dir(self, target_dir: Optional[str]) -> str:
        return target_dir or self.get_target_dir(self.settings.SUBFOLDER)

    @staticmethod
    async def _read_file(path: str) -> bytes:
        return await asyncio.to_thread(Path(path).read_bytes)

    async def _put_object(self, s3: Any, key: str, body: bytes, content_type: str) -> None:
        await s3.put_object(
            ACL="public-read",
            Body=body,
            Bucket=self.bucket_name,
            CacheControl=self.settings.cache_control,
            ContentType=content_type,
            Key=remove_leading_slashes(key),
        )

    async def exists(self, file_name: str, target_dir: Optional[str] = None) -> bool:
        """
        Проверяет наличие файла в Spaces.

        Любая ошибка (нет файла, нет доступа, сеть) трактуется как отсутствие
        файла и не пробрасывается. Если нужна диагностика, используйте read().

        Args:
            file_name: Имя файла
            target_dir: Каталог файла

        Returns:
            bool: True если файл существует
        """
        key = remove_leading_slashes(posixpath.join(target_dir or "", file_name))
        try:
            async with self._client_factory() as s3:
                await s3.head_object(Bucket=self.bucket_name, Key=key)
            return True
        except Exception as error:
            self.logger.debug("Файл %s не найден: %s", key, error)
            return False

    async def save(
        self, image: Union[StorageImageSchema, Dict[str, Any]], target_dir: Optional[str] = None
    ) -> str:
        """
        Сохраняет файл в Spaces.

        Для растровых изображений (RASTER_TYPES) создаёт по варианту на каждый
        профиль IMAGE_SIZES и возвращает URL самого крупного варианта. Остальные
        файлы загружаются без изменений.

        Args:
            image: Загруженный файл (name, path, type)
            target_dir: Каталог; по умолчанию SUBFOLDER/ГГГГ/ММ

        Returns:
            str: URL сохранённого файла

        Raises:
            ImageProcessingUnavailableError: Pillow не установлен
            ImageProcessingError: Ошибка обработки изображения
            UniqueKeyExhaustedError: Не найдено свободное имя
            ClientError: Ошибка Spaces (без изменений)
        """
        image = StorageImageSchema.model_validate(image)
        directory = self._default_dir(target_dir)

        self.logger.info(
            "Сохранение %s (%s) в %s", image.name, image.type, directory
        )
        if image.type in self.settings.RASTER_TYPES:
            return await self._save_image_variants(image, directory)
        return await self._save_file(image, directory)

    async def _save_image_variants(self, image: StorageImageSchema, directory: str) -> str:
        base_suffix = self.settings.base_suffix
        name = self.get_sanitized_file_name(PurePosixPath(image.name).stem)

        file_name, original = await _settle(
            self.generate_unique(directory, name, base_suffix),
            self._read_file(image.path),
        )
        base_key = file_name[: -len(base_suffix)]

        async with self._client_factory() as s3:
            try:
                await _settle(
                    *(
                        self._save_variant(s3, original, profile, base_key)
                        for profile in self.settings.IMAGE_SIZES.values()
                    )
                )
            except Exception as error:
                # Уже загруженные варианты остаются в хранилище
                self.logger.error(
                    "Не удалось сохранить варианты %s: %s", file_name, error
                )
                raise

        url = self._url(file_name)
        self.logger.info(
            "Изображение %s сохранено в %d размерах: %s",
            image.name,
            len(self.settings.IMAGE_SIZES),
            url,
        )
        return url

    async def _save_variant(
        self, s3: Any, original: bytes, profile: SizeProfileSchema, base_key: str
    ) -> None:
        transformed = await self.resizer.resize(original, profile)
        key = f"{base_key}_{profile.tag}.{self.settings.OUTPUT_FORMAT}"
        await self._put_object(s3, key, transformed, f"image/{self.settings.OUTPUT_FORMAT}")
        self.logger.debug("Вариант %s загружен (%d байт)", key, len(transformed))

    async def _save_file(self, image: StorageImageSchema, directory: str) -> str:
        file_name, content = await _settle(
            self.get_unique_file_name(image, directory),
            self._read_file(image.path),
        )
        try:
            async with self._client_factory() as s3:
                await self._put_object(s3, file_name, content, image.type)
        except ClientError as error:
            self.logger.error("Не удалось загрузить %s: %s", file_name, error)
            raise

        url = self._url(file_name)
        self.logger.info("Файл %s сохранён: %s", image.name, url)
        return url

    async def save_raw(
        self, data: bytes, target_path: str, content_type: str = "image/webp"
    ) -> str:
        """
        Сохраняет байты по заданному ключу.

        Args:
            data: Содержимое файла
            target_path: Ключ в Spaces
            content_type: MIME тип

        Returns:
            str: URL сохранённого файла
        """
        async with self._client_factory() as s3:
            await self._put_object(s3, target_path, data, content_type)
        return self._url(target_path)

    async def delete(self, file_name: str, target_dir: Optional[str] = None) -> bool:
        """
        Удаляет файл из Spaces.

        Как и exists(), не пробрасывает ошибки: любая неудача даёт False.

        Returns:
            bool: True если запрос на удаление выполнен
        """
        directory = self._default_dir(target_dir)
        key = remove_leading_slashes(posixpath.join(directory, file_name))
        try:
            async with self._client_factory() as s3:
                await s3.delete_object(Bucket=self.bucket_name, Key=key)
        except Exception as error:
            self.logger.warning("Не удалось удалить %s: %s", key, error)
            return False

        self.logger.info("Файл %s удалён", key)
        return True

    async def read(
        self, options: Union[ReadOptionsSchema, Dict[str, Any], None] = None
    ) -> bytes:
        """
        Читает файл из Spaces по его URL.

        Args:
            options: {"path": URL файла}

        Returns:
            bytes: Содержимое файла

        Raises:
            NotManagedByStoreError: URL не начинается с SPACE_URL
            ClientError: Ошибка Spaces (без изменений)
        """
        options = ReadOptionsSchema.model_validate(options or {})
        path = _TRAILING_SLASH.sub("", options.path or "", count=1)

        if not path.startswith(self.space_url):
            raise NotManagedByStoreError(path, self.space_url)

        key = remove_leading_slashes(path[len(self.space_url):])
        async with self._client_factory() as s3:
            response = await s3.get_object(Bucket=self.bucket_name, Key=key)
            return await response["Body"].read()

    def serve(self) -> Callable[[Request], Any]:
        """
        Возвращает FastAPI обработчик для раздачи файлов из Spaces.

        Ключ берётся из параметра пути "path" (или из пути запроса). Заголовки
        ответа Spaces передаются без изменений, тело отдаётся потоком. Если
        объект получить не удалось (ClientError или сетевая ошибка botocore),
        обработчик закрывает клиент, поднимает NotFoundError, и
        ответ формирует обработчик исключений хоста.

        Example:
            app.add_api_route("/content/images/{path:path}", storage.serve())
        """

        async def serve_file(request: Request) -> StreamingResponse:
            key = remove_leading_slashes(
                request.path_params.get("path", request.url.path)
            )
            stack = AsyncExitStack()
            try:
                s3 = await stack.enter_async_context(self._client_factory())
                response = await s3.get_object(Bucket=self.bucket_name, Key=key)
            except (ClientError, BotoCoreError) as error:
                await stack.aclose()
                self.logger.warning("Файл %s недоступен: %s", key, error)
                raise NotFoundError(
                    detail=f"Файл {key} не найден", field="key", value=key
                ) from error
            except BaseException:
                await stack.aclose()
                raise

            headers = response.get("ResponseMetadata", {}).get("HTTPHeaders", {})

            async def stream() -> AsyncIterator[bytes]:
                try:
                    async for chunk in response["Body"].iter_chunks():
                        yield chunk
                except Exception as error:
                    self.logger.error("Ошибка передачи %s: %s", key, error)
                    raise
                finally:
                    await stack.aclose()

            return StreamingResponse(stream(), headers=dict(headers))

        return serve_file
