"""
Модуль изменения размера изображений.

Предоставляет класс ImageResizer, который по исходным байтам изображения
строит уменьшенную копию в едином формате (webp по умолчанию).

Pillow является необязательной зависимостью: без неё любой вызов resize()
завершается ImageProcessingUnavailableError.
"""

import asyncio
import io
import logging
from typing import Optional

try:
    from PIL import Image, ImageOps

    IMAGE_SUPPORT = True
except ImportError:
    IMAGE_SUPPORT = False

from spaces_storage.core.exceptions import (ImageProcessingError,
                                            ImageProcessingUnavailableError)
from spaces_storage.schemas.v1.storage import SizeProfileSchema


class ImageResizer:
    """
    Создание уменьшенных копий изображений.

    - Поворачивает изображение по EXIF ориентации и отбрасывает метаданные
    - Никогда не увеличивает изображение
    - Перекодирует результат в output_format
    - Возвращает исходные байты, если результат не стал меньше

    Attributes:
        available (bool): Доступна ли обработка (установлен ли Pillow)
        output_format (str): Формат результата
        quality (int): Качество сжатия
        logger (logging.Logger): Логгер для класса
    """

    def __init__(
        self,
        available: Optional[bool] = None,
        output_format: str = "webp",
        quality: int = 80,
    ):
        self.available = IMAGE_SUPPORT if available is None else available
        self.output_format = output_format
        self.quality = quality
        self.logger = logging.getLogger(self.__class__.__name__)

    async def resize(self, original: bytes, profile: SizeProfileSchema) -> bytes:
        """
        Уменьшает изображение до профиля размера.

        Обработка выполняется в отдельном потоке, чтобы не блокировать event loop.

        Args:
            original: Исходные байты изображения
            profile: Целевые ширина и/или высота

        Returns:
            bytes: Перекодированное изображение, если оно меньше исходного, иначе original

        Raises:
            ImageProcessingUnavailableError: Pillow не установлен
            ImageProcessingError: Ошибка обработки изображения
        """
        if not self.available:
            raise ImageProcessingUnavailableError()

        try:
            return await asyncio.to_thread(
                self._resize_sync, original, profile.width, profile.height
            )
        except Exception as error:
            self.logger.error(
                "Ошибка изменения размера до %s: %s", profile.tag, error
            )
            raise ImageProcessingError(cause=error) from error

    def _resize_sync(
        self, original: bytes, width: Optional[int], height: Optional[int]
    ) -> bytes:
        with Image.open(io.BytesIO(original)) as source:
            image = ImageOps.exif_transpose(source)
            image = self._fit(image, width, height)
            resized = self._encode(image)

        self.logger.debug(
            "Изображение %sx%s: %d -> %d байт",
            width,
            height,
            len(original),
            len(resized),
        )
        return resized if len(resized) < len(original) else original

    @staticmethod
    def _fit(image, width: Optional[int], height: Optional[int]):
        current_width, current_height = image.size

        # Не увеличиваем изображение
        if (width and width > current_width) or (height and height > current_height):
            return image

        if width and height:
            return ImageOps.fit(image, (width, height), Image.Resampling.LANCZOS)
        if width:
            height = max(1, round(current_height * width / current_width))
        else:
            width = max(1, round(current_width * height / current_height))
        return image.resize((width, height), Image.Resampling.LANCZOS)

    def _encode(self, image) -> bytes:
        if image.mode not in ("RGB", "RGBA"):
            has_alpha = "A" in image.getbands() or "transparency" in image.info
            image = image.convert("RGBA" if has_alpha else "RGB")

        # exif не передаём, поэтому метаданные в результат не попадают
        buffer = io.BytesIO()
        image.save(buffer, format=self.output_format.upper(), quality=self.quality)
        return buffer.getvalue()
