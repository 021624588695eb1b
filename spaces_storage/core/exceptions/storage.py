"""
Исключения файлового хранилища и обработки изображений.

Ошибки транспорта S3 (botocore ClientError) здесь не оборачиваются:
save и read пробрасывают их без изменений.
"""

from typing import Any, Dict, Optional

from .base import BaseAPIException


class ImageProcessingUnavailableError(BaseAPIException):
    """Библиотека обработки изображений (Pillow) не установлена."""

    def __init__(
        self,
        detail: str = "Pillow не установлен, изменение размера изображений недоступно",
        extra: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=503,
            detail=detail,
            error_type="IMAGE_PROCESSING_UNAVAILABLE",
            extra=extra or {},
        )


class ImageProcessingError(BaseAPIException):
    """Ошибка при изменении размера изображения."""

    def __init__(
        self,
        cause: BaseException,
        extra: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            cause: Исходное исключение Pillow.
            extra: Дополнительная информация.
        """
        self.cause = cause
        super().__init__(
            status_code=500,
            detail=f"Не удалось обработать изображение. {cause!r}",
            error_type="IMAGE_PROCESSING_FAILED",
            extra={"cause": repr(cause), **(extra or {})},
        )


class NotManagedByStoreError(BaseAPIException):
    """Запрошенный URL не принадлежит этому хранилищу."""

    def __init__(
        self,
        path: str,
        space_url: str,
        extra: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            path: Запрошенный URL.
            space_url: Корневой URL хранилища.
            extra: Дополнительная информация.
        """
        super().__init__(
            status_code=400,
            detail=f"{path} не хранится в DigitalOcean Spaces",
            error_type="NOT_MANAGED_BY_STORE",
            extra={"path": path, "space_url": space_url, **(extra or {})},
        )


class UniqueKeyExhaustedError(BaseAPIException):
    """Не удалось подобрать свободное имя файла за отведённое число попыток."""

    def __init__(
        self,
        directory: str,
        name: str,
        attempts: int,
        extra: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=409,
            detail=(
                f"Не удалось подобрать уникальное имя для '{name}' "
                f"в '{directory}' за {attempts} попыток"
            ),
            error_type="UNIQUE_KEY_EXHAUSTED",
            extra={
                "directory": directory,
                "name": name,
                "attempts": attempts,
                **(extra or {}),
            },
        )
