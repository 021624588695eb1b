"""
Базовые схемы для работы с файловым хранилищем.

Схемы:
    - SizeProfileSchema: Целевой размер одного варианта изображения
    - StorageImageSchema: Файл, переданный хостом на сохранение
    - ReadOptionsSchema: Параметры чтения файла из хранилища

Использование:
    >>> profile = SizeProfileSchema(width=1000)
    >>> profile.tag
    'w1000'

    >>> image = StorageImageSchema(
    ...     name="photo.jpg",
    ...     path="/tmp/upload_3f2a",
    ...     type="image/jpeg",
    ... )
"""

from typing import Optional

from pydantic import Field, model_validator

from spaces_storage.schemas.base import CommonBaseSchema


class SizeProfileSchema(CommonBaseSchema):
    """
    Профиль размера для производного изображения.

    Attributes:
        width (Optional[int]): Максимальная ширина в пикселях
        height (Optional[int]): Максимальная высота в пикселях
    """

    width: Optional[int] = Field(default=None, gt=0, examples=[1000])
    height: Optional[int] = Field(default=None, gt=0, examples=[None])

    @model_validator(mode="after")
    def check_dimensions(self) -> "SizeProfileSchema":
        if self.width is None and self.height is None:
            raise ValueError("Профиль размера должен задавать width или height")
        return self

    @property
    def tag(self) -> str:
        """Метка размера в ключе файла, например w1000 или w300h200"""
        return (f"w{self.width}" if self.width else "") + (
            f"h{self.height}" if self.height else ""
        )


class StorageImageSchema(CommonBaseSchema):
    """
    Загруженный файл в том виде, в котором его передаёт хост.

    Attributes:
        name (str): Исходное имя файла
        path (str): Путь к временному файлу на диске
        type (str): MIME тип файла
    """

    name: str = Field(description="Исходное имя файла", examples=["photo.jpg"])
    path: str = Field(description="Путь к временному файлу")
    type: str = Field(
        default="application/octet-stream",
        description="MIME тип файла",
        examples=["image/jpeg", "application/pdf"],
    )


class ReadOptionsSchema(CommonBaseSchema):
    """Параметры чтения: полный URL файла в хранилище."""

    path: Optional[str] = Field(default=None, description="URL файла")
