"""
Модуль base.py: настройки адаптера хранилища.

Содержит классы конфигурации:
- Логирование (LoggingSettings)
- Подключение к DigitalOcean Spaces и обработка изображений (SpacesSettings)
- Параметры хост-приложения FastAPI (Settings)

Экспортируемые объекты:
- SpacesSettings: Настройки одного экземпляра адаптера (через pydantic).
- Settings, settings: Глобальные настройки приложения.
"""

import re
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import (BaseSettings, PydanticBaseSettingsSource,
                               SettingsConfigDict)

from spaces_storage.schemas.v1.storage import SizeProfileSchema


class LoggingSettings(BaseSettings):
    """
    Конфигурация логирования приложения.

    Атрибуты:
        LOG_LEVEL (str): Уровень логирования (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        LOG_FORMAT (str): Формат логирования в консоль (pretty, json).
        LOG_FILE (Optional[str]): Путь к файлу логов. Если не задан, пишем только в консоль.
        ENCODING (str): Кодировка файла логов.
        FILE_MODE (str): Режим открытия файла логов.
        PRETTY_FORMAT (str): Цветной формат для консоли.
        JSON_FORMAT (str): Набор полей для JSON форматтера.
    """

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "pretty"  # pretty, json
    LOG_FILE: Optional[str] = None
    ENCODING: str = "utf-8"
    FILE_MODE: str = "a"

    PRETTY_FORMAT: str = (
        "\033[1;36m%(asctime)s\033[0m - \033[1;32m%(name)s\033[0m - "
        "\033[1;33m%(levelname)s\033[0m - %(message)s"
    )

    JSON_FORMAT: str = "%(asctime)s %(name)s %(levelname)s %(module)s %(funcName)s %(message)s"

    @property
    def is_json_format(self) -> bool:
        """Проверяет, используется ли JSON формат"""
        return self.LOG_FORMAT.lower() == "json"

    model_config = SettingsConfigDict(extra="ignore")


_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# subFolder -> SUB_FOLDER
_CONFIG_ALIASES = {"SUB_FOLDER": "SUBFOLDER"}

DEFAULT_IMAGE_SIZES: Dict[str, SizeProfileSchema] = {
    "xs": SizeProfileSchema(width=100),
    "s": SizeProfileSchema(width=300),
    "m": SizeProfileSchema(width=500),
    "l": SizeProfileSchema(width=1000),
}


class SpacesSettings(BaseSettings):
    """
    Настройки подключения к DigitalOcean Spaces.

    Каждое поле можно передать в конструктор адаптера (config) или задать
    переменной окружения GHOST_DO_<ПОЛЕ>. Переменная окружения имеет
    приоритет над значением из config, пустые переменные игнорируются.

    Атрибуты:
        KEY (SecretStr): Access key
        SECRET (SecretStr): Secret key
        REGION (str): Регион (nyc3, fra1, ...)
        BUCKET (str): Название Space
        SPACE_URL (str): Публичный корневой URL Space
        SUBFOLDER (str): Префикс для ключей по умолчанию (без ведущего слэша)
        ENDPOINT (Optional[str]): Собственный endpoint S3 API
        ADDRESSING_STYLE (str): auto, path или virtual
        CACHE_MAX_AGE (int): max-age для Cache-Control загруженных объектов
        MAX_UNIQUE_ATTEMPTS (int): Предел попыток подбора уникального имени
        RASTER_TYPES (List[str]): MIME типы, для которых создаются варианты размеров
        IMAGE_SIZES (Dict[str, SizeProfileSchema]): Профили размеров
        OUTPUT_FORMAT (str): Формат и расширение вариантов изображений
    """

    KEY: Optional[SecretStr] = None
    SECRET: Optional[SecretStr] = None
    REGION: Optional[str] = None
    BUCKET: Optional[str] = None
    SPACE_URL: Optional[str] = None
    SUBFOLDER: str = ""
    ENDPOINT: Optional[str] = None
    ADDRESSING_STYLE: Literal["auto", "path", "virtual"] = "auto"

    CACHE_MAX_AGE: int = 365 * 24 * 60 * 60  # 1 год
    MAX_UNIQUE_ATTEMPTS: int = Field(default=100, gt=0)
    RASTER_TYPES: List[str] = ["image/jpeg", "image/png"]
    IMAGE_SIZES: Dict[str, SizeProfileSchema] = Field(
        default_factory=lambda: dict(DEFAULT_IMAGE_SIZES)
    )
    OUTPUT_FORMAT: str = "webp"

    model_config = SettingsConfigDict(
        env_prefix="GHOST_DO_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Окружение важнее значений, переданных в конструктор
        return env_settings, dotenv_settings, init_settings, file_secret_settings

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]] = None) -> "SpacesSettings":
        """
        Собирает настройки из config хоста и снимка окружения.

        Ключи принимаются в snake_case (space_url), camelCase (spaceUrl)
        или в виде имён полей (SPACE_URL).

        Args:
            config: Словарь с ключами key, secret, region, bucket, spaceUrl,
                subFolder, endpoint

        Returns:
            SpacesSettings: Итоговые настройки
        """
        values = {
            cls._field_name(name): value
            for name, value in (config or {}).items()
            if value is not None and value != ""
        }
        return cls(**values)

    @staticmethod
    def _field_name(name: str) -> str:
        field = _CAMEL_BOUNDARY.sub("_", name).upper()
        return _CONFIG_ALIASES.get(field, field)

    @field_validator("SUBFOLDER", mode="before")
    @classmethod
    def remove_leading_slash(cls, value: Any) -> str:
        value = value or ""
        return value[1:] if value.startswith("/") else value

    @field_validator("ENDPOINT", mode="before")
    @classmethod
    def empty_endpoint_to_none(cls, value: Any) -> Optional[str]:
        return value or None

    @field_validator("IMAGE_SIZES")
    @classmethod
    def check_image_sizes(
        cls, value: Dict[str, SizeProfileSchema]
    ) -> Dict[str, SizeProfileSchema]:
        if not value:
            raise ValueError("IMAGE_SIZES должен содержать хотя бы один профиль")
        return value

    @model_validator(mode="after")
    def default_space_url(self) -> "SpacesSettings":
        if not self.SPACE_URL:
            self.SPACE_URL = f"https://{self.BUCKET}.{self.REGION}.digitaloceanspaces.com/"
        return self

    @property
    def largest_profile(self) -> SizeProfileSchema:
        """Профиль с наибольшей шириной (затем высотой)"""
        return max(
            self.IMAGE_SIZES.values(),
            key=lambda profile: (profile.width or 0, profile.height or 0),
        )

    @property
    def base_suffix(self) -> str:
        """Суффикс ключа, помечающий самый крупный вариант, например _w1000.webp"""
        return f"_{self.largest_profile.tag}.{self.OUTPUT_FORMAT}"

    @property
    def cache_control(self) -> str:
        return f"max-age={self.CACHE_MAX_AGE}"

    @property
    def s3_params(self) -> Dict[str, Any]:
        """
        Формирует параметры подключения к Spaces.

        Returns:
            Dict с параметрами для aioboto3 Session.client()
        """
        params = {
            "service_name": "s3",
            "region_name": self.REGION,
        }
        if self.ENDPOINT:
            params["endpoint_url"] = self.ENDPOINT
        return params


class Settings(BaseSettings):
    """
    Глобальные настройки хост-приложения.

    Атрибуты:
        logging (LoggingSettings): Настройки логирования
        APP_TITLE (str): Заголовок FastAPI приложения
        SERVE_PATH (str): Префикс URL, по которому отдаются файлы из Spaces
    """

    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    APP_TITLE: str = "Spaces Storage"
    APP_VERSION: str = "0.1.0"
    SERVE_PATH: str = "/content/images"

    @property
    def app_params(self) -> Dict[str, Any]:
        return {
            "title": self.APP_TITLE,
            "version": self.APP_VERSION,
        }

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        extra="ignore",
    )


# Глобальный экземпляр настроек
settings = Settings()
