"""
Базовые схемы приложения.

Содержит общие Pydantic схемы, от которых наследуются все остальные:
- CommonBaseSchema: Общая конфигурация моделей
- ErrorSchema, ErrorResponseSchema: Формат ответа при ошибке
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class CommonBaseSchema(BaseModel):
    """
    Базовая схема для всех Pydantic моделей приложения.

    Включает чтение из атрибутов объектов и заполнение по имени поля.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class ErrorSchema(CommonBaseSchema):
    """
    Схема описания ошибки.

    Attributes:
        detail (str): Описание ошибки
        error_type (str): Тип ошибки
        status_code (int): HTTP статус
        timestamp (str): Время возникновения ошибки
        extra (Dict): Дополнительные данные
    """

    detail: str = Field(description="Описание ошибки")
    error_type: str = Field(description="Тип ошибки", examples=["not_found"])
    status_code: int = Field(description="HTTP статус", examples=[404])
    timestamp: str = Field(description="Время возникновения ошибки")
    extra: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponseSchema(CommonBaseSchema):
    """Ответ API при ошибке."""

    success: bool = False
    message: Optional[str] = None
    data: Optional[Any] = None
    error: ErrorSchema
