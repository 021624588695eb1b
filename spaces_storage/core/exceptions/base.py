"""
Базовое исключение API.

Все исключения приложения наследуются от BaseAPIException, чтобы хост мог
обработать их единым обработчиком (см. handlers.py).
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException


class BaseAPIException(HTTPException):
    """
    Базовое исключение с типом ошибки и дополнительными данными.

    Attributes:
        status_code (int): HTTP статус ответа.
        detail (str): Сообщение об ошибке.
        error_type (str): Машиночитаемый тип ошибки.
        extra (Dict): Дополнительные данные для ответа.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_type: str,
        extra: Optional[Dict[Any, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.error_type = error_type
        self.extra = extra or {}

    def __str__(self) -> str:
        return str(self.detail)
