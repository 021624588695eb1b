"""
Общие исключения для API.
"""

from typing import Any, Dict, Optional

from starlette.status import HTTP_404_NOT_FOUND

from spaces_storage.core.exceptions.base import BaseAPIException


class NotFoundError(BaseAPIException):
    """
    Исключение для случая, когда запрашиваемый ресурс не найден.

    Attributes:
        status_code (int): HTTP_404_NOT_FOUND.
        detail (str): Подробное сообщение об ошибке.
        error_type (str): Тип ошибки "not_found".
    """

    def __init__(
        self,
        detail: str = "Ресурс не найден",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        extra: Optional[Dict[Any, Any]] = None,
    ):
        """
        Инициализация исключения NotFoundError.

        Args:
            detail (str): Сообщение об ошибке.
            field (str, optional): Название поля, по которому искали.
            value (Any, optional): Значение, которое не было найдено.
            extra (Dict, optional): Дополнительные данные.
        """
        if extra is None:
            extra = {}

        if field and value:
            extra.update({"field": field, "value": value})

        super().__init__(
            status_code=HTTP_404_NOT_FOUND,
            detail=detail,
            error_type="not_found",
            extra=extra,
        )
