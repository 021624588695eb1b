"""
Обработчики исключений для FastAPI.

Преобразуют BaseAPIException и непредвиденные ошибки в единый JSON ответ
ErrorResponseSchema.
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from spaces_storage.schemas import ErrorResponseSchema, ErrorSchema

from .base import BaseAPIException

logger = logging.getLogger("spaces_storage.exceptions")


def _error_response(
    status_code: int, detail: str, error_type: str, extra: dict
) -> JSONResponse:
    content = ErrorResponseSchema(
        message=detail,
        error=ErrorSchema(
            detail=detail,
            error_type=error_type,
            status_code=status_code,
            timestamp=datetime.now(timezone.utc).isoformat(),
            extra=extra,
        ),
    )
    return JSONResponse(status_code=status_code, content=content.model_dump())


async def api_exception_handler(request: Request, exc: BaseAPIException) -> JSONResponse:
    """Обработчик исключений приложения."""
    logger.warning(
        "%s %s -> %d %s: %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.error_type,
        exc.detail,
    )
    return _error_response(exc.status_code, str(exc.detail), exc.error_type, exc.extra)


async def internal_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Обработчик непредвиденных ошибок."""
    logger.exception("Необработанная ошибка при %s %s", request.method, request.url.path)
    return _error_response(500, "Внутренняя ошибка сервера", "internal_error", {})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Регистрирует обработчики исключений в приложении.

    Args:
        app: Экземпляр FastAPI
    """
    app.add_exception_handler(BaseAPIException, api_exception_handler)
    app.add_exception_handler(Exception, internal_exception_handler)
