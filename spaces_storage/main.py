"""Главный модуль приложения FastAPI, раздающего файлы из Spaces."""

from typing import Optional

from fastapi import FastAPI

from spaces_storage.core.exceptions import register_exception_handlers
from spaces_storage.core.integrations.storages import SpacesStorage
from spaces_storage.core.logging import setup_logging
from spaces_storage.core.settings import settings


def create_application(storage: Optional[SpacesStorage] = None) -> FastAPI:
    """
    Создает и настраивает экземпляр приложения FastAPI.

    Настраивает логирование, регистрирует обработчики исключений и
    подключает раздачу файлов из Spaces по пути SERVE_PATH.

    Args:
        storage: Адаптер хранилища; по умолчанию собирается из окружения

    Returns:
        FastAPI: Настроенный экземпляр приложения FastAPI.
    """
    app = FastAPI(**settings.app_params)
    setup_logging()
    register_exception_handlers(app=app)

    storage = storage or SpacesStorage()
    app.state.storage = storage
    app.add_api_route(
        f"{settings.SERVE_PATH.rstrip('/')}/{{path:path}}",
        storage.serve(),
        methods=["GET"],
        name="serve_file",
    )

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_application(), host="0.0.0.0", port=8000)
