from .base import BaseAPIException
from .common import NotFoundError
from .handlers import register_exception_handlers
from .storage import (ImageProcessingError, ImageProcessingUnavailableError,
                      NotManagedByStoreError, UniqueKeyExhaustedError)

__all__ = [
    # Base
    "BaseAPIException",
    # Common
    "NotFoundError",
    # Handlers
    "register_exception_handlers",
    # Storage
    "ImageProcessingError",
    "ImageProcessingUnavailableError",
    "NotManagedByStoreError",
    "UniqueKeyExhaustedError",
]
