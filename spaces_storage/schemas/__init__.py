"""
Схемы приложения.

Экспортирует общие схемы и схемы хранилища.
"""

from .base import CommonBaseSchema, ErrorResponseSchema, ErrorSchema
from .v1.storage import ReadOptionsSchema, SizeProfileSchema, StorageImageSchema

__all__ = [
    # Common
    "CommonBaseSchema",
    "ErrorSchema",
    "ErrorResponseSchema",

    # V1 Storage
    "ReadOptionsSchema",
    "SizeProfileSchema",
    "StorageImageSchema",
]
