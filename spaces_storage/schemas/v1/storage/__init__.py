from .base import ReadOptionsSchema, SizeProfileSchema, StorageImageSchema

__all__ = [
    "ReadOptionsSchema",
    "SizeProfileSchema",
    "StorageImageSchema",
]
