"""
Модуль обработки изображений.

- ImageResizer: Создание уменьшенных копий изображений (Pillow)
"""

from .resize import IMAGE_SUPPORT, ImageResizer

__all__ = [
    "IMAGE_SUPPORT",
    "ImageResizer",
]
