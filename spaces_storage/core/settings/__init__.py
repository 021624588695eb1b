from .base import (DEFAULT_IMAGE_SIZES, LoggingSettings, Settings,
                   SpacesSettings, settings)

__all__ = [
    "DEFAULT_IMAGE_SIZES",
    "LoggingSettings",
    "Settings",
    "SpacesSettings",
    "settings",
]
