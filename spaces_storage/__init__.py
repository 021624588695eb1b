"""
Адаптер хранилища DigitalOcean Spaces для CMS.

Usage:
    from spaces_storage import SpacesStorage

    storage = SpacesStorage({"bucket": "media", "region": "fra1"})
    url = await storage.save({"name": "photo.jpg", "path": "/tmp/x", "type": "image/jpeg"})
"""

from spaces_storage.core.integrations.storages import SpacesStorage

__all__ = ["SpacesStorage"]
