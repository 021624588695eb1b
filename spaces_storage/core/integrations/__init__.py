"""
Интеграции с внешними системами: хранилища и обработка изображений.
"""
