"""Folder listing and decoding of photos."""

from .source import list_photos, sort_photos, natural_key, open_image, IMAGE_EXTENSIONS

__all__ = ["list_photos", "sort_photos", "natural_key", "open_image", "IMAGE_EXTENSIONS"]
