"""
Storage module - product image uploads.
"""

from .image_storage import ImageStorage, SupabaseImageStorage, build_object_path

__all__ = [
    "ImageStorage",
    "SupabaseImageStorage",
    "build_object_path",
]
