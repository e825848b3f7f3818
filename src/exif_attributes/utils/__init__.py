"""
Utility Modules
"""

from exif_attributes.utils.file_utils import collect_image_paths, get_image_extensions, is_image_file
from exif_attributes.utils.progress import create_progress_bar

__all__ = [
    "collect_image_paths",
    "create_progress_bar",
    "get_image_extensions",
    "is_image_file",
]
