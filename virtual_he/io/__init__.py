"""Image I/O utilities."""

from virtual_he.io.images import (
    SUPPORTED_EXTENSIONS,
    check_output_path,
    load_channel,
    save_rgb_image,
)

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "check_output_path",
    "load_channel",
    "save_rgb_image",
]
