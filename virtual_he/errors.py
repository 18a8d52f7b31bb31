"""Exceptions raised by the virtual H&E pipeline."""

from pathlib import Path
from typing import Optional, Tuple


class VirtualHEError(Exception):
    """Base class for all pipeline errors."""


class DecodeError(VirtualHEError):
    """Input image could not be read or has an unsupported pixel format."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)


class UnsupportedChannelFormatError(DecodeError):
    """Input image is not single-channel grayscale."""


class ShapeMismatchError(VirtualHEError, ValueError):
    """Nucleus and eosin grids do not have the same dimensions."""

    def __init__(self, nucleus_shape: Tuple[int, ...], eosin_shape: Tuple[int, ...],
                 message: Optional[str] = None):
        self.nucleus_shape = tuple(nucleus_shape)
        self.eosin_shape = tuple(eosin_shape)
        if message is None:
            message = (f"Nucleus shape {self.nucleus_shape} does not match "
                       f"eosin shape {self.eosin_shape}")
        super().__init__(message)


class DegenerateImageError(VirtualHEError, ValueError):
    """Image has no usable intensity range (empty or all-zero)."""


class EncodeError(VirtualHEError):
    """Output image could not be written."""

    def __init__(self, message: str, path: Optional[Path] = None):
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
