"""Reading grayscale channel images and writing RGB results."""

import os
from pathlib import Path

import numpy as np

# Whole-slide fluorescence scans exceed OpenCV's default 2**30 pixel
# decode limit. The variable is read when cv2 loads.
os.environ.setdefault("OPENCV_IO_MAX_IMAGE_PIXELS", str(2 ** 40))

import cv2  # noqa: E402

from virtual_he.errors import DecodeError, EncodeError, UnsupportedChannelFormatError  # noqa: E402

SUPPORTED_EXTENSIONS = {'.tif', '.tiff', '.png', '.jpg', '.jpeg', '.bmp'}

# Sample type -> full-scale value
_SAMPLE_SCALES = {
    np.dtype(np.uint8): 255.0,
    np.dtype(np.uint16): 65535.0,
}


def load_channel(file_path: Path) -> np.ndarray:
    """
    Load a single-channel grayscale image as float intensities.

    8-bit samples are divided by 255, 16-bit samples by 65535.

    Args:
        file_path: Path to the channel image

    Returns:
        float32 array (H, W) with values in [0, 1]

    Raises:
        DecodeError: If the file is missing, cannot be decoded, or uses a
            sample type other than 8 or 16 bit unsigned
        UnsupportedChannelFormatError: If the image has more than one channel
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise DecodeError("File not found", path=file_path)

    try:
        img = cv2.imread(str(file_path), cv2.IMREAD_UNCHANGED)
    except cv2.error as e:
        raise DecodeError(f"Could not decode image: {e}", path=file_path) from e
    if img is None:
        raise DecodeError("Could not decode image", path=file_path)

    if img.ndim == 3 and img.shape[2] == 1:
        img = img[:, :, 0]
    if img.ndim != 2:
        raise UnsupportedChannelFormatError(
            f"Image must be single-channel grayscale, got shape {img.shape}",
            path=file_path,
        )

    scale = _SAMPLE_SCALES.get(img.dtype)
    if scale is None:
        raise DecodeError(
            f"Unsupported sample type {img.dtype}; expected 8 or 16 bit grayscale",
            path=file_path,
        )

    return img.astype(np.float32) / np.float32(scale)


def check_output_path(output_path: Path) -> Path:
    """
    Reject output paths whose extension has no supported image encoder.

    Args:
        output_path: Destination path

    Returns:
        output_path as a Path

    Raises:
        EncodeError: If the extension is not in SUPPORTED_EXTENSIONS
    """
    output_path = Path(output_path)
    if output_path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise EncodeError(
            f"Unsupported output format '{output_path.suffix}'; "
            f"expected one of {', '.join(sorted(SUPPORTED_EXTENSIONS))}",
            path=output_path,
        )
    return output_path


def save_rgb_image(rgb: np.ndarray, output_path: Path) -> None:
    """
    Write an RGB image to disk; the format follows the file extension.

    Args:
        rgb: uint8 array (H, W, 3) in R, G, B order
        output_path: Destination path; parent directories are created

    Raises:
        ValueError: If rgb is not a (H, W, 3) uint8 array
        EncodeError: If the extension is unsupported or the file cannot
            be written
    """
    rgb = np.asarray(rgb)
    if rgb.ndim != 3 or rgb.shape[2] != 3 or rgb.dtype != np.uint8:
        raise ValueError(f"Expected (H, W, 3) uint8 RGB array, got {rgb.shape} {rgb.dtype}")

    output_path = check_output_path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise EncodeError(f"Could not create output directory: {e}", path=output_path) from e

    # OpenCV stores colour images as BGR
    bgr = cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)
    try:
        written = cv2.imwrite(str(output_path), bgr)
    except cv2.error as e:
        raise EncodeError(f"Could not encode image: {e}", path=output_path) from e
    if not written:
        raise EncodeError("Could not write image", path=output_path)
