"""Histogram scaling for fluorescence channels."""

import numpy as np

from virtual_he.errors import DegenerateImageError

# One pixel in 100,000 saturates at full intensity
DEFAULT_PERCENTILE = 99.999


def threshold_index(num_pixels: int, percentile: float) -> int:
    """
    Index of the saturation threshold in the ascending sort of all pixels.

    Args:
        num_pixels: Total pixel count (must be positive)
        percentile: Percentile in (0, 100]

    Returns:
        floor(percentile * num_pixels / 100), clamped to num_pixels - 1
    """
    index = int(np.floor(percentile * num_pixels / 100.0))
    return min(index, num_pixels - 1)


def saturation_threshold(grid: np.ndarray, percentile: float = DEFAULT_PERCENTILE) -> float:
    """
    Intensity that maps to 1.0 after histogram scaling.

    Uses a partial sort: the value at the threshold index is the same one a
    full ascending sort would put there.

    Args:
        grid: 2D intensity grid
        percentile: Percentile in (0, 100]

    Returns:
        The pixel value at the threshold index

    Raises:
        ValueError: If percentile is outside (0, 100]
        DegenerateImageError: If the grid is empty
    """
    if not 0 < percentile <= 100:
        raise ValueError(f"Percentile must be in (0, 100], got {percentile}")

    flat = np.ravel(grid)
    if flat.size == 0:
        raise DegenerateImageError("Cannot scale an empty image")

    idx = threshold_index(flat.size, percentile)
    return np.partition(flat, idx)[idx]


def normalize(grid: np.ndarray, percentile: float = DEFAULT_PERCENTILE) -> np.ndarray:
    """
    Scale a channel so the given percentile saturates at 1.0.

    More robust to hot pixels and debris than min-max scaling: everything
    above the percentile threshold is clipped to 1.0.

    Args:
        grid: 2D intensity grid (non-negative). Integer input is promoted
            to float32.
        percentile: Percentile in (0, 100] (default: 99.999)

    Returns:
        New grid with values in [0, 1], same float dtype as the input

    Raises:
        ValueError: If the grid is not 2D or percentile is out of range
        DegenerateImageError: If the threshold is zero or not finite
            (all-zero or empty image)
    """
    grid = np.asarray(grid)
    if grid.ndim != 2:
        raise ValueError(f"Expected a 2D intensity grid, got shape {grid.shape}")
    if not np.issubdtype(grid.dtype, np.floating):
        grid = grid.astype(np.float32)

    max_intensity = saturation_threshold(grid, percentile)
    if not np.isfinite(max_intensity) or max_intensity <= 0:
        raise DegenerateImageError(
            f"Saturation threshold is {max_intensity} at percentile {percentile}; "
            "image has no positive intensity to scale"
        )

    return np.minimum(grid / max_intensity, 1.0)
