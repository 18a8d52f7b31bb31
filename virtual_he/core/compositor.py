"""Beer-Lambert composition of two stain channels into an RGB image.

Each output channel is the transmitted light through both stains:

    rgb[..., c] = exp(-beta[H, c] * nucleus * k) * exp(-beta[E, c] * eosin * k)

where ``beta`` is :data:`~virtual_he.core.stains.ATTENUATION_COEFFICIENTS`
and ``k`` scales the overall stain strength. Every output pixel depends only
on the two input pixels at the same position, so the work can be split into
row bands and run on a thread pool (numpy releases the GIL for the ufuncs).
"""

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Iterator, Tuple

import numpy as np

from virtual_he.core.stains import ATTENUATION_COEFFICIENTS, Stain
from virtual_he.errors import ShapeMismatchError

DEFAULT_STRENGTH = 2.5

TRUNCATE = "truncate"
ROUND = "round"
ROUNDING_MODES = (TRUNCATE, ROUND)


def transmittance(nucleus: np.ndarray, eosin: np.ndarray,
                  k: float = DEFAULT_STRENGTH) -> np.ndarray:
    """
    Compute per-channel transmitted light before quantization.

    Args:
        nucleus: Normalized nucleus grid (H, W)
        eosin: Normalized eosin grid (H, W), same shape as nucleus
        k: Stain strength factor

    Returns:
        Float grid (H, W, 3) in (0, 1] for inputs in [0, 1]
    """
    beta_h = ATTENUATION_COEFFICIENTS[Stain.HEMATOXYLIN]
    beta_e = ATTENUATION_COEFFICIENTS[Stain.EOSIN]
    nucleus = np.asarray(nucleus)[..., np.newaxis]
    eosin = np.asarray(eosin)[..., np.newaxis]
    return np.exp(-beta_h * nucleus * k) * np.exp(-beta_e * eosin * k)


def quantize(values: np.ndarray, rounding: str = TRUNCATE) -> np.ndarray:
    """
    Convert transmittance to 8-bit intensities.

    Values are scaled by 255 and clamped above at 255 before the cast, so
    transmittance above 1.0 saturates instead of wrapping.

    Args:
        values: Float transmittance, non-negative
        rounding: "truncate" (floor, default) or "round" (nearest)

    Returns:
        uint8 array with the same shape as values
    """
    if rounding not in ROUNDING_MODES:
        raise ValueError(f"Rounding must be one of {ROUNDING_MODES}, got {rounding!r}")

    scaled = np.minimum(values * 255.0, 255.0)
    if rounding == ROUND:
        scaled = np.rint(scaled)
    return scaled.astype(np.uint8)


def _row_bands(height: int, workers: int) -> Iterator[Tuple[int, int]]:
    """Yield (y0, y1) row ranges splitting height into at most `workers` bands."""
    band = math.ceil(height / workers)
    for y0 in range(0, height, band):
        yield y0, min(y0 + band, height)


def _compose_band(nucleus: np.ndarray, eosin: np.ndarray, k: float,
                  rounding: str, out: np.ndarray) -> None:
    out[...] = quantize(transmittance(nucleus, eosin, k), rounding)


def compose(nucleus: np.ndarray, eosin: np.ndarray, k: float = DEFAULT_STRENGTH,
            rounding: str = TRUNCATE, workers: int = 1) -> np.ndarray:
    """
    Blend normalized nucleus and eosin channels into a virtual H&E image.

    Args:
        nucleus: Normalized nucleus (hematoxylin) grid, shape (H, W)
        eosin: Normalized eosin grid, shape (H, W)
        k: Stain strength factor, must be positive (default: 2.5)
        rounding: "truncate" (default) or "round" for the 8-bit conversion
        workers: Number of threads; rows are split into that many bands

    Returns:
        RGB image (H, W, 3) as uint8

    Raises:
        ShapeMismatchError: If the two grids differ in shape
        ValueError: If grids are not 2D, contain non-finite values, or
            k, rounding or workers are invalid
    """
    nucleus = np.asarray(nucleus)
    eosin = np.asarray(eosin)

    # Checked before anything else is computed
    if nucleus.shape != eosin.shape:
        raise ShapeMismatchError(nucleus.shape, eosin.shape)
    if nucleus.ndim != 2:
        raise ValueError(f"Expected 2D intensity grids, got shape {nucleus.shape}")
    if not (math.isfinite(k) and k > 0):
        raise ValueError(f"Strength factor k must be positive and finite, got {k}")
    if rounding not in ROUNDING_MODES:
        raise ValueError(f"Rounding must be one of {ROUNDING_MODES}, got {rounding!r}")
    if workers < 1:
        raise ValueError(f"Workers must be at least 1, got {workers}")
    if not (np.isfinite(nucleus).all() and np.isfinite(eosin).all()):
        raise ValueError("Intensity grids contain non-finite values")

    height, width = nucleus.shape
    rgb = np.empty((height, width, 3), dtype=np.uint8)

    workers = max(1, min(workers, height))
    if workers == 1:
        _compose_band(nucleus, eosin, k, rounding, rgb)
        return rgb

    with ThreadPoolExecutor(max_workers=workers) as ex:
        futs = [
            ex.submit(_compose_band, nucleus[y0:y1], eosin[y0:y1], k, rounding, rgb[y0:y1])
            for y0, y1 in _row_bands(height, workers)
        ]
        # Propagate worker exceptions
        for f in futs:
            f.result()

    return rgb
