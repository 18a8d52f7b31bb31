"""Numeric core: histogram scaling and Beer-Lambert composition."""

from virtual_he.core.stains import ATTENUATION_COEFFICIENTS, RGBChannel, Stain, attenuation
from virtual_he.core.image_processing import DEFAULT_PERCENTILE, normalize, threshold_index
from virtual_he.core.compositor import DEFAULT_STRENGTH, ROUNDING_MODES, compose, quantize

__all__ = [
    "ATTENUATION_COEFFICIENTS",
    "RGBChannel",
    "Stain",
    "attenuation",
    "DEFAULT_PERCENTILE",
    "normalize",
    "threshold_index",
    "DEFAULT_STRENGTH",
    "ROUNDING_MODES",
    "compose",
    "quantize",
]
