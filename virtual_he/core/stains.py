"""Stain absorbance constants for the Beer-Lambert colour model.

The coefficients approximate the documented absorbance spectra of
hematoxylin and eosin in the red, green and blue bands. They are
calibration values and must not be changed at runtime.
"""

from enum import IntEnum

import numpy as np


class Stain(IntEnum):
    """Stain rows of the attenuation matrix."""

    HEMATOXYLIN = 0
    EOSIN = 1


class RGBChannel(IntEnum):
    """Output channel columns of the attenuation matrix."""

    RED = 0
    GREEN = 1
    BLUE = 2


# Indexed [Stain, RGBChannel]
ATTENUATION_COEFFICIENTS = np.array(
    [
        [0.860, 1.000, 0.300],  # Hematoxylin
        [0.050, 1.000, 0.544],  # Eosin
    ],
    dtype=np.float32,
)
ATTENUATION_COEFFICIENTS.setflags(write=False)


def attenuation(stain: Stain, channel: RGBChannel) -> float:
    """
    Look up a single attenuation coefficient.

    Args:
        stain: Stain row
        channel: RGB output channel

    Returns:
        Coefficient as a Python float
    """
    return float(ATTENUATION_COEFFICIENTS[Stain(stain), RGBChannel(channel)])
