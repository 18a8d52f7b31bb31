"""End-to-end virtual H&E generation from two channel images."""

from pathlib import Path
from typing import Optional

import numpy as np

from virtual_he.core.compositor import DEFAULT_STRENGTH, TRUNCATE, compose
from virtual_he.core.image_processing import DEFAULT_PERCENTILE, normalize
from virtual_he.core.logging_utils import get_logger
from virtual_he.errors import ShapeMismatchError
from virtual_he.io.images import check_output_path, load_channel, save_rgb_image

_TOTAL_STEPS = 4


def generate_virtual_he(
    nucleus_path: Path,
    eosin_path: Path,
    output_path: Path,
    k: float = DEFAULT_STRENGTH,
    percentile: float = DEFAULT_PERCENTILE,
    rounding: str = TRUNCATE,
    workers: int = 1,
    overview_path: Optional[Path] = None,
    verbose: bool = True,
) -> np.ndarray:
    """
    Make a virtual H&E image from nucleus and eosin fluorescence images.

    Both channels are histogram scaled independently, blended with the
    Beer-Lambert model and written to output_path. Nothing is written
    until the full RGB image has been computed.

    Args:
        nucleus_path: Nucleus (hematoxylin) channel image
        eosin_path: Eosin / autofluorescence channel image
        output_path: Destination for the RGB image
        k: Stain strength factor (default: 2.5)
        percentile: Saturation percentile for histogram scaling
        rounding: "truncate" or "round" for the 8-bit conversion
        workers: Threads used for composition
        overview_path: If given, also save a three-panel preview figure
        verbose: If False, progress messages are suppressed

    Returns:
        The RGB image (H, W, 3) uint8

    Raises:
        VirtualHEError: On decode, shape, degenerate image or encode errors
    """
    logger = get_logger(verbose)
    nucleus_path = Path(nucleus_path)
    eosin_path = Path(eosin_path)
    # Fail on an unusable output format before any decoding or compute
    output_path = check_output_path(output_path)

    logger.progress(1, _TOTAL_STEPS, "Loading channels")
    nucleus = load_channel(nucleus_path)
    eosin = load_channel(eosin_path)
    logger.info(f"Nucleus: {nucleus_path.name} {nucleus.shape[1]}x{nucleus.shape[0]}", indent=2)
    logger.info(f"Eosin:   {eosin_path.name} {eosin.shape[1]}x{eosin.shape[0]}", indent=2)

    if nucleus.shape != eosin.shape:
        raise ShapeMismatchError(
            nucleus.shape, eosin.shape,
            message=(f"Channel images differ in size: {nucleus_path} is "
                     f"{nucleus.shape[1]}x{nucleus.shape[0]}, {eosin_path} is "
                     f"{eosin.shape[1]}x{eosin.shape[0]}"),
        )

    logger.progress(2, _TOTAL_STEPS, f"Histogram scaling (percentile {percentile})")
    nucleus = normalize(nucleus, percentile)
    eosin = normalize(eosin, percentile)

    logger.progress(3, _TOTAL_STEPS, f"Composing virtual H&E (k={k}, workers={workers})")
    rgb = compose(nucleus, eosin, k=k, rounding=rounding, workers=workers)

    logger.progress(4, _TOTAL_STEPS, "Saving output")
    save_rgb_image(rgb, output_path)

    if overview_path is not None:
        from virtual_he.io.overview import save_overview_image
        save_overview_image(nucleus, eosin, rgb, Path(overview_path),
                            title=f"{nucleus_path.name} + {eosin_path.name} (k={k})")
        logger.success(f"Overview saved to: {overview_path}")

    return rgb
