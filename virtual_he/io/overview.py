"""Side-by-side preview of input channels and the virtual H&E result."""

from pathlib import Path
from typing import Optional

import numpy as np
from matplotlib.figure import Figure

from virtual_he.errors import EncodeError

# Longest side drawn per panel
MAX_PREVIEW_SIZE = 1024


def _preview_stride(shape) -> int:
    return max(1, -(-max(shape[:2]) // MAX_PREVIEW_SIZE))


def save_overview_image(
    nucleus: np.ndarray,
    eosin: np.ndarray,
    rgb: np.ndarray,
    output_path: Path,
    title: Optional[str] = None,
) -> None:
    """
    Save a three-panel figure: nucleus, eosin, virtual H&E.

    Large images are subsampled by a fixed stride so the figure stays small.

    Args:
        nucleus: Normalized nucleus grid (H, W)
        eosin: Normalized eosin grid (H, W)
        rgb: Virtual H&E image (H, W, 3) uint8
        output_path: Destination image path
        title: Optional figure title

    Raises:
        EncodeError: If the figure cannot be written
    """
    step = _preview_stride(rgb.shape)

    # Figure objects do not need an interactive backend
    fig = Figure(figsize=(15, 5.5))
    axes = fig.subplots(1, 3)
    panels = [
        (nucleus[::step, ::step], 'Nucleus', 'gray'),
        (eosin[::step, ::step], 'Eosin', 'gray'),
        (rgb[::step, ::step], 'Virtual H&E', None),
    ]
    for ax, (img, label, cmap) in zip(axes, panels):
        if cmap is None:
            ax.imshow(img)
        else:
            ax.imshow(img, cmap=cmap, vmin=0.0, vmax=1.0)
        ax.set_title(label, fontsize=12)
        ax.axis('off')

    if title:
        fig.suptitle(title, fontsize=14)

    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
    except (OSError, ValueError) as e:
        raise EncodeError(f"Could not save overview: {e}", path=output_path) from e
