"""
Virtual H&E

Synthesizes Hematoxylin & Eosin style RGB images from a nuclear stain
channel and an eosin/autofluorescence channel of a fluorescence microscope,
using percentile histogram scaling and a Beer-Lambert absorbance model.
"""

__version__ = "0.1.0"

__all__ = [
    "normalize",
    "compose",
    "load_channel",
    "save_rgb_image",
    "generate_virtual_he",
]


def __getattr__(name):
    """Lazy import so the CLI starts without loading OpenCV."""
    if name == "normalize":
        from virtual_he.core.image_processing import normalize
        return normalize
    elif name == "compose":
        from virtual_he.core.compositor import compose
        return compose
    elif name == "load_channel":
        from virtual_he.io.images import load_channel
        return load_channel
    elif name == "save_rgb_image":
        from virtual_he.io.images import save_rgb_image
        return save_rgb_image
    elif name == "generate_virtual_he":
        from virtual_he.pipeline import generate_virtual_he
        return generate_virtual_he
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
