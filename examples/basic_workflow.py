#!/usr/bin/env python3
"""
Example workflow: load channels -> histogram scale -> compose -> save

This script shows the same steps the `virtual-he` command runs, using the
package programmatically so intermediate grids can be inspected.
"""

from pathlib import Path

from virtual_he.core.compositor import compose
from virtual_he.core.image_processing import normalize
from virtual_he.io.images import load_channel, save_rgb_image
from virtual_he.io.overview import save_overview_image


def main():
    """Run the virtual H&E workflow on one image pair."""

    nucleus_path = Path("data/nucleus.tif")
    eosin_path = Path("data/autof.tif")
    output_folder = Path("results")

    print("=" * 60)
    print("Virtual H&E Workflow")
    print("=" * 60)

    nucleus = normalize(load_channel(nucleus_path))
    eosin = normalize(load_channel(eosin_path))
    print(f"Channels: {nucleus.shape[1]}x{nucleus.shape[0]}")

    # Compare a few stain strengths side by side
    for k in (1.5, 2.5, 3.5):
        rgb = compose(nucleus, eosin, k=k, workers=4)
        save_rgb_image(rgb, output_folder / f"virtual_he_k{k}.tiff")
        save_overview_image(nucleus, eosin, rgb, output_folder / f"overview_k{k}.png",
                            title=f"k={k}")
        print(f"  k={k}: mean RGB {rgb.reshape(-1, 3).mean(axis=0).round(1)}")

    print(f"Results saved to: {output_folder}")


if __name__ == "__main__":
    main()
