"""CLI for virtual H&E generation."""

import click
from pathlib import Path
from typing import Optional

from virtual_he.config import load_config
from virtual_he.core.compositor import ROUNDING_MODES


@click.command()
@click.argument('nucleus', type=click.Path(dir_okay=False, path_type=Path))
@click.argument('eosin', type=click.Path(dir_okay=False, path_type=Path))
@click.argument('output', type=click.Path(dir_okay=False, path_type=Path))
@click.option('-k', 'k', type=click.FloatRange(min=0, min_open=True), default=None,
              help='Stain strength factor; adjusts the H&E color profile [default: 2.5]')
@click.option('--percentile', '-p', type=click.FloatRange(min=0, max=100, min_open=True),
              default=None, help='Histogram saturation percentile [default: 99.999]')
@click.option('--workers', '-w', type=click.IntRange(min=1), default=None,
              help='Threads used to compose the RGB image [default: 1]')
@click.option('--rounding', type=click.Choice(ROUNDING_MODES), default=None,
              help='8-bit conversion mode [default: truncate]')
@click.option('--overview', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Also save a side-by-side preview figure to this path')
@click.option('--config', type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help='Path to config file')
@click.option('--quiet', '-q', is_flag=True, help='Only report the result and errors')
def main(nucleus: Path, eosin: Path, output: Path, k: Optional[float],
         percentile: Optional[float], workers: Optional[int], rounding: Optional[str],
         overview: Optional[Path], config: Optional[Path], quiet: bool):
    """
    Make a virtual H&E image from fluorescent microscopy images.

    NUCLEUS is the nucleus (hematoxylin) channel, e.g. nucleus.tif.
    EOSIN is the eosin / autofluorescence channel, e.g. autof.tif.
    OUTPUT is where the RGB image is saved, e.g. output.tiff.

    Both inputs must be 8 or 16 bit single-channel grayscale images of the
    same size.
    """
    try:
        cfg = load_config(config)
    except ValueError as e:
        raise click.ClickException(str(e))

    # CLI args take precedence over config
    k = k if k is not None else cfg.get('composition.k')
    percentile = percentile if percentile is not None else cfg.get('normalization.percentile')
    workers = workers if workers is not None else cfg.get('composition.workers')
    rounding = rounding or cfg.get('composition.rounding')
    overview_path = overview or cfg.get('output.overview')

    # Lazy import to speed up CLI startup
    from virtual_he.core.logging_utils import get_logger
    from virtual_he.errors import VirtualHEError
    from virtual_he.pipeline import generate_virtual_he

    logger = get_logger(verbose=not quiet)
    logger.header("Virtual H&E")

    try:
        generate_virtual_he(
            nucleus_path=nucleus,
            eosin_path=eosin,
            output_path=output,
            k=float(k),
            percentile=float(percentile),
            rounding=rounding,
            workers=int(workers),
            overview_path=Path(overview_path) if overview_path else None,
            verbose=not quiet,
        )
    except (VirtualHEError, ValueError) as e:
        raise click.ClickException(str(e))

    click.echo(f"Virtual H&E image saved to: {output}")


if __name__ == '__main__':
    main()
