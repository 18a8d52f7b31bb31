"""Tests for overview figure."""

import pytest
import numpy as np

from virtual_he.core.compositor import compose
from virtual_he.errors import EncodeError
from virtual_he.io.overview import MAX_PREVIEW_SIZE, _preview_stride, save_overview_image


class TestSaveOverviewImage:
    """Tests for save_overview_image function."""

    def test_creates_file(self, normalized_pair, temp_output_dir):
        nucleus, eosin = normalized_pair
        rgb = compose(nucleus, eosin)
        path = temp_output_dir / "overview.png"
        save_overview_image(nucleus, eosin, rgb, path, title="sample")
        assert path.exists()
        assert path.stat().st_size > 0

    def test_unsupported_format(self, normalized_pair, temp_output_dir):
        nucleus, eosin = normalized_pair
        rgb = compose(nucleus, eosin)
        with pytest.raises(EncodeError):
            save_overview_image(nucleus, eosin, rgb, temp_output_dir / "overview.notaformat")


class TestPreviewStride:
    """Tests for preview subsampling."""

    def test_small_image_not_subsampled(self):
        assert _preview_stride((256, 256, 3)) == 1

    def test_large_image_fits(self):
        shape = (5000, 3000, 3)
        step = _preview_stride(shape)
        assert len(range(0, 5000, step)) <= MAX_PREVIEW_SIZE
