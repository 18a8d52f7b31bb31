"""Tests for the end-to-end pipeline."""

import pytest
import numpy as np
import cv2

from virtual_he.core.compositor import compose
from virtual_he.core.image_processing import normalize
from virtual_he.errors import DecodeError, DegenerateImageError, EncodeError, ShapeMismatchError
from virtual_he.pipeline import generate_virtual_he


class TestGenerateVirtualHE:
    """Tests for generate_virtual_he function."""

    def test_writes_output(self, temp_channel_files, temp_output_dir):
        nucleus_path, eosin_path = temp_channel_files
        output = temp_output_dir / "virtual_he.tiff"
        rgb = generate_virtual_he(nucleus_path, eosin_path, output, verbose=False)

        assert output.exists()
        saved = cv2.cvtColor(cv2.imread(str(output), cv2.IMREAD_UNCHANGED), cv2.COLOR_BGR2RGB)
        np.testing.assert_array_equal(saved, rgb)

    def test_matches_core_functions(self, temp_channel_files, temp_output_dir,
                                    sample_nucleus_image, sample_eosin_image):
        nucleus_path, eosin_path = temp_channel_files
        rgb = generate_virtual_he(nucleus_path, eosin_path, temp_output_dir / "out.png",
                                  k=3.0, verbose=False)
        nucleus = normalize((sample_nucleus_image / np.float32(65535.0)).astype(np.float32))
        eosin = normalize((sample_eosin_image / np.float32(65535.0)).astype(np.float32))
        expected = compose(nucleus, eosin, k=3.0)
        assert np.abs(rgb.astype(int) - expected.astype(int)).max() <= 1

    def test_workers_and_overview(self, temp_channel_files, temp_output_dir):
        nucleus_path, eosin_path = temp_channel_files
        overview = temp_output_dir / "overview.png"
        serial = generate_virtual_he(nucleus_path, eosin_path, temp_output_dir / "a.png",
                                     verbose=False)
        parallel = generate_virtual_he(nucleus_path, eosin_path, temp_output_dir / "b.png",
                                       workers=4, overview_path=overview, verbose=False)
        np.testing.assert_array_equal(serial, parallel)
        assert overview.exists()

    def test_shape_mismatch_names_both_files(self, temp_channel_files, temp_mismatched_file,
                                             temp_output_dir):
        nucleus_path, _ = temp_channel_files
        output = temp_output_dir / "out.png"
        with pytest.raises(ShapeMismatchError) as excinfo:
            generate_virtual_he(nucleus_path, temp_mismatched_file, output, verbose=False)
        assert str(nucleus_path) in str(excinfo.value)
        assert str(temp_mismatched_file) in str(excinfo.value)
        assert not output.exists()

    def test_unsupported_output_format_checked_first(self, temp_output_dir):
        """The output format is rejected before the inputs are even read."""
        missing = temp_output_dir / "missing.tif"
        with pytest.raises(EncodeError, match="Unsupported output format"):
            generate_virtual_he(missing, missing, temp_output_dir / "out.gif", verbose=False)

    def test_missing_input(self, temp_channel_files, temp_output_dir):
        nucleus_path, _ = temp_channel_files
        output = temp_output_dir / "out.png"
        with pytest.raises(DecodeError):
            generate_virtual_he(nucleus_path, temp_output_dir / "missing.tif", output,
                                verbose=False)
        assert not output.exists()

    def test_blank_channel(self, temp_channel_files, temp_output_dir):
        nucleus_path, _ = temp_channel_files
        blank = temp_output_dir / "blank.png"
        cv2.imwrite(str(blank), np.zeros((256, 256), dtype=np.uint16))
        output = temp_output_dir / "out.png"
        with pytest.raises(DegenerateImageError):
            generate_virtual_he(nucleus_path, blank, output, verbose=False)
        assert not output.exists()
