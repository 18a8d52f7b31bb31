"""Shared pytest fixtures for Virtual H&E tests."""

import pytest
import numpy as np
from pathlib import Path
import tempfile


# =============================================================================
# Channel Fixtures
# =============================================================================

@pytest.fixture
def sample_nucleus_image():
    """Generate a 256x256 16-bit nucleus channel with bright blob-like nuclei."""
    rng = np.random.default_rng(42)
    img = rng.integers(500, 3000, (256, 256), dtype=np.uint16)
    y, x = np.ogrid[:256, :256]
    for cx, cy in [(64, 64), (180, 90), (120, 200)]:
        img[(x - cx)**2 + (y - cy)**2 <= 15**2] = 40000
    # A single saturated hot pixel
    img[5, 5] = 65535
    return img


@pytest.fixture
def sample_eosin_image():
    """Generate a 256x256 16-bit eosin channel with smooth tissue signal."""
    rng = np.random.default_rng(7)
    y, x = np.mgrid[:256, :256]
    tissue = 8000 + 6000 * np.sin(x / 40.0) * np.cos(y / 55.0)
    noise = rng.normal(0, 300, (256, 256))
    return np.clip(tissue + noise, 0, 65535).astype(np.uint16)


@pytest.fixture
def normalized_pair(sample_nucleus_image, sample_eosin_image):
    """Normalized (nucleus, eosin) float grids."""
    from virtual_he.core.image_processing import normalize
    nucleus = normalize(sample_nucleus_image / 65535.0)
    eosin = normalize(sample_eosin_image / 65535.0)
    return nucleus, eosin


# =============================================================================
# File System Fixtures
# =============================================================================

@pytest.fixture
def temp_output_dir():
    """Create temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_channel_files(temp_output_dir, sample_nucleus_image, sample_eosin_image):
    """Write the sample channels as 16-bit PNGs and return (nucleus, eosin) paths."""
    import cv2
    nucleus_path = temp_output_dir / "nucleus.png"
    eosin_path = temp_output_dir / "autof.png"
    cv2.imwrite(str(nucleus_path), sample_nucleus_image)
    cv2.imwrite(str(eosin_path), sample_eosin_image)
    return nucleus_path, eosin_path


@pytest.fixture
def temp_color_file(temp_output_dir):
    """Write a 3-channel image that must be rejected as a channel input."""
    import cv2
    rng = np.random.default_rng(0)
    color_img = rng.integers(0, 255, (64, 64, 3), dtype=np.uint8)
    img_path = temp_output_dir / "color.png"
    cv2.imwrite(str(img_path), color_img)
    return img_path


@pytest.fixture
def temp_mismatched_file(temp_output_dir):
    """Write a grayscale image that does not match the sample channel size."""
    import cv2
    img = np.full((128, 200), 1000, dtype=np.uint16)
    img_path = temp_output_dir / "small.png"
    cv2.imwrite(str(img_path), img)
    return img_path


# =============================================================================
# Configuration Fixtures
# =============================================================================

@pytest.fixture
def sample_config():
    """Sample configuration dictionary."""
    return {
        'normalization': {
            'percentile': 99.9,
        },
        'composition': {
            'k': 3.0,
            'workers': 2,
        },
    }


@pytest.fixture
def temp_config_file(temp_output_dir, sample_config):
    """Create a temporary config YAML file."""
    import yaml
    config_path = temp_output_dir / "config.yaml"
    with open(config_path, 'w') as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture(autouse=True, scope="session")
def status_logger():
    """Create the shared status logger before CliRunner swaps stdout."""
    from virtual_he.core.logging_utils import get_logger
    return get_logger()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep VIRTUAL_HE_* variables from the shell out of the tests."""
    from virtual_he.config import ENV_MAPPINGS
    for env_var in ENV_MAPPINGS:
        monkeypatch.delenv(env_var, raising=False)


# =============================================================================
# Markers
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: mark test as slow (deselect with '-m \"not slow\"')"
    )
