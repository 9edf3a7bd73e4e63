"""
Pytest configuration and fixtures for ChromaDepth tests.
"""
import numpy as np
import pytest

from chromadepth.pipeline import PipelineCoordinator


def make_raster(pixels):
    """Build an RGBA8 raster from a nested list of (r, g, b, a) tuples."""
    return np.array(pixels, dtype=np.uint8)


@pytest.fixture
def single_pixel():
    """1x1 source with RGBA(200, 100, 50, 255)."""
    return make_raster([[(200, 100, 50, 255)]])


@pytest.fixture
def gray_ramp():
    """1x3 depth map: black, mid gray, white, with varying alpha."""
    return make_raster([[(0, 0, 0, 255), (128, 128, 128, 128), (255, 255, 255, 0)]])


@pytest.fixture
def random_source():
    """Deterministic 16x24 random RGBA source."""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(16, 24, 4), dtype=np.uint8)


@pytest.fixture
def pipeline():
    """Coordinator with the midas method selected."""
    return PipelineCoordinator(method="midas")


@pytest.fixture
def ready_pipeline(pipeline, random_source):
    """Coordinator with a source set and a depth map generated."""
    pipeline.set_source(random_source)
    pipeline.request_depth_generation()
    return pipeline
