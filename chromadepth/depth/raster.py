"""Helpers shared by the pixel passes."""

import numpy as np

from chromadepth.errors import RasterError


def validate_raster(pixels, name: str = "raster") -> np.ndarray:
    """
    Check that pixels is a non-empty RGBA8 raster.

    Args:
        pixels: Candidate array, expected shape (H, W, 4) and dtype uint8.
        name: Used in the error message.

    Returns:
        The same array.

    Raises:
        RasterError: If the array has the wrong type, shape, dtype or is empty.
    """
    if not isinstance(pixels, np.ndarray):
        raise RasterError(f"{name} must be a numpy array, got {type(pixels).__name__}")
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise RasterError(f"{name} must have shape (H, W, 4), got {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise RasterError(f"{name} must be uint8, got {pixels.dtype}")
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise RasterError(f"{name} is empty ({pixels.shape[1]}x{pixels.shape[0]})")
    return pixels


def to_channel(values: np.ndarray) -> np.ndarray:
    """
    Clamp float channel values to [0, 255] and round half up to uint8.

    Args:
        values: Float array of any shape.

    Returns:
        uint8 array of the same shape.
    """
    values = np.nan_to_num(values, nan=0.0, posinf=255.0, neginf=0.0)
    clamped = np.clip(values, 0.0, 255.0)
    return np.floor(clamped + 0.5).astype(np.uint8)


def readonly_copy(pixels: np.ndarray) -> np.ndarray:
    """Return a private copy that cannot be written to."""
    copy = np.array(pixels, copy=True)
    copy.setflags(write=False)
    return copy
