"""Image file I/O: decode sources to RGBA8 and export pipeline artifacts.

The pipeline itself never touches the filesystem; this module sits on its
boundary.
"""

from pathlib import Path
from typing import Dict, Optional, Union

import cv2
import numpy as np

from chromadepth.errors import ExportError, RasterError
from chromadepth.depth.raster import validate_raster
from chromadepth.utils.logger import get_logger
from chromadepth.utils.timing import timestamp_ms

logger = get_logger(__name__)

ARTIFACT_KINDS = ("depth", "final")

# Formats without an alpha channel
_OPAQUE_FORMATS = {"jpg"}


def to_rgba(pixels: np.ndarray) -> np.ndarray:
    """
    Convert an OpenCV-decoded array to an RGBA8 raster.

    Args:
        pixels: Grayscale (H, W), BGR (H, W, 3) or BGRA (H, W, 4) array,
            uint8 or uint16.

    Returns:
        RGBA8 raster (H, W, 4).
    """
    if pixels.dtype == np.uint16:
        pixels = (pixels >> 8).astype(np.uint8)
    elif pixels.dtype != np.uint8:
        raise ExportError(f"Unsupported pixel type {pixels.dtype}")

    if pixels.ndim == 2:
        return cv2.cvtColor(pixels, cv2.COLOR_GRAY2RGBA)
    if pixels.ndim == 3 and pixels.shape[2] == 1:
        return cv2.cvtColor(pixels[..., 0], cv2.COLOR_GRAY2RGBA)
    if pixels.ndim == 3 and pixels.shape[2] == 3:
        return cv2.cvtColor(pixels, cv2.COLOR_BGR2RGBA)
    if pixels.ndim == 3 and pixels.shape[2] == 4:
        return cv2.cvtColor(pixels, cv2.COLOR_BGRA2RGBA)
    raise ExportError(f"Unsupported image shape {pixels.shape}")


def load_image(path: Union[str, Path]) -> np.ndarray:
    """
    Load an image file as an RGBA8 raster.

    Args:
        path: Image file path.

    Returns:
        RGBA8 raster (H, W, 4).

    Raises:
        ExportError: If the file is missing or cannot be decoded.
    """
    path = Path(path)
    if not path.is_file():
        raise ExportError(f"Image not found: {path}")

    pixels = cv2.imread(str(path), cv2.IMREAD_UNCHANGED)
    if pixels is None:
        raise ExportError(f"Image unreadable: {path}")

    rgba = to_rgba(pixels)
    logger.info(f"Loaded {path.name}: {rgba.shape[1]}x{rgba.shape[0]}")
    return rgba


def save_image(pixels: np.ndarray, path: Union[str, Path]) -> Path:
    """
    Encode an RGBA8 raster and write it to path.

    The format follows the file extension. Alpha is dropped for JPEG.

    Raises:
        ExportError: If the raster is invalid or writing fails.
    """
    path = Path(path)
    try:
        validate_raster(pixels, "image")
    except RasterError as e:
        raise ExportError(f"Cannot export {path.name}: {e}") from e

    if path.suffix.lower().lstrip(".") in _OPAQUE_FORMATS:
        bgr = cv2.cvtColor(np.ascontiguousarray(pixels), cv2.COLOR_RGBA2BGR)
    else:
        bgr = cv2.cvtColor(np.ascontiguousarray(pixels), cv2.COLOR_RGBA2BGRA)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        ok = cv2.imwrite(str(path), bgr)
    except (OSError, cv2.error) as e:
        raise ExportError(f"Failed to save {path}: {e}") from e
    if not ok:
        raise ExportError(f"Failed to save {path}")

    return path


def artifact_filename(kind: str, fmt: str = "png", stamp: Optional[int] = None) -> str:
    """File name for an exported artifact, e.g. ``depth_image_1718000000000.png``."""
    if stamp is None:
        stamp = timestamp_ms()
    return f"{kind}_image_{stamp}.{fmt}"


def export_artifact(
    pixels: Optional[np.ndarray],
    kind: str,
    directory: Union[str, Path],
    fmt: str = "png",
    stamp: Optional[int] = None,
) -> Path:
    """
    Export a depth map or colored image.

    Args:
        pixels: Artifact raster, or None if it has not been produced.
        kind: "depth" or "final".
        directory: Output directory (created if missing).
        fmt: png, jpg or webp.
        stamp: Millisecond timestamp for the file name (now if None).

    Returns:
        Path of the written file.

    Raises:
        ExportError: If there is nothing to export or writing fails.
    """
    if kind not in ARTIFACT_KINDS:
        raise ExportError(f"Unknown artifact kind {kind!r}, expected one of {ARTIFACT_KINDS}")
    if pixels is None:
        raise ExportError(f"No {kind} image to export")

    path = Path(directory) / artifact_filename(kind, fmt, stamp)
    save_image(pixels, path)
    logger.info(f"{kind} image saved to {path}")
    return path


def export_state(state, directory: Union[str, Path], fmt: str = "png") -> Dict[str, Path]:
    """
    Export both artifacts of a pipeline snapshot with a shared timestamp.

    Args:
        state: PipelineState snapshot.
        directory: Output directory.
        fmt: png, jpg or webp.

    Returns:
        Mapping of kind ("depth", "final") to written path.
    """
    stamp = timestamp_ms()
    return {
        "depth": export_artifact(state.depth_map, "depth", directory, fmt, stamp),
        "final": export_artifact(state.colored_image, "final", directory, fmt, stamp),
    }
