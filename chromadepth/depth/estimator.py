"""Luminance-based depth estimation.

Turns an RGBA source raster into a grayscale "depth" raster using one of
the heuristics in :mod:`chromadepth.depth.methods`.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

import numpy as np

from .methods import DepthMethod, FORMULAS, build_params, default_formula
from .raster import to_channel, validate_raster
from chromadepth.utils.logger import get_logger
from chromadepth.utils.timing import Stopwatch

logger = get_logger(__name__)

MethodId = Union[DepthMethod, str]


def estimate_depth(
    source: np.ndarray,
    method: MethodId,
    params: Optional[Mapping[str, Any]] = None,
) -> np.ndarray:
    """
    Compute a monochrome depth raster from a source raster.

    Pure and deterministic: the source is never modified and identical
    inputs give byte-identical output.

    Args:
        source: RGBA8 raster (H, W, 4).
        method: Method identifier. Unknown identifiers use plain luminance.
        params: Method parameters; missing or invalid entries use defaults.

    Returns:
        New RGBA8 raster with R == G == B and the source alpha.

    Raises:
        RasterError: If source is not a non-empty RGBA8 raster.
    """
    validate_raster(source, "source")
    rgb = source[..., :3].astype(np.float64)

    resolved = DepthMethod.resolve(method)
    if resolved is None:
        if method:
            logger.warning(f"Unknown depth method {method!r}, using plain luminance")
        gray = default_formula(rgb)
    else:
        gray = FORMULAS[resolved](rgb, build_params(resolved, params))

    values = to_channel(gray)

    depth = np.empty_like(source)
    depth[..., 0] = values
    depth[..., 1] = values
    depth[..., 2] = values
    depth[..., 3] = source[..., 3]
    return depth


@dataclass
class DepthResult:
    """Result from a depth estimation pass."""

    depth_map: np.ndarray  # RGBA8 (H, W, 4), R == G == B
    computation_time_ms: float
    method: str  # Identifier as requested


class DepthEstimator:
    """Runs :func:`estimate_depth` and records how long it took.

    Example:
        estimator = DepthEstimator()
        result = estimator.compute(pixels, "midas", {"alpha": 0.8})
        depth = result.depth_map
    """

    def compute(
        self,
        source: np.ndarray,
        method: MethodId,
        params: Optional[Mapping[str, Any]] = None,
    ) -> DepthResult:
        """
        Estimate depth for a source raster.

        Args:
            source: RGBA8 raster (H, W, 4).
            method: Method identifier.
            params: Method parameters.

        Returns:
            DepthResult with the depth raster and timing.
        """
        with Stopwatch() as sw:
            depth_map = estimate_depth(source, method, params)

        method_name = method.value if isinstance(method, DepthMethod) else str(method)
        logger.debug(
            f"Depth pass {method_name}: {source.shape[1]}x{source.shape[0]} "
            f"in {sw.elapsed_ms:.1f}ms"
        )
        return DepthResult(
            depth_map=depth_map,
            computation_time_ms=sw.elapsed_ms,
            method=method_name,
        )
