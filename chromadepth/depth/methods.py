"""Depth method catalogue: identifiers, parameter shapes and formulas.

Each method is a weighted-luminance heuristic named after the model it
imitates. None of them runs a neural network.
"""

import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import numpy as np

# Rec. 601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)


class DepthMethod(str, Enum):
    """Supported depth heuristics."""

    DEPTH_ANYTHING_V2 = "depth-anything-v2"
    MIDAS = "midas"
    MARIGOLD = "marigold"
    TFJS_DEPTH = "tfjs-depth"
    DEPTH_PRO = "depth-pro"

    @classmethod
    def resolve(cls, value) -> Optional["DepthMethod"]:
        """Return the matching member, or None for unknown identifiers."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


@dataclass(frozen=True)
class ParamSpec:
    """UI-facing description of one method parameter."""
    name: str
    label: str
    default: float
    minimum: float
    maximum: float
    step: float
    unit: str = ""


# ── Parameter shapes ─────────────────────────────────────────────────
# Only the first field of each shape feeds the formula; the rest are
# carried for the catalogue.

@dataclass(frozen=True)
class DepthAnythingV2Params:
    confidence: float = 0.5
    resolution: float = 768
    quality: float = 1


@dataclass(frozen=True)
class MidasParams:
    alpha: float = 0.6
    resolution: float = 384
    smoothing: float = 0.5


@dataclass(frozen=True)
class MarigoldParams:
    ensemble: float = 4
    steps: float = 10
    resolution: float = 768


@dataclass(frozen=True)
class TfjsDepthParams:
    focus: float = 0.8
    segmentation: float = 0.7
    smoothing: float = 0.5


@dataclass(frozen=True)
class DepthProParams:
    sharpness: float = 1.0
    scale: float = 1.0
    quality: float = 1


PARAM_TYPES = {
    DepthMethod.DEPTH_ANYTHING_V2: DepthAnythingV2Params,
    DepthMethod.MIDAS: MidasParams,
    DepthMethod.MARIGOLD: MarigoldParams,
    DepthMethod.TFJS_DEPTH: TfjsDepthParams,
    DepthMethod.DEPTH_PRO: DepthProParams,
}


def coerce_number(value: Any, default: float) -> float:
    """
    Convert a parameter value to a finite float.

    Args:
        value: Raw value from a parameter mapping.
        default: Returned when value is missing, non-numeric or not finite.

    Returns:
        The numeric value, or default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    return number if math.isfinite(number) else default


def build_params(method: DepthMethod, values: Optional[Mapping[str, Any]] = None):
    """
    Build the parameter dataclass for a method from a loose mapping.

    Unknown keys are ignored; each field falls back to its default.

    Args:
        method: Depth method.
        values: Mapping of parameter name to value (may be None).

    Returns:
        Frozen parameter dataclass instance for the method.
    """
    param_type = PARAM_TYPES[method]
    if isinstance(values, param_type):
        return values

    values = values or {}
    kwargs = {
        f.name: coerce_number(values.get(f.name), f.default)
        for f in fields(param_type)
    }
    return param_type(**kwargs)


# ── Formulas ─────────────────────────────────────────────────────────

def weighted_luminance(rgb: np.ndarray, weights: Tuple[float, float, float]) -> np.ndarray:
    """Weighted sum of the R, G, B planes of a float (H, W, 3) array."""
    return rgb[..., 0] * weights[0] + rgb[..., 1] * weights[1] + rgb[..., 2] * weights[2]


def _depth_anything_v2(rgb, params: DepthAnythingV2Params):
    return weighted_luminance(rgb, (0.2, 0.7, 0.1)) * params.confidence


def _midas(rgb, params: MidasParams):
    return weighted_luminance(rgb, LUMA_WEIGHTS) * params.alpha


def _marigold(rgb, params: MarigoldParams):
    return np.power(weighted_luminance(rgb, LUMA_WEIGHTS), 1.2) * params.ensemble / 4


def _tfjs_depth(rgb, params: TfjsDepthParams):
    return weighted_luminance(rgb, (0.1, 0.8, 0.1)) * params.focus


def _depth_pro(rgb, params: DepthProParams):
    return np.minimum(255.0, weighted_luminance(rgb, LUMA_WEIGHTS) * params.sharpness)


FORMULAS: Dict[DepthMethod, Callable[[np.ndarray, Any], np.ndarray]] = {
    DepthMethod.DEPTH_ANYTHING_V2: _depth_anything_v2,
    DepthMethod.MIDAS: _midas,
    DepthMethod.MARIGOLD: _marigold,
    DepthMethod.TFJS_DEPTH: _tfjs_depth,
    DepthMethod.DEPTH_PRO: _depth_pro,
}


def default_formula(rgb: np.ndarray) -> np.ndarray:
    """Unscaled luminance, used for unrecognized methods."""
    return weighted_luminance(rgb, LUMA_WEIGHTS)


# ── Catalogue ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class MethodInfo:
    """Display information for one depth method."""
    method: DepthMethod
    label: str
    description: str
    params: Tuple[ParamSpec, ...]


METHOD_CATALOGUE: Dict[DepthMethod, MethodInfo] = {
    DepthMethod.DEPTH_ANYTHING_V2: MethodInfo(
        DepthMethod.DEPTH_ANYTHING_V2,
        "Depth Anything V2 (SOTA 2024)",
        "State-of-the-art foundation model with excellent performance on diverse scenes.",
        (
            ParamSpec("confidence", "Confidence Threshold", 0.5, 0.1, 1.0, 0.1),
            ParamSpec("resolution", "Processing Resolution", 768, 384, 1024, 64, "px"),
            ParamSpec("quality", "Model Quality", 1, 0, 2, 1),
        ),
    ),
    DepthMethod.MIDAS: MethodInfo(
        DepthMethod.MIDAS,
        "MiDaS 3.1 (Robust & Fast)",
        "Robust monocular depth estimation with multi-objective optimization.",
        (
            ParamSpec("alpha", "Alpha Value", 0.6, 0.1, 1.0, 0.1),
            ParamSpec("resolution", "Input Resolution", 384, 256, 768, 64, "px"),
            ParamSpec("smoothing", "Depth Smoothing", 0.5, 0.0, 1.0, 0.1),
        ),
    ),
    DepthMethod.MARIGOLD: MethodInfo(
        DepthMethod.MARIGOLD,
        "Marigold (Diffusion-based)",
        "Diffusion-based approach with high accuracy using Stable Diffusion backbone.",
        (
            ParamSpec("ensemble", "Ensemble Size", 4, 1, 10, 1),
            ParamSpec("steps", "Denoising Steps", 10, 4, 50, 2),
            ParamSpec("resolution", "Processing Resolution", 768, 512, 1024, 64, "px"),
        ),
    ),
    DepthMethod.TFJS_DEPTH: MethodInfo(
        DepthMethod.TFJS_DEPTH,
        "TensorFlow.js Portrait Depth",
        "Optimized for human portraits using MediaPipe segmentation.",
        (
            ParamSpec("focus", "Portrait Focus", 0.8, 0.0, 1.0, 0.1),
            ParamSpec("segmentation", "Segmentation Quality", 0.7, 0.3, 1.0, 0.1),
            ParamSpec("smoothing", "Depth Smoothing", 0.5, 0.1, 1.0, 0.1),
        ),
    ),
    DepthMethod.DEPTH_PRO: MethodInfo(
        DepthMethod.DEPTH_PRO,
        "Depth Pro (Apple - Metric)",
        "Apple's fast metric depth estimation producing 2.25MP depth maps.",
        (
            ParamSpec("sharpness", "Boundary Sharpness", 1.0, 0.5, 2.0, 0.1),
            ParamSpec("scale", "Metric Scale", 1.0, 0.5, 2.0, 0.1),
            ParamSpec("quality", "Processing Quality", 1, 0, 2, 1),
        ),
    ),
}


def list_methods() -> List[MethodInfo]:
    """All catalogue entries in display order."""
    return list(METHOD_CATALOGUE.values())
