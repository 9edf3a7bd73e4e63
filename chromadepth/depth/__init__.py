"""Depth synthesis and colorization module for ChromaDepth.

Supports five luminance heuristics:
- depth-anything-v2, midas, marigold, tfjs-depth, depth-pro
- anything else falls back to plain Rec. 601 luminance
"""

from .estimator import DepthEstimator, DepthResult, estimate_depth
from .methods import (
    DepthMethod,
    METHOD_CATALOGUE,
    MethodInfo,
    ParamSpec,
    build_params,
    list_methods,
)
from .colormap import GradientColors, PALETTE, apply_gradient, colorize
from .enhancement import EnhancementSettings, apply_enhancement

__all__ = [
    "DepthEstimator",
    "DepthResult",
    "estimate_depth",
    "DepthMethod",
    "METHOD_CATALOGUE",
    "MethodInfo",
    "ParamSpec",
    "build_params",
    "list_methods",
    "GradientColors",
    "PALETTE",
    "apply_gradient",
    "colorize",
    "EnhancementSettings",
    "apply_enhancement",
]
