"""ChromaDepth: chromostereopsis depth effects from a single photo.

Derives a luminance-based depth map, maps it through a two-color gradient
and applies brightness/contrast.
"""

from .depth import (
    DepthEstimator,
    DepthMethod,
    EnhancementSettings,
    GradientColors,
    colorize,
    estimate_depth,
)
from .errors import (
    ChromaDepthError,
    ComputationError,
    ConfigError,
    ExportError,
    RasterError,
    ValidationError,
)
from .pipeline import EdgeSettings, PipelineCoordinator, PipelineState
from .utils.colors import RGB, parse_hex_color

__version__ = "1.0.0"

__all__ = [
    "DepthEstimator",
    "DepthMethod",
    "EnhancementSettings",
    "GradientColors",
    "colorize",
    "estimate_depth",
    "ChromaDepthError",
    "ComputationError",
    "ConfigError",
    "ExportError",
    "RasterError",
    "ValidationError",
    "EdgeSettings",
    "PipelineCoordinator",
    "PipelineState",
    "RGB",
    "parse_hex_color",
]
