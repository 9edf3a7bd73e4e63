"""Snapshot types for the pipeline coordinator."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import numpy as np

from chromadepth.depth.colormap import GradientColors
from chromadepth.depth.enhancement import EnhancementSettings


@dataclass(frozen=True)
class EdgeSettings:
    """Edge overlay settings. Stored for the UI; no pass reads them yet."""
    enabled: bool = True
    color: str = "#000000"
    thickness: int = 2  # px, UI range [1, 5]


@dataclass(frozen=True)
class PipelineState:
    """Read-only view of everything the coordinator owns.

    Rasters are shared, not copied; they are marked non-writable.
    """
    source: Optional[np.ndarray] = None
    depth_map: Optional[np.ndarray] = None
    colored_image: Optional[np.ndarray] = None
    method: str = ""
    method_params: Mapping[str, Any] = field(default_factory=dict)
    gradient_colors: GradientColors = field(default_factory=GradientColors)
    enhancement_settings: EnhancementSettings = field(default_factory=EnhancementSettings)
    edge_settings: EdgeSettings = field(default_factory=EdgeSettings)
    is_generating: bool = False
    last_error: Optional[str] = None
    last_depth_ms: Optional[float] = None
    last_color_ms: Optional[float] = None

    @property
    def has_source(self) -> bool:
        return self.source is not None

    @property
    def can_generate(self) -> bool:
        return self.source is not None and bool(self.method) and not self.is_generating

    @property
    def can_apply(self) -> bool:
        return self.depth_map is not None

    @property
    def can_export(self) -> bool:
        return self.colored_image is not None
