"""Two-color gradient mapping for depth visualization."""

import random
from dataclasses import dataclass, replace
from typing import Optional

import numpy as np

from .enhancement import EnhancementSettings, apply_enhancement
from .raster import validate_raster
from chromadepth.utils.colors import RGB, parse_hex_color

# Colors offered by "randomize"
PALETTE = (
    "#FF0000", "#00FF00", "#0000FF", "#FFFF00",
    "#FF00FF", "#00FFFF", "#FF8000", "#8000FF",
)


@dataclass(frozen=True)
class GradientColors:
    """Gradient endpoints as hex strings: foreground is near, background is far."""
    foreground: str = "#FF0000"
    background: str = "#0000FF"

    @property
    def foreground_rgb(self) -> RGB:
        return parse_hex_color(self.foreground)

    @property
    def background_rgb(self) -> RGB:
        return parse_hex_color(self.background)

    def invert(self) -> "GradientColors":
        """Swap foreground and background."""
        return replace(self, foreground=self.background, background=self.foreground)

    @classmethod
    def randomize(cls, rng: Optional[random.Random] = None) -> "GradientColors":
        """Pick both endpoints from PALETTE (they may coincide)."""
        rng = rng or random.Random()
        return cls(foreground=rng.choice(PALETTE), background=rng.choice(PALETTE))


def apply_gradient(depth: np.ndarray, colors: GradientColors) -> np.ndarray:
    """
    Interpolate between background and foreground by depth intensity.

    Intensity is the red channel divided by 255; 0 gives the background
    color, 1 the foreground color.

    Args:
        depth: RGBA8 depth raster (H, W, 4).
        colors: Gradient endpoints.

    Returns:
        Float64 array (H, W, 3), unclamped.
    """
    validate_raster(depth, "depth map")

    fg = np.asarray(colors.foreground_rgb, dtype=np.float64)
    bg = np.asarray(colors.background_rgb, dtype=np.float64)

    intensity = depth[..., 0].astype(np.float64)[..., np.newaxis] / 255.0
    return bg + (fg - bg) * intensity


def colorize(
    depth: np.ndarray,
    colors: GradientColors,
    settings: Optional[EnhancementSettings] = None,
) -> np.ndarray:
    """
    Map a depth raster through the gradient and apply enhancement.

    Pure and deterministic; the depth raster is not modified.

    Args:
        depth: RGBA8 depth raster (H, W, 4).
        colors: Gradient endpoints.
        settings: Enhancement settings (defaults leave colors unchanged).

    Returns:
        New RGBA8 raster with the depth alpha.
    """
    if settings is None:
        settings = EnhancementSettings()

    mixed = apply_gradient(depth, colors)

    colored = np.empty_like(depth)
    colored[..., :3] = apply_enhancement(mixed, settings)
    colored[..., 3] = depth[..., 3]
    return colored
