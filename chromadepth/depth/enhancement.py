"""Brightness/contrast adjustment for colorized depth maps."""

from dataclasses import dataclass

import numpy as np

from .raster import to_channel


@dataclass(frozen=True)
class EnhancementSettings:
    """
    Value-object holding the enhancement sliders.

    brightness is an additive offset in channel units and contrast a
    multiplier. saturation, sharpness and gamma are stored so a UI can
    round-trip them, but they do not change any pixels.
    """
    brightness: float = 0.0      # UI range [-1, 1]
    contrast:   float = 1.0      # UI range [0, 2]
    saturation: float = 1.0      # UI range [0, 2]
    sharpness:  float = 1.0      # UI range [0, 2]
    gamma:      float = 1.0      # UI range [0.1, 3]


def apply_enhancement(rgb: np.ndarray, settings: EnhancementSettings) -> np.ndarray:
    """
    Apply ``value * contrast + brightness`` and clamp to 8-bit.

    Args:
        rgb: Float channel values, any shape.
        settings: Enhancement settings.

    Returns:
        uint8 array of the same shape, rounded half up.
    """
    # inf * 0 and inf - inf give NaN, which to_channel maps to 0
    with np.errstate(invalid="ignore", over="ignore"):
        adjusted = np.asarray(rgb, dtype=np.float64) * float(settings.contrast) + float(settings.brightness)
    return to_channel(adjusted)
