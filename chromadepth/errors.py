"""Exceptions raised by the ChromaDepth pipeline."""


class ChromaDepthError(Exception):
    """Base class for all ChromaDepth errors."""
    pass


class ValidationError(ChromaDepthError):
    """Exception raised when a request is missing required inputs."""
    pass


class RasterError(ValidationError):
    """Exception raised for rasters that are not non-empty (H, W, 4) uint8 arrays."""
    pass


class ComputationError(ChromaDepthError):
    """Exception raised when a pixel pass fails unexpectedly."""
    pass


class ExportError(ChromaDepthError):
    """Exception raised for image read/write failures."""
    pass


class ConfigError(ChromaDepthError):
    """Exception raised for unreadable or invalid configuration."""
    pass
