"""Reactive pipeline that keeps the depth map and colored image in sync."""

from .coordinator import PipelineCoordinator
from .state import EdgeSettings, PipelineState

__all__ = ['PipelineCoordinator', 'EdgeSettings', 'PipelineState']
