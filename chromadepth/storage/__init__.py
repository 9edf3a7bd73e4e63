"""Image file loading and artifact export."""

from .image_files import export_artifact, export_state, load_image, save_image, to_rgba

__all__ = ['export_artifact', 'export_state', 'load_image', 'save_image', 'to_rgba']
