"""
ChromaDepth - Chromostereopsis Depth Studio

Generates a luminance-based depth map from a photo, colors it through a
two-color gradient and exports both images.
"""

import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

from chromadepth.config.settings import get_settings
from chromadepth.depth.methods import list_methods
from chromadepth.errors import ChromaDepthError
from chromadepth.pipeline import PipelineCoordinator
from chromadepth.storage import export_state, load_image
from chromadepth.utils.logger import setup_logger


def parse_param(text: str) -> tuple:
    """Parse a ``name=value`` method parameter."""
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected name=value, got {text!r}")
    return name.strip(), value.strip()


def parse_args(argv: Optional[List[str]] = None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="chromadepth",
        description="ChromaDepth - Chromostereopsis Depth Studio"
    )
    parser.add_argument(
        'image',
        nargs='?',
        help='Source image file'
    )
    parser.add_argument(
        '--method',
        help='Depth method (see --list-methods); defaults to the configured one'
    )
    parser.add_argument(
        '--param',
        action='append',
        type=parse_param,
        default=[],
        metavar='NAME=VALUE',
        help='Method parameter, may be repeated (e.g. --param alpha=0.8)'
    )
    parser.add_argument('--foreground', help='Near color, #RRGGBB')
    parser.add_argument('--background', help='Far color, #RRGGBB')
    parser.add_argument(
        '--invert',
        action='store_true',
        help='Swap foreground and background colors'
    )
    parser.add_argument('--brightness', type=float, help='Brightness offset')
    parser.add_argument('--contrast', type=float, help='Contrast multiplier')
    parser.add_argument('--output', help='Output directory')
    parser.add_argument(
        '--format',
        choices=['png', 'jpg', 'webp'],
        help='Output image format'
    )
    parser.add_argument('--config', help='Path to a config YAML file')
    parser.add_argument(
        '--list-methods',
        action='store_true',
        help='List depth methods and their parameters, then exit'
    )
    return parser.parse_args(argv)


def print_methods() -> None:
    """Print the depth method catalogue."""
    for info in list_methods():
        print(f"{info.method.value:<18} {info.label}")
        print(f"{'':<18} {info.description}")
        for spec in info.params:
            unit = f" {spec.unit}" if spec.unit else ""
            print(
                f"{'':<20} {spec.name}: {spec.label}, default {spec.default}{unit} "
                f"(range {spec.minimum}..{spec.maximum}, step {spec.step})"
            )


class ChromaDepthApp:
    """One-shot depth + colorize + export run."""

    def __init__(self, args):
        """
        Initialize the application.

        Args:
            args: Parsed command line arguments.
        """
        self.args = args

        # Load configuration
        config_path = Path(args.config) if args.config else None
        self.settings = get_settings(config_path, reload=config_path is not None)

        # Setup logging
        self.logger = setup_logger(
            "chromadepth",
            level=self.settings.logging.level,
            fmt=self.settings.logging.format,
            use_colors=self.settings.logging.console_colors
        )

        self.pipeline = PipelineCoordinator.from_settings(self.settings)

    def configure(self) -> None:
        """Apply command line overrides on top of the configured defaults."""
        args = self.args

        if args.method or args.param:
            params: Dict[str, str] = dict(self.settings.pipeline.method_params)
            params.update(dict(args.param))
            self.pipeline.set_method(args.method or self.settings.pipeline.method, params)

        color_changes = {}
        if args.foreground:
            color_changes['foreground'] = args.foreground
        if args.background:
            color_changes['background'] = args.background
        if color_changes:
            self.pipeline.set_gradient_colors(**color_changes)
        if args.invert:
            self.pipeline.invert_gradient()

        enhancement_changes = {}
        if args.brightness is not None:
            enhancement_changes['brightness'] = args.brightness
        if args.contrast is not None:
            enhancement_changes['contrast'] = args.contrast
        if enhancement_changes:
            self.pipeline.set_enhancement_settings(**enhancement_changes)

    def run(self) -> int:
        """
        Run the application.

        Returns:
            Exit code (0 = success, 1 = error).
        """
        self.logger.info("=" * 60)
        self.logger.info("ChromaDepth - Chromostereopsis Depth Studio")
        self.logger.info("=" * 60)

        try:
            self.configure()
            self.pipeline.set_source(load_image(self.args.image))
            self.pipeline.request_depth_generation()

            state = self.pipeline.snapshot()
            output = self.args.output or self.settings.export.directory
            fmt = self.args.format or self.settings.export.format
            paths = export_state(state, output, fmt)

        except ChromaDepthError as e:
            self.logger.error(f"{e}")
            return 1

        self.logger.info("-" * 60)
        self.logger.info(f"  Method: {state.method}")
        self.logger.info(f"  Depth pass: {state.last_depth_ms:.1f}ms")
        self.logger.info(f"  Color pass: {state.last_color_ms:.1f}ms")
        for kind, path in paths.items():
            self.logger.info(f"  {kind}: {path}")
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code.
    """
    args = parse_args(argv)

    if args.list_methods:
        print_methods()
        return 0

    if not args.image:
        print("error: an image path is required", file=sys.stderr)
        return 2

    try:
        app = ChromaDepthApp(args)
    except ChromaDepthError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return app.run()


if __name__ == "__main__":
    sys.exit(main())
