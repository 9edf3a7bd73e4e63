"""Pipeline coordinator: owns the artifacts and keeps them consistent.

Source -> depth map -> colored image. The depth map is only regenerated on
request; the colored image follows every gradient, enhancement or edge
change while a depth map exists.
"""

import numbers
import threading
from dataclasses import replace
from typing import Any, Callable, List, Mapping, Optional

import numpy as np

from chromadepth.depth.colormap import GradientColors, colorize
from chromadepth.depth.enhancement import EnhancementSettings
from chromadepth.depth.estimator import DepthEstimator, MethodId
from chromadepth.depth.methods import DepthMethod
from chromadepth.depth.raster import readonly_copy, validate_raster
from chromadepth.errors import ChromaDepthError, ComputationError, ValidationError
from chromadepth.utils.logger import get_logger
from chromadepth.utils.timing import Stopwatch
from .state import EdgeSettings, PipelineState

logger = get_logger(__name__)

Listener = Callable[[PipelineState], None]


class PipelineCoordinator:
    """
    Owns the source image, derived artifacts and all parameters.

    Depth generation is single-flight: a request made while another is
    running is ignored. Color recomputes are not serialized; each one takes
    a revision number when it reads its inputs, and a result is only stored
    if nothing newer has been stored already.

    Example:
        pipeline = PipelineCoordinator(method="midas")
        pipeline.set_source(pixels)
        pipeline.request_depth_generation()
        pipeline.set_gradient_colors(foreground="#00FF00")
        colored = pipeline.colored_image
    """

    def __init__(
        self,
        estimator: Optional[DepthEstimator] = None,
        method: MethodId = "",
        method_params: Optional[Mapping[str, Any]] = None,
        gradient_colors: Optional[GradientColors] = None,
        enhancement_settings: Optional[EnhancementSettings] = None,
        edge_settings: Optional[EdgeSettings] = None,
    ):
        """
        Initialize the coordinator.

        Args:
            estimator: Depth estimator (a default one if None).
            method: Initial depth method identifier.
            method_params: Initial method parameters.
            gradient_colors: Initial gradient endpoints.
            enhancement_settings: Initial enhancement settings.
            edge_settings: Initial edge settings.
        """
        self._estimator = estimator or DepthEstimator()

        # Guards every field below; never held during a pixel pass
        self._lock = threading.Lock()
        # Held for the whole duration of a depth pass
        self._generation_lock = threading.Lock()

        self._source: Optional[np.ndarray] = None
        self._source_version = 0
        self._depth_map: Optional[np.ndarray] = None
        self._colored_image: Optional[np.ndarray] = None

        self._method = _method_name(method)
        self._method_params = dict(method_params or {})
        self._gradient_colors = gradient_colors or GradientColors()
        self._enhancement_settings = enhancement_settings or EnhancementSettings()
        self._edge_settings = edge_settings or EdgeSettings()

        self._is_generating = False
        self._last_error: Optional[str] = None
        self._last_depth_ms: Optional[float] = None
        self._last_color_ms: Optional[float] = None

        self._color_revision = 0
        self._stored_color_revision = 0

        self._listeners: List[Listener] = []

    @classmethod
    def from_settings(cls, settings, estimator: Optional[DepthEstimator] = None) -> "PipelineCoordinator":
        """
        Build a coordinator from application settings.

        Args:
            settings: chromadepth.config.settings.Settings instance.
            estimator: Optional depth estimator.
        """
        return cls(
            estimator=estimator,
            method=settings.pipeline.method,
            method_params=settings.pipeline.method_params,
            gradient_colors=GradientColors(
                foreground=settings.gradient.foreground,
                background=settings.gradient.background,
            ),
            enhancement_settings=EnhancementSettings(**settings.enhancement.model_dump()),
            edge_settings=EdgeSettings(**settings.edge.model_dump()),
        )

    # ─── Read access ───────────────────────────────────────────────
    @property
    def source(self) -> Optional[np.ndarray]:
        return self._source

    @property
    def depth_map(self) -> Optional[np.ndarray]:
        return self._depth_map

    @property
    def colored_image(self) -> Optional[np.ndarray]:
        return self._colored_image

    @property
    def is_generating(self) -> bool:
        return self._is_generating

    @property
    def gradient_colors(self) -> GradientColors:
        return self._gradient_colors

    @property
    def enhancement_settings(self) -> EnhancementSettings:
        return self._enhancement_settings

    @property
    def edge_settings(self) -> EdgeSettings:
        return self._edge_settings

    def snapshot(self) -> PipelineState:
        """Return an immutable view of the current state."""
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> PipelineState:
        return PipelineState(
            source=self._source,
            depth_map=self._depth_map,
            colored_image=self._colored_image,
            method=self._method,
            method_params=dict(self._method_params),
            gradient_colors=self._gradient_colors,
            enhancement_settings=self._enhancement_settings,
            edge_settings=self._edge_settings,
            is_generating=self._is_generating,
            last_error=self._last_error,
            last_depth_ms=self._last_depth_ms,
            last_color_ms=self._last_color_ms,
        )

    # ─── Observers ─────────────────────────────────────────────────
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback invoked with a fresh snapshot after each change.

        Args:
            listener: Callable taking a PipelineState.

        Returns:
            Function that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
            state = self._snapshot_locked()
        for listener in listeners:
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Pipeline listener {listener!r} failed: {e}")

    # ─── Source & method ───────────────────────────────────────────
    def set_source(self, pixels: np.ndarray) -> None:
        """
        Replace the source image and drop both derived artifacts.

        Args:
            pixels: RGBA8 raster (H, W, 4). A private read-only copy is kept.

        Raises:
            RasterError: If pixels is not a non-empty RGBA8 raster.
        """
        validate_raster(pixels, "source")
        source = readonly_copy(pixels)

        with self._lock:
            self._source = source
            self._source_version += 1
            self._depth_map = None
            self._colored_image = None
            self._last_error = None
            # Results of recomputes still running belong to the old source
            self._color_revision += 1
            self._stored_color_revision = self._color_revision

        logger.info(f"Source image set: {source.shape[1]}x{source.shape[0]}")
        self._notify()

    def set_method(self, method: MethodId, params: Optional[Mapping[str, Any]] = None) -> None:
        """
        Select the depth method, optionally replacing its parameters.

        Does not regenerate the depth map.
        """
        name = _method_name(method)
        if name and DepthMethod.resolve(name) is None:
            logger.warning(f"Unknown depth method {name!r} selected; plain luminance will be used")
        with self._lock:
            self._method = name
            if params is not None:
                self._method_params = dict(params)
        self._notify()

    def set_method_params(self, params: Optional[Mapping[str, Any]] = None, **changes: Any) -> None:
        """
        Replace the method parameters, or update single entries by keyword.

        Example:
            pipeline.set_method_params({"alpha": 0.8})
            pipeline.set_method_params(alpha=0.9)
        """
        with self._lock:
            base = dict(params) if params is not None else dict(self._method_params)
            base.update(changes)
            self._method_params = base
        self._notify()

    # ─── Depth generation ──────────────────────────────────────────
    def request_depth_generation(self) -> Optional[np.ndarray]:
        """
        Generate a depth map from the current source and method.

        Returns:
            The new depth map, or None if another generation was already
            running or the source was replaced while this one ran.

        Raises:
            ValidationError: No source image, or no method selected. Nothing
                is changed.
            ComputationError: The depth pass failed. The previous depth map
                is kept.
        """
        with self._lock:
            source = self._source
            method = self._method
            params = dict(self._method_params)
            version = self._source_version

        if source is None:
            raise ValidationError("Please select an image first")
        if not method:
            raise ValidationError("Please select a depth method first")

        if not self._generation_lock.acquire(blocking=False):
            logger.info("Depth generation already in progress, request ignored")
            return None

        stale = False
        try:
            with self._lock:
                self._is_generating = True
            self._notify()
            logger.info(f"Generating depth map with {method}")

            try:
                result = self._estimator.compute(source, method, params)
            except Exception as e:
                with self._lock:
                    self._last_error = f"Failed to generate depth map: {e}"
                logger.error(f"Depth generation failed: {e}")
                raise ComputationError(f"Failed to generate depth map: {e}") from e

            depth = readonly_copy(result.depth_map)
            if depth.shape != source.shape or depth.dtype != np.uint8:
                with self._lock:
                    self._last_error = "Failed to generate depth map: unexpected output shape"
                raise ComputationError(
                    f"Depth pass returned {depth.shape} {depth.dtype}, expected {source.shape} uint8"
                )

            with self._lock:
                if self._source_version != version:
                    stale = True
                else:
                    self._depth_map = depth
                    self._last_error = None
                    self._last_depth_ms = result.computation_time_ms
        finally:
            with self._lock:
                self._is_generating = False
            self._generation_lock.release()
            self._notify()

        if stale:
            logger.info("Source replaced during depth generation, result discarded")
            return None

        logger.info(f"Depth map generated in {result.computation_time_ms:.1f}ms")
        self.request_color_apply()
        return depth

    def start_depth_generation(self) -> threading.Thread:
        """
        Run request_depth_generation on a background thread.

        Failures are logged and recorded in the snapshot's last_error.

        Returns:
            The started (daemon) thread.
        """
        def worker():
            try:
                self.request_depth_generation()
            except ChromaDepthError as e:
                logger.error(f"Background depth generation failed: {e}")

        thread = threading.Thread(target=worker, daemon=True)
        thread.start()
        return thread

    # ─── Colors & enhancement ──────────────────────────────────────
    def set_gradient_colors(self, colors: Optional[GradientColors] = None, **changes: Any) -> None:
        """
        Update the gradient endpoints and recompute the colored image.

        Example:
            pipeline.set_gradient_colors(GradientColors("#FFFFFF", "#000000"))
            pipeline.set_gradient_colors(background="#00FFFF")
        """
        with self._lock:
            base = colors if colors is not None else self._gradient_colors
            self._gradient_colors = replace(base, **changes)
        self._notify()
        self._auto_recompute()

    def invert_gradient(self) -> None:
        """Swap foreground and background colors."""
        self.set_gradient_colors(self._gradient_colors.invert())

    def set_enhancement_settings(self, settings: Optional[EnhancementSettings] = None, **changes: Any) -> None:
        """
        Update enhancement settings and recompute the colored image.

        Raises:
            ValidationError: If a value is not a real number. Nothing is
                changed. Non-finite values are clamped by the color pass.
        """
        with self._lock:
            base = settings if settings is not None else self._enhancement_settings
            updated = replace(base, **changes)
            for name, value in vars(updated).items():
                if not isinstance(value, numbers.Real) or isinstance(value, bool):
                    raise ValidationError(f"Enhancement {name} must be a number, got {value!r}")
            self._enhancement_settings = updated
        self._notify()
        self._auto_recompute()

    def reset_enhancement(self) -> None:
        """Revert enhancement settings to their defaults."""
        self.set_enhancement_settings(EnhancementSettings())

    def set_edge_settings(self, settings: Optional[EdgeSettings] = None, **changes: Any) -> None:
        """Update edge settings. Triggers a recompute like the other setters."""
        with self._lock:
            base = settings if settings is not None else self._edge_settings
            self._edge_settings = replace(base, **changes)
        self._notify()
        self._auto_recompute()

    def request_color_apply(self) -> Optional[np.ndarray]:
        """
        Recompute the colored image from the current depth map.

        Returns:
            The new colored image; None if there is no depth map or a newer
            result was stored while this one ran.

        Raises:
            ComputationError: The color pass failed. The previous colored
                image is kept.
        """
        with self._lock:
            depth = self._depth_map
            if depth is None:
                return None
            self._color_revision += 1
            revision = self._color_revision
            colors = self._gradient_colors
            settings = self._enhancement_settings

        try:
            with Stopwatch() as sw:
                colored = colorize(depth, colors, settings)
        except Exception as e:
            logger.error(f"Color pass failed: {e}")
            raise ComputationError(f"Failed to apply colors: {e}") from e
        colored.setflags(write=False)

        with self._lock:
            if revision <= self._stored_color_revision:
                superseded = True
            else:
                superseded = False
                self._colored_image = colored
                self._stored_color_revision = revision
                self._last_color_ms = sw.elapsed_ms

        if superseded:
            logger.debug(f"Color pass {revision} superseded, result discarded")
            return None

        logger.debug(f"Color pass {revision} done in {sw.elapsed_ms:.1f}ms")
        self._notify()
        return colored

    def _auto_recompute(self) -> None:
        if self._depth_map is None:
            return
        try:
            self.request_color_apply()
        except ComputationError as e:
            # Settings changes never fail; the previous colored image stays
            logger.error(f"Automatic color update failed: {e}")


def _method_name(method: MethodId) -> str:
    if isinstance(method, DepthMethod):
        return method.value
    return method or ""
