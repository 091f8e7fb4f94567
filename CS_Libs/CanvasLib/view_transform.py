"""
View transform and pointer coordinate mapping for the drawing canvas.

The zoom factor only affects how the fixed-resolution surface is shown on
screen. Pointer events arrive in view coordinates and are mapped back to
surface coordinates on every event.

Classes:
    ViewTransform: Bounded zoom factor
    Viewport: Where the surface is displayed in view coordinates

Functions:
    map_to_surface: Convert a view-space pointer position to surface coordinates
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from CS_Libs.CanvasLib.canvas_models import Point
from CS_Libs.constants import DEFAULT_ZOOM, MAX_ZOOM, MIN_ZOOM, ZOOM_STEP

# Rounding keeps repeated +/- steps from drifting (0.45000000000000007)
_ZOOM_PRECISION = 6


class ViewTransform:
    """
    Zoom factor clamped to [min_zoom, max_zoom].

    Example:
        >>> view = ViewTransform()
        >>> view.zoom_in()
        0.75
        >>> view.zoom_percent
        75
    """

    def __init__(
        self,
        zoom: float = DEFAULT_ZOOM,
        min_zoom: float = MIN_ZOOM,
        max_zoom: float = MAX_ZOOM,
        step: float = ZOOM_STEP,
    ):
        if not (0 < min_zoom <= max_zoom):
            raise ValueError(f"Invalid zoom bounds: {min_zoom}-{max_zoom}")
        if step <= 0:
            raise ValueError(f"step must be positive, got {step}")

        self.min_zoom = float(min_zoom)
        self.max_zoom = float(max_zoom)
        self.step = float(step)
        self.default_zoom = self._clamp(zoom)
        self._zoom = self.default_zoom

    def _clamp(self, value: float) -> float:
        value = max(self.min_zoom, min(self.max_zoom, float(value)))
        return round(value, _ZOOM_PRECISION)

    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def zoom_percent(self) -> int:
        return int(round(self._zoom * 100))

    @property
    def can_zoom_in(self) -> bool:
        return self._zoom < self.max_zoom

    @property
    def can_zoom_out(self) -> bool:
        return self._zoom > self.min_zoom

    def set_zoom(self, value: float) -> float:
        self._zoom = self._clamp(value)
        return self._zoom

    def zoom_in(self) -> float:
        return self.set_zoom(self._zoom + self.step)

    def zoom_out(self) -> float:
        return self.set_zoom(self._zoom - self.step)

    def reset(self) -> float:
        self._zoom = self.default_zoom
        return self._zoom

    def displayed_size(self, surface_size: Tuple[int, int]) -> Tuple[float, float]:
        """On-screen size of a surface at the current zoom."""
        return (surface_size[0] * self._zoom, surface_size[1] * self._zoom)


@dataclass
class Viewport:
    """Placement of the displayed surface in view coordinates.

    Attributes:
        origin: View position of the surface's top-left corner
        displayed_size: Actual on-screen size; None means surface size x zoom
    """
    origin: Point = (0.0, 0.0)
    displayed_size: Optional[Tuple[float, float]] = None


def map_to_surface(
    pointer: Point,
    viewport: Viewport,
    surface_size: Tuple[int, int],
    transform: ViewTransform,
) -> Point:
    """
    Map a view-space pointer position to surface coordinates.

    surface = (pointer - origin) * (surface_size / displayed_size)

    Args:
        pointer: (x, y) in view coordinates
        viewport: Current placement of the surface on screen
        surface_size: (width, height) of the surface buffer
        transform: Current view transform, read fresh on every call

    Returns:
        (x, y) in surface coordinates (may lie outside the surface)
    """
    displayed = viewport.displayed_size or transform.displayed_size(surface_size)
    disp_w, disp_h = displayed
    if disp_w <= 0 or disp_h <= 0:
        raise ValueError(f"displayed_size must be positive, got {displayed}")

    scale_x = surface_size[0] / disp_w
    scale_y = surface_size[1] / disp_h
    return (
        (pointer[0] - viewport.origin[0]) * scale_x,
        (pointer[1] - viewport.origin[1]) * scale_y,
    )
