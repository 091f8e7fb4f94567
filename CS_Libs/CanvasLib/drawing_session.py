"""
Drawing session: the canvas editing core.

A DrawingSession owns one Surface, its undo history, the view transform and
the stroke state machine. The host UI feeds it pointer events and commands;
it hands back an encoded raster on export.

Stroke lifecycle:
    Idle --pointer_down--> Drawing --pointer_move--> Drawing
    Drawing --pointer_up / pointer_leave--> Idle   (one history entry)

Example:
    >>> session = DrawingSession()
    >>> session.set_stroke_color("#FF0000")
    >>> session.pointer_down_surface(100, 100)
    >>> session.pointer_move_surface(200, 100)
    >>> session.pointer_up()
    >>> session.history_length
    2
    >>> session.undo()
    True
    >>> png_bytes = session.export_png()

Classes:
    CanvasConfig: Surface size, background, history depth and zoom settings
    StrokeState: Idle or Drawing
    DrawingSession: The editing core
"""

from dataclasses import dataclass, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
import logging

from CS_Libs.CanvasLib.canvas_errors import ImageDecodeError
from CS_Libs.CanvasLib.canvas_history import CanvasHistory
from CS_Libs.CanvasLib.canvas_models import (
    BrushTool,
    CompositeMode,
    Point,
    StrokeTool,
    ToolConfig,
    ToolKind,
    composite_mode_for,
    default_tool_config,
    parse_color,
    validate_stroke_width,
)
from CS_Libs.CanvasLib.image_codec import (
    ExportOptions,
    decode_image,
    encode_data_url,
    encode_image,
)
from CS_Libs.CanvasLib.surface import Box, Surface
from CS_Libs.CanvasLib.view_transform import ViewTransform, Viewport, map_to_surface
from CS_Libs.constants import (
    BACKGROUND_COLOR,
    DEFAULT_EXPORT_FILENAME,
    DEFAULT_THUMBNAIL_SIZE,
    DEFAULT_ZOOM,
    HISTORY_LABEL_CLEAR,
    HISTORY_LABEL_INITIAL,
    HISTORY_LABEL_STROKE,
    MAX_HISTORY_ENTRIES,
    MAX_ZOOM,
    MIN_ZOOM,
    SURFACE_HEIGHT,
    SURFACE_WIDTH,
    ZOOM_STEP,
)

logger = logging.getLogger(__name__)


@dataclass
class CanvasConfig:
    """Configuration for a drawing session.

    Attributes:
        width: Surface width in pixels (default: 750)
        height: Surface height in pixels (default: 1590)
        background: Background fill color (default: white)
        max_history: Maximum number of undo snapshots kept (default: 50)
        default_zoom: Initial and reset zoom (default: 0.5)
        min_zoom: Lower zoom bound (default: 0.2)
        max_zoom: Upper zoom bound (default: 3.0)
        zoom_step: Zoom increment (default: 0.25)
    """
    width: int = SURFACE_WIDTH
    height: int = SURFACE_HEIGHT
    background: str = BACKGROUND_COLOR
    max_history: int = MAX_HISTORY_ENTRIES
    default_zoom: float = DEFAULT_ZOOM
    min_zoom: float = MIN_ZOOM
    max_zoom: float = MAX_ZOOM
    zoom_step: float = ZOOM_STEP

    def __post_init__(self):
        if int(self.width) < 1 or int(self.height) < 1:
            raise ValueError(f"Surface size must be positive, got {self.width}x{self.height}")
        if int(self.max_history) < 2:
            raise ValueError(f"max_history must be at least 2, got {self.max_history}")
        parse_color(self.background)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CanvasConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


class StrokeState(Enum):
    IDLE = "idle"
    DRAWING = "drawing"


@dataclass
class _ActiveStroke:
    tool: StrokeTool
    mode: CompositeMode
    start: Point
    last_point: Point
    segments: int = 0


class DrawingSession:
    """
    Canvas editing core for one open editor.

    Surface and history are created together here and dropped by close().
    """

    def __init__(self, config: Optional[CanvasConfig] = None, tool: Optional[ToolConfig] = None):
        self.config = config or CanvasConfig()
        self.tool = tool or default_tool_config()
        self.viewport = Viewport()
        self.view = ViewTransform(
            zoom=self.config.default_zoom,
            min_zoom=self.config.min_zoom,
            max_zoom=self.config.max_zoom,
            step=self.config.zoom_step,
        )
        self._surface: Optional[Surface] = Surface(
            self.config.width, self.config.height, self.config.background
        )
        self._history: Optional[CanvasHistory] = CanvasHistory(self.config.max_history)
        self._stroke: Optional[_ActiveStroke] = None

        self._history.reset(self._surface.snapshot(HISTORY_LABEL_INITIAL))
        logger.info(f"Opened drawing session {self.config.width}x{self.config.height}")

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def surface(self) -> Surface:
        if self._surface is None:
            raise RuntimeError("Drawing session is closed")
        return self._surface

    @property
    def history(self) -> CanvasHistory:
        if self._history is None:
            raise RuntimeError("Drawing session is closed")
        return self._history

    @property
    def is_closed(self) -> bool:
        return self._surface is None

    @property
    def state(self) -> StrokeState:
        return StrokeState.DRAWING if self._stroke is not None else StrokeState.IDLE

    @property
    def is_drawing(self) -> bool:
        return self._stroke is not None

    @property
    def history_length(self) -> int:
        return len(self.history)

    @property
    def history_cursor(self) -> int:
        return self.history.cursor

    @property
    def can_undo(self) -> bool:
        return self.history.can_undo

    @property
    def can_redo(self) -> bool:
        return self.history.can_redo

    # ------------------------------------------------------------------
    # Tool configuration (read at stroke start)
    # ------------------------------------------------------------------

    def set_tool(self, kind: Union[ToolKind, str]) -> None:
        if not isinstance(kind, ToolKind):
            try:
                kind = ToolKind(str(kind).lower())
            except ValueError as exc:
                raise ValueError(f"Unknown tool: {kind!r}") from exc
        self.tool.kind = kind

    def set_stroke_width(self, width: float) -> None:
        self.tool.width = validate_stroke_width(width)

    def set_stroke_color(self, color: Any) -> None:
        self.tool.color = parse_color(color)

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def set_viewport(self, origin: Point, displayed_size: Optional[Tuple[float, float]] = None) -> None:
        self.viewport = Viewport(origin=origin, displayed_size=displayed_size)

    def to_surface_coords(self, x: float, y: float) -> Point:
        """Map a view-space position using the current viewport and zoom."""
        return map_to_surface((x, y), self.viewport, self.surface.size, self.view)

    def pointer_down(self, x: float, y: float) -> None:
        """Start a stroke at a view-space position."""
        self.pointer_down_surface(*self.to_surface_coords(x, y))

    def pointer_move(self, x: float, y: float) -> Optional[Box]:
        """Extend the current stroke to a view-space position.

        Returns the surface box the segment touched, or None.
        """
        if self._stroke is None:
            return None
        return self.pointer_move_surface(*self.to_surface_coords(x, y))

    def pointer_up(self) -> None:
        """Finish the current stroke and commit it to history."""
        self._finish_stroke()

    def pointer_leave(self) -> None:
        """Pointer left the canvas; ends the stroke like pointer_up."""
        self._finish_stroke()

    def pointer_down_surface(self, x: float, y: float) -> None:
        """Start a stroke at a surface-space position."""
        if self.is_closed:
            raise RuntimeError("Drawing session is closed")
        if self._stroke is not None:
            return

        stroke_tool = self.tool.resolve_tool()
        if stroke_tool is None:
            logger.warning(f"Tool '{self.tool.kind.value}' does not draw; input ignored")
            return

        point = (float(x), float(y))
        self._stroke = _ActiveStroke(
            tool=stroke_tool,
            mode=composite_mode_for(stroke_tool),
            start=point,
            last_point=point,
        )
        logger.debug(
            f"Stroke started at ({point[0]:.1f}, {point[1]:.1f}) "
            f"with {self.tool.kind.value} ({self._stroke.mode.value})"
        )

    def pointer_move_surface(self, x: float, y: float) -> Optional[Box]:
        """Extend the current stroke to a surface-space position."""
        stroke = self._stroke
        if stroke is None:
            return None

        point = (float(x), float(y))
        box = self._paint(stroke, stroke.last_point, point)
        stroke.last_point = point
        stroke.segments += 1
        return box

    def _paint(self, stroke: _ActiveStroke, start: Point, end: Point) -> Optional[Box]:
        color = stroke.tool.color if isinstance(stroke.tool, BrushTool) else (0, 0, 0, 0)
        return self.surface.draw_segment(start, end, stroke.tool.width, color, stroke.mode)

    def _finish_stroke(self) -> None:
        stroke = self._stroke
        if stroke is None:
            return

        if stroke.segments == 0:
            # A tap leaves a dot
            self._paint(stroke, stroke.start, stroke.start)

        self._stroke = None
        self.history.commit(self.surface.snapshot(HISTORY_LABEL_STROKE))
        logger.debug(f"Stroke finished after {stroke.segments} segments")

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def undo(self) -> bool:
        """
        Revert to the previous history entry.

        Returns:
            True if the surface changed, False at the first entry (no-op)
        """
        self._finish_stroke()
        snapshot = self.history.undo()
        if snapshot is None:
            return False
        self.surface.restore(snapshot)
        return True

    def redo(self) -> bool:
        """Re-apply the next history entry; False when there is none."""
        self._finish_stroke()
        snapshot = self.history.redo()
        if snapshot is None:
            return False
        self.surface.restore(snapshot)
        return True

    def clear(self) -> None:
        """Fill the surface with the background; undoable."""
        self._finish_stroke()
        self.surface.fill_background()
        self.history.commit(self.surface.snapshot(HISTORY_LABEL_CLEAR))

    def load_base_image(self, source: Any) -> Box:
        """
        Start over from a base image scaled to fit and centered.

        History restarts with the composited image as its only entry.

        Args:
            source: PIL Image, bytes, 'data:' URL, file path, or binary file object

        Returns:
            Placement box (left, top, width, height) of the image

        Raises:
            ImageDecodeError: If the source cannot be decoded
            TypeError: If the source type is not supported

            Either way the session is left with a blank surface and a single
            blank history entry.
        """
        self._stroke = None
        surface = self.surface
        try:
            image = decode_image(source)
        except (ImageDecodeError, TypeError):
            surface.fill_background()
            self.history.reset(surface.snapshot(HISTORY_LABEL_INITIAL))
            raise

        box = surface.composite_base_image(image)
        self.history.reset(surface.snapshot(HISTORY_LABEL_INITIAL))
        logger.info(f"Loaded base image {image.size} into {box}")
        return box

    # ------------------------------------------------------------------
    # Export (never mutates surface or history)
    # ------------------------------------------------------------------

    def export_image(self, options: Optional[ExportOptions] = None) -> bytes:
        data = encode_image(self.surface.copy_image(), options)
        logger.info(f"Exported design ({len(data)} bytes)")
        return data

    def export_png(self) -> bytes:
        return self.export_image(ExportOptions(format="PNG"))

    def export_data_url(self, options: Optional[ExportOptions] = None) -> str:
        return encode_data_url(self.surface.copy_image(), options)

    def save_to_file(self, path: Union[str, Path, None] = None,
                     options: Optional[ExportOptions] = None) -> Path:
        """
        Write the export to disk.

        Args:
            path: Target file or directory (default: ./phone-case-design.png);
                  a directory receives the default file name

        Returns:
            Path of the written file

        Raises:
            OSError: If the parent directory does not exist or is not writable
        """
        target = Path(path) if path is not None else Path(DEFAULT_EXPORT_FILENAME)
        if target.is_dir():
            target = target / DEFAULT_EXPORT_FILENAME
        if not target.parent.exists():
            raise OSError(f"Output directory does not exist: {target.parent}")

        target.write_bytes(self.export_image(options))
        return target

    # ------------------------------------------------------------------
    # View
    # ------------------------------------------------------------------

    @property
    def zoom(self) -> float:
        return self.view.zoom

    @property
    def zoom_percent(self) -> int:
        return self.view.zoom_percent

    def zoom_in(self) -> float:
        return self.view.zoom_in()

    def zoom_out(self) -> float:
        return self.view.zoom_out()

    def reset_zoom(self) -> float:
        return self.view.reset()

    def render_view(self) -> Any:
        """Surface rendered at the current zoom for display."""
        return self.surface.render_scaled(self.view.zoom)

    def thumbnail(self, max_size: Tuple[int, int] = DEFAULT_THUMBNAIL_SIZE) -> Any:
        return self.surface.thumbnail(max_size)

    def close(self) -> None:
        """Discard the surface and history."""
        self._stroke = None
        self._surface = None
        self._history = None
        logger.info("Closed drawing session")
