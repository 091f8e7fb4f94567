"""
Drawing canvas data models for Case Studio.

This module defines the tool configuration and the tagged tool variants
that the stroke engine dispatches on when a stroke starts.

Classes:
    ToolKind: Every tool the editor declares (only brush and eraser draw)
    CompositeMode: Pixel compositing applied by a stroke
    BrushTool: Paints with a color
    EraserTool: Erases to transparency
    ToolConfig: Mutable tool settings owned by the UI

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
    Point: A tuple of 2 floats in surface or view coordinates
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from PIL import ImageColor

from CS_Libs.constants import (
    COMPOSITE_DESTINATION_OUT,
    COMPOSITE_SOURCE_OVER,
    DEFAULT_STROKE_COLOR,
    DEFAULT_STROKE_WIDTH,
    DEFAULT_TOOL,
    MAX_STROKE_WIDTH,
    MIN_STROKE_WIDTH,
    TOOL_BRUSH,
    TOOL_CIRCLE,
    TOOL_ERASER,
    TOOL_RECTANGLE,
    TOOL_TEXT,
)

RgbaColor = Tuple[int, int, int, int]
Point = Tuple[float, float]


class ToolKind(Enum):
    BRUSH = TOOL_BRUSH
    ERASER = TOOL_ERASER
    CIRCLE = TOOL_CIRCLE
    RECTANGLE = TOOL_RECTANGLE
    TEXT = TOOL_TEXT


# Shape and text tools are declared for the toolbar but do not draw yet.
ACTIVE_TOOL_KINDS = frozenset({ToolKind.BRUSH, ToolKind.ERASER})


class CompositeMode(Enum):
    SOURCE_OVER = COMPOSITE_SOURCE_OVER
    DESTINATION_OUT = COMPOSITE_DESTINATION_OUT


def parse_color(value: Union[str, RgbaColor, Tuple[int, int, int]]) -> RgbaColor:
    """
    Convert a color specification to an RGBA tuple.

    Args:
        value: Hex string (#RGB, #RRGGBB, #RRGGBBAA), CSS color name,
               or an RGB/RGBA tuple

    Returns:
        (R, G, B, A) tuple with components 0-255

    Raises:
        ValueError: If the color cannot be parsed
    """
    if isinstance(value, str):
        try:
            rgb = ImageColor.getrgb(value.strip())
        except ValueError as exc:
            raise ValueError(f"Invalid color: {value!r}") from exc
    elif isinstance(value, (tuple, list)) and len(value) in (3, 4):
        rgb = tuple(int(component) for component in value)
        if any(not 0 <= component <= 255 for component in rgb):
            raise ValueError(f"Color components must be 0-255, got {value!r}")
    else:
        raise ValueError(f"Invalid color: {value!r}")

    if len(rgb) == 3:
        return (rgb[0], rgb[1], rgb[2], 255)
    return (rgb[0], rgb[1], rgb[2], rgb[3])


def color_to_hex(color: RgbaColor) -> str:
    """Format an RGBA tuple as #RRGGBB, or #RRGGBBAA when not opaque."""
    r, g, b, a = color
    if a == 255:
        return f"#{r:02X}{g:02X}{b:02X}"
    return f"#{r:02X}{g:02X}{b:02X}{a:02X}"


def validate_stroke_width(width: float) -> float:
    width = float(width)
    if not (MIN_STROKE_WIDTH <= width <= MAX_STROKE_WIDTH):
        raise ValueError(
            f"stroke width must be {MIN_STROKE_WIDTH}-{MAX_STROKE_WIDTH}, got {width}"
        )
    return width


@dataclass(frozen=True)
class BrushTool:
    """Paints with `color` using source-over compositing."""
    width: float
    color: RgbaColor


@dataclass(frozen=True)
class EraserTool:
    """Removes pixels to transparency using destination-out compositing."""
    width: float


StrokeTool = Union[BrushTool, EraserTool]


def composite_mode_for(tool: StrokeTool) -> CompositeMode:
    if isinstance(tool, BrushTool):
        return CompositeMode.SOURCE_OVER
    if isinstance(tool, EraserTool):
        return CompositeMode.DESTINATION_OUT
    raise TypeError(f"Unknown stroke tool: {type(tool)}")


@dataclass
class ToolConfig:
    """Tool settings as selected in the editor.

    Attributes:
        kind: Active tool
        width: Stroke width in surface pixels (1-50)
        color: Stroke color; ignored by the eraser
    """
    kind: ToolKind = ToolKind(DEFAULT_TOOL)
    width: float = DEFAULT_STROKE_WIDTH
    color: RgbaColor = (0, 0, 0, 255)

    def __post_init__(self):
        if not isinstance(self.kind, ToolKind):
            try:
                self.kind = ToolKind(str(self.kind).lower())
            except ValueError as exc:
                raise ValueError(f"Unknown tool: {self.kind!r}") from exc
        self.width = validate_stroke_width(self.width)
        self.color = parse_color(self.color)

    @property
    def is_active(self) -> bool:
        return self.kind in ACTIVE_TOOL_KINDS

    def resolve_tool(self) -> Optional[StrokeTool]:
        """
        Freeze the current settings into a tool variant for one stroke.

        Returns:
            BrushTool or EraserTool, or None for tools that do not draw
        """
        if self.kind is ToolKind.BRUSH:
            return BrushTool(width=self.width, color=self.color)
        if self.kind is ToolKind.ERASER:
            return EraserTool(width=self.width)
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "width": self.width,
            "color": color_to_hex(self.color),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


def default_tool_config() -> ToolConfig:
    return ToolConfig(kind=ToolKind(DEFAULT_TOOL), width=DEFAULT_STROKE_WIDTH,
                      color=parse_color(DEFAULT_STROKE_COLOR))
