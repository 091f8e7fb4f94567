"""
CanvasLib - Drawing canvas editing core

This module provides the raster surface, stroke engine, undo history,
view transform and image codec used by the Case Studio design editor.
"""

from CS_Libs.CanvasLib.canvas_errors import CanvasError, ImageDecodeError
from CS_Libs.CanvasLib.canvas_history import CanvasHistory, HistorySnapshot
from CS_Libs.CanvasLib.canvas_models import (
    ACTIVE_TOOL_KINDS,
    BrushTool,
    CompositeMode,
    EraserTool,
    RgbaColor,
    ToolConfig,
    ToolKind,
    parse_color,
)
from CS_Libs.CanvasLib.drawing_session import CanvasConfig, DrawingSession, StrokeState
from CS_Libs.CanvasLib.image_codec import (
    ExportOptions,
    decode_image,
    encode_data_url,
    encode_image,
)
from CS_Libs.CanvasLib.surface import Surface
from CS_Libs.CanvasLib.view_transform import ViewTransform, Viewport, map_to_surface

__all__ = [
    "CanvasError",
    "ImageDecodeError",
    "CanvasHistory",
    "HistorySnapshot",
    "ACTIVE_TOOL_KINDS",
    "BrushTool",
    "CompositeMode",
    "EraserTool",
    "RgbaColor",
    "ToolConfig",
    "ToolKind",
    "parse_color",
    "CanvasConfig",
    "DrawingSession",
    "StrokeState",
    "ExportOptions",
    "decode_image",
    "encode_data_url",
    "encode_image",
    "Surface",
    "ViewTransform",
    "Viewport",
    "map_to_surface",
]
