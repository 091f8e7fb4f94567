"""
Constants and configuration values for Case Studio.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Surface constants (print-resolution phone case area)
SURFACE_WIDTH = 750
SURFACE_HEIGHT = 1590
SURFACE_MODE = "RGBA"
BACKGROUND_COLOR = "#FFFFFF"

# Tool constants
TOOL_BRUSH = "brush"
TOOL_ERASER = "eraser"
TOOL_CIRCLE = "circle"
TOOL_RECTANGLE = "rectangle"
TOOL_TEXT = "text"
DEFAULT_TOOL = TOOL_BRUSH
DEFAULT_STROKE_WIDTH = 5
DEFAULT_STROKE_COLOR = "#000000"
MIN_STROKE_WIDTH = 1
MAX_STROKE_WIDTH = 50

# Compositing modes
COMPOSITE_SOURCE_OVER = "source-over"
COMPOSITE_DESTINATION_OUT = "destination-out"

# Palette offered by the editor
PALETTE_COLORS = [
    "#000000", "#FFFFFF", "#FF0000", "#00FF00", "#0000FF",
    "#FFFF00", "#FF00FF", "#00FFFF", "#FFA500", "#800080",
    "#FFC0CB", "#A52A2A", "#808080", "#000080", "#008000",
]

# Zoom constants
DEFAULT_ZOOM = 0.5
MIN_ZOOM = 0.2
MAX_ZOOM = 3.0
ZOOM_STEP = 0.25

# Undo history
MAX_HISTORY_ENTRIES = 50
HISTORY_LABEL_INITIAL = "initial"
HISTORY_LABEL_STROKE = "stroke"
HISTORY_LABEL_CLEAR = "clear"

# Export constants
DEFAULT_EXPORT_FORMAT = "PNG"
DEFAULT_JPEG_QUALITY = 95
DEFAULT_EXPORT_FILENAME = "phone-case-design.png"
DEFAULT_THUMBNAIL_SIZE = (150, 318)

# Mockup preview
DEFAULT_MOCKUP_SIZE = (540, 1080)
MOCKUP_CASE_COLOR = "#1F1F1F"
MOCKUP_PAGE_COLOR = "#F4F4F5"
MOCKUP_PLACEHOLDER_COLOR = "#A1A1AA"
MOCKUP_MATERIAL_TINT = 0.05
MOCKUP_CORNER_RADIUS_RATIO = 0.08

# Design record constants
DESIGNS_DIR_NAME = "Designs"
DESIGN_EXTENSION = ".csdesign"
DESIGN_IMAGE_EXTENSION = ".png"
SCHEMA_VERSION = 1
DEFAULT_MATERIAL = "tpu-gel"

# Safe filename characters
SAFE_FILENAME_CHARS = "-_"
FILENAME_REPLACEMENT_CHAR = "_"

# Design record field names
FIELD_SCHEMA_VERSION = "schema_version"
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_PHONE_MODEL = "phone_model"
FIELD_MATERIAL = "material"
FIELD_IMAGE_FILE = "image_file"
FIELD_CREATED_AT = "created_at"
FIELD_UPDATED_AT = "updated_at"

# Supported file formats for base images
SUPPORTED_STANDARD_IMAGES = {".png", ".jpg", ".jpeg", ".bmp", ".gif", ".tiff", ".webp"}
