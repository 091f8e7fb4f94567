"""
Image decode/encode helpers for the drawing canvas.

Base images arrive from the surrounding application in several shapes
(upload bytes, data URLs, file paths, already-open PIL images). Exports
leave as encoded bytes or data URLs.

Classes:
    ExportOptions: Encoding settings for exports

Functions:
    decode_image: Decode a base image source into an RGBA PIL Image
    encode_image: Encode a PIL Image to bytes
    encode_data_url: Encode a PIL Image to a data URL string
"""

from dataclasses import dataclass, asdict
from io import BytesIO
from pathlib import Path
from typing import Any, Dict
from urllib.parse import unquote_to_bytes
import base64
import logging

from PIL import Image, ImageOps, UnidentifiedImageError

from CS_Libs.CanvasLib.canvas_errors import ImageDecodeError
from CS_Libs.CanvasLib.canvas_models import parse_color
from CS_Libs.constants import (
    BACKGROUND_COLOR,
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_JPEG_QUALITY,
    SURFACE_MODE,
)

logger = logging.getLogger(__name__)

SUPPORTED_EXPORT_FORMATS = {"PNG": "image/png", "JPEG": "image/jpeg"}

# binascii.Error and FileNotFoundError are covered by ValueError and OSError
_DECODE_ERRORS = (
    UnidentifiedImageError,
    Image.DecompressionBombError,
    OSError,
    ValueError,
    SyntaxError,
    EOFError,
)


@dataclass
class ExportOptions:
    """Encoding settings for canvas exports.

    Attributes:
        format: 'PNG' (default, keeps transparency) or 'JPEG'/'JPG'
        quality: JPEG quality 1-100 (default: 95, only for JPEG)
        background: Color used to flatten transparency for JPEG
    """
    format: str = DEFAULT_EXPORT_FORMAT
    quality: int = DEFAULT_JPEG_QUALITY
    background: str = BACKGROUND_COLOR

    def __post_init__(self):
        save_format = str(self.format).upper()
        if save_format == "JPG":
            save_format = "JPEG"
        if save_format not in SUPPORTED_EXPORT_FORMATS:
            raise ValueError(
                f"Unsupported export format: {self.format}. "
                f"Valid formats: {', '.join(sorted(SUPPORTED_EXPORT_FORMATS))}"
            )
        self.format = save_format

    @property
    def mime_type(self) -> str:
        return SUPPORTED_EXPORT_FORMATS[self.format]

    def get_save_kwargs(self) -> Dict[str, Any]:
        """Get PIL Image.save() kwargs based on format."""
        kwargs: Dict[str, Any] = {"format": self.format}
        if self.format == "JPEG":
            kwargs["quality"] = max(1, min(100, int(self.quality)))
        return kwargs

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportOptions":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items()
                    if k in cls.__dataclass_fields__}
        return cls(**filtered)


def _data_url_payload(data_url: str) -> bytes:
    header, sep, payload = data_url.partition(",")
    if not sep:
        raise ValueError("data URL has no payload")
    if header.endswith(";base64"):
        return base64.b64decode(payload, validate=True)
    return unquote_to_bytes(payload)


def _open_source(source: Any) -> Any:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return Image.open(BytesIO(bytes(source)))

    if isinstance(source, str) and source.startswith("data:"):
        return Image.open(BytesIO(_data_url_payload(source)))

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.is_file():
            raise FileNotFoundError(f"Image file not found: {path}")
        return Image.open(path)

    if hasattr(source, "read"):
        return Image.open(source)

    raise TypeError(f"Unsupported image source: {type(source)}")


def decode_image(source: Any) -> Any:
    """
    Decode a base image source into a fully loaded RGBA PIL Image.

    Args:
        source: PIL Image, bytes, 'data:' URL string, file path, or binary file object

    Returns:
        A new RGBA PIL Image, EXIF orientation applied

    Raises:
        ImageDecodeError: If the source cannot be read or decoded
        TypeError: If the source type is not supported
    """
    try:
        if isinstance(source, Image.Image):
            # Lazily opened images read their file here
            source.load()
            image = source
        else:
            image = _open_source(source)
            image.load()
            image = ImageOps.exif_transpose(image)
    except _DECODE_ERRORS as exc:
        logger.warning(f"Failed to decode base image: {exc}")
        raise ImageDecodeError(f"Could not decode image: {exc}") from exc

    if image.width < 1 or image.height < 1:
        raise ImageDecodeError(f"Image has no pixels: {image.size}")

    return image.convert(SURFACE_MODE)


def _flatten(image: Any, background: str) -> Any:
    """Composite an RGBA image onto an opaque background, returning RGB."""
    flat = Image.new("RGB", image.size, parse_color(background)[:3])
    rgba = image.convert("RGBA")
    flat.paste(rgba, mask=rgba.getchannel("A"))
    return flat


def encode_image(image: Any, options: ExportOptions = None) -> bytes:
    """
    Encode a PIL Image.

    Args:
        image: PIL Image to encode
        options: ExportOptions (default: PNG)

    Returns:
        Encoded image bytes
    """
    if options is None:
        options = ExportOptions()

    if options.format == "JPEG":
        image = _flatten(image, options.background)

    buffer = BytesIO()
    image.save(buffer, **options.get_save_kwargs())
    return buffer.getvalue()


def encode_data_url(image: Any, options: ExportOptions = None) -> str:
    """Encode a PIL Image as a base64 'data:' URL."""
    if options is None:
        options = ExportOptions()
    payload = base64.b64encode(encode_image(image, options)).decode("ascii")
    return f"data:{options.mime_type};base64,{payload}"
