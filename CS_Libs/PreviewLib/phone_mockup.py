"""
Phone case mockup previews for Case Studio.

Renders a finished design onto a phone case so the user can check it before
saving. Each phone model defines a design area as fractions of the mockup;
the design is cover-fitted into that area, clipped to rounded corners and
given a light multiply tint for the case material.

Example:
    >>> preview = render_mockup_preview("iphone-15-pro", design=png_bytes)
    >>> preview.size
    (540, 1080)

Classes:
    DesignArea: Fractional placement of the design on a mockup
    PhoneModel: A phone model offered in the studio

Functions:
    get_phone_model: Look up a phone model by id
    cover_fit: Resize and center-crop an image to fill a box
    render_case_silhouette: Draw a generic phone case mockup
    render_mockup_preview: Composite a design onto a phone case mockup
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from PIL import Image, ImageChops, ImageDraw, ImageOps

from CS_Libs.CanvasLib.image_codec import decode_image
from CS_Libs.constants import (
    DEFAULT_MOCKUP_SIZE,
    MOCKUP_CASE_COLOR,
    MOCKUP_CORNER_RADIUS_RATIO,
    MOCKUP_MATERIAL_TINT,
    MOCKUP_PAGE_COLOR,
    MOCKUP_PLACEHOLDER_COLOR,
)

PLACEHOLDER_TEXT = "Your Design"
_DASH_LENGTH = 10


@dataclass(frozen=True)
class DesignArea:
    """Design placement as fractions (0.0-1.0) of the mockup size."""
    top: float
    left: float
    width: float
    height: float

    def __post_init__(self):
        for name in ("top", "left", "width", "height"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be 0.0-1.0, got {value}")
        if self.left + self.width > 1.0 or self.top + self.height > 1.0:
            raise ValueError("Design area extends past the mockup")

    def to_box(self, size: Tuple[int, int]) -> Tuple[int, int, int, int]:
        """Pixel box (left, top, right, bottom) for a mockup of `size`."""
        width, height = size
        left = int(round(self.left * width))
        top = int(round(self.top * height))
        right = int(round((self.left + self.width) * width))
        bottom = int(round((self.top + self.height) * height))
        return (left, top, right, bottom)


@dataclass(frozen=True)
class PhoneModel:
    id: str
    name: str
    price: float
    design_area: DesignArea


_IPHONE_AREA = DesignArea(top=0.12, left=0.15, width=0.70, height=0.76)
_SAMSUNG_AREA = DesignArea(top=0.10, left=0.12, width=0.76, height=0.80)
_PIXEL_AREA = DesignArea(top=0.08, left=0.10, width=0.80, height=0.84)

PHONE_MODELS: Dict[str, PhoneModel] = {
    model.id: model
    for model in (
        PhoneModel("iphone-15-pro", "iPhone 15 Pro", 29.99, _IPHONE_AREA),
        PhoneModel("iphone-15", "iPhone 15", 27.99, _IPHONE_AREA),
        PhoneModel("iphone-14-pro", "iPhone 14 Pro", 29.99, _IPHONE_AREA),
        PhoneModel("iphone-14", "iPhone 14", 27.99, _IPHONE_AREA),
        PhoneModel("samsung-s24", "Samsung Galaxy S24", 28.99, _SAMSUNG_AREA),
        PhoneModel("samsung-s23", "Samsung Galaxy S23", 26.99, _SAMSUNG_AREA),
        PhoneModel("pixel-8-pro", "Google Pixel 8 Pro", 28.99, _PIXEL_AREA),
        PhoneModel("pixel-8", "Google Pixel 8", 26.99, _PIXEL_AREA),
    )
}

MATERIALS: Dict[str, str] = {
    "tpu-gel": "TPU/Gel",
}


def get_phone_model(model_id: str) -> Optional[PhoneModel]:
    return PHONE_MODELS.get(str(model_id))


def cover_fit(image: Any, size: Tuple[int, int]) -> Any:
    """
    Scale an image to cover `size` completely, cropping the overflow evenly.

    Args:
        image: PIL Image
        size: Target (width, height)

    Returns:
        New RGBA PIL Image of exactly `size`
    """
    return ImageOps.fit(
        image.convert("RGBA"), size, Image.Resampling.LANCZOS, centering=(0.5, 0.5)
    )


def _rounded_mask(size: Tuple[int, int], radius: int) -> Any:
    mask = Image.new("L", size, 0)
    ImageDraw.Draw(mask).rounded_rectangle(
        (0, 0, size[0] - 1, size[1] - 1), radius=radius, fill=255
    )
    return mask


def _apply_material_tint(image: Any, amount: float = MOCKUP_MATERIAL_TINT) -> Any:
    """Multiply the color channels toward black by `amount`; alpha untouched."""
    scaled = [int(value * (1.0 - amount)) for value in range(256)]
    return image.point(scaled * 3 + list(range(256)))


def render_case_silhouette(size: Tuple[int, int] = DEFAULT_MOCKUP_SIZE) -> Any:
    """
    Draw a plain phone case seen from the back.

    Args:
        size: Mockup (width, height)

    Returns:
        RGBA PIL Image
    """
    width, height = size
    mockup = Image.new("RGBA", size, MOCKUP_PAGE_COLOR)
    draw = ImageDraw.Draw(mockup)

    case_box = (
        int(width * 0.06), int(height * 0.03),
        int(width * 0.94), int(height * 0.97),
    )
    radius = int(min(width, height) * 0.12)
    draw.rounded_rectangle(case_box, radius=radius, fill=MOCKUP_CASE_COLOR)

    # Camera cutout in the top-left corner of the case
    lens = int(width * 0.07)
    cam_left = case_box[0] + int(width * 0.04)
    cam_top = case_box[1] + int(height * 0.015)
    draw.rounded_rectangle(
        (cam_left, cam_top, cam_left + lens * 2, cam_top + lens * 2),
        radius=lens // 2,
        fill=MOCKUP_PAGE_COLOR,
    )
    return mockup


def _draw_placeholder(mockup: Any, box: Tuple[int, int, int, int]) -> None:
    draw = ImageDraw.Draw(mockup)
    left, top, right, bottom = box

    edges = (
        ((left, top), (right, top)),
        ((right, top), (right, bottom)),
        ((right, bottom), (left, bottom)),
        ((left, bottom), (left, top)),
    )
    for (x0, y0), (x1, y1) in edges:
        length = max(abs(x1 - x0), abs(y1 - y0))
        for offset in range(0, length, _DASH_LENGTH * 2):
            end = min(offset + _DASH_LENGTH, length)
            fx0, fx1 = offset / length, end / length
            draw.line(
                (
                    x0 + (x1 - x0) * fx0, y0 + (y1 - y0) * fx0,
                    x0 + (x1 - x0) * fx1, y0 + (y1 - y0) * fx1,
                ),
                fill=MOCKUP_PLACEHOLDER_COLOR,
                width=2,
            )

    text_box = draw.textbbox((0, 0), PLACEHOLDER_TEXT)
    text_w = text_box[2] - text_box[0]
    text_h = text_box[3] - text_box[1]
    draw.text(
        ((left + right - text_w) / 2, (top + bottom - text_h) / 2),
        PLACEHOLDER_TEXT,
        fill=MOCKUP_PLACEHOLDER_COLOR,
    )


def render_mockup_preview(
    phone_model_id: str,
    design: Any = None,
    mockup: Any = None,
    size: Tuple[int, int] = DEFAULT_MOCKUP_SIZE,
) -> Any:
    """
    Composite a design onto a phone case mockup.

    Args:
        phone_model_id: Key of PHONE_MODELS (e.g. 'iphone-15-pro')
        design: Design image (PIL Image, PNG bytes or data URL), or None
                to show the placeholder outline
        mockup: Optional mockup photo; fitted and centered on the preview.
                Defaults to a generated case silhouette
        size: Preview (width, height)

    Returns:
        RGBA PIL Image of `size`

    Raises:
        ValueError: If the phone model is unknown
        ImageDecodeError: If the design or mockup cannot be decoded
    """
    model = get_phone_model(phone_model_id)
    if model is None:
        raise ValueError(
            f"Unknown phone model: {phone_model_id}. "
            f"Valid models: {', '.join(sorted(PHONE_MODELS))}"
        )

    if mockup is None:
        preview = render_case_silhouette(size)
    else:
        photo = ImageOps.contain(decode_image(mockup), size, Image.Resampling.LANCZOS)
        preview = Image.new("RGBA", size, MOCKUP_PAGE_COLOR)
        preview.alpha_composite(
            photo, dest=((size[0] - photo.width) // 2, (size[1] - photo.height) // 2)
        )

    box = model.design_area.to_box(size)
    area_size = (box[2] - box[0], box[3] - box[1])
    if area_size[0] < 1 or area_size[1] < 1:
        return preview

    if design is None:
        _draw_placeholder(preview, box)
        return preview

    fitted = _apply_material_tint(cover_fit(decode_image(design), area_size))
    radius = int(min(area_size) * MOCKUP_CORNER_RADIUS_RATIO)
    fitted.putalpha(ImageChops.multiply(fitted.getchannel("A"), _rounded_mask(area_size, radius)))
    preview.alpha_composite(fitted, dest=box[:2])
    return preview
