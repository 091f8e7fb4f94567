"""
Raster surface and stroke rendering for the drawing canvas.

The Surface owns a fixed-size RGBA buffer. Strokes are rendered segment by
segment: each segment is rasterized into a coverage mask covering only its
bounding box, then composited into the buffer with either source-over
(brush) or destination-out (eraser). Round caps and joins come from drawing
a disc at both ends of every segment.

Classes:
    Surface: The in-memory raster bitmap being edited
"""

from typing import Any, Optional, Sequence, Tuple
import math

import numpy as np
from PIL import Image, ImageDraw

from CS_Libs.CanvasLib.canvas_history import HistorySnapshot
from CS_Libs.CanvasLib.canvas_models import CompositeMode, Point, RgbaColor, parse_color
from CS_Libs.constants import (
    BACKGROUND_COLOR,
    SURFACE_HEIGHT,
    SURFACE_MODE,
    SURFACE_WIDTH,
)

Box = Tuple[int, int, int, int]


class Surface:
    """Fixed-size RGBA bitmap mutated in place by strokes."""

    def __init__(
        self,
        width: int = SURFACE_WIDTH,
        height: int = SURFACE_HEIGHT,
        background: Any = BACKGROUND_COLOR,
    ):
        width = int(width)
        height = int(height)
        if width < 1 or height < 1:
            raise ValueError(f"Surface size must be positive, got {width}x{height}")

        self._background: RgbaColor = parse_color(background)
        self._image = Image.new(SURFACE_MODE, (width, height), self._background)

    @property
    def width(self) -> int:
        return self._image.width

    @property
    def height(self) -> int:
        return self._image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self._image.size

    @property
    def background(self) -> RgbaColor:
        return self._background

    def getpixel(self, xy: Tuple[int, int]) -> RgbaColor:
        return self._image.getpixel(xy)

    def fill_background(self) -> None:
        """Reset every pixel to the background color."""
        self._image.paste(self._background, (0, 0, self.width, self.height))

    # ------------------------------------------------------------------
    # Base image
    # ------------------------------------------------------------------

    def fit_box(self, image_size: Tuple[int, int]) -> Box:
        """
        Compute where an image lands when scaled to fit and centered.

        The scale is min(W / w, H / h): aspect ratio kept, nothing cropped.

        Args:
            image_size: (width, height) of the image to place

        Returns:
            (left, top, width, height) in surface pixels
        """
        img_w, img_h = image_size
        if img_w < 1 or img_h < 1:
            raise ValueError(f"Image size must be positive, got {img_w}x{img_h}")

        scale = min(self.width / img_w, self.height / img_h)
        fit_w = max(1, min(self.width, int(round(img_w * scale))))
        fit_h = max(1, min(self.height, int(round(img_h * scale))))
        left = (self.width - fit_w) // 2
        top = (self.height - fit_h) // 2
        return (left, top, fit_w, fit_h)

    def composite_base_image(self, image: Any) -> Box:
        """
        Fill the background, then draw `image` scaled to fit and centered.

        Args:
            image: Decoded PIL Image

        Returns:
            The placement box (left, top, width, height)
        """
        left, top, fit_w, fit_h = self.fit_box(image.size)
        placed = image.convert(SURFACE_MODE).resize(
            (fit_w, fit_h), Image.Resampling.LANCZOS
        )
        self.fill_background()
        self._image.alpha_composite(placed, dest=(left, top))
        return (left, top, fit_w, fit_h)

    # ------------------------------------------------------------------
    # Strokes
    # ------------------------------------------------------------------

    def draw_segment(
        self,
        start: Point,
        end: Point,
        width: float,
        color: RgbaColor,
        mode: CompositeMode,
    ) -> Optional[Box]:
        """
        Draw one stroke segment with round caps.

        Args:
            start: Segment start in surface coordinates
            end: Segment end in surface coordinates
            width: Stroke width in pixels
            color: RGBA color (ignored for destination-out)
            mode: CompositeMode.SOURCE_OVER paints, DESTINATION_OUT erases

        Returns:
            The touched box (left, top, right, bottom), or None if the
            segment lies entirely outside the surface
        """
        rendered = self._stroke_mask((start, end), width)
        if rendered is None:
            return None
        mask, box = rendered
        self._apply_mask(mask, box, color, mode)
        return box

    def draw_dot(
        self,
        center: Point,
        width: float,
        color: RgbaColor,
        mode: CompositeMode,
    ) -> Optional[Box]:
        """Draw a single round dot (a zero-length segment)."""
        return self.draw_segment(center, center, width, color, mode)

    def _stroke_mask(self, points: Sequence[Point], width: float) -> Optional[Tuple[Any, Box]]:
        # Body and caps share one pixel width
        stroke_px = max(1, int(round(width)))
        radius = stroke_px / 2.0
        xs = [float(p[0]) for p in points]
        ys = [float(p[1]) for p in points]

        left = max(0, int(math.floor(min(xs) - radius)) - 1)
        top = max(0, int(math.floor(min(ys) - radius)) - 1)
        right = min(self.width, int(math.ceil(max(xs) + radius)) + 2)
        bottom = min(self.height, int(math.ceil(max(ys) + radius)) + 2)
        if left >= right or top >= bottom:
            return None

        mask = Image.new("L", (right - left, bottom - top), 0)
        draw = ImageDraw.Draw(mask)
        local = [(x - left, y - top) for x, y in zip(xs, ys)]

        if local[0] != local[-1]:
            draw.line(local, fill=255, width=stroke_px)
        for cx, cy in (local[0], local[-1]):
            draw.ellipse((cx - radius, cy - radius, cx + radius, cy + radius), fill=255)

        return mask, (left, top, right, bottom)

    def _apply_mask(self, mask: Any, box: Box, color: RgbaColor, mode: CompositeMode) -> None:
        region = self._image.crop(box)

        if mode is CompositeMode.SOURCE_OVER:
            r, g, b, a = color
            overlay = Image.new(SURFACE_MODE, region.size, (r, g, b, 0))
            if a < 255:
                mask = mask.point(lambda value: value * a // 255)
            overlay.putalpha(mask)
            region.alpha_composite(overlay)
        elif mode is CompositeMode.DESTINATION_OUT:
            pixels = np.array(region)
            coverage = np.asarray(mask, dtype=np.uint16)
            alpha = pixels[..., 3].astype(np.uint16)
            pixels[..., 3] = (alpha * (255 - coverage) // 255).astype(np.uint8)
            # Fully cleared pixels read back as (0, 0, 0, 0)
            pixels[pixels[..., 3] == 0] = 0
            region = Image.fromarray(pixels)
        else:
            raise ValueError(f"Unsupported composite mode: {mode}")

        self._image.paste(region, box[:2])

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def snapshot(self, label: str = "") -> HistorySnapshot:
        return HistorySnapshot(
            pixels=self._image.tobytes(),
            size=self._image.size,
            mode=self._image.mode,
            label=label,
        )

    def restore(self, snapshot: HistorySnapshot) -> None:
        """Replace the buffer content with a snapshot's pixels."""
        if snapshot.size != self.size or snapshot.mode != self._image.mode:
            raise ValueError(
                f"Snapshot {snapshot.mode} {snapshot.size} does not match "
                f"surface {self._image.mode} {self.size}"
            )
        self._image.frombytes(snapshot.pixels)

    def changed_bbox(self, snapshot: HistorySnapshot) -> Optional[Box]:
        """
        Bounding box of pixels that differ from a snapshot.

        Returns:
            (left, top, right, bottom) with exclusive right/bottom, or None
            if the surface matches the snapshot exactly
        """
        current = np.asarray(self._image)
        previous = np.frombuffer(snapshot.pixels, dtype=np.uint8).reshape(current.shape)
        changed = np.any(current != previous, axis=2)
        if not changed.any():
            return None

        rows = np.where(changed.any(axis=1))[0]
        cols = np.where(changed.any(axis=0))[0]
        return (int(cols[0]), int(rows[0]), int(cols[-1]) + 1, int(rows[-1]) + 1)

    def is_blank(self) -> bool:
        pixels = np.asarray(self._image)
        return bool(np.all(pixels == np.array(self._background, dtype=np.uint8)))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def copy_image(self) -> Any:
        """Detached copy of the buffer as a PIL Image."""
        return self._image.copy()

    def crop(self, box: Box) -> Any:
        """Detached copy of a (left, top, right, bottom) region."""
        return self._image.crop(box)

    def render_scaled(self, scale: float) -> Any:
        """
        Render the buffer at another resolution for display.

        Downscaling uses Lanczos filtering, upscaling keeps hard pixel edges.
        """
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")
        if scale == 1:
            return self._image.copy()

        size = (
            max(1, int(round(self.width * scale))),
            max(1, int(round(self.height * scale))),
        )
        resample = Image.Resampling.LANCZOS if scale < 1 else Image.Resampling.NEAREST
        return self._image.resize(size, resample)

    def thumbnail(self, max_size: Tuple[int, int]) -> Any:
        image = self._image.copy()
        image.thumbnail(max_size, Image.Resampling.LANCZOS)
        return image
