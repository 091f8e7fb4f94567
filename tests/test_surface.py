"""
Unit tests for surface module.

Tests background fill, base image placement, stroke rendering in both
compositing modes, snapshots and scaled rendering.
"""

import pytest
from PIL import Image

from CS_Libs.CanvasLib.canvas_models import CompositeMode
from CS_Libs.CanvasLib.surface import Surface

WHITE = (255, 255, 255, 255)
RED = (255, 0, 0, 255)


class TestSurfaceInit:
    """Tests for Surface construction."""

    def test_default_size_is_print_area(self):
        surface = Surface()
        assert surface.size == (750, 1590)

    def test_filled_with_background(self):
        surface = Surface(20, 40)

        assert surface.getpixel((0, 0)) == WHITE
        assert surface.getpixel((19, 39)) == WHITE
        assert surface.is_blank()

    def test_custom_background(self):
        surface = Surface(10, 10, background="#000000")
        assert surface.getpixel((5, 5)) == (0, 0, 0, 255)

    def test_rejects_empty_size(self):
        with pytest.raises(ValueError):
            Surface(0, 10)


class TestFitBox:
    """Tests for base image placement."""

    def test_landscape_into_portrait(self):
        surface = Surface(60, 120)

        left, top, width, height = surface.fit_box((200, 100))

        assert (width, height) == (60, 30)
        assert left == 0
        assert top == 45

    def test_portrait_into_portrait_scales_up(self):
        surface = Surface(60, 120)

        left, top, width, height = surface.fit_box((10, 40))

        assert (width, height) == (30, 120)
        assert (left, top) == (15, 0)

    def test_composite_centers_image(self):
        surface = Surface(60, 120)

        box = surface.composite_base_image(Image.new("RGB", (200, 100), (255, 0, 0)))

        assert box == (0, 45, 60, 30)
        assert surface.getpixel((30, 44)) == WHITE
        assert surface.getpixel((30, 45))[:3] == (255, 0, 0)
        assert surface.getpixel((30, 74))[:3] == (255, 0, 0)
        assert surface.getpixel((30, 75)) == WHITE


class TestStrokes:
    """Tests for draw_segment and draw_dot."""

    def test_brush_segment_paints_band(self):
        surface = Surface(300, 200)

        surface.draw_segment((100, 100), (200, 100), 5, RED, CompositeMode.SOURCE_OVER)

        assert surface.getpixel((100, 100)) == RED
        assert surface.getpixel((150, 100)) == RED
        assert surface.getpixel((200, 100)) == RED
        assert surface.getpixel((150, 95)) == WHITE
        assert surface.getpixel((150, 105)) == WHITE
        assert surface.getpixel((210, 100)) == WHITE

    def test_round_cap_extends_past_endpoint(self):
        surface = Surface(300, 200)

        surface.draw_segment((100, 100), (200, 100), 10, RED, CompositeMode.SOURCE_OVER)

        assert surface.getpixel((203, 100)) == RED
        assert surface.getpixel((97, 100)) == RED

    def test_translucent_brush_blends(self):
        surface = Surface(50, 50)

        surface.draw_dot((25, 25), 10, (255, 0, 0, 128), CompositeMode.SOURCE_OVER)

        r, g, b, a = surface.getpixel((25, 25))
        assert r == 255
        assert 100 < g < 160
        assert a == 255

    def test_eraser_clears_to_transparent(self):
        surface = Surface(50, 50)

        surface.draw_segment((10, 25), (40, 25), 6, (0, 0, 0, 0), CompositeMode.DESTINATION_OUT)

        assert surface.getpixel((25, 25)) == (0, 0, 0, 0)
        assert surface.getpixel((25, 10)) == WHITE

    def test_segment_outside_surface_is_skipped(self):
        surface = Surface(50, 50)

        box = surface.draw_segment((-100, -100), (-80, -90), 5, RED, CompositeMode.SOURCE_OVER)

        assert box is None
        assert surface.is_blank()

    def test_segment_is_clipped_at_edge(self):
        surface = Surface(50, 50)

        box = surface.draw_segment((-10, 25), (10, 25), 4, RED, CompositeMode.SOURCE_OVER)

        assert box[0] == 0
        assert surface.getpixel((0, 25)) == RED

    def test_fractional_width_caps_match_line_body(self):
        fractional = Surface(100, 60)
        whole = Surface(100, 60)

        fractional.draw_segment((20, 30), (80, 30), 2.6, RED, CompositeMode.SOURCE_OVER)
        whole.draw_segment((20, 30), (80, 30), 3, RED, CompositeMode.SOURCE_OVER)

        assert fractional.changed_bbox(whole.snapshot()) is None

    def test_dot_stays_within_width_neighborhood(self):
        surface = Surface(100, 100)
        before = surface.snapshot()

        surface.draw_dot((50, 50), 6, RED, CompositeMode.SOURCE_OVER)

        left, top, right, bottom = surface.changed_bbox(before)
        assert 50 - 4 <= left and right <= 50 + 5
        assert 50 - 4 <= top and bottom <= 50 + 5


class TestSnapshots:
    """Tests for snapshot, restore and changed_bbox."""

    def test_restore_returns_pixels(self):
        surface = Surface(40, 40)
        blank = surface.snapshot("initial")
        surface.draw_dot((20, 20), 8, RED, CompositeMode.SOURCE_OVER)

        surface.restore(blank)

        assert surface.is_blank()
        assert surface.snapshot().pixels == blank.pixels

    def test_snapshot_is_independent_of_later_strokes(self):
        surface = Surface(40, 40)
        blank = surface.snapshot()

        surface.draw_dot((20, 20), 8, RED, CompositeMode.SOURCE_OVER)

        assert surface.changed_bbox(blank) is not None
        assert Surface(40, 40).snapshot().pixels == blank.pixels

    def test_changed_bbox_none_when_equal(self):
        surface = Surface(40, 40)
        assert surface.changed_bbox(surface.snapshot()) is None

    def test_restore_rejects_other_size(self):
        surface = Surface(40, 40)
        with pytest.raises(ValueError):
            surface.restore(Surface(20, 20).snapshot())

    def test_fill_background_resets(self):
        surface = Surface(40, 40)
        surface.draw_dot((20, 20), 8, RED, CompositeMode.SOURCE_OVER)

        surface.fill_background()

        assert surface.is_blank()


class TestRendering:
    """Tests for render_scaled and thumbnail."""

    def test_render_scaled_sizes(self):
        surface = Surface(750, 1590)

        assert surface.render_scaled(0.5).size == (375, 795)
        assert surface.render_scaled(1).size == (750, 1590)
        assert surface.render_scaled(0.2).size == (150, 318)

    def test_render_scaled_does_not_touch_buffer(self):
        surface = Surface(40, 40)
        before = surface.snapshot()

        view = surface.render_scaled(2.0)
        view.putpixel((0, 0), RED)

        assert surface.changed_bbox(before) is None

    def test_render_scaled_rejects_zero(self):
        with pytest.raises(ValueError):
            Surface(10, 10).render_scaled(0)

    def test_thumbnail_fits_box(self):
        thumb = Surface(750, 1590).thumbnail((150, 150))
        assert thumb.height == 150
        assert thumb.width <= 150
