"""
Tests for phone case mockup previews.

Tests cover:
- Phone model catalog
- Design area placement
- Cover fitting
- Preview rendering with and without a design
"""

import unittest

from PIL import Image, ImageChops

from CS_Libs.PreviewLib.phone_mockup import (
    DesignArea,
    MATERIALS,
    PHONE_MODELS,
    cover_fit,
    get_phone_model,
    render_case_silhouette,
    render_mockup_preview,
)


class TestPhoneModels(unittest.TestCase):
    """Test the phone model catalog."""

    def test_catalog_contents(self):
        self.assertEqual(len(PHONE_MODELS), 8)
        self.assertEqual(get_phone_model("iphone-15-pro").name, "iPhone 15 Pro")
        self.assertEqual(get_phone_model("samsung-s24").price, 28.99)
        self.assertIn("tpu-gel", MATERIALS)

    def test_unknown_model(self):
        self.assertIsNone(get_phone_model("nokia-3310"))


class TestDesignArea(unittest.TestCase):
    """Test DesignArea."""

    def test_to_box(self):
        area = DesignArea(top=0.12, left=0.15, width=0.70, height=0.76)

        self.assertEqual(area.to_box((540, 1080)), (81, 130, 459, 950))

    def test_rejects_out_of_range(self):
        with self.assertRaises(ValueError):
            DesignArea(top=-0.1, left=0.0, width=0.5, height=0.5)

        with self.assertRaises(ValueError):
            DesignArea(top=0.5, left=0.5, width=0.6, height=0.1)


class TestCoverFit(unittest.TestCase):
    """Test cover_fit."""

    def test_exact_size(self):
        image = Image.new("RGB", (200, 100), "red")

        fitted = cover_fit(image, (50, 50))

        self.assertEqual(fitted.size, (50, 50))
        self.assertEqual(fitted.mode, "RGBA")

    def test_crops_overflow_evenly(self):
        image = Image.new("RGB", (300, 100), "blue")
        image.paste((255, 0, 0), (100, 0, 200, 100))

        fitted = cover_fit(image, (100, 100))

        self.assertEqual(fitted.getpixel((50, 50))[:3], (255, 0, 0))


class TestRenderMockupPreview(unittest.TestCase):
    """Test render_mockup_preview."""

    def setUp(self):
        self.design = Image.new("RGBA", (750, 1590), (255, 0, 0, 255))

    def test_preview_size(self):
        preview = render_mockup_preview("iphone-15", self.design, size=(270, 540))

        self.assertEqual(preview.size, (270, 540))
        self.assertEqual(preview.mode, "RGBA")

    def test_design_lands_in_design_area(self):
        preview = render_mockup_preview("iphone-15-pro", self.design)

        # Center of the iPhone design area, tinted 5% for the material
        self.assertEqual(preview.getpixel((270, 540)), (242, 0, 0, 255))
        # Outside the case
        self.assertEqual(preview.getpixel((5, 5)), (244, 244, 245, 255))

    def test_design_corners_are_rounded(self):
        preview = render_mockup_preview("iphone-15-pro", self.design)

        left, top = 81, 130
        self.assertNotEqual(preview.getpixel((left, top))[:3], (242, 0, 0))

    def test_accepts_png_bytes(self):
        from io import BytesIO

        buffer = BytesIO()
        self.design.save(buffer, format="PNG")

        preview = render_mockup_preview("pixel-8", buffer.getvalue())

        self.assertEqual(preview.getpixel((270, 540)), (242, 0, 0, 255))

    def test_placeholder_without_design(self):
        silhouette = render_case_silhouette((540, 1080))

        preview = render_mockup_preview("iphone-14")

        bbox = ImageChops.difference(preview, silhouette).getbbox()
        self.assertIsNotNone(bbox)
        left, top, right, bottom = bbox
        self.assertGreaterEqual(left, 79)
        self.assertGreaterEqual(top, 128)
        self.assertLessEqual(right, 462)
        self.assertLessEqual(bottom, 953)

    def test_custom_mockup_photo(self):
        photo = Image.new("RGB", (100, 200), (0, 0, 255))

        preview = render_mockup_preview("iphone-14", mockup=photo)

        self.assertEqual(preview.getpixel((5, 5)), (0, 0, 255, 255))

    def test_unknown_model_raises(self):
        with self.assertRaises(ValueError):
            render_mockup_preview("nokia-3310", self.design)


if __name__ == "__main__":
    unittest.main()
