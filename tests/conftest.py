"""
Pytest configuration and shared fixtures for Case Studio tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

from io import BytesIO

import pytest
from PIL import Image

from CS_Libs.CanvasLib.drawing_session import CanvasConfig


@pytest.fixture
def temp_design_dir(tmp_path):
    """
    Provide a temporary directory for design records.

    Args:
        tmp_path: Pytest's built-in temporary directory fixture

    Returns:
        Path object pointing to a temporary directory
    """
    return tmp_path


@pytest.fixture
def small_canvas_config():
    """A 60x120 canvas keeps pixel assertions fast."""
    return CanvasConfig(width=60, height=120)


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 255),  # Gray
    ]


@pytest.fixture
def landscape_png_bytes():
    """PNG bytes of a solid red 200x100 (wider than tall) image."""
    buffer = BytesIO()
    Image.new("RGB", (200, 100), (255, 0, 0)).save(buffer, format="PNG")
    return buffer.getvalue()
