"""
Tests for the PyQt5 drawing canvas host window.

Runs on the offscreen Qt platform; skipped when PyQt5 is not installed.
"""

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
QtWidgets = pytest.importorskip("PyQt5.QtWidgets")

from PyQt5.QtCore import QEvent, QPointF, Qt  # noqa: E402
from PyQt5.QtGui import QMouseEvent  # noqa: E402

from CS_Libs.CanvasLib import drawing_canvas_window  # noqa: E402
from CS_Libs.CanvasLib.canvas_models import ToolKind  # noqa: E402
from CS_Libs.CanvasLib.drawing_canvas_window import (  # noqa: E402
    DrawingCanvasWidget,
    DrawingCanvasWindow,
)
from CS_Libs.CanvasLib.drawing_session import DrawingSession  # noqa: E402


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance()
    if app is None:
        app = QtWidgets.QApplication([])
    return app


def _mouse(event_type, x, y, button=Qt.LeftButton, buttons=Qt.LeftButton):
    return QMouseEvent(event_type, QPointF(x, y), button, buttons, Qt.NoModifier)


class TestDrawingCanvasWidget:
    """Mouse input is forwarded as view coordinates."""

    def test_widget_size_follows_zoom(self, qapp):
        widget = DrawingCanvasWidget(DrawingSession())

        assert (widget.width(), widget.height()) == (375, 795)

    def test_mouse_stroke_commits_history(self, qapp):
        session = DrawingSession()
        widget = DrawingCanvasWidget(session)
        changes = []
        widget.surface_changed.connect(lambda: changes.append(True))

        widget.mousePressEvent(_mouse(QEvent.MouseButtonPress, 50, 50))
        widget.mouseMoveEvent(_mouse(QEvent.MouseMove, 100, 50, button=Qt.NoButton))
        widget.mouseReleaseEvent(_mouse(QEvent.MouseButtonRelease, 100, 50, buttons=Qt.NoButton))

        assert session.history_length == 2
        assert session.surface.getpixel((150, 100)) == (0, 0, 0, 255)
        assert changes == [True]

    def test_move_patches_image_without_full_refresh(self, qapp, monkeypatch):
        session = DrawingSession()
        widget = DrawingCanvasWidget(session)
        refreshes = []
        monkeypatch.setattr(widget, "refresh", lambda: refreshes.append(True))

        widget.mousePressEvent(_mouse(QEvent.MouseButtonPress, 50, 50))
        widget.mouseMoveEvent(_mouse(QEvent.MouseMove, 100, 50, button=Qt.NoButton))

        assert refreshes == []
        assert widget.surface_image.pixelColor(150, 100).getRgb() == (0, 0, 0, 255)
        assert widget.surface_image.pixelColor(150, 300).getRgb() == (255, 255, 255, 255)

    def test_surface_image_is_full_resolution(self, qapp):
        widget = DrawingCanvasWidget(DrawingSession())

        assert (widget.surface_image.width(), widget.surface_image.height()) == (750, 1590)

    def test_right_button_is_ignored(self, qapp):
        session = DrawingSession()
        widget = DrawingCanvasWidget(session)

        widget.mousePressEvent(_mouse(QEvent.MouseButtonPress, 50, 50, button=Qt.RightButton))

        assert not session.is_drawing


class TestDrawingCanvasWindow:
    """Toolbar commands drive the session."""

    def test_initial_controls(self, qapp):
        window = DrawingCanvasWindow()

        assert window.label_zoom.text() == "50%"
        assert not window.btn_undo.isEnabled()
        assert window.btn_brush.isChecked()

    def test_zoom_buttons(self, qapp):
        window = DrawingCanvasWindow()

        window.btn_zoom_in.click()

        assert window.label_zoom.text() == "75%"
        assert window.canvas.width() == window.session.render_view().width

        window.btn_zoom_reset.click()
        assert window.label_zoom.text() == "50%"

    def test_tool_color_and_width_controls(self, qapp):
        window = DrawingCanvasWindow()

        window.btn_eraser.click()
        window.spin_width.setValue(20)
        window.palette_buttons[2].click()

        assert window.session.tool.kind is ToolKind.ERASER
        assert window.session.tool.width == 20
        assert window.session.tool.color == (255, 0, 0, 255)
        assert window.label_color.text() == "Color: #FF0000"

    def test_undo_and_clear_buttons(self, qapp):
        window = DrawingCanvasWindow()
        session = window.session
        session.pointer_down_surface(10, 10)
        session.pointer_up()
        window.refresh_controls()

        assert window.btn_undo.isEnabled()
        window.btn_undo.click()
        assert session.history_length == 2
        assert session.history_cursor == 0

        window.btn_clear.click()
        assert session.history_length == 2
        assert session.surface.is_blank()

    def test_bad_base_image_warns_and_stays_blank(self, qapp, monkeypatch):
        warnings = []
        monkeypatch.setattr(
            drawing_canvas_window.QMessageBox,
            "warning",
            lambda *args, **kwargs: warnings.append(args),
        )

        window = DrawingCanvasWindow(base_image=b"not an image")

        assert len(warnings) == 1
        assert window.session.surface.is_blank()

    def test_save_emits_png_and_closes_session(self, qapp):
        window = DrawingCanvasWindow()
        saved = []
        window.design_saved.connect(saved.append)

        window.btn_save.click()

        assert len(saved) == 1
        assert saved[0].startswith(b"\x89PNG")
        assert window.session.is_closed

    def test_cancel_emits_and_closes_session(self, qapp):
        window = DrawingCanvasWindow()
        cancelled = []
        window.cancelled.connect(lambda: cancelled.append(True))

        window.btn_cancel.click()

        assert cancelled == [True]
        assert window.session.is_closed

    def test_upload_loads_base_image(self, qapp, monkeypatch, tmp_path, landscape_png_bytes):
        path = tmp_path / "artwork.png"
        path.write_bytes(landscape_png_bytes)
        monkeypatch.setattr(
            drawing_canvas_window.QFileDialog,
            "getOpenFileName",
            lambda *args, **kwargs: (str(path), drawing_canvas_window.IMAGE_FILTER),
        )
        window = DrawingCanvasWindow()

        window.btn_upload.click()

        assert window.session.surface.getpixel((375, 795))[:3] == (255, 0, 0)
        assert window.session.surface.getpixel((375, 10)) == (255, 255, 255, 255)
        assert window.session.history_length == 1

    def test_image_filter_lists_supported_formats(self):
        assert "*.png" in drawing_canvas_window.IMAGE_FILTER
        assert "*.jpeg" in drawing_canvas_window.IMAGE_FILTER
