from pathlib import Path
from typing import Any, Optional
import logging
import math

from PyQt5.QtCore import QRect, QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QImage, QPainter
from PyQt5.QtWidgets import (
    QButtonGroup,
    QFileDialog,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from CS_Libs.CanvasLib.canvas_errors import ImageDecodeError
from CS_Libs.CanvasLib.canvas_models import ToolKind, color_to_hex
from CS_Libs.CanvasLib.drawing_session import DrawingSession
from CS_Libs.CanvasLib.surface import Box
from CS_Libs.constants import (
    DEFAULT_EXPORT_FILENAME,
    MAX_STROKE_WIDTH,
    MIN_STROKE_WIDTH,
    PALETTE_COLORS,
    SUPPORTED_STANDARD_IMAGES,
)

IMAGE_FILTER = "Images (" + " ".join(f"*{ext}" for ext in sorted(SUPPORTED_STANDARD_IMAGES)) + ")"

logger = logging.getLogger(__name__)


class DrawingCanvasWidget(QWidget):
    """Shows the session surface at the current zoom and forwards mouse input.

    The widget's top-left corner is the viewport origin, so mouse positions
    are already view coordinates. The full-resolution surface is mirrored in
    a QImage; strokes patch only the region they touched.
    """

    surface_changed = pyqtSignal()

    def __init__(self, session: DrawingSession, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.session = session
        self._image = QImage()
        self.setCursor(Qt.CrossCursor)
        self.refresh()

    @property
    def surface_image(self) -> QImage:
        return self._image

    def refresh(self) -> None:
        """Rebuild the whole image; used after zoom, undo, clear and load."""
        self.session.set_viewport((0.0, 0.0))
        surface = self.session.surface
        self._image = self._to_qimage(surface.crop((0, 0, surface.width, surface.height)))
        zoom = self.session.zoom
        self.setFixedSize(
            max(1, int(round(surface.width * zoom))),
            max(1, int(round(surface.height * zoom))),
        )
        self.update()

    def _to_qimage(self, image: Any) -> QImage:
        data = image.tobytes("raw", "RGBA")
        qimage = QImage(data, image.width, image.height, image.width * 4, QImage.Format_RGBA8888)
        # Detach from the Python buffer
        return qimage.copy()

    def _patch(self, box: Box) -> None:
        left, top, right, bottom = box
        painter = QPainter(self._image)
        painter.setCompositionMode(QPainter.CompositionMode_Source)
        painter.drawImage(left, top, self._to_qimage(self.session.surface.crop(box)))
        painter.end()

        zoom = self.session.zoom
        x0 = int(math.floor(left * zoom)) - 1
        y0 = int(math.floor(top * zoom)) - 1
        x1 = int(math.ceil(right * zoom)) + 1
        y1 = int(math.ceil(bottom * zoom)) + 1
        self.update(QRect(x0, y0, x1 - x0, y1 - y0))

    def paintEvent(self, event) -> None:
        if self.session.is_closed:
            return
        target = event.rect()
        zoom = self.session.zoom
        source = QRectF(
            target.x() / zoom,
            target.y() / zoom,
            target.width() / zoom,
            target.height() / zoom,
        )

        painter = QPainter(self)
        # Erased areas are transparent; show them on the background color
        painter.fillRect(target, QColor(color_to_hex(self.session.surface.background)))
        if zoom < 1:
            painter.setRenderHint(QPainter.SmoothPixmapTransform)
        painter.drawImage(QRectF(target), self._image, source)
        painter.end()

    def mousePressEvent(self, event) -> None:
        if event.button() != Qt.LeftButton:
            return
        self.session.pointer_down(event.x(), event.y())

    def mouseMoveEvent(self, event) -> None:
        if not self.session.is_drawing:
            return
        box = self.session.pointer_move(event.x(), event.y())
        if box is not None:
            self._patch(box)

    def mouseReleaseEvent(self, event) -> None:
        if event.button() != Qt.LeftButton or not self.session.is_drawing:
            return
        self.session.pointer_up()
        self.refresh()
        self.surface_changed.emit()

    def leaveEvent(self, event) -> None:
        if not self.session.is_drawing:
            return
        self.session.pointer_leave()
        self.refresh()
        self.surface_changed.emit()


class DrawingCanvasWindow(QMainWindow):
    """Freehand design editor around a DrawingSession."""

    design_saved = pyqtSignal(object)
    cancelled = pyqtSignal()

    def __init__(self, base_image: Any = None, session: Optional[DrawingSession] = None) -> None:
        super().__init__()
        self.setWindowTitle("Case Studio - Draw Design")
        self.resize(1100, 900)

        self.session = session or DrawingSession()
        self._build_ui()
        self._connect_signals()

        if base_image is not None:
            self.load_base_image(base_image)
        self.refresh_controls()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)
        root = QHBoxLayout(central)
        controls_col = QVBoxLayout()

        self.btn_brush = QPushButton("Brush")
        self.btn_eraser = QPushButton("Eraser")
        for button in (self.btn_brush, self.btn_eraser):
            button.setCheckable(True)
        self.tool_group = QButtonGroup(self)
        self.tool_group.addButton(self.btn_brush)
        self.tool_group.addButton(self.btn_eraser)
        self.btn_brush.setChecked(True)

        self.spin_width = QSpinBox()
        self.spin_width.setRange(MIN_STROKE_WIDTH, MAX_STROKE_WIDTH)
        self.spin_width.setValue(int(self.session.tool.width))

        palette = QGridLayout()
        self.palette_buttons = []
        for index, color in enumerate(PALETTE_COLORS):
            button = QPushButton()
            button.setFixedSize(28, 28)
            button.setStyleSheet(f"background-color: {color}; border: 1px solid #888;")
            button.setToolTip(color)
            button.clicked.connect(lambda _checked=False, c=color: self.set_color(c))
            palette.addWidget(button, index // 5, index % 5)
            self.palette_buttons.append(button)
        self.label_color = QLabel()

        self.btn_upload = QPushButton("Upload Image")
        self.btn_undo = QPushButton("Undo")
        self.btn_clear = QPushButton("Clear")
        self.btn_zoom_out = QPushButton("Zoom -")
        self.btn_zoom_in = QPushButton("Zoom +")
        self.btn_zoom_reset = QPushButton("Fit")
        self.label_zoom = QLabel()
        self.btn_download = QPushButton("Download")
        self.btn_save = QPushButton("Save Design")
        self.btn_cancel = QPushButton("Cancel")

        zoom_row = QHBoxLayout()
        zoom_row.addWidget(self.btn_zoom_out)
        zoom_row.addWidget(self.label_zoom)
        zoom_row.addWidget(self.btn_zoom_in)
        zoom_row.addWidget(self.btn_zoom_reset)

        controls_col.addWidget(self.btn_upload)
        controls_col.addWidget(QLabel("Tools"))
        controls_col.addWidget(self.btn_brush)
        controls_col.addWidget(self.btn_eraser)
        controls_col.addWidget(QLabel("Brush Size"))
        controls_col.addWidget(self.spin_width)
        controls_col.addWidget(QLabel("Colors"))
        controls_col.addLayout(palette)
        controls_col.addWidget(self.label_color)
        controls_col.addWidget(self.btn_undo)
        controls_col.addWidget(self.btn_clear)
        controls_col.addLayout(zoom_row)
        controls_col.addStretch(1)
        controls_col.addWidget(self.btn_download)
        controls_col.addWidget(self.btn_save)
        controls_col.addWidget(self.btn_cancel)

        self.canvas = DrawingCanvasWidget(self.session)
        self.scroll_area = QScrollArea()
        self.scroll_area.setAlignment(Qt.AlignCenter)
        self.scroll_area.setWidget(self.canvas)

        root.addLayout(controls_col)
        root.addWidget(self.scroll_area, stretch=1)

    def _connect_signals(self) -> None:
        self.btn_brush.clicked.connect(lambda: self.set_tool(ToolKind.BRUSH))
        self.btn_eraser.clicked.connect(lambda: self.set_tool(ToolKind.ERASER))
        self.spin_width.valueChanged.connect(self.session.set_stroke_width)
        self.btn_upload.clicked.connect(self.upload_image)
        self.btn_undo.clicked.connect(self.undo)
        self.btn_clear.clicked.connect(self.clear)
        self.btn_zoom_in.clicked.connect(self.zoom_in)
        self.btn_zoom_out.clicked.connect(self.zoom_out)
        self.btn_zoom_reset.clicked.connect(self.reset_zoom)
        self.btn_download.clicked.connect(self.download)
        self.btn_save.clicked.connect(self.save_design)
        self.btn_cancel.clicked.connect(self.cancel)
        self.canvas.surface_changed.connect(self.refresh_controls)

    def set_tool(self, kind: ToolKind) -> None:
        self.session.set_tool(kind)
        self.refresh_controls()

    def set_color(self, color: str) -> None:
        self.session.set_stroke_color(color)
        self.refresh_controls()

    def upload_image(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Upload Image", "", IMAGE_FILTER)
        if path:
            self.load_base_image(Path(path))

    def load_base_image(self, source: Any) -> None:
        try:
            self.session.load_base_image(source)
        except ImageDecodeError as exc:
            QMessageBox.warning(self, "Image Error", f"Could not load image:\n{exc}")
        self.canvas.refresh()
        self.refresh_controls()

    def undo(self) -> None:
        self.session.undo()
        self.canvas.refresh()
        self.refresh_controls()

    def clear(self) -> None:
        self.session.clear()
        self.canvas.refresh()
        self.refresh_controls()

    def zoom_in(self) -> None:
        self.session.zoom_in()
        self.canvas.refresh()
        self.refresh_controls()

    def zoom_out(self) -> None:
        self.session.zoom_out()
        self.canvas.refresh()
        self.refresh_controls()

    def reset_zoom(self) -> None:
        self.session.reset_zoom()
        self.canvas.refresh()
        self.refresh_controls()

    def refresh_controls(self) -> None:
        view = self.session.view
        self.label_zoom.setText(f"{self.session.zoom_percent}%")
        self.btn_zoom_in.setEnabled(view.can_zoom_in)
        self.btn_zoom_out.setEnabled(view.can_zoom_out)
        self.btn_undo.setEnabled(self.session.can_undo)
        self.label_color.setText(f"Color: {color_to_hex(self.session.tool.color)}")
        self.btn_brush.setChecked(self.session.tool.kind is ToolKind.BRUSH)
        self.btn_eraser.setChecked(self.session.tool.kind is ToolKind.ERASER)

    def download(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, "Download Design", DEFAULT_EXPORT_FILENAME, "PNG Images (*.png)"
        )
        if not path:
            return
        try:
            self.session.save_to_file(Path(path))
        except OSError as exc:
            QMessageBox.critical(self, "Save Error", f"Failed to save design:\n{exc}")

    def save_design(self) -> None:
        self.design_saved.emit(self.session.export_png())
        self.close()
        self.session.close()

    def cancel(self) -> None:
        self.cancelled.emit()
        self.close()
        self.session.close()
