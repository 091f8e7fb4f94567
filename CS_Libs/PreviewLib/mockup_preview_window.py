from io import BytesIO
from pathlib import Path
from typing import Any, Optional
import logging

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QPixmap
from PyQt5.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from CS_Libs.PreviewLib.phone_mockup import MATERIALS, PHONE_MODELS, render_mockup_preview
from CS_Libs.ProjStoreLib.design_store import create_design_record

logger = logging.getLogger(__name__)


class MockupPreviewWindow(QMainWindow):
    """Shows a finished design on a phone case and stores it as a design record."""

    design_stored = pyqtSignal(object)

    def __init__(self, image_png: bytes, base_dir: Path, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Case Studio - Preview")
        self.resize(800, 900)

        self.image_png = image_png
        self.base_dir = Path(base_dir)
        self.preview_image: Any = None

        self._build_ui()
        self._connect_signals()
        self.refresh_preview()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)
        root = QHBoxLayout(central)
        controls_col = QVBoxLayout()

        self.combo_model = QComboBox()
        for model in PHONE_MODELS.values():
            self.combo_model.addItem(f"{model.name} - ${model.price:.2f}", model.id)

        self.combo_material = QComboBox()
        for material_id, label in MATERIALS.items():
            self.combo_material.addItem(label, material_id)

        self.edit_name = QLineEdit()
        self.edit_name.setPlaceholderText("Design name")

        self.btn_save = QPushButton("Save Design")
        self.btn_close = QPushButton("Close")

        controls_col.addWidget(QLabel("Phone Model"))
        controls_col.addWidget(self.combo_model)
        controls_col.addWidget(QLabel("Material"))
        controls_col.addWidget(self.combo_material)
        controls_col.addWidget(QLabel("Name"))
        controls_col.addWidget(self.edit_name)
        controls_col.addWidget(self.btn_save)
        controls_col.addWidget(self.btn_close)
        controls_col.addStretch()

        self.label_preview = QLabel("Preview")
        self.label_preview.setAlignment(Qt.AlignCenter)
        self.label_preview.setMinimumSize(360, 720)

        root.addLayout(controls_col, 1)
        root.addWidget(self.label_preview, 3)

    def _connect_signals(self) -> None:
        self.combo_model.currentIndexChanged.connect(self.refresh_preview)
        self.btn_save.clicked.connect(self.save_design)
        self.btn_close.clicked.connect(self.close)

    @property
    def phone_model_id(self) -> str:
        return self.combo_model.currentData()

    @property
    def material_id(self) -> str:
        return self.combo_material.currentData()

    def refresh_preview(self) -> None:
        self.preview_image = render_mockup_preview(self.phone_model_id, self.image_png)

        buffer = BytesIO()
        self.preview_image.save(buffer, format="PNG")
        pixmap = QPixmap()
        if not pixmap.loadFromData(buffer.getvalue(), "PNG"):
            self.label_preview.setText("Preview failed")
            return

        scaled = pixmap.scaled(self.label_preview.size(), Qt.KeepAspectRatio, Qt.SmoothTransformation)
        self.label_preview.setPixmap(scaled)

    def save_design(self) -> Optional[Path]:
        name = self.edit_name.text().strip()
        if not name:
            QMessageBox.warning(self, "Missing Name", "Enter a name for the design.")
            return None

        try:
            record_path = create_design_record(
                self.base_dir, name, self.phone_model_id, self.image_png, self.material_id
            )
        except OSError as exc:
            logger.error(f"Failed to store design '{name}': {exc}")
            QMessageBox.critical(self, "Save Error", f"Failed to save design:\n{exc}")
            return None

        QMessageBox.information(self, "Design Saved", f"Saved to {record_path}")
        self.design_stored.emit(record_path)
        return record_path
