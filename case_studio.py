from pathlib import Path
import logging
import sys

from PyQt5.QtWidgets import QApplication

from CS_Libs.CanvasLib.drawing_canvas_window import DrawingCanvasWindow
from CS_Libs.PreviewLib.mockup_preview_window import MockupPreviewWindow

logger = logging.getLogger("case_studio")


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)

    base_image = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    window = DrawingCanvasWindow(base_image=base_image)
    previews = []

    def show_preview(image_png: bytes) -> None:
        preview = MockupPreviewWindow(image_png, Path.cwd())
        preview.design_stored.connect(lambda path: logger.info(f"Design stored at {path}"))
        previews.append(preview)
        preview.show()

    window.design_saved.connect(show_preview)
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
