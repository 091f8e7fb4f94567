"""
Design record storage for Case Studio.

A saved design is a small JSON record (.csdesign) in the Designs directory,
stored next to the PNG exported from the drawing canvas. The record keeps
the design name, the phone model and material it was made for, and
timestamps.

Functions:
    get_designs_dir: Get (and create) the Designs directory
    list_design_files: List all design records
    create_design_record: Save a new design and its exported image
    load_design_record: Load a design record with defaults filled in
    update_design_image: Replace the exported image of a design
    load_design_image: Read the exported image of a design
    delete_design_record: Remove a design record and its image
    to_app_design: Convert a stored record to the editor's camelCase shape
    from_app_design: Convert the editor's camelCase shape to a stored record
"""

import json
import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from CS_Libs.constants import (
    DEFAULT_MATERIAL,
    DESIGN_EXTENSION,
    DESIGN_IMAGE_EXTENSION,
    DESIGNS_DIR_NAME,
    FIELD_CREATED_AT,
    FIELD_ID,
    FIELD_IMAGE_FILE,
    FIELD_MATERIAL,
    FIELD_NAME,
    FIELD_PHONE_MODEL,
    FIELD_SCHEMA_VERSION,
    FIELD_UPDATED_AT,
    FILENAME_REPLACEMENT_CHAR,
    SAFE_FILENAME_CHARS,
    SCHEMA_VERSION,
)

logger = logging.getLogger(__name__)


def _timestamp() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _safe_stem(name: str) -> str:
    # Keep only alphanumeric and safe characters
    safe_name = "".join(
        c if c.isalnum() or c in SAFE_FILENAME_CHARS else FILENAME_REPLACEMENT_CHAR
        for c in name
    ).strip(FILENAME_REPLACEMENT_CHAR)
    return safe_name or "new_design"


def get_designs_dir(base_dir: Path) -> Path:
    designs_dir = Path(base_dir) / DESIGNS_DIR_NAME
    designs_dir.mkdir(parents=True, exist_ok=True)
    return designs_dir


def list_design_files(base_dir: Path) -> List[Path]:
    designs_dir = get_designs_dir(base_dir)
    return sorted(designs_dir.glob(f"*{DESIGN_EXTENSION}"))


def create_design_record(
    base_dir: Path,
    name: str,
    phone_model: str,
    image_png: bytes,
    material: str = DEFAULT_MATERIAL,
) -> Path:
    """
    Save a new design record and its exported image.

    Args:
        base_dir: Base directory containing the Designs folder
        name: Human-readable design name
        phone_model: Phone model id the case is made for
        image_png: PNG bytes exported from the drawing canvas
        material: Case material id (default: 'tpu-gel')

    Returns:
        Path to the created .csdesign file

    Raises:
        ValueError: If name or phone_model is empty
    """
    name = str(name or "").strip()
    phone_model = str(phone_model or "").strip()
    if not name or not phone_model:
        raise ValueError("A design needs a name and a phone model")

    designs_dir = get_designs_dir(base_dir)
    safe_name = _safe_stem(name)

    record_path = designs_dir / f"{safe_name}{DESIGN_EXTENSION}"
    counter = 1
    while record_path.exists():
        record_path = designs_dir / f"{safe_name}_{counter}{DESIGN_EXTENSION}"
        counter += 1

    image_path = record_path.with_suffix(DESIGN_IMAGE_EXTENSION)
    image_path.write_bytes(image_png)

    now = _timestamp()
    payload: Dict[str, Any] = {
        FIELD_SCHEMA_VERSION: SCHEMA_VERSION,
        FIELD_ID: str(uuid.uuid4()),
        FIELD_NAME: name,
        FIELD_PHONE_MODEL: phone_model,
        FIELD_MATERIAL: material or DEFAULT_MATERIAL,
        FIELD_IMAGE_FILE: image_path.name,
        FIELD_CREATED_AT: now,
        FIELD_UPDATED_AT: now,
    }
    record_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    logger.info(f"Saved design '{name}' to {record_path}")
    return record_path


def load_design_record(record_path: Path) -> Dict[str, Any]:
    """
    Load a design record, filling in defaults for missing or malformed fields.

    Raises:
        FileNotFoundError: If the record file does not exist
    """
    record_path = Path(record_path)
    if not record_path.exists():
        raise FileNotFoundError(f"Design record not found: {record_path}")

    try:
        payload = json.loads(record_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError, UnicodeDecodeError):
        payload = {}

    if not isinstance(payload, dict):
        payload = {}

    payload.setdefault(FIELD_SCHEMA_VERSION, SCHEMA_VERSION)
    payload[FIELD_ID] = str(payload.get(FIELD_ID) or record_path.stem)
    payload[FIELD_NAME] = str(payload.get(FIELD_NAME) or record_path.stem)
    payload[FIELD_PHONE_MODEL] = str(payload.get(FIELD_PHONE_MODEL) or "")
    payload[FIELD_MATERIAL] = str(payload.get(FIELD_MATERIAL) or DEFAULT_MATERIAL)
    payload[FIELD_IMAGE_FILE] = str(
        payload.get(FIELD_IMAGE_FILE) or record_path.with_suffix(DESIGN_IMAGE_EXTENSION).name
    )
    payload.setdefault(FIELD_CREATED_AT, _timestamp())
    payload.setdefault(FIELD_UPDATED_AT, payload[FIELD_CREATED_AT])
    return payload


def _image_path(record_path: Path, payload: Dict[str, Any]) -> Path:
    # Image files always live beside their record
    return Path(record_path).parent / Path(payload[FIELD_IMAGE_FILE]).name


def load_design_image(record_path: Path) -> bytes:
    """
    Read the exported PNG of a design, e.g. to open it in a new drawing session.

    Raises:
        FileNotFoundError: If the record or its image is missing
    """
    payload = load_design_record(record_path)
    image_path = _image_path(record_path, payload)
    if not image_path.exists():
        raise FileNotFoundError(f"Design image not found: {image_path}")
    return image_path.read_bytes()


def update_design_image(record_path: Path, image_png: bytes) -> Dict[str, Any]:
    """Replace the exported image of a design and bump its updated_at."""
    payload = load_design_record(record_path)
    _image_path(record_path, payload).write_bytes(image_png)
    payload[FIELD_UPDATED_AT] = _timestamp()
    Path(record_path).write_text(json.dumps(payload, indent=2), encoding="utf-8")
    return payload


def delete_design_record(record_path: Path) -> None:
    record_path = Path(record_path)
    payload = load_design_record(record_path)
    image_path = _image_path(record_path, payload)
    if image_path.exists():
        image_path.unlink()
    record_path.unlink()
    logger.info(f"Deleted design {record_path}")


def to_app_design(record: Dict[str, Any]) -> Dict[str, Any]:
    """Stored snake_case record -> editor camelCase design."""
    return {
        "id": record.get(FIELD_ID),
        "name": record.get(FIELD_NAME),
        "phoneModel": record.get(FIELD_PHONE_MODEL),
        "material": record.get(FIELD_MATERIAL),
        "imageFile": record.get(FIELD_IMAGE_FILE),
        "createdAt": record.get(FIELD_CREATED_AT),
    }


def from_app_design(design: Dict[str, Any]) -> Dict[str, Any]:
    """Editor camelCase design -> stored snake_case record fields."""
    return {
        FIELD_NAME: design.get("name"),
        FIELD_PHONE_MODEL: design.get("phoneModel"),
        FIELD_MATERIAL: design.get("material") or DEFAULT_MATERIAL,
        FIELD_IMAGE_FILE: design.get("imageFile") or "",
    }
