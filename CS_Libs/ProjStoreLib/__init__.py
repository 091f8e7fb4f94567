"""
ProjStoreLib - Design record storage

This module handles persistence of saved Case Studio designs
and the images exported from the drawing canvas.
"""

from CS_Libs.ProjStoreLib.design_store import (
    get_designs_dir,
    list_design_files,
    create_design_record,
    load_design_record,
    load_design_image,
    update_design_image,
    delete_design_record,
    to_app_design,
    from_app_design,
)

__all__ = [
    "get_designs_dir",
    "list_design_files",
    "create_design_record",
    "load_design_record",
    "load_design_image",
    "update_design_image",
    "delete_design_record",
    "to_app_design",
    "from_app_design",
]
