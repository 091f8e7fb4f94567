"""
PreviewLib - Phone case mockup previews

Renders designs onto phone case mockups for the phone models
offered in the studio.
"""

from CS_Libs.PreviewLib.phone_mockup import (
    DesignArea,
    PhoneModel,
    PHONE_MODELS,
    MATERIALS,
    get_phone_model,
    cover_fit,
    render_case_silhouette,
    render_mockup_preview,
)

__all__ = [
    "DesignArea",
    "PhoneModel",
    "PHONE_MODELS",
    "MATERIALS",
    "get_phone_model",
    "cover_fit",
    "render_case_silhouette",
    "render_mockup_preview",
]
