"""
CS_Libs - Case Studio Library Modules

This package contains core functionality for the Case Studio project,
organized into specialized sub-packages:

- CanvasLib: Drawing canvas editing core (surface, strokes, undo history, zoom)
- PreviewLib: Phone case mockup previews
- ProjStoreLib: Saved design records and their exported images
"""

__version__ = "0.1.0"
