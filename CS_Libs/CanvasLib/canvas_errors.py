"""
Exceptions raised by the drawing canvas core.

Classes:
    CanvasError: Base class for canvas editing errors
    ImageDecodeError: A base image could not be decoded
"""


class CanvasError(Exception):
    """Base class for canvas editing errors."""


class ImageDecodeError(CanvasError, ValueError):
    """Raised when a base image source cannot be decoded into pixels."""
