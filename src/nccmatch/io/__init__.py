"""
IO helpers for loading image assets consumed by matching routines.
"""

from .image_loader import load_pixel_image

__all__ = ["load_pixel_image"]
