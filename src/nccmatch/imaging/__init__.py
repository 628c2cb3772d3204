"""
Imaging subpackage holds pixel buffers and the grayscale conversion.
"""

from .pixels import GrayscaleImage, PixelImage, to_grayscale

__all__ = ["GrayscaleImage", "PixelImage", "to_grayscale"]
