"""
Core package for locating template images on captured screens.
"""

import logging

from .errors import InvalidDimensionsError, TemplateMatchError
from .imaging import GrayscaleImage, PixelImage, to_grayscale
from .lookup import find_all_images, find_image
from .matching import MatchCandidate, MatchResult, TemplateMatcher, match

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "GrayscaleImage",
    "InvalidDimensionsError",
    "MatchCandidate",
    "MatchResult",
    "PixelImage",
    "TemplateMatchError",
    "TemplateMatcher",
    "find_all_images",
    "find_image",
    "match",
    "to_grayscale",
]
