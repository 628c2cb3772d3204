from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .imaging.pixels import PixelImage
from .io.image_loader import load_pixel_image
from .matching.engine import DEFAULT_MAX_MATCHES, DEFAULT_THRESHOLD, match

logger = logging.getLogger(__name__)

TemplateSource = Union[PixelImage, str, Path]


def _resolve_template(template: TemplateSource) -> Optional[PixelImage]:
    if isinstance(template, PixelImage):
        return template
    try:
        return load_pixel_image(template)
    except FileNotFoundError as exc:
        logger.warning("template unavailable: %s", exc)
        return None


def find_all_images(
    screen: PixelImage,
    template: TemplateSource,
    threshold: float = DEFAULT_THRESHOLD,
    max_matches: int = DEFAULT_MAX_MATCHES,
) -> List[Tuple[int, int]]:
    """
    Centres of every retained match, best first.
    """
    resolved = _resolve_template(template)
    if resolved is None:
        return []
    results = match(screen, resolved, threshold=threshold, max_matches=max_matches)
    return [result.center(resolved.width, resolved.height) for result in results]


def find_image(
    screen: PixelImage,
    template: TemplateSource,
    threshold: float = DEFAULT_THRESHOLD,
) -> Optional[Tuple[int, int]]:
    """
    Locate a template on a captured screen and return the centre of the best match.

    ``template`` may be an already decoded image or a path to an image file.
    Returns None when the template cannot be loaded or nothing clears the
    threshold, so callers can feed the result straight into a tap gesture.
    """
    resolved = _resolve_template(template)
    if resolved is None:
        return None

    results = match(screen, resolved, threshold=threshold, max_matches=1)
    if not results:
        logger.info("template not found (threshold %.2f)", threshold)
        return None

    best = results[0]
    center = best.center(resolved.width, resolved.height)
    logger.info("template found at %s with confidence %.3f", center, best.confidence)
    return center


__all__ = ["find_all_images", "find_image"]
