from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

from ..errors import InvalidDimensionsError
from ..imaging.pixels import PixelImage, to_grayscale
from .ncc import compute_stats, score_map
from .selection import MatchResult, candidates_above, select_matches

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.8
DEFAULT_MAX_MATCHES = 10


def _check_dimensions(source: PixelImage, template: PixelImage) -> None:
    if (
        template.width <= 0
        or template.height <= 0
        or template.width > source.width
        or template.height > source.height
    ):
        raise InvalidDimensionsError(template.size, source.size)


def match(
    source: PixelImage,
    template: PixelImage,
    threshold: float = DEFAULT_THRESHOLD,
    max_matches: int = DEFAULT_MAX_MATCHES,
) -> List[MatchResult]:
    """
    Find non-overlapping occurrences of ``template`` inside ``source``.

    Results are ordered by descending confidence and capped at ``max_matches``.
    This function never raises: unusable inputs and unexpected failures are
    logged and reported as an empty list.
    """
    try:
        _check_dimensions(source, template)
        if max_matches < 1:
            logger.warning("max_matches must be positive, got %s", max_matches)
            return []

        source_gray = to_grayscale(source)
        template_gray = to_grayscale(template)
        stats = compute_stats(template_gray)

        scores = score_map(source_gray, template_gray, stats)
        candidates = candidates_above(scores, threshold)
        results = select_matches(candidates, template.width, template.height, max_matches)
    except InvalidDimensionsError as exc:
        logger.warning("%s", exc)
        return []
    except Exception:
        logger.exception("Error during template matching")
        return []

    logger.debug(
        "template %dx%d: %d positions, %d above %.3f, %d kept",
        template.width,
        template.height,
        scores.size,
        len(candidates),
        threshold,
        len(results),
    )
    return results


@dataclass(frozen=True, slots=True)
class TemplateMatcher:
    """
    Reusable matching configuration; holds no state between calls.
    """

    threshold: float = DEFAULT_THRESHOLD
    max_matches: int = DEFAULT_MAX_MATCHES

    def __post_init__(self) -> None:
        if self.max_matches < 1:
            raise ValueError("max_matches must be >= 1")

    def match(self, source: PixelImage, template: PixelImage) -> List[MatchResult]:
        return match(source, template, threshold=self.threshold, max_matches=self.max_matches)


__all__ = ["DEFAULT_MAX_MATCHES", "DEFAULT_THRESHOLD", "TemplateMatcher", "match"]
