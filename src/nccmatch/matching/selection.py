from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np


@dataclass(frozen=True, slots=True)
class MatchResult:
    """
    Top-left position of a template occurrence and its confidence in [0, 1].
    """

    x: int
    y: int
    confidence: float

    def center(self, template_width: int, template_height: int) -> Tuple[int, int]:
        return self.x + template_width // 2, self.y + template_height // 2


MatchCandidate = MatchResult


def candidates_above(scores: np.ndarray, threshold: float) -> List[MatchCandidate]:
    """
    Collect positions whose score clears the threshold, in row-major scan order.
    """
    ys, xs = np.nonzero(scores >= threshold)
    return [
        MatchCandidate(x=int(x), y=int(y), confidence=float(scores[y, x]))
        for y, x in zip(ys, xs)
    ]


def boxes_overlap(a: MatchResult, b: MatchResult, width: int, height: int) -> bool:
    """
    Axis-aligned overlap test for two template-sized boxes.

    Boxes that share an edge are treated as overlapping.
    """
    return not (
        a.x + width < b.x
        or b.x + width < a.x
        or a.y + height < b.y
        or b.y + height < a.y
    )


def select_matches(
    candidates: Iterable[MatchCandidate],
    template_width: int,
    template_height: int,
    max_matches: int,
) -> List[MatchResult]:
    """
    Greedy non-maximum suppression over thresholded candidates.

    Candidates are ranked by descending confidence with ties kept in their
    incoming order, then accepted only when they do not overlap anything
    already accepted. At most ``max_matches`` results are returned.
    """
    if max_matches <= 0:
        return []

    ranked = sorted(candidates, key=lambda candidate: candidate.confidence, reverse=True)
    kept: List[MatchResult] = []
    for candidate in ranked:
        if any(boxes_overlap(candidate, other, template_width, template_height) for other in kept):
            continue
        kept.append(candidate)
        if len(kept) >= max_matches:
            break
    return kept


__all__ = [
    "MatchCandidate",
    "MatchResult",
    "boxes_overlap",
    "candidates_above",
    "select_matches",
]
