"""
Matching subpackage exposes the normalized cross-correlation search.
"""

from .engine import TemplateMatcher, match
from .ncc import TemplateStats, compute_stats, score_map, score_window
from .selection import MatchCandidate, MatchResult, boxes_overlap, candidates_above, select_matches

__all__ = [
    "MatchCandidate",
    "MatchResult",
    "TemplateMatcher",
    "TemplateStats",
    "boxes_overlap",
    "candidates_above",
    "compute_stats",
    "match",
    "score_map",
    "score_window",
    "select_matches",
]
