from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

import cv2
import numpy as np

from ..imaging.pixels import GrayscaleImage


@dataclass(frozen=True, slots=True)
class TemplateStats:
    """
    Aggregate intensity statistics of a template, computed once per search.

    ``sum_sq_diff`` is the sum of squared deviations from the mean,
    ``total_sq - n * mean**2``.
    """

    n: int
    total: int
    total_sq: int
    mean: float
    sum_sq_diff: float

    @property
    def scaled_sq_diff(self) -> int:
        """
        ``n * sum_sq_diff`` as an exact integer; zero for a flat template.
        """
        return self.n * self.total_sq - self.total * self.total


def compute_stats(template: GrayscaleImage) -> TemplateStats:
    values = template.data.astype(np.int64)
    n = int(values.size)
    if n == 0:
        raise ValueError("template must contain at least one pixel")

    total = int(values.sum())
    total_sq = int(np.square(values).sum())
    mean = total / n
    sum_sq_diff = (n * total_sq - total * total) / n
    return TemplateStats(n=n, total=total, total_sq=total_sq, mean=mean, sum_sq_diff=sum_sq_diff)


def _confidence(n: int, dot: int, window_sum: int, window_sq: int, stats: TemplateStats) -> float:
    # Both terms are scaled by n so the flat-window test stays exact.
    window_scaled = n * window_sq - window_sum * window_sum
    template_scaled = stats.scaled_sq_diff
    if window_scaled <= 0 or template_scaled <= 0:
        return 0.0

    numerator = float(n * dot - window_sum * stats.total)
    denominator = math.sqrt(float(window_scaled) * float(template_scaled))
    ncc = min(max(numerator / denominator, -1.0), 1.0)
    return (ncc + 1.0) / 2.0


def score_window(
    source: GrayscaleImage,
    template: GrayscaleImage,
    stats: TemplateStats,
    x: int,
    y: int,
) -> float:
    """
    Normalized cross-correlation of the template against one source window.

    Returns a confidence in [0, 1]; flat windows or templates score 0.
    """
    if not (0 <= x <= source.width - template.width and 0 <= y <= source.height - template.height):
        raise ValueError(f"window at ({x}, {y}) does not fit inside the source image")

    window = source.data[y : y + template.height, x : x + template.width].astype(np.int64)
    dot = int(np.sum(window * template.data.astype(np.int64)))
    window_sum = int(window.sum())
    window_sq = int(np.square(window).sum())
    return _confidence(stats.n, dot, window_sum, window_sq, stats)


def _window_sums(source: GrayscaleImage, width: int, height: int) -> Tuple[np.ndarray, np.ndarray]:
    sums, sq_sums = cv2.integral2(
        np.ascontiguousarray(source.data),
        sdepth=cv2.CV_64F,
        sqdepth=cv2.CV_64F,
    )
    # Integral images of 8-bit data are exact in float64 for any realistic screen size.
    sums = sums.astype(np.int64)
    sq_sums = sq_sums.astype(np.int64)

    out_h = source.height - height + 1
    out_w = source.width - width + 1

    def box(table: np.ndarray) -> np.ndarray:
        return (
            table[height : height + out_h, width : width + out_w]
            - table[:out_h, width : width + out_w]
            - table[height : height + out_h, :out_w]
            + table[:out_h, :out_w]
        )

    return box(sums), box(sq_sums)


def score_map(
    source: GrayscaleImage,
    template: GrayscaleImage,
    stats: TemplateStats,
) -> np.ndarray:
    """
    Score every valid template position in the source.

    The result has shape (source.height - template.height + 1,
    source.width - template.width + 1) and is indexed ``[y, x]``. Each entry
    equals ``score_window`` for the same position.
    """
    out_h = source.height - template.height + 1
    out_w = source.width - template.width + 1
    if out_h <= 0 or out_w <= 0:
        return np.zeros((max(out_h, 0), max(out_w, 0)), dtype=np.float64)

    confidence = np.zeros((out_h, out_w), dtype=np.float64)
    template_scaled = stats.scaled_sq_diff
    if template_scaled <= 0:
        return confidence

    window_sum, window_sq = _window_sums(source, template.width, template.height)

    # Brute-force dot product: one shifted multiply-accumulate per template pixel.
    source_values = source.data.astype(np.int64)
    dot = np.zeros((out_h, out_w), dtype=np.int64)
    for ty in range(template.height):
        row = template.data[ty]
        for tx in np.flatnonzero(row):
            dot += int(row[tx]) * source_values[ty : ty + out_h, tx : tx + out_w]

    n = stats.n
    window_scaled = n * window_sq - window_sum * window_sum
    valid = window_scaled > 0
    if not np.any(valid):
        return confidence

    numerator = (n * dot[valid] - window_sum[valid] * stats.total).astype(np.float64)
    denominator = np.sqrt(window_scaled[valid].astype(np.float64) * float(template_scaled))
    ncc = np.clip(numerator / denominator, -1.0, 1.0)
    confidence[valid] = (ncc + 1.0) / 2.0
    return confidence


__all__ = ["TemplateStats", "compute_stats", "score_map", "score_window"]
