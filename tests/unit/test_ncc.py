from __future__ import annotations

import numpy as np
import pytest

from nccmatch.imaging import GrayscaleImage
from nccmatch.matching.ncc import compute_stats, score_map, score_window


def _gray(array: np.ndarray) -> GrayscaleImage:
    data = np.asarray(array, dtype=np.uint8)
    return GrayscaleImage(width=data.shape[1], height=data.shape[0], data=data)


def test_compute_stats_matches_direct_formulas() -> None:
    template = _gray([[0, 10, 20], [30, 40, 50]])

    stats = compute_stats(template)

    values = template.data.astype(np.float64)
    assert stats.n == 6
    assert stats.total == 150
    assert stats.total_sq == int((values**2).sum())
    assert stats.mean == pytest.approx(25.0)
    assert stats.sum_sq_diff == pytest.approx(((values - values.mean()) ** 2).sum())


def test_flat_template_has_zero_spread() -> None:
    stats = compute_stats(_gray(np.full((4, 4), 123)))

    assert stats.sum_sq_diff == 0.0
    assert stats.scaled_sq_diff == 0


def test_score_window_is_one_for_exact_copy_and_zero_for_inverse() -> None:
    rng = np.random.default_rng(5)
    patch = rng.integers(0, 256, size=(6, 6), dtype=np.uint8)
    source = np.zeros((20, 20), dtype=np.uint8)
    source[4:10, 7:13] = patch
    source[12:18, 1:7] = 255 - patch

    source_gray = _gray(source)
    template = _gray(patch)
    stats = compute_stats(template)

    assert score_window(source_gray, template, stats, 7, 4) == pytest.approx(1.0)
    assert score_window(source_gray, template, stats, 1, 12) == pytest.approx(0.0, abs=1e-9)


def test_score_is_invariant_to_brightness_and_contrast() -> None:
    rng = np.random.default_rng(9)
    patch = rng.integers(0, 100, size=(5, 7))
    source = _gray(patch * 2 + 40)
    template = _gray(patch)

    confidence = score_window(source, template, compute_stats(template), 0, 0)

    assert confidence == pytest.approx(1.0)


def test_flat_window_scores_exactly_zero() -> None:
    source = np.full((10, 10), 80, dtype=np.uint8)
    source[0:3, 0:3] = [[1, 2, 3], [4, 5, 6], [7, 8, 9]]
    template = _gray([[1, 2], [3, 4]])
    stats = compute_stats(template)

    assert score_window(_gray(source), template, stats, 6, 6) == 0.0


def test_score_map_agrees_with_score_window() -> None:
    rng = np.random.default_rng(21)
    source = _gray(rng.integers(0, 256, size=(17, 23)))
    template = _gray(rng.integers(0, 256, size=(4, 6)))
    stats = compute_stats(template)

    scores = score_map(source, template, stats)

    assert scores.shape == (17 - 4 + 1, 23 - 6 + 1)
    for y, x in [(0, 0), (3, 11), (13, 17), (7, 2)]:
        assert scores[y, x] == pytest.approx(score_window(source, template, stats, x, y), abs=1e-12)
    assert np.all((scores >= 0.0) & (scores <= 1.0))


def test_score_map_handles_flat_regions_without_errors() -> None:
    source = np.full((12, 12), 40, dtype=np.uint8)
    source[6:, 6:] = np.arange(36, dtype=np.uint8).reshape(6, 6)
    template = _gray(source[6:9, 6:9])

    with np.errstate(all="raise"):
        scores = score_map(_gray(source), template, compute_stats(template))

    assert scores[0, 0] == 0.0
    assert scores[6, 6] == pytest.approx(1.0)


def test_score_map_is_empty_when_template_is_larger() -> None:
    source = _gray(np.zeros((5, 5)))
    template = _gray(np.arange(36).reshape(6, 6))

    assert score_map(source, template, compute_stats(template)).size == 0


def test_score_window_rejects_positions_outside_source() -> None:
    source = _gray(np.zeros((5, 5)))
    template = _gray(np.arange(4).reshape(2, 2))

    with pytest.raises(ValueError):
        score_window(source, template, compute_stats(template), 4, 0)
