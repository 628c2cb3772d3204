from __future__ import annotations

import argparse
import logging
import statistics
import time
from pathlib import Path
from typing import List, Tuple
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

import cv2
import numpy as np

from nccmatch import MatchResult, PixelImage, TemplateMatcher
from nccmatch.io import load_pixel_image


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Search captured screens for a template and report matches and latency.")
    parser.add_argument(
        "--screen",
        type=Path,
        nargs="+",
        required=True,
        help="One or more screenshot files to search.",
    )
    parser.add_argument(
        "--template",
        type=Path,
        required=True,
        help="Template image to look for.",
    )
    parser.add_argument(
        "--region",
        type=int,
        nargs=4,
        metavar=("X", "Y", "WIDTH", "HEIGHT"),
        default=None,
        help="Crop the template file to this region before searching.",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        default=0.8,
        help="Minimum confidence for a position to count as a match.",
    )
    parser.add_argument(
        "--max-matches",
        type=int,
        default=10,
        help="Maximum number of non-overlapping matches kept per screen.",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory where annotated screens are written. Nothing is written when omitted.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging from the matcher.",
    )
    return parser.parse_args()


def render_matches(screen: PixelImage, results: List[MatchResult], template_size: Tuple[int, int]) -> np.ndarray:
    """
    Draw every retained match box, best match in green.
    """
    annotated = np.ascontiguousarray(screen.to_bgr())
    width, height = template_size

    for rank, result in enumerate(results):
        color = (0, 255, 0) if rank == 0 else (0, 165, 255)
        cv2.rectangle(annotated, (result.x, result.y), (result.x + width - 1, result.y + height - 1), color, 2)
        cv2.putText(
            annotated,
            f"{result.confidence:.3f}",
            (result.x, max(12, result.y - 4)),
            cv2.FONT_HERSHEY_SIMPLEX,
            0.45,
            color,
            1,
            lineType=cv2.LINE_AA,
        )
    return annotated


def run() -> None:
    args = parse_arguments()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    template = load_pixel_image(args.template)
    if args.region is not None:
        template = template.crop(*args.region)
    matcher = TemplateMatcher(threshold=args.threshold, max_matches=args.max_matches)

    if args.output_dir is not None:
        args.output_dir.mkdir(parents=True, exist_ok=True)

    durations_ms: List[float] = []
    found = 0
    for screen_path in args.screen:
        screen = load_pixel_image(screen_path)

        start = time.perf_counter()
        results = matcher.match(screen, template)
        duration_ms = (time.perf_counter() - start) * 1000.0
        durations_ms.append(duration_ms)

        if results:
            found += 1
            best = results[0]
            cx, cy = best.center(template.width, template.height)
            print(
                f"{screen_path.name:35s} | "
                f"best=({best.x:4d},{best.y:4d}) center=({cx:4d},{cy:4d}) | "
                f"conf={best.confidence:.4f} | "
                f"matches={len(results):2d} | "
                f"time={duration_ms:8.2f}ms"
            )
        else:
            print(f"{screen_path.name:35s} | no match | time={duration_ms:8.2f}ms")

        if args.output_dir is not None:
            output_path = args.output_dir / f"{screen_path.stem}_matches.png"
            cv2.imwrite(str(output_path), render_matches(screen, results, template.size))

    print("\nSummary")
    print("-" * 72)
    print(f"Template         : {args.template.name} ({template.width}x{template.height})")
    print(f"Screens searched : {len(args.screen)} (found in {found})")
    print(f"Latency (ms)     : mean={statistics.fmean(durations_ms):.2f}, median={statistics.median(durations_ms):.2f}, min={min(durations_ms):.2f}, max={max(durations_ms):.2f}")


if __name__ == "__main__":
    run()
