from __future__ import annotations

from pathlib import Path
from typing import Union

import cv2

from ..imaging.pixels import PixelImage

PathLike = Union[str, Path]


def load_pixel_image(path: PathLike) -> PixelImage:
    """
    Decode an image file into packed colour samples.
    """
    image = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if image is None:
        raise FileNotFoundError(f"Unable to load image at {path}")
    return PixelImage.from_bgr(image)
