from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np


# Fixed-point luma weights (0.299, 0.587, 0.114) scaled by 256.
RED_WEIGHT = 77
GREEN_WEIGHT = 151
BLUE_WEIGHT = 28


@dataclass(frozen=True, slots=True, eq=False)
class PixelImage:
    """
    Immutable colour image stored as packed 0xAARRGGBB samples in row-major order.

    Only the red, green and blue bytes are interpreted; alpha is ignored.
    """

    width: int
    height: int
    pixels: np.ndarray

    @classmethod
    def from_packed(cls, width: int, height: int, samples: Iterable[int]) -> "PixelImage":
        """
        Build an image from packed integer samples.

        Signed 32-bit values (platform ARGB ints) are taken modulo 2**32.
        """
        if not isinstance(samples, np.ndarray):
            samples = np.fromiter(samples, dtype=np.int64)
        packed = (samples.astype(np.int64) & 0xFFFFFFFF).astype(np.uint32).ravel()
        packed.setflags(write=False)
        return cls(width=int(width), height=int(height), pixels=packed)

    @classmethod
    def from_bgr(cls, array: np.ndarray) -> "PixelImage":
        """
        Pack an H x W x 3 BGR array, as returned by ``cv2.imread``.
        """
        if array.ndim != 3 or array.shape[2] < 3:
            raise ValueError("array must be an H x W x 3 BGR image")
        channels = array[:, :, :3].astype(np.uint32)
        blue, green, red = channels[:, :, 0], channels[:, :, 1], channels[:, :, 2]
        packed = (red << 16) | (green << 8) | blue
        return cls.from_packed(array.shape[1], array.shape[0], packed)

    @classmethod
    def from_gray(cls, array: np.ndarray) -> "PixelImage":
        """
        Pack a single-channel intensity array as neutral grey pixels.
        """
        if array.ndim != 2:
            raise ValueError("array must be a single-channel image")
        values = np.clip(array, 0, 255).astype(np.uint32)
        packed = (values << 16) | (values << 8) | values
        return cls.from_packed(array.shape[1], array.shape[0], packed)

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} image")
        value = int(self.pixels[y * self.width + x])
        return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF

    def crop(self, x: int, y: int, width: int, height: int) -> "PixelImage":
        """
        Copy a sub-region, e.g. to capture a template from a prior screenshot.
        """
        if width <= 0 or height <= 0:
            raise ValueError("crop width and height must be positive")
        if x < 0 or y < 0 or x + width > self.width or y + height > self.height:
            raise ValueError(
                f"crop region ({x}, {y}, {width}x{height}) outside {self.width}x{self.height} image"
            )
        grid = self.pixels.reshape(self.height, self.width)
        return PixelImage.from_packed(width, height, grid[y : y + height, x : x + width])

    def to_bgr(self) -> np.ndarray:
        grid = self.pixels.reshape(self.height, self.width)
        return np.stack(
            [grid & 0xFF, (grid >> 8) & 0xFF, (grid >> 16) & 0xFF],
            axis=-1,
        ).astype(np.uint8)


@dataclass(frozen=True, slots=True, eq=False)
class GrayscaleImage:
    """
    Single-channel intensity image; ``data`` has shape (height, width).
    """

    width: int
    height: int
    data: np.ndarray


def to_grayscale(image: PixelImage) -> GrayscaleImage:
    """
    Reduce packed colour samples to 8-bit luma with integer weights.
    """
    expected = image.width * image.height
    packed = np.asarray(image.pixels).astype(np.int64).ravel()
    if packed.size != expected:
        raise ValueError(
            f"pixel buffer holds {packed.size} samples, expected {expected} "
            f"for a {image.width}x{image.height} image"
        )

    red = (packed >> 16) & 0xFF
    green = (packed >> 8) & 0xFF
    blue = packed & 0xFF
    gray = (RED_WEIGHT * red + GREEN_WEIGHT * green + BLUE_WEIGHT * blue) >> 8

    data = gray.astype(np.uint8).reshape(image.height, image.width)
    return GrayscaleImage(width=image.width, height=image.height, data=data)
