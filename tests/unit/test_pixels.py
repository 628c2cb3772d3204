from __future__ import annotations

import numpy as np
import pytest

from nccmatch.imaging import PixelImage, to_grayscale


def test_to_grayscale_uses_fixed_point_luma() -> None:
    image = PixelImage.from_packed(
        4,
        1,
        [0xFF0000, 0x00FF00, 0x0000FF, 0x102030],
    )

    gray = to_grayscale(image)

    expected = [
        (77 * 255) >> 8,
        (151 * 255) >> 8,
        (28 * 255) >> 8,
        (77 * 0x10 + 151 * 0x20 + 28 * 0x30) >> 8,
    ]
    assert gray.data.dtype == np.uint8
    assert gray.data.shape == (1, 4)
    assert gray.data[0].tolist() == expected


def test_to_grayscale_ignores_alpha_in_signed_samples() -> None:
    # 0xFF808080 as a signed 32-bit int.
    opaque_grey = -0x7F7F80
    image = PixelImage.from_packed(2, 1, [opaque_grey, 0x808080])

    gray = to_grayscale(image)

    assert gray.data[0].tolist() == [128, 128]
    assert image.pixel(0, 0) == (128, 128, 128)


def test_grey_pixels_keep_their_intensity() -> None:
    values = np.arange(256, dtype=np.uint8).reshape(16, 16)

    gray = to_grayscale(PixelImage.from_gray(values))

    assert np.array_equal(gray.data, values)


def test_to_grayscale_rejects_short_buffers() -> None:
    image = PixelImage(width=3, height=3, pixels=np.zeros(8, dtype=np.uint32))

    with pytest.raises(ValueError, match="expected 9"):
        to_grayscale(image)


def test_from_bgr_round_trips_channel_order() -> None:
    bgr = np.zeros((2, 3, 3), dtype=np.uint8)
    bgr[1, 2] = (10, 20, 30)

    image = PixelImage.from_bgr(bgr)

    assert image.size == (3, 2)
    assert image.pixel(2, 1) == (30, 20, 10)
    assert np.array_equal(image.to_bgr(), bgr)


def test_crop_copies_sub_region() -> None:
    values = np.arange(48, dtype=np.uint8).reshape(6, 8)
    image = PixelImage.from_gray(values)

    cropped = image.crop(2, 1, 3, 4)

    assert cropped.size == (3, 4)
    assert np.array_equal(to_grayscale(cropped).data, values[1:5, 2:5])


@pytest.mark.parametrize("region", [(-1, 0, 2, 2), (7, 0, 2, 2), (0, 5, 2, 2), (0, 0, 0, 3)])
def test_crop_rejects_regions_outside_image(region) -> None:
    image = PixelImage.from_gray(np.zeros((6, 8), dtype=np.uint8))

    with pytest.raises(ValueError):
        image.crop(*region)
