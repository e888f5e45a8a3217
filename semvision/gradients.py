"""A test pattern of squares and circles and a collage of its vertical gradients."""

from __future__ import annotations

import sys

import numpy as np
from scipy.ndimage import correlate

from semvision.semcv import write_image

SQUARE_SIZE = 127
RADIUS = 40
INTENSITIES = (235, 127, 0)

_KERNEL = np.array([[1, 2, 1], [0, 0, 0], [-1, -2, -1]], dtype=np.float32)
_DARK_CIRCLES = {(0, 0), (1, 1)}


def make_test_image():
    """Two rows of three squares, each holding a centred circle of another level."""
    height, width = SQUARE_SIZE * 2, SQUARE_SIZE * 3
    img = np.zeros((height, width), dtype=np.uint8)
    ys, xs = np.ogrid[:height, :width]
    for row in range(2):
        for col in range(3):
            square_value = INTENSITIES[col]
            circle_value = INTENSITIES[2] if (row, col) in _DARK_CIRCLES else INTENSITIES[row]
            top, left = row * SQUARE_SIZE, col * SQUARE_SIZE
            img[top:top + SQUARE_SIZE, left:left + SQUARE_SIZE] = square_value
            cy, cx = top + SQUARE_SIZE // 2, left + SQUARE_SIZE // 2
            img[(ys - cy) ** 2 + (xs - cx) ** 2 <= RADIUS * RADIUS] = circle_value
    return img


def _normalize_u8(values):
    low, high = float(values.min()), float(values.max())
    span = high - low
    if span > np.finfo(np.float64).eps:
        scaled = (values.astype(np.float64) - low) * (255.0 / span)
    else:
        scaled = np.zeros(values.shape)
    return np.clip(np.rint(scaled), 0, 255).astype(np.uint8)


def gradient_collage(image):
    """Two opposite vertical gradients, their magnitude and a colour merge, in a 2x2 grid.

    The colour quarter holds the magnitude in red, the second gradient in green
    and the first in blue.
    """
    arr = np.asarray(image)
    if arr.ndim != 2:
        raise ValueError("gradients need a single-channel image")
    values = arr.astype(np.float32)
    i1 = correlate(values, _KERNEL, mode="mirror")
    i2 = correlate(values, -_KERNEL, mode="mirror")
    i3 = np.hypot(i1, i2)
    v1, v2, v3 = (_normalize_u8(channel) for channel in (i1, i2, i3))

    def grey(v):
        return np.repeat(v[:, :, None], 3, axis=2)

    colour = np.stack([v3, v2, v1], axis=2)
    top = np.hstack([grey(v1), grey(v2)])
    bottom = np.hstack([grey(v3), colour])
    return np.vstack([top, bottom])


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("Usage: gradients <test_image_path> <result_image_path>", file=sys.stderr)
        return 1
    test_path, result_path = args
    image = make_test_image()
    try:
        write_image(test_path, image)
        write_image(result_path, gradient_collage(image))
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())