"""Segment bright objects with a median filter, Otsu threshold and closing."""

from __future__ import annotations

import sys

import numpy as np
from scipy.ndimage import grey_dilation, grey_erosion, median_filter

from semvision.semcv import read_image, write_image

# Luma weights for channels in R, G, B order, as images are read.
_LUMA = np.array([0.299, 0.587, 0.114])
_EPS = float(np.finfo(np.float32).eps)
_KERNEL = np.array(
    [
        [0, 0, 1, 0, 0],
        [1, 1, 1, 1, 1],
        [1, 1, 1, 1, 1],
        [1, 1, 1, 1, 1],
        [0, 0, 1, 0, 0],
    ],
    dtype=bool,
)


def _otsu_threshold(gray):
    hist = np.bincount(gray.ravel(), minlength=256)[:256].astype(np.float64)
    p = hist / gray.size
    levels = np.arange(256)
    q1 = np.cumsum(p)
    m1 = np.cumsum(levels * p)
    mu = m1[-1]
    q2 = 1.0 - q1
    valid = (np.minimum(q1, q2) >= _EPS) & (np.maximum(q1, q2) <= 1.0 - _EPS)
    with np.errstate(divide="ignore", invalid="ignore"):
        mu1 = m1 / q1
        mu2 = (mu - m1) / q2
        sigma = q1 * q2 * (mu1 - mu2) ** 2
    sigma = np.where(valid, sigma, 0.0)
    best = int(np.argmax(sigma))
    return best if sigma[best] > 0 else 0


def _to_gray(image):
    arr = np.asarray(image)
    if arr.dtype != np.uint8:
        raise ValueError("detection needs an 8-bit image")
    if arr.size == 0:
        raise ValueError("detection needs a non-empty image")
    if arr.ndim == 2:
        return arr.copy()
    if arr.ndim == 3 and arr.shape[2] == 1:
        return arr[:, :, 0].copy()
    if arr.ndim == 3 and arr.shape[2] == 3:
        gray = arr.astype(np.float64) @ _LUMA
        return np.clip(np.rint(gray), 0, 255).astype(np.uint8)
    raise ValueError(f"unsupported image shape {arr.shape}")


def detect(image):
    """Return a 0/255 mask of the bright objects in an 8-bit grey or RGB image."""
    gray = median_filter(_to_gray(image), size=3, mode="nearest")
    threshold = _otsu_threshold(gray)
    binary = np.where(gray > threshold, 255, 0).astype(np.uint8)
    dilated = grey_dilation(binary, footprint=_KERNEL, mode="constant", cval=0)
    return grey_erosion(dilated, footprint=_KERNEL, mode="constant", cval=255)


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print("Usage: detector <input_image> <output_mask>", file=sys.stderr)
        return 1
    input_path, output_path = args
    try:
        image = read_image(input_path)
    except OSError:
        print(f"Failed to open image: {input_path}", file=sys.stderr)
        return 2
    try:
        mask = detect(image)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    try:
        write_image(output_path, mask)
    except OSError:
        print(f"Failed to write output to: {output_path}", file=sys.stderr)
        return 3
    print(f"Detection mask saved to: {output_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())