"""Resizing and contrast helpers applied to photos before scanning."""

from __future__ import annotations

import numpy as np
from PIL import Image

TARGET_SIZE = 800
MIN_SIZE = 300
CONTRAST_ALPHA = 2.5
CONTRAST_BETA = 50


def _cast_like(values, dtype):
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        return np.clip(np.rint(values), info.min, info.max).astype(dtype)
    return values.astype(dtype)


def _resize(arr, width, height, resample):
    planes = arr[:, :, None] if arr.ndim == 2 else arr
    resized = [
        np.asarray(
            Image.fromarray(np.ascontiguousarray(plane, dtype=np.float32)).resize(
                (width, height), resample
            )
        )
        for plane in np.moveaxis(planes, 2, 0)
    ]
    out = np.stack(resized, axis=2)
    if arr.ndim == 2:
        out = out[:, :, 0]
    return _cast_like(out.astype(np.float64), arr.dtype)


class ImageProcessor:
    """Brings photos to a workable size and boosts their contrast."""

    def preprocess_image(self, input_image):
        """Shrink images larger than 800px, enlarge ones under 300px on both sides."""
        arr = np.asarray(input_image)
        if arr.size == 0:
            return np.empty((0, 0), dtype=arr.dtype)
        rows, cols = arr.shape[:2]
        if cols > TARGET_SIZE or rows > TARGET_SIZE:
            scale = TARGET_SIZE / max(cols, rows)
            resample = Image.Resampling.BOX
        elif cols < MIN_SIZE and rows < MIN_SIZE:
            scale = MIN_SIZE / min(cols, rows)
            resample = Image.Resampling.BICUBIC
        else:
            return arr.copy()
        width = int(np.rint(cols * scale))
        height = int(np.rint(rows * scale))
        if width < 1 or height < 1:
            raise ValueError(f"image of {cols}x{rows} scales to an empty size")
        return _resize(arr, width, height, resample)

    def enhance_contrast(self, input_image):
        """Map every value ``v`` to ``2.5 * v + 50``, saturated to the image's depth."""
        arr = np.asarray(input_image)
        if arr.size == 0:
            return np.empty((0, 0), dtype=arr.dtype)
        return _cast_like(arr.astype(np.float64) * CONTRAST_ALPHA + CONTRAST_BETA, arr.dtype)