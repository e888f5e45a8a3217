"""Command that applies quantile autocontrast to an image file."""

from __future__ import annotations

import sys

import numpy as np

from semvision.semcv import autocontrast, autocontrast_rgb, read_image, write_image

USAGE = "Usage: contrast [naive|rgb] input.jpg q_black q_white output.jpg"

_MODES = {"naive": autocontrast, "rgb": autocontrast_rgb}


def _load_colour_image(path):
    try:
        img = read_image(path)
    except OSError as exc:
        raise OSError("Failed to load image") from exc
    if img.ndim == 3 and img.shape[2] == 2:
        img = img[:, :, 0]
    elif img.ndim == 3 and img.shape[2] == 4:
        img = img[:, :, :3]
    if img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)
    return img


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 5:
        print(USAGE, file=sys.stderr)
        return 1
    mode, input_path, black, white, output_path = args
    try:
        if mode not in _MODES:
            raise ValueError("Invalid mode")
        img = _load_colour_image(input_path)
        q_black = float(black)
        q_white = float(white)
        result = _MODES[mode](img, q_black, q_white)
        write_image(output_path, result)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())