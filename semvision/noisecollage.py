"""Target images at several grey levels and a collage of their noisy copies."""

from __future__ import annotations

import argparse
import sys

import numpy as np

from semvision.semcv import add_noise_gau, gen_tgtimg00, write_image

LEVELS = ((0, 127, 255), (20, 127, 235), (55, 127, 200), (90, 127, 165))
STDS = (3, 7, 15)
DEFAULT_SIMPLE_PATH = "../output/gray2.png"


def build_test_images(levels=LEVELS):
    """One target image per ``(background, square, circle)`` level triple."""
    return [gen_tgtimg00(*triple) for triple in levels]


def build_noise_collage(images, stds=STDS, rng=None):
    """Rows of noisy copies of ``images``, one row per noise deviation."""
    if rng is None:
        rng = np.random.default_rng()
    rows = [np.hstack([add_noise_gau(img, std, rng) for img in images]) for std in stds]
    return np.vstack(rows)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="noisecollage", description="Write a collage of noisy target images."
    )
    parser.add_argument("output", nargs="?", help="path of the noisy collage")
    parser.add_argument(
        "--simple",
        default=DEFAULT_SIMPLE_PATH,
        help="path of the noise-free collage (default: %(default)s)",
    )
    parser.add_argument("--seed", type=int, help="seed for the noise generator")
    args = parser.parse_args(argv)
    if args.output is None:
        print("noisecollage didnt receive a path to save img", file=sys.stderr)
        return 1

    images = build_test_images()
    try:
        write_image(args.simple, np.hstack(images))
    except OSError:
        print(f"Warning: could not save collage to {args.simple}", file=sys.stderr)

    collage = build_noise_collage(images, STDS, np.random.default_rng(args.seed))
    try:
        write_image(args.output, collage)
    except OSError:
        print(f"Error could not save collage to {args.output}", file=sys.stderr)
        return 1
    print(f"Saved collage to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())