"""Stack gamma-corrected grey ramps into one collage."""

from __future__ import annotations

import argparse
import sys

import numpy as np

from semvision.semcv import create_greyscale_img, gamma_correction, write_image

DEFAULT_GAMMAS = (1.0, 1.8, 2.0, 2.2, 2.4, 2.6)


def build_gamma_collage(gammas=DEFAULT_GAMMAS):
    """Return the grey ramp corrected with each gamma, stacked top to bottom."""
    base = create_greyscale_img()
    return np.vstack([gamma_correction(base, gamma) for gamma in gammas])


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="gammacollage", description="Write a collage of gamma-corrected ramps."
    )
    parser.add_argument("output", nargs="?", help="path of the image to write")
    args = parser.parse_args(argv)
    if args.output is None:
        print("didnt receive a path to save png", file=sys.stderr)
        return 1

    collage = build_gamma_collage()
    try:
        write_image(args.output, collage)
    except OSError:
        print(f"Error cant save collage to {args.output}", file=sys.stderr)
        return 1
    print(f"Successfully saved collage to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())