"""Check that image files are named after their own identifier."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from semvision.semcv import create_test_images, get_list_of_file_paths, read_image, strid_from_mat


def check_file_format(file_path):
    """Return ``good``, a ``bad, ...`` verdict, or an error for unreadable files."""
    file_path = Path(file_path)
    try:
        img = read_image(file_path)
    except OSError:
        return "Error: unsupported format"
    expected = strid_from_mat(img, 4)
    actual = file_path.stem
    if actual == expected:
        return "good"
    return f"bad, should be {expected} but found: {actual}"


def report_formats(lst_path):
    """Check every file in a list file; returns ``(path, verdict)`` pairs."""
    return [(path, check_file_format(path)) for path in get_list_of_file_paths(lst_path)]


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="checkfmt", description="Check image files against their names."
    )
    parser.add_argument("lst", nargs="?", help="list file with image paths")
    parser.add_argument(
        "--generate", metavar="DIR", help="write test images to DIR first and check them"
    )
    args = parser.parse_args(argv)

    lst = args.lst
    if args.generate is not None:
        create_test_images(args.generate)
        if lst is None:
            lst = Path(args.generate) / "task01.lst"
    if lst is None:
        print("didnt receive a path to lst", file=sys.stderr)
        return 1

    try:
        results = report_formats(lst)
    except OSError as exc:
        print(f"Error: unable to open file {lst}: {exc}", file=sys.stderr)
        return 1
    for path, verdict in results:
        print(f"{path}\t{verdict}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())