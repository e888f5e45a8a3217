"""Per-cell statistics and histograms of a collage of noisy target images."""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from itertools import pairwise

import numpy as np

from semvision.noisecollage import LEVELS, STDS
from semvision.semcv import gen_tgtimg00, read_image, write_image

GRID_ROWS = 3
GRID_COLS = 4
HIST_SIZE = 256
HIST_WIDTH = 256
HIST_HEIGHT = 250
HIST_COLORS = ((100, 100, 100), (150, 150, 150))
DEFAULT_MD_PATH = "../output/lab2_statistics.md"
DEFAULT_HIST_PATH = "../output/hist2.png"


@dataclass
class DistributionParams:
    """Means and standard deviations collected in the same order."""

    means: list[float] = field(default_factory=list)
    stds: list[float] = field(default_factory=list)


def _first_channel(img):
    arr = np.asarray(img)
    return arr[:, :, 0] if arr.ndim == 3 else arr


def _masked_mean_std(roi, mask):
    mask = np.asarray(mask)
    if mask.shape != roi.shape:
        raise ValueError(f"mask shape {mask.shape} does not match cell shape {roi.shape}")
    selected = roi[mask != 0].astype(np.float64)
    if selected.size == 0:
        return 0.0, 0.0
    return float(selected.mean()), float(selected.std())


class CollageStatisticsCalculator:
    """Splits a collage into a grid of equal cells and measures them."""

    def __init__(self, file_path, cell_rows=1, cell_cols=1):
        try:
            self.collage = read_image(file_path)
        except OSError as exc:
            raise OSError(f"File not found: {file_path}") from exc
        if cell_rows < 1 or cell_cols < 1:
            raise ValueError("the grid needs at least one row and one column")
        self.cell_rows = cell_rows
        self.cell_cols = cell_cols

    @property
    def cell_shape(self):
        """Height and width of one cell in pixels."""
        return self.collage.shape[0] // self.cell_rows, self.collage.shape[1] // self.cell_cols

    def get_collage_part(self, row, col):
        """The pixels of the cell at ``row``, ``col``."""
        if not (0 <= row < self.cell_rows and 0 <= col < self.cell_cols):
            raise IndexError(f"cell ({row}, {col}) is outside the grid")
        height, width = self.cell_shape
        return self.collage[row * height:(row + 1) * height, col * width:(col + 1) * width]

    def get_collage_masked_statistics(self, masks):
        """Mean and deviation of the first channel under every mask, cell by cell."""
        data = DistributionParams()
        for row in range(self.cell_rows):
            for col in range(self.cell_cols):
                roi = _first_channel(self.get_collage_part(row, col))
                for mask in masks:
                    mean, std = _masked_mean_std(roi, mask)
                    data.means.append(mean)
                    data.stds.append(std)
        return data


def print_statistics_table(current, expected, path):
    """Append a markdown table comparing expected and measured statistics to ``path``."""
    rows = zip(expected.stds, expected.means, current.stds, current.means, strict=True)
    lines = ["| std_exp | mean_exp | std_cur | mean_cur |", "| --- | --- | --- | --- |"]
    lines.extend("| " + " | ".join(f"{value:g}" for value in row) + " |" for row in rows)
    with open(path, "a", encoding="utf-8") as handle:
        handle.write("\n".join(lines) + "\n")


def get_regions_masks():
    """Masks of the background, the square and the circle of a target image."""
    return [gen_tgtimg00(1, 0, 0), gen_tgtimg00(0, 1, 0), gen_tgtimg00(0, 0, 1)]


def _draw_line(img, start, end, color, thickness=2):
    (x0, y0), (x1, y1) = start, end
    steps = max(abs(x1 - x0), abs(y1 - y0)) + 1
    xs = np.rint(np.linspace(x0, x1, steps)).astype(int)
    ys = np.rint(np.linspace(y0, y1, steps)).astype(int)
    radius = max(thickness // 2, 0)
    height, width = img.shape[:2]
    for dx in range(-radius, radius + 1):
        for dy in range(-radius, radius + 1):
            if dx * dx + dy * dy > radius * radius:
                continue
            px, py = xs + dx, ys + dy
            inside = (px >= 0) & (px < width) & (py >= 0) & (py < height)
            img[py[inside], px[inside]] = color


def draw_img_hist(source, background_color):
    """Draw the 256-bin histogram of the first channel as a black curve."""
    values = _first_channel(source)
    hist = np.histogram(values, bins=HIST_SIZE, range=(0, 256))[0].astype(np.float64)
    low, high = hist.min(), hist.max()
    if high > low:
        scaled = (hist - low) * (HIST_HEIGHT / (high - low))
    else:
        scaled = np.zeros_like(hist)
    img = np.empty((HIST_HEIGHT, HIST_WIDTH, 3), dtype=np.uint8)
    img[...] = tuple(background_color)[:3]
    bin_w = int(round(HIST_WIDTH / HIST_SIZE))
    ys = HIST_HEIGHT - np.rint(scaled).astype(int)
    points = [(bin_w * i, int(y)) for i, y in enumerate(ys)]
    for start, end in pairwise(points):
        _draw_line(img, start, end, (0, 0, 0), 2)
    return img


def expected_statistics():
    """The levels and deviations the noisy collage was generated with."""
    data = DistributionParams()
    for std in STDS:
        for triple in LEVELS:
            data.means.extend(float(level) for level in triple)
            data.stds.extend([float(std)] * len(triple))
    return data


def save_statistics_table(file_path, md_path=DEFAULT_MD_PATH):
    """Measure a 3x4 collage and append its table to ``md_path``; returns the measurements."""
    calculator = CollageStatisticsCalculator(file_path, GRID_ROWS, GRID_COLS)
    current = calculator.get_collage_masked_statistics(get_regions_masks())
    print_statistics_table(current, expected_statistics(), md_path)
    return current


def build_hist_collage(calculator):
    """Histograms of every cell laid out in the grid of the collage."""
    rows = [
        np.hstack(
            [
                draw_img_hist(
                    calculator.get_collage_part(row, col),
                    HIST_COLORS[(row * calculator.cell_cols + col) % 2],
                )
                for col in range(calculator.cell_cols)
            ]
        )
        for row in range(calculator.cell_rows)
    ]
    return np.vstack(rows)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="statistics", description="Draw histograms of a noisy collage."
    )
    parser.add_argument("input", nargs="?", help="path of the collage")
    parser.add_argument(
        "--output", default=DEFAULT_HIST_PATH, help="histogram collage (default: %(default)s)"
    )
    parser.add_argument("--table", metavar="MD", help="also append a statistics table to MD")
    args = parser.parse_args(argv)
    if args.input is None:
        print("statistics didnt receive a path to input file", file=sys.stderr)
        return 1

    try:
        calculator = CollageStatisticsCalculator(args.input, GRID_ROWS, GRID_COLS)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    try:
        write_image(args.output, build_hist_collage(calculator))
    except OSError:
        print(f"Error could not save collage to {args.output}", file=sys.stderr)
        return 1
    print(f"Saved collage to {args.output}")

    if args.table is not None:
        try:
            save_statistics_table(args.input, args.table)
        except OSError as exc:
            print(f"Cant create result file: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())