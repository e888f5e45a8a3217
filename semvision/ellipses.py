"""Synthetic scenes of blurred bright ellipses on a noisy background, with ground truth."""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass, replace
from pathlib import Path
from typing import NamedTuple

import numpy as np
import yaml
from scipy.ndimage import gaussian_filter

from semvision.semcv import write_image

_SUPERSAMPLE = 4
_SEED_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class Config:
    """Layout, object and noise parameters of a generated scene."""

    rows: int = 4
    cols: int = 4
    cell: int = 256
    margin: int = 32
    bg: int = 40
    noise_mean: int = 0
    noise_std: int = 8
    axes_rng: tuple[int, int] = (30, 80)
    blur_rng: tuple[int, int] = (1, 4)
    brightness: tuple[int, int] = (180, 255)
    seed: int = 0


class Scene(NamedTuple):
    image: np.ndarray
    ground_truth: np.ndarray
    seed: int


def _to_mapping(cfg):
    return {
        "rows": cfg.rows,
        "cols": cfg.cols,
        "cell": cfg.cell,
        "margin": cfg.margin,
        "bg": cfg.bg,
        "noise_mean": cfg.noise_mean,
        "noise_std": cfg.noise_std,
        "axes_min": cfg.axes_rng[0],
        "axes_max": cfg.axes_rng[1],
        "blur_min": cfg.blur_rng[0],
        "blur_max": cfg.blur_rng[1],
        "brightness_min": cfg.brightness[0],
        "brightness_max": cfg.brightness[1],
        "seed": cfg.seed,
    }


def save_default_config(path):
    """Write the default configuration as YAML."""
    Path(path).write_text(yaml.safe_dump(_to_mapping(Config()), sort_keys=False), encoding="utf-8")
    print(f"Default config written to: {path}")


def load_config(path):
    """Read a YAML configuration; keys that are absent read as zero."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise OSError(f"Failed to open config file: {path}") from exc
    if text.startswith("%YAML:"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config file is not a mapping: {path}")

    def get(key):
        return int(data.get(key, 0))

    return Config(
        rows=get("rows"),
        cols=get("cols"),
        cell=get("cell"),
        margin=get("margin"),
        bg=get("bg"),
        noise_mean=get("noise_mean"),
        noise_std=get("noise_std"),
        axes_rng=(get("axes_min"), get("axes_max")),
        blur_rng=(get("blur_min"), get("blur_max")),
        brightness=(get("brightness_min"), get("brightness_max")),
        seed=get("seed") & _SEED_MASK,
    )


def _uniform_int(rng, low, high):
    if low == high:
        return low
    low, high = sorted((low, high))
    return int(rng.integers(low, high))


def _filled_ellipse(shape, center, axes, angle):
    height, width = shape
    out = np.zeros(shape, dtype=np.uint8)
    cx, cy = center
    a, b = (max(float(axis), 0.5) for axis in axes)
    reach = int(np.ceil(max(a, b))) + 1
    x0, x1 = max(cx - reach, 0), min(cx + reach + 1, width)
    y0, y1 = max(cy - reach, 0), min(cy + reach + 1, height)
    if x0 >= x1 or y0 >= y1:
        return out
    offsets = (np.arange(_SUPERSAMPLE) + 0.5) / _SUPERSAMPLE - 0.5
    ys = np.arange(y0, y1)[:, None, None, None] + offsets[None, None, :, None]
    xs = np.arange(x0, x1)[None, :, None, None] + offsets[None, None, None, :]
    dx, dy = xs - cx, ys - cy
    theta = np.deg2rad(angle)
    cos, sin = np.cos(theta), np.sin(theta)
    u = dx * cos + dy * sin
    v = -dx * sin + dy * cos
    coverage = ((u / a) ** 2 + (v / b) ** 2 <= 1.0).mean(axis=(2, 3))
    out[y0:y1, x0:x1] = np.rint(coverage * 255).astype(np.uint8)
    return out


def _gaussian_blur(img, sigma):
    blurred = gaussian_filter(img.astype(np.float64), sigma, mode="mirror", truncate=3.0)
    return np.clip(np.rint(blurred), 0, 255).astype(np.uint8)


def generate(cfg):
    """Render one ellipse per grid cell; a zero seed is replaced by one from the clock."""
    seed = cfg.seed & _SEED_MASK or (time.time_ns() & _SEED_MASK) or 1
    rng = np.random.default_rng(seed)
    height, width = cfg.rows * cfg.cell, cfg.cols * cfg.cell
    img = np.full((height, width), int(np.clip(cfg.bg, 0, 255)), dtype=np.uint8)
    gt = np.zeros((height, width), dtype=np.uint8)
    half = cfg.cell // 2
    reach = half - cfg.margin

    for row in range(cfg.rows):
        for col in range(cfg.cols):
            ax1 = _uniform_int(rng, *cfg.axes_rng)
            ax2 = _uniform_int(rng, *cfg.axes_rng)
            angle = float(rng.uniform(0.0, 180.0))
            dx = _uniform_int(rng, -reach, reach)
            dy = _uniform_int(rng, -reach, reach)
            center = (col * cfg.cell + half + dx, row * cfg.cell + half + dy)
            low, high = cfg.brightness
            brightness = low + _uniform_int(rng, 0, high - low)

            temp = _filled_ellipse((height, width), center, (ax1, ax2), angle)
            sigma = _uniform_int(rng, *cfg.blur_rng)
            if sigma > 0:
                temp = _gaussian_blur(temp, sigma)

            img[temp != 0] = int(np.clip(brightness, 0, 255))
            gt |= temp

    noise = np.clip(np.rint(rng.normal(cfg.noise_mean, cfg.noise_std, img.shape)), -128, 127)
    final = np.clip(img.astype(np.int16) + noise.astype(np.int16), 0, 255).astype(np.uint8)
    return Scene(final, gt, seed)


def main(argv=None):
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        print("Usage: ellipses <config.yml> [<out_image> <out_gt> [seed]]", file=sys.stderr)
        print("If only <config.yml> is given, saves default config file.", file=sys.stderr)
        return 1

    cfg_path = args[0]
    if len(args) == 1:
        try:
            save_default_config(cfg_path)
        except OSError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        return 0

    if len(args) < 3:
        print("Error: missing output paths for image and ground truth.", file=sys.stderr)
        return 2

    img_path, gt_path = args[1], args[2]
    try:
        seed_arg = int(args[3]) & _SEED_MASK if len(args) >= 4 else 0
    except ValueError:
        print(f"Error: invalid seed: {args[3]}", file=sys.stderr)
        return 2

    try:
        cfg = load_config(cfg_path)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 3
    if seed_arg:
        cfg = replace(cfg, seed=seed_arg)

    scene = generate(cfg)
    try:
        write_image(img_path, scene.image)
        write_image(gt_path, scene.ground_truth)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 3

    print(f"Generated image: {img_path}")
    print(f"Ground truth:   {gt_path}")
    print(f"Seed:           {scene.seed}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())