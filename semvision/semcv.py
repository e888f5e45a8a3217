"""Core image helpers: identifiers, synthetic test images, gamma, noise and autocontrast.

Images are numpy arrays of shape ``(rows, cols)`` or ``(rows, cols, channels)``.
Channels are kept in the order the file stores them.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

_DEPTH_NAMES = {
    np.dtype(np.uint8): "uint08",
    np.dtype(np.int8): "sint08",
    np.dtype(np.uint16): "uint16",
    np.dtype(np.int16): "sint16",
    np.dtype(np.int32): "sint32",
    np.dtype(np.float32): "real32",
    np.dtype(np.float64): "real64",
}

# Single-channel depths other than uint8 that each container can hold as they are.
_NATIVE_DEPTHS = {
    ".png": {np.dtype(np.uint16)},
    ".tif": {np.dtype(np.uint16), np.dtype(np.int32), np.dtype(np.float32)},
    ".tiff": {np.dtype(np.uint16), np.dtype(np.int32), np.dtype(np.float32)},
}

_JPEG_SUFFIXES = {".jpg", ".jpeg", ".jpe"}
_DIRECT_MODES = {"L", "LA", "RGB", "RGBA", "I", "F"}

_TEST_DEPTHS = (np.uint8, np.int8, np.uint16, np.int16, np.int32, np.float32, np.float64)
_TEST_FORMATS = ("png", "tiff", "jpg")
_TEST_IMAGE_DIM = 100
_TEST_CHANNELS = 3


def read_image(path):
    """Load an image with its stored depth and channel count.

    Raises OSError when the file is missing or is not a readable image.
    """
    try:
        with Image.open(path) as im:
            im.load()
            mode = im.mode
            file_format = im.format
            if mode == "1":
                im = im.convert("L")
            elif mode == "P":
                im = im.convert("RGBA" if "transparency" in im.info else "RGB")
            elif mode not in _DIRECT_MODES and not mode.startswith("I;16"):
                im = im.convert("RGB")
            arr = np.array(im)
    except (OSError, ValueError) as exc:
        raise OSError(f"cannot read image: {path}") from exc
    if mode.startswith("I;16") or (file_format == "PNG" and mode == "I"):
        arr = arr.astype(np.uint16)
    return arr


def _saturate_u8(arr):
    values = np.nan_to_num(arr.astype(np.float64))
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def write_image(path, img):
    """Save an image; depths the format cannot hold are saturated to uint8.

    Raises OSError when the image cannot be written.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    arr = np.asarray(img)
    if arr.ndim == 3 and arr.shape[2] == 1:
        arr = arr[:, :, 0]
    if arr.ndim not in (2, 3) or (arr.ndim == 3 and arr.shape[2] not in (2, 3, 4)):
        raise ValueError(f"unsupported image shape {arr.shape}")
    native = arr.ndim == 2 and arr.dtype in _NATIVE_DEPTHS.get(suffix, set())
    if arr.dtype != np.uint8 and not native:
        arr = _saturate_u8(arr)
    if suffix in _JPEG_SUFFIXES and arr.ndim == 3:
        arr = arr[:, :, 0] if arr.shape[2] == 2 else arr[:, :, :3]
    try:
        Image.fromarray(np.ascontiguousarray(arr)).save(path)
    except (OSError, ValueError, KeyError) as exc:
        raise OSError(f"cannot write image to {path}") from exc


def strid_from_mat(img, n=4):
    """Describe an image as ``WWWWxHHHH.C.depth`` with sizes zero-padded to ``n``."""
    arr = np.asarray(img)
    height, width = arr.shape[:2]
    channels = arr.shape[2] if arr.ndim == 3 else 1
    depth = _DEPTH_NAMES.get(arr.dtype, "unknown")
    return f"{width:0{n}d}x{height:0{n}d}.{channels}.{depth}"


def create_greyscale_img():
    """A 768x30 ramp of 256 grey stripes, each three pixels wide."""
    row = np.repeat(np.arange(256, dtype=np.uint8), 3)
    return np.tile(row, (30, 1))


def gamma_correction(img, gamma=1.0):
    """Apply ``255 * (v / 255) ** gamma`` to every value of an 8-bit image."""
    arr = np.asarray(img)
    if arr.dtype != np.uint8:
        raise ValueError("gamma correction needs an 8-bit image")
    with np.errstate(divide="ignore", over="ignore"):
        curve = np.power(np.arange(256) / 255.0, gamma) * 255.0
    lut = np.clip(np.rint(np.nan_to_num(curve, posinf=255.0)), 0, 255).astype(np.uint8)
    return lut[arr]


def get_list_of_file_paths(path_lst):
    """Read a list file; non-empty lines are taken relative to its directory."""
    path_lst = Path(path_lst)
    base = path_lst.parent
    with path_lst.open(encoding="utf-8") as handle:
        return [base / line for line in (raw.rstrip("\n") for raw in handle) if line]


def gen_tgtimg00(lev0, lev1, lev2):
    """A 256x256 image: background ``lev0``, a 209px square ``lev1``, a circle ``lev2``."""
    img_size, square_size, radius = 256, 209, 83
    levels = [int(np.clip(level, 0, 255)) for level in (lev0, lev1, lev2)]
    img = np.full((img_size, img_size), levels[0], dtype=np.uint8)
    offset = (img_size - square_size) // 2
    img[offset:offset + square_size + 1, offset:offset + square_size + 1] = levels[1]
    centre = img_size // 2
    ys, xs = np.ogrid[:img_size, :img_size]
    img[(ys - centre) ** 2 + (xs - centre) ** 2 <= radius * radius] = levels[2]
    return img


def add_noise_gau(img, std, rng=None):
    """Add zero-mean Gaussian noise to a single-channel 8-bit image."""
    arr = np.asarray(img)
    if arr.dtype != np.uint8 or arr.ndim != 2:
        raise ValueError("noise can only be added to a single-channel 8-bit image")
    if rng is None:
        rng = np.random.default_rng()
    noise = rng.normal(0.0, std, arr.shape).astype(np.float32)
    noisy = np.clip(arr.astype(np.float32) + noise, 0.0, 255.0)
    return np.rint(noisy).astype(np.uint8)


def _random_image(rng, dtype):
    shape = (_TEST_IMAGE_DIM, _TEST_IMAGE_DIM, _TEST_CHANNELS)
    dtype = np.dtype(dtype)
    if dtype.kind == "f":
        return rng.uniform(0.0, 255.0, shape).astype(dtype)
    high = min(255, int(np.iinfo(dtype).max) + 1)
    return rng.integers(0, high, shape, dtype=dtype)


def create_test_images(path, rng=None):
    """Write random 3-channel images of every depth in png, tiff and jpg.

    Names each file after its identifier, writes ``task01.lst`` listing them
    and returns the paths written.
    """
    if rng is None:
        rng = np.random.default_rng()
    out = Path(path)
    out.mkdir(parents=True, exist_ok=True)
    names = []
    for depth in _TEST_DEPTHS:
        img = _random_image(rng, depth)
        for fmt in _TEST_FORMATS:
            name = f"{strid_from_mat(img)}.{fmt}"
            write_image(out / name, img)
            print(f"Saved: {out / name}")
            names.append(name)
    (out / "task01.lst").write_text("".join(f"{name}\n" for name in names), encoding="utf-8")
    return [out / name for name in names]


def _first_reaching(cumulative, threshold, default):
    hits = np.flatnonzero(cumulative >= threshold)
    return int(hits[0]) if hits.size else default


def _quantile_bounds(channel, q_black, q_white):
    hist = np.bincount(channel.ravel(), minlength=256)[:256]
    cumulative = np.cumsum(hist, dtype=np.float64)
    total = channel.size
    v_min = _first_reaching(cumulative, q_black * total, 0)
    v_max = _first_reaching(cumulative, q_white * total, 255)
    return v_min, v_max


def _stretch(img, v_min, v_max):
    scale = 255.0 / (v_max - v_min)
    values = img.astype(np.float64) * scale - v_min * scale
    return np.clip(np.rint(values), 0, 255).astype(np.uint8)


def autocontrast(img, q_black, q_white):
    """Stretch the range between two histogram quantiles to 0..255, per channel."""
    arr = np.asarray(img)
    if arr.dtype != np.uint8:
        raise ValueError("autocontrast needs an 8-bit image")
    if arr.ndim == 3 and arr.shape[2] == 3:
        return np.stack(
            [autocontrast(arr[:, :, c], q_black, q_white) for c in range(3)], axis=2
        )
    if arr.ndim != 2:
        raise ValueError("autocontrast needs a 1- or 3-channel image")
    v_min, v_max = _quantile_bounds(arr, q_black, q_white)
    if v_min >= v_max:
        return arr.copy()
    return _stretch(arr, v_min, v_max)


def autocontrast_rgb(img, q_black, q_white):
    """Stretch all three channels with one range spanning their quantiles."""
    arr = np.asarray(img)
    if arr.size == 0 or arr.dtype != np.uint8 or arr.ndim != 3 or arr.shape[2] != 3:
        raise ValueError("autocontrast_rgb needs a non-empty 3-channel 8-bit image")
    bounds = [_quantile_bounds(arr[:, :, c], q_black, q_white) for c in range(3)]
    global_min = min(255, *(low for low, _ in bounds))
    global_max = max(0, *(high for _, high in bounds))
    if global_min >= global_max:
        return arr.copy()
    return _stretch(arr, global_min, global_max)