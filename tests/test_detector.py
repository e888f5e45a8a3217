import numpy as np
import pytest

from semvision.detector import detect, main
from semvision.semcv import read_image, write_image


def _disk_image(size=64, radius=15, bg=20, fg=200):
    ys, xs = np.ogrid[:size, :size]
    disk = (ys - size // 2) ** 2 + (xs - size // 2) ** 2 <= radius * radius
    img = np.full((size, size), bg, np.uint8)
    img[disk] = fg
    return img, disk


def test_detects_disk():
    img, disk = _disk_image()
    mask = detect(img)
    assert set(np.unique(mask).tolist()) <= {0, 255}
    assert mask[32, 32] == 255
    assert mask[0, 0] == 0
    assert np.mean((mask > 0) == disk) > 0.99


def test_colour_and_grey_agree():
    img, _ = _disk_image()
    assert np.array_equal(detect(np.stack([img] * 3, axis=2)), detect(img))


def test_small_hole_is_filled():
    img, _ = _disk_image()
    img[32, 32] = 20
    assert detect(img)[32, 32] == 255


def test_float_image_rejected():
    with pytest.raises(ValueError):
        detect(np.zeros((8, 8), np.float32))


def test_four_channels_rejected():
    with pytest.raises(ValueError):
        detect(np.zeros((8, 8, 4), np.uint8))


def test_main_writes_mask(tmp_path):
    img, _ = _disk_image()
    src, out = tmp_path / "in.png", tmp_path / "mask.png"
    write_image(src, img)
    assert main([str(src), str(out)]) == 0
    assert np.array_equal(read_image(out), detect(img))


def test_main_errors(tmp_path):
    assert main([str(tmp_path / "only.png")]) == 1
    assert main([str(tmp_path / "absent.png"), str(tmp_path / "out.png")]) == 2