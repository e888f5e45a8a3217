import numpy as np

from semvision.noisecollage import LEVELS, STDS, build_noise_collage, build_test_images, main
from semvision.semcv import gen_tgtimg00, read_image


def test_test_images_follow_levels():
    images = build_test_images()
    assert len(images) == len(LEVELS)
    for img, triple in zip(images, LEVELS):
        np.testing.assert_array_equal(img, gen_tgtimg00(*triple))


def test_collage_layout():
    images = build_test_images()
    collage = build_noise_collage(images, STDS, np.random.default_rng(0))
    h, w = images[0].shape
    assert collage.shape == (h * len(STDS), w * len(images))
    assert collage.dtype == np.uint8


def test_zero_noise_rows_repeat_the_images():
    images = build_test_images()
    collage = build_noise_collage(images, (0, 0), np.random.default_rng(0))
    row = np.hstack(images)
    np.testing.assert_array_equal(collage, np.vstack([row, row]))


def test_noise_grows_down_the_rows():
    images = build_test_images(((127, 127, 127),))
    collage = build_noise_collage(images, STDS, np.random.default_rng(2))
    spreads = [block.astype(float).std() for block in np.split(collage, len(STDS))]
    assert spreads == sorted(spreads)


def test_seeded_collages_match():
    images = build_test_images()
    a = build_noise_collage(images, STDS, np.random.default_rng(11))
    b = build_noise_collage(images, STDS, np.random.default_rng(11))
    np.testing.assert_array_equal(a, b)


def test_main_without_output(capsys):
    assert main([]) == 1
    assert capsys.readouterr().err


def test_main_writes_both_collages(tmp_path):
    out = tmp_path / "noisy.png"
    simple = tmp_path / "gray.png"
    assert main([str(out), "--simple", str(simple), "--seed", "4"]) == 0
    np.testing.assert_array_equal(read_image(simple), np.hstack(build_test_images()))
    expected = build_noise_collage(build_test_images(), STDS, np.random.default_rng(4))
    np.testing.assert_array_equal(read_image(out), expected)


def test_main_reports_write_failure(tmp_path, capsys):
    result = main([str(tmp_path / "noisy.unknownext"), "--simple", str(tmp_path / "g.png")])
    assert result == 1
    assert "could not save" in capsys.readouterr().err