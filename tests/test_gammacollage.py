import numpy as np

from semvision.gammacollage import DEFAULT_GAMMAS, build_gamma_collage, main
from semvision.semcv import create_greyscale_img, gamma_correction, read_image


def test_collage_stacks_one_ramp_per_gamma():
    base = create_greyscale_img()
    collage = build_gamma_collage()
    assert collage.shape == (base.shape[0] * len(DEFAULT_GAMMAS), base.shape[1])
    blocks = np.split(collage, len(DEFAULT_GAMMAS))
    for block, gamma in zip(blocks, DEFAULT_GAMMAS):
        np.testing.assert_array_equal(block, gamma_correction(base, gamma))


def test_first_block_is_plain_ramp():
    base = create_greyscale_img()
    collage = build_gamma_collage()
    np.testing.assert_array_equal(collage[: base.shape[0]], base)


def test_larger_gamma_gives_darker_rows():
    collage = build_gamma_collage((1.5, 2.5))
    top, bottom = np.split(collage, 2)
    assert (bottom <= top).all()
    assert bottom.sum() < top.sum()


def test_main_without_output(capsys):
    assert main([]) == 1
    assert capsys.readouterr().err


def test_main_writes_collage(tmp_path, capsys):
    out = tmp_path / "collage.png"
    assert main([str(out)]) == 0
    np.testing.assert_array_equal(read_image(out), build_gamma_collage())
    assert str(out) in capsys.readouterr().out


def test_main_reports_write_failure(tmp_path, capsys):
    assert main([str(tmp_path / "collage.unknownext")]) == 1
    assert "collage" in capsys.readouterr().err