import numpy as np

from semvision.checkfmt import check_file_format, main, report_formats
from semvision.semcv import strid_from_mat, write_image


def _sample():
    return np.arange(600, dtype=np.uint8).reshape(10, 20, 3)


def test_correctly_named_file_is_good(tmp_path):
    img = _sample()
    path = tmp_path / f"{strid_from_mat(img, 4)}.png"
    write_image(path, img)
    assert check_file_format(path) == "good"


def test_misnamed_file_is_bad(tmp_path):
    img = _sample()
    path = tmp_path / "wrong.png"
    write_image(path, img)
    assert check_file_format(path) == f"bad, should be {strid_from_mat(img, 4)} but found: wrong"


def test_unreadable_file(tmp_path):
    path = tmp_path / "junk.png"
    path.write_text("junk")
    assert check_file_format(path) == "Error: unsupported format"


def test_report_formats_follows_list(tmp_path):
    img = _sample()
    good = f"{strid_from_mat(img, 4)}.png"
    write_image(tmp_path / good, img)
    write_image(tmp_path / "other.png", img)
    lst = tmp_path / "files.lst"
    lst.write_text(f"{good}\nother.png\n")
    results = report_formats(lst)
    assert [p.name for p, _ in results] == [good, "other.png"]
    assert results[0][1] == "good"
    assert results[1][1].startswith("bad, should be ")


def test_main_without_arguments(capsys):
    assert main([]) == 1
    assert "lst" in capsys.readouterr().err


def test_main_prints_verdicts(tmp_path, capsys):
    img = _sample()
    name = f"{strid_from_mat(img, 4)}.png"
    write_image(tmp_path / name, img)
    lst = tmp_path / "files.lst"
    lst.write_text(f"{name}\n")
    assert main([str(lst)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == [f"{tmp_path / name}\tgood"]


def test_main_generate(tmp_path, capsys):
    target = tmp_path / "gen"
    assert main(["--generate", str(target)]) == 0
    out = capsys.readouterr().out
    verdict_lines = [line for line in out.splitlines() if "\t" in line]
    listed = [line for line in (target / "task01.lst").read_text().splitlines() if line]
    assert len(verdict_lines) == len(listed)
    u8 = strid_from_mat(np.zeros((100, 100, 3), dtype=np.uint8))
    s16 = strid_from_mat(np.zeros((100, 100, 3), dtype=np.int16))
    assert any(line.endswith(f"{u8}.png\tgood") for line in verdict_lines)
    assert any(f"{s16}.png\tbad" in line for line in verdict_lines)