import numpy as np
import pytest

from semvision.noisecollage import LEVELS, STDS, build_test_images
from semvision.semcv import gen_tgtimg00, read_image, write_image
from semvision.statistics import (
    HIST_HEIGHT,
    HIST_WIDTH,
    CollageStatisticsCalculator,
    DistributionParams,
    build_hist_collage,
    draw_img_hist,
    expected_statistics,
    get_regions_masks,
    main,
    print_statistics_table,
    save_statistics_table,
)


@pytest.fixture
def collage_path(tmp_path):
    collage = np.vstack([np.hstack(build_test_images())] * 3)
    path = tmp_path / "collage.png"
    write_image(path, collage)
    return path


def test_collage_part_matches_source_image(collage_path):
    calc = CollageStatisticsCalculator(collage_path, 3, 4)
    assert np.array_equal(calc.get_collage_part(1, 2), gen_tgtimg00(*LEVELS[2]))


def test_collage_part_outside_grid(collage_path):
    calc = CollageStatisticsCalculator(collage_path, 3, 4)
    with pytest.raises(IndexError):
        calc.get_collage_part(3, 0)


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        CollageStatisticsCalculator(tmp_path / "absent.png", 3, 4)


def test_masked_statistics_of_clean_collage(collage_path):
    calc = CollageStatisticsCalculator(collage_path, 3, 4)
    stats = calc.get_collage_masked_statistics(get_regions_masks())
    assert stats.means == expected_statistics().means
    assert all(std == 0.0 for std in stats.stds)


def test_empty_mask_gives_zero(collage_path):
    calc = CollageStatisticsCalculator(collage_path, 3, 4)
    stats = calc.get_collage_masked_statistics([np.zeros((256, 256), np.uint8)])
    assert stats.means == [0.0] * 12
    assert stats.stds == [0.0] * 12


def test_mask_shape_mismatch(collage_path):
    calc = CollageStatisticsCalculator(collage_path, 3, 4)
    with pytest.raises(ValueError):
        calc.get_collage_masked_statistics([np.ones((10, 10), np.uint8)])


def test_region_masks_partition_image():
    masks = get_regions_masks()
    assert len(masks) == 3
    coverage = np.stack(masks).astype(int).sum(axis=0)
    assert coverage.min() == 1
    assert coverage.max() == 1
    assert masks[0][0, 0] == 1
    assert masks[1][30, 30] == 1
    assert masks[2][128, 128] == 1


def test_expected_statistics_layout():
    exp = expected_statistics()
    assert len(exp.means) == len(exp.stds) == len(LEVELS) * len(STDS) * 3
    assert exp.means[:3] == [float(v) for v in LEVELS[0]]
    assert exp.stds[0] == STDS[0]
    assert exp.stds[-1] == STDS[-1]


def test_print_statistics_table(tmp_path):
    path = tmp_path / "table.md"
    expected = DistributionParams(means=[127.0], stds=[3.0])
    current = DistributionParams(means=[126.5], stds=[2.25])
    print_statistics_table(current, expected, path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines == [
        "| std_exp | mean_exp | std_cur | mean_cur |",
        "| --- | --- | --- | --- |",
        "| 3 | 127 | 2.25 | 126.5 |",
    ]
    print_statistics_table(current, expected, path)
    text = path.read_text(encoding="utf-8")
    assert text.count("| std_exp |") == 2


def test_print_statistics_table_length_mismatch(tmp_path):
    with pytest.raises(ValueError):
        print_statistics_table(
            DistributionParams([1.0, 2.0], [1.0, 2.0]),
            DistributionParams([1.0], [1.0]),
            tmp_path / "t.md",
        )


def test_draw_img_hist():
    background = (100, 100, 100)
    img = draw_img_hist(np.full((10, 10), 100, np.uint8), background)
    assert img.shape == (HIST_HEIGHT, HIST_WIDTH, 3)
    assert np.all(img[:240, :50] == background)
    assert np.all(img[125, 100] == 0)


def test_save_statistics_table(collage_path, tmp_path):
    md = tmp_path / "stats.md"
    current = save_statistics_table(collage_path, md)
    lines = md.read_text(encoding="utf-8").splitlines()
    assert len(lines) == len(current.means) + 2
    assert current.means == expected_statistics().means


def test_build_hist_collage(collage_path):
    calc = CollageStatisticsCalculator(collage_path, 3, 4)
    collage = build_hist_collage(calc)
    assert collage.shape == (3 * HIST_HEIGHT, 4 * HIST_WIDTH, 3)
    assert np.array_equal(collage[:HIST_HEIGHT, :HIST_WIDTH], draw_img_hist(calc.get_collage_part(0, 0), (100, 100, 100)))


def test_main_writes_histograms(collage_path, tmp_path):
    out = tmp_path / "hist.png"
    assert main([str(collage_path), "--output", str(out)]) == 0
    assert read_image(out).shape == (3 * HIST_HEIGHT, 4 * HIST_WIDTH, 3)


def test_main_errors(tmp_path):
    assert main([]) == 1
    assert main([str(tmp_path / "absent.png"), "--output", str(tmp_path / "o.png")]) == 1