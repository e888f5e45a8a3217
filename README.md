# semvision

A small image-processing toolkit built on NumPy, SciPy, Pillow and PyYAML.
It generates synthetic test images, applies gamma correction and
autocontrast, builds noise and histogram collages, detects bright blobs
and scores segmentation and detection results against ground truth.

Images are NumPy arrays of shape `(rows, cols)` or `(rows, cols, channels)`;
colour images keep the channel order the file stores (R, G, B for the
common formats).

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Library

The core helpers live in `semvision.semcv`:

- `read_image(path)` – loads an image with its stored depth and channel
  count; raises `OSError` for missing or unreadable files.
- `write_image(path, img)` – saves an image. Depths the format cannot hold
  are rounded and saturated to 8 bits (PNG keeps single-channel uint16;
  TIFF keeps single-channel uint16, int32 and float32).
- `strid_from_mat(img, n=4)` – an identifier such as `0100x0100.3.uint08`
  giving width, height (zero-padded to `n` digits), channel count and
  sample type.
- `create_greyscale_img()` – a 768×30 ramp of 256 grey stripes, each three
  pixels wide.
- `gamma_correction(img, gamma=1.0)` – lookup-table gamma correction of an
  8-bit image.
- `gen_tgtimg00(lev0, lev1, lev2)` – a 256×256 target: background, a 209 px
  square and a circle of radius 83 at the given grey levels.
- `add_noise_gau(img, std, rng=None)` – additive zero-mean Gaussian noise on
  a single-channel 8-bit image, clipped to 0–255.
- `autocontrast(img, q_black, q_white)` – stretches the range between two
  histogram quantiles to 0–255, channel by channel for 3-channel images.
- `autocontrast_rgb(img, q_black, q_white)` – the same with one range
  spanning the quantiles of all three channels.
- `get_list_of_file_paths(path_lst)` – reads a list file; each non-empty
  line is taken relative to the list's directory.
- `create_test_images(path, rng=None)` – writes random 100×100 3-channel
  images of every sample type as PNG, TIFF and JPEG, named after their
  identifiers, plus a `task01.lst` naming them; returns the paths written.

Other modules:

- `semvision.checkfmt` – `check_file_format(file_path)` returns `good`,
  `bad, should be ... but found: ...` or `Error: unsupported format`;
  `report_formats(lst_path)` checks every file of a list.
- `semvision.gammacollage` – `build_gamma_collage(gammas)` stacks the grey
  ramp corrected with each gamma (default 1.0, 1.8, 2.0, 2.2, 2.4, 2.6).
- `semvision.noisecollage` – `build_test_images(levels)` and
  `build_noise_collage(images, stds, rng)`; rows of noisy copies at
  deviations 3, 7 and 15 by default.
- `semvision.statistics` – `CollageStatisticsCalculator(file_path,
  cell_rows, cell_cols)` splits a collage into equal cells
  (`get_collage_part`) and measures masked mean and standard deviation
  (`get_collage_masked_statistics`, returning `DistributionParams`).
  `get_regions_masks`, `expected_statistics`, `print_statistics_table`,
  `save_statistics_table`, `draw_img_hist` and `build_hist_collage` build
  the markdown table and the histogram collage.
- `semvision.ellipses` – `Config`, `load_config`, `save_default_config` and
  `generate(cfg)`, which renders one blurred bright ellipse per grid cell on
  a noisy background and returns the image, its ground-truth mask and the
  seed used (a zero seed is taken from the clock).
- `semvision.detector` – `detect(image)` returns a 0/255 mask from a 3×3
  median filter, an Otsu threshold and a morphological closing.
- `semvision.metrics` – `safe_div`, `iou`, `pixelwise` (returns `Stats`),
  `objectwise` (returns `DetectionStats`; an 8-connected ground-truth object
  counts as found when its best IoU exceeds 0.5), `read_list` and
  `format_report`.
- `semvision.gradients` – `make_test_image()` draws two rows of three
  squares with centred circles; `gradient_collage(image)` lays out two
  opposite vertical gradients, their magnitude and a colour merge of the
  three in a 2×2 grid.
- `semvision.preprocess` – `ImageProcessor.preprocess_image` shrinks images
  larger than 800 px and enlarges ones under 300 px on both sides;
  `ImageProcessor.enhance_contrast` maps each value `v` to `2.5 * v + 50`,
  saturated to the image's depth.

## Commands

Each command prints its usage and exits with a non-zero status when
arguments are missing.

| Command | Purpose |
| --- | --- |
| `semvision-checkfmt [LIST] [--generate DIR]` | check that each listed image's file name matches its identifier; `--generate` first writes the test images to `DIR` and, without `LIST`, checks them |
| `semvision-gamma OUTPUT` | save a collage of the grey ramp at several gammas |
| `semvision-noise OUTPUT [--simple PATH] [--seed N]` | save a collage of noisy target images; the noise-free collage goes to `--simple` (default `../output/gray2.png`) |
| `semvision-stats COLLAGE [--output PATH] [--table MD]` | histogram collage of a 3×4 noise collage (default `../output/hist2.png`); `--table` appends a statistics table to `MD` |
| `semvision-contrast naive\|rgb INPUT Q_BLACK Q_WHITE OUTPUT` | apply quantile autocontrast, per channel (`naive`) or with shared limits (`rgb`, 3-channel images only) |
| `semvision-ellipses CONFIG [IMAGE GT [SEED]]` | write a default YAML config, or generate an ellipse image and its ground truth |
| `semvision-detect INPUT OUTPUT` | write a detection mask for an image |
| `semvision-metrics GT_LIST PRED_LIST REPORT` | write precision, recall and F1 for segmentation and detection |
| `semvision-gradients TEST_IMAGE RESULT_IMAGE` | write the test image and its gradient collage |

Example workflow for the blob detector:

```
semvision-ellipses config.yml
semvision-ellipses config.yml image.png gt.png 42
semvision-detect image.png pred.png
echo gt.png > gt.lst
echo pred.png > pred.lst
semvision-metrics gt.lst pred.lst report.md
```

The paths in the lists given to `semvision-metrics` are opened as written,
relative to the current directory.

## What it does not do

The package does not detect or decode QR codes and has no camera or live
video mode. `ImageProcessor` only resizes and boosts contrast; nothing in
the package displays images in a window.