[build-system]
requires = ["hatchling>=1.18"]
build-backend = "hatchling.build"

[project]
name = "semvision"
version = "0.1.0"
description = "Small image-processing toolkit: test-image generators, gamma and autocontrast, noise collages, blob detection and segmentation metrics"
requires-python = ">=3.10"
keywords = [
    "image-processing",
    "computer-vision",
    "autocontrast",
    "gamma-correction",
    "segmentation",
    "metrics",
    "synthetic-images",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "numpy>=1.23",
    "scipy>=1.9",
    "pillow>=9.2",
    "pyyaml>=6.0",
]

[project.optional-dependencies]
test = [
    "pytest>=7.0",
]

[project.scripts]
semvision-checkfmt = "semvision.checkfmt:main"
semvision-gamma = "semvision.gammacollage:main"
semvision-noise = "semvision.noisecollage:main"
semvision-stats = "semvision.statistics:main"
semvision-contrast = "semvision.contrast_cli:main"
semvision-ellipses = "semvision.ellipses:main"
semvision-detect = "semvision.detector:main"
semvision-metrics = "semvision.metrics:main"
semvision-gradients = "semvision.gradients:main"

[tool.hatch.build.targets.wheel]
packages = ["semvision"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
