"""Image-processing toolkit: synthetic test images, gamma and autocontrast, blob detection and metrics."""

__version__ = "0.1.0"