"""Divisive hierarchical color quantization of PNG images, with error metrics and cluster visualisation."""

__version__ = "0.1.0"