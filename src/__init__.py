# src/__init__.py — v1
"""writingtools: AI writing operations on captured text, images, PDFs and video."""

from writingtools.version import __version__

__all__ = ["__version__"]
