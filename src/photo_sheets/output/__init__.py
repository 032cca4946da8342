"""
Module: photo_sheets.output

Purpose:
    Print output: page rasterisation and PDF export.
"""

from .raster import render_cell, render_page
from .renderer import render_to_pdf, decode_images, ExportError

__all__ = ["render_cell", "render_page", "render_to_pdf", "decode_images", "ExportError"]
