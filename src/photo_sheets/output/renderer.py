"""
Module: photo_sheets.output.renderer

Purpose:
    Render a RenderState to PDF using ReportLab.
    Each RenderedPage becomes one A4 PDF page holding the rasterised sheet.

Key Functions:
    - render_to_pdf(): Main rendering function
    - decode_images(): Decode every referenced photo up front

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - photo_sheets.output.raster: Page rasterisation

Used By:
    - photo_sheets.cli: Export command
    - photo_sheets.gui.main_window: Print / PDF button
"""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from PIL import Image
from reportlab.lib.pagesizes import A4, landscape, portrait
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from photo_sheets.layout.models import Photo
from photo_sheets.photos.source import open_image

from .raster import render_page

logger = logging.getLogger(__name__)

DEFAULT_DPI = 300


class ExportError(Exception):
    """Error preventing export."""
    pass


def decode_images(
    state,
    loader: Callable[[Photo], Image.Image] = open_image,
) -> Dict[str, Optional[Image.Image]]:
    """
    Decode every photo referenced by the render state.

    Failures are logged and mapped to None; those cells print as bar fill.
    """
    images: Dict[str, Optional[Image.Image]] = {}
    for page in state.pages:
        for rendered in page.cells:
            photo = rendered.photo
            if photo.id in images:
                continue
            try:
                images[photo.id] = loader(photo)
            except Exception as e:
                logger.warning(f"Could not decode {photo.name}: {e}")
                images[photo.id] = None
    return images


def render_to_pdf(
    state,
    output_path: Path,
    *,
    dpi: int = DEFAULT_DPI,
    loader: Callable[[Photo], Image.Image] = open_image,
) -> int:
    """
    Render pages to a PDF file.

    All images are decoded before the first page is drawn.

    Args:
        state: RenderState from SheetSession.render()
        output_path: Path to write PDF
        dpi: Rasterisation resolution
        loader: Photo decoder

    Returns:
        Number of pages written

    Raises:
        ExportError: If the state has nothing printable
        OSError: If the PDF cannot be written

    Example:
        >>> render_to_pdf(session.render(), Path("output/sheets.pdf"))
        3
    """
    if state.advisory:
        raise ExportError(state.advisory)
    if not state.pages:
        raise ExportError("No photos to print")

    images = decode_images(state, loader)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    pagesize = landscape(A4) if state.orientation == "landscape" else portrait(A4)
    page_width_pt, page_height_pt = pagesize

    c = canvas.Canvas(str(output_path), pagesize=pagesize)
    for page in state.pages:
        sheet = render_page(page, state, images, dpi=dpi)
        c.drawImage(_pil_to_reader(sheet), 0, 0, width=page_width_pt, height=page_height_pt)
        c.showPage()
    c.save()

    logger.info(f"Rendered {state.page_count} pages to {output_path}")
    return state.page_count


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """Convert PIL image to ReportLab ImageReader."""
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)
