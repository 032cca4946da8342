"""
Module: photo_sheets.output.raster

Purpose:
    Rasterise render state into page images with Pillow. Paints each cell
    the way the preview does: bar fill, optional blurred backdrop, the
    fitted photo with its crop transform and filters, then separators.

Key Functions:
    - render_cell(): One cell as an RGB image
    - render_page(): One page as an RGB image

Dependencies:
    - PIL: Drawing and affine resampling
    - photo_sheets.crops.transform: fitted_rect, CellTransform
    - photo_sheets.filters: apply_filters

Used By:
    - photo_sheets.output.renderer: PDF export
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Tuple

from PIL import Image, ImageDraw, ImageFilter

from photo_sheets.crops.transform import (
    BACKDROP_BLUR_PX,
    BACKDROP_OPACITY,
    BACKDROP_SCALE,
    CellTransform,
    fitted_rect,
)
from photo_sheets.filters import FilterValues, apply_filters
from photo_sheets.layout.geometry import cell_rect

logger = logging.getLogger(__name__)

CSS_DPI = 96

PAGE_COLOR = (255, 255, 255)
SEPARATOR_COLOR = (0, 0, 0)
BAR_COLORS = {
    "white": (255, 255, 255),
    "black": (24, 24, 27),
    "blur": (30, 41, 59),
}
# Dark veil over the blurred backdrop (20% slate-900)
BACKDROP_VEIL = (15, 23, 42, 51)


def inverse_affine(transform: CellTransform, box_width: float, box_height: float) -> Tuple[float, ...]:
    """
    Coefficients for Image.transform(AFFINE) mapping output pixels back to
    the untransformed element box.

    The forward transform pivots on the box centre.
    """
    a, b, c, d, e, f = transform.matrix(box_width, box_height)
    det = a * d - b * c
    if det == 0:
        raise ValueError("Transform is not invertible")
    cx, cy = box_width / 2.0, box_height / 2.0
    ia, ib = d / det, -c / det
    id_, ie = -b / det, a / det
    ic = cx - ia * (cx + e) - ib * (cy + f)
    if_ = cy - id_ * (cx + e) - ie * (cy + f)
    return (ia, ib, ic, id_, ie, if_)


def _cover_backdrop(image: Image.Image, size: Tuple[int, int], px_scale: float) -> Image.Image:
    width, height = size
    left, top, fit_w, fit_h = fitted_rect(image.width, image.height, width, height, "cover")
    fit_w *= BACKDROP_SCALE
    fit_h *= BACKDROP_SCALE
    left = (width - fit_w) / 2.0
    top = (height - fit_h) / 2.0
    layer = Image.new("RGB", size, BAR_COLORS["blur"])
    resized = image.convert("RGB").resize((max(1, round(fit_w)), max(1, round(fit_h))), Image.Resampling.BILINEAR)
    layer.paste(resized, (round(left), round(top)))
    return layer.filter(ImageFilter.GaussianBlur(radius=BACKDROP_BLUR_PX * px_scale))


def render_cell(
    image: Optional[Image.Image],
    transform: CellTransform,
    size: Tuple[int, int],
    *,
    bar_fill: str = "white",
    filters: Optional[FilterValues] = None,
    px_scale: float = 1.0,
) -> Image.Image:
    """
    Paint one photo into a cell.

    Args:
        image: Decoded photo, or None if decoding failed
        transform: Composed crop transform
        size: Cell size in output pixels
        bar_fill: Colour or "blur" for letterbox bars
        filters: Colour filters for the photo
        px_scale: Output pixels per CSS pixel (scales blur radii)

    Returns:
        RGB image of the given size
    """
    width, height = max(1, int(size[0])), max(1, int(size[1]))
    base = Image.new("RGB", (width, height), BAR_COLORS.get(bar_fill, BAR_COLORS["white"]))
    if image is None:
        return base

    if transform.fit_mode == "contain" and bar_fill == "blur":
        backdrop = _cover_backdrop(image, (width, height), px_scale)
        base = Image.blend(base, backdrop, BACKDROP_OPACITY)
        veil = Image.new("RGBA", (width, height), BACKDROP_VEIL)
        base = Image.alpha_composite(base.convert("RGBA"), veil).convert("RGB")

    left, top, fit_w, fit_h = fitted_rect(
        image.width, image.height, width, height, transform.fit_mode, transform.object_position,
    )
    photo = image
    if filters is not None:
        # Blur is specified in CSS pixels of the fitted image
        blur_scale = px_scale * image.width / fit_w if fit_w > 0 else 1.0
        photo = apply_filters(image, filters, blur_scale=blur_scale)

    # The element box clips its fitted content before the transform applies
    layer = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    resized = photo.convert("RGBA").resize((max(1, round(fit_w)), max(1, round(fit_h))), Image.Resampling.LANCZOS)
    layer.paste(resized, (round(left), round(top)))

    if not transform.is_identity:
        layer = layer.transform(
            (width, height),
            Image.Transform.AFFINE,
            inverse_affine(transform, width, height),
            resample=Image.Resampling.BICUBIC,
        )

    return Image.alpha_composite(base.convert("RGBA"), layer).convert("RGB")


def render_page(
    page,
    state,
    images: Mapping[str, Optional[Image.Image]],
    dpi: int = 300,
) -> Image.Image:
    """
    Paint a RenderedPage at the given DPI.

    Args:
        page: RenderedPage from SheetSession.render()
        state: The RenderState the page belongs to
        images: Decoded photos keyed by photo id (None for failures)
        dpi: Output resolution

    Returns:
        RGB page image
    """
    px_scale = dpi / CSS_DPI
    page_w = round(state.page_size_px[0] * px_scale)
    page_h = round(state.page_size_px[1] * px_scale)
    canvas = Image.new("RGB", (page_w, page_h), PAGE_COLOR)
    draw = ImageDraw.Draw(canvas)
    layout = state.layout

    for rendered in page.cells:
        left, top, width, height = cell_rect(
            rendered.cell,
            layout.cols,
            layout.rows,
            (page_w, page_h),
            state.margin_px * px_scale,
            state.gap_px * px_scale,
        )
        box = (round(left), round(top))
        size = (max(1, round(width)), max(1, round(height)))
        cell_img = render_cell(
            images.get(rendered.photo.id),
            rendered.transform,
            size,
            bar_fill=state.bar_fill,
            filters=state.filters,
            px_scale=px_scale,
        )
        canvas.paste(cell_img, box)
        if state.show_separators:
            line = max(1, round(px_scale))
            draw.rectangle(
                [box[0], box[1], box[0] + size[0] - 1, box[1] + size[1] - 1],
                outline=SEPARATOR_COLOR,
                width=line,
            )

    logger.debug(f"Rasterised page {page.index + 1} with {len(page.cells)} cells at {dpi} DPI")
    return canvas
