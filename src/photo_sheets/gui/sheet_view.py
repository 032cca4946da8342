"""
Preview widget for one A4 sheet.

Paints the page at the preview scale and turns Qt mouse events into the
interaction controller's events: press -> click + pointer_down, move ->
pointer_move, release -> pointer_up, double-click -> double_click.
"""
from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from PIL import Image, ImageFilter
from PySide6.QtCore import QPointF, QRectF, QSize, Qt, Signal
from PySide6.QtGui import QColor, QImage, QMouseEvent, QPainter, QPen, QTransform
from PySide6.QtWidgets import QSizePolicy, QWidget

from photo_sheets.crops.transform import BACKDROP_BLUR_PX, BACKDROP_OPACITY, BACKDROP_SCALE, compose, fitted_rect
from photo_sheets.filters import FilterValues, apply_filters
from photo_sheets.layout.geometry import cell_rect
from photo_sheets.output.raster import BAR_COLORS
from photo_sheets.photos.source import open_image
from photo_sheets.session import RenderedPage, RenderState, SheetSession

logger = logging.getLogger(__name__)

PREVIEW_MAX_SIDE = 900
SELECTION_COLOR = QColor("#0f766e")


def _to_qimage(img: Image.Image) -> QImage:
    rgb = img.convert("RGB")
    data = rgb.tobytes("raw", "RGB")
    qimg = QImage(data, rgb.width, rgb.height, rgb.width * 3, QImage.Format.Format_RGB888)
    return qimg.copy()


class PreviewImageCache:
    """Decoded, downscaled and filtered previews keyed by photo id and filters."""

    def __init__(self) -> None:
        self._thumbs: Dict[str, Optional[Image.Image]] = {}
        self._filtered: Dict[Tuple[str, FilterValues], QImage] = {}
        self._blurred: Dict[str, QImage] = {}

    def clear(self) -> None:
        self._thumbs.clear()
        self._filtered.clear()
        self._blurred.clear()

    def get(self, photo, filters: FilterValues) -> Optional[QImage]:
        key = (photo.id, filters)
        if key in self._filtered:
            return self._filtered[key]
        if photo.id not in self._thumbs:
            try:
                img = open_image(photo)
                img.thumbnail((PREVIEW_MAX_SIDE, PREVIEW_MAX_SIDE))
                self._thumbs[photo.id] = img
            except Exception as e:
                logger.warning(f"Could not decode {photo.name}: {e}")
                self._thumbs[photo.id] = None
        thumb = self._thumbs[photo.id]
        if thumb is None:
            return None
        qimg = _to_qimage(apply_filters(thumb, filters))
        self._filtered[key] = qimg
        return qimg

    def backdrop(self, photo) -> Optional[QImage]:
        """Blurred copy for letterbox bars; ignores filters and crop."""
        if photo.id in self._blurred:
            return self._blurred[photo.id]
        thumb = self._thumbs.get(photo.id)
        if thumb is None:
            return None
        qimg = _to_qimage(thumb.filter(ImageFilter.GaussianBlur(radius=BACKDROP_BLUR_PX)))
        self._blurred[photo.id] = qimg
        return qimg


class SheetView(QWidget):
    """One page of the preview."""

    cropChanged = Signal(str)
    selectionChanged = Signal(object)

    def __init__(self, session: SheetSession, cache: PreviewImageCache, parent=None):
        super().__init__(parent)
        self.session = session
        self.cache = cache
        self.state: Optional[RenderState] = None
        self.page: Optional[RenderedPage] = None
        self.scale = 1.0
        self._press_id: Optional[str] = None
        self.setSizePolicy(QSizePolicy.Policy.Fixed, QSizePolicy.Policy.Fixed)
        self.setMouseTracking(False)

    def set_page(self, state: RenderState, page: RenderedPage, scale: float) -> None:
        self.state = state
        self.page = page
        self.scale = scale
        self.setFixedSize(self.sizeHint())
        self.update()

    def sizeHint(self) -> QSize:
        if self.state is None:
            return QSize(0, 0)
        w, h = self.state.page_size_px
        return QSize(round(w * self.scale), round(h * self.scale))

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------

    def cell_rects(self):
        """Yield (RenderedCell, QRectF) for every photo on this page."""
        if self.state is None or self.page is None:
            return
        layout = self.state.layout
        page_w, page_h = self.state.page_size_px
        for rendered in self.page.cells:
            left, top, width, height = cell_rect(
                rendered.cell,
                layout.cols,
                layout.rows,
                (page_w * self.scale, page_h * self.scale),
                self.state.margin_px * self.scale,
                self.state.gap_px * self.scale,
            )
            yield rendered, QRectF(left, top, width, height)

    def photo_at(self, pos: QPointF) -> Tuple[Optional[str], Optional[QRectF]]:
        for rendered, rect in self.cell_rects():
            if rect.contains(pos):
                return rendered.photo.id, rect
        return None, None

    def _rect_for(self, photo_id: Optional[str]) -> Optional[QRectF]:
        for rendered, rect in self.cell_rects():
            if rendered.photo.id == photo_id:
                return rect
        return None

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_press(self, pos: QPointF, global_pos: QPointF, button: int = 0) -> None:
        photo_id, _ = self.photo_at(pos)
        if photo_id is None:
            return
        controller = self.session.controller
        previous = controller.selected_id
        controller.click(photo_id)
        if controller.pointer_down(photo_id, global_pos.x(), global_pos.y(), button):
            self._press_id = photo_id
        if controller.selected_id != previous:
            self.selectionChanged.emit(controller.selected_id)

    def handle_move(self, global_pos: QPointF) -> None:
        if self._press_id is None:
            return
        rect = self._rect_for(self._press_id)
        if rect is None:
            return
        crop = self.session.controller.pointer_move(
            self._press_id, global_pos.x(), global_pos.y(), rect.width(), rect.height(),
        )
        if crop is not None:
            self.cropChanged.emit(self._press_id)

    def handle_release(self) -> None:
        if self._press_id is not None:
            self.session.controller.pointer_up(self._press_id)
            self._press_id = None

    def handle_double_click(self, pos: QPointF) -> None:
        photo_id, _ = self.photo_at(pos)
        if photo_id is not None:
            self.session.controller.double_click(photo_id)
            self.cropChanged.emit(photo_id)

    def mousePressEvent(self, event: QMouseEvent) -> None:
        button = 0 if event.button() == Qt.MouseButton.LeftButton else 2
        self.handle_press(event.position(), event.globalPosition(), button)
        event.accept()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        self.handle_move(event.globalPosition())

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        self.handle_release()

    def mouseDoubleClickEvent(self, event: QMouseEvent) -> None:
        self.handle_double_click(event.position())

    def hideEvent(self, event) -> None:
        # Capture is lost when the view goes away mid-drag
        if self._press_id is not None:
            self.session.controller.pointer_cancel(self._press_id)
            self._press_id = None
        super().hideEvent(event)

    # ------------------------------------------------------------------
    # Painting
    # ------------------------------------------------------------------

    def paintEvent(self, event) -> None:
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.fillRect(self.rect(), QColor("white"))
        if self.state is None or self.page is None:
            painter.end()
            return

        state = self.state
        bar = QColor(*BAR_COLORS.get(state.bar_fill, BAR_COLORS["white"]))
        selected = self.session.controller.selected_id
        for rendered, rect in self.cell_rects():
            painter.save()
            painter.setClipRect(rect)
            painter.fillRect(rect, bar)
            image = self.cache.get(rendered.photo, state.filters)
            if image is not None:
                crop = self.session.crops.get(rendered.photo.id)
                transform = compose(crop, state.fit_mode)
                backdrop = self.cache.backdrop(rendered.photo) if state.backdrop else None
                if backdrop is not None:
                    painter.save()
                    painter.setOpacity(BACKDROP_OPACITY)
                    _, _, w, h = fitted_rect(backdrop.width(), backdrop.height(), rect.width(), rect.height(), "cover")
                    w, h = w * BACKDROP_SCALE, h * BACKDROP_SCALE
                    painter.drawImage(QRectF(rect.center().x() - w / 2, rect.center().y() - h / 2, w, h), backdrop)
                    painter.restore()
                a, b, c, d, e, f = transform.matrix(rect.width(), rect.height())
                center = rect.center()
                painter.translate(center)
                painter.setTransform(QTransform(a, b, c, d, e, f), True)
                painter.translate(-rect.width() / 2, -rect.height() / 2)
                left, top, w, h = fitted_rect(
                    image.width(), image.height(), rect.width(), rect.height(),
                    transform.fit_mode, transform.object_position,
                )
                painter.setClipRect(QRectF(0, 0, rect.width(), rect.height()), Qt.ClipOperation.IntersectClip)
                painter.drawImage(QRectF(left, top, w, h), image)
            painter.restore()

            if state.show_separators:
                painter.setPen(QPen(QColor("black"), 1))
                painter.drawRect(rect.adjusted(0, 0, -1, -1))
            if rendered.photo.id == selected:
                painter.setPen(QPen(SELECTION_COLOR, 3))
                painter.drawRect(rect.adjusted(1.5, 1.5, -1.5, -1.5))
            if state.show_labels:
                painter.setPen(QColor("white"))
                label_rect = QRectF(rect.right() - 30, rect.bottom() - 18, 26, 14)
                painter.fillRect(label_rect, QColor(15, 23, 42, 180))
                painter.drawText(label_rect, Qt.AlignmentFlag.AlignCenter, str(rendered.number))

        painter.setPen(QColor("#64748b"))
        painter.drawText(QPointF(8, 14), f"Page {self.page.index + 1}")
        painter.end()
