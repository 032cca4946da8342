"""
Main Window for the Photo Sheets editor.

Left: crop controls for the selected photo. Centre: scrollable A4 preview.
Right: folder, layout, fit and filter settings, summary and console.
"""
from __future__ import annotations

import logging
import queue
from pathlib import Path
from typing import List, Optional

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction, QKeyEvent, QKeySequence
from PySide6.QtWidgets import (
    QCheckBox, QComboBox, QDoubleSpinBox, QFileDialog, QFormLayout, QGridLayout,
    QGroupBox, QHBoxLayout, QLabel, QMainWindow, QPlainTextEdit, QPushButton,
    QScrollArea, QSpinBox, QVBoxLayout, QWidget,
)

from photo_sheets.crops.persistence import JsonCropFile
from photo_sheets.filters import FILTER_RANGES, PRESET_LABELS
from photo_sheets.options import SheetOptions
from photo_sheets.output.renderer import ExportError, render_to_pdf
from photo_sheets.photos.source import list_photos
from photo_sheets.session import SheetSession

from .qt_scheduler import QtTimerScheduler
from .sheet_view import PreviewImageCache, SheetView
from .utils.logging_utils import attach_queue_handler, detach_queue_handler, drain_queue
from .utils.paths import get_crops_path

logger = logging.getLogger(__name__)

FILTER_LABELS = {
    "brightness": "Brightness",
    "contrast": "Contrast",
    "saturation": "Saturation",
    "sepia": "Sepia",
    "grayscale": "Grayscale",
    "hue": "Hue",
    "blur": "Blur",
}

ARROW_KEYS = {
    Qt.Key.Key_Left: (-1, 0),
    Qt.Key.Key_Right: (1, 0),
    Qt.Key.Key_Up: (0, 1),
    Qt.Key.Key_Down: (0, -1),
}


class MainWindow(QMainWindow):
    def __init__(self, session: Optional[SheetSession] = None, crops_path: Optional[Path] = None):
        super().__init__()
        self.setWindowTitle("Photo Sheets")
        self.resize(1500, 900)

        self.scheduler = QtTimerScheduler(self)
        if session is None:
            session = SheetSession(
                SheetOptions(),
                persistence=JsonCropFile(crops_path or get_crops_path()),
                scheduler=self.scheduler,
            )
        self.session = session
        self.cache = PreviewImageCache()
        self.views: List[SheetView] = []
        self._syncing = False

        self.log_queue: queue.Queue = queue.Queue()
        self._log_handler = attach_queue_handler(self.log_queue, "photo_sheets")

        file_menu = self.menuBar().addMenu("File")
        open_action = QAction("Choose folder...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.choose_folder)
        file_menu.addAction(open_action)
        print_action = QAction("Print / PDF...", self)
        print_action.setShortcut(QKeySequence.StandardKey.Print)
        print_action.triggered.connect(self.export_pdf)
        file_menu.addAction(print_action)

        central = QWidget()
        row = QHBoxLayout(central)
        row.addWidget(self._build_crop_panel())
        row.addWidget(self._build_preview(), 1)
        row.addWidget(self._build_settings_panel())
        self.setCentralWidget(central)

        self._log_timer = QTimer(self)
        self._log_timer.timeout.connect(self._drain_log_queue)
        self._log_timer.start(200)

        self.refresh()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _build_crop_panel(self) -> QWidget:
        box = QGroupBox("Photo editing")
        box.setFixedWidth(300)
        layout = QVBoxLayout(box)

        self.selection_label = QLabel()
        self.selection_label.setWordWrap(True)
        layout.addWidget(self.selection_label)

        arrows = QGridLayout()
        self.nudge_buttons = []
        for text, (dx, dy), pos in (
            ("↑", (0, 1), (0, 1)),
            ("←", (-1, 0), (1, 0)),
            ("↓", (0, -1), (1, 1)),
            ("→", (1, 0), (1, 2)),
        ):
            button = QPushButton(text)
            button.clicked.connect(lambda _=False, dx=dx, dy=dy: self.nudge(dx, dy))
            arrows.addWidget(button, *pos)
            self.nudge_buttons.append(button)
        layout.addLayout(arrows)

        form = QFormLayout()
        self.nudge_spin = QDoubleSpinBox()
        self.nudge_spin.setRange(0.5, 20)
        self.nudge_spin.setSingleStep(0.5)
        self.nudge_spin.setValue(float(self.session.options.nudge_step))
        self.nudge_spin.valueChanged.connect(lambda v: self._set_option("nudge_step", v))
        form.addRow("Nudge step (%)", self.nudge_spin)

        self.zoom_spin = QSpinBox()
        self.zoom_spin.setRange(50, 250)
        self.zoom_spin.valueChanged.connect(self._on_zoom)
        form.addRow("Zoom (%)", self.zoom_spin)
        layout.addLayout(form)

        rotate_row = QHBoxLayout()
        self.rotate_left = QPushButton("Rotate -90°")
        self.rotate_left.clicked.connect(lambda: self._rotate(-90))
        self.rotate_right = QPushButton("Rotate +90°")
        self.rotate_right.clicked.connect(lambda: self._rotate(90))
        rotate_row.addWidget(self.rotate_left)
        rotate_row.addWidget(self.rotate_right)
        layout.addLayout(rotate_row)
        layout.addStretch(1)
        return box

    def _build_preview(self) -> QWidget:
        self.pages_host = QWidget()
        self.pages_layout = QVBoxLayout(self.pages_host)
        self.pages_layout.setAlignment(Qt.AlignmentFlag.AlignHCenter | Qt.AlignmentFlag.AlignTop)
        self.empty_label = QLabel("No photos loaded.")
        self.empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.pages_layout.addWidget(self.empty_label)

        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.scroll.setWidget(self.pages_host)
        return self.scroll

    def _build_settings_panel(self) -> QWidget:
        box = QGroupBox("Layout settings")
        box.setFixedWidth(340)
        layout = QVBoxLayout(box)

        folder_row = QHBoxLayout()
        choose = QPushButton("Choose folder")
        choose.clicked.connect(self.choose_folder)
        self.folder_label = QLabel("No folder selected")
        folder_row.addWidget(choose)
        folder_row.addWidget(self.folder_label, 1)
        layout.addLayout(folder_row)

        opts = self.session.options
        form = QFormLayout()
        self.per_page_spin = QSpinBox()
        self.per_page_spin.setRange(1, 64)
        self.per_page_spin.setValue(int(opts.photos_per_page))
        self.per_page_spin.valueChanged.connect(lambda v: self._set_option("photos_per_page", v))
        form.addRow("Photos per page", self.per_page_spin)

        self.orientation_combo = self._combo(
            [("portrait", "Portrait"), ("landscape", "Landscape")], "orientation")
        form.addRow("A4 orientation", self.orientation_combo)

        self.margin_spin = QDoubleSpinBox()
        self.margin_spin.setRange(0, 40)
        self.margin_spin.setValue(float(opts.margin_mm))
        self.margin_spin.valueChanged.connect(lambda v: self._set_option("margin_mm", v))
        form.addRow("Margin (mm)", self.margin_spin)

        self.gap_spin = QDoubleSpinBox()
        self.gap_spin.setRange(0, 20)
        self.gap_spin.setValue(float(opts.gap_mm))
        self.gap_spin.valueChanged.connect(lambda v: self._set_option("gap_mm", v))
        form.addRow("Gap (mm)", self.gap_spin)

        self.template_combo = self._combo([
            ("auto", "Auto (grid)"),
            ("grid4", "2 x 2 (4 photos)"),
            ("grid6", "3 x 2 (6 photos)"),
            ("hero5", "1 large + 4 small (5 photos)"),
        ], "layout_template")
        form.addRow("Layout template", self.template_combo)

        self.fit_combo = self._combo(
            [("cover", "Fill (crop)"), ("contain", "Whole photo (bars)")], "fit_mode")
        form.addRow("Photo fit", self.fit_combo)

        self.bar_combo = self._combo(
            [("white", "White"), ("blur", "Blurred background"), ("black", "Black")], "bar_fill")
        form.addRow("Bar fill", self.bar_combo)

        self.preset_combo = QComboBox()
        for key, label in PRESET_LABELS.items():
            self.preset_combo.addItem(label, key)
        self.preset_combo.currentIndexChanged.connect(self._on_preset)
        form.addRow("Filter preset", self.preset_combo)

        self.filter_spins = {}
        for name, (low, high) in FILTER_RANGES.items():
            spin = QDoubleSpinBox()
            spin.setRange(low, high)
            spin.setSingleStep(0.1 if name == "blur" else 1)
            spin.setValue(float(getattr(opts, name)))
            spin.valueChanged.connect(lambda v, name=name: self._on_filter(name, v))
            form.addRow(FILTER_LABELS[name], spin)
            self.filter_spins[name] = spin

        self.labels_check = QCheckBox("Number cells")
        self.labels_check.setChecked(bool(opts.show_labels))
        self.labels_check.toggled.connect(lambda v: self._set_option("show_labels", v))
        self.separators_check = QCheckBox("Lines between photos")
        self.separators_check.setChecked(bool(opts.show_separators))
        self.separators_check.toggled.connect(lambda v: self._set_option("show_separators", v))
        form.addRow(self.labels_check)
        form.addRow(self.separators_check)
        layout.addLayout(form)

        buttons = QGridLayout()
        reset_filters = QPushButton("Reset filters")
        reset_filters.clicked.connect(self._reset_filters)
        reset_crops = QPushButton("Reset crops")
        reset_crops.clicked.connect(self._reset_crops)
        self.print_button = QPushButton("Print / PDF")
        self.print_button.clicked.connect(self.export_pdf)
        buttons.addWidget(reset_filters, 0, 0)
        buttons.addWidget(reset_crops, 0, 1)
        buttons.addWidget(self.print_button, 1, 0, 1, 2)
        layout.addLayout(buttons)

        self.summary_label = QLabel()
        self.summary_label.setWordWrap(True)
        layout.addWidget(self.summary_label)
        self.advisory_label = QLabel()
        self.advisory_label.setStyleSheet("color: #b91c1c;")
        self.advisory_label.setWordWrap(True)
        layout.addWidget(self.advisory_label)

        self.console = QPlainTextEdit()
        self.console.setReadOnly(True)
        self.console.setMaximumHeight(120)
        layout.addWidget(self.console)
        return box

    def _combo(self, items, option: str) -> QComboBox:
        combo = QComboBox()
        for key, label in items:
            combo.addItem(label, key)
        combo.setCurrentIndex(max(0, combo.findData(getattr(self.session.options, option))))
        combo.currentIndexChanged.connect(lambda _: self._set_option(option, combo.currentData()))
        return combo

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def choose_folder(self) -> None:
        folder = QFileDialog.getExistingDirectory(self, "Choose photo folder")
        if folder:
            self.load_folder(Path(folder))

    def load_folder(self, folder: Path) -> None:
        photos = list_photos(folder)
        self.cache.clear()
        self.session.load_photos(photos)
        self.folder_label.setText(f"{folder.name} • photos: {len(photos)}" if photos else "No folder selected")
        self.refresh()

    def nudge(self, dx: float, dy: float) -> None:
        if self.session.nudge(dx, dy) is not None:
            self._crop_changed()

    def _rotate(self, delta: float) -> None:
        if self.session.controller.rotate_by(delta) is not None:
            self._crop_changed()

    def _on_zoom(self, value: int) -> None:
        if self._syncing:
            return
        if self.session.controller.set_zoom(value) is not None:
            self._crop_changed()

    def _on_preset(self, _index: int) -> None:
        if self._syncing:
            return
        self.session.options.apply_preset(self.preset_combo.currentData())
        self._sync_filter_widgets()
        self.refresh()

    def _on_filter(self, name: str, value: float) -> None:
        if self._syncing:
            return
        self.session.options.set_filter(name, value)
        self._sync_filter_widgets()
        self.refresh()

    def _reset_filters(self) -> None:
        self.session.options.reset_filters()
        self._sync_filter_widgets()
        self.refresh()

    def _reset_crops(self) -> None:
        self.session.reset_all_crops()
        self._crop_changed()

    def _set_option(self, name: str, value) -> None:
        setattr(self.session.options, name, value)
        self.refresh()

    def export_pdf(self) -> None:
        state = self.session.render()
        if not state.can_print:
            return
        path, _ = QFileDialog.getSaveFileName(self, "Save PDF", "photo_sheets.pdf", "PDF (*.pdf)")
        if not path:
            return
        try:
            render_to_pdf(state, Path(path))
        except (ExportError, OSError) as e:
            logger.warning(f"Export failed: {e}")

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def _crop_changed(self, _photo_id: Optional[str] = None) -> None:
        for view in self.views:
            view.update()
        self._sync_crop_widgets()

    def _selection_changed(self, _photo_id) -> None:
        for view in self.views:
            view.update()
        self._sync_crop_widgets()

    def _sync_crop_widgets(self) -> None:
        crop = self.session.controller.selected_crop()
        enabled = crop is not None
        for button in self.nudge_buttons + [self.rotate_left, self.rotate_right]:
            button.setEnabled(enabled)
        self.zoom_spin.setEnabled(enabled)
        self._syncing = True
        self.zoom_spin.setValue(round(crop.zoom) if crop else 100)
        self._syncing = False
        self.selection_label.setText(self.session.selection_text())

    def _sync_filter_widgets(self) -> None:
        opts = self.session.options
        self._syncing = True
        self.preset_combo.setCurrentIndex(max(0, self.preset_combo.findData(opts.filter_preset)))
        for name, spin in self.filter_spins.items():
            spin.setValue(float(getattr(opts, name)))
        self._syncing = False

    def refresh(self) -> None:
        """Rebuild the preview from a fresh render snapshot."""
        state = self.session.render()
        self.per_page_spin.setEnabled(self.session.options.layout_template == "auto")

        while len(self.views) > state.page_count:
            view = self.views.pop()
            view.hide()
            view.deleteLater()
        while len(self.views) < state.page_count:
            view = SheetView(self.session, self.cache)
            view.cropChanged.connect(self._crop_changed)
            view.selectionChanged.connect(self._selection_changed)
            self.pages_layout.addWidget(view)
            self.views.append(view)

        scale = self.session.preview_scale(self.scroll.viewport().width())
        for view, page in zip(self.views, state.pages):
            view.set_page(state, page, scale)

        self.empty_label.setVisible(state.photo_count == 0)
        self.advisory_label.setText(state.advisory or "")
        self.print_button.setEnabled(state.can_print)
        self.summary_label.setText("\n".join(self.session.summary().lines))
        self._sync_crop_widgets()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        if self.views:
            self.refresh()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        step = ARROW_KEYS.get(Qt.Key(event.key()))
        if step is not None:
            self.nudge(*step)
            return
        super().keyPressEvent(event)

    def _drain_log_queue(self) -> None:
        for message, level in drain_queue(self.log_queue):
            self.console.appendPlainText(f"[{level}] {message}")

    def closeEvent(self, event) -> None:
        self.session.close()
        detach_queue_handler(self._log_handler, "photo_sheets")
        super().closeEvent(event)
