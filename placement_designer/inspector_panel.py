"""Right panel: label and text style of the selected placement."""
from typing import Optional

from PySide6.QtWidgets import (
    QCheckBox, QComboBox, QDoubleSpinBox, QFormLayout, QLabel, QLineEdit,
    QPushButton, QVBoxLayout, QWidget,
)

from placement_designer.editor import TemplateEditor
from placement_designer.models import ALIGNMENTS, Placement


class InspectorPanel(QWidget):
    def __init__(self, editor: TemplateEditor, parent=None):
        super().__init__(parent)
        self._editor = editor

        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        self._title = QLabel("No placement selected")
        self._title.setWordWrap(True)
        layout.addWidget(self._title)

        self._form_host = QWidget()
        form = QFormLayout(self._form_host)
        form.setContentsMargins(0, 0, 0, 0)

        self._label_edit = QLineEdit()
        self._label_edit.setPlaceholderText("Defaults to the field key")
        self._label_edit.editingFinished.connect(self._on_label_edited)
        form.addRow("Label:", self._label_edit)

        self._font_spin = QDoubleSpinBox()
        self._font_spin.setRange(4.0, 96.0)
        self._font_spin.setDecimals(1)
        self._font_spin.setSingleStep(1.0)
        self._font_spin.valueChanged.connect(self._on_font_size_changed)
        form.addRow("Font size:", self._font_spin)

        self._align_combo = QComboBox()
        self._align_combo.addItems(list(ALIGNMENTS))
        self._align_combo.currentTextChanged.connect(self._on_align_changed)
        form.addRow("Align:", self._align_combo)

        self._multiline_cb = QCheckBox("Wrap onto several lines")
        self._multiline_cb.toggled.connect(self._on_multiline_toggled)
        form.addRow("Multiline:", self._multiline_cb)

        self._geometry_label = QLabel("")
        form.addRow("Rect:", self._geometry_label)

        layout.addWidget(self._form_host)

        self._delete_btn = QPushButton("Delete placement")
        self._delete_btn.clicked.connect(self._editor.delete_selected)
        layout.addWidget(self._delete_btn)
        layout.addStretch()

        editor.store.add_selection_listener(lambda _id: self.refresh())
        editor.store.add_change_listener(self.refresh)
        self.refresh()

    def refresh(self):
        """Re-populate the widgets from the selected placement."""
        p: Optional[Placement] = self._editor.store.selected
        enabled = p is not None
        self._form_host.setEnabled(enabled)
        self._delete_btn.setEnabled(enabled)
        if p is None:
            self._title.setText("No placement selected")
            self._geometry_label.setText("")
            return

        self._title.setText(f"<b>{p.display_label()}</b> ({p.field_key}), page {p.page_index + 1}")
        for w in (self._label_edit, self._font_spin, self._align_combo, self._multiline_cb):
            w.blockSignals(True)
        if not self._label_edit.hasFocus():
            self._label_edit.setText(p.label)
        self._font_spin.setValue(p.style.font_size)
        self._align_combo.setCurrentText(p.style.align)
        self._multiline_cb.setChecked(p.style.multiline)
        for w in (self._label_edit, self._font_spin, self._align_combo, self._multiline_cb):
            w.blockSignals(False)
        r = p.rect
        self._geometry_label.setText(f"x {r.x:.3f}  y {r.y:.3f}  w {r.w:.3f}  h {r.h:.3f}")

    def _on_label_edited(self):
        p = self._editor.store.selected
        if p is not None and self._label_edit.text() != p.label:
            self._editor.update_selected(label=self._label_edit.text())

    def _on_font_size_changed(self, value: float):
        self._editor.update_selected(font_size=value)

    def _on_align_changed(self, align: str):
        self._editor.update_selected(align=align)

    def _on_multiline_toggled(self, checked: bool):
        self._editor.update_selected(multiline=checked)
