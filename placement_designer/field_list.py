"""Left panel: field catalog with search; activating a field places it."""
from typing import List

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QHBoxLayout, QLineEdit, QListWidget, QListWidgetItem, QMenu,
    QPushButton, QVBoxLayout, QWidget,
)

from placement_designer.models import FieldDef
from placement_designer.placement_generator import filter_fields


class FieldListPanel(QWidget):
    field_activated = Signal(str)   # field key
    remove_requested = Signal(str)  # field key: drop its placements

    def __init__(self, parent=None):
        super().__init__(parent)
        self._fields: List[FieldDef] = []
        self._filtered: List[FieldDef] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)

        search_row = QHBoxLayout()
        self._search = QLineEdit()
        self._search.setPlaceholderText("Search fields…")
        self._search.textChanged.connect(self._apply_filter)
        search_row.addWidget(self._search)

        clear_btn = QPushButton("✕")
        clear_btn.setToolTip("Clear search")
        clear_btn.setFixedWidth(28)
        clear_btn.clicked.connect(self._search.clear)
        search_row.addWidget(clear_btn)

        layout.addLayout(search_row)

        self._list = QListWidget()
        self._list.itemClicked.connect(self._on_item_clicked)
        self._list.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self._list.customContextMenuRequested.connect(self._on_context_menu)
        layout.addWidget(self._list)

    def set_fields(self, fields: List[FieldDef]):
        self._fields = list(fields)
        self._apply_filter(self._search.text())

    def visible_keys(self) -> List[str]:
        return [f.key for f in self._filtered]

    def _apply_filter(self, text: str):
        self._filtered = filter_fields(self._fields, text)
        self._list.clear()
        for f in self._filtered:
            item = QListWidgetItem(f.key)
            item.setData(Qt.ItemDataRole.UserRole, f.key)
            tip = f"{f.type}: {f.description}" if f.description else f.type
            item.setToolTip(tip)
            self._list.addItem(item)

    def _on_item_clicked(self, item: QListWidgetItem):
        self.field_activated.emit(item.data(Qt.ItemDataRole.UserRole))

    def _on_context_menu(self, pos):
        item = self._list.itemAt(pos)
        if item is None:
            return
        key = item.data(Qt.ItemDataRole.UserRole)
        menu = QMenu(self)
        menu.addAction(f"Remove all placements of '{key}'",
                       lambda: self.remove_requested.emit(key))
        menu.exec(self._list.viewport().mapToGlobal(pos))
