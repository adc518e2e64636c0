"""Main entry point for the Placement Designer native app."""
import os
import subprocess
import sys
from typing import List, Optional

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QMessageBox,
    QSplitter,
)

from placement_designer import data_store, pdf_filler
from placement_designer.editor import ERROR, TemplateEditor
from placement_designer.field_list import FieldListPanel
from placement_designer.inspector_panel import InspectorPanel
from placement_designer.models import DesignerSettings, FieldDef
from placement_designer.page_view import PageView, ShortcutFilter
from placement_designer.persistence import (
    ApiPlacementRepository, FilePlacementRepository, PlacementRepository,
)
from placement_designer.setup_dialog import SetupDialog

_STATUS_TIMEOUT_MS = 4000


def make_repository(settings: DesignerSettings) -> PlacementRepository:
    """HTTP repository when an API url is configured, project files otherwise."""
    if settings.api_url:
        return ApiPlacementRepository(settings.api_url, timeout=settings.http_timeout)
    return FilePlacementRepository()


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.setWindowTitle("Placement Designer")
        self.resize(1400, 900)

        self._project_config: dict = {}
        self._settings: DesignerSettings = DesignerSettings()
        self._fields: List[FieldDef] = []
        self._template_pdf: str = ""
        self._editor: Optional[TemplateEditor] = None
        self._repository: Optional[PlacementRepository] = None
        self._shortcut_filter: Optional[ShortcutFilter] = None
        self._page_view: Optional[PageView] = None

        self._setup_menus()
        self._load_session()

    def _setup_menus(self):
        file_menu = self.menuBar().addMenu("File")
        file_menu.addAction("Open Project…").triggered.connect(self._show_setup)
        file_menu.addAction("Save Placements").triggered.connect(self._save)
        file_menu.addSeparator()
        file_menu.addAction("Export Filled PDF").triggered.connect(self._export_filled_pdf)
        file_menu.addSeparator()
        file_menu.addAction("Quit").triggered.connect(self.close)

        # Key handling goes through ShortcutFilter; menu entries carry no
        # QKeySequence so a key press is never handled twice.
        edit_menu = self.menuBar().addMenu("Edit")
        for label, name in [
            ("Undo\tCtrl+Z", "undo"),
            ("Redo\tCtrl+Shift+Z", "redo"),
            ("Copy\tCtrl+C", "copy_selected"),
            ("Paste\tCtrl+V", "paste"),
            ("Delete\tDel", "delete_selected"),
        ]:
            edit_menu.addAction(label).triggered.connect(
                lambda _checked=False, n=name: self._call_editor(n)
            )

        toolbar = self.addToolBar("Designer")
        toolbar.setMovable(False)
        toolbar.addAction("Save").triggered.connect(self._save)
        toolbar.addAction("Undo").triggered.connect(lambda: self._call_editor("undo"))
        toolbar.addAction("Redo").triggered.connect(lambda: self._call_editor("redo"))

    # ── Project ──────────────────────────────────────────────────────────────

    def _load_session(self):
        data_store.dbg("Loading previous session…")
        config = data_store.load_session_config()
        if config:
            project_dir = config.get("project_dir", "")
            if os.path.isdir(project_dir):
                try:
                    self._apply_project(project_dir)
                    return
                except (OSError, ValueError, KeyError) as exc:
                    QMessageBox.warning(
                        self, "Load Error",
                        f"Could not restore previous session:\n{exc}\n\nPlease open a project."
                    )
        data_store.dbg("No previous session found, showing setup dialog")
        self._show_setup()

    def _show_setup(self):
        dlg = SetupDialog(self)
        if dlg.exec():
            self._apply_project(dlg.project_dir())

    def _apply_project(self, project_dir: str):
        data_store.dbg(f"Applying project: {project_dir}")
        data_store.set_project_dir(project_dir)
        self._project_config = data_store.load_project_config(project_dir)
        self._settings = data_store.load_designer_settings_from_config(self._project_config)
        data_store.set_debug(self._settings.debug_mode)
        self._fields = data_store.load_fields_from_config(self._project_config)
        self._template_pdf = data_store.get_template_pdf(self._project_config, project_dir)
        template_id = data_store.get_template_id(self._project_config, project_dir)
        data_store.ensure_data_dirs()

        self._teardown_designer()
        self._repository = make_repository(self._settings)
        editor = TemplateEditor(template_id, self._repository, self._settings)
        editor.add_notification_listener(self._on_notification)
        self._build_designer(editor)
        editor.load()
        self._page_view.load_pdf(self._template_pdf)
        self.setWindowTitle(f"Placement Designer — {template_id}")
        data_store.dbg(f"Project applied: {len(self._fields)} field(s), "
                       f"{len(editor.store)} placement(s)")

    def _build_designer(self, editor: TemplateEditor):
        self._editor = editor

        splitter = QSplitter(Qt.Orientation.Horizontal)
        field_list = FieldListPanel()
        field_list.set_fields(self._fields)
        field_list.field_activated.connect(self._on_field_activated)
        field_list.remove_requested.connect(self._on_remove_field)
        splitter.addWidget(field_list)

        self._page_view = PageView(editor)
        splitter.addWidget(self._page_view)

        splitter.addWidget(InspectorPanel(editor))
        splitter.setSizes([260, 860, 280])
        self.setCentralWidget(splitter)

        self._shortcut_filter = ShortcutFilter(editor.shortcuts, self)
        if self.isVisible():
            self._shortcut_filter.install()

    def _teardown_designer(self):
        if self._shortcut_filter is not None:
            self._shortcut_filter.remove()
            self._shortcut_filter = None
        if isinstance(self._repository, ApiPlacementRepository):
            self._repository.close()
        self._repository = None
        self._editor = None
        self._page_view = None

    # ── Actions ──────────────────────────────────────────────────────────────

    def _call_editor(self, name: str):
        if self._editor is not None:
            getattr(self._editor, name)()

    def _on_field_activated(self, field_key: str):
        if self._editor is None or self._page_view is None:
            return
        if self._page_view.page_count() == 0:
            QMessageBox.warning(self, "Add Field", "The template PDF could not be loaded.")
            return
        placement = self._editor.add_field(field_key, self._page_view.visible_region())
        data_store.dbg(f"Added {field_key} at {placement.rect}")

    def _on_remove_field(self, field_key: str):
        if self._editor is None:
            return
        removed = self._editor.remove_field(field_key)
        self.statusBar().showMessage(
            f"Removed {removed} placement(s) of {field_key}", _STATUS_TIMEOUT_MS)

    def _save(self):
        if self._editor is None:
            QMessageBox.warning(self, "Save", "Open a project first.")
            return
        self._editor.save()

    def _on_notification(self, level: str, message: str):
        data_store.dbg(f"[{level}] {message}")
        if level == ERROR:
            QMessageBox.warning(self, "Placement Designer", message)
        else:
            self.statusBar().showMessage(message, _STATUS_TIMEOUT_MS)

    def _export_filled_pdf(self):
        if self._editor is None:
            QMessageBox.warning(self, "Export", "No project open.")
            return
        project_dir = data_store.get_project_dir()
        values = data_store.load_fill_values(project_dir, self._fields)
        path = os.path.join(data_store.EXPORT_DIR, f"{self._editor.template_id}_filled.pdf")
        try:
            filled, skipped = pdf_filler.fill_template(
                self._template_pdf, self._editor.store.placements(), values, path,
                fields=self._fields,
            )
        except (RuntimeError, OSError, ValueError) as exc:
            QMessageBox.warning(self, "Export Error", f"Failed to fill the template:\n{exc}")
            return
        msg = f"Filled {filled} placement(s) into:\n{path}"
        if skipped:
            msg += f"\n({skipped} placement(s) skipped — page out of range)"
        dlg = QMessageBox(QMessageBox.Icon.Information, "Export", msg, parent=self)
        open_btn = dlg.addButton("Open File", QMessageBox.ButtonRole.ActionRole)
        dlg.addButton(QMessageBox.StandardButton.Ok)
        dlg.exec()
        if dlg.clickedButton() is open_btn:
            _open_path(path)

    # ── Mount / unmount ──────────────────────────────────────────────────────

    def showEvent(self, event):
        super().showEvent(event)
        if self._shortcut_filter is not None:
            self._shortcut_filter.install()

    def hideEvent(self, event):
        if self._shortcut_filter is not None:
            self._shortcut_filter.remove()
        super().hideEvent(event)

    def closeEvent(self, event):
        self._teardown_designer()
        super().closeEvent(event)


def _open_path(path: str) -> None:
    """Open *path* with the platform's default handler."""
    if not os.path.exists(path):
        return
    try:
        if sys.platform == "darwin":
            subprocess.Popen(["open", path])
        elif sys.platform == "win32":
            os.startfile(path)  # type: ignore[attr-defined]
        else:
            subprocess.Popen(["xdg-open", path])
    except OSError as exc:
        data_store.dbg(f"Could not open {path}: {exc}")


def main():
    app = QApplication(sys.argv)
    app.setApplicationName("Placement Designer")
    window = MainWindow()
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
