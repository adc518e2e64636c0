"""Setup dialog: choose the project directory holding the template."""
import os

from PySide6.QtWidgets import (
    QDialog, QDialogButtonBox, QFileDialog, QFormLayout,
    QHBoxLayout, QLabel, QLineEdit, QPushButton, QVBoxLayout,
)

from placement_designer import data_store


def validate_project_dir(project_dir: str) -> str:
    """Return an error message for *project_dir*, or "" when it is usable."""
    if not os.path.isdir(project_dir):
        return "Project directory does not exist."
    if not os.path.isfile(os.path.join(project_dir, "config.json")):
        return "Missing 'config.json' inside the project directory."
    try:
        config = data_store.load_project_config(project_dir)
    except ValueError:
        return "'config.json' is not valid JSON."
    if not os.path.isfile(data_store.get_template_pdf(config, project_dir)):
        return "The template PDF named in 'config.json' was not found."
    return ""


class SetupDialog(QDialog):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Placement Designer — Open Project")
        self.setMinimumWidth(540)

        self._project_dir = ""

        # Pre-fill from saved session config
        config = data_store.load_session_config()
        if config:
            self._project_dir = config.get("project_dir", "")

        layout = QVBoxLayout(self)
        layout.addWidget(QLabel(
            "<b>Welcome to Placement Designer</b><br>"
            "Select your project directory to get started.<br><br>"
            "The project directory must contain:<br>"
            "&nbsp;&nbsp;• <tt>config.json</tt> — field catalog and designer settings<br>"
            "&nbsp;&nbsp;• the template PDF (<tt>template.pdf</tt> unless "
            "<tt>template_pdf</tt> says otherwise)"
        ))
        layout.addSpacing(8)

        form = QFormLayout()
        layout.addLayout(form)

        self._dir_edit = QLineEdit(self._project_dir)
        browse_btn = QPushButton("Browse…")
        browse_btn.clicked.connect(self._browse)
        dir_row = QHBoxLayout()
        dir_row.addWidget(self._dir_edit)
        dir_row.addWidget(browse_btn)
        form.addRow("Project directory:", dir_row)

        layout.addSpacing(12)

        self._error_label = QLabel("")
        self._error_label.setStyleSheet("color: red;")
        layout.addWidget(self._error_label)

        buttons = QDialogButtonBox()
        buttons.addButton("Open Project", QDialogButtonBox.ButtonRole.AcceptRole)
        buttons.addButton("Cancel", QDialogButtonBox.ButtonRole.RejectRole)
        buttons.accepted.connect(self._on_accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _browse(self):
        path = QFileDialog.getExistingDirectory(self, "Select Project Directory",
                                                self._dir_edit.text())
        if path:
            self._dir_edit.setText(path)

    def _on_accept(self):
        project_dir = self._dir_edit.text().strip()
        error = validate_project_dir(project_dir)
        if error:
            self._error_label.setText(error)
            return
        data_store.save_session_config(project_dir)
        self._project_dir = project_dir
        self.accept()

    def project_dir(self) -> str:
        return self._project_dir
