import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from placement_designer import data_store
from placement_designer.models import PageSize, Placement, PlacementStyle, Rect


@pytest.fixture()
def project_dir(tmp_path, monkeypatch):
    """Point data_store at a temporary project; restored after the test."""
    for name in ("_active_project_dir", "DATA_DIR", "PLACEMENTS_DIR", "EXPORT_DIR", "LOG_PATH"):
        monkeypatch.setattr(data_store, name, getattr(data_store, name))
    monkeypatch.setattr(data_store, "SESSION_CONFIG_PATH",
                        str(tmp_path / "app" / "session_config.json"))
    project = tmp_path / "project"
    project.mkdir()
    data_store.set_project_dir(str(project))
    return project


@pytest.fixture()
def page():
    return PageSize(800, 1000)


def _make_placement(pid="p1", field_key="name", page_index=0,
                    rect=(0.1, 0.1, 0.2, 0.05), label="") -> Placement:
    return Placement(
        id=pid,
        field_key=field_key,
        page_index=page_index,
        rect=Rect(*rect),
        style=PlacementStyle(),
        label=label,
    )


@pytest.fixture()
def make_placement():
    return _make_placement
