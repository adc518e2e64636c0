import json
import logging

import pytest

from placement_designer import data_store
from placement_designer.models import DesignerSettings


def test_requires_project_dir(monkeypatch):
    monkeypatch.setattr(data_store, "_active_project_dir", None)
    with pytest.raises(RuntimeError):
        data_store.load_placements("tpl")


def test_placements_round_trip(project_dir, make_placement):
    p = make_placement("a", label="Name")
    p.style.align = "right"
    data_store.save_placements("tpl", [p, make_placement("b", page_index=2)])
    loaded = data_store.load_placements("tpl")
    assert loaded == [p, make_placement("b", page_index=2)]
    raw = json.loads((project_dir / "data" / "placements" / "tpl.json").read_text())
    assert raw[0]["fieldKey"] == "name"
    assert raw[0]["style"]["align"] == "right"


def test_missing_placements_file_is_empty(project_dir):
    assert data_store.load_placements("nothing-yet") == []


def test_designer_settings_from_config():
    config = {"designer_settings": {
        "min_width_px": 30, "paste_offset": "0.05", "history_limit": 10.0,
        "api_url": "http://localhost:8000", "debug_mode": 1, "unknown": True,
    }}
    s = data_store.load_designer_settings_from_config(config)
    assert s.min_width_px == 30.0
    assert s.paste_offset == 0.05
    assert s.history_limit == 10
    assert s.api_url == "http://localhost:8000"
    assert s.debug_mode is True
    assert s.min_height_px == 18


def test_designer_settings_round_trip(project_dir):
    config = {"fields": []}
    data_store.save_designer_settings_to_config(config, DesignerSettings(spawn_step_px=20))
    data_store.save_project_config(str(project_dir), config)
    reloaded = data_store.load_project_config(str(project_dir))
    assert data_store.load_designer_settings_from_config(reloaded).spawn_step_px == 20


def test_fields_template_and_values(project_dir):
    config = {
        "fields": [{"key": "name", "description": "Full name"}, {"key": "dob", "type": "date"}],
        "template_pdf": "form.pdf",
    }
    fields = data_store.load_fields_from_config(config)
    assert [(f.key, f.type) for f in fields] == [("name", "text"), ("dob", "date")]
    assert data_store.get_template_id(config, str(project_dir)) == "project"
    assert data_store.get_template_id({"template_id": "t9"}, str(project_dir)) == "t9"
    assert data_store.get_template_pdf(config, str(project_dir)).endswith("form.pdf")
    assert data_store.load_fill_values(str(project_dir), fields) == {"name": "name", "dob": "dob"}
    (project_dir / "values.json").write_text('{"name": "Ada"}')
    assert data_store.load_fill_values(str(project_dir), fields) == {"name": "Ada"}


def test_session_config(project_dir):
    assert data_store.load_session_config() is None
    data_store.save_session_config(str(project_dir))
    assert data_store.load_session_config()["project_dir"] == str(project_dir)


def test_set_debug_writes_log_file(project_dir):
    try:
        data_store.set_debug(True)
        assert data_store.logger.level == logging.DEBUG
        data_store.dbg("hello from test")
    finally:
        data_store.set_debug(False)
    assert "hello from test" in (project_dir / "data" / "designer.log").read_text()
    assert data_store.logger.level == logging.INFO
