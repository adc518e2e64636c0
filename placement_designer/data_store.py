"""Data persistence: project config, designer settings, placements, debug log."""
import json
import logging
import os
from dataclasses import asdict, fields
from typing import List, Optional

from placement_designer.models import (
    DesignerSettings, FieldDef, Placement, placement_from_dict, placement_to_dict,
)

logger = logging.getLogger("placement_designer")


# ── App-level session config (persists which project dir was last opened) ─────

_APP_DATA_DIR = os.path.join(os.path.expanduser("~"), ".placement_designer")
SESSION_CONFIG_PATH = os.path.join(_APP_DATA_DIR, "session_config.json")

# ── Project-dir-derived paths (set via set_project_dir) ──────────────────────

_active_project_dir: Optional[str] = None
DATA_DIR: str = ""
PLACEMENTS_DIR: str = ""
EXPORT_DIR: str = ""
LOG_PATH: str = ""

_debug_handler: Optional[logging.Handler] = None


def set_project_dir(project_dir: str) -> None:
    """Configure all data paths to use *project_dir* as the root."""
    global _active_project_dir, DATA_DIR, PLACEMENTS_DIR, EXPORT_DIR, LOG_PATH
    _active_project_dir = os.path.abspath(project_dir)
    DATA_DIR = os.path.join(_active_project_dir, "data")
    PLACEMENTS_DIR = os.path.join(DATA_DIR, "placements")
    EXPORT_DIR = os.path.join(_active_project_dir, "export")
    LOG_PATH = os.path.join(DATA_DIR, "designer.log")


def get_project_dir() -> Optional[str]:
    return _active_project_dir


def _require_project_dir(fn_name: str) -> None:
    """Raise RuntimeError if no project directory has been configured."""
    if not _active_project_dir:
        raise RuntimeError(
            f"data_store.{fn_name}() called before set_project_dir(). "
            "Open a project first."
        )


def ensure_data_dirs():
    _require_project_dir("ensure_data_dirs")
    os.makedirs(DATA_DIR, exist_ok=True)
    os.makedirs(PLACEMENTS_DIR, exist_ok=True)
    os.makedirs(EXPORT_DIR, exist_ok=True)


# ── Debug logging ────────────────────────────────────────────────────────────

def set_debug(enabled: bool) -> None:
    """Switch debug logging on/off; when a project is open also log to a file."""
    global _debug_handler
    logger.setLevel(logging.DEBUG if enabled else logging.INFO)
    if _debug_handler is not None:
        logger.removeHandler(_debug_handler)
        _debug_handler.close()
        _debug_handler = None
    if enabled and _active_project_dir:
        os.makedirs(DATA_DIR, exist_ok=True)
        _debug_handler = logging.FileHandler(LOG_PATH, encoding="utf-8")
        _debug_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(_debug_handler)


def dbg(msg: str) -> None:
    logger.debug(msg)


# ── Session config ────────────────────────────────────────────────────────────

def load_session_config() -> Optional[dict]:
    if not os.path.exists(SESSION_CONFIG_PATH):
        return None
    with open(SESSION_CONFIG_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


def save_session_config(project_dir: str):
    os.makedirs(os.path.dirname(SESSION_CONFIG_PATH), exist_ok=True)
    config = {"project_dir": os.path.abspath(project_dir)}
    with open(SESSION_CONFIG_PATH, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2)


# ── Project config.json (template, field catalog, designer settings) ─────────

def load_project_config(project_dir: str) -> dict:
    """Read *project_dir*/config.json and return the raw dict."""
    path = os.path.join(project_dir, "config.json")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def save_project_config(project_dir: str, config_data: dict) -> None:
    """Write *config_data* back to *project_dir*/config.json."""
    path = os.path.join(project_dir, "config.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config_data, f, indent=2)
        f.write("\n")


def load_designer_settings_from_config(config_data: dict) -> DesignerSettings:
    """Build DesignerSettings from a parsed config dict; unknown keys are ignored."""
    raw = config_data.get("designer_settings", {})
    defaults = DesignerSettings()
    values = {}
    for f in fields(DesignerSettings):
        if f.name not in raw:
            continue
        default = getattr(defaults, f.name)
        value = raw[f.name]
        if value is None or default is None:
            values[f.name] = value
        elif isinstance(default, bool):
            values[f.name] = bool(value)
        elif isinstance(default, int):
            values[f.name] = int(value)
        elif isinstance(default, float):
            values[f.name] = float(value)
        else:
            values[f.name] = value
    return DesignerSettings(**values)


def save_designer_settings_to_config(config_data: dict, settings: DesignerSettings) -> None:
    """Write *settings* into *config_data* in-place (call save_project_config to persist)."""
    config_data["designer_settings"] = asdict(settings)


def load_fields_from_config(config_data: dict) -> List[FieldDef]:
    return [
        FieldDef(
            key=str(item["key"]),
            type=str(item.get("type", "text")),
            description=str(item.get("description", "")),
        )
        for item in config_data.get("fields", [])
    ]


def get_template_id(config_data: dict, project_dir: str) -> str:
    """Template id from config, defaulting to the project folder name."""
    return str(config_data.get("template_id")
               or os.path.basename(os.path.abspath(project_dir)))


def get_template_pdf(config_data: dict, project_dir: str) -> str:
    return os.path.join(project_dir, config_data.get("template_pdf", "template.pdf"))


# ── Placements ────────────────────────────────────────────────────────────────

def _placements_path(template_id: str) -> str:
    return os.path.join(PLACEMENTS_DIR, f"{template_id}.json")


def load_placements(template_id: str) -> List[Placement]:
    _require_project_dir("load_placements")
    path = _placements_path(template_id)
    if not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return [placement_from_dict(item) for item in data]


def save_placements(template_id: str, placements: List[Placement]):
    _require_project_dir("save_placements")
    ensure_data_dirs()
    data = [placement_to_dict(p) for p in placements]
    with open(_placements_path(template_id), "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


# ── Fill values ───────────────────────────────────────────────────────────────

def load_fill_values(project_dir: str, fields: List[FieldDef]) -> dict:
    """Values for a filled preview: *project_dir*/values.json, else the field keys."""
    path = os.path.join(project_dir, "values.json")
    if os.path.exists(path):
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    return {fd.key: fd.key for fd in fields}
