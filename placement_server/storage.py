import json
import os
from typing import List

DATA_DIR = "./data"


def _placements_dir() -> str:
    return os.path.join(DATA_DIR, "placements")


def save_placements(template_id: str, placements: List[dict]):
    os.makedirs(_placements_dir(), exist_ok=True)
    with open(os.path.join(_placements_dir(), f"{template_id}.json"), "w") as f:
        json.dump(placements, f, indent=2)


def load_placements(template_id: str) -> List[dict]:
    path = os.path.join(_placements_dir(), f"{template_id}.json")
    if not os.path.exists(path):
        return []
    with open(path, "r") as f:
        return json.load(f)


def list_templates() -> List[str]:
    if not os.path.isdir(_placements_dir()):
        return []
    return sorted(
        name[:-len(".json")]
        for name in os.listdir(_placements_dir())
        if name.endswith(".json")
    )
