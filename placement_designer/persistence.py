"""Load/save boundary for a template's placements.

Two repositories share one contract:

* :class:`FilePlacementRepository` keeps placements next to the project in
  JSON files (``data_store``).
* :class:`ApiPlacementRepository` talks to the placement service over HTTP.

Any failure is raised as :class:`PersistenceError` so the editor can report it
and leave its local state untouched.
"""
import logging
from typing import List, Optional, Protocol
from urllib.parse import quote

import httpx

from placement_designer import data_store
from placement_designer.models import Placement, placement_from_dict, placement_to_dict

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Loading or saving placements failed."""


class PlacementRepository(Protocol):
    def load_placements(self, template_id: str) -> List[Placement]: ...

    def save_placements(self, template_id: str,
                        placements: List[Placement]) -> List[Placement]: ...


class FilePlacementRepository:
    """Placements stored under the open project's data directory."""

    def load_placements(self, template_id: str) -> List[Placement]:
        try:
            return data_store.load_placements(template_id)
        except (OSError, ValueError, KeyError, TypeError, RuntimeError) as exc:
            raise PersistenceError(f"Could not load placements: {exc}") from exc

    def save_placements(self, template_id: str,
                        placements: List[Placement]) -> List[Placement]:
        try:
            data_store.save_placements(template_id, placements)
            return data_store.load_placements(template_id)
        except (OSError, ValueError, KeyError, TypeError, RuntimeError) as exc:
            raise PersistenceError(f"Could not save placements: {exc}") from exc


class ApiPlacementRepository:
    """Placements stored by the placement service (``placement_server``).

    *client* may be any ``httpx.Client`` (tests pass FastAPI's TestClient).
    """

    def __init__(self, base_url: str = "", timeout: float = 10.0,
                 client: Optional[httpx.Client] = None):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)

    def _url(self, template_id: str) -> str:
        return f"/api/templates/{quote(template_id, safe='')}/placements"

    def load_placements(self, template_id: str) -> List[Placement]:
        logger.info("GET placements for template %s", template_id)
        try:
            resp = self._client.get(self._url(template_id))
            resp.raise_for_status()
            return _decode(resp.json())
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            raise PersistenceError(f"Could not load placements: {exc}") from exc

    def save_placements(self, template_id: str,
                        placements: List[Placement]) -> List[Placement]:
        logger.info("PUT %d placements for template %s", len(placements), template_id)
        body = {"placements": [placement_to_dict(p) for p in placements]}
        try:
            resp = self._client.put(self._url(template_id), json=body)
            resp.raise_for_status()
            return _decode(resp.json())
        except (httpx.HTTPError, ValueError, KeyError, TypeError) as exc:
            raise PersistenceError(f"Could not save placements: {exc}") from exc

    def close(self) -> None:
        self._client.close()


def _decode(payload: dict) -> List[Placement]:
    return [placement_from_dict(item) for item in payload["placements"]]
