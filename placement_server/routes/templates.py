from fastapi import APIRouter, HTTPException
from placement_server.models import PlacementList
from placement_server import storage
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/templates")
def get_templates():
    templates = storage.list_templates()
    logger.info("GET /templates — %d templates with placements", len(templates))
    return {"templates": templates}


@router.get("/templates/{template_id}/placements")
def get_placements(template_id: str):
    logger.info("GET /templates/%s/placements — loading placements", template_id)
    placements = storage.load_placements(template_id)
    logger.info("GET /templates/%s/placements — returned %d placements", template_id, len(placements))
    return {"placements": placements}


@router.put("/templates/{template_id}/placements")
def put_placements(template_id: str, body: PlacementList):
    logger.info("PUT /templates/%s/placements — saving %d placements", template_id, len(body.placements))
    seen = set()
    for p in body.placements:
        if not p.id:
            raise HTTPException(status_code=400, detail="Every placement needs an id")
        if p.id in seen:
            raise HTTPException(status_code=400, detail=f"Duplicate placement id: {p.id}")
        seen.add(p.id)

    normalized = [p.model_dump(by_alias=True) for p in body.placements]
    storage.save_placements(template_id, normalized)
    logger.info("PUT /templates/%s/placements — saved successfully", template_id)
    return {"placements": normalized}
