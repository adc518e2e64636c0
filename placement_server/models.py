from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Literal, Optional


def _clamp01(v: float) -> float:
    return max(0.0, min(1.0, v))


class PlacementRect(BaseModel):
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0

    @field_validator("x", "y", "w", "h")
    @classmethod
    def clamp_unit(cls, v: float) -> float:
        return _clamp01(v)


class PlacementStyle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    font_size: float = Field(12, alias="fontSize")
    align: Literal["left", "center", "right"] = "left"
    multiline: bool = False
    line_height: float = Field(14, alias="lineHeight")


class Placement(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None  # required; checked by the route so it answers 400
    field_key: str = Field(alias="fieldKey")
    label: str = ""
    page_index: int = Field(0, alias="pageIndex", ge=0)
    rect: PlacementRect = Field(default_factory=PlacementRect)
    style: PlacementStyle = Field(default_factory=PlacementStyle)

    @field_validator("label", mode="before")
    @classmethod
    def label_default(cls, v):
        return v or ""


class PlacementList(BaseModel):
    placements: List[Placement] = []
