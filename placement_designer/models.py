"""Data models for the placement designer."""
import copy
from dataclasses import dataclass, field
from typing import Optional

ALIGNMENTS = ("left", "center", "right")

DEFAULT_FONT_SIZE = 12
DEFAULT_LINE_HEIGHT = 14


@dataclass
class Rect:
    """Normalized rectangle: every component is a fraction (0.0–1.0) of the page."""
    x: float = 0.0
    y: float = 0.0
    w: float = 0.0
    h: float = 0.0


@dataclass
class PixelRect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def center(self) -> tuple:
        return self.left + self.width / 2, self.top + self.height / 2


@dataclass(frozen=True)
class PageSize:
    """Pixel size of the currently rendered page."""
    width: float
    height: float


@dataclass(frozen=True)
class VisibleRegion:
    """Part of the scroll host that is on screen, in page-local pixels.

    *left*/*top* may be negative (page scrolled partly into view) or exceed the
    page size; consumers clamp as needed.
    """
    left: float
    top: float
    width: float
    height: float

    def contains(self, x: float, y: float) -> bool:
        return (self.left <= x <= self.left + self.width
                and self.top <= y <= self.top + self.height)


@dataclass
class PlacementStyle:
    font_size: float = DEFAULT_FONT_SIZE
    align: str = "left"       # "left" | "center" | "right"
    multiline: bool = False   # False = single line, truncated
    line_height: float = DEFAULT_LINE_HEIGHT


@dataclass
class Placement:
    id: str
    field_key: str
    page_index: int           # 0-based page index
    rect: Rect = field(default_factory=Rect)
    style: PlacementStyle = field(default_factory=PlacementStyle)
    label: str = ""           # optional display label; UI falls back to field_key

    def display_label(self) -> str:
        return self.label or self.field_key

    def clone(self) -> "Placement":
        """Return an independent value copy (rect and style are not shared)."""
        return copy.deepcopy(self)


@dataclass
class FieldDef:
    """Entry of the field catalog a placement can be bound to."""
    key: str
    type: str = "text"
    description: str = ""


@dataclass
class DesignerSettings:
    min_width_px: float = 24.0        # resize floor (width)
    min_height_px: float = 18.0       # resize floor (height)
    spawn_padding_px: float = 24.0    # inset of new fields from the visible top-left
    spawn_step_px: float = 14.0       # diagonal step from the previous field
    default_width_px: float = 140.0
    default_height_px: float = 42.0
    default_width_ratio: float = 0.25
    default_height_ratio: float = 0.04
    page_width_min: float = 280.0
    page_width_max: float = 1200.0
    container_padding_px: float = 32.0
    measure_floor_px: float = 50.0    # smaller page measurements are discarded
    paste_offset: float = 0.02        # normalized offset applied on paste
    history_limit: int = 50           # undo steps kept
    api_url: Optional[str] = None     # None = store placements in local JSON files
    http_timeout: float = 10.0
    debug_mode: bool = False          # debug log level and designer.log file


# ── JSON wire format ─────────────────────────────────────────────────────────

def placement_to_dict(p: Placement) -> dict:
    return {
        "id": p.id,
        "fieldKey": p.field_key,
        "label": p.label,
        "pageIndex": p.page_index,
        "rect": {"x": p.rect.x, "y": p.rect.y, "w": p.rect.w, "h": p.rect.h},
        "style": {
            "fontSize": p.style.font_size,
            "align": p.style.align,
            "multiline": p.style.multiline,
            "lineHeight": p.style.line_height,
        },
    }


def placement_from_dict(data: dict) -> Placement:
    """Build a Placement from its JSON form; missing style/label use defaults."""
    r = data.get("rect") or {}
    s = data.get("style") or {}
    align = s.get("align", "left")
    if align not in ALIGNMENTS:
        align = "left"
    return Placement(
        id=str(data["id"]),
        field_key=str(data["fieldKey"]),
        page_index=max(0, int(data.get("pageIndex", 0))),
        rect=Rect(
            x=float(r.get("x", 0.0)),
            y=float(r.get("y", 0.0)),
            w=float(r.get("w", 0.0)),
            h=float(r.get("h", 0.0)),
        ),
        style=PlacementStyle(
            font_size=float(s.get("fontSize", DEFAULT_FONT_SIZE)),
            align=align,
            multiline=bool(s.get("multiline", False)),
            line_height=float(s.get("lineHeight", DEFAULT_LINE_HEIGHT)),
        ),
        label=data.get("label") or "",
    )
