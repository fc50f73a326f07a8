"""
Layout resolution: edge constraints → positioning declarations.

``map_constraints`` turns Figma's per-axis constraints into absolute offsets
(pixels or percentages of the parent). ``detect_layout`` decides whether a
container flows its children as a row, a column, or positions them absolutely.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from .nodes import BoundingBox, CanonicalNode, CENTER, END, SCALE, START, STRETCH

Offset = Union[int, float, str]

ALIGNMENT_THRESHOLD = 2
ALIGNMENT_SPREAD = ALIGNMENT_THRESHOLD + 20


@dataclass(frozen=True)
class PositionDecl:
    left: Optional[Offset] = None
    right: Optional[Offset] = None
    top: Optional[Offset] = None
    bottom: Optional[Offset] = None
    width: Optional[Offset] = None
    height: Optional[Offset] = None
    position: str = "absolute"

    def to_style(self) -> dict:
        style = {"position": self.position}
        for key in ("left", "right", "top", "bottom", "width", "height"):
            value = getattr(self, key)
            if value is not None:
                style[key] = value
        return style


@dataclass(frozen=True)
class LayoutMeta:
    kind: str                       # row | column | absolute
    gap: float = 0
    padding: Tuple[float, float, float, float] = (0, 0, 0, 0)
    justify: Optional[str] = None
    align: Optional[str] = None


@dataclass(frozen=True)
class NodeLayout:
    meta: LayoutMeta
    position: Optional[PositionDecl] = None


def format_percent(value: float) -> str:
    """70.7628 → "70.76%", 50.0 → "50%"."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return f"{text}%"


def _axis(kind: str, offset: float, size: float, parent_size: float):
    """(start, end, size) for one axis."""
    if kind == SCALE and parent_size > 0:
        return (format_percent(offset / parent_size * 100), None,
                format_percent(size / parent_size * 100))
    if kind == END:
        return None, int(round(parent_size - (offset + size))), size
    if kind == STRETCH:
        return offset, int(round(parent_size - (offset + size))), "auto"
    # START, CENTER and SCALE on a zero-sized parent
    return offset, None, size


def map_constraints(node: CanonicalNode, parent_bounds: Optional[BoundingBox]) -> Optional[PositionDecl]:
    """Position ``node`` inside ``parent_bounds`` according to its constraints."""
    if node.constraints is None or parent_bounds is None or node.bbox is None:
        return None
    box = node.bbox
    left, right, width = _axis(node.constraints.horizontal, box.x - parent_bounds.x,
                               box.width, parent_bounds.width)
    top, bottom, height = _axis(node.constraints.vertical, box.y - parent_bounds.y,
                                box.height, parent_bounds.height)
    return PositionDecl(left=left, right=right, top=top, bottom=bottom,
                        width=width, height=height)


# ── flow detection ──────────────────────────────────────────

_JUSTIFY = {"MIN": "flex-start", "CENTER": "center", "MAX": "flex-end",
            "SPACE_BETWEEN": "space-between"}
_ALIGN = {"MIN": "flex-start", "CENTER": "center", "MAX": "flex-end",
          "STRETCH": "stretch", "BASELINE": "baseline"}


def _is_row(children) -> bool:
    tops = [c.bbox.y for c in children]
    if max(tops) - min(tops) > ALIGNMENT_SPREAD:
        return False
    ordered = sorted(children, key=lambda c: c.bbox.x)
    return all(
        cur.bbox.x >= prev.bbox.x + prev.bbox.width - ALIGNMENT_THRESHOLD
        for prev, cur in zip(ordered, ordered[1:])
    )


def _is_column(children) -> bool:
    lefts = [c.bbox.x for c in children]
    if max(lefts) - min(lefts) > ALIGNMENT_SPREAD:
        return False
    ordered = sorted(children, key=lambda c: c.bbox.y)
    return all(
        cur.bbox.y >= prev.bbox.y + prev.bbox.height - ALIGNMENT_THRESHOLD
        for prev, cur in zip(ordered, ordered[1:])
    )


def _average_gap(children, horizontal: bool) -> float:
    if horizontal:
        ordered = sorted(children, key=lambda c: c.bbox.x)
        gaps = [cur.bbox.x - (prev.bbox.x + prev.bbox.width) for prev, cur in zip(ordered, ordered[1:])]
    else:
        ordered = sorted(children, key=lambda c: c.bbox.y)
        gaps = [cur.bbox.y - (prev.bbox.y + prev.bbox.height) for prev, cur in zip(ordered, ordered[1:])]
    if not gaps:
        return 0
    return round(sum(max(0, g) for g in gaps) / len(gaps))


def detect_layout(node: CanonicalNode) -> LayoutMeta:
    """Row, column or absolute for a container's children."""
    auto = node.auto_layout
    if auto is not None:
        return LayoutMeta(
            kind=auto.direction,
            gap=auto.gap,
            padding=auto.padding,
            justify=_JUSTIFY.get(auto.main_align),
            align=_ALIGN.get(auto.cross_align),
        )
    children = [c for c in node.children if c.bbox is not None]
    if len(children) < 2:
        return LayoutMeta(kind="column")
    if _is_row(children):
        return LayoutMeta(kind="row", gap=_average_gap(children, horizontal=True))
    if _is_column(children):
        return LayoutMeta(kind="column", gap=_average_gap(children, horizontal=False))
    return LayoutMeta(kind="absolute")


def resolve_layout(root: CanonicalNode) -> Dict[str, NodeLayout]:
    """Layout meta for every node; positions only for children of absolute parents."""
    result: Dict[str, NodeLayout] = {}

    def visit(node: CanonicalNode, parent: Optional[CanonicalNode], parent_meta: Optional[LayoutMeta]):
        meta = detect_layout(node)
        position = None
        if parent is not None and parent_meta is not None and parent_meta.kind == "absolute":
            position = map_constraints(node, parent.bbox)
        result[node.id] = NodeLayout(meta=meta, position=position)
        for child in node.children:
            visit(child, node, meta)

    visit(root, None, None)
    return result
