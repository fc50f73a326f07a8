"""
Canonical node model.

Every stage after the transformer works on these frozen dataclasses instead of
the loosely-typed Figma JSON. Children are tuples so a tree can be rebuilt with
``dataclasses.replace`` but never edited in place.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

# Per-axis constraint kinds
START = "start"
END = "end"
SCALE = "scale"
CENTER = "center"
STRETCH = "stretch"

VECTOR_TYPES = frozenset({
    "VECTOR", "BOOLEAN_OPERATION", "STAR", "LINE", "ELLIPSE", "REGULAR_POLYGON",
})
WRAPPER_TYPES = frozenset({"FRAME", "GROUP", "INSTANCE", "COMPONENT", "SECTION"})


@dataclass(frozen=True)
class BoundingBox:
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class Constraints:
    horizontal: str = START
    vertical: str = START


@dataclass(frozen=True)
class Color:
    """sRGB color with 0-255 channels and 0..1 alpha."""
    r: int
    g: int
    b: int
    a: float = 1.0

    @property
    def hex(self) -> str:
        base = f"#{self.r:02X}{self.g:02X}{self.b:02X}"
        if self.a < 0.995:
            return base + f"{round(self.a * 255):02X}"
        return base


@dataclass(frozen=True)
class Paint:
    kind: str                       # solid | gradient | image
    color: Optional[Color] = None
    opacity: float = 1.0
    visible: bool = True
    image_ref: Optional[str] = None
    stops: Tuple[Color, ...] = ()


@dataclass(frozen=True)
class Stroke:
    color: Optional[Color]
    weight: float = 1.0
    style: str = "solid"
    visible: bool = True


@dataclass(frozen=True)
class Effect:
    kind: str                       # drop_shadow | inner_shadow | layer_blur | background_blur
    color: Optional[Color] = None
    offset_x: float = 0
    offset_y: float = 0
    radius: float = 0
    spread: float = 0
    visible: bool = True


@dataclass(frozen=True)
class Typography:
    font_family: str = "System"
    font_size: float = 14
    font_weight: int = 400
    line_height: Optional[float] = None
    letter_spacing: float = 0
    text_align: Optional[str] = None


@dataclass(frozen=True)
class AutoLayout:
    direction: str = "column"       # row | column
    gap: float = 0
    padding: Tuple[float, float, float, float] = (0, 0, 0, 0)  # top, right, bottom, left
    main_align: str = "MIN"
    cross_align: str = "MIN"


@dataclass(frozen=True)
class CanonicalNode:
    id: str
    name: str
    type: str
    bbox: Optional[BoundingBox] = None
    constraints: Optional[Constraints] = None
    fills: Tuple[Paint, ...] = ()
    strokes: Tuple[Stroke, ...] = ()
    effects: Tuple[Effect, ...] = ()
    corner_radius: Union[float, Tuple[float, float, float, float], None] = None
    opacity: float = 1.0
    visible: bool = True
    text: Optional[str] = None
    typography: Optional[Typography] = None
    auto_layout: Optional[AutoLayout] = None
    component_id: Optional[str] = None
    children: Tuple["CanonicalNode", ...] = field(default_factory=tuple)

    @property
    def width(self) -> float:
        return self.bbox.width if self.bbox else 0

    @property
    def height(self) -> float:
        return self.bbox.height if self.bbox else 0

    def visible_fills(self) -> Tuple[Paint, ...]:
        return tuple(p for p in self.fills if p.visible and p.opacity > 0)

    def visible_strokes(self) -> Tuple[Stroke, ...]:
        return tuple(s for s in self.strokes if s.visible and s.weight > 0)

    def walk(self):
        """Pre-order traversal including self."""
        yield self
        for child in self.children:
            yield from child.walk()
