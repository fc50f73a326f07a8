"""
ScreenIR node variants.

One frozen dataclass per semantic role. ``source`` keeps the canonical node the
variant was classified from so the style extractor can read paints and effects;
it is left out of ``to_dict()``.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Tuple

from .layout import LayoutMeta, PositionDecl
from .keys import TypographyKey
from .nodes import BoundingBox, CanonicalNode


@dataclass(frozen=True)
class IRNode:
    kind: ClassVar[str] = "Container"

    id: str
    name: str
    source: CanonicalNode = field(repr=False, compare=False)
    bbox: Optional[BoundingBox] = None
    position: Optional[PositionDecl] = None
    layout: Optional[LayoutMeta] = None
    children: Tuple["IRNode", ...] = ()

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()

    def _extra(self) -> dict:
        return {}

    def to_dict(self) -> dict:
        out = {"kind": self.kind, "id": self.id, "name": self.name}
        if self.bbox is not None:
            out["bbox"] = {"x": self.bbox.x, "y": self.bbox.y,
                           "width": self.bbox.width, "height": self.bbox.height}
        if self.position is not None:
            out["position"] = self.position.to_style()
        if self.layout is not None:
            out["layout"] = {"kind": self.layout.kind, "gap": self.layout.gap}
        out.update(self._extra())
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        return out


@dataclass(frozen=True)
class ContainerIR(IRNode):
    kind: ClassVar[str] = "Container"


@dataclass(frozen=True)
class CardIR(IRNode):
    kind: ClassVar[str] = "Card"


@dataclass(frozen=True)
class TextIR(IRNode):
    kind: ClassVar[str] = "Text"
    text: str = ""
    typography_key: Optional[TypographyKey] = None

    def _extra(self) -> dict:
        key = self.typography_key.canonical() if self.typography_key else None
        return {"text": self.text, "typographyKey": key}


@dataclass(frozen=True)
class ImageIR(IRNode):
    kind: ClassVar[str] = "Image"
    image_ref: str = ""

    def _extra(self) -> dict:
        return {"imageRef": self.image_ref}


@dataclass(frozen=True)
class IconIR(IRNode):
    kind: ClassVar[str] = "Icon"
    size: float = 24

    def _extra(self) -> dict:
        return {"size": self.size}


@dataclass(frozen=True)
class ButtonIR(IRNode):
    kind: ClassVar[str] = "Button"
    label: str = ""
    variant: str = "primary"        # primary | outline | ghost
    label_source: Optional[CanonicalNode] = field(default=None, repr=False, compare=False)

    def _extra(self) -> dict:
        return {"label": self.label, "variant": self.variant}


@dataclass(frozen=True)
class RepeaterIR(IRNode):
    """A list rendered from one template item; ``items`` holds per-item contents."""
    kind: ClassVar[str] = "Repeater"
    template: Optional[IRNode] = None
    count: int = 0
    items: Tuple[Tuple[str, ...], ...] = ()

    def walk(self):
        yield self
        if self.template is not None:
            yield from self.template.walk()

    def _extra(self) -> dict:
        return {
            "count": self.count,
            "template": self.template.to_dict() if self.template else None,
            "items": [list(item) for item in self.items],
        }
