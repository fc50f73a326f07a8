"""
Figma node JSON → CanonicalNode

Reads the raw ``document`` record of a ``GET /v1/files/:key/nodes`` response and
produces the typed canonical tree. Missing optional fields are treated as absent.
"""

import logging
from typing import Optional

from .nodes import (
    AutoLayout, BoundingBox, CanonicalNode, Color, Constraints, Effect, Paint,
    Stroke, Typography, CENTER, END, SCALE, START, STRETCH,
)

logger = logging.getLogger(__name__)


class InvalidDocumentError(ValueError):
    """Raised when the root document is missing or not a node record."""


_CONSTRAINT_MAP = {
    "LEFT": START, "TOP": START, "MIN": START,
    "RIGHT": END, "BOTTOM": END, "MAX": END,
    "SCALE": SCALE,
    "CENTER": CENTER,
    "LEFT_RIGHT": STRETCH, "TOP_BOTTOM": STRETCH, "STRETCH": STRETCH,
}

_EFFECT_MAP = {
    "DROP_SHADOW": "drop_shadow",
    "INNER_SHADOW": "inner_shadow",
    "LAYER_BLUR": "layer_blur",
    "BACKGROUND_BLUR": "background_blur",
}

_TEXT_ALIGN = {"LEFT": "left", "CENTER": "center", "RIGHT": "right", "JUSTIFIED": "justify"}

# id for a root record that carries none
ROOT_PATH = "0"


def unwrap_nodes_response(response: dict, node_id: str) -> dict:
    """Pull ``nodes[node_id].document`` out of a nodes response."""
    nodes = response.get("nodes") if isinstance(response, dict) else None
    if not isinstance(nodes, dict):
        raise InvalidDocumentError("response has no 'nodes' object")
    entry = nodes.get(node_id) or nodes.get(node_id.replace("-", ":"))
    document = entry.get("document") if isinstance(entry, dict) else None
    if not isinstance(document, dict):
        raise InvalidDocumentError(f"node '{node_id}' not found in response")
    return document


class FigmaTransformer:
    """Converts raw Figma node dicts into canonical nodes."""

    def convert(self, raw: dict, path: str = ROOT_PATH) -> CanonicalNode:
        """Convert one record; nodes without an id are named by their child-index path."""
        node_type = raw.get("type") or "FRAME"
        node_id = raw.get("id")
        node_id = str(node_id) if node_id not in (None, "") else path
        children = tuple(
            self.convert(c, f"{node_id}/{i}")
            for i, c in enumerate(raw.get("children") or [])
            if isinstance(c, dict)
        )
        opacity = raw.get("opacity")
        return CanonicalNode(
            id=node_id,
            name=raw.get("name") or node_type.title(),
            type=node_type,
            bbox=self._bbox(raw.get("absoluteBoundingBox")),
            constraints=self._constraints(raw.get("constraints")),
            fills=tuple(p for p in map(self._paint, raw.get("fills") or []) if p),
            strokes=self._strokes(raw),
            effects=tuple(e for e in map(self._effect, raw.get("effects") or []) if e),
            corner_radius=self._corner_radius(raw),
            opacity=1.0 if opacity is None else float(opacity),
            visible=raw.get("visible", True) is not False,
            text=raw.get("characters") if node_type == "TEXT" else None,
            typography=self._typography(raw) if node_type == "TEXT" else None,
            auto_layout=self._auto_layout(raw),
            component_id=raw.get("componentId"),
            children=children,
        )

    # ── geometry ─────────────────────────────────────────────

    def _bbox(self, box) -> Optional[BoundingBox]:
        if not isinstance(box, dict):
            return None
        return BoundingBox(
            x=box.get("x", 0) or 0,
            y=box.get("y", 0) or 0,
            width=box.get("width", 0) or 0,
            height=box.get("height", 0) or 0,
        )

    def _constraints(self, raw) -> Optional[Constraints]:
        if not isinstance(raw, dict):
            return None
        return Constraints(
            horizontal=_CONSTRAINT_MAP.get(raw.get("horizontal", "LEFT"), START),
            vertical=_CONSTRAINT_MAP.get(raw.get("vertical", "TOP"), START),
        )

    def _corner_radius(self, raw: dict):
        corners = raw.get("rectangleCornerRadii")
        if isinstance(corners, list) and len(corners) == 4:
            if len(set(corners)) == 1:
                return corners[0] or None
            return tuple(corners)
        radius = raw.get("cornerRadius")
        return radius if radius else None

    def _auto_layout(self, raw: dict) -> Optional[AutoLayout]:
        mode = raw.get("layoutMode")
        if mode in (None, "NONE"):
            return None
        return AutoLayout(
            direction="row" if mode == "HORIZONTAL" else "column",
            gap=raw.get("itemSpacing", 0) or 0,
            padding=(
                raw.get("paddingTop", 0) or 0,
                raw.get("paddingRight", 0) or 0,
                raw.get("paddingBottom", 0) or 0,
                raw.get("paddingLeft", 0) or 0,
            ),
            main_align=raw.get("primaryAxisAlignItems", "MIN"),
            cross_align=raw.get("counterAxisAlignItems", "MIN"),
        )

    # ── paints & effects ─────────────────────────────────────

    def _color(self, c, opacity: float = 1.0) -> Optional[Color]:
        if not isinstance(c, dict):
            return None
        return Color(
            r=round(c.get("r", 0) * 255),
            g=round(c.get("g", 0) * 255),
            b=round(c.get("b", 0) * 255),
            a=round(c.get("a", 1) * opacity, 3),
        )

    def _paint(self, fill: dict) -> Optional[Paint]:
        if not isinstance(fill, dict):
            return None
        paint_type = fill.get("type", "SOLID")
        opacity = fill.get("opacity", 1.0)
        visible = fill.get("visible", True) is not False
        if paint_type == "SOLID":
            return Paint("solid", color=self._color(fill.get("color"), opacity),
                         opacity=opacity, visible=visible)
        if paint_type == "IMAGE":
            return Paint("image", opacity=opacity, visible=visible,
                         image_ref=fill.get("imageRef") or "")
        if paint_type.startswith("GRADIENT"):
            stops = tuple(
                c for c in (self._color(s.get("color")) for s in fill.get("gradientStops", []))
                if c
            )
            return Paint("gradient", opacity=opacity, visible=visible, stops=stops)
        logger.debug("skipping unsupported paint type %s", paint_type)
        return None

    def _strokes(self, raw: dict):
        weight = raw.get("strokeWeight", 1)
        style = "dashed" if raw.get("strokeDashes") else "solid"
        result = []
        for stroke in raw.get("strokes") or []:
            if not isinstance(stroke, dict) or stroke.get("type", "SOLID") != "SOLID":
                continue
            result.append(Stroke(
                color=self._color(stroke.get("color"), stroke.get("opacity", 1.0)),
                weight=weight,
                style=style,
                visible=stroke.get("visible", True) is not False,
            ))
        return tuple(result)

    def _effect(self, effect: dict) -> Optional[Effect]:
        if not isinstance(effect, dict):
            return None
        kind = _EFFECT_MAP.get(effect.get("type"))
        if kind is None:
            return None
        offset = effect.get("offset") or {}
        return Effect(
            kind=kind,
            color=self._color(effect.get("color")),
            offset_x=offset.get("x", 0),
            offset_y=offset.get("y", 0),
            radius=effect.get("radius", 0),
            spread=effect.get("spread", 0),
            visible=effect.get("visible", True) is not False,
        )

    def _typography(self, raw: dict) -> Optional[Typography]:
        style = raw.get("style")
        if not isinstance(style, dict):
            return None
        return Typography(
            font_family=style.get("fontFamily", "System"),
            font_size=style.get("fontSize", 14),
            font_weight=style.get("fontWeight", 400),
            line_height=style.get("lineHeightPx"),
            letter_spacing=style.get("letterSpacing", 0) or 0,
            text_align=_TEXT_ALIGN.get(style.get("textAlignHorizontal")),
        )


def transform(raw: dict) -> CanonicalNode:
    """Convert a raw node record into a CanonicalNode tree."""
    if not isinstance(raw, dict) or not raw:
        raise InvalidDocumentError("root document is missing or not an object")
    return FigmaTransformer().convert(raw)
