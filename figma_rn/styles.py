"""
Style extraction and design-token collection.

``StyleExtractor`` converts the paints, strokes, effects and typography behind
each IR node into ``StyleProps`` and records every visual value it sees into a
``DesignTokens`` table, keyed in first-seen order (color_0, spacing_0, ...).
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from .ir import ButtonIR, IRNode, TextIR
from .keys import ShadowKey, TypographyKey
from .layout import LayoutMeta, PositionDecl
from .nodes import CanonicalNode, Typography

logger = logging.getLogger(__name__)

COLORS = "colors"
SPACING = "spacing"
RADII = "radii"
TYPOGRAPHY = "typography"
SHADOWS = "shadows"
CATEGORIES = (COLORS, SPACING, RADII, TYPOGRAPHY, SHADOWS)

_PREFIX = {COLORS: "color", SPACING: "spacing", RADII: "radius",
           TYPOGRAPHY: "text", SHADOWS: "shadow"}


@dataclass(frozen=True)
class ShadowToken:
    key: ShadowKey
    color: str


@dataclass
class DesignTokens:
    colors: Dict[str, str] = field(default_factory=dict)
    spacing: Dict[str, float] = field(default_factory=dict)
    radii: Dict[str, float] = field(default_factory=dict)
    typography: Dict[str, TypographyKey] = field(default_factory=dict)
    shadows: Dict[str, ShadowToken] = field(default_factory=dict)

    def record(self, category: str, value) -> str:
        """Key for ``value`` in ``category``; identical values share a key."""
        table = getattr(self, category)
        for key, existing in table.items():
            if existing == value:
                return key
        key = f"{_PREFIX[category]}_{len(table)}"
        table[key] = value
        return key

    def to_dict(self) -> dict:
        return {
            COLORS: dict(self.colors),
            SPACING: dict(self.spacing),
            RADII: dict(self.radii),
            TYPOGRAPHY: {k: v.canonical() for k, v in self.typography.items()},
            SHADOWS: {k: {"key": v.key.canonical(), "color": v.color} for k, v in self.shadows.items()},
        }


@dataclass(frozen=True)
class TextStyle:
    typography: Optional[Typography]
    key: Optional[TypographyKey]
    color: Optional[str] = None


@dataclass(frozen=True)
class ShadowStyle:
    key: ShadowKey
    color: str
    opacity: float = 1.0


@dataclass
class StyleProps:
    background: Optional[str] = None
    gradient_stops: Tuple[str, ...] = ()
    border_width: Optional[float] = None
    border_color: Optional[str] = None
    border_style: Optional[str] = None
    border_radius: Optional[object] = None
    shadow: Optional[ShadowStyle] = None
    opacity: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    position: Optional[PositionDecl] = None
    layout: Optional[LayoutMeta] = None
    text: Optional[TextStyle] = None
    label: Optional[TextStyle] = None
    # style property → (token category, DesignTokens key)
    refs: Dict[str, Tuple[str, str]] = field(default_factory=dict)


@dataclass
class StyleBundle:
    styles: Dict[str, StyleProps]
    tokens: DesignTokens


def _topmost_paint(node: CanonicalNode):
    fills = node.visible_fills()
    return fills[-1] if fills else None


class StyleExtractor:
    def __init__(self, tokens: Optional[DesignTokens] = None):
        self.tokens = tokens if tokens is not None else DesignTokens()

    def _color(self, props: StyleProps, prop: str, value: str) -> str:
        props.refs[prop] = (COLORS, self.tokens.record(COLORS, value))
        return value

    def _text_style(self, node: CanonicalNode, props: StyleProps, prefix: str = "") -> TextStyle:
        typo = node.typography
        key = TypographyKey.from_typography(typo) if typo else None
        if key is not None:
            props.refs[prefix + "typography"] = (TYPOGRAPHY, self.tokens.record(TYPOGRAPHY, key))
        color = None
        paint = _topmost_paint(node)
        if paint is not None and paint.color is not None:
            color = self._color(props, prefix + "color", paint.color.hex)
        return TextStyle(typography=typo, key=key, color=color)

    def extract_style(self, ir: IRNode) -> StyleProps:
        node = ir.source
        props = StyleProps(position=ir.position, layout=ir.layout)

        if isinstance(ir, TextIR):
            props.text = self._text_style(node, props)
            if node.opacity < 1:
                props.opacity = round(node.opacity, 2)
            return props

        # background
        paint = _topmost_paint(node)
        if paint is not None and paint.kind == "solid" and paint.color is not None:
            props.background = self._color(props, "backgroundColor", paint.color.hex)
        elif paint is not None and paint.kind == "gradient" and paint.stops:
            props.gradient_stops = tuple(c.hex for c in paint.stops)
            for stop in props.gradient_stops:
                self.tokens.record(COLORS, stop)
            props.background = self._color(props, "backgroundColor", paint.stops[0].hex)

        # border
        strokes = node.visible_strokes()
        if strokes:
            stroke = strokes[0]
            props.border_width = stroke.weight
            props.border_style = stroke.style
            if stroke.color is not None:
                props.border_color = self._color(props, "borderColor", stroke.color.hex)

        # radius
        radius = node.corner_radius
        if isinstance(radius, tuple):
            props.border_radius = radius
            for corner in radius:
                if corner:
                    self.tokens.record(RADII, corner)
        elif radius:
            props.border_radius = radius
            props.refs["borderRadius"] = (RADII, self.tokens.record(RADII, radius))

        # shadow
        for effect in node.effects:
            if effect.visible and effect.kind == "drop_shadow":
                key = ShadowKey(effect.offset_x, effect.offset_y, effect.radius, effect.spread)
                color = effect.color.hex if effect.color else "#000000"
                props.shadow = ShadowStyle(key=key, color=color[:7],
                                           opacity=effect.color.a if effect.color else 1.0)
                props.refs["shadow"] = (SHADOWS, self.tokens.record(SHADOWS, ShadowToken(key, color)))
                break

        if node.opacity < 1:
            props.opacity = round(node.opacity, 2)
        if node.bbox is not None and ir.position is None:
            props.width, props.height = round(node.width), round(node.height)

        # spacing
        meta = ir.layout
        if meta is not None:
            if meta.gap:
                props.refs["gap"] = (SPACING, self.tokens.record(SPACING, meta.gap))
            for side, value in zip(("Top", "Right", "Bottom", "Left"), meta.padding):
                if value:
                    props.refs["padding" + side] = (SPACING, self.tokens.record(SPACING, value))

        if isinstance(ir, ButtonIR) and ir.label_source is not None:
            props.label = self._text_style(ir.label_source, props, prefix="label.")
        return props


def extract_styles(root: IRNode, tokens: Optional[DesignTokens] = None) -> StyleBundle:
    """Style every node of the tree once; Repeater templates are visited once."""
    extractor = StyleExtractor(tokens)
    styles = {}
    for ir in root.walk():
        styles[ir.id] = extractor.extract_style(ir)
    logger.debug("extracted %d colors, %d spacing, %d radii",
                 len(extractor.tokens.colors), len(extractor.tokens.spacing),
                 len(extractor.tokens.radii))
    return StyleBundle(styles=styles, tokens=extractor.tokens)
