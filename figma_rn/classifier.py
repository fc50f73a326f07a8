"""
Semantic classification.

Each role is a pure predicate over a CanonicalNode. ``ROLE_PREDICATES`` fixes the
priority: the first predicate that answers yes decides the IR variant, and
anything left over becomes a Container.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .ir import (
    ButtonIR, CardIR, ContainerIR, IconIR, ImageIR, IRNode, RepeaterIR, TextIR,
)
from .keys import TypographyKey
from .layout import NodeLayout, resolve_layout
from .nodes import CanonicalNode, VECTOR_TYPES, WRAPPER_TYPES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetDetectionConfig:
    """Thresholds for the shape heuristics.

    The defaults target mobile screens designed at 1x: icons between 8 and 48
    units, buttons no taller than 80 units.
    """
    image_extensions: Tuple[str, ...] = (".png", ".jpg", ".jpeg", ".gif", ".webp")
    icon_min_size: float = 8
    icon_max_size: float = 48
    icon_aspect_range: Tuple[float, float] = (0.5, 2.0)
    button_max_height: float = 80
    button_min_width: float = 40
    button_name_hints: Tuple[str, ...] = ("button", "btn", "cta")
    card_min_size: float = 60
    repeater_min_items: int = 2


DEFAULT_ASSET_CONFIG = AssetDetectionConfig()


# ─── helpers ────────────────────────────────────────────────

def _image_paint(node: CanonicalNode):
    for paint in node.visible_fills():
        if paint.kind == "image":
            return paint
    return None


def _is_vector_only(node: CanonicalNode) -> bool:
    if node.type in VECTOR_TYPES:
        return True
    return (
        node.type in WRAPPER_TYPES
        and bool(node.children)
        and all(_is_vector_only(c) for c in node.children)
    )


def _text_descendants(node: CanonicalNode):
    return [n for n in node.walk() if n is not node and n.type == "TEXT" and n.text is not None]


def _has_surface(node: CanonicalNode) -> bool:
    return bool(node.visible_fills() or node.visible_strokes())


def shape_signature(node: CanonicalNode, depth: int = 3):
    """Type tree of ``node`` down to ``depth`` levels, ignoring names and content."""
    if depth == 0:
        return (node.type, len(node.children))
    return (node.type, tuple(shape_signature(c, depth - 1) for c in node.children))


# ─── role predicates ────────────────────────────────────────

def is_text(node: CanonicalNode, config: AssetDetectionConfig = DEFAULT_ASSET_CONFIG) -> bool:
    return node.type == "TEXT" and node.text is not None


def is_image(node: CanonicalNode, config: AssetDetectionConfig = DEFAULT_ASSET_CONFIG) -> bool:
    if _image_paint(node) is not None:
        return True
    return node.name.lower().endswith(config.image_extensions)


def is_icon(node: CanonicalNode, config: AssetDetectionConfig = DEFAULT_ASSET_CONFIG) -> bool:
    if not _is_vector_only(node) or node.bbox is None:
        return False
    w, h = node.width, node.height
    if min(w, h) <= 0:
        return False
    low, high = config.icon_aspect_range
    return (
        config.icon_min_size <= max(w, h) <= config.icon_max_size
        and low <= w / h <= high
    )


def is_button(node: CanonicalNode, config: AssetDetectionConfig = DEFAULT_ASSET_CONFIG) -> bool:
    if not node.children or node.bbox is None:
        return False
    texts = _text_descendants(node)
    if not texts:
        return False
    if node.height > config.button_max_height or node.width < config.button_min_width:
        return False
    lowered = node.name.lower()
    if any(hint in lowered for hint in config.button_name_hints):
        return True
    return _has_surface(node) and len(texts) == 1 and node.width >= node.height


def is_card(node: CanonicalNode, config: AssetDetectionConfig = DEFAULT_ASSET_CONFIG) -> bool:
    if len(node.children) < 2 or not _has_surface(node):
        return False
    if min(node.width, node.height) < config.card_min_size:
        return False
    return len({shape_signature(c) for c in node.children}) > 1


def is_repeater(node: CanonicalNode, config: AssetDetectionConfig = DEFAULT_ASSET_CONFIG) -> bool:
    children = node.children
    if len(children) < config.repeater_min_items:
        return False
    component_ids = {c.component_id for c in children}
    if len(component_ids) == 1 and None not in component_ids:
        return True
    if not all(c.children for c in children):
        return False
    return len({shape_signature(c) for c in children}) == 1


ROLE_PREDICATES: Tuple[Tuple[str, Callable[..., bool]], ...] = (
    ("Text", is_text),
    ("Image", is_image),
    ("Icon", is_icon),
    ("Button", is_button),
    ("Card", is_card),
    ("Repeater", is_repeater),
)


def classify_role(node: CanonicalNode, config: AssetDetectionConfig = DEFAULT_ASSET_CONFIG) -> str:
    for role, predicate in ROLE_PREDICATES:
        if predicate(node, config):
            return role
    return "Container"


# ─── IR construction ────────────────────────────────────────

def _content_slots(ir: IRNode, path: Tuple[int, ...] = ()):
    """(index path, node) for each Text/Image reachable without crossing a Repeater."""
    if isinstance(ir, (TextIR, ImageIR)):
        yield path, ir
        return
    if isinstance(ir, RepeaterIR):
        return
    for i, child in enumerate(ir.children):
        yield from _content_slots(child, path + (i,))


def _slot_value(node: CanonicalNode, path: Tuple[int, ...], slot: IRNode) -> str:
    for i in path:
        if i >= len(node.children):
            node = None
            break
        node = node.children[i]
    if isinstance(slot, TextIR):
        return node.text if node is not None and node.text is not None else slot.text
    paint = _image_paint(node) if node is not None else None
    return paint.image_ref if paint is not None else slot.image_ref


class Classifier:
    """Builds the IR tree for one canonical tree."""

    def __init__(self, config: AssetDetectionConfig = DEFAULT_ASSET_CONFIG,
                 layout: Optional[Dict[str, NodeLayout]] = None):
        self.config = config
        self.layout = layout or {}

    def build(self, node: CanonicalNode) -> IRNode:
        role = classify_role(node, self.config)
        logger.debug("%s '%s' → %s", node.id, node.name, role)
        placed = self.layout.get(node.id)
        common = dict(
            id=node.id,
            name=node.name,
            source=node,
            bbox=node.bbox,
            position=placed.position if placed else None,
            layout=placed.meta if placed else None,
        )

        if role == "Text":
            key = TypographyKey.from_typography(node.typography) if node.typography else None
            return TextIR(text=node.text, typography_key=key, **common)
        if role == "Image":
            paint = _image_paint(node)
            return ImageIR(image_ref=paint.image_ref if paint else node.name, **common)
        if role == "Icon":
            return IconIR(size=max(node.width, node.height), **common)
        if role == "Button":
            label = _text_descendants(node)[0]
            if node.visible_fills():
                variant = "primary"
            elif node.visible_strokes():
                variant = "outline"
            else:
                variant = "ghost"
            return ButtonIR(label=label.text, variant=variant, label_source=label, **common)
        if role == "Repeater":
            template = self.build(node.children[0])
            slots = list(_content_slots(template))
            items = tuple(
                tuple(_slot_value(child, path, slot) for path, slot in slots)
                for child in node.children
            )
            return RepeaterIR(template=template, count=len(node.children), items=items, **common)

        children = tuple(self.build(c) for c in node.children)
        if role == "Card":
            return CardIR(children=children, **common)
        return ContainerIR(children=children, **common)


def content_slots(ir: IRNode):
    return list(_content_slots(ir))


def classify(node: CanonicalNode, config: AssetDetectionConfig = DEFAULT_ASSET_CONFIG,
             layout: Optional[Dict[str, NodeLayout]] = None) -> IRNode:
    """Classify ``node`` and its subtree into IR variants."""
    if layout is None:
        layout = resolve_layout(node)
    return Classifier(config, layout).build(node)
