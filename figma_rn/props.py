"""
Component prop extraction.

Text and image content becomes component input. Names live in a side table
(``ExtractedProps.bindings``, node id → prop name) so the IR stays untouched.

Repeaters are a traversal boundary: their template content is named in the
item component's own scope (see ``item_fields``) and is never deduplicated
against identical content elsewhere on the screen.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from .classifier import content_slots
from .ir import ImageIR, IRNode, RepeaterIR, TextIR
from .naming import RESERVED_NAMES, NameRegistry, is_generic_name, to_valid_identifier

# Text layers only, checked in order. Substring matches, so "Card Subtitle"
# hits description before title.
SEMANTIC_OVERRIDES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("description", "subtitle", "body"), "description"),
    (("title",), "title"),
    (("price",), "price"),
    (("date", "time"), "dateTime"),
)

# Whole-name matches: "Header" is a title, "Header Icon" is not.
EXACT_OVERRIDES: Dict[str, str] = {
    "header": "title",
    "headline": "title",
    "heading": "title",
    "label": "label",
    "placeholder": "placeholder",
}


@dataclass(frozen=True)
class PropSpec:
    kind: str                       # text | image
    value: str


@dataclass
class ExtractedProps:
    props: Dict[str, PropSpec] = field(default_factory=dict)
    bindings: Dict[str, str] = field(default_factory=dict)
    collections: Dict[str, str] = field(default_factory=dict)

    def name_for(self, node_id: str):
        return self.bindings.get(node_id)

    def to_dict(self) -> dict:
        return {
            "props": {k: {"kind": v.kind, "value": v.value} for k, v in self.props.items()},
            "bindings": dict(self.bindings),
            "collections": dict(self.collections),
        }


def _content(ir: IRNode) -> Tuple[str, str]:
    if isinstance(ir, TextIR):
        return "text", ir.text
    return "image", ir.image_ref


def base_prop_name(name: str, kind: str) -> str:
    """Semantic name for a content layer.

    Overrides apply to text only; an image named "Title Image" stays
    ``titleImage``. Names that would clash with a JavaScript keyword or with
    a binding the generated component declares get the kind appended
    ("Delete" → ``deleteText``).
    """
    if kind == "text":
        lowered = name.strip().lower()
        if lowered in EXACT_OVERRIDES:
            return EXACT_OVERRIDES[lowered]
        for words, prop in SEMANTIC_OVERRIDES:
            if any(word in lowered for word in words):
                return prop
    if is_generic_name(name):
        return kind
    base = to_valid_identifier(name)
    if base in RESERVED_NAMES:
        base += kind.title()
    return base


def extract_props(root: IRNode) -> ExtractedProps:
    """Assign prop names to every Text/Image outside of Repeater templates."""
    result = ExtractedProps()
    by_content: Dict[Tuple[str, str, str], str] = {}

    def visit(ir: IRNode):
        if isinstance(ir, RepeaterIR):
            base = to_valid_identifier(ir.name) + "Items"
            name, counter = base, 0
            while (name in result.props or name in result.collections.values()
                   or name in RESERVED_NAMES):
                counter += 1
                name = f"{base}{counter}"
            result.collections[ir.id] = name
            return
        if isinstance(ir, (TextIR, ImageIR)):
            kind, value = _content(ir)
            content_key = (ir.name, kind, value)
            if content_key in by_content:
                result.bindings[ir.id] = by_content[content_key]
                return
            spec = PropSpec(kind, value)
            base = base_prop_name(ir.name, kind)
            name, counter = base, 0
            while name in result.props or name in result.collections.values():
                if result.props.get(name) == spec:
                    break
                counter += 1
                name = f"{base}{counter}"
            result.props[name] = spec
            by_content[content_key] = name
            result.bindings[ir.id] = name
            return
        for child in ir.children:
            visit(child)

    visit(root)
    return result


def item_fields(repeater: RepeaterIR) -> List[Tuple[str, IRNode]]:
    """(field name, slot node) for each content slot of a Repeater's template."""
    if repeater.template is None:
        return []
    registry = NameRegistry(reserved=RESERVED_NAMES)
    fields = []
    for _, slot in content_slots(repeater.template):
        kind, _ = _content(slot)
        fields.append((registry.claim(base_prop_name(slot.name, kind)), slot))
    return fields
