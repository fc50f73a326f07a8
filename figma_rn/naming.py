"""
Identifier generation for generated source.

Design layer names are free text ("Sign up / Primary", "Frame 12"); everything
here turns them into deterministic, collision-free JavaScript identifiers.
"""

import re
from typing import Dict, Optional

_GENERIC_NAME_RE = re.compile(
    r"^(frame|group|rectangle|ellipse|vector|text|instance|component|line|polygon|star|layer)"
    r"[\s_-]*\d*$",
    re.I,
)
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|\d+")

# JavaScript/TypeScript words that cannot name a binding
JS_RESERVED_WORDS = frozenset({
    "break", "case", "catch", "class", "const", "continue", "debugger", "default",
    "delete", "do", "else", "enum", "export", "extends", "false", "finally", "for",
    "function", "if", "import", "in", "instanceof", "new", "null", "return", "super",
    "switch", "this", "throw", "true", "try", "typeof", "var", "void", "while", "with",
    "yield", "let", "static", "implements", "interface", "package", "private",
    "protected", "public", "await", "arguments", "eval", "undefined",
})

# Names the generated component declares itself
GENERATED_NAMES = frozenset({
    "styles", "stylesheet", "createStyles", "theme", "item", "index",
    "useTheme", "useMemo", "useStyles", "createStyleSheet",
})

RESERVED_NAMES = JS_RESERVED_WORDS | GENERATED_NAMES


def _words(name: str):
    return _WORD_RE.findall(re.sub(r"[^A-Za-z0-9]+", " ", name))


def to_valid_identifier(name: str) -> str:
    """'Sign up / Primary' → 'signUpPrimary'; '2 col' → 'style2Col'."""
    words = _words(name)
    if not words:
        return "element"
    ident = words[0].lower() + "".join(w.capitalize() for w in words[1:])
    if ident[0].isdigit():
        ident = "style" + ident[0].upper() + ident[1:]
    return ident


def to_pascal_case(name: str) -> str:
    ident = to_valid_identifier(name)
    return ident[0].upper() + ident[1:]


def to_constant_case(name: str) -> str:
    """'productCard' → 'PRODUCT_CARD'."""
    words = _words(to_valid_identifier(name))
    return "_".join(w.upper() for w in words)


def is_generic_name(name: str) -> bool:
    return bool(_GENERIC_NAME_RE.match(name.strip()))


class NameRegistry:
    """Hands out unique identifiers, suffixing 1, 2, ... on collision."""

    def __init__(self, reserved=()):
        self._taken: Dict[str, int] = {name: 0 for name in reserved}

    def __contains__(self, name: str) -> bool:
        return name in self._taken

    def claim(self, base: str) -> str:
        if base not in self._taken:
            self._taken[base] = 0
            return base
        counter = self._taken[base]
        while True:
            counter += 1
            candidate = f"{base}{counter}"
            if candidate not in self._taken:
                self._taken[base] = counter
                self._taken[candidate] = 0
                return candidate


def style_base_name(name: str, kind: str) -> str:
    """Style key for a node: its layer name, or its role for generic layer names."""
    if is_generic_name(name):
        return kind[0].lower() + kind[1:]
    return to_valid_identifier(name)


def preview_ir_tree(ir_tree: dict, indent: int = 0, bindings: Optional[dict] = None) -> str:
    """Debug view of a serialized IR tree."""
    lines = []
    prefix = "  " * indent
    label = f"{prefix}├─ {ir_tree.get('name', '???')}  [{ir_tree.get('kind', '?')}]"
    if ir_tree.get("text"):
        label += f'  "{ir_tree["text"]}"'
    if bindings and ir_tree.get("id") in bindings:
        label += f"  → {bindings[ir_tree['id']]}"
    if ir_tree.get("kind") == "Repeater":
        label += f"  ×{ir_tree.get('count', 0)}"
    lines.append(label)
    children = ir_tree.get("children", [])
    if ir_tree.get("template"):
        children = [ir_tree["template"]]
    for child in children:
        lines.append(preview_ir_tree(child, indent + 1, bindings))
    return "\n".join(lines)
