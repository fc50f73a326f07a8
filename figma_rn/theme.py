"""
Project theme → ProjectTokens.

Walks a theme object (as loaded from JSON) and indexes its values by category.
Paths are dotted and rooted at ``theme`` so they can be emitted verbatim
(``theme.colors.primary``). When two paths hold the same value the first one
encountered wins.
"""

import json
import logging
import re
from pathlib import Path
from typing import Optional, Union

from .keys import ShadowKey, TypographyKey
from .token_matcher import ProjectTokens

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r"^#[0-9A-Fa-f]{6}([0-9A-Fa-f]{2})?$")
_SPACING_WORDS = ("spacing", "space", "gap", "margin", "padding")
_RADIUS_WORDS = ("radius", "radii")


def _is_shadow(obj: dict) -> bool:
    return ("offsetX" in obj or "x" in obj) and ("blur" in obj or "radius" in obj)


def _shadow_key(obj: dict) -> str:
    return ShadowKey(
        obj.get("offsetX", obj.get("x", 0)),
        obj.get("offsetY", obj.get("y", 0)),
        obj.get("blur", obj.get("radius", 0)),
        obj.get("spread", 0),
    ).canonical()


def _typography_key(obj: dict) -> str:
    weight = obj.get("fontWeight", 400)
    try:
        weight = int(weight)
    except (TypeError, ValueError):
        weight = 700 if str(weight).lower() == "bold" else 400
    return TypographyKey(
        obj.get("fontFamily", "System"),
        obj["fontSize"],
        weight,
        obj.get("lineHeight"),
        obj.get("letterSpacing", 0),
    ).canonical()


def extract_project_tokens(theme: dict, root: str = "theme") -> ProjectTokens:
    """Index a theme object into value → path dictionaries."""
    tokens = ProjectTokens()

    def add(category: str, value, path: str):
        table = getattr(tokens, category)
        if table is None:
            table = {}
            setattr(tokens, category, table)
        table.setdefault(value, path)

    def walk(obj, path: str):
        if isinstance(obj, dict):
            if _is_shadow(obj):
                add("shadows", _shadow_key(obj), path)
                return
            if "fontSize" in obj and isinstance(obj["fontSize"], (int, float)):
                add("typography", _typography_key(obj), path)
                return
            for key, value in obj.items():
                walk(value, f"{path}.{key}" if path else str(key))
            return
        if isinstance(obj, bool):
            return
        if isinstance(obj, str) and _HEX_RE.match(obj):
            add("colors", obj.upper(), path)
        elif isinstance(obj, (int, float)):
            lowered = path.lower()
            if any(word in lowered for word in _SPACING_WORDS):
                add("spacing", obj, path)
            elif any(word in lowered for word in _RADIUS_WORDS):
                add("radii", obj, path)

    walk(theme, root)
    return tokens


def load_project_tokens(path: Union[str, Path]) -> Optional[ProjectTokens]:
    """Read a JSON theme file; None when the file does not exist."""
    theme_path = Path(path)
    if not theme_path.exists():
        logger.warning("theme file %s not found", theme_path)
        return None
    with open(theme_path, "r", encoding="utf-8") as f:
        theme = json.load(f)
    if not isinstance(theme, dict):
        raise ValueError(f"theme file {theme_path} must contain a JSON object")
    return extract_project_tokens(theme.get("theme", theme))
