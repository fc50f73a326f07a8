"""
Token matching: extracted values → project theme paths.

Colors are matched perceptually through the color matcher; spacing and radii
only match exactly; typography and shadows match on their composite keys.
Values that find no match keep a literal fallback.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Set

from .color_matcher import DEFAULT_THRESHOLD, find_closest_color, normalize_hex
from .keys import format_number
from .styles import CATEGORIES, COLORS, RADII, SHADOWS, SPACING, TYPOGRAPHY, DesignTokens

logger = logging.getLogger(__name__)


@dataclass
class ProjectTokens:
    """Value → theme path dictionaries; a None category has no tokens."""
    colors: Optional[Dict[str, str]] = None
    spacing: Optional[Dict[float, str]] = None
    radii: Optional[Dict[float, str]] = None
    typography: Optional[Dict[str, str]] = None
    shadows: Optional[Dict[str, str]] = None

    def is_empty(self) -> bool:
        return not any(getattr(self, c) for c in CATEGORIES)


@dataclass
class TokenMappings:
    colors: Dict[str, str] = field(default_factory=dict)
    spacing: Dict[str, str] = field(default_factory=dict)
    radii: Dict[str, str] = field(default_factory=dict)
    typography: Dict[str, str] = field(default_factory=dict)
    shadows: Dict[str, str] = field(default_factory=dict)
    resolved: Dict[str, Set[str]] = field(default_factory=lambda: {c: set() for c in CATEGORIES})

    def get(self, category: str, key: str) -> Optional[str]:
        return getattr(self, category).get(key)

    def is_resolved(self, category: str, key: str) -> bool:
        return key in self.resolved[category]

    def to_dict(self) -> dict:
        return {c: dict(getattr(self, c)) for c in CATEGORIES}

    def assign(self, category: str, key: str, path: Optional[str], fallback: str) -> None:
        if path is None:
            getattr(self, category)[key] = fallback
        else:
            getattr(self, category)[key] = path
            self.resolved[category].add(key)


def _upper_keys(colors: Mapping[str, str]) -> Dict[str, str]:
    out = {}
    for value, path in colors.items():
        try:
            out.setdefault(normalize_hex(value), path)
        except ValueError:
            out.setdefault(value.upper(), path)
    return out


def match_tokens(extracted: DesignTokens, project: Optional[ProjectTokens],
                 color_threshold: float = DEFAULT_THRESHOLD) -> TokenMappings:
    """Resolve every extracted token against the project dictionaries."""
    project = project or ProjectTokens()
    mappings = TokenMappings()

    colors = _upper_keys(project.colors or {})
    for key, value in extracted.colors.items():
        path = find_closest_color(value, colors, color_threshold) if colors else None
        mappings.assign(COLORS, key, path, value)

    for category in (SPACING, RADII):
        table = getattr(project, category) or {}
        for key, value in getattr(extracted, category).items():
            mappings.assign(category, key, table.get(value), format_number(value))

    typography = project.typography or {}
    for key, typo_key in extracted.typography.items():
        mappings.assign(TYPOGRAPHY, key, typography.get(typo_key.canonical()), key)

    shadows = project.shadows or {}
    for key, shadow in extracted.shadows.items():
        composite = shadow.key.canonical()
        mappings.assign(SHADOWS, key, shadows.get(composite), composite)

    logger.debug("resolved %s", {c: len(mappings.resolved[c]) for c in CATEGORIES})
    return mappings
