"""
Structured token keys.

Composite token identities are kept as tuples while they travel between stages
and turned into strings only where tokens are compared or emitted.
"""

from typing import NamedTuple, Optional

from .nodes import Typography


def format_number(value) -> str:
    """4.0 → "4", 1.5 → "1.5"."""
    if value is None:
        return "auto"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return f"{value:.4f}".rstrip("0").rstrip(".")
    return str(value)


class ShadowKey(NamedTuple):
    offset_x: float
    offset_y: float
    blur: float
    spread: float

    def canonical(self) -> str:
        return ",".join(format_number(v) for v in self)


class TypographyKey(NamedTuple):
    font_family: str
    font_size: float
    font_weight: int
    line_height: Optional[float]
    letter_spacing: float

    def canonical(self) -> str:
        return "/".join([self.font_family] + [format_number(v) for v in self[1:]])

    @classmethod
    def from_typography(cls, typo: Typography) -> "TypographyKey":
        return cls(typo.font_family, typo.font_size, typo.font_weight,
                   typo.line_height, typo.letter_spacing)
