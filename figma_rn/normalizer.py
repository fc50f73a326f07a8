"""
Tree normalization: pruning and wrapper collapse.

Removes nodes that never render (hidden, zero area), device chrome and annotation
layers, then collapses single-child GROUPs that carry no visual properties.
"""

import logging
from dataclasses import dataclass, field, replace
from fnmatch import fnmatchcase
from typing import List, Optional, Tuple

from .nodes import CanonicalNode

logger = logging.getLogger(__name__)

DEFAULT_IGNORE_PATTERNS: Tuple[str, ...] = (
    "*annotation*",
    "*measure*",
    "*redline*",
    "*-guide",
    "*_guide",
)

OS_CHROME_PATTERNS: Tuple[str, ...] = (
    "*status bar*",
    "*statusbar*",
    "*home indicator*",
    "*homeindicator*",
    "*navigation bar*",
    "*navigationbar*",
    "*system bar*",
    "iphone*overlay",
    "iphone*frame",
    "device frame",
    "device overlay",
    "*device chrome*",
)


@dataclass
class NormalizeOptions:
    ignore_patterns: List[str] = field(default_factory=lambda: list(DEFAULT_IGNORE_PATTERNS))
    drop_os_chrome: bool = True
    unwrap_groups: bool = True


def _matches(name: str, patterns) -> bool:
    lowered = name.lower()
    return any(fnmatchcase(lowered, p.lower()) for p in patterns)


def filter_reason(node: CanonicalNode, options: NormalizeOptions) -> Optional[str]:
    """Why ``node`` should be dropped, or None to keep it."""
    if not node.visible:
        return "hidden"
    if node.bbox is not None and node.bbox.area <= 0 and not node.visible_strokes():
        return "zero-area"
    if options.drop_os_chrome and _matches(node.name, OS_CHROME_PATTERNS):
        return "os-chrome"
    if _matches(node.name, options.ignore_patterns):
        return "pattern"
    return None


def has_visual_properties(node: CanonicalNode) -> bool:
    return bool(
        node.visible_fills()
        or node.visible_strokes()
        or any(e.visible for e in node.effects)
        or node.corner_radius
        or node.opacity < 1
    )


def is_redundant_wrapper(node: CanonicalNode) -> bool:
    """Single-child GROUP without visuals. FRAMEs keep their layout intent."""
    return (
        node.type == "GROUP"
        and len(node.children) == 1
        and node.component_id is None
        and not has_visual_properties(node)
    )


def normalize(node: CanonicalNode, options: Optional[NormalizeOptions] = None) -> Optional[CanonicalNode]:
    """Prune and simplify a canonical tree; None when the root itself goes."""
    options = options or NormalizeOptions()
    reason = filter_reason(node, options)
    if reason:
        logger.debug("dropping %s '%s' (%s)", node.id, node.name, reason)
        return None

    children = tuple(
        c for c in (normalize(child, options) for child in node.children) if c is not None
    )
    if children != node.children:
        node = replace(node, children=children)

    if options.unwrap_groups and is_redundant_wrapper(node):
        logger.debug("unwrapping group %s '%s'", node.id, node.name)
        child = node.children[0]
        if child.bbox is None:
            child = replace(child, bbox=node.bbox)
        return child
    return node
