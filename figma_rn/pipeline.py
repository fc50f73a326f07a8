"""
Raw Figma node → ScreenIR → component source.

    transform → normalize → resolve_layout → classify → extract_styles
              → match_tokens → extract_props → generate
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .classifier import DEFAULT_ASSET_CONFIG, AssetDetectionConfig, classify
from .color_matcher import DEFAULT_THRESHOLD
from .generator import GenerationOptions, GenerationResult, generate
from .layout import resolve_layout
from .normalizer import NormalizeOptions, normalize
from .props import extract_props
from .screen import ScreenIR
from .styles import extract_styles
from .token_matcher import ProjectTokens, TokenMappings, match_tokens
from .transformer import transform

logger = logging.getLogger(__name__)


@dataclass
class PipelineOptions:
    normalize: NormalizeOptions = field(default_factory=NormalizeOptions)
    assets: AssetDetectionConfig = DEFAULT_ASSET_CONFIG
    color_threshold: float = DEFAULT_THRESHOLD


@dataclass
class PipelineResult:
    screen: ScreenIR
    mappings: TokenMappings
    output: GenerationResult

    @property
    def code(self) -> str:
        return self.output.code


def transform_to_screen_ir(raw: dict, options: Optional[PipelineOptions] = None) -> Optional[ScreenIR]:
    """Run stages 1-5 and 7. None means there is nothing to generate."""
    options = options or PipelineOptions()
    canonical = normalize(transform(raw), options.normalize)
    if canonical is None:
        logger.info("root node '%s' removed during normalization", raw.get("name", ""))
        return None
    layout = resolve_layout(canonical)
    root = classify(canonical, options.assets, layout)
    styles = extract_styles(root)
    props = extract_props(root)
    return ScreenIR(name=canonical.name, root=root, styles=styles, props=props)


def generate_screen(raw: dict, project_tokens: Optional[ProjectTokens] = None,
                    generation: Optional[GenerationOptions] = None,
                    options: Optional[PipelineOptions] = None) -> Optional[PipelineResult]:
    """Full run from a raw node to source text."""
    options = options or PipelineOptions()
    screen = transform_to_screen_ir(raw, options)
    if screen is None:
        return None
    mappings = match_tokens(screen.tokens, project_tokens, options.color_threshold)
    if generation is None:
        has_theme = project_tokens is not None and not project_tokens.is_empty()
        generation = GenerationOptions(has_project_theme=has_theme)
    output = generate(screen, mappings, generation)
    return PipelineResult(screen=screen, mappings=mappings, output=output)
