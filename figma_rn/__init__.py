"""
figma-rn — Figma node tree → React Native components

Classifies design nodes into a ScreenIR, extracts design tokens, matches them
against a project theme and renders a component with its stylesheet.
"""

__version__ = "0.1.0"

from .nodes import CanonicalNode, BoundingBox, Constraints
from .transformer import InvalidDocumentError, transform, unwrap_nodes_response
from .normalizer import NormalizeOptions, normalize
from .layout import PositionDecl, format_percent, map_constraints, resolve_layout
from .classifier import AssetDetectionConfig, DEFAULT_ASSET_CONFIG, classify
from .styles import DesignTokens, StyleExtractor, extract_styles
from .color_matcher import find_closest_color, hex_to_lab, lab_distance
from .token_matcher import ProjectTokens, TokenMappings, match_tokens
from .theme import extract_project_tokens, load_project_tokens
from .props import ExtractedProps, extract_props
from .screen import ScreenIR, save_ir
from .generator import GenerationOptions, GenerationResult, generate
from .pipeline import PipelineOptions, generate_screen, transform_to_screen_ir
from .figma_reader import FigmaAPIClient, FigmaAPIError, parse_figma_url
from .config import ConfigValidationError, load_config, validate_config

__all__ = [
    "__version__",
    "CanonicalNode",
    "BoundingBox",
    "Constraints",
    "InvalidDocumentError",
    "transform",
    "unwrap_nodes_response",
    "NormalizeOptions",
    "normalize",
    "PositionDecl",
    "format_percent",
    "map_constraints",
    "resolve_layout",
    "AssetDetectionConfig",
    "DEFAULT_ASSET_CONFIG",
    "classify",
    "DesignTokens",
    "StyleExtractor",
    "extract_styles",
    "find_closest_color",
    "hex_to_lab",
    "lab_distance",
    "ProjectTokens",
    "TokenMappings",
    "match_tokens",
    "extract_project_tokens",
    "load_project_tokens",
    "ExtractedProps",
    "extract_props",
    "ScreenIR",
    "save_ir",
    "GenerationOptions",
    "GenerationResult",
    "generate",
    "PipelineOptions",
    "generate_screen",
    "transform_to_screen_ir",
    "FigmaAPIClient",
    "FigmaAPIError",
    "parse_figma_url",
    "ConfigValidationError",
    "load_config",
    "validate_config",
]
