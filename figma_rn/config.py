"""Config file loading and validation."""

import json
import logging
from pathlib import Path
from typing import Any, List, Tuple

from .generator import STYLE_PATTERNS, GenerationOptions

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "figma-rn.config.json"

_KNOWN_TOP_KEYS = {"figma", "theme", "codeStyle", "normalize", "output"}

_KNOWN_SECTION_KEYS = {
    "figma": {"personalAccessToken", "fileKey"},
    "theme": {"location"},
    "codeStyle": {"stylePattern", "useThemeHookPath", "importPrefix", "suppressTodos", "componentName"},
    "normalize": {"ignorePatterns"},
    "output": {"dir"},
}

_STRING_FIELDS = (
    ("figma", "personalAccessToken"),
    ("figma", "fileKey"),
    ("theme", "location"),
    ("codeStyle", "useThemeHookPath"),
    ("codeStyle", "importPrefix"),
    ("codeStyle", "componentName"),
    ("output", "dir"),
)


class ConfigValidationError(Exception):
    """Config did not validate; ``errors`` lists (path, message) pairs."""

    def __init__(self, errors: List[Tuple[str, str]]):
        self.errors = list(errors)
        lines = "\n".join(f"  - {path}: {message}" for path, message in self.errors)
        super().__init__(f"Invalid configuration:\n{lines}")


def validate_config(cfg: dict) -> None:
    """Warn on unknown keys; raise ConfigValidationError on wrong types or values."""
    errors: List[Tuple[str, str]] = []

    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            logger.warning("unknown config key '%s' (known: %s)", key, ", ".join(sorted(_KNOWN_TOP_KEYS)))

    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section)
        if section_cfg is None:
            continue
        if not isinstance(section_cfg, dict):
            errors.append((section, f"must be an object, got {type(section_cfg).__name__}"))
            continue
        for key in section_cfg:
            if key not in known_keys:
                logger.warning("unknown config key '%s.%s' (known: %s)",
                               section, key, ", ".join(sorted(known_keys)))

    for section, key in _STRING_FIELDS:
        section_cfg = cfg.get(section)
        if isinstance(section_cfg, dict) and key in section_cfg and not isinstance(section_cfg[key], str):
            errors.append((f"{section}.{key}", f"must be a string, got {type(section_cfg[key]).__name__}"))

    code_style = cfg.get("codeStyle")
    if isinstance(code_style, dict):
        pattern = code_style.get("stylePattern")
        if pattern is not None and pattern not in STYLE_PATTERNS:
            errors.append(("codeStyle.stylePattern",
                           f"must be one of {', '.join(STYLE_PATTERNS)}, got {pattern!r}"))
        suppress = code_style.get("suppressTodos")
        if suppress is not None and not isinstance(suppress, bool):
            errors.append(("codeStyle.suppressTodos", "must be a boolean"))

    normalize_cfg = cfg.get("normalize")
    if isinstance(normalize_cfg, dict) and "ignorePatterns" in normalize_cfg:
        patterns = normalize_cfg["ignorePatterns"]
        if not isinstance(patterns, list):
            errors.append(("normalize.ignorePatterns", "must be a list of strings"))
        else:
            for i, pattern in enumerate(patterns):
                if not isinstance(pattern, str):
                    errors.append((f"normalize.ignorePatterns[{i}]", "must be a string"))

    if errors:
        raise ConfigValidationError(errors)


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """Load the JSON config; a missing file gives an empty config."""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg: Any = json.load(f)
    if not isinstance(cfg, dict):
        raise ConfigValidationError([("", f"'{config_path}' must contain a JSON object")])
    validate_config(cfg)
    return cfg


def generation_options_from_config(cfg: dict, has_project_theme: bool = False, **overrides) -> GenerationOptions:
    code_style = cfg.get("codeStyle", {}) or {}
    options = dict(
        component_name=code_style.get("componentName", "Screen"),
        suppress_todos=code_style.get("suppressTodos", False),
        has_project_theme=has_project_theme,
        style_pattern=code_style.get("stylePattern", "StyleSheet"),
        use_theme_hook_path=code_style.get("useThemeHookPath"),
        import_prefix=code_style.get("importPrefix"),
    )
    options.update({k: v for k, v in overrides.items() if v is not None})
    return GenerationOptions(**options)
