"""
ScreenIR → React Native component source.

Three builders share one naming table: ``build_styles`` (the stylesheet),
``build_jsx`` (the component tree) and ``build_imports``. ``generate`` runs them
and concatenates the result. The output depends only on its inputs.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .ir import ButtonIR, CardIR, ContainerIR, IconIR, ImageIR, IRNode, RepeaterIR, TextIR
from .keys import format_number
from .naming import RESERVED_NAMES, NameRegistry, style_base_name, to_constant_case, to_pascal_case
from .props import item_fields
from .screen import ScreenIR
from .styles import SHADOWS, TYPOGRAPHY, StyleProps, TextStyle
from .token_matcher import TokenMappings

STYLE_PATTERNS = ("StyleSheet", "useTheme", "unistyles")
MIN_TOUCH_TARGET = 44
TODO = "// TODO: map to theme"


@dataclass
class GenerationOptions:
    component_name: str = "Screen"
    suppress_todos: bool = False
    has_project_theme: bool = False
    style_pattern: str = "StyleSheet"
    use_theme_hook_path: Optional[str] = None
    import_prefix: Optional[str] = None
    detection_result: Optional[dict] = None

    def __post_init__(self) -> None:
        if self.style_pattern not in STYLE_PATTERNS:
            raise ValueError(
                f"style_pattern must be one of {', '.join(STYLE_PATTERNS)}, got {self.style_pattern!r}"
            )

    @property
    def themed(self) -> bool:
        return self.has_project_theme

    @property
    def unistyles(self) -> bool:
        return self.has_project_theme and self.style_pattern == "unistyles"


@dataclass
class GenerationResult:
    code: str
    style_names: List[str]
    unmapped: Dict[str, List[str]] = field(default_factory=dict)


def _literal(value) -> str:
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return format_number(value)


class CodeGenerator:
    def __init__(self, screen: ScreenIR, mappings: Optional[TokenMappings] = None,
                 options: Optional[GenerationOptions] = None):
        self.screen = screen
        self.mappings = mappings or TokenMappings()
        self.options = options or GenerationOptions()
        self.style_names: Dict[str, str] = {}
        self.rules: Dict[str, List[str]] = {}
        self.unmapped: Dict[str, List[str]] = {}
        self.components: Set[str] = {"View"}
        self.handlers: List[str] = []
        self.uses_image_type = False
        self._item_components: Dict[str, str] = {}
        self._data_constants: Dict[str, str] = {}
        self._handler_names: Dict[str, str] = {}
        self.safe_area = bool(
            (self.options.detection_result or {}).get("hasSafeAreaLayout")
            and isinstance(screen.root, (ContainerIR, CardIR))
        )
        self._assign_names()

    # ── naming ───────────────────────────────────────────────

    def _assign_names(self) -> None:
        styles = NameRegistry()
        components = NameRegistry(reserved=(self.options.component_name,))
        constants = NameRegistry()
        handlers = NameRegistry(reserved=(
            *self.screen.props.props, *self.screen.props.collections.values(), *RESERVED_NAMES))
        for ir in self.screen.root.walk():
            name = styles.claim(style_base_name(ir.name, ir.kind))
            self.style_names[ir.id] = name
            if isinstance(ir, ButtonIR):
                self.style_names[ir.id + ":label"] = styles.claim(name + "Text")
                self._handler_names[ir.id] = handlers.claim(f"on{to_pascal_case(name)}Press")
            if isinstance(ir, RepeaterIR) and ir.template is not None:
                self._item_components[ir.id] = components.claim(to_pascal_case(ir.template.name) + "Item")
                self._data_constants[ir.id] = constants.claim(to_constant_case(ir.name) + "_DATA")

    # ── stylesheet ───────────────────────────────────────────

    def _resolved(self, ref) -> Optional[str]:
        if ref is None or not self.options.has_project_theme:
            return None
        category, key = ref
        if self.mappings.is_resolved(category, key):
            return self.mappings.get(category, key)
        return None

    def _note_unmapped(self, category: str, literal) -> None:
        values = self.unmapped.setdefault(category, [])
        text = literal if isinstance(literal, str) else format_number(literal)
        if text not in values:
            values.append(text)

    def _line(self, prop: str, literal, ref=None) -> str:
        path = self._resolved(ref)
        if path is not None:
            return f"{prop}: {path},"
        if ref is not None:
            self._note_unmapped(ref[0], literal)
            if not self.options.suppress_todos:
                return f"{prop}: {_literal(literal)}, {TODO}"
        return f"{prop}: {_literal(literal)},"

    def _text_lines(self, text: TextStyle, props: StyleProps, prefix: str = "") -> List[str]:
        lines = []
        typo_ref = props.refs.get(prefix + "typography")
        path = self._resolved(typo_ref)
        if path is not None:
            lines.append(f"...{path},")
        elif text.typography is not None:
            typo = text.typography
            if typo_ref is not None:
                self._note_unmapped(TYPOGRAPHY, text.key.canonical())
                if not self.options.suppress_todos:
                    lines.append(TODO)
            lines.append(f"fontFamily: {_literal(typo.font_family)},")
            lines.append(f"fontSize: {_literal(typo.font_size)},")
            lines.append(f"fontWeight: {_literal(str(typo.font_weight))},")
            if typo.line_height:
                lines.append(f"lineHeight: {_literal(round(typo.line_height, 2))},")
            if typo.letter_spacing:
                lines.append(f"letterSpacing: {_literal(round(typo.letter_spacing, 2))},")
        if text.typography is not None and text.typography.text_align:
            lines.append(f"textAlign: {_literal(text.typography.text_align)},")
        if text.color:
            lines.append(self._line("color", text.color, props.refs.get(prefix + "color")))
        return lines

    def _shadow_lines(self, props: StyleProps) -> List[str]:
        shadow = props.shadow
        ref = props.refs.get("shadow")
        path = self._resolved(ref)
        if path is not None:
            return [f"...{path},"]
        lines = []
        if ref is not None:
            self._note_unmapped(SHADOWS, shadow.key.canonical())
            if not self.options.suppress_todos:
                lines.append(TODO)
        radius = shadow.key.blur / 2
        lines += [
            f"shadowColor: {_literal(shadow.color)},",
            f"shadowOffset: {{ width: {format_number(shadow.key.offset_x)}, "
            f"height: {format_number(shadow.key.offset_y)} }},",
            f"shadowOpacity: {format_number(round(shadow.opacity, 2))},",
            f"shadowRadius: {format_number(radius)},",
            f"elevation: {max(1, round(radius))},",
        ]
        return lines

    def _rule(self, ir: IRNode, props: StyleProps, is_root: bool) -> List[str]:
        lines = []
        if is_root:
            lines.append("flex: 1,")
        meta = props.layout
        if meta is not None and isinstance(ir, (ContainerIR, CardIR, RepeaterIR)):
            if meta.kind == "row":
                lines.append('flexDirection: "row",')
            if meta.gap:
                lines.append(self._line("gap", meta.gap, props.refs.get("gap")))
            for side, value in zip(("Top", "Right", "Bottom", "Left"), meta.padding):
                if value:
                    lines.append(self._line("padding" + side, value, props.refs.get("padding" + side)))
            if meta.justify and meta.justify != "flex-start":
                lines.append(f"justifyContent: {_literal(meta.justify)},")
            if meta.align and meta.align != "flex-start":
                lines.append(f"alignItems: {_literal(meta.align)},")

        if props.position is not None:
            for key, value in props.position.to_style().items():
                lines.append(f"{key}: {_literal(value)},")
        elif not is_root and not isinstance(ir, TextIR) and props.width is not None:
            lines.append(f"width: {_literal(props.width)},")
            lines.append(f"height: {_literal(props.height)},")

        if props.background:
            lines.append(self._line("backgroundColor", props.background, props.refs.get("backgroundColor")))
        if props.border_width:
            lines.append(f"borderWidth: {_literal(props.border_width)},")
            if props.border_color:
                lines.append(self._line("borderColor", props.border_color, props.refs.get("borderColor")))
            if props.border_style and props.border_style != "solid":
                lines.append(f"borderStyle: {_literal(props.border_style)},")
        radius = props.border_radius
        if isinstance(radius, tuple):
            for corner, value in zip(("TopLeft", "TopRight", "BottomRight", "BottomLeft"), radius):
                if value:
                    lines.append(f"border{corner}Radius: {_literal(value)},")
        elif radius:
            lines.append(self._line("borderRadius", radius, props.refs.get("borderRadius")))
        if props.shadow is not None:
            lines += self._shadow_lines(props)
        if props.opacity is not None:
            lines.append(f"opacity: {_literal(props.opacity)},")
        if props.text is not None:
            lines += self._text_lines(props.text, props)
        return lines

    def build_styles(self) -> str:
        """The stylesheet declaration for the configured style pattern."""
        styles = self.screen.styles.styles
        root_id = self.screen.root.id
        for ir in self.screen.root.walk():
            props = styles.get(ir.id) or StyleProps()
            rule = self._rule(ir, props, ir.id == root_id)
            if rule:
                self.rules[self.style_names[ir.id]] = rule
            if isinstance(ir, ButtonIR) and props.label is not None:
                label_rule = self._text_lines(props.label, props, prefix="label.")
                if label_rule:
                    self.rules[self.style_names[ir.id + ":label"]] = label_rule

        body = []
        for name, rule in self.rules.items():
            body.append(f"  {name}: {{")
            body.extend(f"    {line}" for line in rule)
            body.append("  },")
        inner = "\n".join(body)

        if self.options.unistyles:
            return f"const stylesheet = createStyleSheet((theme) => ({{\n{inner}\n}}));"
        if self.options.themed:
            return f"const createStyles = (theme: Theme) => StyleSheet.create({{\n{inner}\n}});"
        return f"const styles = StyleSheet.create({{\n{inner}\n}});"

    def _style_setup(self) -> List[str]:
        if not self.options.themed:
            return []
        if self.options.unistyles:
            return ["const { styles } = useStyles(stylesheet);"]
        return [
            "const { theme } = useTheme();",
            "const styles = useMemo(() => createStyles(theme), [theme]);",
        ]

    # ── markup ───────────────────────────────────────────────

    def _style_attr(self, key: str) -> str:
        name = self.style_names.get(key)
        if name and name in self.rules:
            return f" style={{styles.{name}}}"
        return ""

    def _content(self, ir: IRNode, fields: Optional[Dict[str, str]]) -> Optional[str]:
        if fields is not None:
            return fields.get(ir.id)
        return self.screen.props.name_for(ir.id)

    def _jsx(self, ir: IRNode, indent: int, fields: Optional[Dict[str, str]] = None,
             root: bool = False) -> List[str]:
        pad = "  " * indent
        style = self._style_attr(ir.id)

        if isinstance(ir, TextIR):
            self.components.add("Text")
            bound = self._content(ir, fields)
            content = bound if bound else _literal(ir.text)
            return [f"{pad}<Text{style}>{{{content}}}</Text>"]

        if isinstance(ir, ImageIR):
            self.components.add("Image")
            bound = self._content(ir, fields)
            source = bound if bound else '{ uri: "" }'
            return [f'{pad}<Image source={{{source}}}{style} accessibilityRole="image" />']

        if isinstance(ir, IconIR):
            self.components.add("Image")
            return [f'{pad}<Image source={{{{ uri: "" }}}}{style} '
                    f'accessibilityRole="image" accessibilityLabel={_literal(ir.name)} />']

        if isinstance(ir, ButtonIR):
            self.components.update({"TouchableOpacity", "Text"})
            attrs = f'{style} accessibilityRole="button"'
            height = ir.bbox.height if ir.bbox else MIN_TOUCH_TARGET
            if height < MIN_TOUCH_TARGET:
                slop = math.ceil((MIN_TOUCH_TARGET - height) / 2)
                attrs += f" hitSlop={{{{ top: {slop}, bottom: {slop}, left: 0, right: 0 }}}}"
            if fields is None:
                handler = self._handler_names[ir.id]
                if handler not in self.handlers:
                    self.handlers.append(handler)
                attrs += f" onPress={{{handler}}}"
            label_style = self._style_attr(ir.id + ":label")
            return [
                f"{pad}<TouchableOpacity{attrs}>",
                f"{pad}  <Text{label_style}>{{{_literal(ir.label)}}}</Text>",
                f"{pad}</TouchableOpacity>",
            ]

        if isinstance(ir, RepeaterIR):
            component = self._item_components.get(ir.id)
            if component is None:
                return [f"{pad}<View{style} />"]
            collection = self.screen.props.collections.get(ir.id) if fields is None else None
            source = collection or self._data_constants[ir.id]
            return [
                f"{pad}<View{style}>",
                f"{pad}  {{{source}.map((item, index) => (",
                f"{pad}    <{component} key={{index}} {{...item}} />",
                f"{pad}  ))}}",
                f"{pad}</View>",
            ]

        tag = "SafeAreaView" if root and self.safe_area else "View"
        if not ir.children:
            return [f"{pad}<{tag}{style} />"]
        lines = [f"{pad}<{tag}{style}>"]
        for child in ir.children:
            lines += self._jsx(child, indent + 1, fields)
        lines.append(f"{pad}</{tag}>")
        return lines

    def build_jsx(self, indent: int = 2) -> str:
        """Markup for the screen component's return statement."""
        return "\n".join(self._jsx(self.screen.root, indent, root=True))

    # ── repeaters ────────────────────────────────────────────

    def _field_default(self, slot: IRNode, value: str) -> str:
        if isinstance(slot, ImageIR):
            return '{ uri: "" }'
        return _literal(value)

    def _build_repeater(self, ir: RepeaterIR) -> str:
        component = self._item_components[ir.id]
        fields = item_fields(ir)
        props_type = f"{component}Props"
        lines = [f"interface {props_type} {{"]
        for name, slot in fields:
            if isinstance(slot, ImageIR):
                self.uses_image_type = True
                lines.append(f"  {name}: ImageSourcePropType;")
            else:
                lines.append(f"  {name}: string;")
        lines.append("}")
        lines.append("")

        lines.append(f"const {self._data_constants[ir.id]}: {props_type}[] = [")
        for item in ir.items:
            pairs = ", ".join(
                f"{name}: {self._field_default(slot, value)}"
                for (name, slot), value in zip(fields, item)
            )
            lines.append(f"  {{ {pairs} }},")
        lines.append("];")
        lines.append("")

        args = ", ".join(name for name, _ in fields)
        signature = f"{{ {args} }}: {props_type}" if fields else ""
        lines.append(f"function {component}({signature}) {{")
        lines += [f"  {line}" for line in self._style_setup()]
        lines.append("  return (")
        lines += self._jsx(ir.template, 2, fields={slot.id: name for name, slot in fields})
        lines.append("  );")
        lines.append("}")
        return "\n".join(lines)

    # ── component ────────────────────────────────────────────

    def _build_component(self, jsx: str) -> str:
        name = self.options.component_name
        props_type = f"{name}Props"
        interface = [f"export interface {props_type} {{"]
        params = []
        for prop, spec in self.screen.props.props.items():
            if spec.kind == "image":
                self.uses_image_type = True
                interface.append(f"  /** Figma image ref: {spec.value} */")
                interface.append(f"  {prop}?: ImageSourcePropType;")
                params.append(f'{prop} = {{ uri: "" }}')
            else:
                interface.append(f"  {prop}?: string;")
                params.append(f"{prop} = {_literal(spec.value)}")
        for repeater_id, prop in self.screen.props.collections.items():
            component = self._item_components.get(repeater_id)
            if component is None:
                continue
            interface.append(f"  {prop}?: {component}Props[];")
            params.append(f"{prop} = {self._data_constants[repeater_id]}")
        for handler in self.handlers:
            interface.append(f"  {handler}?: () => void;")
            params.append(handler)
        interface.append("}")

        lines = []
        if params:
            lines += interface
            lines.append("")
            lines.append(f"export default function {name}({{")
            lines += [f"  {p}," for p in params]
            lines.append(f"}}: {props_type}) {{")
        else:
            lines.append(f"export default function {name}() {{")
        lines += [f"  {line}" for line in self._style_setup()]
        lines.append("  return (")
        lines.append(jsx)
        lines.append("  );")
        lines.append("}")
        return "\n".join(lines)

    # ── imports ──────────────────────────────────────────────

    def build_imports(self) -> str:
        opts = self.options
        if opts.themed and not opts.unistyles:
            react = "import React, { useMemo } from 'react';"
        else:
            react = "import React from 'react';"
        names = set(self.components)
        if self.uses_image_type:
            names.add("ImageSourcePropType")
        if not opts.unistyles:
            names.add("StyleSheet")
        lines = [react, f"import {{ {', '.join(sorted(names))} }} from 'react-native';"]
        if self.safe_area:
            lines.append("import { SafeAreaView } from 'react-native-safe-area-context';")
        if opts.unistyles:
            lines.append("import { createStyleSheet, useStyles } from 'react-native-unistyles';")
        elif opts.themed:
            prefix = opts.import_prefix or ".."
            hook_path = opts.use_theme_hook_path or f"{prefix}/hooks/useTheme"
            lines.append(f"import {{ useTheme }} from '{hook_path}';")
            lines.append(f"import type {{ Theme }} from '{prefix}/theme';")
        return "\n".join(lines)

    def generate(self) -> GenerationResult:
        styles = self.build_styles()
        jsx = self.build_jsx()
        repeaters = [
            self._build_repeater(ir) for ir in self.screen.root.walk()
            if isinstance(ir, RepeaterIR) and ir.id in self._item_components
        ]
        component = self._build_component(jsx)
        imports = self.build_imports()
        parts = [imports] + repeaters + [component, styles]
        return GenerationResult(
            code="\n\n".join(parts) + "\n",
            style_names=list(self.rules),
            unmapped=self.unmapped,
        )


def generate(screen: ScreenIR, mappings: Optional[TokenMappings] = None,
             options: Optional[GenerationOptions] = None) -> GenerationResult:
    """Render ``screen`` as a React Native component source unit."""
    return CodeGenerator(screen, mappings, options).generate()
