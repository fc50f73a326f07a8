"""
End-to-end: raw node → ScreenIR → source text.
"""
import json

import pytest

from figma_rn.classifier import AssetDetectionConfig
from figma_rn.ir import ButtonIR, ContainerIR, ImageIR, RepeaterIR, TextIR
from figma_rn.normalizer import NormalizeOptions
from figma_rn.pipeline import PipelineOptions, generate_screen, transform_to_screen_ir
from figma_rn.screen import save_ir
from figma_rn.theme import extract_project_tokens
from figma_rn.transformer import InvalidDocumentError


def test_screen_ir_shape(home_node):
    screen = transform_to_screen_ir(home_node)
    assert screen.name == "Home"
    assert isinstance(screen.root, ContainerIR)
    assert [type(c) for c in screen.root.children] == [TextIR, ImageIR, ButtonIR]
    assert screen.props.bindings == {"1:2": "title", "1:3": "avatar"}
    assert screen.tokens.spacing["spacing_0"] == 28


def test_every_node_is_styled(home_node):
    screen = transform_to_screen_ir(home_node)
    assert {ir.id for ir in screen.root.walk()} == set(screen.styles.styles)


def test_hidden_root_gives_nothing(home_node):
    home_node["visible"] = False
    assert transform_to_screen_ir(home_node) is None
    assert generate_screen(home_node) is None


@pytest.mark.parametrize("raw", [None, {}, "FRAME"])
def test_invalid_document(raw):
    with pytest.raises(InvalidDocumentError):
        transform_to_screen_ir(raw)


def test_theme_defaults_to_project_tokens(home_node, theme_dict):
    result = generate_screen(home_node, extract_project_tokens(theme_dict))
    assert "createStyles" in result.code
    assert result.mappings.get("colors", "color_0") == "theme.colors.text.primary"

    plain = generate_screen(home_node)
    assert "const styles = StyleSheet.create({" in plain.code
    assert plain.mappings.get("colors", "color_0") == "#1A1A1A"


def test_options_reach_each_stage(home_node):
    options = PipelineOptions(
        normalize=NormalizeOptions(ignore_patterns=["avatar"]),
        assets=AssetDetectionConfig(button_name_hints=()),
    )
    screen = transform_to_screen_ir(home_node, options)
    kinds = [c.kind for c in screen.root.children]
    assert "Image" not in kinds
    # still a button: filled, one label, wider than tall
    assert kinds == ["Text", "Button"]


def test_repeater_end_to_end(product_list_node):
    result = generate_screen(product_list_node)
    repeater = result.screen.root.children[0]
    assert isinstance(repeater, RepeaterIR)
    assert repeater.items == (("img-a", "Apple"), ("img-b", "Pear"), ("img-c", "Plum"))
    assert "PRODUCT_LIST_DATA" in result.code


def test_save_ir(tmp_path, home_node):
    screen = transform_to_screen_ir(home_node)
    out = tmp_path / "ir" / "Home.ir.json"
    save_ir(screen, out)
    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["name"] == "Home"
    assert data["root"]["kind"] == "Container"
    assert data["root"]["children"][0] == {
        "kind": "Text", "id": "1:2", "name": "Title",
        "bbox": {"x": 16, "y": 24, "width": 343, "height": 32},
        "layout": {"kind": "column", "gap": 0},
        "text": "Hello", "typographyKey": "Inter/24/700/32/0",
    }
    assert data["props"]["bindings"]["1:3"] == "avatar"
    assert data["tokens"]["colors"]["color_0"] == "#1A1A1A"


def test_tree_without_ids():
    raw = {
        "name": "Profile", "type": "FRAME",
        "absoluteBoundingBox": {"x": 0, "y": 0, "width": 375, "height": 812},
        "children": [
            {"name": "Title", "type": "TEXT", "characters": "Hello",
             "absoluteBoundingBox": {"x": 16, "y": 16, "width": 200, "height": 32},
             "fills": [{"type": "SOLID", "color": {"r": 0.1, "g": 0.1, "b": 0.1, "a": 1}}],
             "style": {"fontFamily": "Inter", "fontSize": 24, "fontWeight": 700, "lineHeightPx": 32}},
            {"name": "Avatar", "type": "RECTANGLE",
             "absoluteBoundingBox": {"x": 16, "y": 64, "width": 64, "height": 64},
             "fills": [{"type": "IMAGE", "imageRef": "abc123"}]},
        ],
    }
    result = generate_screen(raw)
    screen = result.screen
    assert [type(c) for c in screen.root.children] == [TextIR, ImageIR]
    assert len({ir.id for ir in screen.root.walk()}) == 3
    assert sorted(screen.props.bindings.values()) == ["avatar", "title"]
    assert screen.tokens.typography and screen.tokens.colors
    assert "<Text style={styles.title}>{title}</Text>" in result.code
    assert '<Image source={avatar} style={styles.avatar} accessibilityRole="image" />' in result.code
    assert result.output.style_names == ["profile", "title", "avatar"]
