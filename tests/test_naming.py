"""
Identifier generation for generated source.
"""
import pytest

from figma_rn.naming import (
    NameRegistry, is_generic_name, preview_ir_tree, style_base_name,
    to_constant_case, to_pascal_case, to_valid_identifier,
)


@pytest.mark.parametrize("name,expected", [
    ("Sign up / Primary", "signUpPrimary"),
    ("product-card", "productCard"),
    ("HeroImage", "heroImage"),
    ("2 col", "style2Col"),
    ("🚀", "element"),
    ("", "element"),
])
def test_to_valid_identifier(name, expected):
    assert to_valid_identifier(name) == expected


def test_case_helpers():
    assert to_pascal_case("product list") == "ProductList"
    assert to_constant_case("productCard") == "PRODUCT_CARD"
    assert to_constant_case("Product List") == "PRODUCT_LIST"


@pytest.mark.parametrize("name", ["Frame 12", "Rectangle", "group_3", "Text", "Vector-2"])
def test_generic_names(name):
    assert is_generic_name(name)


@pytest.mark.parametrize("name", ["Header", "Frame Title", "Avatar"])
def test_meaningful_names(name):
    assert not is_generic_name(name)


def test_style_base_name_falls_back_to_role():
    assert style_base_name("Frame 3", "Card") == "card"
    assert style_base_name("Hero Banner", "Card") == "heroBanner"


class TestNameRegistry:
    def test_suffixes_on_collision(self):
        registry = NameRegistry()
        assert [registry.claim("title") for _ in range(3)] == ["title", "title1", "title2"]

    def test_reserved_names(self):
        registry = NameRegistry(reserved=("styles",))
        assert "styles" in registry
        assert registry.claim("styles") == "styles1"

    def test_suffix_does_not_shadow_real_name(self):
        registry = NameRegistry()
        registry.claim("title1")
        registry.claim("title")
        assert registry.claim("title") == "title2"


def test_preview_ir_tree():
    tree = {
        "kind": "Container", "id": "1", "name": "Home",
        "children": [
            {"kind": "Text", "id": "2", "name": "Title", "text": "Hello"},
            {"kind": "Repeater", "id": "3", "name": "List", "count": 3,
             "template": {"kind": "Container", "id": "4", "name": "Row"}},
        ],
    }
    out = preview_ir_tree(tree, bindings={"2": "title"})
    lines = out.splitlines()
    assert lines[0] == "├─ Home  [Container]"
    assert lines[1] == '  ├─ Title  [Text]  "Hello"  → title'
    assert lines[2] == "  ├─ List  [Repeater]  ×3"
    assert lines[3] == "    ├─ Row  [Container]"
