"""
Shared raw Figma node documents, shaped like ``nodes[id].document`` records.
"""
import pytest


def solid(r, g, b, a=1.0):
    return {"type": "SOLID", "color": {"r": r, "g": g, "b": b, "a": a}}


def box(x, y, width, height):
    return {"x": x, "y": y, "width": width, "height": height}


def text_node(id, name, characters, y, size=24, weight=700, line_height=32, fill=(0.1, 0.1, 0.1)):
    return {
        "id": id, "name": name, "type": "TEXT",
        "absoluteBoundingBox": box(16, y, 343, line_height),
        "characters": characters,
        "fills": [solid(*fill)],
        "style": {"fontFamily": "Inter", "fontSize": size, "fontWeight": weight,
                  "lineHeightPx": line_height, "letterSpacing": 0},
    }


@pytest.fixture
def home_node():
    """Title, avatar and a short sign-in button in a vertical auto-layout frame."""
    return {
        "id": "1:1", "name": "Home", "type": "FRAME",
        "absoluteBoundingBox": box(0, 0, 375, 812),
        "layoutMode": "VERTICAL", "itemSpacing": 28,
        "paddingTop": 24, "paddingBottom": 24, "paddingLeft": 16, "paddingRight": 16,
        "fills": [],
        "children": [
            text_node("1:2", "Title", "Hello", 24),
            {
                "id": "1:3", "name": "Avatar", "type": "RECTANGLE",
                "absoluteBoundingBox": box(16, 84, 64, 64),
                "fills": [{"type": "IMAGE", "imageRef": "abc123"}],
                "cornerRadius": 32,
            },
            {
                "id": "1:4", "name": "Sign In Button", "type": "FRAME",
                "absoluteBoundingBox": box(16, 176, 343, 40),
                "fills": [solid(0, 0.4, 1)],
                "cornerRadius": 8,
                "children": [text_node("1:5", "Label", "Sign in", 184, size=16, weight=600,
                                       line_height=24, fill=(1, 1, 1))],
            },
            {
                "id": "1:6", "name": "Status Bar", "type": "FRAME",
                "absoluteBoundingBox": box(0, 0, 375, 44),
                "children": [],
            },
            {
                "id": "1:7", "name": "Hidden note", "type": "TEXT", "visible": False,
                "absoluteBoundingBox": box(0, 700, 100, 20),
                "characters": "secret",
            },
        ],
    }


@pytest.fixture
def product_list_node():
    """A list of three structurally identical rows."""
    rows = []
    for i, (label, ref) in enumerate([("Apple", "img-a"), ("Pear", "img-b"), ("Plum", "img-c")]):
        y = 100 + i * 80
        rows.append({
            "id": f"3:{i}", "name": "Product Row", "type": "FRAME",
            "absoluteBoundingBox": box(16, y, 343, 72),
            "children": [
                {
                    "id": f"3:{i}:thumb", "name": "Thumb", "type": "RECTANGLE",
                    "absoluteBoundingBox": box(16, y + 12, 48, 48),
                    "fills": [{"type": "IMAGE", "imageRef": ref}],
                },
                text_node(f"3:{i}:name", "Name", label, y + 24, size=16, weight=400, line_height=24),
            ],
        })
    return {
        "id": "2:1", "name": "Shop", "type": "FRAME",
        "absoluteBoundingBox": box(0, 0, 375, 812),
        "children": [{
            "id": "2:2", "name": "Product List", "type": "FRAME",
            "absoluteBoundingBox": box(16, 100, 343, 232),
            "children": rows,
        }],
    }


@pytest.fixture
def theme_dict():
    return {
        "colors": {"primary": "#0066FF", "text": {"primary": "#1A1A1A"}},
        "spacing": {"md": 16, "lg": 24},
        "radii": {"sm": 8},
        "typography": {
            "h1": {"fontFamily": "Inter", "fontSize": 24, "fontWeight": 700, "lineHeight": 32},
        },
    }
