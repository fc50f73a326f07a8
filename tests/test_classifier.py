"""
Semantic classifier tests: one predicate per role, plus ordering and IR shape.
"""
from figma_rn.classifier import (
    DEFAULT_ASSET_CONFIG, ROLE_PREDICATES, AssetDetectionConfig, classify, classify_role,
    is_button, is_card, is_icon, is_image, is_repeater, is_text,
)
from figma_rn.ir import ButtonIR, CardIR, ContainerIR, IconIR, ImageIR, RepeaterIR, TextIR
from figma_rn.nodes import BoundingBox, CanonicalNode, Color, Paint, Stroke, Typography

WHITE = Paint("solid", color=Color(255, 255, 255))
BLUE = Paint("solid", color=Color(0, 102, 255))


def make_node(id="n", name="Node", type="FRAME", x=0, y=0, width=100, height=100, **kwargs):
    return CanonicalNode(id=id, name=name, type=type, bbox=BoundingBox(x, y, width, height), **kwargs)


def text(id="t", content="Hello", name="Label", **kwargs):
    return make_node(id=id, name=name, type="TEXT", text=content, height=20,
                     typography=Typography("Inter", 16, 400, 24), **kwargs)


def photo(id="p", name="Photo", ref="img-1", **kwargs):
    return make_node(id=id, name=name, type="RECTANGLE",
                     fills=(Paint("image", image_ref=ref),), **kwargs)


def vector(id="v", size=24, **kwargs):
    return make_node(id=id, name="Vector", type="VECTOR", width=size, height=size, **kwargs)


def row(id, label, y=0):
    return make_node(id=id, name="Row", y=y, width=343, height=72, children=(
        text(id=id + "-t", content=label, name="Name", y=y),
        photo(id=id + "-p", name="Thumb", ref=f"img-{label}", y=y, width=48, height=48),
    ))


# ─── predicates ─────────────────────────────────────────────────────────────

def test_predicate_order_is_fixed():
    assert [role for role, _ in ROLE_PREDICATES] == ["Text", "Image", "Icon", "Button", "Card", "Repeater"]


def test_is_text():
    assert is_text(text())
    assert not is_text(make_node(type="TEXT"))


def test_is_image_by_fill_or_extension():
    assert is_image(photo())
    assert is_image(make_node(name="hero.PNG", type="RECTANGLE"))
    assert not is_image(make_node(name="hero", type="RECTANGLE"))


def test_is_icon_size_and_aspect():
    assert is_icon(vector(size=24))
    assert not is_icon(vector(size=4))
    assert not is_icon(vector(size=120))
    assert not is_icon(make_node(type="VECTOR", width=40, height=10))


def test_icon_from_vector_only_frame():
    frame = make_node(type="FRAME", width=24, height=24, children=(vector(id="a"), vector(id="b")))
    assert is_icon(frame)
    mixed = make_node(type="FRAME", width=24, height=24, children=(vector(), text()))
    assert not is_icon(mixed)


def test_is_button():
    button = make_node(name="Submit", width=200, height=48, fills=(BLUE,), children=(text(),))
    assert is_button(button)
    assert not is_button(make_node(width=200, height=120, fills=(BLUE,), children=(text(),)))
    assert not is_button(make_node(width=200, height=48, children=(text(),)))


def test_button_name_hint_without_fill():
    ghost = make_node(name="Secondary Button", width=120, height=40, children=(text(),))
    assert is_button(ghost)


def test_is_card():
    card = make_node(width=300, height=200, fills=(WHITE,), children=(text(), photo()))
    assert is_card(card)
    assert not is_card(make_node(width=300, height=200, children=(text(), photo())))
    assert not is_card(make_node(width=300, height=200, fills=(WHITE,),
                                 children=(text(id="a"), text(id="b"))))


def test_is_repeater():
    assert is_repeater(make_node(height=240, children=(row("a", "A"), row("b", "B", 80))))
    assert not is_repeater(make_node(children=(row("a", "A"),)))
    assert not is_repeater(make_node(children=(text(id="a"), text(id="b"))))


def test_same_component_instances_repeat():
    items = tuple(make_node(id=str(i), type="INSTANCE", component_id="C:1") for i in range(3))
    assert is_repeater(make_node(children=items))


# ─── ordering ───────────────────────────────────────────────────────────────

def test_fallback_is_container():
    assert classify_role(make_node(type="SLICE")) == "Container"


def test_image_beats_icon():
    small_photo = make_node(name="Avatar", type="VECTOR", width=24, height=24,
                            fills=(Paint("image", image_ref="img-2"),))
    assert classify_role(small_photo) == "Image"


def test_list_of_buttons_is_repeater_not_button():
    buttons = tuple(
        make_node(id=f"b{i}", name="Chip", y=i * 56, width=120, height=48, fills=(BLUE,),
                  children=(text(id=f"t{i}", content=f"Option {i}"),))
        for i in range(3)
    )
    ir = classify(make_node(id="list", height=160, children=buttons))
    assert isinstance(ir, RepeaterIR)
    assert isinstance(ir.template, ButtonIR)
    assert ir.count == 3


def test_config_is_injectable():
    big = vector(size=56)
    assert not is_icon(big, DEFAULT_ASSET_CONFIG)
    assert is_icon(big, AssetDetectionConfig(icon_max_size=64))


# ─── IR construction ────────────────────────────────────────────────────────

def test_classify_builds_variants():
    root = make_node(id="root", width=375, height=812, children=(
        text(id="t", content="Welcome"),
        photo(id="p", y=40),
        vector(id="v", y=200),
        make_node(id="b", name="CTA", y=300, width=200, height=48, fills=(BLUE,), children=(text(id="bt", content="Go"),)),
    ))
    ir = classify(root)
    assert isinstance(ir, ContainerIR)
    kinds = [type(c) for c in ir.children]
    assert kinds == [TextIR, ImageIR, IconIR, ButtonIR]
    assert ir.children[0].text == "Welcome"
    assert ir.children[0].typography_key.canonical() == "Inter/16/400/24/0"
    assert ir.children[1].image_ref == "img-1"
    assert ir.children[3].label == "Go"
    assert ir.children[3].variant == "primary"


def test_button_variants():
    outline = make_node(name="Btn", width=120, height=40, strokes=(Stroke(Color(0, 0, 0)),), children=(text(),))
    ghost = make_node(name="Btn", width=120, height=40, children=(text(),))
    assert classify(outline).variant == "outline"
    assert classify(ghost).variant == "ghost"


def test_card_children_classified():
    card = classify(make_node(width=300, height=200, fills=(WHITE,), children=(text(), photo())))
    assert isinstance(card, CardIR)
    assert [c.kind for c in card.children] == ["Text", "Image"]


def test_repeater_template_and_items():
    ir = classify(make_node(id="list", name="Product List", height=240, children=(
        row("a", "Apple"), row("b", "Pear", 80), row("c", "Plum", 160),
    )))
    assert isinstance(ir, RepeaterIR)
    assert ir.count == 3
    assert ir.template.id == "a"
    assert ir.items == (("Apple", "img-Apple"), ("Pear", "img-Pear"), ("Plum", "img-Plum"))
    # only the template is part of the tree
    ids = [n.id for n in ir.walk()]
    assert "b" not in ids and "c-t" not in ids
    assert ids.count("a") == 1


def test_unknown_shapes_become_containers():
    ir = classify(CanonicalNode(id="x", name="Mystery", type="WIDGET"))
    assert isinstance(ir, ContainerIR)
    assert ir.to_dict()["kind"] == "Container"
