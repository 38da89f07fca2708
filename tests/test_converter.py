"""Tests converter — graphe ↔ blocs, ordre, tolérance à la lecture, strictesse à l'écriture."""
import json

import pytest

from page_layout.converter import blocks_to_graph, deserialize, graph_to_blocks, load_graph, serialize
from page_layout.core.errors import MalformedDocument, UnknownBlockType
from page_layout.core.schemas import CANVAS_ID, ROOT_ID, Block


def _node(resolved_name, parent=CANVAS_ID, **props):
    return {"type": {"resolvedName": resolved_name}, "props": props, "nodes": [], "parent": parent}


# ── Exemple bout en bout ─────────────────────────────────────────────────────

def test_end_to_end_example(example_blocks):
    doc = serialize(example_blocks)
    graph = json.loads(doc)
    assert graph[CANVAS_ID]["nodes"] == ["block-hero-0", "block-text-1"]

    assert deserialize(doc) == [
        Block(type="hero", order=0, props={"title": "A"}),
        Block(type="text", order=1, props={"body": "hi"}),
    ]


def test_serialize_graph_shape(example_blocks):
    graph = blocks_to_graph(example_blocks)
    assert graph[ROOT_ID]["nodes"] == [CANVAS_ID]
    assert "parent" not in graph[ROOT_ID]
    assert graph[CANVAS_ID]["parent"] == ROOT_ID

    hero = graph["block-hero-0"]
    assert hero["type"] == {"resolvedName": "HeroBlockCraft"}
    assert hero["displayName"] == "HeroBlockCraft"
    assert hero["parent"] == CANVAS_ID
    assert hero["props"] == {"title": "A"}
    assert hero["nodes"] == []


def test_serialize_is_deterministic(example_blocks):
    assert serialize(example_blocks) == serialize(example_blocks)


def test_serialize_accepts_block_instances():
    graph = blocks_to_graph([Block(type="image", props={"src": "/a.png"})])
    assert graph[CANVAS_ID]["nodes"] == ["block-image-0"]


def test_props_kept_verbatim():
    props = {"title": None, "extra": {"a": [1, 2]}, "limit": 8}
    blocks = deserialize(serialize([{"type": "products", "props": props}]))
    assert blocks[0].props == props


# ── Ordre ────────────────────────────────────────────────────────────────────

def test_stable_sort_by_order():
    blocks = [
        {"type": "text", "order": 1},
        {"type": "hero"},
        {"type": "image", "order": 1},
        {"type": "banner", "order": 0},
    ]
    graph = blocks_to_graph(blocks)
    assert graph[CANVAS_ID]["nodes"] == [
        "block-hero-0", "block-banner-1", "block-text-2", "block-image-3",
    ]


def test_order_strictly_increasing_after_round_trip():
    blocks = [
        {"type": "faq", "order": 5},
        {"type": "hero", "order": -1},
        {"type": "newsletter", "order": 2, "enabled": False},
        {"type": "features", "order": 3},
    ]
    result = deserialize(serialize(blocks))
    assert [b.type for b in result] == ["hero", "features", "faq"]
    assert [b.order for b in result] == [0, 1, 2]


def test_round_trip_known_kinds():
    blocks = [
        Block(type="hero", props={"title": "Soldes", "cta_link": "/sale"}),
        Block(type="faq", props={"items": [{"question": "Q", "answer": "R"}]}),
        Block(type="categories", props={"layout": "list"}),
    ]
    expected = [b.model_copy(update={"order": i}) for i, b in enumerate(blocks)]
    assert deserialize(serialize(blocks)) == expected


def test_disabled_blocks_excluded(example_blocks):
    result = deserialize(serialize(example_blocks))
    assert "banner" not in [b.type for b in result]


def test_reserialize_reproduces_graph(example_blocks):
    doc = serialize(example_blocks)
    assert serialize(deserialize(doc)) == doc


# ── Blocs imbriqués ──────────────────────────────────────────────────────────

def test_nested_children_round_trip():
    menu = {
        "type": "menu",
        "props": {"title": "Main"},
        "children": [
            {"type": "menu_link", "order": 1, "props": {"label": "B"}},
            {"type": "menu_link", "order": 0, "props": {"label": "A"}},
        ],
    }
    graph = blocks_to_graph([menu])
    assert graph["block-menu-0"]["isCanvas"] is True
    assert graph["block-menu-0"]["nodes"] == ["block-menu-0-menu_link-0", "block-menu-0-menu_link-1"]
    assert graph["block-menu-0-menu_link-0"]["parent"] == "block-menu-0"

    result = graph_to_blocks(graph)
    assert result == [
        Block(type="menu", order=0, props={"title": "Main"}, children=[
            Block(type="menu_link", order=0, props={"label": "A"}),
            Block(type="menu_link", order=1, props={"label": "B"}),
        ]),
    ]


def test_unknown_child_type_aborts_serialization():
    with pytest.raises(UnknownBlockType):
        serialize([{"type": "menu", "children": [{"type": "mega_link"}]}])


# ── Écriture stricte ─────────────────────────────────────────────────────────

def test_serialize_unknown_type_raises():
    with pytest.raises(UnknownBlockType, match="no-such-kind"):
        serialize([{"type": "no-such-kind", "props": {}}])


def test_unknown_type_is_value_error():
    with pytest.raises(ValueError):
        serialize([{"type": "hero"}, {"type": "carousel3d"}])


def test_disabled_unknown_block_does_not_block_save():
    graph = blocks_to_graph([{"type": "carousel3d", "enabled": False}, {"type": "hero"}])
    assert graph[CANVAS_ID]["nodes"] == ["block-hero-0"]


# ── Lecture tolérante ────────────────────────────────────────────────────────

@pytest.mark.parametrize("document", [
    "{not valid json",
    {},
    [],
    None,
    42,
    {"ROOT": "oops"},
    {"ROOT": {"type": {"resolvedName": "div"}}},
    b"\xff\xfe",
    {"ROOT": {"nodes": [[1]]}},
    {"ROOT": {"nodes": [{"a": 1}]}},
    {"ROOT": {"nodes": [None, 3]}},
])
def test_malformed_document_gives_empty_page(document):
    assert deserialize(document) == []


def test_load_graph_raises_malformed():
    with pytest.raises(MalformedDocument):
        load_graph("{oops")
    with pytest.raises(MalformedDocument):
        graph_to_blocks({"ROOT": {"nodes": "canvas"}})


def test_canvas_without_nodes_gives_empty_page():
    graph = {ROOT_ID: {"type": {"resolvedName": "div"}, "nodes": [CANVAS_ID]}, CANVAS_ID: {"type": {"resolvedName": "div"}}}
    assert deserialize(graph) == []


def test_unknown_kind_skipped_keeps_siblings():
    graph = blocks_to_graph([{"type": "hero"}, {"type": "text"}, {"type": "image"}])
    graph["mystery"] = _node("FancyWidgetCraft")
    graph[CANVAS_ID]["nodes"].insert(1, "mystery")

    result = deserialize(graph)
    assert [b.type for b in result] == ["hero", "text", "image"]
    assert [b.order for b in result] == [0, 1, 2]


def test_missing_node_reference_skipped():
    graph = blocks_to_graph([{"type": "hero"}])
    graph[CANVAS_ID]["nodes"].append("ghost")
    assert [b.type for b in deserialize(graph)] == ["hero"]


def test_node_without_props_gets_empty_props():
    graph = blocks_to_graph([])
    graph["a"] = {"type": {"resolvedName": "BannerBlockCraft"}, "parent": CANVAS_ID}
    graph[CANVAS_ID]["nodes"] = ["a"]
    assert deserialize(graph) == [Block(type="banner", order=0, props={})]


def test_legacy_flat_layout_under_root():
    graph = {
        ROOT_ID: {"type": {"resolvedName": "div"}, "nodes": ["a", "b"], "props": {}},
        "a": _node("HeroBlockCraft", parent=ROOT_ID, title="T"),
        "b": _node("TextBlockCraft", parent=ROOT_ID),
    }
    assert [b.type for b in deserialize(graph)] == ["hero", "text"]


def test_single_block_directly_under_root():
    graph = {
        ROOT_ID: {"type": {"resolvedName": "div"}, "nodes": ["a"], "props": {}},
        "a": _node("HeroBlockCraft", parent=ROOT_ID),
    }
    assert deserialize(graph) == [Block(type="hero", order=0, props={})]


def test_cycle_does_not_loop():
    graph = blocks_to_graph([{"type": "menu", "children": [{"type": "menu_link"}]}])
    graph["block-menu-0-menu_link-0"]["nodes"] = ["block-menu-0"]
    result = deserialize(graph)
    assert [b.type for b in result] == ["menu"]
    assert [c.type for c in result[0].children] == ["menu_link"]


def test_stray_root_child_keeps_canvas_blocks():
    graph = blocks_to_graph([{"type": "hero"}, {"type": "text"}])
    graph[ROOT_ID]["nodes"].append("stray")
    assert [b.type for b in deserialize(graph)] == ["hero", "text"]

    graph[ROOT_ID]["nodes"].insert(0, "mystery")
    graph["mystery"] = _node("FancyWidgetCraft", parent=ROOT_ID)
    assert [b.type for b in deserialize(graph)] == ["hero", "text"]


def test_deep_nesting_does_not_overflow():
    depth = 3000
    graph = blocks_to_graph([])
    parent = CANVAS_ID
    for i in range(depth):
        node_id = f"menu-{i}"
        graph[node_id] = {"type": {"resolvedName": "MenuItemContainer"}, "props": {}, "nodes": [], "parent": parent}
        graph[parent]["nodes"].append(node_id)
        parent = node_id

    result = deserialize(graph)
    assert len(result) == 1

    levels, block = 0, result[0]
    while block is not None:
        levels += 1
        assert block.type == "menu"
        block = block.children[0] if block.children else None
    assert levels == depth
