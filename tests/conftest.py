"""Fixtures partagées — blocs d'exemple et graphe brut tel que produit par l'éditeur."""
import pytest

from page_layout.core.schemas import CANVAS_ID, ROOT_ID


@pytest.fixture
def example_blocks():
    """hero / banner désactivée / texte."""
    return [
        {"type": "hero", "order": 0, "props": {"title": "A"}},
        {"type": "banner", "order": 1, "props": {"image": "x.png"}, "enabled": False},
        {"type": "text", "order": 2, "props": {"body": "hi"}},
    ]


@pytest.fixture
def raw_editor_graph():
    """Graphe avec tout le bruit de l'éditeur (displayName, custom vide, hidden=False...)."""
    return {
        ROOT_ID: {
            "type": {"resolvedName": "div"}, "isCanvas": True, "props": {}, "displayName": "div",
            "custom": {}, "hidden": False, "nodes": [CANVAS_ID], "linkedNodes": {}, "parent": None,
        },
        CANVAS_ID: {
            "type": {"resolvedName": "div"}, "isCanvas": True, "props": {}, "displayName": "div",
            "custom": {}, "hidden": False, "nodes": ["hero-1", "text-1"], "linkedNodes": {}, "parent": ROOT_ID,
        },
        "hero-1": {
            "type": {"resolvedName": "HeroBlockCraft"}, "isCanvas": False, "props": {"title": "A"},
            "displayName": "Hero Block", "custom": {"note": "", "x": None}, "hidden": False,
            "nodes": [], "linkedNodes": {}, "parent": CANVAS_ID,
        },
        "text-1": {
            "type": {"resolvedName": "TextBlockCraft"}, "props": {"content": "hi"},
            "displayName": "Text", "custom": {"label": "Intro"}, "hidden": True,
            "nodes": [], "linkedNodes": {}, "parent": CANVAS_ID,
        },
    }
