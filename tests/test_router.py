"""
Tests API — endpoints /page-layout/* avec une DB SQLite temporaire.
"""
import pytest
from fastapi.testclient import TestClient

from page_layout.converter import blocks_to_graph
from page_layout.core.schemas import CANVAS_ID


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Client de test — la DB est créée au démarrage de l'app."""
    monkeypatch.setenv("PAGE_LAYOUT_DB_PATH", str(tmp_path / "test.db"))

    from page_layout.api import app

    with TestClient(app) as c:
        yield c


def _layout():
    return blocks_to_graph([
        {"type": "hero", "props": {"title": "Soldes"}},
        {"type": "menu", "children": [{"type": "menu_link", "props": {"label": "Accueil"}}]},
    ])


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


# ── Conversion ───────────────────────────────────────────────────────────────

def test_serialize_then_deserialize(client):
    r = client.post("/page-layout/serialize", json={"blocks": [
        {"type": "text", "order": 1, "props": {"content": "b"}},
        {"type": "hero", "order": 0, "props": {"title": "a"}},
    ]})
    assert r.status_code == 200
    layout = r.json()["layout"]
    assert layout[CANVAS_ID]["nodes"] == ["block-hero-0", "block-text-1"]

    r = client.post("/page-layout/deserialize", json=layout)
    assert r.status_code == 200
    assert [b["type"] for b in r.json()["blocks"]] == ["hero", "text"]


def test_serialize_unknown_type_422(client):
    r = client.post("/page-layout/serialize", json={"blocks": [{"type": "slideshow"}]})
    assert r.status_code == 422
    assert "slideshow" in r.json()["detail"]


@pytest.mark.parametrize("payload", [[], "garbage", {"ROOT": {}}, {"foo": 1}])
def test_deserialize_malformed_gives_empty(client, payload):
    r = client.post("/page-layout/deserialize", json=payload)
    assert r.status_code == 200
    assert r.json() == {"blocks": []}


def test_optimize(client, raw_editor_graph):
    r = client.post("/page-layout/optimize", json=raw_editor_graph)
    assert r.status_code == 200
    data = r.json()
    assert "displayName" not in data["layout"]["hero-1"]
    assert data["stats"]["reduction"] > 0


# ── Validation ───────────────────────────────────────────────────────────────

def test_can_attach(client):
    r = client.post("/page-layout/can-attach", json={"parent": "MenuItemContainer", "candidates": ["MenuItemLink"]})
    assert r.json() == {"allowed": True}
    r = client.post("/page-layout/can-attach", json={"parent": "MenuItemContainer", "candidates": ["BannerBlockCraft"]})
    assert r.json() == {"allowed": False}


def test_validate(client):
    r = client.post("/page-layout/validate", json=_layout())
    assert r.json() == {"valid": True, "errors": []}

    broken = _layout()
    broken[CANVAS_ID]["nodes"].append("ghost")
    r = client.post("/page-layout/validate", json=broken)
    assert r.json()["valid"] is False


def test_catalog(client):
    types = [b["type"] for b in client.get("/page-layout/catalog").json()["blocks"]]
    assert "hero" in types
    assert "menu_link" in types


# ── Pages stockées ───────────────────────────────────────────────────────────

def test_save_and_read_page(client):
    r = client.put("/page-layout/pages/home", json=_layout())
    assert r.status_code == 200
    data = r.json()
    assert data["saved"] is True
    assert data["stats"]["reduction"] > 0

    blocks = client.get("/page-layout/pages/home").json()["blocks"]
    assert [b["type"] for b in blocks] == ["hero", "menu"]
    assert blocks[1]["children"][0]["props"] == {"label": "Accueil"}

    layout = client.get("/page-layout/pages/home/layout").json()["layout"]
    assert all("displayName" not in node for node in layout.values())

    assert client.get("/page-layout/pages").json()["pages"][0]["slug"] == "home"


def test_save_invalid_layout_422(client):
    broken = _layout()
    broken["block-menu-1"]["nodes"].append("block-hero-0")
    r = client.put("/page-layout/pages/home", json=broken)
    assert r.status_code == 422
    assert isinstance(r.json()["detail"], list)
    assert client.get("/page-layout/pages/home").status_code == 404


def test_pages_scoped_by_store(client):
    client.put("/page-layout/pages/home?store_id=shop-a", json=_layout())
    assert client.get("/page-layout/pages/home?store_id=shop-b").status_code == 404
    assert client.get("/page-layout/pages/home?store_id=shop-a").status_code == 200


def test_delete_page(client):
    client.put("/page-layout/pages/home", json=_layout())
    assert client.delete("/page-layout/pages/home").json() == {"deleted": True}
    assert client.delete("/page-layout/pages/home").status_code == 404
    assert client.get("/page-layout/pages/home/layout").status_code == 404
