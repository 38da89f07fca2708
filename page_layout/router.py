"""
Router FastAPI — endpoints page_layout.

POST   /page-layout/deserialize   → graphe → {"blocks": [...]}  (jamais d'erreur, [] si corrompu)
POST   /page-layout/serialize     → {"blocks": [...]} → {"layout": graphe}  (422 si type inconnu)
POST   /page-layout/optimize      → graphe → {"layout", "stats"}
POST   /page-layout/can-attach    → {"parent", "candidates"} → {"allowed": bool}
POST   /page-layout/validate      → graphe → {"valid", "errors"}
GET    /page-layout/catalog       → types de blocs + JSON schemas des props
GET    /page-layout/pages         → slugs enregistrés
GET    /page-layout/pages/{slug}  → blocs rendus depuis le layout stocké
GET    /page-layout/pages/{slug}/layout → graphe nettoyé pour l'éditeur
PUT    /page-layout/pages/{slug}  → valide, optimise, stocke (dernier écrit gagne)
DELETE /page-layout/pages/{slug}
"""
import json
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from .converter import blocks_to_graph, deserialize, dumps
from .core.errors import UnknownBlockType
from .core.schemas import Block
from .database import (
    db_delete_page_layout, db_get_page_layout, db_list_page_layouts, db_save_page_layout, get_db,
)
from .optimizer import get_optimization_stats, optimize
from .registry import REGISTRY
from .validator import LayoutValidation, can_attach, validate_and_clean_layout, validate_layout_before_save

log = logging.getLogger(__name__)

router = APIRouter(prefix="/page-layout", tags=["page_layout"])


class SerializeRequest(BaseModel):
    blocks: List[Block] = Field(default_factory=list)


class CanAttachRequest(BaseModel):
    parent: str
    candidates: List[str] = Field(default_factory=list)


@router.post("/deserialize", summary="Convertit un graphe en blocs")
def deserialize_layout(document: Any = Body(...)) -> dict:
    return {"blocks": [b.model_dump() for b in deserialize(document)]}


@router.post("/serialize", summary="Convertit des blocs en graphe")
def serialize_blocks(req: SerializeRequest) -> dict:
    try:
        return {"layout": blocks_to_graph(req.blocks)}
    except UnknownBlockType as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/optimize", summary="Réduit un graphe à sa forme minimale")
def optimize_layout(layout: Dict[str, Any] = Body(...)) -> dict:
    optimized = optimize(layout)
    return {"layout": optimized, "stats": get_optimization_stats(layout, optimized).model_dump()}


@router.post("/can-attach", summary="Vérifie une règle de contenance")
def can_attach_route(req: CanAttachRequest) -> dict:
    return {"allowed": can_attach(req.parent, req.candidates)}


@router.post("/validate", response_model=LayoutValidation, summary="Valide un graphe avant sauvegarde")
def validate(layout: Any = Body(...)) -> LayoutValidation:
    return validate_layout_before_save(layout)


@router.get("/catalog", summary="Liste les blocs disponibles et leurs schemas")
def catalog() -> dict:
    return {"blocks": REGISTRY.catalog()}


# ── Pages stockées ───────────────────────────────────────────────────────────

@router.get("/pages", summary="Liste les pages enregistrées")
def list_pages(store_id: str = "default", db: Session = Depends(get_db)) -> dict:
    return {"pages": [
        {"slug": p.slug, "updated_at": p.updated_at.isoformat() if p.updated_at else None}
        for p in db_list_page_layouts(db, store_id)
    ]}


@router.get("/pages/{slug}", summary="Blocs d'une page pour le rendu")
def get_page_blocks(slug: str, store_id: str = "default", db: Session = Depends(get_db)) -> dict:
    obj = db_get_page_layout(db, slug, store_id)
    if obj is None:
        raise HTTPException(status_code=404, detail=f"Page '{slug}' introuvable")
    return {"slug": slug, "blocks": [b.model_dump() for b in deserialize(obj.layout_json)]}


@router.get("/pages/{slug}/layout", summary="Graphe d'une page pour l'éditeur")
def get_page_layout(slug: str, store_id: str = "default", db: Session = Depends(get_db)) -> dict:
    obj = db_get_page_layout(db, slug, store_id)
    if obj is None:
        raise HTTPException(status_code=404, detail=f"Page '{slug}' introuvable")
    try:
        layout = json.loads(obj.layout_json)
    except ValueError:
        log.warning("Layout %s illisible, layout par défaut", slug)
        layout = None
    return {"slug": slug, "layout": validate_and_clean_layout(layout)}


@router.put("/pages/{slug}", summary="Enregistre le layout d'une page")
def save_page(
    slug: str,
    layout: Dict[str, Any] = Body(...),
    store_id: str = "default",
    db: Session = Depends(get_db),
) -> dict:
    validation = validate_layout_before_save(layout)
    if not validation.valid:
        raise HTTPException(status_code=422, detail=validation.errors)

    optimized = optimize(layout)
    stats = get_optimization_stats(layout, optimized)
    db_save_page_layout(db, slug, dumps(optimized), store_id)
    log.info("Layout %s/%s enregistré — %d octets (-%s%%)", store_id, slug, stats.optimized_size, stats.reduction_percent)
    return {"saved": True, "slug": slug, "stats": stats.model_dump()}


@router.delete("/pages/{slug}", summary="Supprime le layout d'une page")
def delete_page(slug: str, store_id: str = "default", db: Session = Depends(get_db)) -> dict:
    if not db_delete_page_layout(db, slug, store_id):
        raise HTTPException(status_code=404, detail=f"Page '{slug}' introuvable")
    return {"deleted": True}
