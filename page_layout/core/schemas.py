"""
Schémas Pydantic du layout de page.

Deux représentations d'une même page :
  Block  → liste ordonnée, typée, consommée par le renderer (snapshot immuable)
  Node   → graphe id → nœud persisté / édité (arène, références par id uniquement)

Format persisté :
{
  "ROOT":             {"type": {"resolvedName": "div"}, "nodes": ["canvas-container"], "props": {}},
  "canvas-container": {"type": {"resolvedName": "div"}, "nodes": ["block-hero-0"], "props": {}, "parent": "ROOT"},
  "block-hero-0":     {"type": {"resolvedName": "HeroBlockCraft"}, "props": {...}, "nodes": [], "parent": "canvas-container"}
}
"""
import copy
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

ROOT_ID = "ROOT"
CANVAS_ID = "canvas-container"
CONTAINER_RESOLVED_NAME = "div"


# ── Block (côté renderer) ────────────────────────────────────────────────────

class Block(BaseModel):
    """Bloc de contenu rendu sur la vitrine."""
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    type: str = Field(..., description="Tag du bloc (hero, banner, products...)")
    enabled: bool = True
    order: Optional[int] = None
    props: Dict[str, Any] = Field(default_factory=dict)
    styles: Optional[Dict[str, str]] = None
    children: Optional[List["Block"]] = None

    def typed_props(self):
        """Vue typée des props via le registry (HeroProps, BannerProps...)."""
        from ..registry import REGISTRY
        return REGISTRY.parse_props(self.type, self.props)


# ── Node-Graph (côté éditeur / persistance) ──────────────────────────────────

class NodeType(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    resolved_name: str = Field(..., alias="resolvedName")


class Node(BaseModel):
    """Nœud du graphe. Les relations parent/enfants sont exprimées par id."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    type: NodeType
    props: Dict[str, Any] = Field(default_factory=dict)
    nodes: List[str] = Field(default_factory=list)
    linked_nodes: Optional[Dict[str, str]] = Field(default=None, alias="linkedNodes")
    parent: Optional[str] = None
    display_name: Optional[str] = Field(default=None, alias="displayName")
    custom: Optional[Dict[str, Any]] = None
    hidden: Optional[bool] = None
    is_canvas: Optional[bool] = Field(default=None, alias="isCanvas")

    @property
    def resolved_name(self) -> str:
        return self.type.resolved_name

    @classmethod
    def container(cls, parent: Optional[str] = None, is_canvas: Optional[bool] = None) -> "Node":
        """Conteneur structurel (div) — ROOT ou canvas."""
        return cls(type=NodeType(resolved_name=CONTAINER_RESOLVED_NAME), parent=parent, is_canvas=is_canvas)

    def to_dict(self) -> dict:
        """Forme JSON du nœud (clés camelCase, champs optionnels absents si non définis)."""
        data: Dict[str, Any] = {
            "type": {"resolvedName": self.type.resolved_name},
            "props": copy.deepcopy(self.props),
            "nodes": list(self.nodes),
        }
        if self.linked_nodes is not None:
            data["linkedNodes"] = dict(self.linked_nodes)
        if self.parent is not None:
            data["parent"] = self.parent
        if self.display_name is not None:
            data["displayName"] = self.display_name
        if self.custom is not None:
            data["custom"] = copy.deepcopy(self.custom)
        if self.hidden is not None:
            data["hidden"] = self.hidden
        if self.is_canvas is not None:
            data["isCanvas"] = self.is_canvas
        return data


def graph_to_dict(nodes: Dict[str, Node]) -> Dict[str, dict]:
    """Dict[str, Node] → graphe JSON-compatible."""
    return {node_id: node.to_dict() for node_id, node in nodes.items()}
