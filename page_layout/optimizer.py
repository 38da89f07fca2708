"""
Optimiseur de layout — retire les champs inutiles au rendu avant sauvegarde.

Champs retirés :
  - displayName (UI de l'éditeur uniquement)
  - custom vide ou sans valeur utile
  - hidden à False (défaut)
  - isCanvas sur ROOT (implicite)
  - linkedNodes vide, parent de ROOT, toute clé inconnue

optimize(optimize(g)) == optimize(g)  et  taille(optimize(g)) <= taille(g)
"""
import copy
from typing import Any, Dict, Mapping

from pydantic import BaseModel

from .converter import dumps
from .core.schemas import ROOT_ID


class OptimizationStats(BaseModel):
    original_size: int
    optimized_size: int
    reduction: int
    reduction_percent: float


def _has_useful_custom(custom: Any) -> bool:
    if not isinstance(custom, Mapping) or not custom:
        return False
    return any(value is not None and value != "" for value in custom.values())


def optimize_node(node: Mapping[str, Any], node_id: str) -> Dict[str, Any]:
    """
    Ne conserve que les champs nécessaires au rendu. Aucun champ absent n'est ajouté.
    Les valeurs sont copiées : le nœud optimisé ne partage rien avec l'entrée.
    """
    optimized: Dict[str, Any] = {}

    if "type" in node:
        optimized["type"] = copy.deepcopy(node["type"])
    # props / nodes : conservés même vides (feuille ≠ champ omis)
    if "props" in node:
        optimized["props"] = copy.deepcopy(node["props"])
    if "nodes" in node:
        optimized["nodes"] = copy.deepcopy(node["nodes"])

    if node.get("linkedNodes"):
        optimized["linkedNodes"] = copy.deepcopy(node["linkedNodes"])
    if "parent" in node and node_id != ROOT_ID:
        optimized["parent"] = node["parent"]

    if _has_useful_custom(node.get("custom")):
        optimized["custom"] = copy.deepcopy(node["custom"])
    if node.get("hidden") is True:
        optimized["hidden"] = True
    if node.get("isCanvas") is True and node_id != ROOT_ID:
        optimized["isCanvas"] = True

    return optimized


def optimize(raw_graph: Any) -> Any:
    """Graphe brut → graphe minimal. Fonction pure ; une entrée non-dict est renvoyée telle quelle."""
    if not isinstance(raw_graph, Mapping):
        return raw_graph

    return {
        node_id: optimize_node(node, node_id)
        for node_id, node in raw_graph.items()
        if isinstance(node, Mapping)
    }


def get_optimization_stats(original: Mapping[str, Any], optimized: Mapping[str, Any]) -> OptimizationStats:
    """Réduction de taille (longueur du JSON compact)."""
    original_size = len(dumps(original))
    optimized_size = len(dumps(optimized))
    reduction = original_size - optimized_size
    percent = (reduction / original_size) * 100 if original_size > 0 else 0.0

    return OptimizationStats(
        original_size=original_size,
        optimized_size=optimized_size,
        reduction=reduction,
        reduction_percent=round(percent, 2),
    )
