"""
Validation structurelle du layout.

can_attach()                  → prédicat pur, appelé avant chaque mutation de l'éditeur
validate_and_clean_layout()   → retire les composants inconnus au chargement (toujours un layout utilisable)
validate_layout_before_save() → liste d'erreurs bloquantes avant sauvegarde
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, Field

from .core.errors import UnknownBlockKind
from .core.schemas import CANVAS_ID, CONTAINER_RESOLVED_NAME, ROOT_ID, Node, graph_to_dict
from .registry import REGISTRY, TypeRegistry

log = logging.getLogger(__name__)


class LayoutValidation(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)


def can_attach(
    parent_resolved_name: str,
    candidate_resolved_names: Sequence[str],
    registry: TypeRegistry = REGISTRY,
) -> bool:
    """Tout ou rien : le parent accepte l'ensemble des candidats, ou aucun."""
    return registry.containment_rule(parent_resolved_name)(list(candidate_resolved_names))


def create_safe_default_layout() -> Dict[str, dict]:
    """Layout vide : ROOT + canvas container."""
    root = Node.container()
    root.nodes.append(CANVAS_ID)
    return graph_to_dict({
        ROOT_ID: root,
        CANVAS_ID: Node.container(parent=ROOT_ID, is_canvas=True),
    })


def _resolved_name(node: Any) -> Optional[str]:
    node_type = node.get("type") if isinstance(node, Mapping) else None
    name = node_type.get("resolvedName") if isinstance(node_type, Mapping) else None
    return name if isinstance(name, str) else None


def _child_ids(node: Mapping[str, Any]) -> List[str]:
    """Enfants ordonnés (nodes) puis slots nommés (linkedNodes)."""
    nodes = node.get("nodes")
    ids = [c for c in nodes if isinstance(c, str)] if isinstance(nodes, list) else []
    linked = node.get("linkedNodes")
    if isinstance(linked, Mapping):
        ids.extend(v for v in linked.values() if isinstance(v, str))
    return ids


def validate_and_clean_layout(layout: Any, registry: TypeRegistry = REGISTRY) -> Dict[str, dict]:
    """
    Retire les nœuds de type inconnu et les références pendantes.
    Les nœuds devenus inaccessibles depuis ROOT sont supprimés.
    """
    if not isinstance(layout, Mapping) or not isinstance(layout.get(ROOT_ID), Mapping):
        log.warning("Layout sans ROOT, layout par défaut utilisé")
        return create_safe_default_layout()

    valid_ids = set()
    warned = set()
    for node_id, node in layout.items():
        name = _resolved_name(node)
        if registry.is_known_resolved_name(name):
            valid_ids.add(node_id)
        elif name not in warned:
            log.warning("Composant invalide retiré : %r", name)
            warned.add(name)

    if ROOT_ID not in valid_ids:
        log.warning("ROOT invalide, layout par défaut utilisé")
        return create_safe_default_layout()

    # chaque nœud n'est rattaché qu'à son premier propriétaire (pas de cycle, pas de partage)
    claimed = {ROOT_ID}

    def claim(child_id) -> bool:
        if isinstance(child_id, str) and child_id in valid_ids and child_id not in claimed:
            claimed.add(child_id)
            return True
        return False

    cleaned: Dict[str, dict] = {}
    stack = [ROOT_ID]
    while stack:
        node_id = stack.pop()
        node = dict(layout[node_id])
        nodes = node.get("nodes") if isinstance(node.get("nodes"), list) else []
        node["nodes"] = [c for c in nodes if claim(c)]
        if isinstance(node.get("linkedNodes"), Mapping):
            node["linkedNodes"] = {k: v for k, v in node["linkedNodes"].items() if claim(v)}
        cleaned[node_id] = node
        stack.extend(reversed(_child_ids(node)))

    removed = len(layout) - len(cleaned)
    if removed:
        log.warning("%d nœud(s) retiré(s) du layout", removed)
    return cleaned


def validate_layout_before_save(layout: Any, registry: TypeRegistry = REGISTRY) -> LayoutValidation:
    """Vérifie composants connus, arbre unique enraciné en ROOT et règles de contenance."""
    errors: List[str] = []

    if not isinstance(layout, Mapping):
        return LayoutValidation(valid=False, errors=["Le layout doit être un objet"])
    root = layout.get(ROOT_ID)
    if not isinstance(root, Mapping):
        return LayoutValidation(valid=False, errors=["Le layout doit avoir un nœud ROOT"])
    if root.get("parent") is not None:
        errors.append("ROOT ne doit pas avoir de parent")

    owner: Dict[str, str] = {}
    stack = [ROOT_ID]
    while stack:
        node_id = stack.pop()
        node = layout[node_id]
        name = _resolved_name(node)
        if name != CONTAINER_RESOLVED_NAME:
            try:
                registry.kind_for_resolved_name(name)
            except UnknownBlockKind as e:
                errors.append(f"{e} dans le nœud {node_id}")

        children = []
        for child_id in _child_ids(node):
            child = layout.get(child_id)
            if not isinstance(child, Mapping):
                errors.append(f"Nœud {child_id} référencé par {node_id} introuvable")
                continue
            if child_id == ROOT_ID or child_id in owner:
                errors.append(f"Nœud {child_id} possédé plusieurs fois (dernier parent : {node_id})")
                continue
            if child.get("parent") != node_id:
                errors.append(f"Nœud {child_id} : parent {child.get('parent')!r}, attendu {node_id!r}")
            owner[child_id] = node_id
            children.append(child_id)

        names = [_resolved_name(layout[c]) or "" for c in children]
        if names and not can_attach(name or "", names, registry):
            errors.append(f"{name!r} n'accepte pas {names} (nœud {node_id})")
        stack.extend(reversed(children))

    orphans = sorted(k for k in layout if k != ROOT_ID and k not in owner)
    if orphans:
        errors.append(f"Nœuds inaccessibles depuis ROOT : {orphans}")

    return LayoutValidation(valid=not errors, errors=errors)
