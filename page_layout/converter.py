"""
Converter — graphe de nœuds ↔ liste de Block.

deserialize(document) → List[Block]   ne lève jamais ; [] si document corrompu
serialize(blocks)     → str           lève UnknownBlockType si un bloc actif est inconnu

Les ids générés sont déterministes (type + position) : deux conversions
du même input produisent le même JSON.
"""
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .core.errors import MalformedDocument
from .core.schemas import CANVAS_ID, CONTAINER_RESOLVED_NAME, ROOT_ID, Block, Node, NodeType, graph_to_dict
from .registry import REGISTRY, TypeRegistry

log = logging.getLogger(__name__)

Document = Union[str, bytes, Mapping[str, Any]]
BlockInput = Union[Block, Mapping[str, Any]]


def dumps(graph: Mapping[str, Any]) -> str:
    """JSON compact — également la mesure de taille de l'optimiseur."""
    return json.dumps(graph, ensure_ascii=False, separators=(",", ":"))


# ── Graph → Blocks ───────────────────────────────────────────────────────────

def load_graph(document: Document) -> Dict[str, Any]:
    """Parse le document et vérifie la présence de ROOT et de ROOT.nodes."""
    if isinstance(document, (str, bytes, bytearray)):
        try:
            document = json.loads(document)
        except (TypeError, ValueError) as e:
            raise MalformedDocument(f"JSON invalide : {e}") from e

    if not isinstance(document, Mapping):
        raise MalformedDocument(f"Objet attendu, reçu {type(document).__name__}")

    root = document.get(ROOT_ID)
    if not isinstance(root, Mapping):
        raise MalformedDocument("Nœud ROOT absent")
    if not isinstance(root.get("nodes"), list):
        raise MalformedDocument("ROOT.nodes absent")
    return dict(document)


def _resolved_name(node: Mapping[str, Any]) -> Optional[str]:
    node_type = node.get("type")
    name = node_type.get("resolvedName") if isinstance(node_type, Mapping) else None
    return name if isinstance(name, str) else None


def _is_structural_container(node: Any, registry: TypeRegistry) -> bool:
    """Conteneur de mise en page : resolvedName non enregistré et liste d'enfants."""
    return (
        isinstance(node, Mapping)
        and registry.block_type_for(_resolved_name(node)) is None
        and isinstance(node.get("nodes"), list)
    )


def _canvas_children(graph: Mapping[str, Any], registry: TypeRegistry) -> List[str]:
    """
    Enfants du canvas container : premier enfant de ROOT de type div, à défaut
    premier enfant non enregistré portant une liste d'enfants.
    Sans conteneur (ancien format à plat), ROOT porte directement les blocs.
    """
    root_children = graph[ROOT_ID]["nodes"]
    candidates = [
        graph[c] for c in root_children
        if isinstance(c, str) and _is_structural_container(graph.get(c), registry)
    ]
    for canvas in candidates:
        if _resolved_name(canvas) == CONTAINER_RESOLVED_NAME:
            return canvas["nodes"]
    if candidates:
        return candidates[0]["nodes"]
    return root_children


_END = object()


def _build_blocks(
    graph: Mapping[str, Any],
    child_ids: Sequence[str],
    registry: TypeRegistry,
) -> List[Block]:
    """
    Parcours en profondeur avec pile explicite (pas de limite de récursion).
    order = rang parmi les blocs émis : les nœuds ignorés ne laissent pas de trou.
    """
    visited = set()
    blocks: List[Block] = []
    # (ids restants, blocs émis à ce niveau, bloc parent en attente de ses enfants)
    stack = [(iter(child_ids), blocks, None)]
    while stack:
        ids, out, pending = stack[-1]
        node_id = next(ids, _END)
        if node_id is _END:
            stack.pop()
            if pending is not None:
                block_type, props, parent_out = pending
                parent_out.append(Block(
                    type=block_type, enabled=True, order=len(parent_out), props=props, children=out,
                ))
            continue

        if not isinstance(node_id, str) or node_id in visited:
            continue
        node = graph.get(node_id)
        if not isinstance(node, Mapping):
            continue
        visited.add(node_id)

        resolved = _resolved_name(node)
        block_type = registry.block_type_for(resolved)
        if block_type is None:
            log.debug("Nœud %s ignoré : composant inconnu %r", node_id, resolved)
            continue

        props = node.get("props")
        props = props if isinstance(props, Mapping) else {}
        sub_ids = node.get("nodes")
        if isinstance(sub_ids, list) and sub_ids:
            stack.append((iter(sub_ids), [], (block_type, props, out)))
        else:
            out.append(Block(type=block_type, enabled=True, order=len(out), props=props))
    return blocks


def graph_to_blocks(graph: Document, registry: TypeRegistry = REGISTRY) -> List[Block]:
    """Version stricte : lève MalformedDocument si la structure racine est absente."""
    graph = load_graph(graph)
    return _build_blocks(graph, _canvas_children(graph, registry), registry)


def deserialize(document: Document, registry: TypeRegistry = REGISTRY) -> List[Block]:
    """
    Document persisté → blocs ordonnés pour le renderer.
    Un document corrompu donne une page vide, jamais une exception.
    order est renuméroté 0..n-1 sur les blocs émis, et non la position brute du nœud
    dans le graphe : un composant inconnu ignoré ne laisse pas de trou.
    """
    try:
        return graph_to_blocks(document, registry)
    except MalformedDocument as e:
        log.warning("Layout corrompu, page vide : %s", e)
        return []


# ── Blocks → Graph ───────────────────────────────────────────────────────────

def _sorted_enabled(blocks: Sequence[BlockInput]) -> List[Block]:
    """Filtre enabled=False puis tri stable par order (absent → 0)."""
    items = [b if isinstance(b, Block) else Block.model_validate(b) for b in blocks]
    return sorted(
        (b for b in items if b.enabled is not False),
        key=lambda b: b.order if b.order is not None else 0,
    )


def _add_block_nodes(
    nodes: Dict[str, Node],
    parent_id: str,
    id_prefix: str,
    blocks: Sequence[BlockInput],
    registry: TypeRegistry,
) -> None:
    for index, block in enumerate(_sorted_enabled(blocks)):
        resolved = registry.resolved_name_for(block.type)
        node_id = f"{id_prefix}-{block.type}-{index}"
        node = Node(
            type=NodeType(resolved_name=resolved),
            props=block.props,
            parent=parent_id,
            display_name=resolved,
        )
        nodes[node_id] = node
        nodes[parent_id].nodes.append(node_id)
        if block.children:
            node.is_canvas = True
            _add_block_nodes(nodes, node_id, node_id, block.children, registry)


def blocks_to_graph(blocks: Sequence[BlockInput], registry: TypeRegistry = REGISTRY) -> Dict[str, dict]:
    """
    Liste de blocs → graphe persistable.
    ROOT → canvas-container → blocs actifs triés.
    """
    nodes: Dict[str, Node] = {
        ROOT_ID: Node.container(),
        CANVAS_ID: Node.container(parent=ROOT_ID, is_canvas=True),
    }
    nodes[ROOT_ID].nodes.append(CANVAS_ID)
    _add_block_nodes(nodes, CANVAS_ID, "block", blocks, registry)
    log.debug("Conversion de %d blocs → %d nœuds", len(blocks), len(nodes))
    return graph_to_dict(nodes)


def serialize(blocks: Sequence[BlockInput], registry: TypeRegistry = REGISTRY) -> str:
    """Blocs → JSON persisté. UnknownBlockType interrompt toute la sérialisation."""
    return dumps(blocks_to_graph(blocks, registry))
