"""
Session d'édition — graphe en mémoire muté par les actions de l'utilisateur.

Chaque mutation structurelle (insert, move, reorder) passe par can_attach().
Une mutation refusée renvoie False/None et laisse le graphe intact.
Historique undo/redo borné (snapshots), vidé côté redo à chaque nouvelle édition.
Le chargement vérifie aussi la contenance : undo/redo ne restaurent que des états valides.

Usage:
    >>> session = EditSession.new()
    >>> hero_id = session.insert("hero", props={"title": "Soldes"})
    >>> session.undo()
    >>> blocks = session.to_blocks()
"""
import logging
import os
import uuid
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError

from .converter import BlockInput, Document, blocks_to_graph, graph_to_blocks, load_graph
from .core.errors import ContainmentViolation, MalformedDocument
from .core.schemas import CANVAS_ID, ROOT_ID, Block, Node, NodeType, graph_to_dict
from .optimizer import OptimizationStats, get_optimization_stats, optimize
from .registry import REGISTRY, TypeRegistry
from .validator import can_attach, create_safe_default_layout

log = logging.getLogger(__name__)

HISTORY_LIMIT = int(os.getenv("PAGE_LAYOUT_HISTORY_LIMIT", "50"))

_PROTECTED = (ROOT_ID, CANVAS_ID)


def _insert_at(ids: List[str], new_ids: Sequence[str], index: Optional[int]) -> None:
    pos = len(ids) if index is None else max(0, min(index, len(ids)))
    ids[pos:pos] = list(new_ids)


class EditSession:
    """Propriétaire exclusif d'un graphe en cours d'édition (mono-thread)."""

    def __init__(
        self,
        nodes: Dict[str, Node],
        registry: TypeRegistry = REGISTRY,
        history_limit: Optional[int] = None,
    ):
        self.nodes = nodes
        self.registry = registry
        limit = HISTORY_LIMIT if history_limit is None else history_limit
        self._undo: Deque[Dict[str, Node]] = deque(maxlen=limit)
        self._redo: Deque[Dict[str, Node]] = deque(maxlen=limit)

    # ── Construction ─────────────────────────────────────────────────────────

    @classmethod
    def new(cls, **kwargs) -> "EditSession":
        """Nouvelle page : ROOT + canvas container vide."""
        return cls.from_graph(create_safe_default_layout(), **kwargs)

    @classmethod
    def from_graph(cls, document: Document, **kwargs) -> "EditSession":
        """
        Charge un graphe persisté.
        Lève MalformedDocument si un nœud est invalide, ContainmentViolation si un
        parent porte des enfants qu'il refuse : tout état de l'historique est donc valide.
        """
        graph = load_graph(document)
        nodes: Dict[str, Node] = {}
        for node_id, raw in graph.items():
            try:
                nodes[node_id] = Node.model_validate(raw)
            except ValidationError as e:
                raise MalformedDocument(f"Nœud {node_id} invalide : {e}") from e
        session = cls(nodes, **kwargs)
        for node_id in nodes:
            children = [c for c in session.children_of(node_id) if c in nodes]
            if children:
                session._check_attach(node_id, [nodes[c].resolved_name for c in children])
        return session

    @classmethod
    def from_blocks(cls, blocks: Sequence[BlockInput], **kwargs) -> "EditSession":
        """Charge une définition de page externe (liste de blocs) dans l'éditeur."""
        registry = kwargs.get("registry", REGISTRY)
        return cls.from_graph(blocks_to_graph(blocks, registry), **kwargs)

    # ── Lecture ──────────────────────────────────────────────────────────────

    def node(self, node_id: str) -> Node:
        return self.nodes[node_id]

    def children_of(self, node_id: str) -> List[str]:
        node = self.nodes[node_id]
        ids = list(node.nodes)
        if node.linked_nodes:
            ids.extend(node.linked_nodes.values())
        return ids

    def subtree_ids(self, node_id: str) -> List[str]:
        """node_id + tous ses descendants (nodes et linkedNodes)."""
        result, stack, seen = [], [node_id], set()
        while stack:
            current = stack.pop()
            if current in seen or current not in self.nodes:
                continue
            seen.add(current)
            result.append(current)
            stack.extend(self.children_of(current))
        return result

    def to_graph(self) -> Dict[str, dict]:
        return graph_to_dict(self.nodes)

    def to_blocks(self) -> List[Block]:
        """Snapshot pour le renderer — jamais le graphe lui-même."""
        return graph_to_blocks(self.to_graph(), self.registry)

    def save_payload(self) -> Tuple[Dict[str, Any], OptimizationStats]:
        """Graphe optimisé prêt à persister + statistiques de réduction."""
        raw = self.to_graph()
        optimized = optimize(raw)
        stats = get_optimization_stats(raw, optimized)
        log.info(
            "Layout optimisé : %d → %d octets (-%s%%)",
            stats.original_size, stats.optimized_size, stats.reduction_percent,
        )
        return optimized, stats

    # ── Historique ───────────────────────────────────────────────────────────

    def _snapshot(self) -> Dict[str, Node]:
        return {node_id: node.model_copy(deep=True) for node_id, node in self.nodes.items()}

    def _commit(self, before: Dict[str, Node]) -> None:
        self._undo.append(before)
        self._redo.clear()

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> bool:
        if not self._undo:
            return False
        self._redo.append(self._snapshot())
        self.nodes = self._undo.pop()
        return True

    def redo(self) -> bool:
        if not self._redo:
            return False
        self._undo.append(self._snapshot())
        self.nodes = self._redo.pop()
        return True

    # ── Mutations ────────────────────────────────────────────────────────────

    def _check_attach(self, parent_id: str, resolved_names: List[str]) -> None:
        parent_name = self.nodes[parent_id].resolved_name
        if not can_attach(parent_name, resolved_names, self.registry):
            raise ContainmentViolation(parent_name, resolved_names)

    def _detach(self, node_id: str) -> None:
        parent_id = self.nodes[node_id].parent
        parent = self.nodes.get(parent_id) if parent_id else None
        if parent is None:
            return
        parent.nodes = [c for c in parent.nodes if c != node_id]
        if parent.linked_nodes:
            parent.linked_nodes = {k: v for k, v in parent.linked_nodes.items() if v != node_id}

    def insert(
        self,
        block_type: str,
        parent_id: str = CANVAS_ID,
        index: Optional[int] = None,
        props: Optional[Mapping[str, Any]] = None,
    ) -> Optional[str]:
        """Ajoute un bloc sous parent_id. Renvoie l'id créé, ou None si refusé."""
        resolved = self.registry.resolved_name_for(block_type)
        if parent_id not in self.nodes:
            log.info("Insertion refusée : parent %s introuvable", parent_id)
            return None
        try:
            self._check_attach(parent_id, [resolved])
        except ContainmentViolation as e:
            log.info("Insertion refusée : %s", e)
            return None

        before = self._snapshot()
        node_id = f"{block_type}-{uuid.uuid4().hex[:10]}"
        self.nodes[node_id] = Node(
            type=NodeType(resolved_name=resolved),
            props=dict(props or {}),
            parent=parent_id,
            display_name=resolved,
        )
        _insert_at(self.nodes[parent_id].nodes, [node_id], index)
        self._commit(before)
        return node_id

    def move(self, node_ids: Iterable[str], new_parent_id: str, index: Optional[int] = None) -> bool:
        """
        Déplace un ensemble de nœuds (avec leurs sous-arbres) sous new_parent_id.
        Atomique : tous les nœuds sont déplacés, ou aucun.
        index = position dans la liste du parent après retrait des nœuds déplacés.
        """
        ids = list(dict.fromkeys(node_ids))
        if not ids or new_parent_id not in self.nodes or any(i not in self.nodes for i in ids):
            log.info("Déplacement refusé : nœud introuvable")
            return False
        if any(i in _PROTECTED for i in ids):
            log.info("Déplacement refusé : ROOT / canvas non déplaçables")
            return False
        for node_id in ids:
            if new_parent_id in self.subtree_ids(node_id):
                log.info("Déplacement refusé : %s serait son propre descendant", node_id)
                return False
        try:
            self._check_attach(new_parent_id, [self.nodes[i].resolved_name for i in ids])
        except ContainmentViolation as e:
            log.info("Déplacement refusé : %s", e)
            return False

        before = self._snapshot()
        for node_id in ids:
            self._detach(node_id)
            self.nodes[node_id].parent = new_parent_id
        _insert_at(self.nodes[new_parent_id].nodes, ids, index)
        self._commit(before)
        return True

    def reorder(self, node_id: str, index: int) -> bool:
        """Change la position d'un nœud parmi ses frères."""
        node = self.nodes.get(node_id)
        if node is None or node.parent is None:
            return False
        return self.move([node_id], node.parent, index)

    def remove(self, node_id: str) -> bool:
        """Supprime un nœud et tout son sous-arbre."""
        if node_id in _PROTECTED or node_id not in self.nodes:
            return False
        before = self._snapshot()
        self._detach(node_id)
        for descendant in self.subtree_ids(node_id):
            del self.nodes[descendant]
        self._commit(before)
        return True

    def set_props(self, node_id: str, props: Mapping[str, Any], merge: bool = True) -> None:
        """Modification depuis le panneau de réglages."""
        node = self.nodes[node_id]
        before = self._snapshot()
        node.props = {**node.props, **props} if merge else dict(props)
        self._commit(before)

    def set_hidden(self, node_id: str, hidden: bool) -> None:
        node = self.nodes[node_id]
        before = self._snapshot()
        node.hidden = hidden
        self._commit(before)
