"""
page_layout — moteur de layout des pages vitrine.

Graphe de nœuds (éditeur / persistance) ↔ liste de blocs (renderer).

Usage:
    >>> from page_layout import serialize, deserialize, optimize, can_attach
    >>> doc = serialize([{"type": "hero", "props": {"title": "Soldes"}}])
    >>> deserialize(doc)
    [Block(id=None, type='hero', enabled=True, order=0, props={'title': 'Soldes'}, styles=None, children=None)]

Usage (édition):
    >>> from page_layout import EditSession
    >>> session = EditSession.new()
    >>> session.insert("banner", props={"image": "x.png"})
"""
from .core.schemas import ROOT_ID, CANVAS_ID, CONTAINER_RESOLVED_NAME, Block, Node, NodeType
from .core.errors import (
    PageLayoutError, MalformedDocument, UnknownBlockKind, UnknownBlockType, ContainmentViolation,
)
from .registry import REGISTRY, TypeRegistry, BlockKind, accept_any, accept_prefix
from .converter import deserialize, serialize, graph_to_blocks, blocks_to_graph, load_graph
from .optimizer import optimize, get_optimization_stats, OptimizationStats
from .validator import (
    can_attach, create_safe_default_layout, validate_and_clean_layout,
    validate_layout_before_save, LayoutValidation,
)
from .session import EditSession

__version__ = "0.1.0"

__all__ = [
    # modèle
    "ROOT_ID", "CANVAS_ID", "CONTAINER_RESOLVED_NAME", "Block", "Node", "NodeType",
    # erreurs
    "PageLayoutError", "MalformedDocument", "UnknownBlockKind", "UnknownBlockType", "ContainmentViolation",
    # registry
    "REGISTRY", "TypeRegistry", "BlockKind", "accept_any", "accept_prefix",
    # conversion
    "deserialize", "serialize", "graph_to_blocks", "blocks_to_graph", "load_graph",
    # optimisation
    "optimize", "get_optimization_stats", "OptimizationStats",
    # validation
    "can_attach", "create_safe_default_layout", "validate_and_clean_layout",
    "validate_layout_before_save", "LayoutValidation",
    # édition
    "EditSession",
]
