"""Core module pour page_layout."""
from .schemas import (
    ROOT_ID,
    CANVAS_ID,
    CONTAINER_RESOLVED_NAME,
    Block,
    NodeType,
    Node,
    graph_to_dict,
)
from .errors import (
    PageLayoutError,
    MalformedDocument,
    UnknownBlockKind,
    UnknownBlockType,
    ContainmentViolation,
)

__all__ = [
    "ROOT_ID",
    "CANVAS_ID",
    "CONTAINER_RESOLVED_NAME",
    "Block",
    "NodeType",
    "Node",
    "graph_to_dict",
    "PageLayoutError",
    "MalformedDocument",
    "UnknownBlockKind",
    "UnknownBlockType",
    "ContainmentViolation",
]
