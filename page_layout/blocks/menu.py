"""
Blocs Menu — conteneur d'items + liens.
Le conteneur n'accepte que des enfants de la famille MenuItem (voir registry).
"""
from typing import Literal, Optional
from .base import BlockProps

MENU_ITEM_PREFIX = "MenuItem"


class MenuProps(BlockProps):
    title: Optional[str] = None
    orientation: Literal["horizontal", "vertical"] = "horizontal"


class MenuLinkProps(BlockProps):
    label: str = ""
    link_type: Literal["link", "category", "page"] = "link"
    url: str = "/"
    target: Optional[str] = None
