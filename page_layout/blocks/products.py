"""Bloc Produits — grille ou carrousel filtré par catégorie."""
from typing import Literal, Optional
from .base import BlockProps


class ProductsProps(BlockProps):
    title: Optional[str] = None
    category_id: Optional[str] = None
    limit: Optional[int] = None
    show_filters: bool = False
    layout: Literal["grid", "carousel"] = "grid"
