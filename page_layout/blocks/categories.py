"""Bloc Catégories."""
from typing import Literal, Optional
from .base import BlockProps


class CategoriesProps(BlockProps):
    title: Optional[str] = None
    limit: Optional[int] = None
    layout: Literal["grid", "list"] = "grid"
