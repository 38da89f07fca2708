"""Bloc Texte libre."""
from typing import Literal
from .base import BlockProps


class TextProps(BlockProps):
    content: str = ""
    align: Literal["left", "center", "right"] = "left"
    size: Literal["sm", "md", "lg", "xl"] = "md"
