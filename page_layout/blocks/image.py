"""Bloc Image simple."""
from typing import Literal, Optional
from .base import BlockProps


class ImageProps(BlockProps):
    src: Optional[str] = None
    alt: str = "Image"
    width: Optional[int] = None
    height: Optional[int] = None
    align: Literal["left", "center", "right"] = "center"
