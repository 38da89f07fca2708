"""Bloc Bannière — image + texte + CTA, positionnable."""
from typing import Literal, Optional
from .base import BlockProps


class BannerProps(BlockProps):
    image: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    cta_text: Optional[str] = None
    cta_link: Optional[str] = None
    position: Literal["top", "middle", "bottom"] = "middle"
