"""Bloc Hero — image plein écran, titre, CTA."""
from typing import Optional
from .base import BlockProps


class HeroProps(BlockProps):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    image: Optional[str] = None
    cta_text: Optional[str] = None
    cta_link: Optional[str] = None
    overlay_opacity: Optional[float] = None
    show_text: bool = True
    show_button: bool = True
