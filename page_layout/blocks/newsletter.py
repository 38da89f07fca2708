"""Bloc Newsletter — formulaire d'inscription."""
from typing import Optional
from .base import BlockProps


class NewsletterProps(BlockProps):
    title: Optional[str] = None
    subtitle: Optional[str] = None
    placeholder: Optional[str] = None
