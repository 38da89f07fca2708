"""Bloc Avantages — icône + titre + description."""
from typing import List, Optional
from pydantic import BaseModel
from .base import BlockProps


class FeatureItem(BaseModel):
    icon: Optional[str] = None
    title: str
    description: str


class FeaturesProps(BlockProps):
    title: Optional[str] = None
    features: List[FeatureItem] = []
