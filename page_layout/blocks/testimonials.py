"""Bloc Témoignages."""
from typing import List, Optional
from pydantic import BaseModel
from .base import BlockProps


class TestimonialItem(BaseModel):
    name: str
    text: str
    rating: int = 5
    avatar: Optional[str] = None


class TestimonialsProps(BlockProps):
    title: Optional[str] = None
    testimonials: List[TestimonialItem] = []
