"""Bloc FAQ — liste question/réponse."""
from typing import List, Optional
from pydantic import BaseModel
from .base import BlockProps


class FAQItem(BaseModel):
    question: str
    answer: str


class FAQProps(BlockProps):
    title: Optional[str] = None
    items: List[FAQItem] = []
