"""
Type Registry — correspondance type de bloc ↔ resolvedName + règles de contenance.

  "hero"  ↔  "HeroBlockCraft"
  "menu"  ↔  "MenuItemContainer"  (n'accepte que la famille MenuItem*)

Sens Block → Node strict (UnknownBlockType), sens Node → Block tolérant (None).
"""
from typing import Callable, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel

from .blocks import (
    BlockProps,
    HeroProps, ProductsProps, CategoriesProps, BannerProps, TextProps, ImageProps,
    TestimonialsProps, FAQProps, NewsletterProps, FeaturesProps,
    MenuProps, MenuLinkProps, MENU_ITEM_PREFIX,
)
from .core.errors import UnknownBlockKind, UnknownBlockType
from .core.schemas import CONTAINER_RESOLVED_NAME

ContainmentRule = Callable[[Sequence[str]], bool]


def accept_any(candidates: Sequence[str]) -> bool:
    return True


def accept_prefix(prefix: str) -> ContainmentRule:
    """Règle : tous les candidats doivent porter le préfixe de famille."""
    def rule(candidates: Sequence[str]) -> bool:
        return all(name.startswith(prefix) for name in candidates)
    return rule


class BlockKind(BaseModel):
    """Déclaration d'un type de bloc."""
    block_type: str
    resolved_name: str
    props_model: Type[BlockProps] = BlockProps
    accepts: ContainmentRule = accept_any


class TypeRegistry:
    """Source unique de vérité type ↔ resolvedName."""

    def __init__(self, kinds: Sequence[BlockKind] = ()):
        self._by_type: Dict[str, BlockKind] = {}
        self._by_resolved: Dict[str, BlockKind] = {}
        for kind in kinds:
            self.register(kind)

    def register(self, kind: BlockKind) -> None:
        if kind.block_type in self._by_type:
            raise ValueError(f"Type déjà enregistré : {kind.block_type!r}")
        if kind.resolved_name in self._by_resolved or kind.resolved_name == CONTAINER_RESOLVED_NAME:
            raise ValueError(f"resolvedName déjà utilisé : {kind.resolved_name!r}")
        self._by_type[kind.block_type] = kind
        self._by_resolved[kind.resolved_name] = kind

    @property
    def block_types(self) -> List[str]:
        return list(self._by_type)

    def resolved_name_for(self, block_type: str) -> str:
        kind = self._by_type.get(block_type)
        if kind is None:
            raise UnknownBlockType(block_type, self.block_types)
        return kind.resolved_name

    def block_type_for(self, resolved_name: Optional[str]) -> Optional[str]:
        """None si le resolvedName est inconnu — ce n'est pas une erreur."""
        kind = self._by_resolved.get(resolved_name) if resolved_name else None
        return kind.block_type if kind else None

    def kind_for_resolved_name(self, resolved_name: str) -> BlockKind:
        kind = self._by_resolved.get(resolved_name)
        if kind is None:
            raise UnknownBlockKind(resolved_name)
        return kind

    def is_known_resolved_name(self, resolved_name: Optional[str]) -> bool:
        """Types enregistrés + conteneur structurel (div)."""
        return resolved_name == CONTAINER_RESOLVED_NAME or resolved_name in self._by_resolved

    def containment_rule(self, resolved_name: str) -> ContainmentRule:
        kind = self._by_resolved.get(resolved_name)
        return kind.accepts if kind else accept_any

    def parse_props(self, block_type: str, props: dict) -> BlockProps:
        kind = self._by_type.get(block_type)
        if kind is None:
            raise UnknownBlockType(block_type, self.block_types)
        return kind.props_model.model_validate(props)

    def catalog(self) -> List[dict]:
        """Types disponibles + JSON schema de leurs props."""
        return [
            {
                "type": kind.block_type,
                "resolved_name": kind.resolved_name,
                "schema": kind.props_model.model_json_schema(),
            }
            for kind in self._by_type.values()
        ]


_BLOCK_KINDS: List[BlockKind] = [
    BlockKind(block_type="hero",         resolved_name="HeroBlockCraft",         props_model=HeroProps),
    BlockKind(block_type="products",     resolved_name="ProductsBlockCraft",     props_model=ProductsProps),
    BlockKind(block_type="categories",   resolved_name="CategoriesBlockCraft",   props_model=CategoriesProps),
    BlockKind(block_type="banner",       resolved_name="BannerBlockCraft",       props_model=BannerProps),
    BlockKind(block_type="text",         resolved_name="TextBlockCraft",         props_model=TextProps),
    BlockKind(block_type="image",        resolved_name="ImageBlockCraft",        props_model=ImageProps),
    BlockKind(block_type="testimonials", resolved_name="TestimonialsBlockCraft", props_model=TestimonialsProps),
    BlockKind(block_type="faq",          resolved_name="FAQBlockCraft",          props_model=FAQProps),
    BlockKind(block_type="newsletter",   resolved_name="NewsletterBlockCraft",   props_model=NewsletterProps),
    BlockKind(block_type="features",     resolved_name="FeaturesBlockCraft",     props_model=FeaturesProps),
    BlockKind(block_type="menu",         resolved_name="MenuItemContainer",      props_model=MenuProps,
              accepts=accept_prefix(MENU_ITEM_PREFIX)),
    BlockKind(block_type="menu_link",    resolved_name="MenuItemLink",           props_model=MenuLinkProps),
]

REGISTRY = TypeRegistry(_BLOCK_KINDS)
