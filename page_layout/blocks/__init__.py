"""
Props typées par type de bloc — exports publics.
"""
from typing import Literal

from .base import BlockProps
from .hero import HeroProps
from .products import ProductsProps
from .categories import CategoriesProps
from .banner import BannerProps
from .text import TextProps
from .image import ImageProps
from .testimonials import TestimonialsProps, TestimonialItem
from .faq import FAQProps, FAQItem
from .newsletter import NewsletterProps
from .features import FeaturesProps, FeatureItem
from .menu import MenuProps, MenuLinkProps, MENU_ITEM_PREFIX

# Ensemble fermé des types connus côté renderer
KnownBlockType = Literal[
    "hero",
    "products",
    "categories",
    "banner",
    "text",
    "image",
    "testimonials",
    "faq",
    "newsletter",
    "features",
    "menu",
    "menu_link",
]

__all__ = [
    "BlockProps",
    "HeroProps",
    "ProductsProps",
    "CategoriesProps",
    "BannerProps",
    "TextProps",
    "ImageProps",
    "TestimonialsProps", "TestimonialItem",
    "FAQProps", "FAQItem",
    "NewsletterProps",
    "FeaturesProps", "FeatureItem",
    "MenuProps", "MenuLinkProps", "MENU_ITEM_PREFIX",
    "KnownBlockType",
]
