"""
Modèle de persistance — un layout par (boutique, slug de page).
SQLAlchemy (SQLite par défaut). Pas de jeton de concurrence : dernier écrit gagne.
"""
import uuid
from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class PageLayoutDB(Base):
    __tablename__ = "page_layouts"
    __table_args__ = (sa.UniqueConstraint("store_id", "slug", name="uq_page_layout_store_slug"),)

    layout_id:   Mapped[str]      = mapped_column(sa.String, primary_key=True, default=lambda: str(uuid.uuid4()))
    store_id:    Mapped[str]      = mapped_column(sa.String, nullable=False, default="default")
    slug:        Mapped[str]      = mapped_column(sa.String, nullable=False)
    layout_json: Mapped[str]      = mapped_column(sa.Text, nullable=False, default="{}")
    updated_at:  Mapped[datetime] = mapped_column(sa.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
