"""SQLite — init + session + CRUD layouts"""
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base, PageLayoutDB

log = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent.parent / "data"

SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def _default_db_url() -> str:
    db_path = os.getenv("PAGE_LAYOUT_DB_PATH", str(DATA_DIR / "page_layout.db"))
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{db_path}"


def init_db(db_url: Optional[str] = None):
    """Crée l'engine, lie SessionLocal et crée les tables."""
    db_url = db_url or _default_db_url()
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    engine = create_engine(db_url, connect_args=connect_args)
    SessionLocal.configure(bind=engine)
    Base.metadata.create_all(bind=engine)
    log.info("DB layouts initialisée (%s)", engine.url.render_as_string(hide_password=True))
    return engine


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# ── Layouts ──
def db_get_page_layout(db: Session, slug: str, store_id: str = "default") -> Optional[PageLayoutDB]:
    return db.query(PageLayoutDB).filter_by(store_id=store_id, slug=slug).first()


def db_list_page_layouts(db: Session, store_id: str = "default") -> List[PageLayoutDB]:
    return db.query(PageLayoutDB).filter_by(store_id=store_id).order_by(PageLayoutDB.slug).all()


def db_save_page_layout(db: Session, slug: str, layout_json: str, store_id: str = "default") -> PageLayoutDB:
    """Upsert — la dernière sauvegarde écrase la précédente."""
    obj = db_get_page_layout(db, slug, store_id)
    if obj is None:
        obj = PageLayoutDB(store_id=store_id, slug=slug, layout_json=layout_json)
        db.add(obj)
    else:
        obj.layout_json = layout_json
        obj.updated_at = datetime.utcnow()
    db.commit(); db.refresh(obj)
    return obj


def db_delete_page_layout(db: Session, slug: str, store_id: str = "default") -> bool:
    obj = db_get_page_layout(db, slug, store_id)
    if obj is None:
        return False
    db.delete(obj); db.commit()
    return True
