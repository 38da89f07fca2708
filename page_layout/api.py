"""
page_layout — FastAPI app
Démarrer : uvicorn page_layout.api:app --reload --port 8002
"""
import logging

from fastapi import FastAPI

from . import __version__
from .router import router

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s — %(message)s")
log = logging.getLogger(__name__)

app = FastAPI(title="page_layout — moteur de layout", version=__version__, docs_url="/docs")
app.include_router(router)


@app.on_event("startup")
def startup():
    from .database import init_db
    init_db()
    log.info("page_layout prêt")


@app.get("/health")
def health():
    return {"status": "ok", "version": __version__}
