# backend/sitestock/main.py
import logging
import os
from contextlib import asynccontextmanager
from typing import List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .database import create_db_and_tables
from .apps.inventory.router import router as inventory_router
from .apps.inventory.stores import MemoryInventoryStore

logger = logging.getLogger(__name__)


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


def _allowed_origins() -> List[str]:
    """
    Parse CORS_ALLOWED_ORIGINS from env.

    Accepts comma-separated origins. If unset, defaults to local dev ports.
    """
    raw = os.getenv("CORS_ALLOWED_ORIGINS", "")
    if raw:
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        if origins:
            return origins
    return [
        "http://127.0.0.1:5173",
        "http://localhost:5173",
        "http://localhost:8080",
    ]


@asynccontextmanager
async def lifespan(app: FastAPI):
    backend = os.getenv("SITESTOCK_STORE_BACKEND", "sql").lower()
    if backend == "memory":
        if _env_flag("SITESTOCK_SEED_SAMPLE_DATA", "true"):
            app.state.inventory_store = MemoryInventoryStore.with_sample_data()
        else:
            app.state.inventory_store = MemoryInventoryStore()
        logger.info("Using in-memory inventory store")
    elif backend != "sql":
        raise RuntimeError(f"Unknown SITESTOCK_STORE_BACKEND {backend!r}; expected 'sql' or 'memory'.")
    elif _env_flag("SITESTOCK_CREATE_TABLES"):
        create_db_and_tables()
    yield


app = FastAPI(title="SiteStock API", version="1.0.0", lifespan=lifespan)
cors_origins = _allowed_origins()
allow_credentials = "*" not in cors_origins

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(
        "Inventory storage failure",
        exc_info=exc,
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=503,
        content={"detail": "Inventory storage is unavailable."},
    )


@app.get("/", tags=["health"])
def read_root():
    return {"status": "ok", "message": "SiteStock backend is running"}


@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}


app.include_router(inventory_router)
