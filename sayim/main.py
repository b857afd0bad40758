import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .db.database import create_db_and_tables, make_engine, make_session_maker
from .routers.session import router as session_router
from .services.catalog_client import make_client_from_settings
from .services.local_store import LocalStore, SqlKeyValueStore
from .services.session import CountSession

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


def build_count_session() -> CountSession:
    engine = make_engine()
    create_db_and_tables(engine)
    store = LocalStore(
        SqlKeyValueStore(make_session_maker(engine)),
        key=settings.store_key,
        fail_loud=settings.persistence_fail_loud,
    )
    return CountSession(make_client_from_settings(), store, count_type=settings.count_type)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "count_session", None) is None:
        app.state.count_session = build_count_session()
    yield


app = FastAPI(
    title="Sayım Aktarma API",
    description="Depot count collection and transfer to the inventory system",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session_router, prefix="/session", tags=["session"])

if __name__ == "__main__":
    uvicorn.run("sayim.main:app", host="0.0.0.0", port=8000, reload=True)
