# phonedeals/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from phonedeals.api.errors import register_error_handlers
from phonedeals.api.routers import carts, health, orders, wishlist
from phonedeals.data.database import Base, engine
from phonedeals.data import models  # noqa: F401  registers every table on Base.metadata
from phonedeals.data.seed import seed
from phonedeals.utils.settings import ALLOWED_ORIGINS, SEED_CATALOG
from phonedeals.utils.logging import get_logger

logger = get_logger(__name__)


def init_db():
    logger.info(f"Creating tables: {list(Base.metadata.tables.keys())}")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        logger.error(f"Failed to create tables: {e}")
        raise

    if SEED_CATALOG:
        seed()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Old Phone Deals",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(wishlist.router)

    return app


init_db()
app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
