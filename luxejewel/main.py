# luxejewel/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
import uvicorn

from luxejewel.api.routers import (
    admin,
    auth,
    cart,
    health,
    orders,
    products,
    recommendations,
    reviews,
    search,
    wishlist,
)
from luxejewel.data.database import create_tables
from luxejewel.utils.settings import ALLOWED_ORIGINS
from luxejewel.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database...")
    try:
        create_tables()
    except SQLAlchemyError as e:
        logger.error(f"Failed to create tables: {e}")
        raise
    yield


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Database error"})


def create_app() -> FastAPI:
    app = FastAPI(
        title="LuxeJewel Storefront",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in ALLOWED_ORIGINS if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    # Include routers
    app.include_router(health.router)
    app.include_router(products.router)
    app.include_router(search.router)
    app.include_router(recommendations.router)
    app.include_router(cart.router)
    app.include_router(wishlist.router)
    app.include_router(orders.router)
    app.include_router(reviews.router)
    app.include_router(auth.router)
    app.include_router(admin.router)

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
