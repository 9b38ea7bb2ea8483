# file: LISTINGS/main.py

# Standard library
import logging
import os
from typing import Optional

# FastAPI core
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

# Third‑party
import uvicorn
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

# ------------------------------
# Routers and store
# ------------------------------
from LISTINGS.core.config import (
    CORS_ORIGINS,
    PORT,
    PUBLIC_DIR,
    STATIC_URL_PREFIX,
    UPLOAD_DIR,
    UPLOAD_URL_PREFIX,
)
from LISTINGS.core.firebase import create_firestore_client
from LISTINGS.core.logger import setup_logging
from LISTINGS.core.rate_limit import limiter, rate_limit_handler
from LISTINGS.core.store import ListingStore
from LISTINGS.HOME.listing_routes import router as listing_router
from LISTINGS.HOME.service import ListingService

logger = logging.getLogger("main")


def create_app(store: Optional[ListingStore] = None, upload_dir: str = UPLOAD_DIR) -> FastAPI:
    """
    Build the listings app.

    When no store is passed in, a Firestore-backed store is created on
    startup and closed on shutdown.
    """
    app = FastAPI(title="Listings API")
    app.state.upload_dir = upload_dir
    app.state.listing_service = ListingService(store) if store is not None else None

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

    # Only the documented routes exist; any other method is not found
    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            return JSONResponse(status_code=404, content={"detail": "Not Found"})
        return await http_exception_handler(request, exc)

    # Ping endpoint
    @app.get("/ping")
    async def ping(request: Request):
        return {"message": "pong"}

    # Uploaded images
    os.makedirs(upload_dir, exist_ok=True)
    app.mount(
        f"/{UPLOAD_URL_PREFIX}",
        StaticFiles(directory=upload_dir),
        name="uploads",
    )

    # Placeholder card images
    app.mount(
        f"/{STATIC_URL_PREFIX}",
        StaticFiles(directory=PUBLIC_DIR),
        name="static",
    )

    app.include_router(listing_router)

    @app.on_event("startup")
    async def startup_event():
        if app.state.listing_service is None:
            app.state.listing_service = ListingService(ListingStore(create_firestore_client()))
            app.state.owns_store = True
            logger.info("[STORE] Firestore listing store ready.")

    @app.on_event("shutdown")
    async def shutdown_event():
        if getattr(app.state, "owns_store", False):
            app.state.listing_service.store.close()
            logger.info("[STORE] Firestore listing store closed.")

    return app


def run() -> None:
    setup_logging()
    uvicorn.run(create_app(), host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    run()
