"""
cardtransfer/app.py

FastAPI application entrypoint for the card transfer service.

This module wires together:
- Logging configuration (file-based under logs/)
- CORS and request logging middleware
- Domain routers under cardtransfer/api/ (auth, cards & transfers, admin)
"""

import asyncio

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request

from cardtransfer import __version__, config
from cardtransfer.api.admin import router as admin_router
from cardtransfer.api.auth import router as auth_router
from cardtransfer.api.cards import router as cards_router
from cardtransfer.api.error_handlers import register_error_handlers
from cardtransfer.db.session import AsyncSessionLocal, create_tables, engine
from cardtransfer.db.seed import seed_demo_data
from cardtransfer.logging_config import get_logger, setup_logging

# Configure logging before creating the app
setup_logging(config.LOG_LEVEL)
logger = get_logger("cardtransfer.app")

app = FastAPI(title="Card Transfer API", version=__version__)

# Serializes every debit+credit pair in this process
app.state.transfer_lock = asyncio.Lock()

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """
    Lightweight request logger. Bodies are not logged: they carry passwords
    and verification codes.
    """
    logger.info(
        "HTTP %s %s from %s",
        request.method,
        request.url.path,
        request.client.host if request.client else "?",
    )
    response = await call_next(request)
    logger.info("HTTP %s %s -> %s", request.method, request.url.path, response.status_code)
    return response


@app.get("/api/health")
async def health():
    """
    Simple health check endpoint.
    """
    return {"status": "healthy"}


register_error_handlers(app)

app.include_router(auth_router, prefix="/api")
app.include_router(cards_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.on_event("startup")
async def on_startup():
    logger.info("Card transfer service starting up")
    await create_tables()
    if config.SEED_DEMO_DATA:
        async with AsyncSessionLocal() as db:
            await seed_demo_data(db)


@app.on_event("shutdown")
async def on_shutdown():
    try:
        await engine.dispose()
    except Exception:
        logger.exception("Error disposing engine on shutdown")
    logger.info("Card transfer service shutting down")


def main() -> None:
    uvicorn.run("cardtransfer.app:app", host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()
