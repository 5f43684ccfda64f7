import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import config
from db import create_db_and_tables
from exceptions import StorefrontException
from utils.error_handler import handle_service_error, handle_unexpected_error
from web.api_router import api_router, generate_correlation_id


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown."""
    await create_db_and_tables()
    logging.info(f"[Startup] Storefront API ready ({config.RUNTIME_ENVIRONMENT.value})")
    yield
    logging.info("[Shutdown] Storefront API stopped")


app = FastAPI(title="Game Storefront", lifespan=lifespan)

if config.CORS_ALLOWED_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ALLOWED_ORIGINS,
        allow_credentials=False,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )
    logging.info(f"[Startup] CORS middleware enabled for origins: {config.CORS_ALLOWED_ORIGINS}")
else:
    logging.debug("[Startup] CORS middleware disabled (no allowed origins configured)")

app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Health check endpoint for Docker healthcheck."""
    return {"status": "healthy"}


@app.exception_handler(StorefrontException)
async def storefront_exception_handler(request: Request, exc: StorefrontException):
    status_code, body = handle_service_error(exc)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


@app.exception_handler(Exception)
async def exception_handler(request: Request, exc: Exception):
    status_code, body = handle_unexpected_error(exc, correlation_id=generate_correlation_id())
    return JSONResponse(status_code=status_code, content=body)
