# backend/roomtracker/main.py

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from roomtracker.api import websocket
from roomtracker.api.routes import auth, health, messages, pages, root, rooms, sessions
from roomtracker.api.utils import error_response
from roomtracker.core.config import settings
from roomtracker.core.logging import get_logger, setup_logging

# Configure logging first
setup_logging()
logger = get_logger(__name__)

# --- Lifespan ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"🚀 {settings.APP_NAME} starting - data file: {settings.DATA_FILE}")
    yield
    logger.info(f"{settings.APP_NAME} shutting down")

# FastAPI app
app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# REST routes
app.include_router(root.router)
app.include_router(health.router)
app.include_router(auth.router)
app.include_router(rooms.router)
app.include_router(messages.router)
app.include_router(sessions.router)

# Live room chat
app.include_router(websocket.router)

# HTML pages
app.include_router(pages.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report malformed request bodies in the error envelope with a 400."""
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    logger.info(f"Rejected {request.method} {request.url.path}: {message}")
    return error_response(message, 400)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("roomtracker.main:app", host="0.0.0.0", port=8000)
