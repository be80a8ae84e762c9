"""
Mindmap Generator: HTTP entry point
==================================
  • Global exception handler: never crashes, always returns JSON
  • /api/v1/mindmap/* : text → graph generation and graph → text export
  • Stateless: every request gets its own generator
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mindmap_service.core.config import settings
from mindmap_service.schemas.common import ErrorResponse
from mindmap_service.api.v1.endpoints.mindmap import router as mindmap_router

# ── Logging ──────────────────────────────────────────────────────────────────
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
)
logger = logging.getLogger(__name__)

# ── App ──────────────────────────────────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    description=(
        "Extracts a concept hierarchy from document text and renders it as\n"
        "Mermaid diagrams, a markdown outline or raw JSON."
    ),
    version="1.0.0",
    responses={500: {"model": ErrorResponse}},
)


# ── Global Exception Handler ────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Catch-all: every unhandled exception returns a clean JSON envelope."""
    logger.error(f"[API] Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    body = ErrorResponse(
        status="error",
        message="An internal server error occurred.",
        detail=str(exc),
    )
    return JSONResponse(status_code=500, content=body.model_dump())


# ── CORS ─────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(mindmap_router, prefix="/api/v1", tags=["Mindmap"])


# ── Health Check ─────────────────────────────────────────────────────────────
@app.get("/", tags=["System"])
async def health_check():
    return {
        "status": "operational",
        "service": settings.APP_NAME,
        "version": app.version,
    }
