"""
FastAPI application entry point
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.config import settings
from app.api.v1.api import api_router
from app.core.logger import logger
from app.middleware.correlation import CorrelationMiddleware
from app.services.summary_service import cancel_summary_tasks

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
)

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(api_router, prefix="/api/v1")

# ── Correlation ID middleware (must be added before CORS) ─────────────────────
app.add_middleware(CorrelationMiddleware)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Correlation-ID"],
)


@app.get("/")
def read_root():
    logger.info("Root endpoint accessed")
    return {"message": f"{settings.APP_NAME} API is running", "version": "1.0.0", "docs": "/docs"}


# ── Startup / Shutdown ────────────────────────────────────────────────────────

@app.on_event("startup")
async def startup_event():
    logger.info(
        "%s started (templates=%s sessions=%s default model=%s)",
        settings.APP_NAME,
        settings.templates_dir,
        settings.sessions_dir,
        settings.LLM_MODEL or settings.LLM_FALLBACK_MODEL,
    )


@app.on_event("shutdown")
async def shutdown_event():
    # unfinished summaries are dropped; their sessions keep summary: null
    await cancel_summary_tasks()
    logger.info("%s shutdown", settings.APP_NAME)
