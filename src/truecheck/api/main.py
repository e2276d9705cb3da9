"""Main FastAPI application for the TrueCheck[AI] media verification API."""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from truecheck import __version__, config
from truecheck.api.routers import analyze, upload
from truecheck.api.services import session_service
from truecheck.api.services.model_registry import ModelRegistry

# Setup logging
logging.basicConfig(
    level=config.LOG_LEVEL.upper(),
    format='%(asctime)s - [%(levelname)s] - %(name)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Register detectors and fix the flow variant at startup, release everything at shutdown."""
    logger.info("Registering deepfake detectors...")
    await ModelRegistry.load_all()
    models = ModelRegistry.loaded_models()
    logger.info(f"{len(models)} detectors ready: {models}")
    session_service.get_dispatcher()
    yield
    logger.info("Shutting down...")
    await session_service.shutdown()
    await ModelRegistry.unload_all()


app = FastAPI(
    title="TrueCheck[AI] — Media Verification API",
    description=(
        "Upload an image or video and get a verdict on whether it is authentic "
        "or AI-generated, with a confidence score and a per-model breakdown."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware for cross-origin requests (from the upload page)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Tighten in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Include Routers ────────────────────────────────────────────────────
app.include_router(analyze.router, prefix="/.netlify/functions", tags=["Analysis Function"])
app.include_router(upload.router,  prefix="/api/upload",         tags=["Upload Flow"])


# ── Health Check ────────────────────────────────────────────────────────
@app.get("/health", tags=["Health"], summary="Service health check")
async def health():
    """
    Check API health and registered detectors.

    Returns:
        - status: "ok" if running
        - models_loaded: List of registered detectors
        - flow_variant: Configured encoding/endpoint pairing
    """
    return {
        "status": "ok",
        "models_loaded": ModelRegistry.loaded_models(),
        "flow_variant": config.FLOW_VARIANT,
    }


# ── API Info ────────────────────────────────────────────────────────────
@app.get("/", tags=["Info"], summary="API information")
async def root():
    """Get API metadata."""
    return {
        "name": "TrueCheck[AI]",
        "version": __version__,
        "description": "AI-powered media verification with Hugging Face models",
        "docs": "/docs",
        "health": "/health",
        "max_upload_bytes": config.MAX_UPLOAD_BYTES,
        "endpoints": {
            "analyze":        "/.netlify/functions/analyze",
            "start_session":  "/api/upload/sessions",
            "select_file":    "/api/upload/sessions/{id}/file",
            "analyze_file":   "/api/upload/sessions/{id}/analyze",
            "clear":          "/api/upload/sessions/{id}/clear",
            "upload_another": "/api/upload/sessions/{id}/upload-another",
            "back_to_home":   "/api/upload/sessions/{id}/home",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "truecheck.api.main:app",
        host=config.API_HOST,
        port=config.API_PORT,
        reload=True,
        log_level=config.LOG_LEVEL,
    )
