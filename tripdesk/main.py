"""
FastAPI Application Entry Point.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401
from .api import router
from .config import settings
from .database import Base, SessionLocal, engine
from .logging_config import configure_logging
from .middleware import AccessGateMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.app_name} started (LLM provider: {settings.llm_provider})")
    yield


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Travel agency workspace: agency onboarding, enquiries, AI itineraries, DMC quotes and payments",
    version="1.0.0",
    lifespan=lifespan,
)

# One ORM session per request is opened from here
app.state.session_factory = SessionLocal

app.add_middleware(AccessGateMiddleware)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Invalid or missing fields answer 400 and name the fields."""
    errors = exc.errors()
    missing = [str(e["loc"][-1]) for e in errors if e.get("type") == "missing"]
    if missing:
        detail = f"Missing required fields: {', '.join(missing)}"
    else:
        detail = "Invalid fields: " + ", ".join(str(e["loc"][-1]) for e in errors)
    return JSONResponse(status_code=400, content={"detail": detail, "errors": jsonable_encoder(errors)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "llm_provider": settings.llm_provider,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "tripdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
