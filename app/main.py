"""
Job Portal - Main Application

FastAPI backend with:
- MongoDB for users, companies, jobs and applications
- Cloudinary for logos, avatars and resumes
- JWT session tokens in httpOnly cookies
- React frontend served from /frontend/dist when built

Run: uvicorn app.main:app --reload
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse, JSONResponse
from pymongo.errors import DuplicateKeyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.routes import api_router
from app.core.config import get_settings
from app.core.exceptions import UploadError
from app.db.mongodb import init_mongo_indexes

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
)
logger = logging.getLogger(__name__)

# Get the project root directory
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
FRONTEND_DIR = os.path.join(PROJECT_ROOT, "frontend", "dist")

# Create FastAPI app
app = FastAPI(
    title="Job Portal",
    description="""
    Recruiters register companies and post jobs; students search and apply.

    ## Features
    - **Users**: Registration with avatar, cookie-based login, profile and resume
    - **Companies**: Registration (unique names), logo upload
    - **Jobs**: Posting, keyword search, recruiter listings
    - **Applications**: Apply, track, and update status

    Every response carries `{message, success}`.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (credentials needed for the session cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.frontend_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix=settings.api_prefix)

# Serve built frontend assets
if os.path.exists(os.path.join(FRONTEND_DIR, "assets")):
    app.mount("/assets", StaticFiles(directory=os.path.join(FRONTEND_DIR, "assets")), name="assets")


# ============================================================
# ERROR ENVELOPES: {message, success: false}
# ============================================================

def error_response(status_code: int, message: str, headers: dict = None, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": message, "success": False, **extra},
        headers=headers
    )


def validation_message(errors: list) -> str:
    """Summarize pydantic errors: missing/empty fields get one generic message."""
    if any(e.get("type") in ("missing", "string_too_short", "too_short") for e in errors):
        return "Something is missing."
    first = errors[0]
    field = ".".join(str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path"))
    return f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(400, validation_message(exc.errors()))


@app.exception_handler(UploadError)
async def upload_exception_handler(request: Request, exc: UploadError):
    return error_response(exc.status_code, exc.message)


@app.exception_handler(DuplicateKeyError)
async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
    logger.info("Duplicate key on %s: %s", request.url.path, exc)
    return error_response(400, "Record already exists.")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    extra = {"error": str(exc)} if settings.debug else {}
    return error_response(500, "Internal server error", **extra)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    try:
        init_mongo_indexes()
    except Exception as e:
        logger.error("MongoDB index initialization failed: %s", e)


# Serve React frontend for root path
@app.get("/", tags=["Frontend"])
async def serve_frontend():
    """Serve the React frontend."""
    index_path = os.path.join(FRONTEND_DIR, "index.html")
    if os.path.exists(index_path):
        return FileResponse(index_path)
    return {"message": "Frontend not found. API is running.", "success": True, "app": "Job Portal"}


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    from app.db.mongodb import test_mongo_connection

    connected = test_mongo_connection()
    return {
        "message": "healthy" if connected else "degraded",
        "success": connected,
        "mongodb": "connected" if connected else "disconnected"
    }
