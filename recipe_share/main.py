# main.py
# Main application file for the FastAPI recipe sharing service.

import logging.config
import os
from fastapi import FastAPI, Request
import uvicorn
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError

# Import the CORS middleware
from fastapi.middleware.cors import CORSMiddleware

# Rate limiting
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Import local modules
from recipe_share.db.session import engine
from recipe_share import models
from recipe_share.api import auth, recipes, saved
from recipe_share.core.config import settings
from recipe_share.core.exceptions import RecipeShareError
from recipe_share.core.logging_middleware import StructuredLoggingMiddleware
from recipe_share.core.rate_limit import limiter

# Load logging configuration
if os.path.exists(settings.LOGGING_CONFIG):
    logging.config.fileConfig(settings.LOGGING_CONFIG, disable_existing_loggers=False)

# Get the logger instance
logger = logging.getLogger(__name__)


# Create all database tables
models.Base.metadata.create_all(bind=engine)

# Initialize the FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for sharing, moderating and rating recipes.",
    version="1.0.0",
    root_path=settings.ROOT_PATH,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
)

# Add rate limiter to app state and register exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# --- Exception Handlers ---

@app.exception_handler(RecipeShareError)
async def recipe_share_error_handler(request: Request, exc: RecipeShareError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message} {exc.context}")
    else:
        logger.debug(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Database error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})

# --- End of Exception Handlers ---

# --- Add Structured Logging Middleware ---
app.add_middleware(StructuredLoggingMiddleware)
# --- End of Structured Logging Middleware ---

# --- Add CORS Middleware ---
# Origins loaded from settings

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,  # Allows specified origins
    allow_credentials=True,  # Allows cookies to be included in requests
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],  # Explicit HTTP methods
    allow_headers=["Authorization", "Content-Type", "Accept"],  # Explicit headers
    expose_headers=["X-Total-Count"],  # Expose custom headers
)

# --- End of CORS Middleware Section ---

# --- Security Headers Middleware ---


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        # Prevent clickjacking
        response.headers["X-Frame-Options"] = "DENY"
        # Prevent MIME type sniffing
        response.headers["X-Content-Type-Options"] = "nosniff"
        # Control referrer information
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Content Security Policy - restrict resource loading
        if settings.ENVIRONMENT in ["development", "testing"]:
            # Relaxed to allow FastAPI Swagger UI assets
            response.headers["Content-Security-Policy"] = (
                "default-src 'self'; "
                "img-src 'self' data: https://fastapi.tiangolo.com; "
                "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
                "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net"
            )
        else:
            response.headers["Content-Security-Policy"] = "default-src 'self'"
        return response


app.add_middleware(SecurityHeadersMiddleware)

# --- End of Security Headers Middleware ---

# Include API routers
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(recipes.router, prefix="/recipes", tags=["Recipes"])
app.include_router(saved.router, prefix="/user/recipes", tags=["Saved Recipes"])


@app.get("/", tags=["Root"])
async def read_root():
    """
    Root endpoint to check if the API is running.
    """
    logger.debug("Root endpoint accessed")
    return {"message": "Welcome to the Recipe Sharing API!"}


if __name__ == "__main__":
    # This block allows running the app directly with uvicorn for development.
    # In production, you would typically use a process manager like Gunicorn.
    uvicorn.run("recipe_share.main:app", host="0.0.0.0", port=8000, reload=True)
