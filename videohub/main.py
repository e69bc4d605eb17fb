import logging
import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from videohub.core.config import settings
from videohub.core.exceptions import ServiceError
from videohub.core.logging_config import setup_logging
from videohub.database import engine, Base
from videohub.api.v1 import comments, comment_ratings, uploads, users
import videohub.models  # noqa: F401  registers tables on Base.metadata

setup_logging()
logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Video comments, comment ratings and media uploads"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning(
            "%s %s rejected: %s",
            request.method,
            request.url.path,
            exc.message,
            extra={"status_code": exc.status_code},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=exc.headers,
    )


# Local media backend serves uploads from here
os.makedirs(settings.STATIC_DIR, exist_ok=True)
app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")

# Include routers
app.include_router(users.router, prefix=f"{settings.API_V1_STR}/users", tags=["Users"])
app.include_router(comments.router, prefix=f"{settings.API_V1_STR}/comments", tags=["Comments"])
app.include_router(comment_ratings.router, prefix=f"{settings.API_V1_STR}/comment-ratings", tags=["Comment Ratings"])
app.include_router(uploads.router, prefix=f"{settings.API_V1_STR}/uploads", tags=["Uploads"])


@app.get("/")
def root():
    return {
        "message": "Welcome to VideoHub API",
        "version": settings.VERSION,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health")
def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("videohub.main:app", host="0.0.0.0", port=8000, reload=True)
