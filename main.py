from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from app.core.config import settings
from app.core.database import engine
from app.core.logging_config import setup_logging
from app.api.v1.api import api_router
from app.middleware.logging import LoggingMiddleware

setup_logging()

# Create FastAPI app
app_config = {
    "title": "Store Admin Back Office",
    "description": "Category hierarchy, brand catalog and employee audit trail administration",
    "version": "1.0.0",
    "docs_url": "/api/docs",
}

app = FastAPI(**app_config)

# Add middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.ALLOWED_METHODS,
    allow_headers=settings.ALLOWED_HEADERS,
)
app.add_middleware(LoggingMiddleware)

# Include routers
app.include_router(api_router, prefix="/api/v1")

@app.get("/")
async def root():
    return {
        "message": "Store Admin Back Office",
        "status": "active",
        "version": app_config["version"],
        "docs": app_config["docs_url"],
    }

@app.get("/health")
async def health_check():
    database = "connected"
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError):
        database = "unavailable"
    return {
        "status": "healthy" if database == "connected" else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "components": {"database": database},
    }


def run_http():
    """Run HTTP server on port 9106"""
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=9106,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run_http()
