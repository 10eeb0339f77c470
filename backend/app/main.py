import time
from datetime import datetime, timezone

import sqlalchemy
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.routes import auth, bugs, projects, project_bugs
from app.core.config import settings
from app.core.errors import register_exception_handlers
from app.core.logs import setup_logging
from app.db.session import engine, get_db
from app.models import base

setup_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API for tracking bugs across projects",
    version=settings.VERSION,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[str(origin).rstrip("/") for origin in settings.BACKEND_CORS_ORIGINS] or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Include API routes
app.include_router(auth.router, prefix=settings.API_PREFIX)
app.include_router(bugs.router, prefix=settings.API_PREFIX)
app.include_router(projects.router, prefix=settings.API_PREFIX)
app.include_router(project_bugs.router, prefix=settings.API_PREFIX)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.bind(component="http").info(
        f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
    )
    return response


@app.on_event("startup")
async def startup_event():
    # Create database tables if they don't exist
    try:
        logger.info(f"Connecting to database at {engine.url.render_as_string(hide_password=True)}")
        async with engine.begin() as conn:
            logger.info("Creating database tables if they don't exist...")
            await conn.run_sync(base.Base.metadata.create_all)
            logger.info("Database setup completed successfully")
    except sqlalchemy.exc.OperationalError as e:
        logger.error(f"Database connection error: {str(e)}")
        logger.warning(
            "Application will continue to run, but database functionality will be limited."
        )
    except Exception as e:
        logger.error(f"Error during database initialization: {str(e)}")
        logger.warning(
            "Application will continue to run, but database functionality may be limited."
        )


@app.get("/", tags=["Health"])
async def root():
    return {
        "message": f"{settings.PROJECT_NAME} is running!",
        "version": settings.VERSION,
        "endpoints": {
            "auth": f"{settings.API_PREFIX}/auth",
            "bugs": f"{settings.API_PREFIX}/bugs",
            "projects": f"{settings.API_PREFIX}/projects",
            "health": f"{settings.API_PREFIX}/health",
        },
    }


@app.get(f"{settings.API_PREFIX}/health", tags=["Health"])
async def health_check(session: AsyncSession = Depends(get_db)):
    # Basic health check endpoint
    try:
        # Quick database connection check
        await session.execute(sqlalchemy.text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        logger.warning(f"Health check database error: {str(e)}")
        await session.rollback()
        db_status = "disconnected"

    return JSONResponse(
        {
            "status": "ok",
            "database": db_status,
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
