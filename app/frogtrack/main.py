from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI, Request, HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware
from frogtrack.core.config import get_settings
from frogtrack.core.logging import configure_logging
from frogtrack.db.base import Base
from frogtrack.db.session import engine
from frogtrack.api.rest import router as api_router

settings = get_settings()
configure_logging(settings.log_level, settings.app_name.lower(), settings.environment)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.record_store == "database" and settings.create_tables_on_startup:
        Base.metadata.create_all(bind=engine)
    logger.info("started", extra={"record_store": settings.record_store})
    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[x.strip() for x in settings.cors_origins.split(",") if x.strip()],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

app.include_router(api_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse({"detail": exc.detail}, status_code=exc.status_code)
