import logging
from contextlib import asynccontextmanager
from pathlib import Path

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from src.auth.router import router as auth_router
from src.config.database import init_db
from src.config.logging import setup_logging
from src.config.settings import settings
from src.guests.routers import router as guests_router
from src.photos.router import router as photos_router
from src.photos.storage import upload_path
from src.photos.urls import UPLOADS_PATH
from src.responses import install_exception_handlers
from src.routers.healthz.router import router as healthz_router

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.RUN_MIGRATIONS_ON_STARTUP:
        logger.info("Running database migrations")
        await init_db()
    yield


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )

app = FastAPI(
    title="Wedding Guest API",
    description="Guest list, accounts, RSVPs and the photo gallery for the wedding site",
    version="0.2.0",
    lifespan=lifespan,
)

# CORS middleware, credentials are needed for the session cookie
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_exception_handlers(app)

# Include routers
app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(auth_router, tags=["Auth"])
app.include_router(guests_router, tags=["Guests"])
app.include_router(photos_router, tags=["Photos"])

app.mount(UPLOADS_PATH, StaticFiles(directory=upload_path()), name="uploads")

if settings.static_dir:
    static_path = Path(settings.static_dir)
    if static_path.is_dir():
        app.mount("/site", StaticFiles(directory=static_path, html=True), name="site")
    else:
        logger.warning("Static directory %s does not exist, frontend not mounted", static_path)


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Welcome to the Wedding Guest API"}
