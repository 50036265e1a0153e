import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cutquote.logging_config import setup_logging
from cutquote.server.api import quotes, system
from cutquote.server.settings.config import settings
from cutquote.services.render_engine import RenderEnginePool, provider_from_settings

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    provider = provider_from_settings(settings)
    app.state.render_pool = RenderEnginePool(
        provider, max_concurrency=settings.max_concurrent_renders
    )
    log.info(
        "Starting %s (env=%s, render engine=%s, max renders=%d)",
        settings.app_name,
        settings.environment,
        provider.name,
        settings.max_concurrent_renders,
    )
    yield
    log.info("Shutting down")


app = FastAPI(title=settings.app_name, lifespan=lifespan)

# CORS so the quote form (Vite dev server by default) can call the API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(system.router)
app.include_router(quotes.router)    # /api/generate-quote, /api/quote-preview
