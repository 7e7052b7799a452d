"""FastAPI entry point for the HostSense HTTP API."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from . import __version__
from .config import get_settings
from .logging_config import get_logger, setup_logging
from .sensors import SensorContext
from .server import build_dispatcher
from .tools import ToolDispatcher
from .tools.api import create_tools_router

logger = get_logger("hostsense.main")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    tools_available: int


# Application state
class AppState:
    """Application state container."""

    def __init__(self):
        self.context: SensorContext | None = None
        self.dispatcher: ToolDispatcher | None = None


state = AppState()


def get_dispatcher() -> ToolDispatcher:
    if state.dispatcher is None:
        raise RuntimeError("Application not initialized")
    return state.dispatcher


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_to_file, settings.log_dir)

    state.context = SensorContext.create(settings)
    state.dispatcher = build_dispatcher(state.context)
    logger.info(f"HTTP API ready with {len(state.dispatcher.list_tools())} tools")

    yield

    # Shutdown
    await state.context.aclose()
    state.context = None
    state.dispatcher = None


app = FastAPI(
    title="HostSense API",
    description="Host sensor tools over HTTP",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(create_tools_router(get_dispatcher))


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check API health and tool availability."""
    tools_count = len(state.dispatcher.list_tools()) if state.dispatcher else 0

    return HealthResponse(
        status="healthy",
        version=__version__,
        tools_available=tools_count,
    )
