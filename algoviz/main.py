import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from algoviz import __version__
from algoviz.api.v1.api import router as api_router
from algoviz.config import settings
from algoviz.engine import load_engine
from algoviz.replay import VisualizerSession

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the engine once, build the session, and tear both down on shutdown."""
    logging.basicConfig(level=settings.LOG_LEVEL, format=LOG_FORMAT)
    session = VisualizerSession.from_settings(load_engine(settings), settings)
    app.state.session = session
    logger.info("Visualizer session ready (engine_ready=%s)", session.boundary.engine_ready)
    try:
        yield
    finally:
        await session.aclose()


app = FastAPI(title="algoviz API", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Health check route
@app.get("/health")
def health_check():
    return {"status": "ok"}


# Include v1 routers
app.include_router(api_router, prefix="/api/v1")
