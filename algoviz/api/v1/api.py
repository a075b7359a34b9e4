from fastapi import APIRouter

from algoviz.api.v1.endpoints import frames, playback, visualize

# Create the main API router
router = APIRouter()

router.include_router(visualize.router, prefix="/visualize", tags=["visualize"])
router.include_router(playback.router, prefix="/playback", tags=["playback"])
router.include_router(frames.router, prefix="/frames", tags=["frames"])
