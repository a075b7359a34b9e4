# algoviz/api/v1/endpoints/visualize.py
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from algoviz.api.deps import get_session
from algoviz.errors import ErrorCode
from algoviz.replay import VisualizerSession
from algoviz.schemas.visualizer import (
    ErrorSchema,
    InvocationStatusSchema,
    PlaybackStatusSchema,
    VisualizeRequest,
    VisualizeResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=VisualizeResponse)
async def visualize(body: VisualizeRequest, session: VisualizerSession = Depends(get_session)):
    """
    Run the engine on the raw input and install the resulting history.

    200: history replaced, playback reset to frame 0.
    409: a newer visualize request superseded this one; its result was dropped.
    502: engine failed or returned unusable output; previous history kept.
    503: no engine is loaded.
    """
    # invoke() claims the next generation before its first suspension point.
    generation = session.boundary.generation + 1
    frames = await session.visualize(body.raw_input)
    playback = PlaybackStatusSchema(**session.status())

    if frames is not None:
        return VisualizeResponse(
            status=InvocationStatusSchema.OK,
            frame_count=len(frames),
            playback=playback
        )

    if session.boundary.generation != generation:
        response = VisualizeResponse(status=InvocationStatusSchema.SUPERSEDED, playback=playback)
        return JSONResponse(status_code=409, content=response.model_dump(mode="json"))

    error = session.boundary.last_error
    response = VisualizeResponse(
        status=InvocationStatusSchema.FAILED,
        playback=playback,
        error=ErrorSchema(**error.to_dict()) if error else None
    )
    status_code = 503 if error is not None and error.code == ErrorCode.ENGINE_UNAVAILABLE else 502
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))
