# algoviz/api/v1/endpoints/frames.py
from fastapi import APIRouter, Depends, HTTPException

from algoviz.api.deps import get_session
from algoviz.errors import IndexOutOfRange
from algoviz.replay import RenderedFrame, VisualizerSession
from algoviz.schemas.visualizer import FrameViewSchema

router = APIRouter()


def _view(session: VisualizerSession, frame: RenderedFrame) -> FrameViewSchema:
    return FrameViewSchema.model_validate({
        "playback": session.status(),
        "frame": frame.to_dict()
    })


@router.get("/current", response_model=FrameViewSchema)
async def current_frame(session: VisualizerSession = Depends(get_session)):
    return _view(session, session.current_view())


@router.get("/{index}", response_model=FrameViewSchema)
async def frame_at(index: int, session: VisualizerSession = Depends(get_session)):
    try:
        frame = session.view_at(index)
    except IndexOutOfRange as e:
        raise HTTPException(status_code=404, detail=e.error.to_dict())
    return _view(session, frame)
