# algoviz/api/v1/endpoints/playback.py
from fastapi import APIRouter, Depends

from algoviz.api.deps import get_session
from algoviz.replay import VisualizerSession
from algoviz.schemas.visualizer import PlaybackStatusSchema, ScrubRequest

router = APIRouter()


def _status(session: VisualizerSession) -> PlaybackStatusSchema:
    return PlaybackStatusSchema(**session.status())


@router.get("", response_model=PlaybackStatusSchema)
async def playback_status(session: VisualizerSession = Depends(get_session)):
    return _status(session)


@router.post("/step-back", response_model=PlaybackStatusSchema)
async def step_back(session: VisualizerSession = Depends(get_session)):
    session.controller.step_back()
    return _status(session)


@router.post("/step-forward", response_model=PlaybackStatusSchema)
async def step_forward(session: VisualizerSession = Depends(get_session)):
    session.controller.step_forward()
    return _status(session)


@router.post("/play", response_model=PlaybackStatusSchema)
async def play(session: VisualizerSession = Depends(get_session)):
    session.controller.play()
    return _status(session)


@router.post("/pause", response_model=PlaybackStatusSchema)
async def pause(session: VisualizerSession = Depends(get_session)):
    session.controller.pause()
    return _status(session)


@router.post("/toggle", response_model=PlaybackStatusSchema)
async def toggle(session: VisualizerSession = Depends(get_session)):
    session.controller.toggle()
    return _status(session)


@router.post("/scrub", response_model=PlaybackStatusSchema)
async def scrub(body: ScrubRequest, session: VisualizerSession = Depends(get_session)):
    session.controller.scrub_to(body.index)
    return _status(session)
