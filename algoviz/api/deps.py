from fastapi import Request

from algoviz.replay import VisualizerSession


def get_session(request: Request) -> VisualizerSession:
    """The process-wide visualizer session created at startup."""
    return request.app.state.session
