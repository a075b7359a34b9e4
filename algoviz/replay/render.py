"""
render.py - Renderer dispatch.

Selects a render strategy by type tag and projects Frame -> RenderedFrame.

PURITY INVARIANT:
Rendering never mutates the Frame and never keeps state between calls.
Rendering the same Frame twice yields equal output.

FAILURE SEMANTICS (per object, never per frame):
- Unrecognized type tag -> object skipped, no visual element.
- Missing tag or data that does not fit the tag -> empty placeholder for that object.
"""

import logging
from typing import List, Optional

from algoviz.errors import SchemaViolation, schema_violation, unrecognized_type_tag
from algoviz.replay.display import Layout, RenderedFrame, RenderedObject
from algoviz.replay.frames import Frame, VisualObject
from algoviz.replay.registry import REGISTRY

logger = logging.getLogger(__name__)

EMPTY_HISTORY_MESSAGE = "Write your logic and click Visualize!"


def project_object(name: str, obj: VisualObject) -> Optional[RenderedObject]:
    """
    Project one object through its registry strategy.

    Returns:
        RenderedObject, or None when the type tag is not in the registry.

    Raises:
        SchemaViolation: If the object has no type tag or its data does not fit the tag.
    """
    if obj.type is None:
        raise SchemaViolation(schema_violation("<missing>", "object has no type tag"))

    tag = obj.tag
    if tag is None:
        logger.debug("Skipping object %r: %s", name, unrecognized_type_tag(obj.type).message)
        return None

    spec = REGISTRY[tag]
    try:
        spec.validate(obj.data)
        rows = spec.strategy(obj.data, obj.highlights)
    except (TypeError, ValueError) as e:
        raise SchemaViolation(schema_violation(tag.value, str(e))) from e

    return RenderedObject(
        name=name,
        type=tag.value,
        layout=spec.layout,
        rows=rows,
        captions=spec.captions
    )


def render_object(name: str, obj: VisualObject) -> Optional[RenderedObject]:
    """Render one object, degrading a schema violation into a placeholder."""
    try:
        return project_object(name, obj)
    except SchemaViolation as e:
        logger.warning("Object %r rendered as placeholder: %s", name, e.error.message)
        return RenderedObject(
            name=name,
            type=obj.type or "unknown",
            layout=Layout.PLACEHOLDER,
            error=e.error
        )


def render_frame(frame: Optional[Frame]) -> RenderedFrame:
    """
    Render every object of a frame in engine order.

    Parameters:
        frame: The frame to draw, or None when there is no history yet.

    Returns:
        RenderedFrame with rendered objects and the names of skipped objects.
    """
    if frame is None:
        return RenderedFrame(message=EMPTY_HISTORY_MESSAGE)

    rendered: List[RenderedObject] = []
    skipped: List[str] = []
    for name, obj in frame.objects.items():
        result = render_object(name, obj)
        if result is None:
            skipped.append(name)
        else:
            rendered.append(result)

    return RenderedFrame(
        message=frame.message,
        objects=tuple(rendered),
        skipped=tuple(skipped)
    )
