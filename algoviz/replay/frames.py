"""
frames.py - Frame data model for the replay core.

SNAPSHOT INVARIANT:
A Frame is produced wholesale by one engine invocation and is never mutated
afterwards. Objects keep the engine's insertion order; nothing in this module
re-sorts them.

Parsing is strict about the envelope (an array of frames, each with a mapping of
objects) and lenient about object contents: a bad `data` shape is the renderer's
problem, recovered per object, never a reason to reject the whole history.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from algoviz.errors import EngineFailure, engine_empty_output, engine_malformed_output

logger = logging.getLogger(__name__)


class TypeTag(str, Enum):
    """Closed set of object type tags the engine may emit."""
    SCALAR = "scalar"
    STRING = "string"
    BOOL = "bool"
    VECTOR = "vector"
    LIST = "list"
    DEQUE = "deque"
    SET = "set"
    MULTISET = "multiset"
    UNORDERED_SET = "unordered_set"
    UNORDERED_MULTISET = "unordered_multiset"
    MATRIX = "matrix"
    MAP = "map"
    MULTIMAP = "multimap"
    UNORDERED_MAP = "unordered_map"
    UNORDERED_MULTIMAP = "unordered_multimap"
    STACK = "stack"
    QUEUE = "queue"
    PRIORITY_QUEUE = "priority_queue"
    PAIR = "pair"
    TUPLE = "tuple"


class HighlightState(str, Enum):
    """
    Per-element display state.

    DEFAULT is implied whenever a highlight key is absent.
    READ / WRITE / COMPARE are what the engine's proxies emit on element access.
    """
    DEFAULT = "default"
    VISITED = "visited"
    ACTIVE = "active"
    FOUND = "found"
    READ = "read"
    WRITE = "write"
    COMPARE = "compare"

    @classmethod
    def resolve(cls, raw: Optional[str]) -> "HighlightState":
        if raw is None:
            return cls.DEFAULT
        try:
            return cls(raw)
        except ValueError:
            logger.debug("Unknown highlight state %r, using default", raw)
            return cls.DEFAULT


class VisualObject(BaseModel):
    """One named object inside a frame: type tag, typed data, highlight map."""
    type: Optional[str] = None
    data: Any = None
    highlights: Dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("type", mode="before")
    @classmethod
    def type_as_text(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("highlights", mode="before")
    @classmethod
    def highlights_as_text(cls, v: Any) -> Dict[str, str]:
        # A broken highlight map must not cost the object its data.
        if not isinstance(v, dict):
            return {}
        return {str(key): str(state) for key, state in v.items() if state is not None}

    @property
    def tag(self) -> Optional[TypeTag]:
        """The recognized TypeTag, or None when the tag is missing or unknown."""
        if self.type is None:
            return None
        try:
            return TypeTag(self.type)
        except ValueError:
            return None


class Frame(BaseModel):
    """One snapshot: a status message plus every named object at that point."""
    message: str = ""
    objects: Dict[str, VisualObject] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("message", mode="before")
    @classmethod
    def message_as_text(cls, v: Any) -> str:
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("objects", mode="before")
    @classmethod
    def objects_as_mapping(cls, v: Any) -> Dict[str, Any]:
        if v is None:
            return {}
        if not isinstance(v, dict):
            # The frame keeps its message; only its objects are lost.
            logger.warning("Frame objects is %s, not a mapping; showing the frame empty", type(v).__name__)
            return {}
        # Non-mapping entries keep their slot as an untyped object (rendered as a placeholder).
        return {
            str(name): obj if isinstance(obj, (dict, VisualObject)) else {"data": obj}
            for name, obj in v.items()
        }


_HISTORY_ADAPTER = TypeAdapter(List[Frame])


def parse_history(payload: Any) -> List[Frame]:
    """
    Parse the engine's serialized output into a list of Frames.

    Parameters:
        payload: JSON text returned by the engine (anything else is malformed).

    Returns:
        List[Frame]: Frames in engine order (never empty).

    Raises:
        EngineFailure: `ENGINE_EMPTY_OUTPUT` when the payload is blank or an empty
            array; `ENGINE_MALFORMED_OUTPUT` when it is not JSON, not an array, or
            an element is not a frame, or the payload is not text at all.
    """
    if payload is not None and not isinstance(payload, (str, bytes)):
        raise EngineFailure(engine_malformed_output({
            "error": f"expected serialized JSON text, got {type(payload).__name__}"
        }))
    if payload is None or not payload.strip():
        raise EngineFailure(engine_empty_output())

    try:
        raw = json.loads(payload)
    except (ValueError, RecursionError) as e:
        raise EngineFailure(engine_malformed_output({"error": str(e)})) from e

    if not isinstance(raw, list):
        raise EngineFailure(engine_malformed_output({
            "error": f"expected a JSON array, got {type(raw).__name__}"
        }))
    if not raw:
        raise EngineFailure(engine_empty_output())

    try:
        return _HISTORY_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise EngineFailure(engine_malformed_output({
            "error_count": e.error_count(),
            "errors": [
                {"loc": [str(part) for part in err["loc"]], "msg": err["msg"]}
                for err in e.errors()
            ]
        })) from e
