"""
algoviz/errors.py - Error Taxonomy

Errors are contracts, not strings. Every failure the core can surface carries a
stable machine-readable code so the API, the CLI and the tests agree on it.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    # EngineFailure (recovered at the invocation boundary)
    ENGINE_FAILURE = "ENGINE_FAILURE"
    ENGINE_EMPTY_OUTPUT = "ENGINE_EMPTY_OUTPUT"
    ENGINE_MALFORMED_OUTPUT = "ENGINE_MALFORMED_OUTPUT"
    ENGINE_UNAVAILABLE = "ENGINE_UNAVAILABLE"

    # SchemaViolation (recovered per object by the renderer)
    SCHEMA_VIOLATION = "SCHEMA_VIOLATION"

    # Programming defect, never reachable from user actions
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"

    # Informational: object skipped, no visual element
    UNRECOGNIZED_TYPE_TAG = "UNRECOGNIZED_TYPE_TAG"


@dataclass(frozen=True)
class VizError:
    """Immutable error object."""
    code: ErrorCode
    message: str
    details: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the error into a plain dictionary.

        Returns:
            dict: `code` (str), `message` (str) and `details` (dict, empty when unset).
        """
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details or {}
        }


class VizException(Exception):
    """Base exception carrying a VizError payload."""
    def __init__(self, error: VizError):
        self.error = error
        super().__init__(error.message)


class EngineFailure(VizException):
    """The external engine raised, returned nothing, or returned unparsable output."""


class SchemaViolation(VizException):
    """An object's data does not match the shape its type tag declares."""


class IndexOutOfRange(VizException, IndexError):
    """History access outside [0, length-1]."""


# Pre-defined error factories for consistency
def engine_raised(exc: BaseException) -> VizError:
    return VizError(
        code=ErrorCode.ENGINE_FAILURE,
        message=f"Engine execution failed: {exc}",
        details={"exception": type(exc).__name__}
    )


def engine_exit_status(returncode: int, stderr: str) -> VizError:
    """
    Create a VizError for an engine process that exited unsuccessfully.

    Parameters:
        returncode (int): Process exit status.
        stderr (str): Tail of the process's standard error, kept for the report.
    """
    return VizError(
        code=ErrorCode.ENGINE_FAILURE,
        message=f"Engine exited with status {returncode}",
        details={"returncode": returncode, "stderr": stderr}
    )


def engine_empty_output() -> VizError:
    return VizError(
        code=ErrorCode.ENGINE_EMPTY_OUTPUT,
        message="Engine returned no frames"
    )


def engine_malformed_output(details: Dict[str, Any]) -> VizError:
    """
    Create a VizError for engine output that is not a valid frame array.

    Parameters:
        details (Dict[str, Any]): Parse or validation context (decoder message, offending location).
    """
    return VizError(
        code=ErrorCode.ENGINE_MALFORMED_OUTPUT,
        message="Engine output is not a valid frame array",
        details=details
    )


def engine_unavailable() -> VizError:
    return VizError(
        code=ErrorCode.ENGINE_UNAVAILABLE,
        message="No engine is loaded"
    )


def schema_violation(type_tag: str, reason: str) -> VizError:
    """
    Create a VizError for an object whose data does not fit its declared type.

    Parameters:
        type_tag (str): The declared type tag of the object.
        reason (str): Human-readable description of the mismatch.
    """
    return VizError(
        code=ErrorCode.SCHEMA_VIOLATION,
        message=f"Data does not match type '{type_tag}': {reason}",
        details={"type": type_tag}
    )


def index_out_of_range(index: int, length: int) -> VizError:
    return VizError(
        code=ErrorCode.INDEX_OUT_OF_RANGE,
        message=f"Frame index {index} outside history of length {length}",
        details={"index": index, "length": length}
    )


def unrecognized_type_tag(type_tag: Any) -> VizError:
    return VizError(
        code=ErrorCode.UNRECOGNIZED_TYPE_TAG,
        message=f"Unrecognized type tag: {type_tag!r}",
        details={"type": type_tag}
    )
