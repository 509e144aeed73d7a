"""Failure kinds reported by the engines and the notices built from them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

REDO_END_POINT_STEPPED_OVER = "Redo end-point stepped over!"
UNDO_END_POINT_IGNORED = "Undo end-point ignored"
UNDO_IN_REGION_IN_USE = "Undo in region in use. Undo end-point ignored!"


class FailureKind(str, Enum):
    NO_UNDO_TO_REDO = "no_undo_to_redo"
    REDO_STEP_NOT_FOUND = "redo_step_not_found"
    REDO_END_POINT = "redo_end_point"
    NOTHING_TO_UNDO = "nothing_to_undo"


@dataclass(slots=True)
class EngineResult:
    """Outcome of a single engine step.

    ``applied`` is true when at least one group was reverted; a partial undo
    is applied and still carries ``failure``. ``detail`` holds the host's
    own wording when the host refused.
    """

    applied: bool
    steps: int = 0
    failure: Optional[FailureKind] = None
    detail: Optional[str] = None
    in_region: bool = False

    @classmethod
    def refused(
        cls, failure: FailureKind, *, detail: Optional[str] = None
    ) -> "EngineResult":
        return cls(applied=False, failure=failure, detail=detail)


def failure_message(
    failure: FailureKind, *, cancel_key: str, detail: Optional[str] = None
) -> str:
    if failure is FailureKind.NO_UNDO_TO_REDO:
        return "Redo without undo: no undo to redo"
    if failure is FailureKind.REDO_STEP_NOT_FOUND:
        return f"Redo step not found ({cancel_key} to ignore)"
    if failure is FailureKind.REDO_END_POINT:
        return f"Redo end-point hit ({cancel_key} to step over it)"
    return detail or "Nothing to undo"


def success_message(verb: str, *, steps: int, in_region: bool) -> str:
    message = f"{verb} in region" if in_region else verb
    if steps > 1:
        message = f"{message} ({steps} steps)"
    return message


__all__ = [
    "EngineResult",
    "FailureKind",
    "REDO_END_POINT_STEPPED_OVER",
    "UNDO_END_POINT_IGNORED",
    "UNDO_IN_REGION_IN_USE",
    "failure_message",
    "success_message",
]
