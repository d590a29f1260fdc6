"""
Structured rejections returned by engine operations.

Operations never raise for recoverable conditions: they check first and return
a Rejection, leaving SimulationState untouched.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

RejectionCode = Literal[
    # Validation family: recoverable, state unchanged
    "InsufficientFunds",
    "LevelExceedsMax",
    "InvalidAmount",
    "InvalidDuration",
    "NoAvailableScouts",
    "ScoutBusy",
    "AgeIneligible",
    "InvalidDistribution",
    "InvalidOption",
    "SeasonNotInProgress",
    # Referenced entity no longer exists
    "NotFound",
    # Season completion precondition unmet
    "GateNotMet",
]


class Rejection(BaseModel):
    code: RejectionCode
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


def insufficient_funds(required: int, available: int, pool: str = "budget") -> Rejection:
    return Rejection(
        code="InsufficientFunds",
        message=f"Not enough funds in {pool}: required €{required:,}, available €{available:,}",
        detail={"required": required, "available": available, "pool": pool},
    )


def not_found(kind: str, entity_id: Any) -> Rejection:
    return Rejection(
        code="NotFound",
        message=f"{kind} '{entity_id}' does not exist",
        detail={"kind": kind, "id": entity_id},
    )


def level_exceeds_max(max_level: int, max_amount: int) -> Rejection:
    return Rejection(
        code="LevelExceedsMax",
        message=f"Cannot upgrade above {max_level}%. Maximum possible improvement is +{max_amount}%",
        detail={"max_level": max_level, "max_amount": max_amount},
    )


def gate_not_met(progress: int, threshold: int) -> Rejection:
    return Rejection(
        code="GateNotMet",
        message=f"Season progress is {progress}%, at least {threshold}% (by weight) is required",
        detail={"progress": progress, "threshold": threshold},
    )


def season_not_in_progress(phase: str) -> Rejection:
    return Rejection(
        code="SeasonNotInProgress",
        message=f"Operation not allowed while the game is in phase '{phase}'",
        detail={"phase": phase},
    )


def invalid(code: RejectionCode, message: str, **detail: Any) -> Rejection:
    return Rejection(code=code, message=message, detail=detail)
