"""Pydantic request and response models for the roll API."""

from __future__ import annotations

from pydantic import BaseModel, Field

from dicer.errors import DiceError, ErrorKind
from dicer.session import RollOutcome


class RollError(BaseModel):
    kind: ErrorKind
    message: str

    @classmethod
    def from_exc(cls, exc: DiceError) -> RollError:
        return cls(kind=exc.kind, message=exc.message)


class RollResult(BaseModel):
    index: int = 1
    expression: str
    total: int | None = None
    error: RollError | None = None
    narration: list[str] = Field(
        default_factory=list,
        description="Each die drawn, in order. Only filled in for verbose rolls.",
    )

    @classmethod
    def from_outcome(cls, outcome: RollOutcome) -> RollResult:
        return cls(
            index=outcome.index,
            expression=outcome.expression,
            total=outcome.total,
            error=RollError.from_exc(outcome.error) if outcome.error is not None else None,
            narration=outcome.narration,
        )


class BatchRequest(BaseModel):
    expressions: list[str] = Field(
        min_length=1,
        max_length=100,
        description="Expressions to roll independently, e.g. ['3d6+2', '4d6c3'].",
    )
    verbose: bool = False


class BatchResponse(BaseModel):
    results: list[RollResult]
