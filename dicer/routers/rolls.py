"""Roll routes: single expressions and independent batches."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from dicer.dependencies import get_random_source
from dicer.rng import Drawer
from dicer.schemas import BatchRequest, BatchResponse, RollError, RollResult
from dicer.session import roll_batch, roll_expression

router = APIRouter()

GRAMMAR = [
    "expr     := term (addop expr)?",
    "term     := obj (mulop term)?",
    "obj      := roll | integer | '(' expr ')'",
    "roll     := integer 'd' integer modifier?",
    "modifier := ('c'|'b'|'v'|'w') integer",
    "addop    := '+' | '-'",
    "mulop    := '*' | '/'",
]


@router.get("/")
async def index() -> dict:
    return {"app": "Dicer", "grammar": GRAMMAR}


@router.get("/roll", response_model=RollResult)
async def roll_one(
    expression: str = Query(min_length=1, max_length=1024),
    verbose: bool = False,
    source: Drawer = Depends(get_random_source),
) -> RollResult:
    """Roll one expression. A malformed expression is a 400 with its error kind."""
    outcome = roll_expression(expression, source, verbose=verbose)
    if outcome.error is not None:
        raise HTTPException(
            status_code=400,
            detail=RollError.from_exc(outcome.error).model_dump(mode="json"),
        )
    return RollResult.from_outcome(outcome)


@router.post("/rolls", response_model=BatchResponse)
async def roll_many(
    body: BatchRequest,
    source: Drawer = Depends(get_random_source),
) -> BatchResponse:
    """Roll several expressions. Each result carries either a total or an error."""
    outcomes = roll_batch(body.expressions, source, verbose=body.verbose)
    return BatchResponse(results=[RollResult.from_outcome(o) for o in outcomes])
