from __future__ import annotations

import logging
import random as _rnd
from typing import Any, Dict, List

from fastapi import APIRouter

from exercises import SYMBOLS, OperationKind, Selector
from generator import MIXED_POOL, WorksheetConfig, generate, mark_worked_examples
from schemas.worksheets import WorksheetRequest, WorksheetResponse
from steps import explain

logger = logging.getLogger(__name__)

router = APIRouter(tags=["worksheets"])


@router.get("/operations")
def list_operations():
    return {
        "ok": True,
        "kinds": [{"kind": k.value, "symbol": SYMBOLS[k]} for k in OperationKind],
        "selectors": [s.value for s in Selector],
        "mixed_pool": [k.value for k in MIXED_POOL],
    }


@router.post("/worksheets", response_model=WorksheetResponse)
def create_worksheet(req: WorksheetRequest):
    # resolve a seed up front so the same worksheet can be requested again
    seed = req.seed if req.seed is not None else _rnd.SystemRandom().randrange(2**32)

    config = WorksheetConfig(
        digits_top=req.digits_top,
        digits_bottom=req.digits_bottom,
        operation=req.operation,
    )
    exercises = generate(req.count, config, rng=_rnd.Random(seed))

    items: List[Dict[str, Any]] = []
    for ex, is_example in zip(exercises, mark_worked_examples(exercises)):
        steps = explain(ex) if (is_example and req.explain_examples) else []
        items.append({"exercise": ex, "is_example": is_example, "steps": steps})

    logger.info(
        "worksheet seed=%s count=%s operation=%s", seed, len(items), config.operation.value
    )
    return {"ok": True, "seed": seed, "count": len(items), "items": items}
