from fastapi import APIRouter, Query

from schemas.explain import ExplainRequest, ExplainResponse
from steps import explain, strip_markers

router = APIRouter(tags=["explain"])


@router.post("/explain", response_model=ExplainResponse)
def explain_exercise(
    req: ExplainRequest,
    plain: bool = Query(default=False, description="If true, strip the ** header markers"),
):
    steps = explain(req.exercise)
    if plain:
        steps = [strip_markers(s) for s in steps]
    return {"ok": True, "kind": req.exercise.kind, "steps": steps}
