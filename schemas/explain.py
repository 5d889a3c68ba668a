from typing import List

from pydantic import BaseModel

from exercises import Exercise


class ExplainRequest(BaseModel):
    exercise: Exercise


class ExplainResponse(BaseModel):
    ok: bool
    kind: str
    steps: List[str]
