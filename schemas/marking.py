# schemas/marking.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from exercises import Exercise

# ---------- Mark single ----------


class MarkRequest(BaseModel):
    exercise: Exercise
    answer: str


class MarkResponse(BaseModel):
    ok: bool
    correct: bool
    score: int
    feedback: str
    expected: Optional[str] = None


# ---------- Mark batch ----------


class MarkBatchItem(BaseModel):
    id: int
    response: MarkResponse


class MarkBatchRequest(BaseModel):
    items: List[MarkRequest]


class MarkBatchResponse(BaseModel):
    ok: bool
    total: int
    correct: int
    results: List[MarkBatchItem]
