# schemas/worksheets.py
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from exercises import Exercise, Selector
from generator import parse_selector
from settings import DEFAULT_COUNT, DEFAULT_DIGITS, MAX_COUNT, MAX_DIGITS


class WorksheetRequest(BaseModel):
    count: int = Field(default=DEFAULT_COUNT, ge=1, le=MAX_COUNT)
    digits_top: int = Field(default=DEFAULT_DIGITS, ge=1, le=MAX_DIGITS)
    digits_bottom: int = Field(default=DEFAULT_DIGITS, ge=1, le=MAX_DIGITS)
    operation: Selector = Selector.ADDITION
    # Omit to get a fresh worksheet; the response echoes the seed that was used.
    seed: Optional[int] = None
    explain_examples: bool = True

    @field_validator("operation", mode="before")
    @classmethod
    def _resolve_alias(cls, v):
        return parse_selector(v)


class WorksheetItem(BaseModel):
    exercise: Exercise
    is_example: bool
    steps: List[str] = []


class WorksheetResponse(BaseModel):
    ok: bool
    seed: int
    count: int
    items: List[WorksheetItem]
