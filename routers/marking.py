from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional

from fastapi import APIRouter
from sympy import nan, oo, preorder_traversal, zoo
from sympy.core.power import Pow
from sympy.parsing.sympy_parser import (
    convert_xor,
    implicit_multiplication_application,
    parse_expr,
    standard_transformations,
)

from exercises import Exercise, LinearEquationExercise, QuadraticEquationExercise
from schemas.marking import (
    MarkBatchRequest,
    MarkBatchResponse,
    MarkRequest,
    MarkResponse,
)

# --- Parsing / validation helpers ------------------------------------------------
LEN_LIMIT = 100
_INVALID_CHARS_MSG = (
    "Only numeric answers using digits, spaces, + - * / ^ . and parentheses are allowed "
    "(separate two roots with , or ;)."
)
_NON_FINITE_MSG = "Answer is not finite (e.g., division by zero)."
_TOO_COMPLEX_MSG = "Answer is too complex."
_SINGLE_VALUE_MSG = "Enter a single value."
_ALLOWED_RE = re.compile(r"^[0-9+\-*/^().,;\s]{1,100}$")
_ROOT_SEP_RE = re.compile(r"[,;]")

TRANSFORMS = standard_transformations + (
    convert_xor,
    implicit_multiplication_application,
)

# Hard-stops that won't affect normal use
_MAX_OPS = 200
_MAX_INT_DIGITS = 200
_MAX_EXPONENT_ABS = 2000

_ABS_TOL = 1e-9


def _validate_answer_text(s: str) -> Optional[str]:
    if s is None or not isinstance(s, str) or not s.strip():
        return "Answer required."
    if len(s) > LEN_LIMIT:
        return "Answer too long (> 100)."
    if _ALLOWED_RE.fullmatch(s) is None:
        return _INVALID_CHARS_MSG
    return None


# --- Finite & Complexity guards ---------------------------------------------------


def _assert_finite_sym(val: Any) -> None:
    if getattr(val, "is_finite", None) is False:
        raise ValueError(_NON_FINITE_MSG)
    if val in (oo, -oo, zoo, nan):
        raise ValueError(_NON_FINITE_MSG)


def _assert_expr_complexity(sym: Any) -> None:
    """
    Runs on the unevaluated tree, so towers like 9^9^9 are rejected
    before sympy tries to build them.
    """
    if hasattr(sym, "count_ops") and sym.count_ops() > _MAX_OPS:
        raise ValueError(_TOO_COMPLEX_MSG)
    for node in preorder_traversal(sym):
        if getattr(node, "is_Integer", False) and len(str(abs(int(node)))) > _MAX_INT_DIGITS:
            raise ValueError(_TOO_COMPLEX_MSG)
        if isinstance(node, Pow) and getattr(node.exp, "is_number", False):
            try:
                e = float(node.exp)
            except TypeError:
                raise ValueError(_TOO_COMPLEX_MSG) from None
            if not math.isfinite(e) or abs(e) > _MAX_EXPONENT_ABS:
                raise ValueError(_TOO_COMPLEX_MSG)


# --- Low-level helpers ------------------------------------------------------------


def _eval_numeric(expr: str) -> float:
    sym = parse_expr(expr, transformations=TRANSFORMS, evaluate=False)
    _assert_expr_complexity(sym)
    # evalf works in floating point, never expanding exact powers
    approx = sym.evalf()
    _assert_finite_sym(approx)
    val = float(approx)
    if not math.isfinite(val):
        raise ValueError(_NON_FINITE_MSG)
    return val


def _num_to_clean_str(x: float) -> str:
    if math.isfinite(x) and abs(x - round(x)) < 1e-12:
        return str(int(round(x)))
    return str(x)


def _expected_values(exercise: Exercise) -> List[float]:
    result = exercise.result
    if isinstance(result, list):
        return [float(v) for v in result]
    return [float(result)]


def _split_roots(answer: str) -> List[str]:
    return [part.strip() for part in _ROOT_SEP_RE.split(answer) if part.strip()]


def _roots_match(user: List[float], expected: List[float]) -> bool:
    if len(expected) == 1:
        # a double root may be written once or twice
        return 1 <= len(user) <= 2 and all(
            math.isclose(v, expected[0], rel_tol=0, abs_tol=_ABS_TOL) for v in user
        )
    if len(user) != len(expected):
        return False
    return all(
        math.isclose(u, e, rel_tol=0, abs_tol=_ABS_TOL)
        for u, e in zip(sorted(user), sorted(expected))
    )


# --- Core marking -----------------------------------------------------------------


def _mark_one(exercise: Exercise, answer: str) -> Dict[str, Any]:
    # Compute expected FIRST so every path can include it
    expected = _expected_values(exercise)
    if isinstance(exercise, LinearEquationExercise):
        exp_str = str(exercise.root)
    else:
        exp_str = ", ".join(_num_to_clean_str(v) for v in expected)

    def _fail(feedback: str) -> Dict[str, Any]:
        return {
            "ok": False,
            "correct": False,
            "score": 0,
            "feedback": feedback,
            "expected": exp_str,
        }

    msg = _validate_answer_text(answer)
    if msg:
        return _fail(msg)

    parts = _split_roots(answer)
    if not parts:
        return _fail("Answer required.")
    if len(parts) > 1 and not isinstance(exercise, QuadraticEquationExercise):
        return _fail(_SINGLE_VALUE_MSG)

    try:
        user_vals = [_eval_numeric(p) for p in parts]
    except ValueError as e:
        return _fail(str(e))
    except Exception:
        return _fail(_INVALID_CHARS_MSG)

    correct = _roots_match(user_vals, expected)

    # Gentle suggestion if they typed an expression but simplest form differs
    feedback = ""
    if correct and len(parts) == 1:
        raw = parts[0]
        if raw != exp_str and any(op in raw.lstrip("-") for op in ("+", "-", "*", "/", "^", " ")):
            feedback = f"Correct; simplest form is {exp_str}."

    return {
        "ok": True,
        "correct": correct,
        "score": 1 if correct else 0,
        "feedback": feedback,
        "expected": exp_str,
    }


# --- Endpoints --------------------------------------------------------------------

router = APIRouter(tags=["marking"])


@router.post("/mark", response_model=MarkResponse)
def mark(req: MarkRequest):
    return _mark_one(req.exercise, req.answer)


@router.post("/mark-batch", response_model=MarkBatchResponse)
def mark_batch(req: MarkBatchRequest):
    results: List[Dict[str, Any]] = []
    correct_count = 0

    for it in req.items:
        res = _mark_one(it.exercise, it.answer)
        results.append({"id": it.exercise.id, "response": res})
        if res.get("correct"):
            correct_count += 1

    return {
        "ok": True,
        "total": len(results),
        "correct": correct_count,
        "results": results,
    }
