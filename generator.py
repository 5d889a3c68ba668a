# Randomised worksheet generation.

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Union

from exercises import (
    ARITHMETIC_KINDS,
    AdditionExercise,
    DivisionExercise,
    Exercise,
    InvalidConfiguration,
    LinearCoefficients,
    LinearEquationExercise,
    MultiplicationExercise,
    OperationKind,
    QuadraticCoefficients,
    QuadraticEquationExercise,
    Selector,
    SubtractionExercise,
)
from settings import MAX_COUNT, MAX_DIGITS

logger = logging.getLogger(__name__)

# Equations never enter the mixed pool; "mixed" means mixed arithmetic.
MIXED_POOL = ARITHMETIC_KINDS

# Short codes accepted from older worksheet forms
_ALIASES = {
    "add": Selector.ADDITION,
    "sub": Selector.SUBTRACTION,
    "mul": Selector.MULTIPLICATION,
    "div": Selector.DIVISION,
    "eq1": Selector.LINEAR_EQUATION,
    "eq2": Selector.QUADRATIC_EQUATION,
    "mix": Selector.MIXED,
}


def parse_selector(value: Union[str, Selector]) -> Selector:
    if isinstance(value, Selector):
        return value
    key = str(value).strip().lower()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return Selector(key)
    except ValueError:
        allowed = ", ".join(s.value for s in Selector)
        raise InvalidConfiguration(f"Unknown operation {value!r}; expected one of: {allowed}.") from None


def _check_width(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= MAX_DIGITS:
        raise InvalidConfiguration(f"{name} must be an integer between 1 and {MAX_DIGITS}, got {value!r}.")


@dataclass(frozen=True)
class WorksheetConfig:
    digits_top: int = 2
    digits_bottom: int = 2
    operation: Selector = Selector.ADDITION

    def __post_init__(self) -> None:
        _check_width("digits_top", self.digits_top)
        _check_width("digits_bottom", self.digits_bottom)
        object.__setattr__(self, "operation", parse_selector(self.operation))


# ---------- Draws ----------


def _rand_digits(rng: random.Random, digits: int) -> int:
    """Uniform genuine d-digit number (no leading zero)."""
    return rng.randint(10 ** (digits - 1), 10**digits - 1)


def _resolve_kind(selector: Selector, rng: random.Random) -> OperationKind:
    if selector is Selector.MIXED:
        return rng.choice(MIXED_POOL)
    return OperationKind(selector.value)


def _build_addition(idx: int, config: WorksheetConfig, rng: random.Random) -> Exercise:
    top = _rand_digits(rng, config.digits_top)
    bottom = _rand_digits(rng, config.digits_bottom)
    return AdditionExercise(id=idx, operand_top=top, operand_bottom=bottom)


def _build_subtraction(idx: int, config: WorksheetConfig, rng: random.Random) -> Exercise:
    top = _rand_digits(rng, config.digits_top)
    bottom = _rand_digits(rng, config.digits_bottom)
    if bottom > top:
        top, bottom = bottom, top
    return SubtractionExercise(id=idx, operand_top=top, operand_bottom=bottom)


def _build_multiplication(idx: int, config: WorksheetConfig, rng: random.Random) -> Exercise:
    top = _rand_digits(rng, config.digits_top)
    bottom = _rand_digits(rng, config.digits_bottom)
    return MultiplicationExercise(id=idx, operand_top=top, operand_bottom=bottom)


def _build_division(idx: int, config: WorksheetConfig, rng: random.Random) -> Exercise:
    # The dividend is a product, so it can be wider than digits_top.
    divisor = _rand_digits(rng, config.digits_bottom)
    quotient = _rand_digits(rng, config.digits_top)
    return DivisionExercise(id=idx, operand_top=divisor * quotient, operand_bottom=divisor)


def _build_linear(idx: int, config: WorksheetConfig, rng: random.Random) -> Exercise:
    a = rng.randint(2, 9) * (1 if rng.random() > 0.5 else -1)
    x = rng.randint(-10, 10)
    b = rng.randint(-20, 20)
    c = a * x + b
    return LinearEquationExercise(id=idx, coefficients=LinearCoefficients(a=a, b=b, c=c))


def _build_quadratic(idx: int, config: WorksheetConfig, rng: random.Random) -> Exercise:
    r1 = rng.randint(-8, 8)
    r2 = rng.randint(-8, 8)
    a = rng.randint(1, 3) * (-1 if rng.random() > 0.7 else 1)
    # a(x - r1)(x - r2) = ax² - a(r1 + r2)x + a·r1·r2
    b = -a * (r1 + r2)
    c = a * r1 * r2
    return QuadraticEquationExercise(
        id=idx, coefficients=QuadraticCoefficients(a=a, b=b, c=c, r1=r1, r2=r2)
    )


_BUILDERS: Dict[OperationKind, Callable[[int, WorksheetConfig, random.Random], Exercise]] = {
    OperationKind.ADDITION: _build_addition,
    OperationKind.SUBTRACTION: _build_subtraction,
    OperationKind.MULTIPLICATION: _build_multiplication,
    OperationKind.DIVISION: _build_division,
    OperationKind.LINEAR_EQUATION: _build_linear,
    OperationKind.QUADRATIC_EQUATION: _build_quadratic,
}


# ---------- Public API ----------


def generate(
    count: int, config: WorksheetConfig, rng: Optional[random.Random] = None
) -> List[Exercise]:
    """
    Build a fresh batch of `count` exercises with ids 0..count-1.
    Pass a seeded `random.Random` to make the batch reproducible.
    """
    if isinstance(count, bool) or not isinstance(count, int) or not 1 <= count <= MAX_COUNT:
        raise InvalidConfiguration(f"count must be an integer between 1 and {MAX_COUNT}, got {count!r}.")
    if rng is None:
        rng = random.Random()

    exercises = [
        _BUILDERS[_resolve_kind(config.operation, rng)](idx, config, rng) for idx in range(count)
    ]
    logger.debug(
        "generated batch count=%s operation=%s digits=%s/%s",
        count,
        config.operation.value,
        config.digits_top,
        config.digits_bottom,
    )
    return exercises


def mark_worked_examples(exercises: Sequence[Exercise]) -> List[bool]:
    """Flag the first exercise of each kind, in one forward pass."""
    seen: Dict[str, bool] = {}
    flags: List[bool] = []
    for ex in exercises:
        flags.append(not seen.get(ex.kind, False))
        seen[ex.kind] = True
    return flags
