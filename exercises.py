# Exercise records shared by the generator, the explainer and the HTTP layer.

from __future__ import annotations

from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator
from sympy import Rational


class InvalidConfiguration(ValueError):
    """Raised for input outside the documented domain (bad counts, digit widths, zero divisors)."""


class OperationKind(str, Enum):
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"
    DIVISION = "division"
    LINEAR_EQUATION = "linear_equation"
    QUADRATIC_EQUATION = "quadratic_equation"


class Selector(str, Enum):
    ADDITION = "addition"
    SUBTRACTION = "subtraction"
    MULTIPLICATION = "multiplication"
    DIVISION = "division"
    LINEAR_EQUATION = "linear_equation"
    QUADRATIC_EQUATION = "quadratic_equation"
    MIXED = "mixed"


ARITHMETIC_KINDS = (
    OperationKind.ADDITION,
    OperationKind.SUBTRACTION,
    OperationKind.MULTIPLICATION,
    OperationKind.DIVISION,
)

SYMBOLS = {
    OperationKind.ADDITION: "+",
    OperationKind.SUBTRACTION: "−",
    OperationKind.MULTIPLICATION: "×",
    OperationKind.DIVISION: "÷",
    OperationKind.LINEAR_EQUATION: "=",
    OperationKind.QUADRATIC_EQUATION: "=",
}


# ---------- Equation text ----------


def leading_term(coef: int, var: str) -> str:
    if coef == 1:
        return var
    if coef == -1:
        return f"-{var}"
    return f"{coef}{var}"


def signed_term(coef: int, var: str = "") -> str:
    """Render a non-leading term as ' + n' / ' - n'; zero terms render as ''."""
    if coef == 0:
        return ""
    body = var if (var and abs(coef) == 1) else f"{abs(coef)}{var}"
    return f" + {body}" if coef > 0 else f" - {body}"


def format_linear(a: int, b: int, c: int) -> str:
    return f"{leading_term(a, 'x')}{signed_term(b)} = {c}"


def format_quadratic(a: int, b: int, c: int) -> str:
    return f"{leading_term(a, 'x²')}{signed_term(b, 'x')}{signed_term(c)} = 0"


# ---------- Coefficients ----------


class LinearCoefficients(BaseModel):
    """ax + b = c"""

    model_config = ConfigDict(frozen=True)
    a: int
    b: int
    c: int

    @model_validator(mode="after")
    def _check_leading(self):
        if self.a == 0:
            raise ValueError("Coefficient a must be non-zero.")
        return self


class QuadraticCoefficients(BaseModel):
    """ax² + bx + c = 0, built from the integer roots r1 and r2."""

    model_config = ConfigDict(frozen=True)
    a: int
    b: int
    c: int
    r1: int
    r2: int

    @model_validator(mode="after")
    def _check_roots(self):
        if self.a == 0:
            raise ValueError("Coefficient a must be non-zero.")
        if self.b != -self.a * (self.r1 + self.r2) or self.c != self.a * self.r1 * self.r2:
            raise ValueError("Coefficients b and c must equal -a(r1 + r2) and a·r1·r2.")
        return self


# ---------- Exercise variants ----------


class _ExerciseBase(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: int = Field(ge=0)

    @property
    def operation_kind(self) -> OperationKind:
        return OperationKind(self.kind)

    @computed_field
    @property
    def symbol(self) -> str:
        return SYMBOLS[self.operation_kind]


class _ArithmeticExercise(_ExerciseBase):
    operand_top: int = Field(ge=0)
    operand_bottom: int = Field(ge=0)

    @computed_field
    @property
    def answer_text(self) -> str:
        return f"= {self.result}"


class AdditionExercise(_ArithmeticExercise):
    kind: Literal["addition"] = "addition"

    @computed_field
    @property
    def result(self) -> int:
        return self.operand_top + self.operand_bottom


class SubtractionExercise(_ArithmeticExercise):
    kind: Literal["subtraction"] = "subtraction"

    @model_validator(mode="after")
    def _check_order(self):
        if self.operand_top < self.operand_bottom:
            raise ValueError("operand_top must be >= operand_bottom for subtraction.")
        return self

    @computed_field
    @property
    def result(self) -> int:
        return self.operand_top - self.operand_bottom


class MultiplicationExercise(_ArithmeticExercise):
    kind: Literal["multiplication"] = "multiplication"

    @computed_field
    @property
    def result(self) -> int:
        return self.operand_top * self.operand_bottom


class DivisionExercise(_ArithmeticExercise):
    kind: Literal["division"] = "division"

    @model_validator(mode="after")
    def _check_divisor(self):
        if self.operand_bottom == 0:
            raise ValueError("Division by zero is not defined.")
        return self

    @computed_field
    @property
    def result(self) -> Union[int, float]:
        if self.operand_top % self.operand_bottom == 0:
            return self.operand_top // self.operand_bottom
        return self.operand_top / self.operand_bottom


class LinearEquationExercise(_ExerciseBase):
    kind: Literal["linear_equation"] = "linear_equation"
    coefficients: LinearCoefficients

    @computed_field
    @property
    def equation_text(self) -> str:
        co = self.coefficients
        return format_linear(co.a, co.b, co.c)

    @property
    def root(self) -> Rational:
        co = self.coefficients
        return Rational(co.c - co.b, co.a)

    @computed_field
    @property
    def result(self) -> Union[int, float]:
        root = self.root
        return int(root) if root.is_integer else float(root)

    @computed_field
    @property
    def answer_text(self) -> str:
        # exact, as in the worked steps: x = -5/2
        return f"x = {self.root}"


class QuadraticEquationExercise(_ExerciseBase):
    kind: Literal["quadratic_equation"] = "quadratic_equation"
    coefficients: QuadraticCoefficients

    @computed_field
    @property
    def equation_text(self) -> str:
        co = self.coefficients
        return format_quadratic(co.a, co.b, co.c)

    @computed_field
    @property
    def result(self) -> List[int]:
        r1, r2 = self.coefficients.r1, self.coefficients.r2
        if r1 == r2:
            return [r1]
        return [min(r1, r2), max(r1, r2)]

    @computed_field
    @property
    def answer_text(self) -> str:
        roots = self.result
        if len(roots) == 1:
            return f"x = {roots[0]} (raíz doble)"
        return f"x₁ = {roots[0]}, x₂ = {roots[1]}"


Exercise = Annotated[
    Union[
        AdditionExercise,
        SubtractionExercise,
        MultiplicationExercise,
        DivisionExercise,
        LinearEquationExercise,
        QuadraticEquationExercise,
    ],
    Field(discriminator="kind"),
]
