# Step-by-step explanations of the manual procedures, in Spanish.
#
# Every function here is pure: the same input always yields the same list of
# lines. A line starting with "**" is a section header for the renderer.

from __future__ import annotations

from typing import Callable, Dict, List, Union

from sympy import Integer, Rational, sqrt

from exercises import (
    Exercise,
    InvalidConfiguration,
    LinearCoefficients,
    LinearEquationExercise,
    OperationKind,
    QuadraticCoefficients,
    QuadraticEquationExercise,
    format_linear,
    format_quadratic,
    leading_term,
)

HEADER_MARK = "**"

PLACE_NAMES = (
    "unidades",
    "decenas",
    "centenas",
    "millares",
    "decenas de millar",
    "centenas de millar",
)


def place_name(index: int) -> str:
    if index < len(PLACE_NAMES):
        return PLACE_NAMES[index]
    return f"columna {index + 1}"


def is_header(step: str) -> bool:
    return step.startswith(HEADER_MARK)


def strip_markers(step: str) -> str:
    return step.replace(HEADER_MARK, "")


def _label(index: int) -> str:
    return place_name(index).capitalize()


def _paren(n) -> str:
    return f"({n})" if n < 0 else str(n)


def _digits_to_int(digits: List[int]) -> int:
    return int("".join(str(d) for d in digits))


# ---------- Arithmetic ----------


def _explain_addition(top: int, bottom: int) -> List[str]:
    steps: List[str] = []
    width = max(len(str(top)), len(str(bottom)))
    top_str = str(top).zfill(width)
    bottom_str = str(bottom).zfill(width)

    carry = 0
    digits: List[int] = []
    for col in range(width):
        i = width - 1 - col
        d_top, d_bottom = int(top_str[i]), int(bottom_str[i])
        total = d_top + d_bottom + carry
        digit, new_carry = total % 10, total // 10
        digits.insert(0, digit)

        text = f"{_label(col)}: {d_top} + {d_bottom}"
        if carry:
            text += f" + {carry} (acarreo)"
        text += f" = {total}"
        if new_carry:
            text += f" → escribimos {digit}, llevamos {new_carry}"
        steps.append(text)
        carry = new_carry

    if carry:
        digits.insert(0, carry)
        steps.append(f"Acarreo final: {carry}")

    steps.append(f"Resultado: {top} + {bottom} = {_digits_to_int(digits)}")
    return steps


def _explain_subtraction(top: int, bottom: int) -> List[str]:
    if top < bottom:
        raise InvalidConfiguration(
            f"Subtraction needs top >= bottom to avoid a negative result, got {top} - {bottom}."
        )
    steps: List[str] = []
    width = len(str(top))
    top_str = str(top)
    bottom_str = str(bottom).zfill(width)

    borrow = 0
    digits: List[int] = []
    for col in range(width):
        i = width - 1 - col
        original = int(top_str[i])
        d_bottom = int(bottom_str[i])
        d_top = original - borrow

        text = f"{_label(col)}: "
        if borrow:
            text += f"{original} - {borrow} (préstamo) = {d_top}, "
        if d_top < d_bottom:
            diff = d_top + 10 - d_bottom
            text += f"{d_top} < {d_bottom}, pedimos 10 → {d_top + 10} - {d_bottom} = {diff}"
            borrow = 1
        else:
            diff = d_top - d_bottom
            text += f"{d_top} - {d_bottom} = {diff}"
            borrow = 0
        digits.insert(0, diff)
        steps.append(text)

    while len(digits) > 1 and digits[0] == 0:
        digits.pop(0)

    steps.append(f"Resultado: {top} - {bottom} = {_digits_to_int(digits)}")
    return steps


def _explain_multiplication(top: int, bottom: int) -> List[str]:
    steps = [f"Multiplicamos {top} × {bottom}"]
    top_str, bottom_str = str(top), str(bottom)

    partials: List[int] = []
    for pos in range(len(bottom_str)):
        d_bottom = int(bottom_str[-1 - pos])
        steps.append(f"Multiplicamos por {d_bottom} ({place_name(pos)}):")

        carry = 0
        # trailing zeros shift the partial product to this digit's place
        digits = [0] * pos
        for ch in reversed(top_str):
            d_top = int(ch)
            product = d_top * d_bottom + carry
            digit = product % 10

            text = f"  {d_top} × {d_bottom}"
            if carry:
                text += f" + {carry}"
            text += f" = {product}"
            if product >= 10:
                text += f" → escribimos {digit}, llevamos {product // 10}"
            steps.append(text)

            digits.insert(0, digit)
            carry = product // 10

        if carry:
            digits.insert(0, carry)
        partial = _digits_to_int(digits)
        partials.append(partial)
        steps.append(f"  Producto parcial: {partial}")

    if len(partials) > 1:
        steps.append("Sumamos los productos parciales:")
        for idx, p in enumerate(partials):
            steps.append(f"  {p} +" if idx < len(partials) - 1 else f"  {p}")
        steps.append(f"  = {sum(partials)}")

    steps.append(f"Resultado: {top} × {bottom} = {top * bottom}")
    return steps


def _explain_division(top: int, bottom: int) -> List[str]:
    if bottom == 0:
        raise InvalidConfiguration("Division by zero is not defined.")
    steps = [f"Dividimos {top} ÷ {bottom}"]

    remainder = 0
    quotient_digits: List[int] = []
    for i, ch in enumerate(str(top)):
        digit = int(ch)
        remainder = remainder * 10 + digit
        if i == 0:
            steps.append(f"Tomamos el primer dígito: {digit}")
        else:
            steps.append(f"Bajamos el {digit}, tenemos: {remainder}")

        times = remainder // bottom
        quotient_digits.append(times)
        if remainder < bottom:
            steps.append(f"{remainder} < {bottom}, escribimos 0 en el cociente")
        else:
            product = times * bottom
            veces = "vez" if times == 1 else "veces"
            steps.append(f"{bottom} cabe {times} {veces} en {remainder} ({times} × {bottom} = {product})")
            steps.append(f"{remainder} - {product} = {remainder - product}")
            remainder -= product

    quotient = _digits_to_int(quotient_digits)
    if remainder == 0:
        steps.append(f"Resultado: {top} ÷ {bottom} = {quotient} (división exacta)")
    else:
        steps.append(f"Resultado: {top} ÷ {bottom} = {quotient} con residuo {remainder}")
    return steps


_ARITHMETIC: Dict[OperationKind, Callable[[int, int], List[str]]] = {
    OperationKind.ADDITION: _explain_addition,
    OperationKind.SUBTRACTION: _explain_subtraction,
    OperationKind.MULTIPLICATION: _explain_multiplication,
    OperationKind.DIVISION: _explain_division,
}


def explain_arithmetic(top: int, bottom: int, kind: Union[OperationKind, str]) -> List[str]:
    try:
        explainer = _ARITHMETIC[OperationKind(kind)]
    except (KeyError, ValueError):
        raise InvalidConfiguration(f"{kind!r} is not an arithmetic operation.") from None
    if top < 0 or bottom < 0:
        raise InvalidConfiguration("Operands must be non-negative integers.")
    return explainer(top, bottom)


# ---------- Equations ----------


def explain_linear(coefficients: LinearCoefficients) -> List[str]:
    """Two steps: move b to the right, then isolate x. Division is exact (rational)."""
    a, b, c = coefficients.a, coefficients.b, coefficients.c
    if a == 0:
        raise InvalidConfiguration("Coefficient a must be non-zero.")

    lhs = leading_term(a, "x")
    right = c - b
    steps = [
        "**Paso 1: Agrupar las constantes en el lado derecho**",
        "Ecuación original:",
        f"    {format_linear(a, b, c)}",
    ]

    if b > 0:
        steps.append(f"Restamos {b} en ambos lados:")
        steps.append(f"    {lhs} + {b} - {b} = {c} - {b}")
    elif b < 0:
        steps.append(f"Sumamos {-b} en ambos lados:")
        steps.append(f"    {lhs} - {-b} + {-b} = {c} + {-b}")
    if b != 0:
        steps.append("Simplificamos:")
        steps.append(f"    {lhs} = {right}")

    steps.append("**Paso 2: Aislar la x**")
    x = Rational(right, a)
    if a == 1:
        steps.append("La x ya está aislada:")
        steps.append(f"    x = {right}")
    elif a == -1:
        steps.append("Tenemos -x, multiplicamos ambos lados por -1:")
        steps.append(f"    -x = {right}")
        steps.append(f"    x = {-right}")
    else:
        steps.append(f"Dividimos ambos lados entre {a}:")
        steps.append(f"    {lhs} ÷ {_paren(a)} = {right} ÷ {_paren(a)}")
        steps.append(f"    x = {x}")

    steps.append(f"**✓ Solución: x = {x}**")
    return steps


def explain_quadratic(coefficients: QuadraticCoefficients) -> List[str]:
    """General formula only; roots are derived from a, b and c."""
    a, b, c = coefficients.a, coefficients.b, coefficients.c
    if a == 0:
        raise InvalidConfiguration("Coefficient a must be non-zero.")

    steps = [
        f"**Ecuación:** {format_quadratic(a, b, c)}",
        "**Método: Fórmula General**",
        f"a = {a}, b = {b}, c = {c}",
        "x = (-b ± √(b² - 4ac)) / 2a",
    ]

    disc = b * b - 4 * a * c
    den = 2 * a
    steps.append(f"Discriminante: b² - 4ac = {_paren(b)}² - 4({a})({c}) = {disc}")

    if disc > 0:
        root = sqrt(Integer(disc))
        x1 = (Integer(-b) + root) / den
        x2 = (Integer(-b) - root) / den
        steps.append(f"√{disc} = {root}")
        steps.append(f"x = ({-b} ± {root}) / {den}")
        steps.append(f"x₁ = ({-b} + {root}) / {den} = {x1}")
        steps.append(f"x₂ = ({-b} - {root}) / {den} = {x2}")
        low, high = sorted((x1, x2), key=float)
        steps.append(f"✓ Resultado: x₁ = {low}, x₂ = {high}")
    elif disc == 0:
        x = Rational(-b, den)
        steps.append("Discriminante = 0 → raíz doble")
        steps.append(f"x = {-b} / {den} = {x}")
        steps.append(f"✓ Resultado: x = {x} (raíz doble)")
    else:
        steps.append("Discriminante < 0 → la ecuación no tiene raíces reales")
        steps.append("✓ Resultado: sin solución en los números reales")
    return steps


def explain(exercise: Exercise) -> List[str]:
    if isinstance(exercise, LinearEquationExercise):
        return explain_linear(exercise.coefficients)
    if isinstance(exercise, QuadraticEquationExercise):
        return explain_quadratic(exercise.coefficients)
    return explain_arithmetic(exercise.operand_top, exercise.operand_bottom, exercise.kind)
