import itertools
import random

import pytest

from exercises import (
    InvalidConfiguration,
    LinearCoefficients,
    MultiplicationExercise,
    QuadraticCoefficients,
)
from generator import WorksheetConfig, generate
from steps import (
    explain,
    explain_arithmetic,
    explain_linear,
    explain_quadratic,
    is_header,
    place_name,
    strip_markers,
)

# ---------- Addition ----------


def test_addition_final_carry():
    steps = explain_arithmetic(99, 99, "addition")
    assert steps == [
        "Unidades: 9 + 9 = 18 → escribimos 8, llevamos 1",
        "Decenas: 9 + 9 + 1 (acarreo) = 19 → escribimos 9, llevamos 1",
        "Acarreo final: 1",
        "Resultado: 99 + 99 = 198",
    ]


def test_addition_uneven_widths():
    steps = explain_arithmetic(1234, 7, "addition")
    assert steps[0] == "Unidades: 4 + 7 = 11 → escribimos 1, llevamos 1"
    assert steps[1] == "Decenas: 3 + 0 + 1 (acarreo) = 4"
    assert steps[-1] == "Resultado: 1234 + 7 = 1241"


def test_addition_summary_all_widths():
    rng = random.Random(7)
    for dt, db in itertools.product(range(1, 7), repeat=2):
        top = rng.randint(10 ** (dt - 1), 10**dt - 1)
        bottom = rng.randint(10 ** (db - 1), 10**db - 1)
        steps = explain_arithmetic(top, bottom, "addition")
        assert steps[-1] == f"Resultado: {top} + {bottom} = {top + bottom}"
    steps = explain_arithmetic(999999, 999999, "addition")
    assert steps[-2] == "Acarreo final: 1"
    assert steps[-1] == "Resultado: 999999 + 999999 = 1999998"


# ---------- Subtraction ----------


def test_subtraction_borrow_chain():
    steps = explain_arithmetic(100, 1, "subtraction")
    assert steps == [
        "Unidades: 0 < 1, pedimos 10 → 10 - 1 = 9",
        "Decenas: 0 - 1 (préstamo) = -1, -1 < 0, pedimos 10 → 9 - 0 = 9",
        "Centenas: 1 - 1 (préstamo) = 0, 0 - 0 = 0",
        "Resultado: 100 - 1 = 99",
    ]


def test_subtraction_equal_operands():
    assert explain_arithmetic(42, 42, "subtraction")[-1] == "Resultado: 42 - 42 = 0"


def test_subtraction_requires_top_not_smaller():
    with pytest.raises(InvalidConfiguration):
        explain_arithmetic(1, 100, "subtraction")


# ---------- Multiplication ----------


def test_multiplication_partial_products():
    steps = explain_arithmetic(123, 45, "multiplication")
    partials = [int(s.split(":")[1]) for s in steps if s.strip().startswith("Producto parcial")]
    assert partials == [615, 4920]
    assert sum(partials) == 5535
    assert "Multiplicamos por 5 (unidades):" in steps
    assert "Multiplicamos por 4 (decenas):" in steps
    assert "  = 5535" in steps
    assert steps[-1] == "Resultado: 123 × 45 = 5535"


def test_multiplication_carry_is_product_tens():
    steps = explain_arithmetic(99, 9, "multiplication")
    assert steps[2] == "  9 × 9 = 81 → escribimos 1, llevamos 8"
    assert steps[3] == "  9 × 9 + 8 = 89 → escribimos 9, llevamos 8"
    assert steps[4] == "  Producto parcial: 891"
    # a single partial product needs no summing block
    assert "Sumamos los productos parciales:" not in steps


def test_multiplication_zero_digit():
    steps = explain_arithmetic(12, 10, "multiplication")
    assert "  Producto parcial: 0" in steps
    assert "  Producto parcial: 120" in steps
    assert steps[-1] == "Resultado: 12 × 10 = 120"


# ---------- Division ----------


def test_division_with_remainder():
    steps = explain_arithmetic(17, 5, "division")
    assert steps == [
        "Dividimos 17 ÷ 5",
        "Tomamos el primer dígito: 1",
        "1 < 5, escribimos 0 en el cociente",
        "Bajamos el 7, tenemos: 17",
        "5 cabe 3 veces en 17 (3 × 5 = 15)",
        "17 - 15 = 2",
        "Resultado: 17 ÷ 5 = 3 con residuo 2",
    ]


def test_division_exact():
    steps = explain_arithmetic(144, 12, "division")
    assert "12 cabe 1 vez en 14 (1 × 12 = 12)" in steps
    assert steps[-1] == "Resultado: 144 ÷ 12 = 12 (división exacta)"


def test_division_by_zero():
    with pytest.raises(InvalidConfiguration):
        explain_arithmetic(10, 0, "division")


def test_arithmetic_rejects_equation_kind():
    with pytest.raises(InvalidConfiguration):
        explain_arithmetic(1, 2, "linear_equation")


# ---------- Linear ----------


def test_linear_positive_b():
    steps = explain_linear(LinearCoefficients(a=3, b=5, c=11))
    assert steps == [
        "**Paso 1: Agrupar las constantes en el lado derecho**",
        "Ecuación original:",
        "    3x + 5 = 11",
        "Restamos 5 en ambos lados:",
        "    3x + 5 - 5 = 11 - 5",
        "Simplificamos:",
        "    3x = 6",
        "**Paso 2: Aislar la x**",
        "Dividimos ambos lados entre 3:",
        "    3x ÷ 3 = 6 ÷ 3",
        "    x = 2",
        "**✓ Solución: x = 2**",
    ]


def test_linear_negative_unit_coefficient():
    steps = explain_linear(LinearCoefficients(a=-1, b=-4, c=3))
    assert "Sumamos 4 en ambos lados:" in steps
    assert "    -x - 4 + 4 = 3 + 4" in steps
    assert "Tenemos -x, multiplicamos ambos lados por -1:" in steps
    assert steps[-2:] == ["    x = -7", "**✓ Solución: x = -7**"]


def test_linear_zero_b_skips_first_move():
    steps = explain_linear(LinearCoefficients(a=1, b=0, c=8))
    assert not any(s.startswith(("Restamos", "Sumamos")) for s in steps)
    assert "La x ya está aislada:" in steps
    assert steps[-1] == "**✓ Solución: x = 8**"


def test_linear_non_integer_root_is_exact():
    steps = explain_linear(LinearCoefficients(a=-2, b=0, c=5))
    assert "    -2x ÷ (-2) = 5 ÷ (-2)" in steps
    assert steps[-1] == "**✓ Solución: x = -5/2**"


def test_linear_zero_a():
    with pytest.raises(InvalidConfiguration):
        explain_linear(LinearCoefficients.model_construct(a=0, b=1, c=1))


# ---------- Quadratic ----------


def test_quadratic_two_roots():
    steps = explain_quadratic(QuadraticCoefficients(a=1, b=-5, c=6, r1=2, r2=3))
    assert steps[0] == "**Ecuación:** x² - 5x + 6 = 0"
    assert "a = 1, b = -5, c = 6" in steps
    assert "Discriminante: b² - 4ac = (-5)² - 4(1)(6) = 1" in steps
    assert "x₁ = (5 + 1) / 2 = 3" in steps
    assert "x₂ = (5 - 1) / 2 = 2" in steps
    assert steps[-1] == "✓ Resultado: x₁ = 2, x₂ = 3"


def test_quadratic_negative_leading_coefficient_orders_roots():
    steps = explain_quadratic(QuadraticCoefficients(a=-2, b=8, c=-6, r1=1, r2=3))
    assert "√16 = 4" in steps
    assert steps[-1] == "✓ Resultado: x₁ = 1, x₂ = 3"


def test_quadratic_double_root():
    steps = explain_quadratic(QuadraticCoefficients(a=1, b=-4, c=4, r1=2, r2=2))
    assert "Discriminante = 0 → raíz doble" in steps
    assert "x = 4 / 2 = 2" in steps
    assert steps[-1] == "✓ Resultado: x = 2 (raíz doble)"


def test_quadratic_negative_discriminant_does_not_crash():
    steps = explain_quadratic(QuadraticCoefficients.model_construct(a=1, b=0, c=1, r1=0, r2=0))
    assert "Discriminante < 0 → la ecuación no tiene raíces reales" in steps


def test_generated_quadratics_explain_to_their_roots():
    config = WorksheetConfig(operation="quadratic_equation")
    for ex in generate(50, config, rng=random.Random(3)):
        last = explain(ex)[-1]
        if len(ex.result) == 1:
            assert last == f"✓ Resultado: x = {ex.result[0]} (raíz doble)"
        else:
            assert last == f"✓ Resultado: x₁ = {ex.result[0]}, x₂ = {ex.result[1]}"


# ---------- Shared ----------


def test_explanations_are_deterministic():
    config = WorksheetConfig(operation="mixed")
    for ex in generate(30, config, rng=random.Random(11)):
        assert explain(ex) == explain(ex)


def test_explain_dispatches_on_variant():
    ex = MultiplicationExercise(id=0, operand_top=123, operand_bottom=45)
    assert explain(ex) == explain_arithmetic(123, 45, "multiplication")


def test_header_markers():
    assert is_header("**Paso 2: Aislar la x**")
    assert not is_header("    x = 2")
    assert strip_markers("**Ecuación:** x² = 0") == "Ecuación: x² = 0"


def test_place_names():
    assert place_name(0) == "unidades"
    assert place_name(5) == "centenas de millar"
    assert place_name(6) == "columna 7"
