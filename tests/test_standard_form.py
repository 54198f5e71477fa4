import math

import numpy as np
import pytest

from lp_optimizer.exceptions import InvalidModelError
from lp_optimizer.lp.standard_form import canonicalize
from lp_optimizer.schemas import Constraint, LPModel, Variable


def make_mixed_model() -> LPModel:
    return LPModel(
        name="mixed",
        sense="min",
        variables=[
            Variable(name="p", coefficient=1.0),
            Variable(name="f", coefficient=2.0, type="unrestricted"),
            Variable(name="n", coefficient=-1.0, type="negative"),
        ],
        constraints=[
            Constraint(name="le", coefficients=[1.0, 1.0, 1.0], cmp="<=", rhs=5.0),
            Constraint(name="ge", coefficients=[1.0, -1.0, 0.0], cmp=">=", rhs=1.0),
            Constraint(name="eq", coefficients=[0.0, 1.0, 2.0], cmp="==", rhs=3.0),
        ],
    )


def test_signed_column_mapping_in_scan_order():
    canonical = canonicalize(make_mixed_model())
    mapping = canonical.mapping

    assert mapping.components[0] == [(0, 1.0)]
    assert mapping.components[1] == [(1, 1.0), (2, -1.0)]
    assert mapping.components[2] == [(3, -1.0)]
    assert mapping.column_names[:4] == ["p", "f+", "f-", "n_neg"]
    assert mapping.structural_count == 4
    assert canonical.c[:4].tolist() == [1.0, 2.0, -2.0, 1.0]


def test_auxiliary_columns_per_relation():
    canonical = canonicalize(make_mixed_model())
    mapping = canonical.mapping

    assert mapping.column_names[4:] == ["s1", "e2", "a2", "a3"]
    assert [aux.kind for aux in mapping.auxiliary.values()] == ["slack", "surplus", "artificial", "artificial"]
    assert canonical.artificial_indices == [6, 7]
    assert canonical.requires_phase_one
    assert canonical.A[0, 4] == 1.0
    assert canonical.A[1, 5] == -1.0 and canonical.A[1, 6] == 1.0
    assert canonical.A[2, 7] == 1.0
    assert np.all(canonical.c[4:] == 0.0)


def test_negative_rhs_row_is_flipped():
    model = LPModel(
        name="flip",
        sense="max",
        variables=[Variable(name="x", coefficient=1.0), Variable(name="y", coefficient=1.0)],
        constraints=[Constraint(name="c1", coefficients=[1.0, -2.0], cmp=">=", rhs=-4.0)],
    )
    canonical = canonicalize(model)

    assert canonical.row_signs.tolist() == [-1.0]
    assert canonical.b.tolist() == [4.0]
    assert canonical.A[0, :2].tolist() == [-1.0, 2.0]
    # >= became <=, so a slack and no artificial
    assert canonical.mapping.column_names == ["x", "y", "s1"]
    assert not canonical.requires_phase_one


def test_bound_rows_follow_model_rows():
    model = LPModel(
        name="bounded",
        sense="max",
        variables=[
            Variable(name="x", coefficient=1.0, lb=1.0, ub=4.0),
            Variable(name="b", coefficient=1.0, type="binary"),
            Variable(name="z", coefficient=1.0),
        ],
        constraints=[Constraint(name="c1", coefficients=[1.0, 1.0, 1.0], cmp="<=", rhs=10.0)],
    )
    canonical = canonicalize(model)

    assert canonical.model_row_count == 1
    assert canonical.row_names == ["c1", "bound_x_lb", "bound_x_ub", "bound_b_ub"]
    assert canonical.row_sources == ["model", "bound", "bound", "bound"]
    assert canonical.b.tolist() == [10.0, 1.0, 4.0, 1.0]
    assert canonical.column_types[:3] == ["positive", "binary", "positive"]
    assert canonical.lower_bounds[0] == 1.0
    assert canonical.upper_bounds[0] == 4.0
    assert math.isinf(canonical.upper_bounds[2])


def test_unbounded_variables_add_no_rows():
    canonical = canonicalize(make_mixed_model())

    assert canonical.row_count == 3
    assert canonical.row_names == ["le", "ge", "eq"]


@pytest.mark.parametrize(
    "var_type, value",
    [
        ("positive", 2.5),
        ("continuous", 0.0),
        ("integer", 3.0),
        ("binary", 1.0),
        ("negative", -1.75),
        ("unrestricted", -4.0),
        ("unrestricted", 6.0),
    ],
)
def test_mapping_round_trip(var_type, value):
    model = LPModel(
        name="round-trip",
        sense="max",
        variables=[Variable(name="x", coefficient=1.0, type=var_type), Variable(name="y", coefficient=1.0)],
        constraints=[Constraint(name="c1", coefficients=[1.0, 1.0], cmp="<=", rhs=10.0)],
    )
    mapping = canonicalize(model).mapping

    x_canon = mapping.canonical_values([value, 1.5])
    assert np.all(x_canon >= 0.0)
    assert mapping.original_values(x_canon).tolist() == pytest.approx([value, 1.5])


def test_expand_row_rejects_wrong_length():
    mapping = canonicalize(make_mixed_model()).mapping

    with pytest.raises(InvalidModelError):
        mapping.expand_row([1.0, 2.0])


def test_canonicalize_rejects_mutated_model():
    model = make_mixed_model()
    model.constraints[1].coefficients.pop()

    with pytest.raises(InvalidModelError, match="coefficients"):
        canonicalize(model)


def test_model_validation_rejects_duplicates():
    with pytest.raises(ValueError, match="Duplicate variable name"):
        LPModel(
            name="dup",
            sense="max",
            variables=[Variable(name="x"), Variable(name="x")],
        )


def test_variable_type_bounds():
    assert Variable(type="binary").ub == 1.0
    assert Variable(type="negative").ub == 0.0
    assert Variable(type="unrestricted").lb is None
    with pytest.raises(ValueError):
        Variable(name="bad", type="positive", lb=-1.0)
    with pytest.raises(ValueError):
        Variable(name="bad", type="negative", ub=2.0)


def test_default_names():
    model = LPModel(
        sense="min",
        variables=[Variable(coefficient=1.0), Variable(coefficient=2.0)],
        constraints=[Constraint(coefficients=[1.0, 1.0], cmp=">=", rhs=1.0)],
    )

    assert [var.name for var in model.variables] == ["x1", "x2"]
    assert model.constraints[0].name == "C1"
