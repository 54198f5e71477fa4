import math
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Sequence, Tuple

import numpy as np

from ..exceptions import InvalidModelError
from ..schemas import Cmp, LPModel, Sense, Variable, structural_errors

AuxiliaryKind = Literal["slack", "surplus", "artificial"]
RowSource = Literal["model", "bound"]

_FLIPPED: Dict[str, Cmp] = {"<=": ">=", ">=": "<=", "==": "=="}
_AUX_PREFIX = {"slack": "s", "surplus": "e", "artificial": "a"}


@dataclass(frozen=True)
class AuxiliaryColumn:
    kind: AuxiliaryKind
    row: int
    name: str


@dataclass
class VariableMapping:
    """Signed correspondence between original variables and canonical columns.

    ``components[i]`` lists ``(column, sign)`` pairs so that
    ``x_i = sum(sign * x_canon[column])``. Auxiliary columns (slack, surplus,
    artificial) never map back to an original variable.
    """

    original_count: int
    components: Dict[int, List[Tuple[int, float]]] = field(default_factory=dict)
    column_origin: Dict[int, Tuple[int, float]] = field(default_factory=dict)
    auxiliary: Dict[int, AuxiliaryColumn] = field(default_factory=dict)
    column_names: List[str] = field(default_factory=list)

    @property
    def structural_count(self) -> int:
        return len(self.column_origin)

    @property
    def total_columns(self) -> int:
        return len(self.column_names)

    def add_structural(self, original_index: int, name: str, sign: float) -> int:
        column = len(self.column_names)
        self.column_names.append(name)
        self.components.setdefault(original_index, []).append((column, sign))
        self.column_origin[column] = (original_index, sign)
        return column

    def add_auxiliary(self, kind: AuxiliaryKind, row: int) -> int:
        column = len(self.column_names)
        name = f"{_AUX_PREFIX[kind]}{row + 1}"
        self.column_names.append(name)
        self.auxiliary[column] = AuxiliaryColumn(kind=kind, row=row, name=name)
        return column

    def is_auxiliary(self, column: int) -> bool:
        return column in self.auxiliary

    def auxiliary_indices(self, kind: Optional[AuxiliaryKind] = None) -> List[int]:
        return [col for col, aux in self.auxiliary.items() if kind is None or aux.kind == kind]

    def original_value(self, original_index: int, x_canon: Sequence[float]) -> float:
        if original_index not in self.components:
            raise KeyError(f"Original variable {original_index} not found in mapping.")
        value = 0.0
        for column, sign in self.components[original_index]:
            if column >= len(x_canon):
                raise IndexError(
                    f"Canonical solution length {len(x_canon)} is less than required index {column + 1}."
                )
            value += sign * x_canon[column]
        return value

    def original_values(self, x_canon: Sequence[float]) -> np.ndarray:
        return np.array([self.original_value(i, x_canon) for i in range(self.original_count)], dtype=float)

    def canonical_values(self, values: Sequence[float]) -> np.ndarray:
        """Inverse of ``original_values`` over the structural columns (auxiliaries left at zero)."""

        if len(values) != self.original_count:
            raise ValueError(f"Expected {self.original_count} original values, got {len(values)}.")
        x = np.zeros(self.total_columns)
        for i, value in enumerate(values):
            pairs = self.components[i]
            if len(pairs) == 2:
                (pos, _), (neg, _) = pairs
                x[pos] = max(value, 0.0)
                x[neg] = max(-value, 0.0)
            else:
                column, sign = pairs[0]
                x[column] = sign * value
        return x

    def expand_row(self, coefficients: Sequence[float]) -> np.ndarray:
        if len(coefficients) != self.original_count:
            raise InvalidModelError(
                f"Expected {self.original_count} original coefficients, got {len(coefficients)}."
            )
        row = np.zeros(self.total_columns)
        for i, coef in enumerate(coefficients):
            for column, sign in self.components[i]:
                row[column] += sign * coef
        return row


@dataclass
class CanonicalForm:
    """Standard form ``A x = b, x >= 0`` with ``b >= 0``, built fresh per solve."""

    name: str
    sense: Sense
    c: np.ndarray
    A: np.ndarray
    b: np.ndarray
    lower_bounds: np.ndarray
    upper_bounds: np.ndarray
    column_types: List[str]
    mapping: VariableMapping
    artificial_indices: List[int]
    row_names: List[str]
    row_sources: List[RowSource]
    row_signs: np.ndarray
    model_row_count: int

    @property
    def requires_phase_one(self) -> bool:
        return bool(self.artificial_indices)

    @property
    def row_count(self) -> int:
        return self.A.shape[0]

    @property
    def column_count(self) -> int:
        return self.A.shape[1]

    @property
    def is_integer_program(self) -> bool:
        return any(kind in ("integer", "binary") for kind in self.column_types)

    def validate(self, tol: float = 1e-10) -> None:
        m, n = self.row_count, self.column_count
        errors: List[str] = []

        if self.A.shape != (m, self.mapping.total_columns):
            errors.append(f"Constraint matrix is {self.A.shape[0]}x{self.A.shape[1]}, expected {m}x{self.mapping.total_columns}")
        for label, vec, size in (
            ("objective", self.c, n),
            ("lower bounds", self.lower_bounds, n),
            ("upper bounds", self.upper_bounds, n),
            ("rhs", self.b, m),
            ("row signs", self.row_signs, m),
        ):
            if vec.shape != (size,):
                errors.append(f"{label} has length {vec.shape[0]}, expected {size}")
        if len(self.column_types) != n:
            errors.append(f"column types has length {len(self.column_types)}, expected {n}")

        if not np.all(np.isfinite(self.c)):
            errors.append("Objective vector contains NaN/Infinity")
        if not np.all(np.isfinite(self.A)):
            errors.append("Constraint matrix contains NaN/Infinity")
        for i, value in enumerate(self.b):
            if not math.isfinite(value):
                errors.append(f"RHS of row {self.row_names[i]} is NaN/Infinity")
            elif value < -tol:
                errors.append(f"RHS {value:.6f} of row {self.row_names[i]} is negative")
        for j, (lo, hi) in enumerate(zip(self.lower_bounds, self.upper_bounds)):
            if math.isnan(lo) or lo < -tol:
                errors.append(f"Lower bound {lo} of column {self.mapping.column_names[j]} is negative")
            if math.isnan(hi) or lo > hi:
                errors.append(f"Column {self.mapping.column_names[j]} has bounds [{lo}, {hi}]")

        if errors:
            raise InvalidModelError("Canonical form validation failed: " + "; ".join(errors))


@dataclass
class _Row:
    name: str
    coefficients: List[float]
    cmp: Cmp
    rhs: float
    source: RowSource


def canonicalize(model: LPModel) -> CanonicalForm:
    """
    Convert a general model to standard form Ax = b, x >= 0 with slack/surplus/artificial columns.
    Structural columns come first in variable order, auxiliary columns follow in row order.
    """

    _check_model(model)

    mapping = VariableMapping(original_count=len(model.variables))
    for idx, var in enumerate(model.variables):
        if var.type == "unrestricted":
            # x = x+ - x-
            mapping.add_structural(idx, f"{var.name}+", 1.0)
            mapping.add_structural(idx, f"{var.name}-", -1.0)
        elif var.type == "negative":
            # x = -y, y >= 0
            mapping.add_structural(idx, f"{var.name}_neg", -1.0)
        else:
            mapping.add_structural(idx, var.name, 1.0)

    rows: List[_Row] = [
        _Row(cons.name, list(cons.coefficients), cons.cmp, cons.rhs, "model") for cons in model.constraints
    ]
    rows.extend(_bound_rows(model))

    row_signs = np.ones(len(rows))
    for i, row in enumerate(rows):
        if row.rhs < 0:
            row.coefficients = [-coef for coef in row.coefficients]
            row.rhs = -row.rhs
            row.cmp = _FLIPPED[row.cmp]
            row_signs[i] = -1.0

    artificial_indices: List[int] = []
    aux_entries: List[Tuple[int, int, float]] = []
    for i, row in enumerate(rows):
        if row.cmp == "<=":
            aux_entries.append((i, mapping.add_auxiliary("slack", i), 1.0))
        elif row.cmp == ">=":
            aux_entries.append((i, mapping.add_auxiliary("surplus", i), -1.0))
            col = mapping.add_auxiliary("artificial", i)
            aux_entries.append((i, col, 1.0))
            artificial_indices.append(col)
        else:
            col = mapping.add_auxiliary("artificial", i)
            aux_entries.append((i, col, 1.0))
            artificial_indices.append(col)

    m, n = len(rows), mapping.total_columns
    A = np.zeros((m, n))
    b = np.zeros(m)
    for i, row in enumerate(rows):
        A[i, :] = mapping.expand_row(row.coefficients)
        b[i] = row.rhs
    for i, col, value in aux_entries:
        A[i, col] = value

    c = mapping.expand_row(model.objective_vector())

    lower = np.zeros(n)
    upper = np.full(n, math.inf)
    column_types = ["positive"] * n
    for col, (orig, sign) in mapping.column_origin.items():
        var = model.variables[orig]
        if var.type in ("integer", "binary"):
            column_types[col] = var.type
        if len(mapping.components[orig]) == 2:
            continue
        lo, hi = _finite_or_inf(var)
        if sign > 0:
            lower[col] = max(0.0, lo)
            upper[col] = hi
        else:
            lower[col] = max(0.0, -hi)
            upper[col] = -lo

    canonical = CanonicalForm(
        name=model.name,
        sense=model.sense,
        c=c,
        A=A,
        b=b,
        lower_bounds=lower,
        upper_bounds=upper,
        column_types=column_types,
        mapping=mapping,
        artificial_indices=artificial_indices,
        row_names=[row.name for row in rows],
        row_sources=[row.source for row in rows],
        row_signs=row_signs,
        model_row_count=len(model.constraints),
    )
    canonical.validate()
    return canonical


def _check_model(model: LPModel) -> None:
    errors = structural_errors(model)
    for var in model.variables:
        if not math.isfinite(var.coefficient):
            errors.append(f"Objective coefficient of {var.name} is NaN/Infinity")
        lo, hi = _finite_or_inf(var)
        if math.isnan(lo) or math.isnan(hi) or lo > hi:
            errors.append(f"Variable {var.name} has inconsistent bounds [{lo}, {hi}]")
    for cons in model.constraints:
        if not math.isfinite(cons.rhs) or not all(math.isfinite(coef) for coef in cons.coefficients):
            errors.append(f"Constraint {cons.name} contains NaN/Infinity")
    if errors:
        raise InvalidModelError("Model validation failed: " + "; ".join(errors))


def _finite_or_inf(var: Variable) -> Tuple[float, float]:
    lo = -math.inf if var.lb is None else var.lb
    hi = math.inf if var.ub is None else var.ub
    return lo, hi


def _bound_rows(model: LPModel) -> List[_Row]:
    """Explicit rows for bounds that the sign substitution does not already imply."""

    rows: List[_Row] = []
    n = len(model.variables)
    for idx, var in enumerate(model.variables):
        lo, hi = _finite_or_inf(var)
        if var.type == "unrestricted":
            implied_lo, implied_hi = -math.inf, math.inf
        elif var.type == "negative":
            implied_lo, implied_hi = -math.inf, 0.0
        else:
            implied_lo, implied_hi = 0.0, math.inf

        unit = [0.0] * n
        unit[idx] = 1.0
        if math.isfinite(lo) and lo > implied_lo:
            rows.append(_Row(f"bound_{var.name}_lb", list(unit), ">=", lo, "bound"))
        if math.isfinite(hi) and hi < implied_hi:
            rows.append(_Row(f"bound_{var.name}_ub", list(unit), "<=", hi, "bound"))
    return rows
