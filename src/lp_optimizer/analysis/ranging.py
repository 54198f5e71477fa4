import math
from typing import List, Literal, Optional

import numpy as np
from pydantic import BaseModel

from .artifacts import basis_view
from ..schemas import LPModel, LPSolution

ZERO_TOL = 1e-12


class SensitivityRange(BaseModel):
    """Interval over which a single coefficient can move without changing the optimal basis."""

    name: str
    index: int
    kind: Literal["cost", "rhs"]
    is_basic: bool = False
    current: float
    lower: float
    upper: float
    allowable_increase: float
    allowable_decrease: float
    reduced_cost: Optional[float] = None
    shadow_price: Optional[float] = None


def cost_ranges_nonbasic(model: LPModel, solution: LPSolution) -> List[SensitivityRange]:
    """
    Nonbasic column j sits at zero with r_j <= 0 (max) or r_j >= 0 (min).
    Its cost can move |r_j| towards the binding side before j would enter; the other side is free.
    """

    view = basis_view(model, solution)
    c = view.canonical.c
    names = view.canonical.mapping.column_names
    ranges: List[SensitivityRange] = []

    for j in view.nonbasic:
        rj = float(view.reduced_costs[j])
        if view.maximize:
            increase = max(0.0, -rj)
            decrease = math.inf
        else:
            increase = math.inf
            decrease = max(0.0, rj)
        ranges.append(
            SensitivityRange(
                name=names[j],
                index=j,
                kind="cost",
                is_basic=False,
                current=float(c[j]),
                lower=float(c[j]) - decrease,
                upper=float(c[j]) + increase,
                allowable_increase=increase,
                allowable_decrease=decrease,
                reduced_cost=rj,
            )
        )
    return ranges


def cost_ranges_basic(model: LPModel, solution: LPSolution) -> List[SensitivityRange]:
    """
    Shifting the cost of the basic column at position k by delta moves every nonbasic
    reduced cost by -delta * w, with w = row_k(B^-1) A_N. Delta is bounded so none flips sign.
    """

    view = basis_view(model, solution)
    A, c = view.canonical.A, view.canonical.c
    names = view.canonical.mapping.column_names
    nonbasic = view.nonbasic
    r_N = view.reduced_costs[nonbasic]
    ranges: List[SensitivityRange] = []

    artificial = set(view.canonical.artificial_indices)
    for k, j_basic in enumerate(view.basis):
        if j_basic in artificial:
            continue
        w = view.B_inv[k] @ A[:, nonbasic] if nonbasic else np.zeros(0)
        low, high = _delta_bounds(r_N, w, view.maximize)
        current = float(c[j_basic])
        ranges.append(
            SensitivityRange(
                name=names[j_basic],
                index=j_basic,
                kind="cost",
                is_basic=True,
                current=current,
                lower=current + low,
                upper=current + high,
                allowable_increase=high,
                allowable_decrease=-low,
                reduced_cost=0.0,
            )
        )
    return ranges


def rhs_ranges(model: LPModel, solution: LPSolution) -> List[SensitivityRange]:
    """
    Changing b_i by delta moves x_B by delta * B^-1[:, i]; delta is bounded so x_B stays >= 0.
    Ranges are reported against the caller's RHS, undoing any row negation.
    """

    view = basis_view(model, solution)
    canonical = view.canonical
    xB = view.basic_solution()
    y = view.duals if view.duals is not None else view.computed_duals()
    ranges: List[SensitivityRange] = []

    for i in range(canonical.row_count):
        low, high = _rhs_delta_bounds(xB, view.B_inv[:, i])
        sign = float(canonical.row_signs[i])
        if sign < 0:
            low, high = -high, -low
        current = sign * float(canonical.b[i])
        ranges.append(
            SensitivityRange(
                name=canonical.row_names[i],
                index=i,
                kind="rhs",
                current=current,
                lower=current + low,
                upper=current + high,
                allowable_increase=high,
                allowable_decrease=-low,
                shadow_price=sign * float(y[i]),
            )
        )
    return ranges


def _delta_bounds(r_N: np.ndarray, w: np.ndarray, maximize: bool) -> tuple[float, float]:
    low, high = -math.inf, math.inf
    for rj, wj in zip(r_N, w):
        if abs(wj) < ZERO_TOL:
            continue
        bound = float(rj / wj)
        # max keeps r_j - delta * w_j <= 0, min keeps it >= 0
        if (wj > 0) == maximize:
            low = max(low, bound)
        else:
            high = min(high, bound)
    return low, high


def _rhs_delta_bounds(xB: np.ndarray, direction: np.ndarray) -> tuple[float, float]:
    low, high = -math.inf, math.inf
    for value, d in zip(xB, direction):
        if abs(d) < ZERO_TOL:
            continue
        bound = float(-value / d)
        if d > 0:
            low = max(low, bound)
        else:
            high = min(high, bound)
    return low, high
