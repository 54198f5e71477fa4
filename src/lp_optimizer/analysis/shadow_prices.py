from typing import Dict

import numpy as np

from .artifacts import basis_view
from ..schemas import LPModel, LPSolution


def dual_vector(model: LPModel, solution: LPSolution) -> np.ndarray:
    """Dual values over canonical rows: the exported vector, else c_B^T B^-1 from the basis."""

    view = basis_view(model, solution)
    if view.duals is not None:
        return view.duals
    return view.computed_duals()


def shadow_prices(model: LPModel, solution: LPSolution) -> Dict[str, float]:
    """
    Marginal objective change per unit increase of each model constraint's RHS.
    Rows negated during canonicalisation are flipped back to the caller's orientation.
    """

    view = basis_view(model, solution)
    y = view.duals if view.duals is not None else view.computed_duals()
    canonical = view.canonical
    prices: Dict[str, float] = {}
    for idx in range(canonical.model_row_count):
        value = float(canonical.row_signs[idx] * y[idx])
        prices[canonical.row_names[idx]] = 0.0 if abs(value) < 1e-12 else value
    return prices
