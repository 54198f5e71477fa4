from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from ..exceptions import MissingArtifactsError
from ..lp.standard_form import CanonicalForm, canonicalize
from ..schemas import LPModel, LPSolution


@dataclass
class BasisView:
    """Canonical model plus the optimal basis a solve exported for it."""

    canonical: CanonicalForm
    basis: List[int]
    B_inv: np.ndarray
    reduced_costs: np.ndarray
    duals: Optional[np.ndarray]

    @property
    def maximize(self) -> bool:
        return self.canonical.sense == "max"

    @property
    def nonbasic(self) -> List[int]:
        basic = set(self.basis)
        artificial = set(self.canonical.artificial_indices)
        return [j for j in range(self.canonical.column_count) if j not in basic and j not in artificial]

    def basic_solution(self, b: Optional[np.ndarray] = None) -> np.ndarray:
        return self.B_inv @ (self.canonical.b if b is None else b)

    def computed_duals(self) -> np.ndarray:
        return self.canonical.c[self.basis] @ self.B_inv


def basis_view(model: LPModel, solution: LPSolution) -> BasisView:
    if solution.artifacts is None:
        raise MissingArtifactsError(
            f"Sensitivity analysis needs basis artifacts; solution status is '{solution.status}'."
        )
    canonical = canonicalize(model)
    art = solution.artifacts
    m, n = canonical.row_count, canonical.column_count

    B_inv = np.array(art.basis_inverse, dtype=float) if m else np.zeros((0, 0))
    if len(art.basis) != m or B_inv.shape != (m, m) or len(art.reduced_costs) != n:
        raise MissingArtifactsError("Solution artifacts do not match the canonical form of this model.")
    duals = None if art.duals is None else np.array(art.duals, dtype=float)
    if duals is not None and duals.shape != (m,):
        duals = None

    return BasisView(
        canonical=canonical,
        basis=list(art.basis),
        B_inv=B_inv,
        reduced_costs=np.array(art.reduced_costs, dtype=float),
        duals=duals,
    )
