import logging
from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Sequence, Set

import numpy as np

from .linalg import invert_with_partial_pivoting, is_unit_column
from .standard_form import CanonicalForm, canonicalize
from ..exceptions import InvalidModelError, SingularMatrixError
from ..schemas import LPModel, LPSolution, SimplexArtifacts, SolveOptions, SolveStatus

logger = logging.getLogger(__name__)

PHASE_ONE_TOL = 1e-8
DRIVE_OUT_TOL = 1e-9

PivotStatus = Literal["optimal", "unbounded", "iteration_limit", "singular"]


@dataclass
class EngineResult:
    """Outcome of one revised simplex run on a canonical form.

    The basis artifacts are only populated for ``optimal`` and
    ``alternative_optimal``; every other status carries just the message,
    the iteration count and the diagnostic log.
    """

    status: SolveStatus
    message: str
    iterations: int
    log: str
    x: Optional[np.ndarray] = None
    objective: Optional[float] = None
    basis: Optional[List[int]] = None
    basis_inverse: Optional[np.ndarray] = None
    reduced_costs: Optional[np.ndarray] = None
    duals: Optional[np.ndarray] = None
    alternate_optima: bool = False


@dataclass
class _BasisState:
    basis: List[int]
    B: np.ndarray
    B_inv: np.ndarray

    @classmethod
    def from_columns(cls, A: np.ndarray, basis: Sequence[int]) -> "_BasisState":
        B = A[:, list(basis)]
        return cls(basis=list(basis), B=B, B_inv=invert_with_partial_pivoting(B))

    def replace(self, A: np.ndarray, row: int, column: int) -> None:
        basis = self.basis.copy()
        basis[row] = column
        B = A[:, basis]
        # full dense reinversion after every basis change
        self.B_inv = invert_with_partial_pivoting(B)
        self.B = B
        self.basis = basis


@dataclass
class _PhaseOutcome:
    status: PivotStatus
    iterations: int
    x: Optional[np.ndarray] = None
    objective: float = 0.0
    reduced_costs: Optional[np.ndarray] = None
    duals: Optional[np.ndarray] = None
    message: str = ""


class _SolveLog:
    def __init__(self) -> None:
        self.lines: List[str] = []

    def header(self, title: str) -> None:
        self.lines.extend(["", title, "=" * len(title)])
        logger.debug(title)

    def line(self, text: str) -> None:
        self.lines.append(text)
        logger.debug(text)

    def text(self) -> str:
        return "\n".join(self.lines).strip("\n")


def simplex_solve(model: LPModel, opts: Optional[SolveOptions] = None) -> LPSolution:
    """
    Two-phase revised simplex with an explicit basis inverse, Bland's rule on request.
    Dense and reinverting on every pivot: engineered for exact artifacts, not speed.
    """

    opts = opts or SolveOptions()
    try:
        canonical = canonicalize(model)
    except InvalidModelError as exc:
        logger.warning("Rejected model %s: %s", model.name, exc)
        return LPSolution(
            status="error",
            objective_value=None,
            x=None,
            reduced_costs=None,
            duals=None,
            iterations=0,
            message=f"Invalid input: {exc}",
        )

    result = solve_canonical(canonical, opts)
    logger.info(
        "Solved %s: status=%s objective=%s iterations=%d",
        model.name,
        result.status,
        result.objective,
        result.iterations,
    )

    if result.status not in ("optimal", "alternative_optimal"):
        return LPSolution(
            status=result.status,
            objective_value=None,
            x=None,
            reduced_costs=None,
            duals=None,
            iterations=result.iterations,
            message=result.message,
            log=result.log,
        )

    x_original = canonical.mapping.original_values(result.x)
    reduced_costs = _reconstruct_reduced_costs(model, canonical, result.reduced_costs)
    duals = _map_duals(canonical, result.duals, opts)

    return LPSolution(
        status=result.status,
        objective_value=float(result.objective),
        x={var.name: _clean(value) for var, value in zip(model.variables, x_original)},
        reduced_costs=reduced_costs,
        duals=duals,
        iterations=result.iterations,
        message=result.message,
        log=result.log,
        artifacts=SimplexArtifacts(
            basis=list(result.basis),
            basis_inverse=result.basis_inverse.tolist(),
            reduced_costs=result.reduced_costs.tolist(),
            duals=result.duals.tolist() if opts.return_duals else None,
            alternate_optima=result.alternate_optima,
        ),
    )


def solve_canonical(canonical: CanonicalForm, opts: Optional[SolveOptions] = None) -> EngineResult:
    """Run Phase I (when artificials exist) and Phase II on an already canonical model."""

    opts = opts or SolveOptions()
    log = _SolveLog()
    try:
        canonical.validate()
    except InvalidModelError as exc:
        return _failure("error", f"Invalid input: {exc}", 0, log)
    A, b = canonical.A, canonical.b
    m, n = A.shape
    names = canonical.mapping.column_names
    artificial = set(canonical.artificial_indices)

    log.header("=== REVISED SIMPLEX: CANONICAL FORM ===")
    log.line(
        f"m={m}, n={n}, sense={canonical.sense}, requires_phase_one={canonical.requires_phase_one}, "
        f"pivot_rule={'bland' if opts.blands_rule else 'dantzig'}"
    )

    basis = _initial_basis(canonical, opts.tolerance)
    if basis is None:
        return _failure("error", "Could not construct an initial basis: missing identity/artificial columns.", 0, log)
    try:
        state = _BasisState.from_columns(A, basis)
    except SingularMatrixError as exc:
        return _failure("error", f"Initial basis is not invertible: {exc}", 0, log)
    seed = state.B_inv @ b
    if np.any(seed < -opts.tolerance):
        rows = ", ".join(str(i + 1) for i in np.flatnonzero(seed < -opts.tolerance))
        return _failure("error", f"Initial basis is not primal feasible (negative basic value in rows {rows}).", 0, log)
    log.line("Initial basis: [" + ", ".join(names[j] for j in basis) + "]")

    iterations = 0
    if canonical.requires_phase_one:
        log.header("=== PHASE I (min sum of artificials) ===")
        c_phase1 = np.zeros(n)
        c_phase1[canonical.artificial_indices] = 1.0
        phase1 = _run_simplex(A, b, c_phase1, state, True, opts, opts.max_iterations, set(), log, names)
        iterations += phase1.iterations

        if phase1.status == "iteration_limit":
            return _failure(
                "max_iterations_reached",
                f"Exceeded maximum iterations ({opts.max_iterations}) in Phase I.",
                iterations,
                log,
            )
        if phase1.status == "singular":
            return _failure("error", phase1.message, iterations, log)
        if phase1.status == "unbounded":
            return _failure("error", "Phase I reported an unbounded auxiliary problem.", iterations, log)

        log.line(f"Phase I objective: {phase1.objective:.6g}")
        if phase1.objective > PHASE_ONE_TOL:
            return _failure("infeasible", "Problem infeasible: Phase I objective > 0.", iterations, log)
        try:
            _drive_out_artificials(A, state, artificial, log, names)
        except SingularMatrixError as exc:
            return _failure("error", str(exc), iterations, log)

    log.header("=== PHASE II (optimize original objective) ===")
    minimize = canonical.sense == "min"
    phase2 = _run_simplex(
        A, b, canonical.c, state, minimize, opts, opts.max_iterations - iterations, artificial, log, names
    )
    iterations += phase2.iterations

    if phase2.status == "iteration_limit":
        return _failure(
            "max_iterations_reached",
            f"Exceeded maximum iterations ({opts.max_iterations}) in Phase II.",
            iterations,
            log,
        )
    if phase2.status == "singular":
        return _failure("error", phase2.message, iterations, log)
    if phase2.status == "unbounded":
        return _failure("unbounded", "Objective is unbounded: no valid leaving basic variable.", iterations, log)

    alternate = _has_alternate_optima(phase2.reduced_costs, state.basis, artificial)
    status: SolveStatus = "alternative_optimal" if alternate else "optimal"
    message = "Optimal (alternate optima detected)." if alternate else "Optimal solution found."
    log.line(message)

    return EngineResult(
        status=status,
        message=message,
        iterations=iterations,
        log=log.text(),
        x=phase2.x,
        objective=float(canonical.c @ phase2.x),
        basis=list(state.basis),
        basis_inverse=state.B_inv.copy(),
        reduced_costs=phase2.reduced_costs,
        duals=phase2.duals,
        alternate_optima=alternate,
    )


def _run_simplex(
    A: np.ndarray,
    b: np.ndarray,
    c: np.ndarray,
    state: _BasisState,
    minimize: bool,
    opts: SolveOptions,
    budget: int,
    forbidden: Set[int],
    log: _SolveLog,
    names: List[str],
) -> _PhaseOutcome:
    tol = opts.tolerance
    n = A.shape[1]
    iterations = 0

    while True:
        xB = state.B_inv @ b
        # only rounding noise is clipped; the ratio test keeps x_B >= 0
        xB[np.abs(xB) < tol] = 0.0

        y = c[state.basis] @ state.B_inv
        reduced = c - y @ A
        reduced[np.abs(reduced) < tol] = 0.0
        reduced[state.basis] = 0.0

        entering = _select_entering(reduced, state.basis, forbidden, minimize, opts.blands_rule, tol)
        if entering is None:
            x = np.zeros(n)
            x[state.basis] = xB
            objective = float(c @ x)
            log.line(f"[iter {iterations}] optimal, obj={objective:.6g}, y=[{_preview(y)}]")
            return _PhaseOutcome(
                status="optimal",
                iterations=iterations,
                x=x,
                objective=objective,
                reduced_costs=reduced,
                duals=y,
            )

        if iterations >= budget:
            log.line(f"[iter {iterations}] iteration limit reached with {names[entering]} still improving")
            return _PhaseOutcome(status="iteration_limit", iterations=iterations)

        d = state.B_inv @ A[:, entering]
        d[np.abs(d) < tol] = 0.0
        leaving = _ratio_test(xB, d, opts.blands_rule, tol)
        if leaving is None:
            log.line(f"[iter {iterations}] {names[entering]} can increase without bound")
            return _PhaseOutcome(status="unbounded", iterations=iterations)

        log.line(
            f"[iter {iterations + 1}] enter {names[entering]} (r={reduced[entering]:.6g}), "
            f"leave {names[state.basis[leaving]]} at row {leaving + 1}, step={xB[leaving] / d[leaving]:.6g}"
        )
        try:
            state.replace(A, leaving, entering)
        except SingularMatrixError as exc:
            return _PhaseOutcome(status="singular", iterations=iterations, message=str(exc))
        iterations += 1


def _select_entering(
    reduced: np.ndarray,
    basis: List[int],
    forbidden: Set[int],
    minimize: bool,
    use_bland: bool,
    tol: float,
) -> Optional[int]:
    basic = set(basis)
    candidates = [
        j
        for j in range(len(reduced))
        if j not in basic and j not in forbidden and (reduced[j] < -tol if minimize else reduced[j] > tol)
    ]
    if not candidates:
        return None
    if use_bland:
        return candidates[0]
    if minimize:
        return min(candidates, key=lambda j: reduced[j])
    return max(candidates, key=lambda j: reduced[j])


def _ratio_test(xB: np.ndarray, d: np.ndarray, use_bland: bool, tol: float) -> Optional[int]:
    ratios = [(xB[i] / d[i], i) for i in range(len(d)) if d[i] > tol]
    if not ratios:
        return None
    if use_bland:
        best = min(ratio for ratio, _ in ratios)
        return min(i for ratio, i in ratios if ratio <= best + tol)
    return min(ratios, key=lambda item: item[0])[1]


def _initial_basis(canonical: CanonicalForm, tol: float) -> Optional[List[int]]:
    A = canonical.A
    m, n = A.shape
    artificial = set(canonical.artificial_indices)
    basis: List[Optional[int]] = [None] * m
    used: Set[int] = set()

    # identity columns first (slacks, occasionally a structural column)
    for i in range(m):
        for j in range(n):
            if j in artificial or j in used:
                continue
            if is_unit_column(A, j, i, tol):
                basis[i] = j
                used.add(j)
                break

    for i in range(m):
        if basis[i] is not None:
            continue
        for j in canonical.artificial_indices:
            if j not in used and is_unit_column(A, j, i, tol):
                basis[i] = j
                used.add(j)
                break

    for i in range(m):
        if basis[i] is not None:
            continue
        picked: Optional[int] = None
        best = 0.0
        for j in range(n):
            if j in used:
                continue
            if abs(A[i, j]) > best + 1e-14:
                best = abs(A[i, j])
                picked = j
        if picked is not None:
            basis[i] = picked
            used.add(picked)

    if any(j is None for j in basis):
        return None
    return [int(j) for j in basis]


def _drive_out_artificials(
    A: np.ndarray,
    state: _BasisState,
    artificial: Set[int],
    log: _SolveLog,
    names: List[str],
) -> None:
    """Swap zero-level artificials out of the basis so Phase II cannot move them."""

    for row, column in enumerate(list(state.basis)):
        if column not in artificial:
            continue
        tableau_row = state.B_inv[row] @ A
        basic = set(state.basis)
        for j in range(A.shape[1]):
            if j in basic or j in artificial:
                continue
            if abs(tableau_row[j]) > DRIVE_OUT_TOL:
                log.line(f"Pivot {names[column]} out of row {row + 1} in favour of {names[j]}")
                state.replace(A, row, j)
                break
        else:
            log.line(f"Row {row + 1} is redundant; {names[column]} stays basic at zero")


def _has_alternate_optima(reduced: np.ndarray, basis: List[int], artificial: Set[int]) -> bool:
    """Any nonbasic non-artificial column at zero reduced cost, including the idle half of a split free variable."""

    basic = set(basis)
    return any(reduced[j] == 0.0 for j in range(len(reduced)) if j not in basic and j not in artificial)


def _failure(status: SolveStatus, message: str, iterations: int, log: _SolveLog) -> EngineResult:
    log.line(message)
    return EngineResult(status=status, message=message, iterations=iterations, log=log.text())


def _reconstruct_reduced_costs(model: LPModel, canonical: CanonicalForm, reduced: np.ndarray) -> Dict[str, float]:
    rc: Dict[str, float] = {}
    for idx, var in enumerate(model.variables):
        # the leading column carries c_j - yA_j; a split x- column is its mirror image
        column, sign = canonical.mapping.components[idx][0]
        rc[var.name] = _clean(sign * reduced[column])
    return rc


def _map_duals(canonical: CanonicalForm, duals: np.ndarray, opts: SolveOptions) -> Optional[Dict[str, float]]:
    if not opts.return_duals or duals.size == 0:
        return None
    result: Dict[str, float] = {}
    for idx in range(canonical.model_row_count):
        # row_signs undo the RHS normalisation so prices refer to the caller's row
        result[canonical.row_names[idx]] = _clean(canonical.row_signs[idx] * duals[idx])
    return result


def _clean(value: float) -> float:
    value = float(value)
    if abs(value) < 1e-12:
        return 0.0
    return value


def _preview(values: np.ndarray, k: int = 5) -> str:
    head = ", ".join(f"{v:.3f}" for v in values[:k])
    return head + ", ..." if len(values) > k else head
