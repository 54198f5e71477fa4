import numpy as np

from ..exceptions import SingularMatrixError

PIVOT_TOL = 1e-14
CLEAN_TOL = 1e-12


def invert_with_partial_pivoting(matrix: np.ndarray, pivot_tol: float = PIVOT_TOL) -> np.ndarray:
    """
    Dense Gauss-Jordan inverse of a square matrix on the augmented block [M | I].
    Row swaps pick the largest remaining magnitude in each column.
    """

    M = np.asarray(matrix, dtype=float)
    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {M.shape}.")
    n = M.shape[0]
    aug = np.hstack([M.copy(), np.eye(n)])

    for col in range(n):
        pivot = col + int(np.argmax(np.abs(aug[col:, col])))
        if abs(aug[pivot, col]) < pivot_tol:
            raise SingularMatrixError(f"Singular basis matrix (no pivot in column {col}).")
        if pivot != col:
            aug[[col, pivot]] = aug[[pivot, col]]

        aug[col] /= aug[col, col]
        factors = aug[:, col].copy()
        factors[col] = 0.0
        factors[np.abs(factors) < 1e-16] = 0.0
        aug -= np.outer(factors, aug[col])

    inverse = aug[:, n:]
    inverse[np.abs(inverse) < CLEAN_TOL] = 0.0
    return inverse


def is_unit_column(A: np.ndarray, column: int, row: int, tol: float) -> bool:
    col = A[:, column]
    if abs(col[row] - 1.0) >= tol:
        return False
    others = np.delete(col, row)
    return bool(np.all(np.abs(others) < tol))
