import numpy as np
import pytest

from lp_optimizer.exceptions import SingularMatrixError
from lp_optimizer.lp.linalg import invert_with_partial_pivoting, is_unit_column


def test_inverse_matches_numpy():
    matrix = np.array([[4.0, 7.0, 2.0], [3.0, 6.0, 1.0], [2.0, 5.0, 3.0]])

    inverse = invert_with_partial_pivoting(matrix)

    assert inverse == pytest.approx(np.linalg.inv(matrix))
    assert matrix @ inverse == pytest.approx(np.eye(3))


def test_zero_leading_pivot_needs_row_swap():
    matrix = np.array([[0.0, 1.0], [1.0, 0.0]])

    assert invert_with_partial_pivoting(matrix) == pytest.approx(matrix)


def test_singular_matrix_raises():
    with pytest.raises(SingularMatrixError):
        invert_with_partial_pivoting(np.array([[1.0, 2.0], [2.0, 4.0]]))


def test_non_square_matrix_rejected():
    with pytest.raises(ValueError):
        invert_with_partial_pivoting(np.ones((2, 3)))


def test_empty_basis_inverts_to_empty():
    assert invert_with_partial_pivoting(np.zeros((0, 0))).shape == (0, 0)


def test_unit_column_detection():
    A = np.array([[1.0, 2.0, 0.0], [0.0, 1.0, 1.0]])

    assert is_unit_column(A, 0, 0, 1e-10)
    assert is_unit_column(A, 2, 1, 1e-10)
    assert not is_unit_column(A, 1, 1, 1e-10)
