"""
Test: dense linear solver.

The solver must be exact to double precision, leave its inputs untouched,
and refuse singular or ill-conditioned systems instead of returning a
plausible-looking answer.
"""
import numpy as np
import pytest

from lumpsim import SingularSystemError, SolverConfig, solve


def test_solves_small_system():
    A = np.array([[4.0, 1.0], [2.0, 3.0]])
    z = np.array([1.0, 2.0])
    x = solve(A, z)
    np.testing.assert_allclose(A @ x, z, rtol=1e-14, atol=1e-14)


def test_inputs_are_not_mutated():
    A = np.array([[2.0, -1.0], [-1.0, 2.0]])
    z = np.array([1.0, 0.0])
    A_copy, z_copy = A.copy(), z.copy()
    solve(A, z)
    np.testing.assert_array_equal(A, A_copy)
    np.testing.assert_array_equal(z, z_copy)


def test_singular_matrix_raises():
    A = np.array([[1.0, 0.0], [0.0, 0.0]])
    with pytest.raises(SingularSystemError) as excinfo:
        solve(A, np.array([1.0, 0.0]), step=4)
    assert excinfo.value.step == 4
    assert isinstance(excinfo.value, np.linalg.LinAlgError)


def test_ill_conditioned_matrix_raises():
    A = np.array([[1.0, 1.0], [1.0, 1.0 + 1e-12]])
    with pytest.raises(SingularSystemError) as excinfo:
        solve(A, np.array([1.0, 1.0]), SolverConfig(max_condition=1e10))
    assert excinfo.value.condition > 1e10


def test_condition_check_can_be_disabled():
    A = np.array([[1.0, 1.0], [1.0, 1.0 + 1e-12]])
    x = solve(A, np.array([2.0, 2.0]), SolverConfig(max_condition=1e10, check_condition=False))
    assert np.all(np.isfinite(x))


def test_empty_system():
    assert solve(np.zeros((0, 0)), np.zeros(0)).shape == (0,)


def test_shape_mismatch_raises():
    with pytest.raises(ValueError):
        solve(np.eye(2), np.zeros(3))
