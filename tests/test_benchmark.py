import pytest

from daubinterp.dyadic import dyadic_grid, dyadic_grids, grid_abscissas, grid_spacing
from daubinterp.interpolators import build_interpolant
from daubinterp.utils import sup_error


@pytest.mark.parametrize("p", [2, 8, 15])
def test_benchmark_dyadic_grid_scaling_p(benchmark, p):
    """
    Tests the scaling of the dyadic refinement with respect to the filter
    length.
    """
    grid = benchmark(dyadic_grid, p, 0, 12)
    assert grid.size == (2 * p - 1) * 2**12 + 1


@pytest.mark.parametrize("levels", [8, 12, 16])
def test_benchmark_dyadic_grid_scaling_levels(benchmark, levels):
    """
    Tests the scaling of the dyadic refinement with respect to the number of
    levels.
    """
    grid = benchmark(dyadic_grid, 5, 0, levels)
    assert grid.size == 9 * 2**levels + 1


@pytest.mark.parametrize("method", ["linear", "cubic_hermite", "quintic_b_spline"])
def test_benchmark_sup_error(benchmark, method):
    """
    Tests the cost of checking an interpolant against a 2^-14 reference.
    """
    p = 6
    reference = dyadic_grid(p, 0, 14)
    x = grid_abscissas(reference.size, p)
    grids = dyadic_grids(p, 1, 8)
    predict = build_interpolant(method, grids, grid_spacing(grids[0].size, p))

    err = benchmark(sup_error, predict, x, reference)
    assert err >= 0
