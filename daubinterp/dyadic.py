"""
Values of Daubechies scaling functions and their derivatives on dyadic grids.

The scaling function φ of a Daubechies filter ``h`` with ``p`` vanishing
moments is supported on ``[0, 2p-1]`` and satisfies the two-scale relation

    φ^(m)(x) = 2**m * sqrt(2) * sum_n h_n φ^(m)(2x - n).

Its values at the integers are an eigenvector of the refinement operator;
every further level of the grid is then filled in exactly by the relation
above, so coarser grids are subsamples of finer ones.
"""
import logging
import math

import numpy as np
import scipy.linalg

from daubinterp.filters import check_vanishing_moments, daubechies_filter

logger = logging.getLogger(__name__)


def support_length(p: int) -> int:
    """Right end of the support of φ_p."""
    return 2 * p - 1


def grid_size(p: int, levels: int) -> int:
    """Number of samples of a level-`levels` grid, endpoints included."""
    return support_length(p) * 2**levels + 1


def grid_spacing(size: int, p: int) -> float:
    """Spacing of a grid of `size` samples spanning ``[0, 2p-1]``."""
    if size < 2:
        raise ValueError(f"A grid needs at least two samples, got {size}")
    return support_length(p) / (size - 1)


def grid_abscissas(size: int, p: int) -> np.ndarray:
    """Abscissae ``i * dx`` of a grid of `size` samples spanning ``[0, 2p-1]``."""
    return np.arange(size) * grid_spacing(size, p)


def _check_order(p: int, order: int) -> int:
    if order < 0 or order >= p:
        raise ValueError(
            f"Derivative order must satisfy 0 <= order < p = {p}, got {order}"
        )
    return int(order)


def integer_grid(p: int, order: int = 0) -> np.ndarray:
    """
    Values of the `order`-th derivative of φ_p at the integers ``0 .. 2p-1``.

    The interior values solve ``M v = 2**-order v`` with
    ``M[k, l] = sqrt(2) h[2k - l]``, normalized so that
    ``sum_n (-n)**order v_n = order!``.

    Parameters
    ----------
    p : int
        Number of vanishing moments.
    order : int, optional
        Derivative order, ``0 <= order < p``. Default is 0.

    Returns
    -------
    np.ndarray
        Array of length ``2p`` whose first and last entries are zero.

    Raises
    ------
    ValueError
        If `p` or `order` is out of range.
    RuntimeError
        If the refinement operator has no eigenvalue near ``2**-order``.
    """
    p = check_vanishing_moments(p)
    order = _check_order(p, order)
    h = daubechies_filter(p)

    interior = np.arange(1, support_length(p))
    taps = 2 * interior[:, None] - interior[None, :]
    inside = (taps >= 0) & (taps < h.size)
    refinement = np.where(inside, np.sqrt(2.0) * h[np.clip(taps, 0, h.size - 1)], 0.0)

    eigenvalue = 2.0**-order
    spectrum = scipy.linalg.eigvals(refinement)
    nearest = spectrum[np.argmin(np.abs(spectrum - eigenvalue))]
    if abs(nearest - eigenvalue) > 1e-3 * eigenvalue:
        raise RuntimeError(
            f"Refinement operator for p = {p} has no eigenvalue near {eigenvalue}; "
            f"closest is {nearest}"
        )

    # Null vector of (M - λI) pinned down by the moment condition.
    system = np.vstack(
        [
            refinement - eigenvalue * np.eye(interior.size),
            (-interior.astype(np.float64)) ** order,
        ]
    )
    rhs = np.zeros(interior.size + 1)
    rhs[-1] = math.factorial(order)
    values, *_ = np.linalg.lstsq(system, rhs, rcond=None)

    grid = np.zeros(support_length(p) + 1)
    grid[1:-1] = values
    return grid


def dyadic_grid(p: int, order: int = 0, levels: int = 0, dtype=np.float64) -> np.ndarray:
    """
    Values of the `order`-th derivative of φ_p at ``k / 2**levels``.

    Parameters
    ----------
    p : int
        Number of vanishing moments.
    order : int, optional
        Derivative order, ``0 <= order < p``. Default is 0.
    levels : int, optional
        Number of dyadic refinements of the integer grid. Default is 0.
    dtype : numpy dtype, optional
        Floating-point type the refinement is carried out in, e.g.
        ``np.longdouble`` for a more precise reference. Default is float64.

    Returns
    -------
    np.ndarray
        Array of length ``(2p-1) * 2**levels + 1``.
    """
    if levels < 0:
        raise ValueError(f"levels must be non-negative, got {levels}")

    dtype = np.dtype(dtype)
    grid = integer_grid(p, order).astype(dtype)
    h = daubechies_filter(p).astype(dtype)
    scale = dtype.type(2) ** order * np.sqrt(dtype.type(2))

    for level in range(1, levels + 1):
        stride = 2 ** (level - 1)
        size = grid_size(p, level)
        refined = np.empty(size, dtype=dtype)
        refined[::2] = grid

        odd = np.arange(1, size, 2)
        acc = np.zeros(odd.size, dtype=dtype)
        for n, coeff in enumerate(h):
            src = odd - n * stride
            valid = (src >= 0) & (src < grid.size)
            acc[valid] += coeff * grid[src[valid]]
        refined[1::2] = scale * acc
        grid = refined

    logger.debug(
        "Built dyadic grid for p = %d, order = %d, levels = %d (%d samples)",
        p,
        order,
        levels,
        grid.size,
    )
    return grid


def dyadic_grids(p: int, max_order: int, levels: int, dtype=np.float64) -> list:
    """φ_p and its first `max_order` derivatives at refinement level `levels`."""
    return [dyadic_grid(p, order, levels, dtype=dtype) for order in range(max_order + 1)]
