"""
Candidate interpolation schemes for sampled Daubechies scaling functions.

Every builder takes the sampled grids ``[φ, φ', φ'', ...]`` on a uniform
grid of spacing `dx` starting at zero and returns a vectorized callable
``predict(x)``.
"""
import logging
import math
from collections import OrderedDict
from typing import Callable, List, NamedTuple, Sequence

import numpy as np
from scipy.interpolate import (
    Akima1DInterpolator,
    CubicHermiteSpline,
    PchipInterpolator,
    PPoly,
    make_interp_spline,
)

logger = logging.getLogger(__name__)

Predictor = Callable[[np.ndarray], np.ndarray]

# Number of nodes (or frequencies) summed at once by the global schemes.
_NODE_BLOCK = 4096


def _nodes(phi: np.ndarray, dx: float) -> np.ndarray:
    return np.arange(phi.size) * dx


def linear(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    """Piecewise linear interpolation, zero outside the open support."""
    phi = grids[0]
    end = dx * (phi.size - 1)

    def predict(x):
        x = np.asarray(x, dtype=np.float64)
        out = np.zeros_like(x)
        inside = (x > 0) & (x < end)
        y = x[inside] / dx
        k = np.floor(y)
        kk = k.astype(np.intp)
        t = y - k
        out[inside] = (1 - t) * phi[kk] + t * phi[kk + 1]
        return out

    return predict


def matched_holder(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    """
    Interpolant matched to the Hölder regularity of low-order φ.

    On each cell ``[x_i, x_{i+1}]`` the model is ``a + b t + c sqrt(t)`` with
    ``t = (x - x_i) / dx``. It matches ``y_i``, ``y_{i+1}`` and the derivative
    at the right node. The square root stands in for the true Hölder exponent
    ``2 - log2(1 + sqrt(3))``, which is only attained at dyadic rationals.
    """
    phi = grids[0]
    dphi = grids[1] * dx
    last_cell = phi.size - 2

    def predict(x):
        s = np.asarray(x, dtype=np.float64) / dx
        i = np.clip(np.floor(s), 0, last_cell)
        idx = i.astype(np.intp)
        t = s - i
        d = dphi[idx + 1]
        diff = phi[idx + 1] - phi[idx]
        return phi[idx] + (2 * d - diff) * t + 2 * np.sqrt(t) * (diff - d)

    return predict


def _taylor(order: int):
    def build(grids: Sequence[np.ndarray], dx: float) -> Predictor:
        derivs = grids[: order + 1]
        end = dx * (derivs[0].size - 1)

        def predict(x):
            x = np.asarray(x, dtype=np.float64)
            out = np.zeros_like(x)
            inside = (x > 0) & (x < end)
            y = x[inside] / dx
            k = np.floor(y)
            # Expand about the nearest node; ties go right.
            node = np.where(y - k < k + 1 - y, k, k + 1)
            idx = node.astype(np.intp)
            eps = (y - node) * dx

            total = np.zeros_like(y)
            term = np.ones_like(y)
            for m, d in enumerate(derivs):
                total += term * d[idx]
                term = term * eps / (m + 1)
            out[inside] = total
            return out

        return predict

    build.__name__ = f"taylor_order_{order}"
    build.__doc__ = f"Order-{order} Taylor expansion about the nearest node."
    return build


def quadratic_b_spline(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    """
    Cardinal quadratic B-spline with prescribed end slopes.

    The basis functions are centred on the nodes, so the knots sit at the
    cell midpoints and extend one cell past each end.
    """
    phi, dphi = grids[0], grids[1]
    knots = (np.arange(phi.size + 5) - 2.5) * dx
    return make_interp_spline(
        _nodes(phi, dx),
        phi,
        k=2,
        t=knots,
        bc_type=([(1, dphi[0])], [(1, dphi[-1])]),
    )


def cubic_b_spline(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    """Cubic B-spline clamped to the end slopes."""
    phi, dphi = grids[0], grids[1]
    return make_interp_spline(
        _nodes(phi, dx), phi, k=3, bc_type=([(1, dphi[0])], [(1, dphi[-1])])
    )


def quintic_b_spline(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    """Quintic B-spline with vanishing first and second end derivatives."""
    phi = grids[0]
    flat = [(1, 0.0), (2, 0.0)]
    return make_interp_spline(_nodes(phi, dx), phi, k=5, bc_type=(flat, flat))


def cubic_hermite(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    phi, dphi = grids[0], grids[1]
    return CubicHermiteSpline(_nodes(phi, dx), phi, dphi)


def hermite_ppoly(grids: Sequence[np.ndarray], dx: float) -> PPoly:
    """
    Piecewise Hermite interpolant matching every supplied derivative.

    With derivatives up to order ``m`` at both ends of each cell, the local
    polynomial has degree ``2m + 1``. The coefficients of all cells are
    obtained from one small linear solve on the unit interval.

    Parameters
    ----------
    grids : Sequence[np.ndarray]
        ``[f, f', ..., f^(m)]`` sampled at the nodes.
    dx : float
        Node spacing.

    Returns
    -------
    PPoly
        The piecewise polynomial in the local variable ``x - x_i``.
    """
    m = len(grids) - 1
    degree = 2 * m + 1
    size = grids[0].size

    conditions = np.zeros((degree + 1, degree + 1))
    for j in range(m + 1):
        conditions[j, j] = math.factorial(j)
        for i in range(j, degree + 1):
            conditions[m + 1 + j, i] = math.factorial(i) / math.factorial(i - j)

    scaled = [np.asarray(g, dtype=np.float64) * dx**j for j, g in enumerate(grids)]
    rhs = np.vstack([s[:-1] for s in scaled] + [s[1:] for s in scaled])
    unit = np.linalg.solve(conditions, rhs)
    coeffs = unit / (dx ** np.arange(degree + 1))[:, None]
    return PPoly(coeffs[::-1], np.arange(size) * dx)


def quintic_hermite(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    return hermite_ppoly(grids[:3], dx)


def septic_hermite(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    return hermite_ppoly(grids[:4], dx)


def pchip(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    phi = grids[0]
    return PchipInterpolator(_nodes(phi, dx), phi)


def makima(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    phi = grids[0]
    return Akima1DInterpolator(_nodes(phi, dx), phi, method="makima")


def whittaker_shannon(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    """Cardinal sinc series through the samples."""
    phi = grids[0]
    nodes = np.arange(phi.size)

    def predict(x):
        s = np.asarray(x, dtype=np.float64) / dx
        out = np.zeros_like(s)
        for start in range(0, phi.size, _NODE_BLOCK):
            block = nodes[start : start + _NODE_BLOCK]
            out += np.sinc(s[:, None] - block[None, :]) @ phi[block]
        return out

    return predict


def cardinal_trigonometric(grids: Sequence[np.ndarray], dx: float) -> Predictor:
    """Trigonometric interpolant treating the samples as one period."""
    phi = grids[0]
    n = phi.size
    period = n * dx
    coeffs = np.fft.rfft(phi) / n
    weights = np.full(coeffs.size, 2.0)
    weights[0] = 1.0
    if n % 2 == 0:
        weights[-1] = 1.0
    coeffs = coeffs * weights
    freqs = np.arange(coeffs.size)

    def predict(x):
        s = np.asarray(x, dtype=np.float64) / period
        out = np.zeros(s.shape, dtype=np.complex128)
        for start in range(0, freqs.size, _NODE_BLOCK):
            block = freqs[start : start + _NODE_BLOCK]
            out += np.exp(2j * np.pi * np.outer(s, block)) @ coeffs[block]
        return out.real

    return predict


class Scheme(NamedTuple):
    name: str
    label: str
    order: int
    build: Callable[[Sequence[np.ndarray], float], Predictor]
    slow: bool = False


# Column order of the convergence tables.
REGISTRY = OrderedDict(
    (scheme.name, scheme)
    for scheme in [
        Scheme("matched_holder", "matched_holder", 1, matched_holder),
        Scheme("linear", "linear interpolation", 0, linear),
        Scheme("quadratic_b_spline", "quadratic_b_spline", 1, quadratic_b_spline),
        Scheme("cubic_b_spline", "cubic_b_spline", 1, cubic_b_spline),
        Scheme("quintic_b_spline", "quintic_b_spline", 0, quintic_b_spline),
        Scheme("cubic_hermite", "cubic_hermite_spline", 1, cubic_hermite),
        Scheme("pchip", "pchip", 0, pchip),
        Scheme("makima", "makima", 0, makima),
        Scheme("fo_taylor", "First-order Taylor", 1, _taylor(1)),
        Scheme("quintic_hermite", "quintic_hermite_spline", 2, quintic_hermite),
        Scheme("second_order_taylor", "Second-order Taylor", 2, _taylor(2)),
        Scheme("third_order_taylor", "Third-order Taylor", 3, _taylor(3)),
        Scheme("septic_hermite", "septic_hermite_spline", 3, septic_hermite),
        Scheme("whittaker_shannon", "whittaker_shannon", 0, whittaker_shannon, slow=True),
        Scheme("cardinal_trigonometric", "trig", 0, cardinal_trigonometric, slow=True),
    ]
)


def get_scheme(name: str) -> Scheme:
    try:
        return REGISTRY[name]
    except KeyError:
        raise ValueError(
            f"Unknown interpolation method: '{name}'. "
            f"Valid methods are: {', '.join(REGISTRY)}"
        ) from None


def available_methods(p: int, include_slow: bool = False) -> List[str]:
    """
    Methods usable for φ_p, in table column order.

    A method is usable when every derivative it needs exists, i.e. its
    highest derivative order is below `p`.
    """
    return [
        name
        for name, scheme in REGISTRY.items()
        if scheme.order < p and (include_slow or not scheme.slow)
    ]


def build_interpolant(name: str, grids: Sequence[np.ndarray], dx: float) -> Predictor:
    """
    Build the named interpolant from sampled grids.

    Raises
    ------
    ValueError
        If the method is unknown or fewer derivative grids than it needs
        are supplied.
    """
    scheme = get_scheme(name)
    if len(grids) <= scheme.order:
        raise ValueError(
            f"{name} needs derivatives up to order {scheme.order}, "
            f"got {len(grids) - 1}"
        )
    grids = [np.asarray(g, dtype=np.float64) for g in grids]
    logger.debug("Building %s on %d nodes", name, grids[0].size)
    return scheme.build(grids, dx)
