from typing import Callable, Optional

import dask.array as da
import numpy as np

from daubinterp.config import DEFAULT_CHUNK_SIZE

_ORDERED_UINTS = {
    np.dtype(np.float32): np.uint32,
    np.dtype(np.float64): np.uint64,
}


def _lexicographic(values: np.ndarray, uint_type) -> np.ndarray:
    # Map the sign-magnitude float bit patterns onto a monotone unsigned scale
    # on which +0.0 and -0.0 share one key.
    bits = values.view(uint_type)
    sign = uint_type(np.iinfo(uint_type).max // 2 + 1)
    return np.where(bits & sign, ~bits + uint_type(1), bits | sign)


def float_distance(a, b) -> np.ndarray:
    """
    Count the representable floating-point numbers between `a` and `b`.

    Both inputs are cast to their common floating type, which must be
    float32 or float64. Positive and negative zero are zero distance apart.

    Parameters
    ----------
    a : array-like
        First set of values.
    b : array-like
        Second set of values, broadcastable against `a`.

    Returns
    -------
    np.ndarray
        Non-negative distances in units of last place, as float64.

    Raises
    ------
    TypeError
        If the common dtype is not float32 or float64.
    """
    a = np.asarray(a)
    b = np.asarray(b)
    dtype = np.result_type(a, b)
    if dtype not in _ORDERED_UINTS:
        raise TypeError(f"float_distance supports float32 and float64, got {dtype}")
    uint_type = _ORDERED_UINTS[dtype]

    a, b = np.broadcast_arrays(a.astype(dtype), b.astype(dtype))
    ua = _lexicographic(a, uint_type)
    ub = _lexicographic(b, uint_type)
    # Subtract in integers; the keys near 2**63 are not exact in float64.
    return (np.maximum(ua, ub) - np.minimum(ua, ub)).astype(np.float64)


def sup_error(
    predict: Callable[[np.ndarray], np.ndarray],
    abscissas: np.ndarray,
    expected: np.ndarray,
    chunk_size: Optional[int] = None,
) -> float:
    """
    Sup-norm distance between an interpolant and reference values.

    The interpolant is evaluated lazily, one dask block of abscissae at a
    time, so the memory footprint is bounded by `chunk_size` regardless of
    the reference grid size.

    Parameters
    ----------
    predict : callable
        Vectorized interpolant, ``predict(x) -> values``.
    abscissas : np.ndarray
        Points at which to compare.
    expected : np.ndarray
        Reference values at `abscissas`.
    chunk_size : int, optional
        Number of abscissae per block, by default ``DEFAULT_CHUNK_SIZE``.

    Returns
    -------
    float
        ``max |predict(abscissas) - expected|``.
    """
    abscissas = np.asarray(abscissas, dtype=np.float64)
    expected = np.asarray(expected, dtype=np.float64)
    if abscissas.shape != expected.shape:
        raise ValueError(
            f"abscissas and expected must have the same shape, "
            f"got {abscissas.shape} and {expected.shape}"
        )
    if abscissas.size == 0:
        raise ValueError("Cannot compute a sup-norm over an empty set of points")

    chunks = chunk_size or DEFAULT_CHUNK_SIZE
    x = da.from_array(abscissas, chunks=chunks)
    y = da.from_array(expected, chunks=chunks)
    computed = x.map_blocks(predict, dtype=np.float64, meta=np.array((), dtype=np.float64))
    return float(da.max(da.fabs(computed - y)).compute())
