"""
Choose the sampling level at which a Hermite interpolant of φ_p reaches
working precision.
"""
import logging
from typing import Optional

import dask.array as da
import numpy as np
import pandas as pd

from daubinterp.config import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_REFINEMENT_LEVELS,
    MIN_LEVEL,
    SMALL_VALUE_EPS,
)
from daubinterp.dyadic import dyadic_grid, grid_abscissas, grid_spacing
from daubinterp.filters import check_vanishing_moments
from daubinterp.interpolators import build_interpolant, get_scheme
from daubinterp.utils import float_distance

logger = logging.getLogger(__name__)

COLUMNS = [
    "dx",
    "method",
    "float_distance",
    "sup_error",
    "worst_abscissa",
    "worst_value",
    "worst_computed",
]


def refinement_method(p: int) -> Optional[str]:
    """Hermite interpolant used for φ_p, or None when p is too small."""
    if p < 3:
        return None
    return "cubic_hermite" if p < 6 else "quintic_hermite"


def choose_refinement(
    p: int,
    max_level: int = DEFAULT_REFINEMENT_LEVELS,
    dtype=np.float32,
    reference_dtype=np.float64,
    min_level: int = MIN_LEVEL,
    chunk_size: Optional[int] = None,
) -> pd.DataFrame:
    """
    Tabulate the accuracy of the Hermite interpolant of φ_p per level.

    The samples at each level are rounded to `dtype` before the interpolant
    is built. The interpolant itself is evaluated in float64, as scipy
    does, and only its output is rounded to `dtype`, so the table measures
    sampling error rather than arithmetic error in `dtype`. The rounded
    output is compared with the reference in units of last place of
    `dtype`. Reference values smaller than ``100 * eps(dtype)`` in magnitude
    are skipped, as their relative accuracy is meaningless.

    Parameters
    ----------
    p : int
        Number of vanishing moments. Values below 3 have no interpolant and
        give an empty table.
    max_level : int, optional
        Refinement level of the reference grid, by default 21.
    dtype : numpy dtype, optional
        Working precision, float32 or float64. Default is float32.
    reference_dtype : numpy dtype, optional
        Precision of the reference grid; at least as precise as `dtype`.
    min_level : int, optional
        Coarsest level tried, by default 2.
    chunk_size : int, optional
        Number of reference abscissae evaluated per block.

    Returns
    -------
    pd.DataFrame
        One row per level ``r``.

    Raises
    ------
    ValueError
        If the precisions or levels are inconsistent.
    """
    p = check_vanishing_moments(p)
    dtype = np.dtype(dtype)
    reference_dtype = np.dtype(reference_dtype)
    if dtype not in (np.dtype(np.float32), np.dtype(np.float64)):
        raise ValueError(f"dtype must be float32 or float64, got {dtype}")
    if np.finfo(reference_dtype).precision < np.finfo(dtype).precision:
        raise ValueError(
            f"reference_dtype {reference_dtype} is less precise than dtype {dtype}"
        )
    if min_level < 1 or max_level < min_level + 2:
        raise ValueError(
            f"Need 1 <= min_level and min_level + 2 <= max_level, "
            f"got min_level = {min_level}, max_level = {max_level}"
        )

    empty = pd.DataFrame(columns=COLUMNS, index=pd.Index([], name="r"))
    method = refinement_method(p)
    if method is None:
        logger.warning("No refinement interpolant is defined for p = %d; need p >= 3", p)
        return empty

    logger.info(
        "Choosing refinement for %s precision Daubechies scaling function "
        "with %d vanishing moments.",
        dtype.name,
        p,
    )
    dense = dyadic_grid(p, 0, max_level, dtype=reference_dtype)
    abscissas = grid_abscissas(dense.size, p)
    expected = dense.astype(dtype)
    keep = np.abs(expected) >= SMALL_VALUE_EPS * np.finfo(dtype).eps
    abscissas = abscissas[keep]
    expected = expected[keep]

    chunks = chunk_size or DEFAULT_CHUNK_SIZE
    x = da.from_array(abscissas, chunks=chunks)
    y = da.from_array(expected, chunks=chunks)
    order = get_scheme(method).order

    rows = []
    for r in range(min_level, max_level - 1):
        grids = [
            dyadic_grid(p, m, r, dtype=reference_dtype).astype(dtype) for m in range(order + 1)
        ]
        dx = grid_spacing(grids[0].size, p)
        logger.info("\tdx = 1/%d = %g", 2**r, dx)
        predict = build_interpolant(method, grids, dx)

        computed = x.map_blocks(
            lambda block: predict(block).astype(dtype),
            dtype=dtype,
            meta=np.array((), dtype=dtype),
        )
        distance = da.map_blocks(
            float_distance, computed, y, dtype=np.float64, meta=np.array((), dtype=np.float64)
        )
        worst, flt_distance, sup = da.compute(
            distance.argmax(), distance.max(), da.fabs(computed - y).max()
        )
        worst = int(worst)
        worst_computed = predict(abscissas[worst : worst + 1]).astype(dtype)[0]

        logger.info(
            "\t\tFloat distance at r = %d is %g, sup distance = %g", r, flt_distance, sup
        )
        logger.info(
            "\t\tWorst abscissa = %g, worst value = %g, computed = %g",
            abscissas[worst],
            expected[worst],
            worst_computed,
        )
        rows.append(
            {
                "r": r,
                "dx": dx,
                "method": method,
                "float_distance": float(flt_distance),
                "sup_error": float(sup),
                "worst_abscissa": float(abscissas[worst]),
                "worst_value": float(expected[worst]),
                "worst_computed": float(worst_computed),
            }
        )

    return pd.DataFrame(rows, columns=["r"] + COLUMNS).set_index("r")
