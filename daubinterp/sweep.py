"""
Sweep the interpolation schemes over refinement levels and rank them.
"""
import datetime
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

import dask
import numpy as np
import pandas as pd
import xarray as xr

from daubinterp.config import (
    CSV_FLOAT_FORMAT,
    CSV_TEMPLATE,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_REFERENCE_LEVELS,
    DEFAULT_VANISHING_MOMENTS,
    MIN_LEVEL,
    SLOW_CHUNK_SIZE,
)
from daubinterp.dyadic import dyadic_grid, dyadic_grids, grid_abscissas, grid_spacing
from daubinterp.filters import check_vanishing_moments
from daubinterp.interpolators import available_methods, build_interpolant, get_scheme
from daubinterp.utils import sup_error

logger = logging.getLogger(__name__)


def _check_levels(reference_levels: int, min_level: int) -> None:
    if min_level < 1:
        raise ValueError(f"min_level must be at least 1, got {min_level}")
    if reference_levels < min_level + 2:
        raise ValueError(
            f"reference_levels must be at least min_level + 2 = {min_level + 2}, "
            f"got {reference_levels}"
        )


def _resolve_methods(p: int, methods: Optional[Sequence[str]], include_slow: bool) -> List[str]:
    if methods is None:
        return available_methods(p, include_slow=include_slow)
    methods = list(methods)
    if not methods:
        raise ValueError("At least one interpolation method is required")
    for name in methods:
        scheme = get_scheme(name)
        if scheme.order >= p:
            raise ValueError(
                f"{name} needs derivative order {scheme.order}, "
                f"which does not exist for p = {p}"
            )
    return methods


def _log_ranking(p: int, methods: List[str], errors: np.ndarray) -> str:
    ranking = np.argsort(errors, kind="stable")
    for j in ranking:
        logger.info("\t%.18f is error of %s", errors[j], get_scheme(methods[j]).label)
    best = methods[ranking[0]]
    logger.info("\tThe best method for p = %d is the %s", p, get_scheme(best).label)
    return best


def find_best_interpolator(
    p: int,
    reference_levels: int = DEFAULT_REFERENCE_LEVELS,
    min_level: int = MIN_LEVEL,
    methods: Optional[Sequence[str]] = None,
    include_slow: bool = False,
    chunk_size: Optional[int] = None,
    reference_dtype=np.float64,
) -> xr.DataArray:
    """
    Measure the sup-norm error of each interpolation scheme for φ_p.

    A dense reference grid at ``2**-reference_levels`` is built once. For
    every level ``r`` in ``[min_level, reference_levels - 2]`` the scheme is
    built from the level-``r`` samples (and derivative samples) and compared
    against the reference at every dense abscissa.

    Parameters
    ----------
    p : int
        Number of vanishing moments.
    reference_levels : int, optional
        Refinement level of the reference grid, by default 17.
    min_level : int, optional
        Coarsest sampling level tried, by default 2.
    methods : Sequence[str], optional
        Methods to compare, by default every method available for `p`.
    include_slow : bool, optional
        Also compare the quadratic-cost global schemes when `methods` is
        not given, by default False.
    chunk_size : int, optional
        Number of dense abscissae evaluated per block.
    reference_dtype : numpy dtype, optional
        Precision the reference grid is refined in, by default float64.

    Returns
    -------
    xr.DataArray
        Errors with dimensions ``(r, method)``.

    Raises
    ------
    ValueError
        If the levels are inconsistent or a method is unknown or
        unavailable for `p`.
    """
    p = check_vanishing_moments(p)
    _check_levels(reference_levels, min_level)
    methods = _resolve_methods(p, methods, include_slow)
    max_order = max(get_scheme(name).order for name in methods)

    logger.info("Computing reference grid for p = %d at dx = 1/%d", p, 2**reference_levels)
    reference = dyadic_grid(p, 0, reference_levels, dtype=reference_dtype).astype(np.float64)
    abscissas = grid_abscissas(reference.size, p)
    logger.info("Done")

    levels = list(range(min_level, reference_levels - 1))
    errors = np.full((len(levels), len(methods)), np.nan)
    for i, r in enumerate(levels):
        grids = dyadic_grids(p, max_order, r)
        dx = grid_spacing(grids[0].size, p)
        logger.info("dx = 1/%d = %g", 2**r, dx)
        for j, name in enumerate(methods):
            predict = build_interpolant(name, grids, dx)
            chunks = chunk_size or (SLOW_CHUNK_SIZE if get_scheme(name).slow else DEFAULT_CHUNK_SIZE)
            errors[i, j] = sup_error(predict, abscissas, reference, chunk_size=chunks)
        _log_ranking(p, methods, errors[i])

    timestamp = datetime.datetime.now(datetime.timezone.utc).isoformat()
    return xr.DataArray(
        errors,
        dims=("r", "method"),
        coords={"r": levels, "method": methods},
        name="sup_error",
        attrs={
            "p": p,
            "reference_levels": reference_levels,
            "history": (
                f"{timestamp}: Sup-norm errors of {len(methods)} interpolants of the "
                f"p = {p} Daubechies scaling function against a 2^-{reference_levels} "
                "dyadic reference grid."
            ),
        },
    )


def best_methods(errors: xr.DataArray) -> pd.Series:
    """Best method at each refinement level; ties go to the earlier column."""
    return errors.idxmin("method").to_pandas().rename("best_method")


def write_convergence_csv(errors: xr.DataArray, outdir: Union[str, Path] = ".") -> Path:
    """
    Write an error table to ``daubechies_{p}_scaling_convergence.csv``.

    Returns
    -------
    Path
        The path of the written file.
    """
    if "p" not in errors.attrs:
        raise ValueError("errors must carry the vanishing-moment count in attrs['p']")
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    path = outdir / CSV_TEMPLATE.format(p=errors.attrs["p"])

    frame = errors.transpose("r", "method").to_pandas()
    frame.columns.name = None
    frame.to_csv(path, index_label="r", float_format=CSV_FLOAT_FORMAT)
    logger.info("Wrote %s", path)
    return path


def _sweep_one(
    p: int,
    outdir: Path,
    methods: Optional[Sequence[str]],
    **kwargs,
) -> Optional[pd.Series]:
    if methods is not None:
        usable = available_methods(p, include_slow=True)
        dropped = [name for name in methods if name not in usable]
        if dropped:
            logger.warning("Skipping %s for p = %d: derivatives unavailable", dropped, p)
        methods = [name for name in methods if name in usable]
        if not methods:
            logger.warning("No requested method is usable for p = %d, skipping it", p)
            return None
    errors = find_best_interpolator(p, methods=methods, **kwargs)
    write_convergence_csv(errors, outdir)
    return best_methods(errors)


def run_sweep(
    ps: Optional[Iterable[int]] = None,
    outdir: Union[str, Path] = ".",
    reference_levels: int = DEFAULT_REFERENCE_LEVELS,
    min_level: int = MIN_LEVEL,
    methods: Optional[Sequence[str]] = None,
    include_slow: bool = False,
    chunk_size: Optional[int] = None,
    scheduler: str = "threads",
    num_workers: Optional[int] = None,
) -> Dict[int, pd.Series]:
    """
    Run `find_best_interpolator` for several `p` and write one CSV per `p`.

    Each `p` is an independent `dask.delayed` task executed on `scheduler`.

    Returns
    -------
    Dict[int, pd.Series]
        The best method per refinement level, keyed by `p`. A `p` for which
        none of `methods` is usable is skipped and left out.
    """
    ps = [check_vanishing_moments(p) for p in (DEFAULT_VANISHING_MOMENTS if ps is None else ps)]
    if not ps:
        raise ValueError("At least one value of p is required")
    if methods is not None:
        for name in methods:
            get_scheme(name)
    _check_levels(reference_levels, min_level)

    outdir = Path(outdir)
    tasks = [
        dask.delayed(_sweep_one)(
            p,
            outdir,
            methods,
            reference_levels=reference_levels,
            min_level=min_level,
            include_slow=include_slow,
            chunk_size=chunk_size,
        )
        for p in ps
    ]
    results = dask.compute(*tasks, scheduler=scheduler, num_workers=num_workers)
    return {p: best for p, best in zip(ps, results) if best is not None}
