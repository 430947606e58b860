"""
Interpolation benchmarks for Daubechies scaling functions.
"""
import logging

from daubinterp.dyadic import dyadic_grid, integer_grid
from daubinterp.filters import daubechies_filter
from daubinterp.interpolators import REGISTRY, available_methods, build_interpolant
from daubinterp.refinement import choose_refinement
from daubinterp.sweep import (
    best_methods,
    find_best_interpolator,
    run_sweep,
    write_convergence_csv,
)
from daubinterp.utils import float_distance, sup_error

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "REGISTRY",
    "available_methods",
    "best_methods",
    "build_interpolant",
    "choose_refinement",
    "daubechies_filter",
    "dyadic_grid",
    "find_best_interpolator",
    "float_distance",
    "integer_grid",
    "run_sweep",
    "sup_error",
    "write_convergence_csv",
]
