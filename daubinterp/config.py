import numpy as np

# Valid vanishing-moment range. p = 1 (Haar) has no continuous scaling function.
MIN_VANISHING_MOMENTS = 2
MAX_VANISHING_MOMENTS = 19

DEFAULT_VANISHING_MOMENTS = list(range(2, 16))

# Refinement levels: the dense reference is sampled at 2**-REFERENCE_LEVELS.
DEFAULT_REFERENCE_LEVELS = 17
DEFAULT_REFINEMENT_LEVELS = 21
MIN_LEVEL = 2

CSV_TEMPLATE = "daubechies_{p}_scaling_convergence.csv"
# digits10 + 3 fixed-point digits
CSV_FLOAT_FORMAT = f"%.{np.finfo(np.float64).precision + 3}f"

# Number of dense abscissae evaluated per dask block.
DEFAULT_CHUNK_SIZE = 2**18
# The sinc and trigonometric sums hold a (chunk, nodes) matrix per block.
SLOW_CHUNK_SIZE = 2**10

# Reference values below SMALL_VALUE_EPS * eps are skipped when
# measuring relative (float distance) accuracy.
SMALL_VALUE_EPS = 100
