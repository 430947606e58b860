"""
Daubechies low-pass filter coefficients.
"""
import logging

import numpy as np
import pywt

from daubinterp.config import MAX_VANISHING_MOMENTS, MIN_VANISHING_MOMENTS

logger = logging.getLogger(__name__)


def check_vanishing_moments(p: int) -> int:
    """Validate the vanishing-moment count and return it as an int."""
    if isinstance(p, bool) or not isinstance(p, (int, np.integer)):
        raise TypeError(f"p must be an integer, got {type(p).__name__}")
    if p < MIN_VANISHING_MOMENTS or p > MAX_VANISHING_MOMENTS:
        raise ValueError(
            f"p must be in [{MIN_VANISHING_MOMENTS}, {MAX_VANISHING_MOMENTS}], got {p}"
        )
    return int(p)


def daubechies_filter(p: int) -> np.ndarray:
    """
    Return the extremal-phase Daubechies filter with `p` vanishing moments.

    The coefficients are the reconstruction low-pass filter of PyWavelets'
    ``db{p}`` wavelet, which is the scaling filter ``h`` of the two-scale
    relation ``phi(x) = sqrt(2) sum_n h_n phi(2x - n)``.

    Parameters
    ----------
    p : int
        Number of vanishing moments, in ``[2, 19]``.

    Returns
    -------
    np.ndarray
        The ``2p`` coefficients ``h_0 .. h_{2p-1}``, with
        ``sum(h) == sqrt(2)``.

    Raises
    ------
    ValueError
        If `p` is outside the supported range.
    """
    p = check_vanishing_moments(p)
    coeffs = np.asarray(pywt.Wavelet(f"db{p}").rec_lo, dtype=np.float64)

    logger.debug("Daubechies filter for p = %d: %s", p, coeffs)
    return coeffs
