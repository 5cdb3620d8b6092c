"""
Subset selection for robust PCA.

Decides which observations are used to estimate the center, scale and
eigenstructure. The subset is either all rows, an explicit list or mask,
or the non-outlying rows according to a robust location/scatter
estimator configured with a breakdown point.
"""

import logging
from typing import Any, Callable, Optional, Sequence, Tuple

import numpy as np
from scipy.stats import chi2
from sklearn.covariance import MinCovDet

from robustpca.errors import DegenerateInputError, ExclusiveOptionsError, InvalidOptionValueError

logger = logging.getLogger(__name__)

# (data, bdp, conflev) -> indices of outlying rows
OutlierDetector = Callable[[np.ndarray, float, float], Sequence[int]]


def outlier_conflev(n_rows: int) -> float:
    """Confidence level used to flag outliers: 1 - 0.01/n."""
    return 1 - 0.01 / n_rows


class MCDOutlierDetector:
    """
    Outlier detection with the Minimum Covariance Determinant estimator.

    Rows whose reweighted squared Mahalanobis distance exceeds the
    chi-squared quantile at ``conflev`` (v degrees of freedom) are flagged.
    """

    def __init__(self, random_state: Optional[int] = 0):
        self.random_state = random_state

    def __call__(self, data: np.ndarray, bdp: float, conflev: float) -> np.ndarray:
        n_rows, n_cols = data.shape
        if n_rows <= n_cols:
            raise DegenerateInputError(
                f"MCD needs more observations than variables, got n={n_rows}, v={n_cols}"
            )

        mcd = MinCovDet(support_fraction=1 - bdp, random_state=self.random_state)
        mcd.fit(data)

        cutoff = chi2.ppf(conflev, df=n_cols)
        outliers = np.flatnonzero(mcd.dist_ > cutoff)
        logger.info(f"MCD with bdp={bdp} flagged {len(outliers)} of {n_rows} observations "
                    f"(cutoff {cutoff:.3f})")
        return outliers


def mask_from_indices(indices: Sequence[Any], n_rows: int) -> np.ndarray:
    """
    Build a boolean mask from 0-based row indices.
    
    Args:
        indices: Row indices to mark as True
        n_rows: Length of the mask
        
    Returns:
        Boolean mask
    """
    idx = np.asarray(indices)
    if idx.size == 0:
        return np.zeros(n_rows, dtype=bool)
    if not np.issubdtype(idx.dtype, np.integer):
        if not np.issubdtype(idx.dtype, np.floating) or np.any(idx != np.round(idx)):
            raise InvalidOptionValueError(f"bsb indices must be integers, got {idx.dtype}")
        idx = idx.astype(int)
    if np.any(idx < 0) or np.any(idx >= n_rows):
        raise InvalidOptionValueError(f"bsb indices must lie in [0, {n_rows}), got {idx.min()}..{idx.max()}")

    mask = np.zeros(n_rows, dtype=bool)
    mask[idx.ravel()] = True
    return mask


def normalize_bsb(bsb: Any, n_rows: int) -> np.ndarray:
    """
    Convert a user-supplied subset into a boolean mask of length n.

    A boolean sequence is taken as a mask; anything else as row indices.
    
    Args:
        bsb: Boolean mask or sequence of 0-based row indices
        n_rows: Number of rows in the data
        
    Returns:
        Boolean mask
    """
    bsb = np.asarray(bsb)
    if bsb.dtype == bool:
        if bsb.shape != (n_rows,):
            raise InvalidOptionValueError(
                f"Boolean bsb must have length {n_rows}, got shape {bsb.shape}"
            )
        return bsb.copy()
    return mask_from_indices(bsb, n_rows)


def select_subset(data: np.ndarray,
                  bdp: Optional[float] = None,
                  bsb: Any = None,
                  detector: Optional[OutlierDetector] = None) -> Tuple[np.ndarray, bool]:
    """
    Determine the observations that take part in the fit.
    
    Args:
        data: Finite n x v data matrix
        bdp: Breakdown point for the robust estimator
        bsb: Explicit subset (boolean mask or row indices)
        detector: Outlier detector used when ``bdp`` is given
        
    Returns:
        Tuple of (subset mask, robust flag)
    """
    n_rows = data.shape[0]

    if bdp is not None and bsb is not None:
        raise ExclusiveOptionsError("Just one between bsb and bdp has to be supplied")

    if bdp is not None:
        if detector is None:
            detector = MCDOutlierDetector()
        outliers = np.asarray(detector(data, bdp, outlier_conflev(n_rows)), dtype=int)
        mask = np.ones(n_rows, dtype=bool)
        mask[outliers] = False
        return mask, True

    if bsb is not None:
        return normalize_bsb(bsb, n_rows), True

    return np.ones(n_rows, dtype=bool), False
