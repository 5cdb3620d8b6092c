"""
Centering and scaling with subset statistics.
"""

import logging
from typing import Dict, List, Optional

import numpy as np

from robustpca.errors import DegenerateInputError

logger = logging.getLogger(__name__)


def standardize_data(data: np.ndarray,
                     mask: np.ndarray,
                     standardize: bool = True,
                     varnames: Optional[List[str]] = None) -> Dict[str, np.ndarray]:
    """
    Center (and optionally scale) every row using subset statistics.

    The center is the column mean over the subset rows; the scale is the
    column standard deviation (divisor nbsb - 1) over the same rows, or
    ones when ``standardize`` is False. All rows, including those outside
    the subset, are transformed. ``data`` is not modified.
    
    Args:
        data: Finite n x v data matrix
        mask: Boolean subset mask of length n
        standardize: Whether to divide by the subset standard deviations
        varnames: Variable names used in error messages
        
    Returns:
        Dictionary with 'center', 'scale' and 'Z'
    """
    subset = data[mask]
    nbsb = subset.shape[0]
    if nbsb < 2:
        raise DegenerateInputError(f"The subset must contain at least 2 observations, got {nbsb}")

    center = subset.mean(axis=0)

    if standardize:
        scale = subset.std(axis=0, ddof=1)
        bad = np.flatnonzero(~np.isfinite(scale) | (scale == 0))
        if bad.size:
            names = [varnames[j] if varnames else f"Y{j + 1}" for j in bad]
            raise DegenerateInputError(
                f"Cannot standardize zero-variance variables in the subset: {', '.join(names)}"
            )
    else:
        scale = np.ones(data.shape[1])

    Z = (data - center) / scale
    logger.debug(f"Standardized {data.shape[0]} rows using {nbsb} subset rows "
                 f"(standardize={standardize})")

    return {
        'center': center,
        'scale': scale,
        'Z': Z,
    }
