"""
Choice of the number of principal components to retain.

The automatic rule keeps the smallest number of components whose
cumulative explained variance exceeds 100 * 0.95^v percent. When the
first component alone passes the threshold the count is promoted to two,
so that a two-dimensional representation (biplot) remains possible.
Search and promotion are separate functions.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from robustpca.errors import InvalidOptionValueError

logger = logging.getLogger(__name__)

PROMOTION_NOTE = ("The first PC already explains more than 0.95^v variability; "
                  "the first 2 PCs are still extracted")


def variance_threshold(n_cols: int) -> float:
    """Cumulative percentage that the retained components must exceed."""
    return 100 * 0.95 ** n_cols


def threshold_components(cumulative: np.ndarray) -> int:
    """
    Smallest number of components whose cumulative percentage exceeds the threshold.
    
    Args:
        cumulative: Cumulative explained variance percentages (length v)
        
    Returns:
        Number of components, between 1 and v
    """
    n_cols = len(cumulative)
    above = np.flatnonzero(cumulative > variance_threshold(n_cols))
    if above.size == 0:
        # Only reachable through rounding, since cumulative[-1] is 100
        return n_cols
    return int(above[0]) + 1


def promote_single_component(k: int, n_cols: int) -> Tuple[int, Optional[str]]:
    """
    Promote a one-component solution to two components.

    Args:
        k: Number of components from the threshold search
        n_cols: Number of variables

    Returns:
        Tuple of (number of components, diagnostic note or None)
    """
    if k == 1 and n_cols > 1:
        return 2, PROMOTION_NOTE
    return k, None


def check_num_components(num_components: Optional[int], n_cols: int) -> None:
    """Reject an explicit component count outside [1, v]."""
    if num_components is not None and not 1 <= num_components <= n_cols:
        raise InvalidOptionValueError(
            f"NumComponents must satisfy 1 <= k <= {n_cols}, got {num_components}"
        )


def select_num_components(explained: np.ndarray,
                          num_components: Optional[int] = None) -> Tuple[int, List[str]]:
    """
    Resolve the number of retained components.
    
    Args:
        explained: v x 3 explained variance table
        num_components: Explicit number of components, or None
        
    Returns:
        Tuple of (number of components, list of diagnostic notes)
    """
    n_cols = explained.shape[0]

    if num_components is not None:
        check_num_components(num_components, n_cols)
        return int(num_components), []

    k = threshold_components(explained[:, 2])
    k, note = promote_single_component(k, n_cols)
    notes = []
    if note:
        logger.info(note)
        notes.append(note)

    logger.debug(f"Retaining {k} of {n_cols} components")
    return k, notes
