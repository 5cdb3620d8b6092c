"""
Eigendecomposition of the subset correlation (covariance) matrix.

The eigenstructure is obtained from the SVD of the standardized subset
rows scaled by 1/sqrt(nbsb - 1): the right singular vectors are the
eigenvectors and the squared singular values are the eigenvalues.
"""

import logging
from typing import Dict

import numpy as np

from robustpca.errors import DegenerateInputError

logger = logging.getLogger(__name__)


def orient_eigenvectors(V: np.ndarray) -> np.ndarray:
    """
    Flip eigenvector signs so the largest-magnitude entry is positive.
    
    Args:
        V: Matrix whose columns are eigenvectors
        
    Returns:
        Matrix with consistently oriented columns
    """
    if V.size == 0:
        return V
    rows = np.argmax(np.abs(V), axis=0)
    signs = np.sign(V[rows, np.arange(V.shape[1])])
    signs[signs == 0] = 1.0
    return V * signs


def explained_variance(eigenvalues: np.ndarray) -> np.ndarray:
    """
    Build the explained variance table.
    
    Args:
        eigenvalues: Eigenvalues in descending order
        
    Returns:
        v x 3 array: eigenvalue, percentage explained, cumulative percentage
    """
    total = eigenvalues.sum()
    if not total > 0:
        raise DegenerateInputError("Total variance of the subset is zero")

    return np.column_stack([
        eigenvalues,
        100 * eigenvalues / total,
        100 * np.cumsum(eigenvalues) / total,
    ])


def decompose(Z: np.ndarray, mask: np.ndarray) -> Dict[str, np.ndarray]:
    """
    Compute the subset correlation (covariance) matrix and its eigenstructure.
    
    Args:
        Z: Standardized n x v data matrix
        mask: Boolean subset mask of length n
        
    Returns:
        Dictionary with 'R', 'eigenvalues', 'eigenvectors' and 'explained'
    """
    Zbsb = Z[mask]
    nbsb, n_cols = Zbsb.shape

    R = np.cov(Zbsb, rowvar=False, ddof=1).reshape(n_cols, n_cols)

    if nbsb <= n_cols:
        logger.warning(f"Subset has {nbsb} observations for {n_cols} variables; "
                       f"trailing eigenvalues are zero")

    # full_matrices only matters when nbsb < v, where it keeps V square
    _, sigma, Vt = np.linalg.svd(Zbsb / np.sqrt(nbsb - 1), full_matrices=nbsb < n_cols)
    V = orient_eigenvectors(Vt.T)

    eigenvalues = np.zeros(n_cols)
    eigenvalues[:len(sigma)] = sigma ** 2

    return {
        'R': R,
        'eigenvalues': eigenvalues,
        'eigenvectors': V,
        'explained': explained_variance(eigenvalues),
    }
