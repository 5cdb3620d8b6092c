"""
Projection of all observations onto the retained principal components.

Every row of the standardized matrix is projected, whether or not it
belonged to the fitting subset, so that excluded observations can be
judged against the subspace estimated without them.
"""

import logging
from typing import Dict

import numpy as np

from robustpca.errors import DegenerateInputError

logger = logging.getLogger(__name__)


def compute_loadings(V: np.ndarray, eigenvalues: np.ndarray, R: np.ndarray) -> np.ndarray:
    """
    Correlations between the original variables and the retained components.

    loadings = V_k * sqrt(La) / sigma_j, where sigma_j = sqrt(R[j, j]).
    
    Args:
        V: v x k retained eigenvectors
        eigenvalues: k retained eigenvalues
        R: v x v subset correlation (covariance) matrix
        
    Returns:
        v x k loadings matrix
    """
    sigmas = np.sqrt(np.diag(R))
    constant = np.flatnonzero(sigmas == 0)
    if constant.size:
        raise DegenerateInputError(
            f"Loadings undefined for constant variables at positions {constant.tolist()}"
        )
    return V * np.sqrt(eigenvalues) / sigmas[:, np.newaxis]


def compute_communalities(loadings: np.ndarray) -> np.ndarray:
    """
    Communalities of each variable, single and cumulative.

    The first k columns hold the variance of each variable extracted by
    each component. Column k + i (i = 1..k-1) holds the variance extracted
    jointly by the first i + 1 components.
    
    Args:
        loadings: v x k loadings matrix
        
    Returns:
        v x (2k - 1) communalities matrix
    """
    commun = loadings ** 2
    cumulative = np.cumsum(commun, axis=1)
    return np.hstack([commun, cumulative[:, 1:]])


def orthogonal_distance(Z: np.ndarray, score: np.ndarray, V: np.ndarray) -> np.ndarray:
    """
    Euclidean norm of each row's residual from its reconstruction.
    
    Args:
        Z: n x v standardized data
        score: n x k scores
        V: v x k retained eigenvectors
        
    Returns:
        Length-n vector of orthogonal distances
    """
    residuals = Z - score @ V.T
    return np.sqrt(np.sum(residuals ** 2, axis=1))


def score_distance(score: np.ndarray, eigenvalues: np.ndarray) -> np.ndarray:
    """
    Mahalanobis-style distance of each score vector within the subspace.
    
    Args:
        score: n x k scores
        eigenvalues: k retained eigenvalues
        
    Returns:
        Length-n vector of score distances
    """
    return np.sqrt(np.sum(score ** 2 / eigenvalues, axis=1))


def project(Z: np.ndarray,
            eigenvectors: np.ndarray,
            eigenvalues: np.ndarray,
            R: np.ndarray,
            num_components: int,
            promoted: bool = False) -> Dict[str, np.ndarray]:
    """
    Project the data and derive the per-variable and per-observation outputs.
    
    Args:
        Z: n x v standardized data (all rows)
        eigenvectors: v x v eigenvectors, columns ordered by eigenvalue
        eigenvalues: v eigenvalues in descending order
        R: v x v subset correlation (covariance) matrix
        num_components: Number of components to retain
        promoted: Whether the count comes from the automatic 1 -> 2 promotion

    Returns:
        Dictionary with 'coeff', 'loadings', 'score', 'communalities',
        'orth_dist' and 'score_dist'
    """
    k = num_components
    V = eigenvectors[:, :k]
    la = eigenvalues[:k]

    tol = np.finfo(float).eps * max(Z.shape) * max(eigenvalues[0], 0.0)
    null = np.flatnonzero(la <= tol)
    if null.size and promoted:
        raise DegenerateInputError(
            "The first component explains all the variance in the subset, so the automatic "
            "promotion to 2 components retained a component with zero variance; "
            "set NumComponents=1 to keep a single component"
        )
    if null.size:
        raise DegenerateInputError(
            f"Retained components {[int(i) + 1 for i in null]} have zero variance in the subset; "
            f"reduce NumComponents or enlarge the subset"
        )

    loadings = compute_loadings(V, la, R)
    score = Z @ V

    logger.debug(f"Projected {Z.shape[0]} observations onto {k} components")

    return {
        'coeff': V,
        'loadings': loadings,
        'score': score,
        'communalities': compute_communalities(loadings),
        'orth_dist': orthogonal_distance(Z, score, V),
        'score_dist': score_distance(score, la),
    }
