"""
Tests for the projection step and its diagnostics.
"""

import pytest
import numpy as np
import sys
import os

# Add the parent directory to the path to import the module
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from robustpca.math.projection import (
    compute_communalities, compute_loadings, orthogonal_distance,
    project, score_distance
)
from robustpca.errors import DegenerateInputError


class TestDiagnostics:
    """Tests for the individual projection helpers."""
    
    def test_communalities_layout(self):
        """Single columns first, then cumulative columns from two components on."""
        loadings = np.array([
            [0.5, 0.5, 0.1],
            [0.8, 0.2, 0.3],
        ])
        commun = compute_communalities(loadings)
        
        assert commun.shape == (2, 5)
        assert np.allclose(commun[:, :3], loadings ** 2)
        assert np.allclose(commun[:, 3], loadings[:, 0] ** 2 + loadings[:, 1] ** 2)
        assert np.allclose(commun[:, 4], np.sum(loadings ** 2, axis=1))
    
    def test_communalities_single_component(self):
        """With one component there are no cumulative columns."""
        commun = compute_communalities(np.array([[0.9], [0.4]]))
        assert commun.shape == (2, 1)
        assert np.allclose(commun[:, 0], [0.81, 0.16])
    
    def test_loadings(self):
        """Eigenvector coefficients are rescaled by sqrt(lambda) / sigma."""
        V = np.array([[1.0], [0.0]])
        R = np.array([[4.0, 0.0], [0.0, 1.0]])
        loadings = compute_loadings(V, np.array([4.0]), R)
        assert np.allclose(loadings, [[1.0], [0.0]])
    
    def test_loadings_constant_variable(self):
        """A variable with zero variance has undefined loadings."""
        V = np.array([[1.0], [0.0]])
        R = np.array([[2.0, 0.0], [0.0, 0.0]])
        with pytest.raises(DegenerateInputError):
            compute_loadings(V, np.array([2.0]), R)
    
    def test_orthogonal_distance(self):
        """Residual norms after projecting onto the first axis."""
        Z = np.array([[3.0, 4.0], [1.0, 0.0]])
        V = np.array([[1.0], [0.0]])
        score = Z @ V
        assert np.allclose(orthogonal_distance(Z, score, V), [4.0, 0.0])
    
    def test_score_distance(self):
        """Scores are normalized by their eigenvalues."""
        score = np.array([[2.0, 3.0], [0.0, 0.0]])
        dist = score_distance(score, np.array([4.0, 9.0]))
        assert np.allclose(dist, [np.sqrt(2.0), 0.0])


class TestProject:
    """Tests for project."""
    
    def test_shapes(self):
        """Outputs cover every row and the retained components."""
        rng = np.random.RandomState(5)
        Z = rng.randn(30, 4)
        Z -= Z.mean(axis=0)
        R = np.cov(Z, rowvar=False)
        la, V = np.linalg.eigh(R)
        la, V = la[::-1], V[:, ::-1]
        
        result = project(Z, V, la, R, 2)
        
        assert result['coeff'].shape == (4, 2)
        assert result['loadings'].shape == (4, 2)
        assert result['score'].shape == (30, 2)
        assert result['communalities'].shape == (4, 3)
        assert result['orth_dist'].shape == (30,)
        assert result['score_dist'].shape == (30,)
        assert np.all(result['orth_dist'] >= 0)
        assert np.all(result['score_dist'] >= 0)
    
    def test_zero_retained_eigenvalue(self):
        """Retaining a null component is a degenerate request."""
        Z = np.array([[1.0, 0.0], [-1.0, 0.0]])
        R = np.cov(Z, rowvar=False)
        V = np.eye(2)
        with pytest.raises(DegenerateInputError, match='reduce NumComponents'):
            project(Z, V, np.array([2.0, 0.0]), R, 2)
    
    def test_zero_eigenvalue_after_promotion(self):
        """A null second component picked by the promotion names the promotion."""
        Z = np.array([[1.0, 0.0], [-1.0, 0.0]])
        R = np.cov(Z, rowvar=False)
        V = np.eye(2)
        with pytest.raises(DegenerateInputError, match='automatic promotion'):
            project(Z, V, np.array([2.0, 0.0]), R, 2, promoted=True)
