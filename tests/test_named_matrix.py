"""
Tests for the named_matrix module.
"""

import pytest
import numpy as np
import pandas as pd
import sys
import os

# Add the parent directory to the path to import the module
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from robustpca.math.named_matrix import (
    IndexHash, NamedMatrix, split_labels,
    default_rownames, default_varnames
)


class TestIndexHash:
    """Tests for the IndexHash class."""
    
    def test_init_with_names(self):
        """Test creating an IndexHash with initial names."""
        idx = IndexHash(['a', 'b', 'c'])
        assert idx.get_names() == ['a', 'b', 'c']
        assert len(idx) == 3
    
    def test_duplicate_names(self):
        """Duplicate names are rejected."""
        with pytest.raises(ValueError):
            IndexHash(['a', 'a'])


class TestNamedMatrix:
    """Tests for the NamedMatrix class."""
    
    def test_init_empty(self):
        """Test creating an empty NamedMatrix."""
        nmat = NamedMatrix()
        assert nmat.rownames() == []
        assert nmat.colnames() == []
        assert nmat.shape == (0, 0)
    
    def test_default_labels(self):
        """Unlabelled arrays get rows 1..n and variables Y1..Yv."""
        nmat = NamedMatrix(np.zeros((3, 2)))
        assert nmat.rownames() == ['1', '2', '3']
        assert nmat.colnames() == ['Y1', 'Y2']
        assert default_varnames(3) == ['Y1', 'Y2', 'Y3']
        assert default_rownames(2) == ['1', '2']
    
    def test_init_with_data(self):
        """Test creating a NamedMatrix with explicit names."""
        data = np.array([[1, 2, 3], [4, 5, 6]])
        nmat = NamedMatrix(data, ['r1', 'r2'], ['c1', 'c2', 'c3'])
        
        assert nmat.rownames() == ['r1', 'r2']
        assert nmat.colnames() == ['c1', 'c2', 'c3']
        assert np.array_equal(nmat.values, data)
        assert nmat.values.dtype == float
    
    def test_init_with_dataframe(self):
        """DataFrame labels are kept."""
        df = pd.DataFrame({
            'c1': [1, 4],
            'c2': [2, 5],
        }, index=['r1', 'r2'])
        
        nmat = NamedMatrix(df)
        
        assert nmat.rownames() == ['r1', 'r2']
        assert nmat.colnames() == ['c1', 'c2']
        assert np.array_equal(nmat.values, df.values)
    
    def test_dataframe_with_range_index(self):
        """A default RangeIndex becomes 1-based row labels."""
        df = pd.DataFrame({'a': [1.0, 2.0, 3.0]})
        nmat = NamedMatrix(df)
        assert nmat.rownames() == ['1', '2', '3']
    
    def test_non_numeric_dataframe(self):
        """Text columns are rejected on construction."""
        df = pd.DataFrame({'a': [1.0, 2.0], 'b': ['x', 'y']})
        with pytest.raises(ValueError, match='numeric'):
            NamedMatrix(df)
    
    def test_numeric_strings_converted(self):
        """Numeric strings in a DataFrame become floats."""
        nmat = NamedMatrix(pd.DataFrame({'a': ['1.5', '2']}))
        assert np.array_equal(nmat.values, [[1.5], [2.0]])
    
    def test_repr(self):
        nmat = NamedMatrix(np.zeros((4, 2)))
        assert repr(nmat) == 'NamedMatrix(rows=4, cols=2)'


class TestHelpers:
    """Tests for module-level helpers."""
    
    def test_split_labels(self):
        """Test separating values from labels."""
        df = pd.DataFrame([[1.0, 2.0]], index=['obs'], columns=['u', 'v'])
        values, rownames, colnames = split_labels(df)
        
        assert np.array_equal(values, [[1.0, 2.0]])
        assert rownames == ['obs']
        assert colnames == ['u', 'v']
