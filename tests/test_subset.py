"""
Tests for subset selection.
"""

import pytest
import numpy as np
import sys
import os

# Add the parent directory to the path to import the module
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from robustpca.math.subset import (
    MCDOutlierDetector, mask_from_indices, normalize_bsb,
    outlier_conflev, select_subset
)
from robustpca.errors import DegenerateInputError, ExclusiveOptionsError, InvalidOptionValueError


class RecordingDetector:
    """Stub detector returning fixed outliers and recording its arguments."""
    
    def __init__(self, outliers):
        self.outliers = outliers
        self.calls = []
    
    def __call__(self, data, bdp, conflev):
        self.calls.append((data.shape, bdp, conflev))
        return self.outliers


class TestMasks:
    """Tests for mask construction."""
    
    def test_mask_from_indices(self):
        """Listed positions become True."""
        mask = mask_from_indices([0, 2, 4], 5)
        assert np.array_equal(mask, [True, False, True, False, True])
    
    def test_mask_from_float_indices(self):
        """Integral floats are accepted as indices."""
        mask = mask_from_indices(np.array([1.0, 3.0]), 4)
        assert np.array_equal(mask, [False, True, False, True])
    
    def test_empty_indices(self):
        """An empty index list selects nothing."""
        assert not mask_from_indices([], 3).any()
    
    @pytest.mark.parametrize('indices', [[5], [-1], [0.5], ['a']])
    def test_invalid_indices(self, indices):
        """Indices outside the data or non-integral are rejected."""
        with pytest.raises(InvalidOptionValueError):
            mask_from_indices(indices, 5)
    
    def test_boolean_mask_kept(self):
        """A boolean bsb is used as given."""
        bsb = np.ones(4, dtype=bool)
        bsb[1] = False
        mask = normalize_bsb(bsb, 4)
        assert np.array_equal(mask, bsb)
        # Caller's mask is not shared
        mask[0] = False
        assert bsb[0]
    
    def test_boolean_mask_wrong_length(self):
        """A boolean bsb must have one entry per row."""
        with pytest.raises(InvalidOptionValueError):
            normalize_bsb([True, False], 3)


class TestSelectSubset:
    """Tests for select_subset."""
    
    def test_classical(self, data):
        """Without bdp or bsb every row is used."""
        mask, robust = select_subset(data)
        assert mask.all()
        assert len(mask) == data.shape[0]
        assert robust is False
    
    def test_explicit_indices(self, data):
        """An index list marks only the listed rows."""
        mask, robust = select_subset(data, bsb=list(range(50)))
        assert mask[:50].all()
        assert not mask[50:].any()
        assert robust is True
    
    def test_injected_detector(self, data):
        """The detector's outliers are excluded and conflev is 1 - 0.01/n."""
        detector = RecordingDetector([0, 1])
        mask, robust = select_subset(data, bdp=0.3, detector=detector)
        
        assert robust is True
        assert not mask[0] and not mask[1]
        assert mask[2:].all()
        
        shape, bdp, conflev = detector.calls[0]
        assert shape == data.shape
        assert bdp == 0.3
        assert np.isclose(conflev, 1 - 0.01 / data.shape[0])
    
    def test_no_outliers(self, data):
        """An empty outlier set keeps every row."""
        mask, robust = select_subset(data, bdp=0.5, detector=RecordingDetector([]))
        assert mask.all()
        assert robust is True
    
    def test_exclusive(self, data):
        """bdp and bsb together are rejected."""
        with pytest.raises(ExclusiveOptionsError):
            select_subset(data, bdp=0.4, bsb=[0, 1, 2])


class TestMCDOutlierDetector:
    """Tests for the MCD-based detector."""
    
    def test_conflev(self):
        assert np.isclose(outlier_conflev(100), 0.9999)
    
    def test_flags_injected_outliers(self, data_with_outliers, outlier_rows):
        """All extreme rows are flagged."""
        detector = MCDOutlierDetector(random_state=0)
        outliers = detector(data_with_outliers, 0.4, outlier_conflev(100))
        
        assert set(outlier_rows) <= set(outliers.tolist())
        # The clean bulk is mostly kept
        assert len(outliers) < 20
    
    def test_deterministic(self, data_with_outliers):
        """A fixed random state gives repeatable results."""
        first = MCDOutlierDetector(random_state=3)(data_with_outliers, 0.25, 0.9999)
        second = MCDOutlierDetector(random_state=3)(data_with_outliers, 0.25, 0.9999)
        assert np.array_equal(first, second)
    
    def test_too_few_rows(self):
        """MCD needs more rows than variables."""
        with pytest.raises(DegenerateInputError):
            MCDOutlierDetector()(np.random.randn(4, 4), 0.4, 0.99)
