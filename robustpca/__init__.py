"""
Robust Principal Component Analysis.

Subset-based (optionally MCD-trimmed) PCA with automatic choice of the
number of components, loadings, communalities and per-observation
orthogonal and score distances.
"""

__version__ = '0.1.0'

from robustpca.errors import (
    RobustPCAError,
    PCAConfigError,
    UnknownOptionError,
    MalformedOptionsError,
    ExclusiveOptionsError,
    InvalidOptionValueError,
    DegenerateInputError,
)
from robustpca.components.options import PCAOptions, parse_options
from robustpca.math.pca import pca_fs, pca_fs_named_matrix
