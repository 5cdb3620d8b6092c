"""
Robust Principal Component Analysis.

Runs the full pipeline on a numeric data matrix: subset selection,
standardization with subset statistics, SVD-based eigendecomposition,
choice of the number of components and projection of every observation
with fit diagnostics (orthogonal and score distances).
"""

import logging
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from robustpca.components.options import PCAOptions, parse_options
from robustpca.errors import DegenerateInputError
from robustpca.math.named_matrix import NamedMatrix, split_labels
from robustpca.math.projection import project
from robustpca.math.selection import PROMOTION_NOTE, check_num_components, select_num_components
from robustpca.math.spectral import decompose
from robustpca.math.standardize import standardize_data
from robustpca.math.subset import MCDOutlierDetector, OutlierDetector, normalize_bsb, select_subset
from robustpca.report import format_report, result_tables

logger = logging.getLogger(__name__)

OptionsLike = Optional[Union[PCAOptions, Mapping[str, Any], Sequence[Any]]]


def as_data_array(data: Union[np.ndarray, pd.DataFrame, NamedMatrix, Sequence[Sequence[float]]]) -> np.ndarray:
    """
    Convert supported inputs to a 2D float array, discarding labels.
    
    Args:
        data: Array, nested lists, DataFrame or NamedMatrix
        
    Returns:
        n x v float array
    """
    if isinstance(data, NamedMatrix):
        values = data.values
    elif isinstance(data, pd.DataFrame):
        values = data.to_numpy(dtype=float)
    else:
        values = np.asarray(data, dtype=float)

    if values.ndim != 2:
        raise ValueError(f"Expected an n x v data matrix, got {values.ndim} dimensions")
    return values


def pca_fs(data: Union[np.ndarray, pd.DataFrame, NamedMatrix, Sequence[Sequence[float]]],
           options: OptionsLike = None,
           detector: Optional[OutlierDetector] = None,
           **kwargs) -> Dict[str, Any]:
    """
    Perform a (robust) Principal Component Analysis.

    Rows with missing or infinite values are dropped before anything else.
    ``bsb`` always refers to the original row numbering.
    
    Args:
        data: n x v data matrix
        options: PCAOptions, dictionary or flat name/value list
        detector: Outlier detector used with ``bdp``; defaults to MCD
        **kwargs: Further options (standardize, NumComponents, bdp, bsb,
            random_state, dispresults)
        
    Returns:
        Dictionary with keys 'R', 'explained', 'eigenvalues', 'coeff',
        'loadings', 'score', 'communalities', 'orth_dist', 'score_dist',
        'center', 'scale', 'bsb', 'robust', 'standardize',
        'num_components', 'rows_kept' and 'notes'
    """
    opts = parse_options(options, **kwargs)

    values = as_data_array(data)
    n_rows, n_cols = values.shape
    check_num_components(opts.num_components, n_cols)
    bsb = normalize_bsb(opts.bsb, n_rows) if opts.bsb is not None else None

    finite = np.all(np.isfinite(values), axis=1)
    rows_kept = np.flatnonzero(finite)
    if not finite.all():
        logger.warning(f"Excluding {n_rows - len(rows_kept)} observations with missing or infinite values")
        values = values[finite]
        if bsb is not None:
            bsb = bsb[finite]
    if values.shape[0] < 2:
        raise DegenerateInputError(f"At least 2 finite observations are needed, got {values.shape[0]}")

    if detector is None:
        detector = MCDOutlierDetector(random_state=opts.random_state)
    mask, robust = select_subset(values, bdp=opts.bdp, bsb=bsb, detector=detector)
    logger.info(f"Fitting on {int(mask.sum())} of {len(mask)} observations (robust={robust})")

    standardized = standardize_data(values, mask, standardize=opts.standardize)
    Z = standardized['Z']

    spectral = decompose(Z, mask)
    num_components, notes = select_num_components(spectral['explained'], opts.num_components)

    projected = project(Z,
                        spectral['eigenvectors'],
                        spectral['eigenvalues'],
                        spectral['R'],
                        num_components,
                        promoted=PROMOTION_NOTE in notes)

    results = {
        'R': spectral['R'],
        'explained': spectral['explained'],
        'eigenvalues': spectral['eigenvalues'],
        'coeff': projected['coeff'],
        'loadings': projected['loadings'],
        'score': projected['score'],
        'communalities': projected['communalities'],
        'orth_dist': projected['orth_dist'],
        'score_dist': projected['score_dist'],
        'center': standardized['center'],
        'scale': standardized['scale'],
        'bsb': mask,
        'robust': robust,
        'standardize': opts.standardize,
        'num_components': num_components,
        'rows_kept': rows_kept,
        'notes': notes,
    }

    if opts.dispresults:
        _, rownames, varnames = split_labels(data)
        print(format_report(results, result_tables(results, [rownames[i] for i in rows_kept], varnames)))
    return results


def pca_fs_named_matrix(nmat: NamedMatrix,
                        options: OptionsLike = None,
                        detector: Optional[OutlierDetector] = None,
                        **kwargs) -> Tuple[Dict[str, Any], Dict[str, pd.DataFrame]]:
    """
    Perform PCA on a NamedMatrix and label the results.
    
    Args:
        nmat: NamedMatrix containing the data
        options: PCAOptions, dictionary or flat name/value list
        detector: Outlier detector used with ``bdp``
        **kwargs: Further options
        
    Returns:
        Tuple of (results, labelled tables)
    """
    results = pca_fs(nmat, options, detector=detector, **kwargs)
    all_rownames = nmat.rownames()
    rownames = [all_rownames[i] for i in results['rows_kept']]
    return results, result_tables(results, rownames, nmat.colnames())
