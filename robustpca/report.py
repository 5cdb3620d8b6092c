"""
Labelled tables and text reports for PCA results.

These helpers only read the result dictionary produced by
``robustpca.math.pca.pca_fs``; they attach row, variable and component
labels and never feed back into the computation.
"""

from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from robustpca.math.named_matrix import default_rownames, default_varnames

EXPLAINED_COLUMNS = ['Eigenvalues', 'Explained_Variance', 'Explained_Variance_cum']


def component_names(k: int) -> List[str]:
    """Labels PC1..PCk."""
    return [f"PC{i + 1}" for i in range(k)]


def communality_names(k: int) -> List[str]:
    """Labels for the communality columns: PC1..PCk, then PC1-PC2..PC1-PCk."""
    return component_names(k) + [f"PC1-PC{i}" for i in range(2, k + 1)]


def result_tables(results: Dict[str, Any],
                  rownames: Optional[List[Any]] = None,
                  varnames: Optional[List[Any]] = None) -> Dict[str, pd.DataFrame]:
    """
    Build labelled DataFrames for each result.
    
    Args:
        results: Result dictionary from ``pca_fs``
        rownames: Labels of the observations in the results
        varnames: Labels of the variables
        
    Returns:
        Dictionary of DataFrames keyed by 'R', 'explained', 'coeff',
        'loadings', 'score', 'communalities' and 'distances'
    """
    n_rows = results['score'].shape[0]
    n_cols = results['R'].shape[0]
    k = results['num_components']

    rownames = list(rownames) if rownames is not None else default_rownames(n_rows)
    varnames = list(varnames) if varnames is not None else default_varnames(n_cols)
    pcnames = component_names(k)

    return {
        'R': pd.DataFrame(results['R'], index=varnames, columns=varnames),
        'explained': pd.DataFrame(results['explained'],
                                  index=component_names(n_cols),
                                  columns=EXPLAINED_COLUMNS),
        'coeff': pd.DataFrame(results['coeff'], index=varnames, columns=pcnames),
        'loadings': pd.DataFrame(results['loadings'], index=varnames, columns=pcnames),
        'score': pd.DataFrame(results['score'], index=rownames, columns=pcnames),
        'communalities': pd.DataFrame(results['communalities'],
                                      index=varnames,
                                      columns=communality_names(k)),
        'distances': pd.DataFrame({
            'orth_dist': results['orth_dist'],
            'score_dist': results['score_dist'],
            'in_subset': results['bsb'],
        }, index=rownames),
    }


def format_report(results: Dict[str, Any], tables: Optional[Dict[str, pd.DataFrame]] = None) -> str:
    """
    Render the main results as text.
    
    Args:
        results: Result dictionary from ``pca_fs``
        tables: Labelled tables; built with default labels if omitted
        
    Returns:
        Multi-line report
    """
    if tables is None:
        tables = result_tables(results)

    matrix_kind = 'correlation' if results['standardize'] else 'covariance'
    sections = [
        (f"Initial {matrix_kind} matrix", tables['R']),
        ("Explained variance by PCs", tables['explained']),
        ("Loadings = correlations between variables and PCs", tables['loadings']),
        ("Communalities", tables['communalities']),
    ]

    lines = []
    if results['robust']:
        n_subset = int(np.sum(results['bsb']))
        lines.append(f"Subset: {n_subset} of {len(results['bsb'])} observations")
    for note in results.get('notes', []):
        lines.append(note)
    for title, table in sections:
        lines.append(title)
        lines.append(table.round(2).to_string())
        lines.append('')
    return '\n'.join(lines)


def _plain(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


def results_to_serializable(results: Dict[str, Any],
                            rownames: Optional[List[Any]] = None,
                            varnames: Optional[List[Any]] = None) -> Dict[str, Any]:
    """
    Convert a result dictionary to JSON/YAML friendly types.
    
    Args:
        results: Result dictionary from ``pca_fs``
        rownames: Labels of the observations in the results
        varnames: Labels of the variables
        
    Returns:
        Dictionary containing only lists, numbers, strings and booleans
    """
    output = {key: _plain(value) for key, value in results.items()}
    output['rownames'] = list(rownames) if rownames is not None else default_rownames(results['score'].shape[0])
    output['varnames'] = list(varnames) if varnames is not None else default_varnames(results['R'].shape[0])
    output['components'] = component_names(results['num_components'])
    return output
