"""
Named Matrix implementation for robustpca.

This module provides a data structure for matrices with named rows and
columns. Labels stay here, at the boundary; the numeric pipeline only
ever sees plain numpy arrays.
"""

import numpy as np
import pandas as pd
from typing import List, Optional, Union, Any, Tuple


def default_varnames(n_cols: int) -> List[str]:
    """Variable labels used when the input has none: Y1, Y2, ..."""
    return [f"Y{j + 1}" for j in range(n_cols)]


def default_rownames(n_rows: int) -> List[str]:
    """Row labels used when the input has none: 1, 2, ..."""
    return [str(i + 1) for i in range(n_rows)]


class IndexHash:
    """
    Ordered list of unique row or column names.
    """
    
    def __init__(self, names: Optional[List[Any]] = None):
        """
        Initialize an IndexHash with optional initial names.
        
        Args:
            names: Optional list of initial names
        """
        self._names = [] if names is None else list(names)
        self._index_hash = {name: idx for idx, name in enumerate(self._names)}
        if len(self._index_hash) != len(self._names):
            raise ValueError("Names must be unique")
        
    def get_names(self) -> List[Any]:
        """Return the ordered list of names."""
        return self._names.copy()
    
    def __len__(self) -> int:
        return len(self._names)


class NamedMatrix:
    """
    A numeric matrix with named rows and columns.

    Uses a pandas DataFrame as the underlying storage. Entries are
    converted to float on construction; instances are never modified
    in place.
    """
    
    def __init__(self, 
                 matrix: Optional[Union[np.ndarray, pd.DataFrame, List[List[float]]]] = None,
                 rownames: Optional[List[Any]] = None,
                 colnames: Optional[List[Any]] = None):
        """
        Initialize a NamedMatrix.

        When names are omitted, DataFrame labels are used if available,
        otherwise rows are named 1..n and columns Y1..Yv.
        
        Args:
            matrix: Matrix data (numpy array, nested lists or DataFrame)
            rownames: List of row names
            colnames: List of column names
        """
        if matrix is None:
            matrix = np.empty((0, 0))
        
        if isinstance(matrix, pd.DataFrame):
            df = matrix.copy()
            if rownames is None and isinstance(df.index, pd.RangeIndex):
                rownames = default_rownames(df.shape[0])
            if rownames is not None:
                df.index = list(rownames)
            if colnames is not None:
                df.columns = list(colnames)
            df.index = [str(name) for name in df.index]
            df.columns = [str(name) for name in df.columns]
            try:
                df = df.astype(float)
            except (ValueError, TypeError) as e:
                raise ValueError(f"Matrix entries must be numeric: {e}") from e
        else:
            values = np.asarray(matrix, dtype=float)
            if values.ndim == 1:
                values = values.reshape(-1, 1)
            if values.ndim != 2:
                raise ValueError(f"Expected a 2D matrix, got {values.ndim} dimensions")
            rows = list(rownames) if rownames is not None else default_rownames(values.shape[0])
            cols = list(colnames) if colnames is not None else default_varnames(values.shape[1])
            df = pd.DataFrame(values, index=rows, columns=cols)
        
        self._matrix = df
        self._row_index = IndexHash(df.index)
        self._col_index = IndexHash(df.columns)
    
    @property
    def matrix(self) -> pd.DataFrame:
        """Get the underlying DataFrame."""
        return self._matrix
    
    @property
    def values(self) -> np.ndarray:
        """Get the matrix as a float numpy array."""
        return self._matrix.to_numpy(dtype=float)
    
    @property
    def shape(self) -> Tuple[int, int]:
        return self._matrix.shape
    
    def rownames(self) -> List[Any]:
        """Get the list of row names."""
        return self._row_index.get_names()
    
    def colnames(self) -> List[Any]:
        """Get the list of column names."""
        return self._col_index.get_names()
    
    def __repr__(self) -> str:
        return f"NamedMatrix(rows={len(self._row_index)}, cols={len(self._col_index)})"
    
    def __str__(self) -> str:
        return (f"NamedMatrix with {len(self._row_index)} rows and "
                f"{len(self._col_index)} columns\n{self._matrix}")


def split_labels(data: Union[np.ndarray, pd.DataFrame, NamedMatrix, List[List[float]]]
                 ) -> Tuple[np.ndarray, List[Any], List[Any]]:
    """
    Separate numeric values from row and column labels.
    
    Args:
        data: Labelled or unlabelled input matrix
        
    Returns:
        Tuple of (values, rownames, colnames)
    """
    nmat = data if isinstance(data, NamedMatrix) else NamedMatrix(data)
    return nmat.values, nmat.rownames(), nmat.colnames()
