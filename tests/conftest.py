"""
Shared fixtures for robustpca tests.
"""

import logging

import numpy as np
import pytest

from robustpca.components.config import ConfigManager


def make_correlated_data(n_rows: int = 100, n_cols: int = 6, n_factors: int = 2,
                         noise: float = 0.5, seed: int = 0) -> np.ndarray:
    """Data driven by a few latent factors plus Gaussian noise."""
    rng = np.random.RandomState(seed)
    latent = rng.randn(n_rows, n_factors)
    weights = rng.randn(n_factors, n_cols)
    return latent @ weights + noise * rng.randn(n_rows, n_cols) + 10.0


@pytest.fixture
def data():
    """100 x 6 matrix without missing values."""
    return make_correlated_data()


@pytest.fixture
def outlier_rows():
    return [3, 17, 42, 66, 90]


@pytest.fixture
def data_with_outliers(outlier_rows):
    """100 x 6 matrix with 5 extreme rows."""
    values = make_correlated_data(seed=1)
    values[outlier_rows] += 25.0
    return values


@pytest.fixture(autouse=True)
def reset_config():
    """Give each test a fresh configuration singleton and root log level."""
    root_level = logging.getLogger().level
    ConfigManager.reset()
    yield
    ConfigManager.reset()
    logging.getLogger().setLevel(root_level)
