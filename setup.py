"""
Setup script for robustpca package.
"""

from setuptools import setup, find_packages

setup(
    name="robustpca",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        # Core numerical dependencies
        "numpy>=1.20.0",
        "pandas>=1.3.0",
        "scipy>=1.7.0",
        "scikit-learn>=1.0.0",
        
        # Options validation
        "pydantic>=2.0.0",
        
        # Utilities
        "pyyaml>=6.0.0",
    ],
    extras_require={
        # Testing
        "test": [
            "pytest>=6.0.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'robustpca=robustpca.__main__:main',
        ],
    },
    description="Robust principal component analysis with subset trimming and fit diagnostics",
    keywords="pca, robust statistics, mcd, outliers, multivariate analysis",
    python_requires=">=3.9",
)
