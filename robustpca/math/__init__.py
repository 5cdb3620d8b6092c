"""
Numeric core of robustpca: subset selection, standardization,
eigendecomposition, component selection and projection.
"""
