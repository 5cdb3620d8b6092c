"""
Exceptions raised by the robustpca package.

Configuration errors are raised before any numeric work starts.
Degenerate-input errors are raised when the data cannot support a
well-defined decomposition (constant columns, too few subset rows).
"""

from typing import Iterable, Any


class RobustPCAError(Exception):
    """Base class for all robustpca errors."""


class PCAConfigError(RobustPCAError, ValueError):
    """Invalid combination or value of PCA options."""


class UnknownOptionError(PCAConfigError):
    """One or more option names are not recognized."""

    def __init__(self, names: Iterable[Any]):
        self.names = list(names)
        super().__init__(
            f"In total {len(self.names)} non-existent user options found: "
            f"{', '.join(str(name) for name in self.names)}"
        )


class MalformedOptionsError(PCAConfigError):
    """The name/value option list cannot be split into pairs."""


class ExclusiveOptionsError(PCAConfigError):
    """Mutually exclusive options were supplied together."""


class InvalidOptionValueError(PCAConfigError):
    """An option has a value outside its allowed range or type."""


class DegenerateInputError(RobustPCAError, ArithmeticError):
    """The data cannot produce a finite, well-defined decomposition."""
