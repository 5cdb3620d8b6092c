"""
Options record for the PCA pipeline.

Options may be supplied as a PCAOptions instance, a dictionary, or a flat
name/value sequence such as ``['standardize', False, 'bdp', 0.4]``. All of
them are validated once, before any data is touched.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from robustpca.errors import (
    ExclusiveOptionsError,
    InvalidOptionValueError,
    MalformedOptionsError,
    PCAConfigError,
    UnknownOptionError,
)

logger = logging.getLogger(__name__)

# Alternative spellings accepted for option names
OPTION_ALIASES = {
    'NumComponents': 'num_components',
}


class PCAOptions(BaseModel):
    """
    Validated options for a single PCA call.

    Attributes:
        standardize: Operate on the correlation matrix (True) or on the
            covariance matrix (False)
        num_components: Number of components to retain, or None for the
            automatic 0.95^v rule
        bdp: Breakdown point for the MCD-based robust subset
        bsb: Explicit subset, as 0-based row indices or a boolean mask
        random_state: Seed passed to the robust estimator
        dispresults: Print the text report after the fit

    Unknown names, invalid values and the bdp/bsb combination raise
    the matching PCAConfigError subclass, also on direct construction.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra='forbid')

    standardize: bool = True
    num_components: Optional[int] = Field(default=None, alias='NumComponents')
    bdp: Optional[float] = None
    bsb: Optional[Any] = None
    random_state: Optional[int] = 0
    dispresults: bool = False

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise options_error(e) from e

    @field_validator('num_components', mode='before')
    @classmethod
    def _reject_bool(cls, value: Any) -> Any:
        if isinstance(value, (bool, np.bool_)):
            raise ValueError(f"NumComponents must be an integer, got {value!r}")
        return value

    @field_validator('num_components')
    @classmethod
    def _check_num_components(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value < 1:
            raise ValueError(f"NumComponents must be a positive integer, got {value}")
        return value

    @field_validator('bdp')
    @classmethod
    def _check_bdp(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and not 0 < value <= 0.5:
            raise ValueError(f"bdp must be in (0, 0.5], got {value}")
        return value

    @model_validator(mode='after')
    def _check_exclusive(self) -> 'PCAOptions':
        if self.bdp is not None and self.bsb is not None:
            raise ExclusiveOptionsError("Just one between bsb and bdp has to be supplied")
        return self


RECOGNIZED_OPTIONS = frozenset(PCAOptions.model_fields) | frozenset(OPTION_ALIASES)


def options_error(error: ValidationError) -> PCAConfigError:
    """
    Translate a pydantic validation error into a configuration error.

    Args:
        error: Error raised while building a PCAOptions record

    Returns:
        UnknownOptionError for extra names, the PCAConfigError raised by a
        validator if there is one, InvalidOptionValueError otherwise
    """
    details = error.errors()
    unknown = [detail['loc'][0] for detail in details if detail['type'] == 'extra_forbidden']
    if unknown:
        return UnknownOptionError(unknown)

    for detail in details:
        cause = detail.get('ctx', {}).get('error')
        if isinstance(cause, PCAConfigError):
            return cause
    return InvalidOptionValueError(str(error))


def _to_python(value: Any) -> Any:
    """Unwrap numpy scalars so pydantic sees plain Python values."""
    if isinstance(value, np.generic):
        return value.item()
    return value


def options_from_pairs(pairs: Sequence[Any]) -> Dict[str, Any]:
    """
    Convert a flat name/value sequence into a dictionary.

    Args:
        pairs: Sequence alternating option names and values

    Returns:
        Dictionary of option name to value

    Raises:
        MalformedOptionsError: If the sequence has odd length or a name
            is not a string
    """
    if len(pairs) % 2 != 0:
        raise MalformedOptionsError(
            "Number of supplied options is invalid. "
            "Probably values for some parameters are missing."
        )

    options = {}
    for name, value in zip(pairs[0::2], pairs[1::2]):
        if not isinstance(name, str):
            raise MalformedOptionsError(f"Option names must be strings, got {name!r}")
        options[name] = value
    return options


def _canonical_names(supplied: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = [name for name in supplied if name not in RECOGNIZED_OPTIONS]
    if unknown:
        raise UnknownOptionError(unknown)

    canonical = {}
    for name, value in supplied.items():
        field = OPTION_ALIASES.get(name, name)
        if field in canonical:
            raise MalformedOptionsError(f"Option '{field}' supplied more than once")
        canonical[field] = _to_python(value)
    return canonical


def parse_options(options: Optional[Union[PCAOptions, Mapping[str, Any], Sequence[Any]]] = None,
                  **kwargs) -> PCAOptions:
    """
    Build a validated PCAOptions record.

    Args:
        options: PCAOptions, dictionary, or flat name/value sequence
        **kwargs: Further options, merged over ``options``

    Returns:
        PCAOptions instance

    Raises:
        MalformedOptionsError: Odd-length name/value list or repeated name
        UnknownOptionError: Option names outside the recognized set
        ExclusiveOptionsError: Both ``bdp`` and ``bsb`` supplied
        InvalidOptionValueError: A value fails type or range validation
    """
    if isinstance(options, PCAOptions):
        if not kwargs:
            return options
        supplied = options.model_dump(exclude_unset=True)
    elif options is None:
        supplied = {}
    elif isinstance(options, Mapping):
        supplied = dict(options)
    elif isinstance(options, (list, tuple)):
        supplied = options_from_pairs(options)
    else:
        raise MalformedOptionsError(
            f"Options must be a mapping or a name/value list, got {type(options).__name__}"
        )

    canonical = _canonical_names(supplied)
    for name, value in _canonical_names(kwargs).items():
        canonical[name] = value

    parsed = PCAOptions(**canonical)

    logger.debug(f"Parsed PCA options: standardize={parsed.standardize}, "
                 f"num_components={parsed.num_components}, bdp={parsed.bdp}, "
                 f"bsb={'set' if parsed.bsb is not None else None}")
    return parsed


def option_names() -> List[str]:
    """Return the sorted list of recognized option names."""
    return sorted(RECOGNIZED_OPTIONS)
