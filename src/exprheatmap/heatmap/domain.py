"""
Display orientation and color-scale domain.

Heatmap renderers whose y axis grows upward draw row 0 at the bottom, so the
matrix is flipped vertically before hand-off: the first requested gene then
appears at the top.

The color domain is padded 5% away from the data on each side, with the
direction chosen by sign so the padding always widens the domain.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np

from exprheatmap.core.errors import ConfigError, NumericDegeneracyWarning
from exprheatmap.core.matrix import ExpressionMatrix
from exprheatmap.core.transform import Transform

logger = logging.getLogger(__name__)

__all__ = [
    'ColorDomain',
    'RowFlip',
    'flip_rows',
    'pad',
    'derive_color_domain',
    'check_overrides',
    'PAD_SHRINK',
    'PAD_GROW',
    'DEGENERATE_DOMAIN',
]

PAD_SHRINK = 0.95
PAD_GROW = 1.05

# Used when an all-zero matrix collapses the derived domain to a point
DEGENERATE_DOMAIN = (0.0, 1.0)


@dataclass(frozen=True)
class ColorDomain:
    """Numeric range mapped onto the color scale."""
    min: float
    max: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.min, self.max)

    def to_dict(self) -> dict:
        return {"min": self.min, "max": self.max}


class RowFlip(Transform):
    """Reverse row order. Applying it twice restores the original order."""

    def __init__(self):
        super().__init__(name="RowFlip", params={})

    def apply(self, matrix: ExpressionMatrix) -> ExpressionMatrix:
        return matrix.flip_rows()


def flip_rows(matrix: ExpressionMatrix) -> ExpressionMatrix:
    """Return ``matrix`` with its rows in reverse order."""
    return RowFlip().apply(matrix)


def pad(bound: float, is_min: bool) -> float:
    """
    Widen one bound of the color domain away from the data.

    ============  =======  ======
    bound         is_min   factor
    ============  =======  ======
    >= 0          True     0.95
    < 0           True     1.05
    >= 0          False    1.05
    < 0           False    0.95
    ============  =======  ======

    Args:
        bound: Observed minimum or maximum
        is_min: True when padding the lower bound

    Returns:
        Padded bound
    """
    if is_min:
        factor = PAD_SHRINK if bound >= 0 else PAD_GROW
    else:
        factor = PAD_GROW if bound >= 0 else PAD_SHRINK
    return float(bound) * factor


def check_overrides(min_val: Optional[float], max_val: Optional[float]) -> None:
    """
    Raises:
        ConfigError: If both overrides are given and min_val > max_val
    """
    if min_val is not None and max_val is not None and min_val > max_val:
        raise ConfigError(
            f"Explicit color range is inverted: min_val={min_val} > max_val={max_val}"
        )


def derive_color_domain(
    matrix: ExpressionMatrix,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
) -> ColorDomain:
    """
    Color domain for the (already transformed and flipped) display matrix.

    Explicit ``min_val``/``max_val`` are used verbatim. Missing bounds are
    taken from the observed data (NaN ignored) and widened with :func:`pad`.
    If both bounds are derived and collapse to one value (an all-zero
    matrix), DEGENERATE_DOMAIN is returned with a NumericDegeneracyWarning.

    Raises:
        ConfigError: If the resulting domain is inverted, whether both
            overrides were given or one override lies beyond the derived bound
        ValueError: If a bound must be derived but the matrix has no finite values
    """
    check_overrides(min_val, max_val)

    if min_val is None or max_val is None:
        finite = matrix.data[np.isfinite(matrix.data)]
        if finite.size == 0:
            raise ValueError("Cannot derive a color domain: matrix has no finite values")
        observed_lo = float(finite.min())
        observed_hi = float(finite.max())
        logger.debug("Observed value range [%g, %g]", observed_lo, observed_hi)

    lo = float(min_val) if min_val is not None else pad(observed_lo, is_min=True)
    hi = float(max_val) if max_val is not None else pad(observed_hi, is_min=False)

    if min_val is None and max_val is None and lo == hi:
        msg = (
            f"Color domain collapsed to [{lo}, {hi}]; "
            f"using {list(DEGENERATE_DOMAIN)} instead"
        )
        logger.warning(msg)
        warnings.warn(msg, NumericDegeneracyWarning, stacklevel=2)
        lo, hi = DEGENERATE_DOMAIN

    if lo > hi:
        if min_val is not None:
            raise ConfigError(
                f"Explicit min_val={lo} is above the upper bound {hi} derived from the data"
            )
        raise ConfigError(
            f"Explicit max_val={hi} is below the lower bound {lo} derived from the data"
        )

    return ColorDomain(min=lo, max=hi)
