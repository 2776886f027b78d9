"""
Exception and warning types raised while preparing a heatmap.

SelectionError and ConfigError are fatal and raised before any value is
transformed. NumericDegeneracyWarning is non-fatal: the affected values get a
documented fallback and processing continues.
"""

from __future__ import annotations

from typing import Iterable, Optional

__all__ = ['SelectionError', 'ConfigError', 'NumericDegeneracyWarning']


class SelectionError(ValueError):
    """
    Requested gene or sample labels are not usable.

    Both lists are always present so callers can report missing genes and
    missing samples together.

    Attributes:
        missing_genes: Requested gene labels absent from the matrix rows
        missing_samples: Requested sample labels absent from the matrix columns
    """

    def __init__(
        self,
        missing_genes: Optional[Iterable[str]] = None,
        missing_samples: Optional[Iterable[str]] = None,
        message: Optional[str] = None,
    ):
        self.missing_genes = list(missing_genes or [])
        self.missing_samples = list(missing_samples or [])
        if message is None:
            message = (
                "At least one gene or sample requested is not in the expression matrix. "
                f"Missing genes: {self.missing_genes}. "
                f"Missing samples: {self.missing_samples}."
            )
        super().__init__(message)


class ConfigError(ValueError):
    """Contradictory heatmap configuration."""


class NumericDegeneracyWarning(UserWarning):
    """A transform or the color domain hit a zero-range case and used a fallback."""
