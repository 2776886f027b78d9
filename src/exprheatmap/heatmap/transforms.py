"""
Value transformations applied to the selected matrix before display.

Log2:
    A pseudocount of 1 is added to every value before taking log2, so a count
    of 0 maps to 0 rather than -inf and non-negative counts never produce
    negative outputs. Applied before any scaling.

Within-gene scaling (scale_genes=True), one of two modes:
    - Min-max: each gene is rescaled to [0, 1] independently. A constant gene
      has no range; all of its values are set to 0 and a
      NumericDegeneracyWarning names it.
    - Baseline subtraction: each gene's mean over the baseline samples is
      subtracted from all of its values. Choosing control samples as the
      baseline shows effect size relative to control. A gene with no
      non-NaN baseline value is set to 0 and named in a
      NumericDegeneracyWarning.

Giving a baseline group without scale_genes is a ConfigError.

Examples:
    >>> config = TransformConfig(apply_log2=True, scale_genes=True, baseline_group=("s1",))
    >>> transformed = ValueTransformer(config).transform(matrix)
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from exprheatmap.core.errors import ConfigError, NumericDegeneracyWarning, SelectionError
from exprheatmap.core.matrix import ExpressionMatrix
from exprheatmap.core.transform import Transform

logger = logging.getLogger(__name__)

__all__ = [
    'TransformConfig',
    'Log2Transform',
    'RowMinMaxScale',
    'BaselineSubtraction',
    'ValueTransformer',
    'transform_values',
]


@dataclass(frozen=True)
class TransformConfig:
    """
    Value transformation settings.

    Attributes:
        apply_log2: Replace v with log2(v + 1)
        scale_genes: Scale values within each gene
        baseline_group: Sample labels whose per-gene mean is subtracted.
            Requires scale_genes=True. An empty sequence is treated as None.
    """
    apply_log2: bool = False
    scale_genes: bool = False
    baseline_group: Optional[tuple[str, ...]] = None

    def __post_init__(self):
        group = self.baseline_group
        if group is not None:
            group = tuple(group)
            if not group:
                group = None
        object.__setattr__(self, "baseline_group", group)

    def validate(self) -> None:
        """
        Raises:
            ConfigError: If a baseline group is given while scale_genes is False
        """
        if self.baseline_group and not self.scale_genes:
            raise ConfigError(
                "A baseline group was given but scale_genes is False. "
                "Enable within-gene scaling or drop the baseline group."
            )

    def to_dict(self) -> dict:
        return {
            "apply_log2": self.apply_log2,
            "scale_genes": self.scale_genes,
            "baseline_group": list(self.baseline_group) if self.baseline_group else None,
        }


class Log2Transform(Transform):
    """log2(v + pseudocount), elementwise."""

    def __init__(self, pseudocount: float = 1.0):
        super().__init__(name="Log2Transform", params={"pseudocount": pseudocount})
        self.pseudocount = pseudocount

    def validate(self, matrix: ExpressionMatrix) -> list[str]:
        errors = super().validate(matrix)
        if np.any(matrix.data + self.pseudocount <= 0):
            errors.append(
                f"values must be greater than {-self.pseudocount} for log2 with "
                f"pseudocount {self.pseudocount}"
            )
        return errors

    def apply(self, matrix: ExpressionMatrix) -> ExpressionMatrix:
        return matrix.with_data(np.log2(matrix.data + self.pseudocount))


def _report_degenerate(genes: list[str], reason: str, fill_value: float) -> None:
    msg = (
        f"{len(genes)} gene(s) {reason} and were set to {fill_value}: {genes}"
    )
    logger.warning(msg)
    warnings.warn(msg, NumericDegeneracyWarning, stacklevel=3)


class RowMinMaxScale(Transform):
    """
    Rescale each gene (row) to the closed interval [0, 1].

    Constant and all-NaN rows map to ``fill_value`` (default 0).
    ``apply_flagged`` returns their labels with the result; the instance
    itself holds no per-call state.
    """

    def __init__(self, fill_value: float = 0.0):
        super().__init__(name="RowMinMaxScale", params={"fill_value": fill_value})
        self.fill_value = fill_value

    def apply_flagged(self, matrix: ExpressionMatrix) -> tuple[ExpressionMatrix, list[str]]:
        """Scale ``matrix`` and return it with the labels of degenerate rows."""
        data = matrix.data
        with warnings.catch_warnings():
            # all-NaN rows are handled as degenerate below
            warnings.simplefilter("ignore", category=RuntimeWarning)
            row_min = np.nanmin(data, axis=1, keepdims=True)
            row_max = np.nanmax(data, axis=1, keepdims=True)
        row_range = row_max - row_min

        degenerate = ~(row_range[:, 0] > 0)
        safe_range = np.where(row_range > 0, row_range, 1.0)
        scaled = (data - row_min) / safe_range
        scaled[degenerate, :] = self.fill_value

        flagged = matrix.gene_ids[degenerate].tolist()
        if flagged:
            _report_degenerate(flagged, "have zero range under min-max scaling", self.fill_value)

        return matrix.with_data(scaled), flagged

    def apply(self, matrix: ExpressionMatrix) -> ExpressionMatrix:
        return self.apply_flagged(matrix)[0]


class BaselineSubtraction(Transform):
    """
    Subtract each gene's mean over the baseline samples from all its values.

    After this transform, the mean of each gene over the baseline samples is 0.
    A gene whose baseline values are all NaN has no mean; its row is set to
    ``fill_value`` and reported like a constant row under min-max scaling.
    """

    def __init__(self, baseline_group: Sequence[str], fill_value: float = 0.0):
        group = list(baseline_group)
        super().__init__(
            name="BaselineSubtraction",
            params={"baseline_group": group, "fill_value": fill_value},
        )
        self.baseline_group = group
        self.fill_value = fill_value

    def validate(self, matrix: ExpressionMatrix) -> list[str]:
        errors = super().validate(matrix)
        if not self.baseline_group:
            errors.append("baseline_group is empty")
        return errors

    def missing_samples(self, matrix: ExpressionMatrix) -> list[str]:
        present = set(matrix.sample_ids)
        return [s for s in self.baseline_group if s not in present]

    def apply_flagged(self, matrix: ExpressionMatrix) -> tuple[ExpressionMatrix, list[str]]:
        """Subtract baseline means and return the labels of genes with no baseline value."""
        missing = self.missing_samples(matrix)
        if missing:
            raise SelectionError(
                missing_samples=missing,
                message=f"Baseline samples not among the selected samples: {missing}",
            )
        col_idx = matrix.sample_ids.get_indexer_for(self.baseline_group)
        baseline = matrix.data[:, col_idx]

        degenerate = np.isnan(baseline).all(axis=1)
        with warnings.catch_warnings():
            # all-NaN baselines are handled as degenerate below
            warnings.simplefilter("ignore", category=RuntimeWarning)
            baseline_mean = np.nanmean(baseline, axis=1, keepdims=True)

        result = matrix.data - baseline_mean
        result[degenerate, :] = self.fill_value

        flagged = matrix.gene_ids[degenerate].tolist()
        if flagged:
            _report_degenerate(flagged, "have no baseline values", self.fill_value)

        return matrix.with_data(result), flagged

    def apply(self, matrix: ExpressionMatrix) -> ExpressionMatrix:
        return self.apply_flagged(matrix)[0]


class ValueTransformer:
    """
    Applies the transforms described by a TransformConfig, in order.

    Attributes:
        config: Validated transformation settings
        steps: Transform instances that will run (empty = identity copy)
    """

    def __init__(self, config: TransformConfig):
        config.validate()
        self.config = config
        self.steps: list[Transform] = []

        if config.apply_log2:
            self.steps.append(Log2Transform(pseudocount=1.0))
        if config.scale_genes:
            if config.baseline_group:
                self.steps.append(BaselineSubtraction(config.baseline_group))
            else:
                self.steps.append(RowMinMaxScale(fill_value=0.0))

    def check(self, matrix: ExpressionMatrix) -> None:
        """
        Validate baseline labels against the matrix before any work.

        Raises:
            SelectionError: If baseline samples are not columns of ``matrix``
        """
        for step in self.steps:
            if isinstance(step, BaselineSubtraction):
                missing = step.missing_samples(matrix)
                if missing:
                    raise SelectionError(
                        missing_samples=missing,
                        message=f"Baseline samples not among the selected samples: {missing}",
                    )

    def transform_flagged(self, matrix: ExpressionMatrix) -> tuple[ExpressionMatrix, list[str]]:
        """
        Return a transformed copy of ``matrix`` and the genes whose values
        were replaced by a fallback.
        """
        self.check(matrix)
        result = matrix.copy(deep=True)
        flagged: list[str] = []
        for step in self.steps:
            logger.debug("Applying %r", step)
            if isinstance(step, (RowMinMaxScale, BaselineSubtraction)):
                step.check_preconditions(result)
                result, step_flagged = step.apply_flagged(result)
                flagged.extend(g for g in step_flagged if g not in flagged)
            else:
                result = step(result)
        return result, flagged

    def transform(self, matrix: ExpressionMatrix) -> ExpressionMatrix:
        """Return a transformed copy of ``matrix``."""
        return self.transform_flagged(matrix)[0]

    def __repr__(self) -> str:
        chain = " -> ".join(repr(s) for s in self.steps) or "Identity"
        return f"ValueTransformer({chain})"


def transform_values(matrix: ExpressionMatrix, config: TransformConfig) -> ExpressionMatrix:
    """Functional shortcut for ``ValueTransformer(config).transform(matrix)``."""
    return ValueTransformer(config).transform(matrix)
