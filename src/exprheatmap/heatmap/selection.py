"""
Gene and sample selection for heatmap input.

Defaults are resolved before validation: an omitted gene list means every
row in matrix order, an omitted sample list means every column. Missing genes
and missing samples are collected together so one SelectionError reports
both.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from exprheatmap.core.errors import SelectionError
from exprheatmap.core.matrix import ExpressionMatrix

logger = logging.getLogger(__name__)

__all__ = ['MatrixSelection', 'select_submatrix', 'resolve_labels', 'find_missing']


@dataclass(frozen=True)
class MatrixSelection:
    """
    Result of a validated selection.

    Attributes:
        raw: Selected sub-matrix, kept untouched for reference/export
        working: Independent copy handed to the value transforms
    """
    raw: ExpressionMatrix
    working: ExpressionMatrix


def resolve_labels(
    requested: Optional[Sequence[str]],
    available: Sequence[str],
    kind: str,
) -> list[str]:
    """
    Resolve a requested label list against its default.

    Args:
        requested: Labels asked for, or None for "all"
        available: Labels present in the matrix, in matrix order
        kind: "gene" or "sample", used in error messages

    Returns:
        Concrete ordered label list

    Raises:
        SelectionError: If the request is explicitly empty or has duplicates
    """
    if requested is None:
        return list(available)

    labels = list(requested)
    if not labels:
        raise SelectionError(message=f"Empty {kind} selection; omit it to use all {kind}s")

    seen: set = set()
    dupes = []
    for label in labels:
        if label in seen and label not in dupes:
            dupes.append(label)
        seen.add(label)
    if dupes:
        raise SelectionError(message=f"Duplicate {kind} labels requested: {dupes}")

    return labels


def find_missing(requested: Sequence[str], available: Sequence[str]) -> list[str]:
    """Requested labels absent from ``available``, in request order."""
    present = set(available)
    return [label for label in requested if label not in present]


def select_submatrix(
    matrix: ExpressionMatrix,
    genes: Optional[Sequence[str]] = None,
    samples: Optional[Sequence[str]] = None,
) -> MatrixSelection:
    """
    Extract exactly the requested genes (rows) and samples (columns).

    Args:
        matrix: Source matrix (not modified)
        genes: Ordered gene labels, or None for all rows
        samples: Ordered sample labels, or None for all columns

    Returns:
        MatrixSelection with the raw sub-matrix and a working copy

    Raises:
        SelectionError: If any requested label is absent. Carries both
            ``missing_genes`` and ``missing_samples`` (either may be empty).

    Examples:
        >>> sel = select_submatrix(matrix, genes=["Rorb", "Has2"])
        >>> list(sel.raw.gene_ids)
        ['Rorb', 'Has2']
    """
    gene_list = resolve_labels(genes, matrix.gene_ids, "gene")
    sample_list = resolve_labels(samples, matrix.sample_ids, "sample")

    missing_genes = find_missing(gene_list, matrix.gene_ids)
    missing_samples = find_missing(sample_list, matrix.sample_ids)
    if missing_genes or missing_samples:
        logger.error(
            "Missing genes: %s; missing samples: %s", missing_genes, missing_samples
        )
        raise SelectionError(missing_genes=missing_genes, missing_samples=missing_samples)

    raw = matrix.select(genes=gene_list, samples=sample_list)
    logger.debug("Selected %d genes × %d samples", raw.n_genes, raw.n_samples)

    return MatrixSelection(raw=raw, working=raw.copy(deep=True))
