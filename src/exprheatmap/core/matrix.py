"""
Core data structure for gene-by-sample expression matrices.

ExpressionMatrix couples a numeric array with its row (gene) and column
(sample) labels so that subsetting, reordering and transforming never lose
track of which value belongs to which gene and sample.

Biological Context:
    Expression tables are the usual input to a heatmap:
    - Rows = genes (symbols, Ensembl IDs)
    - Columns = samples (replicates, conditions)
    - Values = counts, TPM, or any other abundance measure

Engineering Design:
    - Immutable: Operations return new instances (functional style)
    - NumPy arrays for data, Pandas Index objects for labels
    - Constructor validates shape and label uniqueness

Examples:
    >>> import numpy as np
    >>> import pandas as pd
    >>> from exprheatmap.core.matrix import ExpressionMatrix
    >>>
    >>> matrix = ExpressionMatrix(
    ...     data=np.array([[0.0, 1.0, 3.0], [2.0, 2.0, 2.0]]),
    ...     gene_ids=pd.Index(["A", "B"]),
    ...     sample_ids=pd.Index(["s1", "s2", "s3"]),
    ... )
    >>> sub = matrix.select(genes=["B"], samples=["s3", "s1"])
    >>> sub.data
    array([[2., 2.]])
"""

from __future__ import annotations

from typing import Optional, Sequence
import numpy as np
import pandas as pd

__all__ = ['ExpressionMatrix']


class ExpressionMatrix:
    """
    Immutable container for a labelled expression matrix (genes × samples).

    Attributes:
        data: Numerical expression matrix (genes × samples), float dtype
        gene_ids: Row identifiers
        sample_ids: Column identifiers

    Shape Invariants:
        - data.ndim == 2
        - data.shape[0] == len(gene_ids)
        - data.shape[1] == len(sample_ids)
        - gene_ids and sample_ids are each unique
    """

    def __init__(
        self,
        data: np.ndarray,
        gene_ids: pd.Index,
        sample_ids: pd.Index,
    ):
        """
        Initialize ExpressionMatrix with validation.

        Args:
            data: Expression matrix (genes × samples). Converted to float.
            gene_ids: Row identifiers (must be unique)
            sample_ids: Column identifiers (must be unique)

        Raises:
            TypeError: If data or labels have the wrong type
            ValueError: If shapes are inconsistent or labels are duplicated
        """
        if not isinstance(data, np.ndarray):
            raise TypeError(f"data must be np.ndarray, got {type(data)}")
        if not isinstance(gene_ids, pd.Index):
            raise TypeError(f"gene_ids must be pd.Index, got {type(gene_ids)}")
        if not isinstance(sample_ids, pd.Index):
            raise TypeError(f"sample_ids must be pd.Index, got {type(sample_ids)}")

        if data.ndim != 2:
            raise ValueError(f"data must be 2D, got shape {data.shape}")

        n_genes, n_samples = data.shape

        if len(gene_ids) != n_genes:
            raise ValueError(
                f"gene_ids length ({len(gene_ids)}) must match data rows ({n_genes})"
            )
        if len(sample_ids) != n_samples:
            raise ValueError(
                f"sample_ids length ({len(sample_ids)}) must match data columns ({n_samples})"
            )

        if gene_ids.has_duplicates:
            dupes = gene_ids[gene_ids.duplicated()].unique().tolist()
            raise ValueError(f"gene_ids must be unique, duplicated: {dupes}")
        if sample_ids.has_duplicates:
            dupes = sample_ids[sample_ids.duplicated()].unique().tolist()
            raise ValueError(f"sample_ids must be unique, duplicated: {dupes}")

        self._data = data.astype(float, copy=False)
        self._gene_ids = gene_ids
        self._sample_ids = sample_ids

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> ExpressionMatrix:
        """Build a matrix from a DataFrame indexed by gene with sample columns."""
        return cls(
            data=df.to_numpy(dtype=float, copy=True),
            gene_ids=pd.Index(df.index),
            sample_ids=pd.Index(df.columns),
        )

    @property
    def data(self) -> np.ndarray:
        """Expression matrix (genes × samples)."""
        return self._data

    @property
    def gene_ids(self) -> pd.Index:
        """Row identifiers."""
        return self._gene_ids

    @property
    def sample_ids(self) -> pd.Index:
        """Column identifiers."""
        return self._sample_ids

    @property
    def shape(self) -> tuple[int, int]:
        """Matrix dimensions (n_genes, n_samples)."""
        return self._data.shape

    @property
    def n_genes(self) -> int:
        return self._data.shape[0]

    @property
    def n_samples(self) -> int:
        return self._data.shape[1]

    def select(
        self,
        genes: Optional[Sequence[str]] = None,
        samples: Optional[Sequence[str]] = None,
    ) -> ExpressionMatrix:
        """
        Subset by labels, preserving the requested order.

        Labels are assumed to exist; use
        :func:`exprheatmap.heatmap.selection.select_submatrix` for validated
        selection with a combined error report.

        Args:
            genes: Ordered gene labels (None = all rows)
            samples: Ordered sample labels (None = all columns)

        Returns:
            New ExpressionMatrix with copied data

        Raises:
            KeyError: If a label is not present
        """
        row_idx = (
            np.arange(self.n_genes) if genes is None
            else self._gene_ids.get_indexer_for(list(genes))
        )
        col_idx = (
            np.arange(self.n_samples) if samples is None
            else self._sample_ids.get_indexer_for(list(samples))
        )
        if (row_idx < 0).any() or (col_idx < 0).any():
            raise KeyError("Requested labels not present in matrix")

        return ExpressionMatrix(
            data=self._data[np.ix_(row_idx, col_idx)].copy(),
            gene_ids=self._gene_ids[row_idx],
            sample_ids=self._sample_ids[col_idx],
        )

    def with_data(self, data: np.ndarray) -> ExpressionMatrix:
        """Return a new matrix with the same labels and replacement values."""
        if data.shape != self.shape:
            raise ValueError(
                f"replacement data shape {data.shape} must match {self.shape}"
            )
        return ExpressionMatrix(
            data=data,
            gene_ids=self._gene_ids.copy(),
            sample_ids=self._sample_ids.copy(),
        )

    def flip_rows(self) -> ExpressionMatrix:
        """Reverse the row order; labels move with their rows."""
        return ExpressionMatrix(
            data=self._data[::-1, :].copy(),
            gene_ids=self._gene_ids[::-1],
            sample_ids=self._sample_ids.copy(),
        )

    def copy(self, deep: bool = True) -> ExpressionMatrix:
        """
        Create a copy of this matrix.

        Args:
            deep: If True, copy all arrays. If False, share arrays (faster but mutable)
        """
        if deep:
            return ExpressionMatrix(
                data=self._data.copy(),
                gene_ids=self._gene_ids.copy(),
                sample_ids=self._sample_ids.copy(),
            )
        return ExpressionMatrix(
            data=self._data,
            gene_ids=self._gene_ids,
            sample_ids=self._sample_ids,
        )

    def to_frame(self) -> pd.DataFrame:
        """Return a DataFrame copy (genes as index, samples as columns)."""
        return pd.DataFrame(
            self._data.copy(),
            index=self._gene_ids.copy(),
            columns=self._sample_ids.copy(),
        )

    def __repr__(self) -> str:
        if self.n_genes == 0 or self.n_samples == 0:
            return f"ExpressionMatrix({self.n_genes} genes × {self.n_samples} samples)"
        return (
            f"ExpressionMatrix({self.n_genes} genes × {self.n_samples} samples)\n"
            f"  Genes: {self.gene_ids[0]}...{self.gene_ids[-1]}\n"
            f"  Samples: {self.sample_ids[0]}...{self.sample_ids[-1]}"
        )

    def __str__(self) -> str:
        return self.__repr__()
