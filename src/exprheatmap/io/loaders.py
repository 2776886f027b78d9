"""
Delimited-text loader for expression matrices.

Expected layout:
    - Header row: sample labels (first cell may be empty or a name)
    - First column: gene labels
    - Remaining cells: numeric values

Example (CSV):
```
"","HTp2_1","HTp2_2","KOp2_1"
"Rorb",612,1056,87
"Has2",0,1,4
```

Examples:
    >>> from pathlib import Path
    >>> from exprheatmap.io.loaders import load_expression_matrix
    >>> matrix = load_expression_matrix(Path("Rorb_p2_TPM.csv"))
    >>> print(f"Loaded {matrix.n_genes} genes × {matrix.n_samples} samples")
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Optional
import warnings

import numpy as np
import pandas as pd

from exprheatmap.core.matrix import ExpressionMatrix

logger = logging.getLogger(__name__)

__all__ = ['load_expression_matrix', 'sniff_delimiter']


def sniff_delimiter(path: Path, sample_size: int = 8192) -> str:
    """
    Auto-detect delimiter from file content.

    Uses Python's csv.Sniffer with a first-line count fallback.

    Returns:
        Detected delimiter character ('\\t', ',', ';' or '|')

    Raises:
        ValueError: If delimiter cannot be determined
    """
    with open(path, 'r', encoding='utf-8', errors='ignore') as f:
        sample = f.read(sample_size)

    try:
        dialect = csv.Sniffer().sniff(sample, delimiters='\t,;|')
        return dialect.delimiter
    except csv.Error:
        pass

    first_line = sample.split('\n')[0]
    counts = {
        '\t': first_line.count('\t'),
        ',': first_line.count(','),
        ';': first_line.count(';'),
        '|': first_line.count('|'),
    }

    if max(counts.values()) == 0:
        raise ValueError(
            f"Could not detect delimiter in {path}. "
            "Please specify it explicitly."
        )

    return max(counts, key=counts.get)


def load_expression_matrix(path: Path, delimiter: Optional[str] = None) -> ExpressionMatrix:
    """
    Load a gene × sample table into an ExpressionMatrix.

    Args:
        path: Delimited text file
        delimiter: Field separator; sniffed from the file when None

    Returns:
        ExpressionMatrix with float data

    Raises:
        FileNotFoundError: If path does not exist
        ValueError: If the file is empty, has non-numeric cells or infinite values

    Warns:
        UserWarning: Duplicate gene/sample labels (first occurrence kept) and NaN values
    """
    if not isinstance(path, Path):
        path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Expression file not found: {path}")

    if not path.is_file():
        raise ValueError(f"Path is not a file: {path}")

    if delimiter is None:
        delimiter = sniff_delimiter(path)
    logger.debug("Reading %s with delimiter %r", path, delimiter)

    try:
        df = pd.read_csv(path, sep=delimiter, index_col=0)
    except pd.errors.EmptyDataError as e:
        raise ValueError(f"Expression file is empty: {path}") from e
    except Exception as e:
        raise ValueError(f"Failed to read expression file {path}: {e}") from e

    if df.shape[0] == 0:
        raise ValueError(f"Expression file contains no genes (rows): {path}")

    if df.shape[1] == 0:
        raise ValueError(f"Expression file contains no samples (columns): {path}")

    df.index = df.index.astype(str)
    df.columns = df.columns.astype(str)

    if df.index.duplicated().any():
        n_duplicates = df.index.duplicated().sum()
        warnings.warn(
            f"Found {n_duplicates} duplicate gene IDs. "
            "Using first occurrence of each.",
            UserWarning
        )
        df = df[~df.index.duplicated(keep='first')]

    if df.columns.duplicated().any():
        n_duplicates = df.columns.duplicated().sum()
        warnings.warn(
            f"Found {n_duplicates} duplicate sample IDs. "
            "Using first occurrence of each.",
            UserWarning
        )
        df = df.loc[:, ~df.columns.duplicated(keep='first')]

    try:
        data = df.to_numpy(dtype=float)
    except ValueError as e:
        non_numeric = []
        for i, row in enumerate(df.values):
            for j, val in enumerate(row):
                try:
                    float(val)
                except (ValueError, TypeError):
                    non_numeric.append(f"row {i} ('{df.index[i]}'), col {j} ('{df.columns[j]}'): {val}")
                    if len(non_numeric) >= 5:
                        break
            if len(non_numeric) >= 5:
                break

        raise ValueError(
            "Expression file contains non-numeric values:\n" +
            "\n".join(f"  - {x}" for x in non_numeric) +
            ("\n  ..." if len(non_numeric) >= 5 else "")
        ) from e

    if np.isnan(data).any():
        n_nan = int(np.isnan(data).sum())
        warnings.warn(
            f"Found {n_nan:,} NaN values ({100 * n_nan / data.size:.2f}% of data). "
            "They are ignored when scaling and deriving the color range.",
            UserWarning
        )

    if np.isinf(data).any():
        n_inf = int(np.isinf(data).sum())
        raise ValueError(
            f"Expression file contains {n_inf} infinite values. "
            "Please clean data before loading."
        )

    matrix = ExpressionMatrix(
        data=data,
        gene_ids=pd.Index(df.index),
        sample_ids=pd.Index(df.columns),
    )
    logger.info("Loaded %d genes × %d samples from %s", matrix.n_genes, matrix.n_samples, path)
    return matrix
