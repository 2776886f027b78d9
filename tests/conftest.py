"""
Pytest configuration and shared fixtures.

Provides small hand-checkable matrices and a synthetic count matrix
generator for property-style tests.
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest
from pathlib import Path

from exprheatmap.core.matrix import ExpressionMatrix


def make_matrix(rows: dict, samples: list) -> ExpressionMatrix:
    """Build an ExpressionMatrix from {gene: [values...]}."""
    return ExpressionMatrix(
        data=np.array(list(rows.values()), dtype=float),
        gene_ids=pd.Index(list(rows.keys())),
        sample_ids=pd.Index(samples),
    )


def generate_synthetic_counts(
    n_genes: int,
    n_samples: int,
    zero_fraction: float = 0.1,
    seed: int = 42
) -> ExpressionMatrix:
    """
    Synthetic RNA-seq-like counts.

    Args:
        n_genes: Number of genes
        n_samples: Number of samples
        zero_fraction: Fraction of values set to 0 (dropouts)
        seed: Random seed for reproducibility
    """
    rng = np.random.default_rng(seed)
    data = np.round(rng.lognormal(mean=4, sigma=1.5, size=(n_genes, n_samples)))
    data[rng.random(data.shape) < zero_fraction] = 0.0

    gene_ids = pd.Index([f"GENE_{i:04d}" for i in range(n_genes)])
    sample_ids = pd.Index(
        [f"{'CTRL' if i % 2 else 'CASE'}_{i:02d}" for i in range(n_samples)]
    )
    return ExpressionMatrix(data=data, gene_ids=gene_ids, sample_ids=sample_ids)


@pytest.fixture
def ab_matrix():
    """Genes A, B × samples s1-s3: A=[0,1,3], B=[2,2,2]."""
    return make_matrix({"A": [0, 1, 3], "B": [2, 2, 2]}, ["s1", "s2", "s3"])


@pytest.fixture
def rorb_matrix():
    """TPM-like table shaped like a small knockout experiment."""
    return make_matrix(
        {
            "Rorb": [120.0, 98.0, 3.0, 1.0],
            "Plxnd1": [15.0, 22.0, 40.0, 51.0],
            "Has2": [0.0, 0.0, 7.0, 12.0],
            "Sparcl1": [800.0, 760.0, 820.0, 790.0],
            "Pde1a": [5.0, 5.0, 5.0, 5.0],
        },
        ["HTp2_1", "HTp2_2", "KOp2_1", "KOp2_2"],
    )


@pytest.fixture
def synthetic_counts():
    """50 genes × 8 samples of synthetic counts."""
    return generate_synthetic_counts(50, 8, seed=7)


def save_matrix_csv(matrix: ExpressionMatrix, path: Path, sep: str = ","):
    """Write a matrix the way upstream tools export count tables."""
    matrix.to_frame().to_csv(path, sep=sep)


@pytest.fixture
def rorb_csv(tmp_path, rorb_matrix):
    """rorb_matrix written to a CSV file."""
    path = tmp_path / "Rorb_p2_TPM.csv"
    save_matrix_csv(rorb_matrix, path)
    return path
