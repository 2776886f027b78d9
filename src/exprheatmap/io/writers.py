"""
Writers for selected/display matrices and heatmap provenance.

`write_heatmap_data` produces three files next to each other:
    - {prefix}.selected.csv: raw selected values, requested order
    - {prefix}.display.csv: transformed, flipped values as handed to the renderer
    - {prefix}.domain.json: color domain, transform settings and provenance

Existing files are never overwritten unless ``overwrite=True``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from exprheatmap.core.matrix import ExpressionMatrix
from exprheatmap.heatmap.pipeline import HeatmapData
from exprheatmap.utils.fileio import atomic_write, atomic_write_json, ensure_writable

logger = logging.getLogger(__name__)

__all__ = ['write_matrix_csv', 'write_heatmap_data']


def write_matrix_csv(matrix: ExpressionMatrix, path: Path, overwrite: bool = False) -> Path:
    """
    Write an ExpressionMatrix to CSV (gene labels in the first column).

    Raises:
        TypeError: If matrix is not an ExpressionMatrix
        ValueError: If matrix is empty
        FileExistsError: If path exists and overwrite is False
        OSError: If the file cannot be written
    """
    if not isinstance(matrix, ExpressionMatrix):
        raise TypeError(f"matrix must be ExpressionMatrix, got {type(matrix)}")

    if matrix.data.size == 0:
        raise ValueError("Cannot write empty matrix")

    path = ensure_writable(path, overwrite=overwrite)

    df = matrix.to_frame()
    df.index.name = "gene"
    try:
        atomic_write(path, df.to_csv)
    except Exception as e:
        raise OSError(f"Failed to write matrix file {path}: {e}") from e

    logger.info("Wrote %d × %d matrix to %s", matrix.n_genes, matrix.n_samples, path)
    return path


def write_heatmap_data(data: HeatmapData, prefix: Path, overwrite: bool = False) -> dict[str, Path]:
    """
    Export a prepared heatmap so it can be re-rendered or audited.

    All target paths are checked before anything is written.

    Returns:
        Mapping of artifact name ("selected", "display", "domain") to path
    """
    prefix = Path(prefix)
    paths = {
        "selected": Path(f"{prefix}.selected.csv"),
        "display": Path(f"{prefix}.display.csv"),
        "domain": Path(f"{prefix}.domain.json"),
    }
    for path in paths.values():
        ensure_writable(path, overwrite=overwrite)

    write_matrix_csv(data.selected, paths["selected"], overwrite=True)
    write_matrix_csv(data.display, paths["display"], overwrite=True)
    atomic_write_json(paths["domain"], data.provenance())
    logger.info("Wrote color domain and provenance to %s", paths["domain"])

    return paths
