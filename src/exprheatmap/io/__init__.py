"""
I/O for expression matrices and prepared heatmaps.

Key Functions:
    - load_expression_matrix: Load a delimited gene × sample table
    - write_matrix_csv: Write an ExpressionMatrix to CSV
    - write_heatmap_data: Export selected/display matrices and color domain

Examples:
    >>> from exprheatmap.io import load_expression_matrix, write_heatmap_data
    >>> matrix = load_expression_matrix(Path("Rorb_p2_TPM.csv"))
    >>> data = prepare_heatmap(matrix, genes=["Rorb", "Has2"])
    >>> write_heatmap_data(data, Path("results/rorb"))
"""

from exprheatmap.io.loaders import load_expression_matrix, sniff_delimiter
from exprheatmap.io.writers import write_heatmap_data, write_matrix_csv

__all__ = [
    'load_expression_matrix',
    'sniff_delimiter',
    'write_matrix_csv',
    'write_heatmap_data',
]
