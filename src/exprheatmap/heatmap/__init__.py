"""
Expression-matrix-to-heatmap preparation.

Key Functions:
    - select_submatrix: Validated gene/sample extraction
    - ValueTransformer / transform_values: log2 and within-gene scaling
    - flip_rows / derive_color_domain / pad: display orientation and color range
    - prepare_heatmap: The full pipeline, returning HeatmapData
"""

from exprheatmap.heatmap.domain import ColorDomain, RowFlip, derive_color_domain, flip_rows, pad
from exprheatmap.heatmap.pipeline import HeatmapData, prepare_heatmap
from exprheatmap.heatmap.selection import MatrixSelection, select_submatrix
from exprheatmap.heatmap.transforms import (
    BaselineSubtraction,
    Log2Transform,
    RowMinMaxScale,
    TransformConfig,
    ValueTransformer,
    transform_values,
)

__all__ = [
    'MatrixSelection',
    'select_submatrix',
    'TransformConfig',
    'Log2Transform',
    'RowMinMaxScale',
    'BaselineSubtraction',
    'ValueTransformer',
    'transform_values',
    'ColorDomain',
    'RowFlip',
    'flip_rows',
    'pad',
    'derive_color_domain',
    'HeatmapData',
    'prepare_heatmap',
]
