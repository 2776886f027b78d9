"""
exprheatmap - Expression heatmaps for RNA-seq gene × sample tables

Prepares a gene-by-sample expression matrix for display (selection, optional
log2, within-gene scaling or baseline subtraction, vertical flip, padded color
range) and renders it with plotly or matplotlib/seaborn.
"""

__version__ = "0.1.0"

from exprheatmap.core.errors import ConfigError, NumericDegeneracyWarning, SelectionError
from exprheatmap.core.matrix import ExpressionMatrix
from exprheatmap.heatmap.domain import ColorDomain
from exprheatmap.heatmap.pipeline import HeatmapData, prepare_heatmap
from exprheatmap.heatmap.transforms import TransformConfig

__all__ = [
    "ExpressionMatrix",
    "TransformConfig",
    "ColorDomain",
    "HeatmapData",
    "prepare_heatmap",
    "SelectionError",
    "ConfigError",
    "NumericDegeneracyWarning",
]
