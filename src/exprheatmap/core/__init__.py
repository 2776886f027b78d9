"""
Core data structures shared by the heatmap preparation pipeline.

1. ExpressionMatrix: Labelled gene × sample matrix with value semantics
2. Transform: Abstract base class for immutable matrix transformations
3. SelectionError / ConfigError / NumericDegeneracyWarning: error taxonomy
"""

from exprheatmap.core.errors import ConfigError, NumericDegeneracyWarning, SelectionError
from exprheatmap.core.matrix import ExpressionMatrix
from exprheatmap.core.transform import Transform

__all__ = [
    'ExpressionMatrix',
    'Transform',
    'SelectionError',
    'ConfigError',
    'NumericDegeneracyWarning',
]
