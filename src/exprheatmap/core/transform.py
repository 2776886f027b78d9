"""
Base transformation framework for immutable matrix operations.

Every value-changing step of heatmap preparation (log transform, row scaling,
baseline subtraction, row flip) is a Transform: a pure function from one
ExpressionMatrix to a new one, carrying the parameters it was built with so
the applied chain can be logged and written next to the exported data.

Examples:
    >>> import numpy as np
    >>> from exprheatmap.core.transform import Transform
    >>>
    >>> class Negate(Transform):
    ...     def __init__(self):
    ...         super().__init__(name="Negate", params={})
    ...
    ...     def apply(self, matrix):
    ...         return matrix.with_data(-matrix.data)
    >>>
    >>> negated = Negate().apply(matrix)  # matrix is unchanged
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, TYPE_CHECKING

if TYPE_CHECKING:
    from exprheatmap.core.matrix import ExpressionMatrix

__all__ = ['Transform']


class Transform(ABC):
    """
    Abstract base class for all matrix transformations.

    Transformations take a matrix and return a new matrix. The input matrix
    is never modified.

    Attributes:
        name: Human-readable transformation name (e.g., "Log2Transform")
        params: Parameters used for this transformation (JSON-serializable)
    """

    def __init__(self, name: str, params: dict[str, Any]) -> None:
        self.name = name
        self.params = params

    @abstractmethod
    def apply(self, matrix: ExpressionMatrix) -> ExpressionMatrix:
        """
        Execute transformation and return new matrix.

        Must never modify the input matrix.

        Args:
            matrix: Input ExpressionMatrix to transform

        Returns:
            New ExpressionMatrix with transformation applied (input unchanged)

        Raises:
            ValueError: If transformation cannot be applied (check validate() first)
        """

    def validate(self, matrix: ExpressionMatrix) -> list[str]:
        """
        Check preconditions before applying transformation.

        Subclasses should override and call super().validate() first.

        Returns:
            List of error messages (empty list = valid)
        """
        errors: list[str] = []

        if matrix.data.size == 0:
            errors.append("Cannot process empty matrix")

        return errors

    def check_preconditions(self, matrix: ExpressionMatrix) -> None:
        """
        Raises:
            ValueError: If validate() reports any error
        """
        errors = self.validate(matrix)
        if errors:
            raise ValueError(f"{self.name} cannot be applied: " + "; ".join(errors))

    def __call__(self, matrix: ExpressionMatrix) -> ExpressionMatrix:
        self.check_preconditions(matrix)
        return self.apply(matrix)

    def __repr__(self) -> str:
        """
        String representation for logging and provenance.

        Returns:
            String like "Log2Transform(pseudocount=1.0)"
        """
        params_str = ", ".join(f"{k}={v}" for k, v in self.params.items())
        return f"{self.name}({params_str})"
