"""
End-to-end heatmap preparation: select -> transform -> flip -> color domain.

Each call works on its own copies of the input, so independent calls can run
in parallel. Configuration and selection problems are raised before any
value is transformed; no partial result is ever returned.

Examples:
    >>> from exprheatmap.heatmap import prepare_heatmap, TransformConfig
    >>> data = prepare_heatmap(
    ...     matrix,
    ...     genes=["Rorb", "Plxnd1", "Has2"],
    ...     samples=["HTp2_1", "HTp2_2", "KOp2_1", "KOp2_2"],
    ...     config=TransformConfig(apply_log2=True, scale_genes=True,
    ...                            baseline_group=("HTp2_1", "HTp2_2")),
    ... )
    >>> data.domain
    ColorDomain(min=..., max=...)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from exprheatmap.core.matrix import ExpressionMatrix
from exprheatmap.heatmap.domain import ColorDomain, RowFlip, check_overrides, derive_color_domain
from exprheatmap.heatmap.selection import select_submatrix
from exprheatmap.heatmap.transforms import TransformConfig, ValueTransformer

logger = logging.getLogger(__name__)

__all__ = ['HeatmapData', 'prepare_heatmap']


@dataclass
class HeatmapData:
    """
    Everything a renderer or exporter needs.

    Attributes:
        selected: Raw selected sub-matrix (untransformed, requested order)
        display: Transformed and vertically flipped matrix
        domain: Color-scale range for ``display``
        config: Transformation settings used
        transforms: repr of each applied transform, in order
        degenerate_genes: Genes whose values were replaced by a fallback
    """
    selected: ExpressionMatrix
    display: ExpressionMatrix
    domain: ColorDomain
    config: TransformConfig
    transforms: list[str] = field(default_factory=list)
    degenerate_genes: list[str] = field(default_factory=list)

    def provenance(self) -> dict:
        """JSON-serializable summary of how ``display`` was produced."""
        return {
            "genes": [str(g) for g in self.selected.gene_ids],
            "samples": [str(s) for s in self.selected.sample_ids],
            "config": self.config.to_dict(),
            "transforms": list(self.transforms),
            "domain": self.domain.to_dict(),
            "degenerate_genes": [str(g) for g in self.degenerate_genes],
        }


def prepare_heatmap(
    matrix: ExpressionMatrix,
    genes: Optional[Sequence[str]] = None,
    samples: Optional[Sequence[str]] = None,
    config: Optional[TransformConfig] = None,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
) -> HeatmapData:
    """
    Prepare a display matrix and color domain from an expression matrix.

    Args:
        matrix: Source gene × sample matrix (not modified)
        genes: Ordered genes to show (None = all)
        samples: Ordered samples to show (None = all)
        config: Value transforms (None = no transform)
        min_val: Explicit lower color bound
        max_val: Explicit upper color bound

    Returns:
        HeatmapData

    Raises:
        ConfigError: Baseline group without scale_genes, or inverted overrides
        SelectionError: Unknown genes/samples, or baseline samples not selected
    """
    if config is None:
        config = TransformConfig()

    transformer = ValueTransformer(config)
    check_overrides(min_val, max_val)

    selection = select_submatrix(matrix, genes=genes, samples=samples)
    transformer.check(selection.working)

    logger.info(
        "Preparing heatmap for %d genes × %d samples with %r",
        selection.working.n_genes, selection.working.n_samples, transformer,
    )
    transformed, degenerate_genes = transformer.transform_flagged(selection.working)

    flip = RowFlip()
    display = flip(transformed)
    domain = derive_color_domain(display, min_val=min_val, max_val=max_val)
    logger.info("Color domain [%g, %g]", domain.min, domain.max)

    return HeatmapData(
        selected=selection.raw,
        display=display,
        domain=domain,
        config=config,
        transforms=[repr(s) for s in transformer.steps] + [repr(flip)],
        degenerate_genes=degenerate_genes,
    )
