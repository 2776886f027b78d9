"""
Gene × sample expression heatmaps from prepared HeatmapData.

The renderer does no numeric work of its own: the display matrix arrives
already transformed and flipped, and the color range is taken verbatim from
the prepared ColorDomain.

Two backends:
    - plot_interactive: plotly heatmap (HTML, or PNG via kaleido)
    - plot_static: seaborn/matplotlib heatmap (PNG/PDF/SVG)

Both draw the y axis growing upward, so the first requested gene sits at the
top of the figure.

Examples
--------
>>> from exprheatmap.viz import ExpressionHeatmap
>>> viz = ExpressionHeatmap()
>>> fig = viz.plot_interactive(data, title="Rorb targets")
>>> fig.save("expr.html")
"""

from __future__ import annotations

import logging
from typing import Optional

import matplotlib.pyplot as plt
import seaborn as sns

from exprheatmap.heatmap.pipeline import HeatmapData
from exprheatmap.viz.core import Figure
from exprheatmap.viz.styles import Palette, configure_style, get_palette

logger = logging.getLogger(__name__)

__all__ = ['ExpressionHeatmap', 'DEFAULT_TITLE']

DEFAULT_TITLE = "Expression heatmap"


class ExpressionHeatmap:
    """
    Heatmap renderer for prepared expression data.

    Parameters
    ----------
    palette : str or Palette, default "default"
        Color ramp (yellow → red by default).
    style : {"paper", "presentation", "notebook"}, optional
        If given, matplotlib/seaborn are configured with this style.
    """

    def __init__(self, palette: str | Palette = "default", style: Optional[str] = None):
        if style is not None:
            self.palette = configure_style(style, palette=palette)
        else:
            self.palette = get_palette(palette)

    def _metadata(self, data: HeatmapData) -> dict:
        return {
            "n_genes": data.display.n_genes,
            "n_samples": data.display.n_samples,
            "zmin": data.domain.min,
            "zmax": data.domain.max,
            "transforms": list(data.transforms),
        }

    def plot_interactive(
        self,
        data: HeatmapData,
        title: str = DEFAULT_TITLE,
        height_per_gene: int = 20,
        width: int = 300,
        ytick_size: int = 8,
        ytick_color: Optional[str] = None,
    ) -> Figure:
        """
        Interactive plotly heatmap.

        Parameters
        ----------
        data : HeatmapData
            Output of :func:`exprheatmap.heatmap.prepare_heatmap`.
        title : str
            Figure title.
        height_per_gene : int, default 20
            Figure height in pixels per gene row.
        width : int, default 300
            Figure width in pixels.
        ytick_size : int, default 8
            Font size of gene labels.
        ytick_color : str, optional
            Color of gene labels.

        Returns
        -------
        Figure
            Wrapper around a ``plotly.graph_objects.Figure``.
        """
        import plotly.graph_objects as go

        display = data.display
        tickfont = {"size": ytick_size}
        if ytick_color is not None:
            tickfont["color"] = ytick_color

        fig = go.Figure(
            data=go.Heatmap(
                z=display.data,
                x=[str(s) for s in display.sample_ids],
                y=[str(g) for g in display.gene_ids],
                colorscale=self.palette.colorscale(),
                zmin=data.domain.min,
                zmax=data.domain.max,
            )
        )
        fig.update_layout(
            title=title,
            height=height_per_gene * display.n_genes,
            width=width,
            yaxis={"ticklen": 0, "tickfont": tickfont, "type": "category"},
            xaxis={"ticklen": 0, "type": "category"},
        )
        logger.debug("Built plotly heatmap (%d × %d)", display.n_genes, display.n_samples)

        return Figure(
            fig=fig,
            title=title,
            description=f"{display.n_genes} genes × {display.n_samples} samples",
            figure_type="plotly",
            metadata=self._metadata(data),
        )

    def plot_static(
        self,
        data: HeatmapData,
        title: str = DEFAULT_TITLE,
        figsize: Optional[tuple[float, float]] = None,
        ytick_size: int = 8,
        ytick_color: Optional[str] = None,
        n_colors: Optional[int] = None,
        annotate: bool = False,
    ) -> Figure:
        """
        Static seaborn heatmap.

        Parameters
        ----------
        data : HeatmapData
            Output of :func:`exprheatmap.heatmap.prepare_heatmap`.
        title : str
            Figure title.
        figsize : tuple, optional
            Figure size in inches. Defaults to scale with matrix dimensions.
        ytick_size : int, default 8
            Font size of gene labels.
        ytick_color : str, optional
            Color of gene labels.
        n_colors : int, optional
            Number of discrete color bins (continuous when None).
        annotate : bool, default False
            Write values into cells.

        Returns
        -------
        Figure
            Wrapper around a matplotlib figure.
        """
        display = data.display
        if figsize is None:
            figsize = (
                max(4.0, 0.6 * display.n_samples + 2.0),
                max(3.0, 0.25 * display.n_genes + 1.5),
            )

        fig, ax = plt.subplots(figsize=figsize)
        ax.set_facecolor(self.palette.missing)

        sns.heatmap(
            display.to_frame(),
            vmin=data.domain.min,
            vmax=data.domain.max,
            cmap=self.palette.cmap(n_colors),
            annot=annotate,
            fmt=".2f",
            xticklabels=True,
            yticklabels=True,
            ax=ax,
        )
        # display rows are stored bottom-to-top
        ax.invert_yaxis()

        ax.tick_params(axis="y", which="both", length=0, labelsize=ytick_size, rotation=0)
        ax.tick_params(axis="x", which="both", length=0)
        if ytick_color is not None:
            for label in ax.get_yticklabels():
                label.set_color(ytick_color)
        ax.set_xlabel("")
        ax.set_ylabel("")
        ax.set_title(title)

        fig.tight_layout()

        return Figure(
            fig=fig,
            title=title,
            description=f"{display.n_genes} genes × {display.n_samples} samples",
            figure_type="matplotlib",
            metadata=self._metadata(data),
        )
