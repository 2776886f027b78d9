"""
Visualization for prepared expression heatmaps.

Static figures use matplotlib/seaborn; interactive figures use plotly.

Examples
--------
>>> from exprheatmap.viz import ExpressionHeatmap
>>>
>>> viz = ExpressionHeatmap(style="paper")
>>> fig = viz.plot_static(data)
>>> fig.save("figures/expr.pdf")
"""

from exprheatmap.viz.core import Figure, resolve_output_path
from exprheatmap.viz.heatmap import ExpressionHeatmap
from exprheatmap.viz.styles import PALETTES, Palette, configure_style, get_palette

__all__ = [
    "Figure",
    "resolve_output_path",
    "Palette",
    "PALETTES",
    "configure_style",
    "get_palette",
    "ExpressionHeatmap",
]
