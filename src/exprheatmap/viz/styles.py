"""
Color ramps and matplotlib/seaborn configuration for expression heatmaps.

The default ramp runs from yellow (low) to red (high). A diverging ramp is
provided for baseline-subtracted data, where 0 means "same as control".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

import matplotlib.pyplot as plt
from matplotlib.colors import LinearSegmentedColormap
import seaborn as sns


@dataclass(frozen=True)
class Palette:
    """
    Color ramp for expression heatmaps.

    Attributes
    ----------
    low : str
        Color at the lower end of the color domain
    high : str
        Color at the upper end of the color domain
    mid : str, optional
        Midpoint color; makes the ramp three-stop
    missing : str
        Color for NaN cells in static figures
    """
    low: str = "yellow"
    high: str = "red"
    mid: Optional[str] = None
    missing: str = "#9ca3af"

    @property
    def stops(self) -> list[str]:
        if self.mid is None:
            return [self.low, self.high]
        return [self.low, self.mid, self.high]

    def colorscale(self) -> list[list]:
        """Plotly colorscale: evenly spaced ``[position, color]`` pairs."""
        stops = self.stops
        n = len(stops) - 1
        return [[i / n, color] for i, color in enumerate(stops)]

    def cmap(self, n_colors: Optional[int] = None) -> LinearSegmentedColormap:
        """
        Matplotlib colormap for this ramp.

        Parameters
        ----------
        n_colors : int, optional
            Number of discrete color bins. None gives a continuous ramp.
        """
        n = n_colors if n_colors is not None else 256
        return LinearSegmentedColormap.from_list(f"{self.low}_{self.high}", self.stops, N=n)


PALETTES = {
    "default": Palette(),
    "diverging": Palette(low="#2563eb", mid="white", high="#dc2626"),
    "colorblind": Palette(low="#fde725", high="#440154"),
    "print": Palette(low="#f0f0f0", high="#1a1a1a"),
}


def get_palette(palette: str | Palette) -> Palette:
    """Look up a palette by name (unknown names fall back to "default")."""
    if isinstance(palette, Palette):
        return palette
    return PALETTES.get(palette, PALETTES["default"])


def configure_style(
    style: Literal["paper", "presentation", "notebook"] = "paper",
    palette: str | Palette = "default",
    font_scale: float = 1.0
) -> Palette:
    """
    Configure matplotlib and seaborn for consistent visualization style.

    Parameters
    ----------
    style : {"paper", "presentation", "notebook"}
        Target medium.
    palette : str or Palette
        Color palette name or Palette instance.
    font_scale : float
        Multiplier for all font sizes.

    Returns
    -------
    Palette
        The configured color palette.
    """
    palette = get_palette(palette)

    base_params = {
        "figure.facecolor": "white",
        "axes.facecolor": "white",
        "axes.edgecolor": "#333333",
        "axes.labelcolor": "#333333",
        "text.color": "#333333",
        "xtick.color": "#333333",
        "ytick.color": "#333333",
        "axes.spines.top": False,
        "axes.spines.right": False,
        "legend.frameon": False,
    }

    if style == "paper":
        style_params = {
            "font.size": 10 * font_scale,
            "axes.titlesize": 11 * font_scale,
            "xtick.labelsize": 9 * font_scale,
            "ytick.labelsize": 8 * font_scale,
            "savefig.dpi": 300,
        }
        context = "paper"
    elif style == "presentation":
        style_params = {
            "font.size": 14 * font_scale,
            "axes.titlesize": 18 * font_scale,
            "xtick.labelsize": 12 * font_scale,
            "ytick.labelsize": 12 * font_scale,
            "savefig.dpi": 150,
        }
        context = "talk"
    else:  # notebook
        style_params = {
            "font.size": 11 * font_scale,
            "axes.titlesize": 12 * font_scale,
            "xtick.labelsize": 10 * font_scale,
            "ytick.labelsize": 10 * font_scale,
            "savefig.dpi": 150,
        }
        context = "notebook"

    sns.set_theme(style="white", context=context, font_scale=font_scale)
    plt.rcParams.update({**base_params, **style_params})

    return palette
