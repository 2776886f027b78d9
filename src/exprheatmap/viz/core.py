"""
Core visualization primitive: a Figure wrapper for matplotlib and plotly.

Saving never silently replaces an existing file; pass ``overwrite=True`` to
allow it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Union, Optional, Any
from datetime import datetime

import matplotlib.figure
import matplotlib.pyplot as plt

from exprheatmap.utils.fileio import ensure_writable

# Type aliases
FigureType = Union[matplotlib.figure.Figure, Any]  # Any for plotly.graph_objects.Figure
OutputFormat = Literal["png", "pdf", "svg", "html", "json"]

SUPPORTED_FORMATS = ("png", "pdf", "svg", "html", "json")


def resolve_output_path(path: Path | str, default_format: str = "png") -> Path:
    """
    Append ``.{default_format}`` unless the path already names a supported format.

    Examples
    --------
    >>> resolve_output_path("expr")
    PosixPath('expr.png')
    >>> resolve_output_path("expr.pdf")
    PosixPath('expr.pdf')
    """
    path = Path(path)
    if path.suffix.lstrip(".").lower() in SUPPORTED_FORMATS:
        return path
    return path.with_name(f"{path.name}.{default_format}")


@dataclass
class Figure:
    """
    Unified wrapper for matplotlib and plotly figures.

    Attributes
    ----------
    fig : matplotlib.figure.Figure or plotly.graph_objects.Figure
        The underlying figure object
    title : str
        Human-readable title for the figure
    description : str
        Longer description explaining what the figure shows
    figure_type : {"matplotlib", "plotly"}
        Which library created this figure
    metadata : dict
        Additional metadata (creation time, color domain, etc.)

    Examples
    --------
    >>> fig = ExpressionHeatmap().plot_static(data)
    >>> fig.save("expr.png")
    """
    fig: FigureType
    title: str
    description: str
    figure_type: Literal["matplotlib", "plotly"]
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        if "created_at" not in self.metadata:
            self.metadata["created_at"] = datetime.now().isoformat()

    def save(
        self,
        path: Path | str,
        format: Optional[OutputFormat] = None,
        dpi: int = 300,
        overwrite: bool = False,
        **kwargs
    ) -> Path:
        """
        Save figure to file.

        Parameters
        ----------
        path : Path or str
            Output file path. ``.png`` is appended when it has no supported extension.
        format : str, optional
            Output format. If None, inferred from path extension.
        dpi : int, default 300
            DPI for raster formats. Ignored for vector formats.
        overwrite : bool, default False
            Replace an existing file instead of raising.
        **kwargs
            Additional arguments passed to underlying save function.

        Returns
        -------
        Path
            The path where the figure was saved.

        Raises
        ------
        FileExistsError
            If the target exists and ``overwrite`` is False.
        """
        path = resolve_output_path(path, default_format=format or "png")

        if format is None:
            format = path.suffix.lstrip(".").lower()

        ensure_writable(path, overwrite=overwrite)

        if self.figure_type == "matplotlib":
            self._save_matplotlib(path, format, dpi, **kwargs)
        else:
            self._save_plotly(path, format, **kwargs)

        return path

    def _save_matplotlib(self, path: Path, format: str, dpi: int, **kwargs):
        """Save matplotlib figure."""
        if format in ("html", "json"):
            raise ValueError(f"matplotlib figures cannot be saved as {format}")
        save_kwargs = {
            "dpi": dpi,
            "bbox_inches": "tight",
            "facecolor": "white",
            **kwargs
        }
        self.fig.savefig(path, format=format, **save_kwargs)

    def _save_plotly(self, path: Path, format: str, **kwargs):
        """Save plotly figure."""
        if format == "html":
            self.fig.write_html(
                path,
                include_plotlyjs="cdn",
                full_html=True,
                **kwargs
            )
        elif format == "json":
            self.fig.write_json(path, **kwargs)
        else:
            # Static image export (requires kaleido)
            try:
                self.fig.write_image(path, format=format, scale=2, **kwargs)
            except ValueError as e:
                if "kaleido" in str(e).lower():
                    raise RuntimeError(
                        "Static image export requires kaleido. "
                        "Install with: pip install kaleido"
                    ) from e
                raise

    def close(self):
        """Close the figure to free memory."""
        if self.figure_type == "matplotlib":
            plt.close(self.fig)
