"""
Heatmap CLI subcommands.

Usage:
    exprheatmap heatmap --input counts.csv --genes Rorb Has2 --log2 --output expr.png
    exprheatmap prepare --input counts.csv --genes Rorb Has2 --log2 --output results/rorb
"""

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from exprheatmap.cli._validators import _color_bins, _positive_int
from exprheatmap.cli.config import (
    VALID_BACKENDS,
    VALID_STYLES,
    load_config,
    merge_config_with_args,
    validate_config,
)

logger = logging.getLogger(__name__)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Arguments shared by ``heatmap`` and ``prepare``."""
    parser.add_argument(
        "--input", "-i", type=Path,
        help="Gene × sample expression table (header row of samples, first column of genes)"
    )
    parser.add_argument(
        "--delimiter",
        help="Field separator of the input file (default: auto-detect)"
    )
    parser.add_argument(
        "--config", "-c", type=Path,
        help="YAML or JSON config file; explicit CLI flags take precedence"
    )

    genes = parser.add_mutually_exclusive_group()
    genes.add_argument(
        "--genes", "-g", nargs="+", metavar="GENE",
        help="Genes to show, top to bottom (default: all)"
    )
    genes.add_argument(
        "--genes-file", type=Path,
        help="File with one gene label per line ('#' comments allowed)"
    )
    parser.add_argument(
        "--samples", "-s", nargs="+", metavar="SAMPLE",
        help="Samples to show, left to right (default: all)"
    )

    transform = parser.add_argument_group("value transforms")
    transform.add_argument(
        "--log2", action="store_true",
        help="Replace values with log2(value + 1)"
    )
    transform.add_argument(
        "--scale-genes", action="store_true",
        help="Scale within each gene (0-1 range, or relative to --baseline-group)"
    )
    transform.add_argument(
        "--baseline-group", nargs="+", metavar="SAMPLE",
        help="Samples whose per-gene mean is subtracted (requires --scale-genes)"
    )

    color = parser.add_argument_group("color range")
    color.add_argument(
        "--min-val", type=float,
        help="Lower color bound (default: data minimum, padded 5%%)"
    )
    color.add_argument(
        "--max-val", type=float,
        help="Upper color bound (default: data maximum, padded 5%%)"
    )

    parser.add_argument(
        "--overwrite", action="store_true",
        help="Replace existing output files"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Debug logging"
    )


def register_parser(subparsers):
    """Register the heatmap and prepare subcommands."""
    heatmap_parser = subparsers.add_parser(
        "heatmap",
        help="Render an expression heatmap",
        allow_abbrev=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Render a gene × sample expression heatmap.

Examples:
  exprheatmap heatmap -i Rorb_p2_TPM.csv -g Rorb Plxnd1 Has2 -o expr.png
  exprheatmap heatmap -i tpm.csv --log2 --scale-genes --baseline-group HTp2_1 HTp2_2 \\
      --backend plotly -o expr.html
  exprheatmap heatmap --config heatmap.yaml --max-val 3
        """
    )
    _add_common_arguments(heatmap_parser)
    heatmap_parser.add_argument(
        "--output", "-o", type=Path,
        help="Figure path (.png appended if no extension: png, pdf, svg, html, json)"
    )
    heatmap_parser.add_argument(
        "--export", type=Path, metavar="PREFIX",
        help="Also write PREFIX.selected.csv, PREFIX.display.csv, PREFIX.domain.json"
    )

    figure = heatmap_parser.add_argument_group("figure")
    figure.add_argument(
        "--backend", choices=VALID_BACKENDS, default="static",
        help="static (matplotlib/seaborn) or plotly (default: static)"
    )
    figure.add_argument(
        "--title", default="Expression heatmap",
        help="Figure title"
    )
    figure.add_argument(
        "--palette", default="default",
        help="Color ramp: default (yellow-red), diverging, colorblind, print"
    )
    figure.add_argument(
        "--n-colors", type=_color_bins,
        help="Number of discrete color bins (static backend; default: continuous)"
    )
    figure.add_argument(
        "--height-per-gene", type=_positive_int, default=20,
        help="Plotly figure height per gene, in pixels (default: 20)"
    )
    figure.add_argument(
        "--width", type=_positive_int, default=300,
        help="Plotly figure width in pixels (default: 300)"
    )
    figure.add_argument(
        "--ytick-size", type=_positive_int, default=8,
        help="Gene label font size (default: 8)"
    )
    figure.add_argument(
        "--ytick-color",
        help="Gene label color"
    )
    figure.add_argument(
        "--style", choices=VALID_STYLES, default="paper",
        help="Static figure style (default: paper)"
    )
    heatmap_parser.set_defaults(func=run_heatmap)

    prepare_parser = subparsers.add_parser(
        "prepare",
        help="Write the prepared matrices and color range without rendering",
        allow_abbrev=False,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Prepare heatmap data and write it to disk:
  PREFIX.selected.csv  raw selected values
  PREFIX.display.csv   transformed values, bottom-to-top row order
  PREFIX.domain.json   color range, settings and provenance

Example:
  exprheatmap prepare -i tpm.csv --log2 --scale-genes -o results/rorb
        """
    )
    _add_common_arguments(prepare_parser)
    prepare_parser.add_argument(
        "--output", "-o", type=Path, metavar="PREFIX",
        help="Output prefix"
    )
    prepare_parser.set_defaults(func=run_prepare)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def read_gene_list(path: Path) -> List[str]:
    """Read one label per line, skipping blank lines and '#' comments."""
    if not path.exists():
        raise FileNotFoundError(f"Gene list not found: {path}")
    genes = []
    for line in path.read_text().splitlines():
        line = line.split('#', 1)[0].strip()
        if line:
            genes.append(line)
    return genes


def _resolve_args(args):
    """Apply the config file (if any) and check required values."""
    if getattr(args, "config", None) is not None:
        config = load_config(args.config)
        validate_config(config)
        args = merge_config_with_args(config, args, getattr(args, "cli_args", None))

    if args.input is None:
        raise ValueError("No input file given (use --input or 'input' in the config file)")
    if args.output is None and getattr(args, "export", None) is None:
        raise ValueError("No output given (use --output or 'output' in the config file)")
    return args


def _prepare(args):
    """Load the matrix and run the preparation pipeline."""
    from exprheatmap.heatmap import TransformConfig, prepare_heatmap
    from exprheatmap.io.loaders import load_expression_matrix

    genes: Optional[List[str]] = args.genes
    if genes is None and args.genes_file is not None:
        genes = read_gene_list(args.genes_file)

    matrix = load_expression_matrix(args.input, delimiter=args.delimiter)
    config = TransformConfig(
        apply_log2=bool(args.log2),
        scale_genes=bool(args.scale_genes),
        baseline_group=tuple(args.baseline_group) if args.baseline_group else None,
    )
    return prepare_heatmap(
        matrix,
        genes=genes,
        samples=args.samples,
        config=config,
        min_val=args.min_val,
        max_val=args.max_val,
    )


def _report_selection_error(e) -> None:
    print("Error: at least one gene or sample requested is not in the expression matrix.")
    print("Missing genes:")
    for gene in e.missing_genes:
        print(f"  {gene}")
    print("Missing samples:")
    for sample in e.missing_samples:
        print(f"  {sample}")


def _run_guarded(args, action) -> int:
    """Run ``action(args)`` and map expected failures to exit code 1."""
    from exprheatmap.core.errors import ConfigError, SelectionError

    _configure_logging(getattr(args, "verbose", False))
    try:
        args = _resolve_args(args)
        return action(args)
    except SelectionError as e:
        if e.missing_genes or e.missing_samples:
            _report_selection_error(e)
        else:
            print(f"Error: {e}")
        return 1
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1
    except (FileNotFoundError, FileExistsError, ValueError, RuntimeError) as e:
        print(f"Error: {e}")
        return 1


def _heatmap(args) -> int:
    from exprheatmap.io.writers import write_heatmap_data
    from exprheatmap.viz import ExpressionHeatmap

    data = _prepare(args)
    print(f"Prepared {data.display.n_genes} genes × {data.display.n_samples} samples")
    print(f"  Color range: [{data.domain.min:.4g}, {data.domain.max:.4g}]")
    if data.degenerate_genes:
        print(f"  Genes set to 0 (no range or no baseline values): {', '.join(map(str, data.degenerate_genes))}")

    if args.export is not None:
        paths = write_heatmap_data(data, args.export, overwrite=args.overwrite)
        for name, path in paths.items():
            print(f"  Wrote {name}: {path}")

    if args.output is None:
        return 0

    viz = ExpressionHeatmap(
        palette=args.palette,
        style=args.style if args.backend == "static" else None,
    )
    if args.backend == "plotly":
        fig = viz.plot_interactive(
            data,
            title=args.title,
            height_per_gene=args.height_per_gene,
            width=args.width,
            ytick_size=args.ytick_size,
            ytick_color=args.ytick_color,
        )
    else:
        fig = viz.plot_static(
            data,
            title=args.title,
            ytick_size=args.ytick_size,
            ytick_color=args.ytick_color,
            n_colors=args.n_colors,
        )

    try:
        saved = fig.save(args.output, overwrite=args.overwrite)
    finally:
        fig.close()
    print(f"Saving image to {saved}")
    return 0


def _prepare_only(args) -> int:
    from exprheatmap.io.writers import write_heatmap_data

    data = _prepare(args)
    paths = write_heatmap_data(data, args.output, overwrite=args.overwrite)
    for name, path in paths.items():
        print(f"Wrote {name}: {path}")
    return 0


def run_heatmap(args) -> int:
    """Render a heatmap (and optionally export the prepared data)."""
    return _run_guarded(args, _heatmap)


def run_prepare(args) -> int:
    """Write prepared data without rendering."""
    return _run_guarded(args, _prepare_only)
