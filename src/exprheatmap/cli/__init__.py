"""
exprheatmap CLI - Command-line interface for expression heatmaps.

Commands:
    exprheatmap heatmap   - Render a gene × sample expression heatmap
    exprheatmap prepare   - Write prepared matrices and color range only
"""

import argparse
import sys
from typing import Optional, List


def main(args: Optional[List[str]] = None) -> int:
    """Main CLI dispatcher for exprheatmap."""
    if args is None:
        args = sys.argv[1:]

    parser = argparse.ArgumentParser(
        prog="exprheatmap",
        allow_abbrev=False,
        description="Gene × sample expression heatmaps for RNA-seq tables",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  heatmap   Render an expression heatmap (static or plotly)
  prepare   Write selected/display matrices and color range

Examples:
  exprheatmap heatmap --input Rorb_p2_TPM.csv --genes Rorb Has2 --output expr.png
  exprheatmap prepare --input tpm.csv --log2 --scale-genes --output results/all_genes
        """
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version="%(prog)s 0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    from exprheatmap.cli import heatmap
    heatmap.register_parser(subparsers)

    parsed_args = parser.parse_args(args)

    if parsed_args.command is None:
        parser.print_help()
        return 0

    # raw argv lets config merging tell explicit flags from defaults
    parsed_args.cli_args = list(args)
    return parsed_args.func(parsed_args)


if __name__ == "__main__":
    sys.exit(main())
