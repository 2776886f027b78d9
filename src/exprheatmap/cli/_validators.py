"""Shared argparse type validators for CLI parameter bounds checking.

Intended to be used as the ``type=`` argument in ``add_argument()``.
"""

from __future__ import annotations

import argparse


def _positive_int(value: str) -> int:
    """argparse type for positive integers (> 0)."""
    ivalue = int(value)
    if ivalue <= 0:
        raise argparse.ArgumentTypeError(f"{value} is not a positive integer")
    return ivalue


def _color_bins(value: str) -> int:
    """argparse type for a number of discrete color bins (>= 2)."""
    ivalue = int(value)
    if ivalue < 2:
        raise argparse.ArgumentTypeError(f"{value} is not a valid number of colors (must be >= 2)")
    return ivalue
