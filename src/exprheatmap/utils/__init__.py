"""Utility modules shared by I/O and visualization."""

from exprheatmap.utils.fileio import atomic_write, atomic_write_json, ensure_writable

__all__ = [
    'atomic_write',
    'atomic_write_json',
    'ensure_writable',
]
