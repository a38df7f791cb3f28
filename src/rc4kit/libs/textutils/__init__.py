"""
Text rendering helpers for binary data.
"""

__all__ = [
    "format_hex",
    "iter_format_hex",
    "iter_parse_hex",
    "parse_hex",
]

from .hexfmt import format_hex, iter_format_hex, iter_parse_hex, parse_hex
