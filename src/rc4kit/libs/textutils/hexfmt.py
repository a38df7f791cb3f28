"""
Hex rendering of keystream and cipher output, grouped for readability.
"""

__all__ = ["format_hex", "parse_hex", "iter_format_hex", "iter_parse_hex"]

import re
from collections.abc import Iterable, Iterator

_WHITESPACE = re.compile(r"\s+")


def format_hex(data: bytes, group: int = 2, sep: str = " ") -> str:
    """Render bytes as lowercase hex, grouping ``group`` bytes per word.

    Example: ``format_hex(b"\\xbb\\xf3\\x16")`` returns ``"bbf3 16"``.

    Args:
        data: Bytes to render.
        group: Number of bytes per group. ``0`` disables grouping.
        sep: Separator placed between groups.

    Returns:
        The hex string; empty input yields an empty string.

    Raises:
        ValueError: If ``group`` is negative.
    """
    if group < 0:
        raise ValueError("group must be non-negative")

    text = bytes(data).hex()
    if not group:
        return text

    width = group * 2
    return sep.join(text[pos : pos + width] for pos in range(0, len(text), width))


def iter_format_hex(
    chunks: Iterable[bytes],
    group: int = 2,
    sep: str = " ",
) -> Iterator[str]:
    """Render a stream of byte chunks piece by piece.

    Joining the yielded strings gives the same text as :func:`format_hex` on
    the concatenated input. At most ``group - 1`` bytes are held back between
    chunks.

    Raises:
        ValueError: If ``group`` is negative.
    """
    if group < 0:
        raise ValueError("group must be non-negative")

    joiner = sep if group else ""
    pending = b""
    started = False
    for chunk in chunks:
        buf = pending + bytes(chunk)
        cut = len(buf) - len(buf) % group if group else len(buf)
        pending = buf[cut:]
        if not cut:
            continue
        text = format_hex(buf[:cut], group, sep)
        yield joiner + text if started else text
        started = True

    if pending:
        text = format_hex(pending, group, sep)
        yield joiner + text if started else text


def parse_hex(text: str) -> bytes:
    """Parse hex text produced by :func:`format_hex` (whitespace is ignored).

    Raises:
        ValueError: If the text is not valid hex.
    """
    compact = _WHITESPACE.sub("", text)
    try:
        return bytes.fromhex(compact)
    except ValueError:
        raise ValueError(f"Invalid hex input: {text[:32]!r}") from None


def iter_parse_hex(chunks: Iterable[str]) -> Iterator[bytes]:
    """Parse hex text arriving in arbitrary pieces.

    A digit pair may be split across two pieces.

    Raises:
        ValueError: If the text is not valid hex or has an odd number of
            digits overall.
    """
    pending = ""
    for chunk in chunks:
        text = pending + _WHITESPACE.sub("", chunk)
        cut = len(text) - len(text) % 2
        pending = text[cut:]
        if cut:
            yield parse_hex(text[:cut])

    if pending:
        raise ValueError("Invalid hex input: odd number of hex digits")
