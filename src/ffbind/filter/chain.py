"""Parsing of linear filter chain descriptions."""

from __future__ import annotations


def _split_segments(description: str) -> list[str]:
    """Split on commas that are not escaped or quoted.

    Quotes and escapes are kept in the output; FFmpeg interprets them again
    when the filter arguments are parsed.
    """
    segments: list[str] = []
    current: list[str] = []
    in_quote = False
    i = 0
    while i < len(description):
        char = description[i]
        if char == "\\" and not in_quote:
            if i + 1 >= len(description):
                raise ValueError(f"Dangling escape at end of filter chain: {description!r}")
            current.append(description[i : i + 2])
            i += 2
            continue
        if char == "'":
            in_quote = not in_quote
        elif char == "," and not in_quote:
            segments.append("".join(current))
            current = []
            i += 1
            continue
        current.append(char)
        i += 1

    if in_quote:
        raise ValueError(f"Unterminated quote in filter chain: {description!r}")
    segments.append("".join(current))
    return segments


def parse_chain(description: str) -> list[tuple[str, str | None]]:
    """Split a linear chain such as "scale=320:240,format=gray".

    Args:
        description: Comma separated filters, each "name" or "name=args".

    Returns:
        (name, args) pairs in chain order; args is None when absent.

    Raises:
        ValueError: If the chain or one of its segments is empty, or a
            quote is left open.
    """
    if not description or not description.strip():
        raise ValueError("Filter chain is empty")

    filters: list[tuple[str, str | None]] = []
    for position, segment in enumerate(_split_segments(description)):
        segment = segment.strip()
        if not segment:
            raise ValueError(f"Empty filter at position {position} in {description!r}")
        name, sep, args = segment.partition("=")
        name = name.strip()
        if not name:
            raise ValueError(f"Missing filter name at position {position} in {description!r}")
        filters.append((name, args if sep else None))
    return filters
