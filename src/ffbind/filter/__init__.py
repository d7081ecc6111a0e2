"""Audio and video filtering (libavfilter).

- find / list_filters: filter descriptors
- parse_chain: split "scale=320:240,format=gray" into (name, args) pairs
- Graph / video_graph: build, configure and run filter graphs
"""

from __future__ import annotations

from dataclasses import dataclass

import av.filter

from ffbind.filter.chain import parse_chain
from ffbind.filter.graph import Graph, video_graph


@dataclass(frozen=True)
class FilterInfo:
    """Description of a filter and its static pads."""

    name: str
    description: str
    inputs: tuple[str, ...]
    outputs: tuple[str, ...]


def find(name: str) -> FilterInfo | None:
    """Find a filter by name, e.g. "overlay". Returns None if unknown.

    Filters with dynamic pads (such as "split") report no static pads.
    """
    if name not in av.filter.filters_available:
        return None
    native = av.filter.Filter(name)
    return FilterInfo(
        name=native.name,
        description=native.description or "",
        inputs=tuple(pad.name for pad in native.inputs),
        outputs=tuple(pad.name for pad in native.outputs),
    )


def list_filters() -> list[str]:
    """Return the names of all filters in the linked libavfilter."""
    return sorted(av.filter.filters_available)


__all__ = [
    "FilterInfo",
    "Graph",
    "find",
    "list_filters",
    "parse_chain",
    "video_graph",
]
