"""Filter graphs built on libavfilter.

A graph connects buffer sources, processing filters and a buffer sink.
After ``configure()`` frames are pushed into the source and pulled from the
sink; ``pull()`` raises ``Again`` when the graph needs more input and ``Eof``
once the end of stream pushed with ``push(None)`` has come through.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import Any

import av.filter

from ffbind.filter.chain import parse_chain
from ffbind.util.error import FilterNotFound, translate_errors
from ffbind.util.media import MediaType
from ffbind.util.time import TIME_BASE_Q

logger = logging.getLogger(__name__)

_SINKS = {MediaType.VIDEO: "buffersink", MediaType.AUDIO: "abuffersink"}


class Graph:
    """A libavfilter graph."""

    def __init__(self) -> None:
        self._graph = av.filter.Graph()
        self._configured = False

    @property
    def native(self) -> av.filter.Graph:
        return self._graph

    @property
    def configured(self) -> bool:
        return self._configured

    def add(self, filter_name: str, args: str | None = None, name: str | None = None) -> Any:
        """Add a filter instance and return its context.

        Raises:
            FilterNotFound: If the filter does not exist.
        """
        if filter_name not in av.filter.filters_available:
            raise FilterNotFound(f"Filter not found: {filter_name}")
        with translate_errors():
            return self._graph.add(filter_name, args, name=name)

    def link(self, src: Any, dst: Any, src_pad: int = 0, dst_pad: int = 0) -> None:
        """Connect output pad src_pad of src to input pad dst_pad of dst."""
        with translate_errors():
            src.link_to(dst, src_pad, dst_pad)

    def add_video_source(
        self,
        width: int,
        height: int,
        format: str,
        time_base: Fraction = TIME_BASE_Q,
        *,
        name: str | None = None,
    ) -> Any:
        """Add a "buffer" source accepting video frames of this shape."""
        with translate_errors():
            return self._graph.add_buffer(
                width=width,
                height=height,
                format=format,
                time_base=time_base,
                name=name,
            )

    def add_audio_source(
        self,
        rate: int,
        layout: str,
        format: str,
        time_base: Fraction | None = None,
        *,
        name: str | None = None,
    ) -> Any:
        """Add an "abuffer" source accepting audio frames of this shape."""
        with translate_errors():
            return self._graph.add_abuffer(
                sample_rate=rate,
                format=format,
                layout=layout,
                time_base=time_base or Fraction(1, rate),
                name=name,
            )

    def add_sink(self, media_type: MediaType = MediaType.VIDEO, name: str | None = None) -> Any:
        """Add the buffer sink frames are pulled from."""
        sink = _SINKS.get(media_type)
        if sink is None:
            raise ValueError(f"No buffer sink for {media_type.value} frames")
        return self.add(sink, name=name)

    def chain(self, description: str, source: Any, sink: Any) -> None:
        """Insert a linear chain between source and sink.

        An empty-filter chain is not allowed; use "null" or "anull" for a
        pass-through graph.
        """
        previous = source
        for filter_name, args in parse_chain(description):
            context = self.add(filter_name, args)
            self.link(previous, context)
            previous = context
        self.link(previous, sink)

    def configure(self) -> None:
        """Validate links and negotiate formats. Required before push/pull."""
        with translate_errors():
            self._graph.configure()
        self._configured = True
        logger.debug("Configured filter graph")

    def push(self, frame: Any) -> None:
        """Push a frame into the source; None signals end of stream.

        Raises:
            RuntimeError: If the graph is not configured.
        """
        self._check_configured("push frames")
        with translate_errors():
            self._graph.push(frame)

    def pull(self) -> Any:
        """Pull a filtered frame from the sink.

        Raises:
            Again: If the graph needs more input.
            Eof: If the graph is drained.
        """
        self._check_configured("pull frames")
        with translate_errors():
            return self._graph.pull()

    def _check_configured(self, action: str) -> None:
        if not self._configured:
            raise RuntimeError(f"Cannot {action}: filter graph is not configured")


def video_graph(template: Any, description: str) -> Graph:
    """Build and configure a single input, single output video graph.

    Args:
        template: Anything with width, height, format and time_base, such
            as a decoded frame or a decoder's codec context.
        description: Linear filter chain, e.g. "scale=320:240".
    """
    fmt = template.format
    time_base = getattr(template, "time_base", None) or TIME_BASE_Q
    graph = Graph()
    source = graph.add_video_source(
        template.width,
        template.height,
        fmt if isinstance(fmt, str) else fmt.name,
        time_base,
    )
    sink = graph.add_sink(MediaType.VIDEO)
    graph.chain(description, source, sink)
    graph.configure()
    return graph
