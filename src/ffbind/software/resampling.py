"""Audio resampling and sample format conversion (libswresample)."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import av

from ffbind.util.error import InputChanged, translate_errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AudioSpec:
    """Sample format, channel layout and sample rate of an audio signal."""

    format: str
    layout: str
    rate: int

    def __post_init__(self) -> None:
        if self.rate <= 0:
            raise ValueError(f"Sample rate must be > 0, got {self.rate}")
        try:
            av.AudioFormat(self.format)
        except ValueError as e:
            raise ValueError(f"Unknown sample format: {self.format}") from e
        try:
            av.AudioLayout(self.layout)
        except ValueError as e:
            raise ValueError(f"Unknown channel layout: {self.layout}") from e

    @classmethod
    def of(cls, frame: av.AudioFrame) -> AudioSpec:
        return cls(frame.format.name, frame.layout.name, frame.sample_rate)

    def __str__(self) -> str:
        return f"{self.format} {self.layout} {self.rate}Hz"


class Resampler:
    """Converts audio frames from one AudioSpec to another.

    Output frames may hold a different number of samples than the input;
    ``flush()`` returns what is still buffered at end of stream.
    """

    def __init__(self, input: AudioSpec, output: AudioSpec) -> None:
        self.input = input
        self.output = output
        self._resampler = av.AudioResampler(
            format=output.format,
            layout=output.layout,
            rate=output.rate,
        )
        logger.debug("Created resampler %s -> %s", input, output)

    def run(self, frame: av.AudioFrame) -> list[av.AudioFrame]:
        """Resample one frame.

        Raises:
            InputChanged: If the frame does not match the configured input format.
        """
        actual = AudioSpec.of(frame)
        if actual != self.input:
            raise InputChanged(f"Expected {self.input}, got {actual}")
        with translate_errors():
            return list(self._resampler.resample(frame))

    def flush(self) -> list[av.AudioFrame]:
        """Drain buffered samples at end of stream."""
        with translate_errors():
            return list(self._resampler.resample(None))


def resampler(
    input: tuple[str, str, int],
    output: tuple[str, str, int],
) -> Resampler:
    """Create a resampler from (format, layout, rate) tuples."""
    return Resampler(AudioSpec(*input), AudioSpec(*output))
