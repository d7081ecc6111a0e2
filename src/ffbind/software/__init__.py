"""Software scaling (libswscale) and resampling (libswresample)."""

from ffbind.software.resampling import AudioSpec, Resampler, resampler
from ffbind.software.scaling import Scaler, ScalingFlags, converter, scaler

__all__ = [
    "AudioSpec",
    "Resampler",
    "Scaler",
    "ScalingFlags",
    "converter",
    "resampler",
    "scaler",
]
