"""
PCM decoding and playback for pronunciation audio.

The speech service returns linear PCM: mono, 16-bit signed little-endian
samples at 24 kHz, either as raw bytes or as base64 text. Samples are
normalized to float32 in [-1, 1] and handed to sounddevice for playback.
"""

import base64
import binascii
from typing import Callable, Union

import numpy as np

from .logger import logger

SAMPLE_RATE = 24000
CHANNELS = 1

# Playback needs PortAudio; without it pronunciation is silently unavailable
try:
    import sounddevice as sd
    PLAYBACK_AVAILABLE = True
except (ImportError, OSError) as e:
    sd = None
    PLAYBACK_AVAILABLE = False
    logger.warning(f"Audio playback disabled: {e}")

SamplePlayer = Callable[[np.ndarray, int], None]


def decode_pcm16(payload: Union[bytes, str]) -> np.ndarray:
    """
    Decode a PCM16 payload into float32 samples in [-1, 1].

    `payload` is either raw little-endian PCM bytes or its base64 text.
    A trailing odd byte (half a sample) is dropped.
    Raises ValueError if base64 text is malformed.
    """
    if isinstance(payload, str):
        try:
            raw = base64.b64decode(payload, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Invalid base64 audio payload: {e}") from e
    else:
        raw = bytes(payload)

    usable = len(raw) - (len(raw) % 2)
    samples = np.frombuffer(raw[:usable], dtype="<i2")
    return samples.astype(np.float32) / 32768.0


def play_samples(samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> None:
    """Start non-blocking playback of mono float samples."""
    if not PLAYBACK_AVAILABLE:
        logger.warning("Audio playback not available, skipping")
        return
    if samples.size == 0:
        logger.audio("No samples to play")
        return

    duration = samples.size / sample_rate
    logger.audio(f"▶ Playing {samples.size} samples ({duration:.2f}s @ {sample_rate} Hz)")
    sd.play(samples, samplerate=sample_rate)
