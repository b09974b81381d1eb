"""
Audio container helpers.

The API returns headerless audio for the pcm_* and ulaw_8000 formats:
    - pcm_*: signed 16-bit little-endian mono samples
    - ulaw_8000: 8-bit mu-law mono samples at 8 kHz

Most players need a container, so these helpers wrap the raw samples in a
WAV file (PCM 16-bit). mp3 responses are already self-describing and are
passed through untouched by the callers.

Dependencies:
    - numpy: sample buffer handling
    - soundfile: mu-law decoding and WAV writing (libsndfile)

Example:
    >>> wav = pcm_to_wav_bytes(response.audio_data, 24000)
    >>> wav[:4]
    b'RIFF'
"""
from __future__ import annotations

import io

import numpy as np
import soundfile as sf

from xi_tts.core.logging import debug, get_logger

_LOG = get_logger("xi-tts.audio")


def _write_wav(samples: np.ndarray, sample_rate: int) -> bytes:
    buf = io.BytesIO()
    sf.write(buf, samples, sample_rate, format="WAV", subtype="PCM_16")
    return buf.getvalue()


def pcm_to_wav_bytes(data: bytes, sample_rate: int) -> bytes:
    """
    Wrap raw 16-bit little-endian mono PCM in a WAV container.

    Args:
        data: Raw sample bytes. Length must be even.
        sample_rate: Sample rate in Hz (from the AudioFormat).

    Raises:
        ValueError: If data has an odd number of bytes.
    """
    if len(data) % 2:
        raise ValueError(f"PCM16 data must have an even byte count, got {len(data)}")

    samples = np.frombuffer(data, dtype="<i2")
    out = _write_wav(samples, sample_rate)
    debug(_LOG, "pcm_wrapped", samples=len(samples), sr=sample_rate, bytes=len(out))
    return out


def ulaw_to_wav_bytes(data: bytes, sample_rate: int = 8000) -> bytes:
    """
    Decode 8-bit mu-law samples and write them as a 16-bit PCM WAV.

    Args:
        data: Raw mu-law bytes, one sample per byte.
        sample_rate: Sample rate in Hz.
    """
    samples, _ = sf.read(
        io.BytesIO(data),
        dtype="int16",
        format="RAW",
        subtype="ULAW",
        samplerate=sample_rate,
        channels=1,
    )
    out = _write_wav(np.asarray(samples, dtype=np.int16), sample_rate)
    debug(_LOG, "ulaw_decoded", samples=len(samples), sr=sample_rate, bytes=len(out))
    return out


def duration_seconds(data: bytes, codec: str, sample_rate: int) -> float | None:
    """
    Playback length of headerless audio, None for mp3 (needs a decoder).
    """
    if codec == "pcm":
        return len(data) / 2 / sample_rate
    if codec == "ulaw":
        return len(data) / sample_rate
    return None
