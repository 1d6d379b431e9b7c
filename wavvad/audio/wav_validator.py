"""
wavvad/audio/wav_validator.py
==============================
WAV Header Validator (wav-files-vad-api)

Responsibility:
    - Read a WAV file's header (channels, sample width, frame rate)
    - Decide whether it matches the format the VAD service accepts:
      mono, 16-bit PCM, 16 kHz
    - Classify bad files as UNREADABLE or FORMAT_MISMATCH without raising

Only the header is read; the sample payload is never loaded.

This module does NOT:
    - Resample, downmix, or convert audio
    - Call the VAD service
    - Decide where output goes (see path_mirror.py)
"""

import logging
import os
import struct
import wave
from pathlib import Path

import soundfile as sf

from wavvad.models import AudioFile, ProcessingResult, SkipReason

logger = logging.getLogger("wavvad.audio.wav_validator")


# ---------------------------------------------------------------------------
# Required format
# ---------------------------------------------------------------------------

REQUIRED_CHANNELS = 1  # mono
REQUIRED_BITS_PER_SAMPLE = 16  # PCM s16le
REQUIRED_SAMPLE_RATE = 16000  # Hz
REQUIRED_ENCODING = "PCM"

# libsndfile subtype -> bits per sample
_SUBTYPE_BITS = {
    "PCM_S8": 8,
    "PCM_U8": 8,
    "PCM_16": 16,
    "PCM_24": 24,
    "PCM_32": 32,
    "FLOAT": 32,
    "DOUBLE": 64,
    "ALAW": 8,
    "ULAW": 8,
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class WavReadError(Exception):
    """Raised when a WAV header cannot be opened or parsed."""
    pass


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def inspect_wav(path: str | os.PathLike) -> AudioFile:
    """
    Read the format fields from a WAV header.

    ``wave.open`` parses the RIFF chunks and stops at the start of the
    data chunk, so no samples are read here. ``wave`` only understands
    PCM (extensible PCM from Python 3.12 on); anything it rejects is
    re-read with ``soundfile.info`` so that float, A-law and mu-law files
    come back with their real encoding instead of as unreadable.

    Raises:
        WavReadError: If the file is missing, truncated, not RIFF/WAVE,
                      or libsndfile cannot parse it either.
    """
    path = Path(path)
    try:
        with wave.open(str(path), "rb") as wf:
            channels = wf.getnchannels()
            sample_width = wf.getsampwidth()
            sample_rate = wf.getframerate()
    except wave.Error:
        return _inspect_with_soundfile(path)
    except (EOFError, OSError, struct.error) as exc:
        raise WavReadError(f"Failed to open WAV file: {path}: {exc}") from exc

    return AudioFile(
        path=path,
        channels=channels,
        bits_per_sample=sample_width * 8,
        sample_rate=sample_rate,
        encoding=REQUIRED_ENCODING,
    )


def is_supported_format(audio: AudioFile) -> bool:
    """Return True if the header matches mono / 16-bit PCM / 16 kHz."""
    return (
        audio.encoding == REQUIRED_ENCODING
        and audio.channels == REQUIRED_CHANNELS
        and audio.bits_per_sample == REQUIRED_BITS_PER_SAMPLE
        and audio.sample_rate == REQUIRED_SAMPLE_RATE
    )


def validate_wav(path: str | os.PathLike) -> ProcessingResult | None:
    """
    Validate one candidate file.

    Returns:
        None if the file is usable, otherwise a SKIPPED ProcessingResult
        whose reason is UNREADABLE or FORMAT_MISMATCH.
    """
    path = Path(path)
    try:
        audio = inspect_wav(path)
    except WavReadError as exc:
        return ProcessingResult.skipped(path, SkipReason.UNREADABLE, str(exc))

    if not is_supported_format(audio):
        detail = (
            f"expected {REQUIRED_ENCODING}, {REQUIRED_CHANNELS} channel(s), "
            f"{REQUIRED_BITS_PER_SAMPLE}-bit, {REQUIRED_SAMPLE_RATE} Hz; "
            f"got {audio.encoding}, {audio.channels} channel(s), "
            f"{audio.bits_per_sample}-bit, {audio.sample_rate} Hz"
        )
        logger.debug("Format mismatch for %s: %s", path, detail)
        return ProcessingResult.skipped(path, SkipReason.FORMAT_MISMATCH, detail)

    return None


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _inspect_with_soundfile(path: Path) -> AudioFile:
    try:
        info = sf.info(str(path))
    except (sf.SoundFileError, OSError) as exc:
        raise WavReadError(f"Failed to open WAV file: {path}: {exc}") from exc

    if info.format not in ("WAV", "WAVEX"):
        raise WavReadError(f"Failed to open WAV file: {path}: not a RIFF/WAVE file ({info.format})")

    # PCM_16 -> PCM, FLOAT -> FLOAT, IMA_ADPCM -> IMA
    encoding = info.subtype.split("_")[0]
    return AudioFile(
        path=path,
        channels=info.channels,
        bits_per_sample=_SUBTYPE_BITS.get(info.subtype, 0),
        sample_rate=info.samplerate,
        encoding=encoding,
    )
