# wavvad/audio/__init__.py
# =========================
# Local File Handling (wav-files-vad-api)
#
# Responsibility:
#   - WAV header validation (mono / 16-bit / 16 kHz)
#   - Mirroring input paths under the output root
#
# Public API:
#   - validate_wav()       : classify a candidate file
#   - prepare_output_dir() : mirrored output location, parents created

from wavvad.audio.wav_validator import (  # noqa: F401
    WavReadError,
    inspect_wav,
    validate_wav,
)
from wavvad.audio.path_mirror import (  # noqa: F401
    OutputPathError,
    mirror_output_dir,
    prepare_output_dir,
    prepare_output_root,
)
