# wavvad/__init__.py
# ===================
# wav-files-vad-api
#
# Walk a directory tree for WAV files, keep the ones that are mono,
# 16-bit PCM, 16 kHz, and send each to one of several external VAD
# services. Output is written by the services into a mirrored tree.
#
# Public API:
#   - build_config() : validated, frozen run configuration
#   - run()          : process the whole input tree, return a Summary

__version__ = "0.1.0"

from wavvad.config import VadConfig, ConfigError, build_config  # noqa: F401, E402
from wavvad.dispatcher import run  # noqa: F401, E402
from wavvad.models import Summary  # noqa: F401, E402

__all__ = [
    "VadConfig",
    "ConfigError",
    "build_config",
    "run",
    "Summary",
]
