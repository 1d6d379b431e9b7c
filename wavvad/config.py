"""
wavvad/config.py
=================
Run Configuration (wav-files-vad-api)

Responsibility:
    - Load environment defaults from .env (VAD_ADDR_API, VAD_MODEL,
      VAD_REQUEST_TIMEOUT, LOG_LEVEL)
    - Parse the comma-separated endpoint list
    - Validate everything once at startup and freeze it into VadConfig

Configuration is read exactly once and passed explicitly to the
dispatcher and API clients. Nothing here is mutated after startup.

This module does NOT:
    - Touch the filesystem beyond checking the input directory
    - Create the output directory (see wavvad.audio.path_mirror)
    - Issue any HTTP request
"""

import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger("wavvad.config")


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

DEFAULT_REQUEST_TIMEOUT: float = 120.0  # seconds, one VAD job per request
DEFAULT_LOG_LEVEL: str = "INFO"

ENV_ADDR_API = "VAD_ADDR_API"
ENV_MODEL = "VAD_MODEL"
ENV_REQUEST_TIMEOUT = "VAD_REQUEST_TIMEOUT"
ENV_LOG_LEVEL = "LOG_LEVEL"

_ALLOWED_SCHEMES: set[str] = {"http", "https"}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigError(Exception):
    """Raised when the run configuration is invalid."""
    pass


# ---------------------------------------------------------------------------
# Config container
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VadConfig:
    """
    Immutable configuration for a single run.

    Attributes:
        input_dir:  Absolute path of the directory scanned for WAV files.
        output_dir: Output root; the mirrored tree is created beneath it.
        endpoints:  VAD service URLs. Its length is the worker count.
        model:      Optional model name forwarded in every request body.
        timeout:    Per-request HTTP timeout in seconds.
    """

    input_dir: Path
    output_dir: Path
    endpoints: tuple[str, ...]
    model: str | None = None
    timeout: float = DEFAULT_REQUEST_TIMEOUT

    @property
    def worker_count(self) -> int:
        return len(self.endpoints)


# ---------------------------------------------------------------------------
# Environment defaults
# ---------------------------------------------------------------------------


def env_addr_api() -> str | None:
    """Return VAD_ADDR_API from the environment, or None if unset/blank."""
    value = os.environ.get(ENV_ADDR_API, "").strip()
    return value or None


def env_model() -> str | None:
    value = os.environ.get(ENV_MODEL, "").strip()
    return value or None


def env_timeout() -> float:
    """
    Return VAD_REQUEST_TIMEOUT as a float, falling back to the default.

    Raises:
        ConfigError: If the variable is set but not a number.
    """
    raw = os.environ.get(ENV_REQUEST_TIMEOUT, "").strip()
    if not raw:
        return DEFAULT_REQUEST_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(
            f"{ENV_REQUEST_TIMEOUT} must be a number of seconds, got '{raw}'."
        )


def env_log_level() -> str:
    return os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def parse_endpoints(addr_api: str | None) -> tuple[str, ...]:
    """
    Split a comma-separated list of API addresses.

    Blank entries (e.g. a trailing comma) are dropped. Every remaining
    entry must be an absolute http(s) URL.

    Raises:
        ConfigError: If no endpoint remains or an entry is not a URL.
    """
    if not addr_api:
        raise ConfigError(
            "At least one API address must be provided via --addr-api "
            f"or {ENV_ADDR_API}."
        )

    endpoints = tuple(part.strip() for part in addr_api.split(",") if part.strip())
    if not endpoints:
        raise ConfigError(
            "At least one API address must be provided via --addr-api "
            f"or {ENV_ADDR_API}."
        )

    for endpoint in endpoints:
        parsed = urlparse(endpoint)
        if parsed.scheme not in _ALLOWED_SCHEMES or not parsed.netloc:
            raise ConfigError(
                f"Invalid API address '{endpoint}': expected an http(s) URL."
            )

    return endpoints


def validate_timeout(timeout: float) -> float:
    """
    Check a per-request timeout in seconds.

    Raises:
        ConfigError: If the value is zero, negative, NaN or infinite.
    """
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigError(
            f"Request timeout must be a positive number of seconds, got {timeout}."
        )
    return float(timeout)


def build_config(
    input_dir: str | os.PathLike,
    output_dir: str | os.PathLike,
    addr_api: str | None,
    model: str | None = None,
    timeout: float | None = None,
) -> VadConfig:
    """
    Validate raw settings and build the frozen run configuration.

    The input directory is resolved to an absolute path so that the
    paths sent to the VAD service are unambiguous. The output directory
    is NOT created here.

    Raises:
        ConfigError: On any invalid setting.
    """
    endpoints = parse_endpoints(addr_api)

    if timeout is None:
        timeout = env_timeout()
    timeout = validate_timeout(timeout)

    input_path = Path(input_dir)
    if not input_path.is_dir():
        raise ConfigError(f"Input directory does not exist: {input_path}")

    config = VadConfig(
        input_dir=input_path.resolve(),
        output_dir=Path(output_dir),
        endpoints=endpoints,
        model=model or None,
        timeout=float(timeout),
    )

    logger.debug(
        "Configuration: input=%s output=%s endpoints=%d model=%s timeout=%.1fs",
        config.input_dir, config.output_dir, config.worker_count,
        config.model, config.timeout,
    )
    return config
