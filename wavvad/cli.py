"""
wavvad/cli.py
==============
Command-Line Interface (wav-files-vad-api)

Usage:
    wav-files-vad-api INPUT_DIR OUTPUT_DIR --addr-api URL[,URL...] [--model NAME]

Exit status:
    0  run completed (even if some files were skipped or failed)
    1  fatal run error (input directory missing, output directory unusable)
    2  invalid arguments (argparse convention)
"""

import argparse
import logging
import sys

from wavvad import __version__
from wavvad import dispatcher
from wavvad.audio.path_mirror import OutputPathError
from wavvad.config import (
    ENV_ADDR_API,
    ENV_MODEL,
    ENV_REQUEST_TIMEOUT,
    ConfigError,
    build_config,
    env_addr_api,
    env_log_level,
    env_model,
    env_timeout,
    parse_endpoints,
    validate_timeout,
)

logger = logging.getLogger("wavvad.cli")

LOG_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Connection-pool chatter from requests is not useful per file.
_NOISY_LOGGERS = ("urllib3", "urllib3.connectionpool")

# Per-file skip/failure lines stay visible at any --log-level.
REPORTER_LOGGER = "wavvad.reporter"


def configure_logging(level: str) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger(REPORTER_LOGGER).setLevel(min(numeric_level, logging.INFO))


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="wav-files-vad-api",
        description="Recursively extract speech from WAV files using an external VAD API.",
    )
    ap.add_argument("input_dir", help="Input directory containing WAV files (processed recursively).")
    ap.add_argument("output_dir", help="Output directory for speech files (created if absent).")
    ap.add_argument(
        "--addr-api",
        default=env_addr_api(),
        help=f"Comma-separated list of API server addresses (default: ${ENV_ADDR_API}).",
    )
    ap.add_argument(
        "--model",
        default=env_model(),
        help=f"Model to use for VAD, forwarded in every request (default: ${ENV_MODEL}).",
    )
    ap.add_argument(
        "--timeout",
        type=float,
        default=None,
        help=f"Per-request timeout in seconds (default: ${ENV_REQUEST_TIMEOUT} or 120).",
    )
    ap.add_argument(
        "--log-level",
        default=env_log_level(),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging verbosity (default: $LOG_LEVEL or INFO).",
    )
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    configure_logging(args.log_level)

    # Argument-level problems exit with status 2 before anything runs.
    try:
        parse_endpoints(args.addr_api)
        timeout = validate_timeout(
            args.timeout if args.timeout is not None else env_timeout()
        )
    except ConfigError as exc:
        ap.error(str(exc))

    try:
        config = build_config(
            args.input_dir,
            args.output_dir,
            addr_api=args.addr_api,
            model=args.model,
            timeout=timeout,
        )
        dispatcher.run(config)
    except (ConfigError, OutputPathError) as exc:
        logger.error("%s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
