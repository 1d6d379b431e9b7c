"""
wavvad/reporter.py
===================
Run Reporter (wav-files-vad-api)

Responsibility:
    - Emit one line per file that was not processed, naming the file and
      the reason (format mismatch, open failure, non-200, network error)
    - Print the single final summary line

Per-file lines go through the ``wavvad.reporter`` logger and may
interleave in any order across workers. The summary line is written to
stdout once, after every worker has finished.
"""

import logging
import sys
from typing import TextIO

from wavvad.models import ProcessingResult, ResultStatus, SkipReason, Summary

logger = logging.getLogger("wavvad.reporter")


def format_result(result: ProcessingResult) -> str | None:
    """Return the report line for a result, or None for processed files."""
    if result.status is ResultStatus.PROCESSED:
        return None

    path = result.path
    reason = result.reason

    if reason is SkipReason.FORMAT_MISMATCH:
        return f"Skipping invalid WAV file: {path}"
    if reason is SkipReason.OUTPUT_EXISTS:
        return f"Skipping already processed file: {path}"
    if reason is SkipReason.HTTP_STATUS:
        return f"VAD failed for {path}: API returned status {result.status_code}"
    if reason is SkipReason.NETWORK_ERROR:
        return f"VAD failed for {path}: {result.detail}"
    # UNREADABLE, FILESYSTEM_ERROR, INTERNAL_ERROR
    return f"Error processing {path}: {result.detail}"


def format_summary(summary: Summary) -> str:
    return (
        f"VAD complete: {summary.processed} files processed, "
        f"{summary.skipped} skipped."
    )


class Reporter:
    """Reports per-file outcomes and the final tally."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def report(self, result: ProcessingResult) -> None:
        line = format_result(result)
        if line is None:
            logger.debug("Processed %s via %s", result.path, result.endpoint)
            return

        if result.reason is SkipReason.OUTPUT_EXISTS:
            logger.info(line)
        else:
            logger.warning(line)

    def finish(self, summary: Summary) -> None:
        logger.info(
            "Breakdown: %d processed, %d invalid, %d already processed, %d failed.",
            summary.processed,
            summary.invalid,
            summary.already_processed,
            summary.failed,
        )
        stream = self._stream or sys.stdout
        print(format_summary(summary), file=stream, flush=True)
