"""
wavvad/models.py
=================
Data Model (wav-files-vad-api)

Responsibility:
    - Define the per-file structures passed between pipeline stages
      (AudioFile, ProcessingRequest, ProcessingResult)
    - Define the Summary tally that the dispatcher merges across workers

Nothing here outlives a single run; nothing is persisted.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class ResultStatus(str, Enum):
    """Outcome of processing one file."""

    PROCESSED = "processed"
    SKIPPED = "skipped"
    FAILED = "failed"


class SkipReason(str, Enum):
    """Why a file was not processed."""

    FORMAT_MISMATCH = "format_mismatch"
    UNREADABLE = "unreadable"
    OUTPUT_EXISTS = "output_exists"
    FILESYSTEM_ERROR = "filesystem_error"
    HTTP_STATUS = "http_status"
    NETWORK_ERROR = "network_error"
    INTERNAL_ERROR = "internal_error"


# ---------------------------------------------------------------------------
# Per-file structures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AudioFile:
    """A discovered WAV file plus the format fields read from its header."""

    path: Path
    channels: int
    bits_per_sample: int
    sample_rate: int
    encoding: str = "PCM"


@dataclass(frozen=True)
class ProcessingRequest:
    """One VAD job as sent to an endpoint."""

    input_file: str
    output_dir: str
    model: str | None = None

    def to_payload(self) -> dict[str, Any]:
        # "model" is always present; null when not configured
        return {
            "input_file": self.input_file,
            "output_dir": self.output_dir,
            "model": self.model,
        }


@dataclass(frozen=True)
class ProcessingResult:
    """
    Outcome for a single file.

    Attributes:
        path:        The input file.
        status:      PROCESSED, SKIPPED or FAILED.
        reason:      Why it was not processed (None when processed).
        detail:      Human-readable error text, if any.
        endpoint:    Endpoint that handled the file, if one was called.
        status_code: HTTP status for HTTP_STATUS failures.
    """

    path: Path
    status: ResultStatus
    reason: SkipReason | None = None
    detail: str = ""
    endpoint: str | None = None
    status_code: int | None = None

    @classmethod
    def processed(cls, path: Path, endpoint: str) -> "ProcessingResult":
        return cls(path=path, status=ResultStatus.PROCESSED, endpoint=endpoint)

    @classmethod
    def skipped(cls, path: Path, reason: SkipReason, detail: str = "") -> "ProcessingResult":
        return cls(path=path, status=ResultStatus.SKIPPED, reason=reason, detail=detail)

    @classmethod
    def failed(
        cls,
        path: Path,
        reason: SkipReason,
        detail: str,
        endpoint: str | None = None,
        status_code: int | None = None,
    ) -> "ProcessingResult":
        return cls(
            path=path,
            status=ResultStatus.FAILED,
            reason=reason,
            detail=detail,
            endpoint=endpoint,
            status_code=status_code,
        )


# ---------------------------------------------------------------------------
# Summary tally
# ---------------------------------------------------------------------------


@dataclass
class Summary:
    """
    Counts for a run (or for one worker lane, before merging).

    ``skipped`` is every file that was not processed: format-invalid,
    unreadable, already processed, and files whose API call or output
    directory preparation failed.
    """

    processed: int = 0
    invalid: int = 0
    already_processed: int = 0
    failed: int = 0

    @property
    def skipped(self) -> int:
        return self.invalid + self.already_processed + self.failed

    @property
    def total(self) -> int:
        return self.processed + self.skipped

    def record(self, result: ProcessingResult) -> None:
        if result.status is ResultStatus.PROCESSED:
            self.processed += 1
        elif result.status is ResultStatus.FAILED:
            self.failed += 1
        elif result.reason is SkipReason.OUTPUT_EXISTS:
            self.already_processed += 1
        else:
            self.invalid += 1

    def merge(self, other: "Summary") -> "Summary":
        """Return a new Summary holding the sum of both tallies."""
        return Summary(
            processed=self.processed + other.processed,
            invalid=self.invalid + other.invalid,
            already_processed=self.already_processed + other.already_processed,
            failed=self.failed + other.failed,
        )
