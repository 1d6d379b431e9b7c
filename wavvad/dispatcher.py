"""
wavvad/dispatcher.py
=====================
Work Dispatcher (wav-files-vad-api)

Responsibility:
    Run one full VAD pass over an input tree:
        1. Prepare the output root (the only fatal filesystem step)
        2. Walk the input tree for *.wav files (case-insensitive)
        3. Validate each header; report and count invalid files
        4. Skip files whose output already exists
        5. Partition the remaining files round-robin across endpoints
        6. Process the partitions in parallel, one worker per endpoint
        7. Merge per-worker tallies and print the summary line

Concurrency:
    The pool size is exactly the number of endpoints. Each worker owns
    one endpoint and one VadApiClient and handles its partition
    sequentially, so at most one request is in flight per endpoint.
    Workers keep their own Summary; the tallies are merged after the
    pool drains.

Failure isolation:
    Every per-file failure (bad header, directory creation, non-200,
    network error) becomes a ProcessingResult. Nothing raised for one
    file can stop the others.
"""

import dataclasses
import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable

from wavvad.api.client import VadApiClient, VadApiError
from wavvad.audio.path_mirror import (
    OutputPathError,
    mirror_output_dir,
    output_exists,
    prepare_output_dir,
    prepare_output_root,
)
from wavvad.audio.wav_validator import validate_wav
from wavvad.config import VadConfig
from wavvad.models import ProcessingRequest, ProcessingResult, SkipReason, Summary
from wavvad.reporter import Reporter

logger = logging.getLogger("wavvad.dispatcher")

WAV_EXTENSION = ".wav"

ClientFactory = Callable[[str, float], VadApiClient]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def run(
    config: VadConfig,
    reporter: Reporter | None = None,
    client_factory: ClientFactory = VadApiClient,
) -> Summary:
    """
    Process every WAV file under ``config.input_dir``.

    Args:
        config:         Validated run configuration.
        reporter:       Destination for per-file lines and the summary.
        client_factory: Builds one client per endpoint as
                        ``client_factory(endpoint, timeout)``.

    Returns:
        The merged Summary for the run.

    Raises:
        OutputPathError: If the output root cannot be prepared. Raised
                         before any file is touched.
    """
    reporter = reporter or Reporter()

    output_root = prepare_output_root(config.output_dir)
    config = dataclasses.replace(config, output_dir=output_root)

    pending, summary = collect_pending(config, reporter)

    lanes = partition_round_robin(pending, config.endpoints)
    logger.info(
        "Dispatching %d file(s) across %d endpoint(s).",
        len(pending), config.worker_count,
    )

    with ThreadPoolExecutor(max_workers=config.worker_count) as executor:
        futures = {
            executor.submit(
                _run_lane, endpoint, files, config, reporter, client_factory
            ): endpoint
            for endpoint, files in zip(config.endpoints, lanes)
        }
        for future in as_completed(futures):
            summary = summary.merge(future.result())

    reporter.finish(summary)
    return summary


def discover_wav_files(input_dir: str | os.PathLike) -> list[Path]:
    """
    Recursively list regular files whose name ends in ``.wav``.

    Matching is case-insensitive (``x.WAV`` is included). Results are
    sorted so partitioning is deterministic for a given tree.
    """
    found: list[Path] = []
    for root, _dirs, files in os.walk(input_dir):
        for fname in files:
            if not fname.lower().endswith(WAV_EXTENSION):
                continue
            path = Path(root) / fname
            if path.is_file():
                found.append(path)

    found.sort()
    logger.info("Found %d WAV candidate(s) under %s.", len(found), input_dir)
    return found


def collect_pending(config: VadConfig, reporter: Reporter) -> tuple[list[Path], Summary]:
    """
    Walk, validate and de-duplicate the input tree.

    Returns:
        (files that need a VAD call, Summary of the files skipped here)
    """
    summary = Summary()
    pending: list[Path] = []

    for path in discover_wav_files(config.input_dir):
        invalid = validate_wav(path)
        if invalid is not None:
            reporter.report(invalid)
            summary.record(invalid)
            continue

        output_path = mirror_output_dir(config.input_dir, path, config.output_dir)
        try:
            done = output_exists(output_path, path)
        except OutputPathError as exc:
            broken = ProcessingResult.failed(path, SkipReason.FILESYSTEM_ERROR, exc.message)
            reporter.report(broken)
            summary.record(broken)
            continue

        if done:
            existing = ProcessingResult.skipped(path, SkipReason.OUTPUT_EXISTS)
            reporter.report(existing)
            summary.record(existing)
            continue

        pending.append(path)

    return pending, summary


def partition_round_robin(files: list[Path], endpoints: tuple[str, ...]) -> list[list[Path]]:
    """
    Assign file ``i`` to endpoint ``i % len(endpoints)``.

    Every endpoint receives either floor(K/M) or ceil(K/M) files.
    """
    if not endpoints:
        raise ValueError("At least one endpoint is required.")

    lanes: list[list[Path]] = [[] for _ in endpoints]
    for index, path in enumerate(files):
        lanes[index % len(endpoints)].append(path)
    return lanes


def process_file(client: VadApiClient, config: VadConfig, path: Path) -> ProcessingResult:
    """
    Prepare the output location for one file and submit it to the client.

    Never raises for expected per-file failures.
    """
    try:
        output_path = prepare_output_dir(config.input_dir, path, config.output_dir)
    except OutputPathError as exc:
        return ProcessingResult.failed(path, SkipReason.FILESYSTEM_ERROR, exc.message)

    request = ProcessingRequest(
        input_file=str(path),
        output_dir=str(output_path),
        model=config.model,
    )

    try:
        client.submit(request)
    except VadApiError as exc:
        if exc.status_code is not None:
            return ProcessingResult.failed(
                path,
                SkipReason.HTTP_STATUS,
                exc.message,
                endpoint=client.endpoint,
                status_code=exc.status_code,
            )
        return ProcessingResult.failed(
            path, SkipReason.NETWORK_ERROR, exc.message, endpoint=client.endpoint,
        )

    return ProcessingResult.processed(path, client.endpoint)


# ---------------------------------------------------------------------------
# Worker lane
# ---------------------------------------------------------------------------


def _run_lane(
    endpoint: str,
    files: list[Path],
    config: VadConfig,
    reporter: Reporter,
    client_factory: ClientFactory,
) -> Summary:
    """Process one endpoint's partition sequentially and return its tally."""
    summary = Summary()
    if not files:
        return summary

    logger.debug("Worker for %s starting with %d file(s).", endpoint, len(files))
    client = client_factory(endpoint, config.timeout)
    try:
        for path in files:
            try:
                result = process_file(client, config, path)
            except Exception as exc:
                logger.debug("Unexpected error while processing %s", path, exc_info=True)
                result = ProcessingResult.failed(path, SkipReason.INTERNAL_ERROR, str(exc))
            reporter.report(result)
            summary.record(result)
    finally:
        client.close()

    logger.debug(
        "Worker for %s finished: %d processed, %d failed.",
        endpoint, summary.processed, summary.failed,
    )
    return summary
