"""
wavvad/audio/path_mirror.py
============================
Output Path Mirroring (wav-files-vad-api)

Responsibility:
    - Map an input file to its location under the output root, keeping
      the directory layout of the input tree
    - Create the parent directories of that location before the VAD
      service is asked to write there
    - Prepare the output root itself at startup

For ``<input>/a/b/x.wav`` the mirrored location is ``<output>/a/b/x.wav``.
That path is handed to the VAD service as its ``output_dir``; the service
creates it and writes its artefacts inside (e.g. ``<output>/a/b/x.wav/x``).
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger("wavvad.audio.path_mirror")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class OutputPathError(Exception):
    """Raised when an output directory cannot be created or used."""

    def __init__(self, path: Path, message: str):
        self.path = path
        self.message = message
        super().__init__(message)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def prepare_output_root(output_root: str | os.PathLike) -> Path:
    """
    Create the output root (and parents) and return its absolute path.

    Raises:
        OutputPathError: If the path exists but is not a directory, or
                         cannot be created (permissions, disk full).
    """
    root = Path(output_root)
    try:
        root.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputPathError(
            root, f"Failed to create output directory: {root}: {exc}"
        ) from exc

    # mkdir(exist_ok=True) still raises for a file, but a symlink to a
    # file would slip through.
    if not root.is_dir():
        raise OutputPathError(root, f"Output path is not a directory: {root}")

    return root.resolve()


def mirror_output_dir(
    input_root: str | os.PathLike,
    file_path: str | os.PathLike,
    output_root: str | os.PathLike,
) -> Path:
    """
    Compute the mirrored output location for ``file_path``.

    Raises:
        ValueError: If ``file_path`` is not under ``input_root``.
    """
    relative = Path(file_path).relative_to(Path(input_root))
    return Path(output_root) / relative


def prepare_output_dir(
    input_root: str | os.PathLike,
    file_path: str | os.PathLike,
    output_root: str | os.PathLike,
) -> Path:
    """
    Compute the mirrored output location and create its parent directories.

    Raises:
        OutputPathError: If a parent directory cannot be created.
    """
    output_path = mirror_output_dir(input_root, file_path, output_root)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputPathError(
            output_path,
            f"Failed to create output directory for: {output_path}: {exc}",
        ) from exc

    return output_path


def output_exists(output_path: Path, file_path: str | os.PathLike) -> bool:
    """
    Return True if the VAD service already produced output for this file.

    Raises:
        OutputPathError: If the output location cannot be inspected
                         (e.g. a parent directory is not searchable).
    """
    target = output_path / Path(file_path).stem
    try:
        return target.exists()
    except OSError as exc:
        raise OutputPathError(
            output_path, f"Failed to check existing output: {target}: {exc}"
        ) from exc
