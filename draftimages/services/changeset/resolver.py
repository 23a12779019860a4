"""List the files a push touched using ``git diff``."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterable

from draftimages.core.errors import ChangeSetError
from draftimages.core.logger import get_logger

LOGGER = get_logger()

GIT_EXECUTABLE = "git"
DEFAULT_EXTENSION = ".jsx"


def list_changed_files(before: str, current: str, *, cwd: str | Path | None = None) -> list[str]:
    """Return paths that differ between ``before`` and ``current``, in git's order.

    Raises:
        ChangeSetError: If git cannot be run or exits non-zero, e.g. when
            ``before`` is missing from a shallow clone.
    """

    command = [GIT_EXECUTABLE, "diff", before, current, "--name-only"]
    try:
        completed = subprocess.run(
            command,
            cwd=str(cwd) if cwd is not None else None,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
        )
    except OSError as exc:
        raise ChangeSetError(f"Could not run git: {exc}") from exc
    if completed.returncode != 0:
        stderr = (completed.stderr or "").strip()
        raise ChangeSetError(
            f"git diff {before} {current} failed with exit code {completed.returncode}: {stderr}"
        )
    return [line for line in completed.stdout.split("\n") if line]


def filter_by_extension(paths: Iterable[str], extension: str = DEFAULT_EXTENSION) -> list[str]:
    """Keep paths ending with ``extension``, preserving order."""

    return [path for path in paths if path.endswith(extension)]


def resolve_changed_files(
    before: str,
    current: str,
    *,
    extension: str = DEFAULT_EXTENSION,
    cwd: str | Path | None = None,
    logger: logging.Logger | None = None,
) -> list[str]:
    """List changed files and keep those with the tracked extension."""

    log = logger or LOGGER
    changed = list_changed_files(before, current, cwd=cwd)
    selected = filter_by_extension(changed, extension)
    log.info(
        "changeset.resolved before=%s current=%s changed=%d selected=%d",
        before,
        current,
        len(changed),
        len(selected),
    )
    for path in selected:
        log.info("changeset.file path=%s", path)
    return selected
