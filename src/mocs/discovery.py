# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Override file discovery and candidate/existing pairing."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import pathspec

from mocs.config import DEFAULT_EXCLUDE_PATTERNS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OverrideFilePair:
    """Represent one candidate override and its installed counterpart.

    Attributes:
        relative_path: Path relative to the candidate override directory.
        candidate_path: Candidate file path.
        existing_path: Installed override path, present or not.
    """

    relative_path: str
    candidate_path: str
    existing_path: str


def discover_override_files(
    root: Path,
    extension: str = ".php",
    exclude_patterns: Iterable[str] = DEFAULT_EXCLUDE_PATTERNS,
) -> list[str]:
    """List override files beneath a directory.

    Args:
        root: Candidate override directory.
        extension: Override file extension, dot included.
        exclude_patterns: Gitignore-style patterns of paths to skip.

    Returns:
        Sorted OS-native paths relative to ``root``.
    """
    spec = pathspec.GitIgnoreSpec.from_lines(list(exclude_patterns))
    relative_paths: list[str] = []
    skipped = 0
    for path in sorted(root.rglob(f"*{extension}")):
        if path.suffix != extension or not path.is_file():
            continue
        relative = path.relative_to(root)
        if spec.match_file(relative.as_posix()):
            skipped += 1
            continue
        relative_paths.append(str(relative))
    if skipped:
        logger.debug(f"Skipped excluded override files (root={root} count={skipped})")
    return relative_paths


def pair_override_files(
    candidate_dir: str, existing_dir: str, relative_paths: Iterable[str]
) -> list[OverrideFilePair]:
    """Map relative override paths to candidate and installed file paths.

    The installed path is ``existing_dir`` with the relative path appended
    as-is, so ``existing_dir`` must carry its own trailing separator.

    Args:
        candidate_dir: Candidate override directory.
        existing_dir: Installed overrides directory prefix.
        relative_paths: Paths relative to ``candidate_dir``.

    Returns:
        File pairs in input order.
    """
    return [
        OverrideFilePair(
            relative_path=relative_path,
            candidate_path=candidate_dir + os.sep + relative_path,
            existing_path=existing_dir + relative_path,
        )
        for relative_path in relative_paths
    ]
