# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Override checker configuration."""

import codecs
import os
import re
from dataclasses import dataclass

from mocs.scope import SCOPE_STRATEGIES, ScopeStrategy

# Hidden entries and VCS folders, skipped the way Symfony Finder skips them.
DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (".*", "CVS/", "_darcs/", "_svn/")

_EXTENSION_RE = re.compile(r"\.[A-Za-z0-9_-]+")


@dataclass(frozen=True)
class CheckerConfig:
    """Describe how override files are discovered and read.

    Attributes:
        extension: Single-segment override file extension, dot included.
        scope_strategy: Function-body tracking used for property extraction.
        exclude_patterns: Gitignore-style patterns of skipped paths.
        encoding: Text encoding of override files.

    Raises:
        ValueError: If any value is invalid.
    """

    extension: str = ".php"
    scope_strategy: ScopeStrategy = "next_brace"
    exclude_patterns: tuple[str, ...] = DEFAULT_EXCLUDE_PATTERNS
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if not _EXTENSION_RE.fullmatch(self.extension):
            raise ValueError(
                f"extension must look like '.php' (got {self.extension!r})."
            )
        if self.scope_strategy not in SCOPE_STRATEGIES:
            raise ValueError(
                f"scope_strategy must be one of {', '.join(SCOPE_STRATEGIES)} "
                f"(got {self.scope_strategy!r})."
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError as exc:
            raise ValueError(f"Unknown encoding: {self.encoding}") from exc


def validate_override_dir(override_dir: str) -> str:
    """Check that an override directory prefix ends with a path separator.

    Existing override paths are built by appending relative file paths to
    this prefix, so the separator has to be part of it.

    Args:
        override_dir: Installed overrides directory prefix.

    Returns:
        The unchanged prefix.

    Raises:
        ValueError: If the prefix is empty or lacks a trailing separator.
    """
    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if not override_dir or override_dir[-1] not in separators:
        raise ValueError(
            f"override_dir must end with a path separator (got {override_dir!r})."
        )
    return override_dir
