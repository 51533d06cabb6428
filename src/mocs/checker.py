# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Module override conflict checking."""

import logging
from dataclasses import dataclass
from pathlib import Path

from mocs.config import CheckerConfig, validate_override_dir
from mocs.conflict import MemberCollision, find_conflicts, list_collisions
from mocs.discovery import discover_override_files, pair_override_files
from mocs.extractor import ExtractionResult, extract_members
from mocs.translator import PositionalTranslator, Translator

logger = logging.getLogger(__name__)

CONFLICT_MESSAGE = "The override file %1$s conflicts with an existing override in %2$s."
MESSAGE_DOMAIN = "Admin.Modules.Notification"


class OverrideScanError(RuntimeError):
    """Represent an override scan aborted by an unreadable file."""


@dataclass(frozen=True)
class OverrideConflict:
    """Represent one candidate override colliding with an installed one.

    Attributes:
        candidate_path: Candidate override file path.
        existing_path: Installed override file path.
        message: Rendered user-facing message.
        collisions: Shared member names, for reporting only.
    """

    candidate_path: str
    existing_path: str
    message: str
    collisions: tuple[MemberCollision, ...]


@dataclass(frozen=True)
class ScanResult:
    """Represent the outcome of one module override scan.

    Attributes:
        files_scanned: Override files found in the candidate directory.
        pairs_compared: Files that had an installed counterpart.
        conflicts: Conflicts in discovery order.
    """

    files_scanned: int
    pairs_compared: int
    conflicts: tuple[OverrideConflict, ...]

    @property
    def has_conflict(self) -> bool:
        return bool(self.conflicts)

    @property
    def errors(self) -> list[str]:
        return [conflict.message for conflict in self.conflicts]


class ModuleOverrideChecker:
    """Check a module's overrides against the installed overrides."""

    def __init__(
        self,
        translator: Translator,
        override_dir: str,
        config: CheckerConfig | None = None,
    ) -> None:
        """Initialize the checker.

        Args:
            translator: Renders conflict messages.
            override_dir: Installed overrides directory, trailing separator
                included.
            config: Discovery and extraction settings.

        Raises:
            ValueError: If ``override_dir`` lacks a trailing separator.
        """
        self._translator = translator
        self._override_dir = validate_override_dir(override_dir)
        self._config = config or CheckerConfig()
        self._errors: list[str] = []

    def has_override_conflict(self, module_override_path: str | Path) -> bool:
        """Scan a module override directory and keep its messages.

        Messages from any earlier scan are discarded first.

        Args:
            module_override_path: Candidate module override directory.

        Returns:
            True when at least one override file conflicts.

        Raises:
            OverrideScanError: If an override file cannot be read.
        """
        self._errors = []
        result = self.scan(module_override_path)
        self._errors = result.errors
        return result.has_conflict

    def get_errors(self) -> list[str]:
        """Return the conflict messages of the most recent scan."""
        return list(self._errors)

    def scan(self, module_override_path: str | Path) -> ScanResult:
        """Compare each candidate override with its installed counterpart.

        Args:
            module_override_path: Candidate module override directory.

        Returns:
            Scan outcome. A missing directory or one without override files
            yields an empty result.

        Raises:
            OverrideScanError: If an override file cannot be read.
        """
        candidate_dir = str(module_override_path)
        root = Path(candidate_dir)
        if not root.is_dir():
            logger.debug(f"No module override directory (path={candidate_dir})")
            return ScanResult(files_scanned=0, pairs_compared=0, conflicts=())

        relative_paths = discover_override_files(
            root,
            extension=self._config.extension,
            exclude_patterns=self._config.exclude_patterns,
        )
        if not relative_paths:
            logger.debug(f"Module has no override files (path={candidate_dir})")
            return ScanResult(files_scanned=0, pairs_compared=0, conflicts=())

        conflicts: list[OverrideConflict] = []
        pairs_compared = 0
        for pair in pair_override_files(
            candidate_dir, self._override_dir, relative_paths
        ):
            if not Path(pair.existing_path).exists():
                continue
            candidate = self._extract(pair.candidate_path)
            existing = self._extract(pair.existing_path)
            pairs_compared += 1
            if not find_conflicts(candidate, existing):
                continue
            collisions = tuple(list_collisions(candidate, existing))
            logger.debug(
                "Override conflict found",
                extra={
                    "candidate_path": pair.candidate_path,
                    "existing_path": pair.existing_path,
                    "collisions": [c.name for c in collisions],
                },
            )
            conflicts.append(
                OverrideConflict(
                    candidate_path=pair.candidate_path,
                    existing_path=pair.existing_path,
                    message=self._translator.trans(
                        CONFLICT_MESSAGE,
                        [pair.candidate_path, pair.existing_path],
                        MESSAGE_DOMAIN,
                    ),
                    collisions=collisions,
                )
            )

        logger.info(
            f"Override scan completed (path={candidate_dir} files={len(relative_paths)} "
            f"compared={pairs_compared} conflicts={len(conflicts)})"
        )
        return ScanResult(
            files_scanned=len(relative_paths),
            pairs_compared=pairs_compared,
            conflicts=tuple(conflicts),
        )

    def _extract(self, path: str) -> ExtractionResult:
        try:
            content = Path(path).read_text(
                encoding=self._config.encoding, errors="surrogateescape"
            )
        except OSError as exc:
            logger.warning(f"Failed reading override file (path={path} error={exc})")
            raise OverrideScanError(f"Cannot read override file {path}: {exc}") from exc
        return extract_members(content, scope_strategy=self._config.scope_strategy)


def scan_overrides(
    candidate_override_dir: str | Path,
    existing_override_dir: str,
    translator: Translator | None = None,
    config: CheckerConfig | None = None,
) -> ScanResult:
    """Scan candidate overrides against an installed overrides directory.

    Args:
        candidate_override_dir: Candidate module override directory.
        existing_override_dir: Installed overrides directory, trailing
            separator included.
        translator: Message renderer; positional formatting when omitted.
        config: Discovery and extraction settings.

    Returns:
        Scan outcome owned by the caller.

    Raises:
        ValueError: If ``existing_override_dir`` lacks a trailing separator.
        OverrideScanError: If an override file cannot be read.
    """
    checker = ModuleOverrideChecker(
        translator=translator or PositionalTranslator(),
        override_dir=existing_override_dir,
        config=config,
    )
    return checker.scan(candidate_override_dir)
