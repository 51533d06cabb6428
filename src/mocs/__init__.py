# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Public import surface for the module override conflict scanner."""

from mocs.checker import (
    ModuleOverrideChecker,
    OverrideConflict,
    OverrideScanError,
    ScanResult,
    scan_overrides,
)
from mocs.config import CheckerConfig
from mocs.conflict import MemberCollision, find_conflicts, list_collisions
from mocs.extractor import ExtractionResult, extract_members
from mocs.lexer import Token, tokenize
from mocs.translator import IdentityTranslator, PositionalTranslator, Translator

__all__ = [
    "CheckerConfig",
    "ExtractionResult",
    "IdentityTranslator",
    "MemberCollision",
    "ModuleOverrideChecker",
    "OverrideConflict",
    "OverrideScanError",
    "PositionalTranslator",
    "ScanResult",
    "Token",
    "Translator",
    "extract_members",
    "find_conflicts",
    "list_collisions",
    "scan_overrides",
    "tokenize",
]
