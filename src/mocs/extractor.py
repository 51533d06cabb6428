# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Extract class member names from override source tokens."""

import logging
from dataclasses import dataclass
from typing import Sequence

from mocs.lexer import Token, tokenize
from mocs.scope import ScopeStrategy, ScopeTracker, build_scope_tracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    """Represent the member names declared by one override file.

    Attributes:
        methods: Method names in declaration order.
        properties: Property names including the ``$`` sigil.
        constants: Class constant names.
    """

    methods: tuple[str, ...]
    properties: tuple[str, ...]
    constants: tuple[str, ...]


def extract_members(
    source: str, scope_strategy: ScopeStrategy = "next_brace"
) -> ExtractionResult:
    """Tokenize source once and extract all three member lists.

    Args:
        source: Override file content.
        scope_strategy: Function-body tracking used for properties.

    Returns:
        Extracted member names.
    """
    tokens = tokenize(source)
    result = ExtractionResult(
        methods=tuple(extract_methods(tokens)),
        properties=tuple(
            extract_properties(tokens, build_scope_tracker(scope_strategy))
        ),
        constants=tuple(extract_constants(tokens)),
    )
    logger.debug(
        "Extracted override members",
        extra={
            "tokens": len(tokens),
            "methods": len(result.methods),
            "properties": len(result.properties),
            "constants": len(result.constants),
        },
    )
    return result


def extract_methods(tokens: Sequence[Token]) -> list[str]:
    """Collect the name following each ``function`` keyword.

    Closures and arrow functions have no name and are skipped, as are
    ``use function`` imports.
    """
    methods: list[str] = []
    previous: Token | None = None
    for index, token in enumerate(tokens):
        if token.is_ignorable:
            continue
        imported = previous is not None and previous.is_keyword("use")
        previous = token
        if not token.is_keyword("function") or imported:
            continue
        name = _declared_name(tokens, index)
        if name is not None:
            methods.append(name)
    return methods


def extract_constants(tokens: Sequence[Token]) -> list[str]:
    """Collect constant names declared with ``const`` after the first class."""
    constants: list[str] = []
    in_class = False
    for index, token in enumerate(tokens):
        if token.is_keyword("class"):
            in_class = True
        if in_class and token.is_keyword("const"):
            name = _first_identifier_after(tokens, index)
            if name is not None:
                constants.append(name)
    return constants


def extract_properties(
    tokens: Sequence[Token], scope_tracker: ScopeTracker | None = None
) -> list[str]:
    """Collect variables that appear in a class but outside any function.

    Args:
        tokens: Token stream of one file.
        scope_tracker: Fresh tracker; the next-brace heuristic when omitted.

    Returns:
        Property names with their ``$`` sigil.
    """
    tracker = scope_tracker if scope_tracker is not None else build_scope_tracker()
    properties: list[str] = []
    for token in tokens:
        tracker.feed(token)
        if token.kind == "variable" and tracker.in_class and not tracker.in_function:
            properties.append(token.text)
    return properties


def _declared_name(tokens: Sequence[Token], keyword_index: int) -> str | None:
    for index in range(keyword_index + 1, len(tokens)):
        token = tokens[index]
        if token.is_ignorable or token.is_punctuation("&"):
            continue
        # Declarations are never namespace-qualified.
        if token.kind == "identifier" and "\\" not in token.text:
            return token.text
        return None
    return None


def _first_identifier_after(tokens: Sequence[Token], keyword_index: int) -> str | None:
    for index in range(keyword_index + 1, len(tokens)):
        if tokens[index].kind == "identifier":
            return tokens[index].text
    return None
