# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Class and function scope tracking over a token stream."""

from typing import Literal, Protocol

from mocs.lexer import Token

ScopeStrategy = Literal["next_brace", "brace_depth"]

SCOPE_STRATEGIES: tuple[ScopeStrategy, ...] = ("next_brace", "brace_depth")


class ScopeTracker(Protocol):
    """Track whether the current token lies in a class and in a function body."""

    @property
    def in_class(self) -> bool:
        """Return whether the last fed token is inside a class."""

    @property
    def in_function(self) -> bool:
        """Return whether the last fed token is inside a function."""

    def feed(self, token: Token) -> None:
        """Advance the tracker past one token."""


class NextBraceScopeTracker:
    """Approximate function bodies as ``function`` up to the next ``}``.

    The class flag is set by the first ``class`` keyword and never cleared,
    so one class per file is assumed. A nested block inside a method clears
    the function flag early and later method locals are seen as class level.
    """

    def __init__(self) -> None:
        self._in_class = False
        self._in_function = False

    @property
    def in_class(self) -> bool:
        return self._in_class

    @property
    def in_function(self) -> bool:
        return self._in_function

    def feed(self, token: Token) -> None:
        if token.is_keyword("class"):
            self._in_class = True
            self._in_function = False
        if token.is_keyword("function"):
            self._in_function = True
        if token.is_punctuation("}"):
            self._in_function = False


class BraceDepthScopeTracker:
    """Track class and function bodies by balanced brace depth.

    Class bodies are kept on a stack keyed by the depth at which they opened,
    so several classes in one file and code between them are handled. A
    ``;`` before the body brace ends a bodiless (abstract) function.
    """

    def __init__(self) -> None:
        self._depth = 0
        self._class_depths: list[int] = []
        self._function_depth: int | None = None
        self._pending_class = False
        self._pending_function = False
        self._previous: Token | None = None

    @property
    def in_class(self) -> bool:
        return bool(self._class_depths)

    @property
    def in_function(self) -> bool:
        return self._pending_function or self._function_depth is not None

    def feed(self, token: Token) -> None:
        if token.is_ignorable:
            return
        if token.is_keyword("class"):
            # Foo::class is a name lookup, not a declaration.
            if self._previous is None or self._previous.text != "::":
                self._pending_class = True
        elif token.is_keyword("function"):
            if self._function_depth is None:
                self._pending_function = True
        elif token.is_punctuation("{") or token.text == "${":
            self._open_brace()
        elif token.is_punctuation("}"):
            self._close_brace()
        elif token.is_punctuation(";"):
            self._pending_function = False
        self._previous = token

    def _open_brace(self) -> None:
        self._depth += 1
        if self._pending_function:
            self._pending_function = False
            self._function_depth = self._depth
        elif self._pending_class:
            self._pending_class = False
            self._class_depths.append(self._depth)

    def _close_brace(self) -> None:
        if self._function_depth == self._depth:
            self._function_depth = None
        if self._class_depths and self._class_depths[-1] == self._depth:
            self._class_depths.pop()
        self._depth = max(0, self._depth - 1)


def build_scope_tracker(strategy: ScopeStrategy = "next_brace") -> ScopeTracker:
    """Create a fresh scope tracker for one extraction pass.

    Args:
        strategy: ``next_brace`` for the legacy heuristic, ``brace_depth`` for
            balanced brace counting.

    Returns:
        A new tracker instance.

    Raises:
        ValueError: If the strategy is unknown.
    """
    if strategy == "next_brace":
        return NextBraceScopeTracker()
    if strategy == "brace_depth":
        return BraceDepthScopeTracker()
    raise ValueError(
        f"Unsupported scope strategy: {strategy} "
        f"(expected one of {', '.join(SCOPE_STRATEGIES)})"
    )
