# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Lexical scanner for PHP override sources.

The scanner produces a flat token stream with the granularity of PHP's
``token_get_all``. It never raises: unknown characters become punctuation
tokens and unterminated strings or comments run to the end of the input.
"""

import logging
import re
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

TokenKind = Literal[
    "keyword",
    "identifier",
    "variable",
    "punctuation",
    "literal",
    "whitespace",
    "comment",
    "other",
]

IGNORABLE_KINDS: frozenset[str] = frozenset({"whitespace", "comment"})

PHP_KEYWORDS: frozenset[str] = frozenset(
    {
        "__class__",
        "__dir__",
        "__file__",
        "__function__",
        "__halt_compiler",
        "__line__",
        "__method__",
        "__namespace__",
        "__trait__",
        "abstract",
        "and",
        "array",
        "as",
        "break",
        "callable",
        "case",
        "catch",
        "class",
        "clone",
        "const",
        "continue",
        "declare",
        "default",
        "die",
        "do",
        "echo",
        "else",
        "elseif",
        "empty",
        "enddeclare",
        "endfor",
        "endforeach",
        "endif",
        "endswitch",
        "endwhile",
        "eval",
        "exit",
        "extends",
        "final",
        "finally",
        "fn",
        "for",
        "foreach",
        "function",
        "global",
        "goto",
        "if",
        "implements",
        "include",
        "include_once",
        "instanceof",
        "insteadof",
        "interface",
        "isset",
        "list",
        "match",
        "namespace",
        "new",
        "or",
        "print",
        "private",
        "protected",
        "public",
        "readonly",
        "require",
        "require_once",
        "return",
        "static",
        "switch",
        "throw",
        "trait",
        "try",
        "unset",
        "use",
        "var",
        "while",
        "xor",
        "yield",
    }
)

_LABEL = r"[A-Za-z_\x80-\U0010ffff][A-Za-z0-9_\x80-\U0010ffff]*"
_LABEL_RE = re.compile(_LABEL)
_NAME_RE = re.compile(rf"\\?{_LABEL}(?:\\{_LABEL})*")
_VARIABLE_RE = re.compile(rf"\${_LABEL}")
_WHITESPACE_RE = re.compile(r"\s+")
_OPEN_TAG_RE = re.compile(r"<\?php(?:\r\n|\s)?|<\?=|<\?", re.IGNORECASE)
_CLOSE_TAG_RE = re.compile(r"\?>(?:\r?\n)?")
_LINE_COMMENT_RE = re.compile(r"(?://|#)(?:[^\n?]|\?(?!>))*")
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?(?:\*/|\Z)", re.DOTALL)
_SINGLE_QUOTED_RE = re.compile(r"'(?:[^'\\]|\\.)*(?:'|\\?\Z)", re.DOTALL)
_DOUBLE_QUOTED_RE = re.compile(r'"(?:[^"\\]|\\.)*(?:"|\\?\Z)', re.DOTALL)
_BACKTICK_RE = re.compile(r"`(?:[^`\\]|\\.)*(?:`|\\?\Z)", re.DOTALL)
_HEREDOC_START_RE = re.compile(rf"<<<[ \t]*([\"']?)({_LABEL})\1\r?\n")
_NUMBER_RE = re.compile(
    r"0[xX][0-9a-fA-F_]+"
    r"|0[bB][01_]+"
    r"|0[oO][0-7_]+"
    r"|(?:\d[\d_]*)?\.\d[\d_]*(?:[eE][+-]?\d+)?"
    r"|\d[\d_]*(?:\.(?:\d[\d_]*)?)?(?:[eE][+-]?\d+)?"
)
_OPERATORS = (
    "<<=", ">>=", "**=", "...", "<=>", "===", "!==", "??=", "?->",
    "->", "=>", "::", "++", "--", "==", "!=", "<>", "<=", ">=", "&&",
    "||", "??", "+=", "-=", "*=", "/=", ".=", "%=", "&=", "|=", "^=",
    "<<", ">>", "**",
)  # fmt: skip
_OPERATOR_RE = re.compile(
    "|".join(re.escape(op) for op in sorted(_OPERATORS, key=len, reverse=True))
)

# Name contexts in which the following label is a name, never a keyword.
_NAME_CONTEXT_KEYWORDS: frozenset[str] = frozenset({"function", "const"})
_MEMBER_OPERATORS: frozenset[str] = frozenset({"->", "?->"})


@dataclass(frozen=True)
class Token:
    """Represent one lexical token.

    Attributes:
        kind: Token category.
        text: Exact source text of the token.
        position: 0-based character offset of the token in the source.
    """

    kind: TokenKind
    text: str
    position: int

    @property
    def is_ignorable(self) -> bool:
        """Return whether the token carries no meaning (whitespace, comments)."""
        return self.kind in IGNORABLE_KINDS

    def is_keyword(self, word: str) -> bool:
        """Return whether the token is the given keyword (case-insensitive)."""
        return self.kind == "keyword" and self.text.lower() == word

    def is_punctuation(self, char: str) -> bool:
        """Return whether the token is the given punctuation character."""
        return self.kind == "punctuation" and self.text == char


def tokenize(source: str) -> list[Token]:
    """Split PHP source text into a flat token sequence.

    Text outside ``<?php ... ?>`` tags is inline HTML. A text is scanned as
    tagged only when it opens with markup or an open tag, or when its first
    ``<?php`` / ``<?=`` tag has no code before it. Anything else is a bare
    fragment scanned as PHP code, so ``<?`` inside a string literal of an
    untagged fragment does not hide the code around it.

    Args:
        source: Raw source text, not necessarily syntactically valid.

    Returns:
        Ordered tokens whose texts concatenate back to ``source``.
    """
    return _Lexer(source).run()


def _is_tagged(source: str) -> bool:
    """Return whether ``source`` starts outside PHP tags (inline HTML first)."""
    match = _OPEN_TAG_RE.search(source)
    if match is None:
        return False
    leading = source.lstrip("\ufeff").lstrip()
    if leading.startswith("<") and not leading.startswith("<<<"):
        return True
    if not match.group().lower().startswith(("<?php", "<?=")):
        return False
    # Statement or block punctuation before the tag means the text is code.
    return not any(char in source[: match.start()] for char in ";{}")


class _Lexer:
    """Stateful single-pass scanner behind :func:`tokenize`."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._length = len(source)
        self._pos = 0
        self._tokens: list[Token] = []
        self._in_code = not _is_tagged(source)
        self._name_context: str | None = None

    def run(self) -> list[Token]:
        while self._pos < self._length:
            if self._in_code:
                self._scan_code()
            else:
                self._scan_inline_html()
        return self._tokens

    def _emit(self, kind: TokenKind, end: int) -> None:
        token = Token(kind=kind, text=self._source[self._pos : end], position=self._pos)
        self._tokens.append(token)
        self._pos = end
        if token.is_ignorable:
            return
        if token.is_punctuation("&") and self._name_context == "function":
            return
        lowered = token.text.lower()
        if kind == "keyword" and lowered in _NAME_CONTEXT_KEYWORDS:
            self._name_context = lowered
        elif kind == "other" and token.text in _MEMBER_OPERATORS:
            self._name_context = "member"
        elif kind == "other" and token.text == "::":
            self._name_context = "static"
        else:
            self._name_context = None

    def _scan_inline_html(self) -> None:
        match = _OPEN_TAG_RE.search(self._source, self._pos)
        if match is None:
            self._emit("other", self._length)
            return
        if match.start() > self._pos:
            self._emit("other", match.start())
        self._emit("other", match.end())
        self._in_code = True

    def _scan_code(self) -> None:
        source = self._source
        pos = self._pos
        char = source[pos]

        match = _WHITESPACE_RE.match(source, pos)
        if match:
            self._emit("whitespace", match.end())
            return
        match = _CLOSE_TAG_RE.match(source, pos)
        if match:
            self._emit("other", match.end())
            self._in_code = False
            return
        if source.startswith("<<<", pos) and self._scan_heredoc():
            return
        match = _BLOCK_COMMENT_RE.match(source, pos)
        if match:
            self._emit("comment", match.end())
            return
        if source.startswith("#[", pos):
            self._emit("other", pos + 2)
            return
        match = _LINE_COMMENT_RE.match(source, pos)
        if match:
            self._emit("comment", match.end())
            return
        match = _VARIABLE_RE.match(source, pos)
        if match:
            self._emit("variable", match.end())
            return
        match = _NAME_RE.match(source, pos)
        if match:
            self._emit(self._classify_name(match.group()), match.end())
            return
        match = _NUMBER_RE.match(source, pos)
        if match:
            self._emit("literal", match.end())
            return
        if char == "'":
            match = _SINGLE_QUOTED_RE.match(source, pos)
            if match:
                self._emit("literal", match.end())
                return
        if char in "\"`":
            pattern = _DOUBLE_QUOTED_RE if char == '"' else _BACKTICK_RE
            match = pattern.match(source, pos)
            if match:
                self._scan_interpolated_string(match.end())
                return
        match = _OPERATOR_RE.match(source, pos)
        if match:
            self._emit("other", match.end())
            return
        self._emit("punctuation", pos + 1)

    def _classify_name(self, text: str) -> TokenKind:
        if "\\" in text:
            return "identifier"
        context = self._name_context
        if context in {"function", "const", "member"}:
            return "identifier"
        lowered = text.lower()
        if context == "static":
            return "keyword" if lowered == "class" else "identifier"
        return "keyword" if lowered in PHP_KEYWORDS else "identifier"

    def _scan_interpolated_string(self, end: int) -> None:
        quote = self._source[self._pos]
        terminated = end - self._pos >= 2 and self._source[end - 1] == quote
        body_end = end - 1 if terminated else end
        pieces = self._split_interpolated(self._pos + 1, body_end)
        if all(kind == "literal" for kind, _ in pieces):
            self._emit("literal", end)
            return
        self._emit("literal", self._pos + 1)
        for kind, piece_end in pieces:
            self._emit(kind, piece_end)
        if terminated:
            self._emit("literal", end)

    def _scan_heredoc(self) -> bool:
        header = _HEREDOC_START_RE.match(self._source, self._pos)
        if header is None:
            return False
        quote, label = header.group(1), header.group(2)
        closer = re.compile(
            rf"^[ \t]*{re.escape(label)}(?![A-Za-z0-9_\x80-\U0010ffff])",
            re.MULTILINE,
        ).search(self._source, header.end())
        body_end = closer.start() if closer else self._length
        self._emit("literal", header.end())
        if body_end > self._pos:
            if quote == "'":
                self._emit("literal", body_end)
            else:
                for kind, piece_end in self._split_interpolated(self._pos, body_end):
                    self._emit(kind, piece_end)
        if closer is not None:
            self._emit("literal", closer.end())
        return True

    def _split_interpolated(self, start: int, end: int) -> list[tuple[TokenKind, int]]:
        """Split a string body into literal, variable and brace pieces.

        Returns:
            ``(kind, end_offset)`` pairs covering ``start..end`` contiguously.
        """
        source = self._source
        pieces: list[tuple[TokenKind, int]] = []
        literal_start = start
        open_curlies = 0
        index = start
        while index < end:
            char = source[index]
            if char == "\\":
                index += 2
                continue
            piece: tuple[TokenKind, int, int] | None = None
            if char == "$":
                label = _LABEL_RE.match(source, index + 1, end)
                if label:
                    piece = ("variable", index, label.end())
                elif index + 1 < end and source[index + 1] == "{":
                    piece = ("other", index, index + 2)
                    open_curlies += 1
            elif char == "{" and index + 1 < end and source[index + 1] == "$":
                piece = ("punctuation", index, index + 1)
                open_curlies += 1
            elif char == "}" and open_curlies:
                piece = ("punctuation", index, index + 1)
                open_curlies -= 1
            if piece is None:
                index += 1
                continue
            kind, piece_start, piece_end = piece
            if literal_start < piece_start:
                pieces.append(("literal", piece_start))
            pieces.append((kind, piece_end))
            index = literal_start = piece_end
        if literal_start < end:
            pieces.append(("literal", end))
        return pieces
