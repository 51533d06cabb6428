# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Message translation contracts used to render conflict messages."""

import logging
import re
from typing import Protocol, Sequence

logger = logging.getLogger(__name__)

_PLACEHOLDER_RE = re.compile(r"%%|%(?:(\d+)\$)?s")


class Translator(Protocol):
    """Render a user-facing message from a template."""

    def trans(self, template: str, params: Sequence[str], domain: str) -> str:
        """Translate and format a message.

        Args:
            template: Source message with sprintf-style placeholders.
            params: Positional values for the placeholders.
            domain: Translation domain of the message.

        Returns:
            Rendered message.
        """


class IdentityTranslator:
    """Return templates untouched."""

    def trans(self, template: str, params: Sequence[str], domain: str) -> str:
        return template


class PositionalTranslator:
    """Fill ``%1$s``-style and bare ``%s`` placeholders without translating."""

    def trans(self, template: str, params: Sequence[str], domain: str) -> str:
        """Substitute placeholders with the given parameters.

        Numbered placeholders are 1-based. Bare ``%s`` placeholders consume
        parameters in order. Placeholders without a matching parameter are
        left as written.
        """
        next_index = 0

        def _replace(match: re.Match[str]) -> str:
            nonlocal next_index
            if match.group() == "%%":
                return "%"
            if match.group(1) is not None:
                index = int(match.group(1)) - 1
            else:
                index = next_index
                next_index += 1
            if 0 <= index < len(params):
                return str(params[index])
            logger.warning(
                f"Missing message parameter (domain={domain} placeholder={match.group()})"
            )
            return match.group()

        return _PLACEHOLDER_RE.sub(_replace, template)
