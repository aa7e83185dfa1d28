"""
Recognized-text buffer consumed by the sign-to-text view.
"""

import logging
from typing import List, Mapping, Optional

from signsense.core.types import GestureDefinition

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "english"


class Transcript:
    """Append-only list of committed tokens plus the current confidence (0-100)."""

    def __init__(self):
        self._tokens: List[str] = []
        self._confidence = 0

    def append(self, token: str):
        self._tokens.append(token)
        logger.debug("Transcript += %r (%d tokens)", token, len(self._tokens))

    @property
    def text(self) -> str:
        """Committed tokens, space separated."""
        return " ".join(self._tokens)

    @property
    def tokens(self) -> tuple:
        return tuple(self._tokens)

    @property
    def confidence(self) -> int:
        return self._confidence

    @confidence.setter
    def confidence(self, value):
        self._confidence = int(max(0, min(100, value)))

    def render(self, language: str = DEFAULT_LANGUAGE,
               catalog: Optional[Mapping[str, GestureDefinition]] = None) -> str:
        """Text with each token shown in the requested display language.

        Tokens without a translation (letters, unknown names) are shown as-is.
        """
        if language == DEFAULT_LANGUAGE or not catalog:
            return self.text
        return " ".join(
            catalog[token].label(language) if token in catalog else token
            for token in self._tokens
        )

    def clear(self):
        self._tokens.clear()
        self._confidence = 0

    def __len__(self):
        return len(self._tokens)

    def __repr__(self):
        return f"Transcript({self.text!r}, conf={self._confidence})"
