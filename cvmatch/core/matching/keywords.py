"""
Technology keyword detection.

Tokens match case-insensitively and only as whole tokens, so ``java`` is
not found inside ``javascript`` while ``c++`` and ``node.js`` still match.
"""

import re
from typing import Iterable, Mapping, Optional

from cvmatch.utils.constants import TECHNOLOGY_KEYWORDS


class TechnologyVocabulary:
    """Compiled whole-token matcher over a technology keyword table."""

    def __init__(self, keywords: Optional[Mapping[str, Iterable[str]]] = None):
        """
        Args:
            keywords: Category name to token list. Defaults to
                ``TECHNOLOGY_KEYWORDS``.
        """
        table = keywords if keywords is not None else TECHNOLOGY_KEYWORDS

        tokens: list[str] = []
        for group in table.values():
            for token in group:
                token = token.strip().lower()
                if token and token not in tokens:
                    tokens.append(token)

        self.tokens = tokens
        self._patterns = {
            token: re.compile(rf"(?<!\w){re.escape(token)}(?!\w)", re.IGNORECASE)
            for token in tokens
        }

    def extract(self, text: str) -> list[str]:
        """Return the vocabulary tokens present in ``text``, in vocabulary order."""
        if not text:
            return []
        return [token for token, pattern in self._patterns.items() if pattern.search(text)]

    def __len__(self) -> int:
        return len(self.tokens)


_default_vocabulary: Optional[TechnologyVocabulary] = None


def get_default_vocabulary() -> TechnologyVocabulary:
    """Get the vocabulary built from ``TECHNOLOGY_KEYWORDS``."""
    global _default_vocabulary
    if _default_vocabulary is None:
        _default_vocabulary = TechnologyVocabulary()
    return _default_vocabulary


def extract_technology_tokens(
    text: str,
    vocabulary: Optional[TechnologyVocabulary] = None,
) -> list[str]:
    """
    Find technology tokens mentioned in a text.

    Args:
        text: Text to scan.
        vocabulary: Vocabulary to use. Defaults to the built-in one.

    Returns:
        Lowercased tokens, without duplicates.
    """
    return (vocabulary or get_default_vocabulary()).extract(text)
