"""Utility functions for spellmaster application."""

import json
import re

from .config import BLANK_MARKER, HIGHLIGHT_MARKER


def make_cloze(sentence: str, word: str, marker: str = BLANK_MARKER) -> str:
    """Replace every case-insensitive occurrence of word in sentence with marker."""
    if not word:
        return sentence
    return re.sub(re.escape(word), marker, sentence, flags=re.IGNORECASE)


def contains_word(text: str, word: str) -> bool:
    return bool(word) and word.lower() in text.lower()


def answers_match(answer: str, word: str) -> bool:
    """Compare a typed answer to the target word.

    Surrounding whitespace and letter case are ignored. Everything else,
    punctuation included, has to match exactly.
    """
    return answer.strip().lower() == word.lower()


def split_highlighted(text: str, marker: str = HIGHLIGHT_MARKER) -> list[tuple[str, bool]]:
    """Split a story into (segment, highlighted) pairs.

    Text between a pair of markers is highlighted. Empty segments are dropped.
    """
    parts = text.split(marker)
    return [(part, i % 2 == 1) for i, part in enumerate(parts) if part]


def strip_markers(text: str, marker: str = HIGHLIGHT_MARKER) -> str:
    return text.replace(marker, '')


def extract_json_object(content: str) -> dict | None:
    """Parse a JSON object out of a model reply.

    Accepts a bare object, an object wrapped in a markdown code fence, or an
    object surrounded by prose. Returns None if no object can be decoded.
    """
    s = content.strip()
    s = re.sub(r'^```(?:json)?\s*', '', s)
    s = re.sub(r'\s*```$', '', s)
    try:
        data = json.loads(s)
    except ValueError:
        start, end = s.find('{'), s.rfind('}')
        if start == -1 or end <= start:
            return None
        try:
            data = json.loads(s[start:end + 1])
        except ValueError:
            return None
    if not isinstance(data, dict):
        return None
    return data
