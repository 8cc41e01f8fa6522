"""Domain models for spellmaster application."""

import json
import logging

from .config import STORAGE_KEY
from .errors import PersistenceParseError
from .interfaces import Storage
from .utils import contains_word
from .vocabulary import DEFAULT_WORDS

logger = logging.getLogger(__name__)


class WordEntry:
    """A single vocabulary item."""

    def __init__(self, id: int, word: str, definition: str, sentence: str):
        self.id = id
        self.word = word
        self.definition = definition
        self.sentence = sentence

    def __eq__(self, other) -> bool:
        if not isinstance(other, WordEntry):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"WordEntry(id={self.id!r}, word={self.word!r})"

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'word': self.word,
            'definition': self.definition,
            'sentence': self.sentence
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'WordEntry':
        return cls(data['id'], data['word'], data.get('definition', ''), data.get('sentence', ''))


def default_words() -> list[WordEntry]:
    """Fresh copies of the seed list."""
    return [WordEntry.from_dict(item) for item in DEFAULT_WORDS]


def serialize_words(entries: list[WordEntry]) -> str:
    return json.dumps([e.to_dict() for e in entries])


def deserialize_words(raw: str) -> list[WordEntry]:
    """Decode a persisted word list. Raises PersistenceParseError on bad data."""
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise PersistenceParseError(f"Invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise PersistenceParseError(f"Expected a list, got {type(data).__name__}")

    entries = []
    seen_ids = set()
    for item in data:
        if not isinstance(item, dict):
            raise PersistenceParseError(f"Expected an object, got {type(item).__name__}")
        if 'id' not in item or not isinstance(item.get('word'), str) or not item['word']:
            raise PersistenceParseError(f"Entry missing id or word: {item}")
        for field in ('definition', 'sentence'):
            if not isinstance(item.get(field, ''), str):
                raise PersistenceParseError(f"Entry field '{field}' is not a string: {item}")
        if item['id'] in seen_ids:
            raise PersistenceParseError(f"Duplicate id: {item['id']}")
        seen_ids.add(item['id'])
        entries.append(WordEntry.from_dict(item))
    return entries


class WordStore:
    """Ordered word list mirrored to a Storage backend."""

    def __init__(self, storage: Storage | None = None, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._entries: list[WordEntry] = []
        self._next_id = 1

    @classmethod
    def load(cls, storage: Storage | None, key: str = STORAGE_KEY) -> 'WordStore':
        """Restore the persisted list, falling back to the seed list.

        Never raises: absent or corrupt data is logged and replaced.
        """
        store = cls(storage, key)
        entries = None
        if storage is not None:
            try:
                raw = storage.get_item(key)
            except OSError as e:
                logger.warning(f"Failed to read words from storage: {e}")
                raw = None
            if raw:
                try:
                    entries = deserialize_words(raw)
                except PersistenceParseError as e:
                    logger.warning(f"Failed to load words from storage: {e}")
        if entries is None:
            entries = default_words()
        store._set_entries(entries)
        return store

    def _set_entries(self, entries: list[WordEntry]) -> None:
        self._entries = list(entries)
        numeric_ids = [e.id for e in self._entries if isinstance(e.id, int)]
        # Ids are never handed out twice, even across a reset
        self._next_id = max(max(numeric_ids, default=0) + 1, self._next_id)

    def _persist(self) -> None:
        if self.storage is None:
            return
        try:
            self.storage.set_item(self.key, serialize_words(self._entries))
        except OSError as e:
            logger.error(f"Failed to save words to storage: {e}")

    def __len__(self) -> int:
        return len(self._entries)

    def list(self) -> list[WordEntry]:
        return list(self._entries)

    def get(self, entry_id) -> WordEntry | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def add(self, word: str, definition: str = '', sentence: str = '') -> WordEntry:
        """Append a new entry with a fresh id.

        The word must be non-empty and, when a sentence is given, appear in it.
        """
        word = word.strip()
        if not word:
            raise ValueError("Word must not be empty")
        if sentence and not contains_word(sentence, word):
            raise ValueError(f"Sentence does not contain '{word}'")

        entry = WordEntry(self._next_id, word, definition, sentence)
        self._next_id += 1
        self._entries.append(entry)
        self._persist()
        return entry

    def remove(self, entry_id) -> None:
        """Remove an entry. Unknown ids are ignored."""
        remaining = [e for e in self._entries if e.id != entry_id]
        if len(remaining) != len(self._entries):
            self._entries = remaining
            self._persist()

    def reset(self) -> None:
        """Replace the list with the seed list."""
        self._set_entries(default_words())
        self._persist()
