from .models import WordEntry, WordStore
from .interfaces import AIProvider, Storage, SpeechOutput
from .errors import (
    SpellMasterError, AIError, ConfigurationError, TransportError,
    EmptyResponseError, MalformedStructuredResponseError, PersistenceParseError
)
from .sessions import (
    FlashcardSession, SpellingSession, MeaningSession, StorySession, AddWordSession,
    SpellingPhase, MeaningPhase, StoryPhase, AddWordPhase
)
from .utils import make_cloze, split_highlighted, strip_markers
from .config import MAX_ATTEMPTS, MIN_STORY_WORDS, STORAGE_KEY

__all__ = [
    'WordEntry', 'WordStore',
    'AIProvider', 'Storage', 'SpeechOutput',
    'SpellMasterError', 'AIError', 'ConfigurationError', 'TransportError',
    'EmptyResponseError', 'MalformedStructuredResponseError', 'PersistenceParseError',
    'FlashcardSession', 'SpellingSession', 'MeaningSession', 'StorySession', 'AddWordSession',
    'SpellingPhase', 'MeaningPhase', 'StoryPhase', 'AddWordPhase',
    'make_cloze', 'split_highlighted', 'strip_markers',
    'MAX_ATTEMPTS', 'MIN_STORY_WORDS', 'STORAGE_KEY'
]
