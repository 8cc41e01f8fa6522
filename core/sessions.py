"""Practice session state machines.

Every session reads the shared WordStore and talks to the language model only
through an AIProvider. Provider calls are blocking, so they run in the event
loop's default executor; each session allows one call in flight at a time and
drops replies that arrive after it was closed, restarted or moved on to
another word.
"""

import asyncio
import logging
import random
from enum import Enum

from .config import (
    MAX_ATTEMPTS, MIN_SENTENCE_LENGTH, MIN_STORY_WORDS, PRAISE_PHRASES,
    HINT_DEFAULT, HINT_UNAVAILABLE, GRADE_UNAVAILABLE, STORY_UNAVAILABLE,
    LOOKUP_FAILED, LOOKUP_NOT_CONFIGURED
)
from .errors import AIError, ConfigurationError, MalformedStructuredResponseError
from .interfaces import AIProvider
from .models import WordEntry, WordStore
from .prompts import hint_prompt, grading_prompt, story_prompt, lookup_prompt
from .schemas import MeaningGrade, WordLookup, parse_structured
from .utils import answers_match, contains_word, make_cloze, split_highlighted, strip_markers

logger = logging.getLogger(__name__)


def _log_ai_failure(action: str, error: AIError) -> None:
    if isinstance(error, ConfigurationError):
        logger.error(f"{action} failed, AI is not configured: {error}")
    else:
        logger.warning(f"{action} failed ({type(error).__name__}): {error}")


class PracticeSession:
    """Shared plumbing for sessions that call the language model."""

    def __init__(self, store: WordStore, provider: AIProvider | None = None):
        self.store = store
        self.provider = provider
        self.busy = False
        self.closed = False
        self._generation = 0

    def close(self) -> None:
        """Abandon the session. Replies still in flight will be discarded."""
        self.closed = True
        self._generation += 1

    def _bump(self) -> int:
        self._generation += 1
        return self._generation

    def _is_stale(self, generation: int, entry_id=None) -> bool:
        if self.closed or generation != self._generation:
            return True
        return entry_id is not None and self.store.get(entry_id) is None

    async def _ask_ai(self, prompt: str, structured: bool = False) -> str | dict:
        if self.provider is None:
            raise ConfigurationError("No AI provider configured")
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(
            None,
            lambda: self.provider.complete(prompt, structured=structured)
        )

    async def _ask_ai_structured(self, prompt: str, schema):
        data = await self._ask_ai(prompt, structured=True)
        if not isinstance(data, dict):
            raise MalformedStructuredResponseError(
                f"Expected an object, got {type(data).__name__}", raw=str(data)
            )
        return parse_structured(data, schema)


class CyclingSession(PracticeSession):
    """A session that walks a word list cyclically, one subject at a time."""

    def __init__(self, store: WordStore, provider: AIProvider | None = None):
        super().__init__(store, provider)
        self.words: list[WordEntry] = []
        self.subject_index = 0

    def eligible(self, entries: list[WordEntry]) -> list[WordEntry]:
        return entries

    @property
    def empty(self) -> bool:
        return not self.words

    @property
    def subject(self) -> WordEntry | None:
        if not self.words:
            return None
        return self.words[self.subject_index]

    def _refresh(self) -> bool:
        """Re-read the store, keeping the cursor on the same entry.

        Returns False if the current entry is gone, in which case the cursor
        already points at the entry that followed it.
        """
        current = self.subject
        self.words = self.eligible(self.store.list())
        if current is not None:
            for i, entry in enumerate(self.words):
                if entry.id == current.id:
                    self.subject_index = i
                    return True
        if self.words:
            self.subject_index %= len(self.words)
        else:
            self.subject_index = 0
        return False

    def _step(self, delta: int) -> None:
        self._bump()
        survived = self._refresh()
        if self.words and (survived or delta < 0):
            self.subject_index = (self.subject_index + delta) % len(self.words)

    def _restart(self) -> None:
        self.closed = False
        self._bump()
        self.words = self.eligible(self.store.list())
        self.subject_index = 0


class FlashcardSession(CyclingSession):
    """Flip-card review over the whole word list."""

    def __init__(self, store: WordStore):
        super().__init__(store)
        self.flipped = False

    def start(self) -> bool:
        self._restart()
        self.flipped = False
        return not self.empty

    def flip(self) -> bool:
        self.flipped = not self.flipped
        return self.flipped

    def next(self) -> WordEntry | None:
        self.flipped = False
        self._step(1)
        return self.subject

    def prev(self) -> WordEntry | None:
        self.flipped = False
        self._step(-1)
        return self.subject

    @property
    def position(self) -> str:
        return f"{self.subject_index + 1} / {len(self.words)}"


class SpellingPhase(Enum):
    IDLE = 'idle'
    AWAITING = 'awaiting'
    CORRECT = 'correct'
    WRONG = 'wrong'
    EXHAUSTED = 'exhausted'


class SpellingSession(CyclingSession):
    """Dictation quiz: spell the word missing from its example sentence.

    Each word gets MAX_ATTEMPTS tries. After a wrong try the user may ask
    once for an AI hint. Submitting again after a correct answer or after
    the last try moves on to the next word.
    """

    def __init__(self, store: WordStore, provider: AIProvider | None = None,
                 rng: random.Random | None = None):
        super().__init__(store, provider)
        self.rng = rng or random.Random()
        self.attempts_remaining = MAX_ATTEMPTS
        self.phase = SpellingPhase.IDLE
        self.revealed_hint = None
        self.feedback = ''

    def eligible(self, entries: list[WordEntry]) -> list[WordEntry]:
        return [e for e in entries if e.sentence and len(e.sentence) > MIN_SENTENCE_LENGTH]

    def start(self) -> bool:
        """Begin at the first usable word. Returns False if there is none."""
        self._restart()
        if self.empty:
            self.phase = SpellingPhase.IDLE
            return False
        self._reset_subject()
        return True

    def _reset_subject(self) -> None:
        self.attempts_remaining = MAX_ATTEMPTS
        self.phase = SpellingPhase.AWAITING
        self.revealed_hint = None
        self.feedback = ''

    @property
    def prompt(self) -> str:
        """The example sentence with the word blanked out."""
        if self.subject is None:
            return ''
        return make_cloze(self.subject.sentence, self.subject.word)

    @property
    def can_request_hint(self) -> bool:
        return (self.phase is SpellingPhase.WRONG and self.revealed_hint is None
                and not self.busy)

    def submit(self, answer: str) -> SpellingPhase:
        if self.phase is SpellingPhase.IDLE or self.busy:
            return self.phase
        if self.phase in (SpellingPhase.CORRECT, SpellingPhase.EXHAUSTED):
            self.advance()
            return self.phase

        word = self.subject.word
        if answers_match(answer, word):
            self.phase = SpellingPhase.CORRECT
            self.feedback = self.rng.choice(PRAISE_PHRASES)
            return self.phase

        self.attempts_remaining -= 1
        if self.attempts_remaining > 0:
            self.phase = SpellingPhase.WRONG
            self.feedback = f"Incorrect. {self.attempts_remaining} attempt(s) left."
        else:
            self.phase = SpellingPhase.EXHAUSTED
            self.feedback = f"The answer was: {word}"
        return self.phase

    def advance(self) -> None:
        self._step(1)
        if self.empty:
            self.phase = SpellingPhase.IDLE
            return
        self._reset_subject()

    async def request_hint(self) -> str | None:
        """Ask the model for a clue that doesn't give the word away."""
        if not self.can_request_hint:
            return self.revealed_hint

        subject = self.subject
        generation = self._generation
        self.busy = True
        try:
            try:
                hint = str(await self._ask_ai(hint_prompt(subject.word))).strip()
            except AIError as e:
                _log_ai_failure('Hint request', e)
                hint = HINT_UNAVAILABLE
        finally:
            self.busy = False

        if not hint:
            hint = HINT_DEFAULT
        elif contains_word(hint, subject.word):
            hint = make_cloze(hint, subject.word)

        if self._is_stale(generation, subject.id):
            logger.info(f"Discarding hint for '{subject.word}', session moved on")
            return None
        self.revealed_hint = hint
        return hint


class MeaningPhase(Enum):
    IDLE = 'idle'
    SUBMITTING = 'submitting'
    GRADED = 'graded'


def unavailable_grade() -> MeaningGrade:
    return MeaningGrade(is_correct=False, feedback=GRADE_UNAVAILABLE)


class MeaningSession(CyclingSession):
    """Open-answer quiz: explain a word, the model grades the explanation."""

    def __init__(self, store: WordStore, provider: AIProvider | None = None):
        super().__init__(store, provider)
        self.phase = MeaningPhase.IDLE
        self.last_grade = None

    def start(self) -> bool:
        self._restart()
        self.phase = MeaningPhase.IDLE
        self.last_grade = None
        return not self.empty

    async def _grade(self, subject: WordEntry, answer: str) -> MeaningGrade:
        try:
            return await self._ask_ai_structured(
                grading_prompt(subject.word, answer, subject.definition), MeaningGrade
            )
        except AIError as e:
            _log_ai_failure('Grading', e)
            return unavailable_grade()

    async def submit(self, answer: str) -> MeaningGrade | None:
        """Grade an answer. Blank answers and submits while busy are ignored."""
        answer = answer.strip()
        if not answer or self.empty or self.busy or self.phase is not MeaningPhase.IDLE:
            return None

        subject = self.subject
        generation = self._generation
        self.phase = MeaningPhase.SUBMITTING
        self.busy = True
        grade = None
        try:
            grade = await self._grade(subject, answer)
        finally:
            self.busy = False
            if grade is None or self._is_stale(generation, subject.id):
                self.phase = MeaningPhase.IDLE

        if self._is_stale(generation, subject.id):
            logger.info(f"Discarding grade for '{subject.word}', session moved on")
            if not self.closed:
                self._refresh()
            return None
        self.last_grade = grade
        self.phase = MeaningPhase.GRADED
        return grade

    def advance(self) -> bool:
        """Move to the next word. Only allowed once the answer is graded."""
        if self.phase is not MeaningPhase.GRADED:
            return False
        self._step(1)
        self.phase = MeaningPhase.IDLE
        self.last_grade = None
        return True


class StoryPhase(Enum):
    IDLE = 'idle'
    GENERATING = 'generating'
    READY = 'ready'
    FAILED = 'failed'


class StorySession(PracticeSession):
    """Generates a short story that uses every word in the list."""

    def __init__(self, store: WordStore, provider: AIProvider | None = None):
        super().__init__(store, provider)
        self.phase = StoryPhase.IDLE
        self.story_text = None

    @property
    def can_generate(self) -> bool:
        return len(self.store) >= MIN_STORY_WORDS

    async def _write_story(self, words: list[str]) -> tuple[StoryPhase, str]:
        try:
            text = await self._ask_ai(story_prompt(words))
        except AIError as e:
            _log_ai_failure('Story generation', e)
            return StoryPhase.FAILED, STORY_UNAVAILABLE
        return StoryPhase.READY, str(text)

    async def generate(self) -> bool:
        """Write a new story, replacing any previous one.

        Returns True if a story was produced. Does nothing when the list has
        fewer than MIN_STORY_WORDS words or a story is already being written.
        """
        if not self.can_generate or self.busy:
            return False

        words = [e.word for e in self.store.list()]
        self.closed = False
        generation = self._bump()
        self.phase = StoryPhase.GENERATING
        self.story_text = None
        self.busy = True
        outcome = (StoryPhase.FAILED, STORY_UNAVAILABLE)
        try:
            outcome = await self._write_story(words)
        finally:
            self.busy = False
            if self._is_stale(generation):
                logger.info("Discarding story, session was closed")
                self.phase = StoryPhase.IDLE
                self.story_text = None
            else:
                self.phase, self.story_text = outcome
        return self.phase is StoryPhase.READY

    def segments(self) -> list[tuple[str, bool]]:
        return split_highlighted(self.story_text or '')

    def plain_text(self) -> str:
        return strip_markers(self.story_text or '')


class AddWordPhase(Enum):
    IDLE = 'idle'
    LOOKING_UP = 'looking_up'
    ADDED = 'added'
    FAILED = 'failed'


class AddWordSession(PracticeSession):
    """Adds a word after the model supplies its definition and an example."""

    def __init__(self, store: WordStore, provider: AIProvider | None = None):
        super().__init__(store, provider)
        self.phase = AddWordPhase.IDLE
        self.message = ''
        self.last_added = None

    async def add(self, word: str) -> WordEntry | None:
        word = word.strip()
        if not word or self.busy:
            return None

        self.closed = False
        generation = self._bump()
        self.phase = AddWordPhase.LOOKING_UP
        self.message = ''
        self.busy = True
        lookup = None
        try:
            lookup = await self._ask_ai_structured(lookup_prompt(word), WordLookup)
        except ConfigurationError as e:
            _log_ai_failure(f"Lookup of '{word}'", e)
            self.message = LOOKUP_NOT_CONFIGURED
        except AIError as e:
            _log_ai_failure(f"Lookup of '{word}'", e)
            self.message = LOOKUP_FAILED
        finally:
            self.busy = False

        if self._is_stale(generation):
            logger.info(f"Discarding lookup of '{word}', session was closed")
            return None
        if lookup is None:
            self.phase = AddWordPhase.FAILED
            return None

        try:
            entry = self.store.add(word, lookup.definition, lookup.sentence)
        except ValueError as e:
            logger.warning(f"Rejected lookup of '{word}': {e}")
            self.phase = AddWordPhase.FAILED
            self.message = LOOKUP_FAILED
            return None

        self.phase = AddWordPhase.ADDED
        self.message = f"Added '{entry.word}'."
        self.last_added = entry
        return entry
