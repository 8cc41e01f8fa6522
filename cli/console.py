"""Console UI for spellmaster application."""

import asyncio

from core.config import MAX_ATTEMPTS, MIN_STORY_WORDS
from core.interfaces import AIProvider, SpeechOutput
from core.models import WordStore
from core.sessions import (
    AddWordSession, FlashcardSession, MeaningSession, SpellingSession, StorySession,
    SpellingPhase, StoryPhase
)
from core.speech import speak

MENU = [
    ('1', 'manage', 'Manage words'),
    ('2', 'flashcards', 'Flashcards'),
    ('3', 'spelling', 'Spelling bee'),
    ('4', 'meaning', 'Meaning quiz'),
    ('5', 'story', 'AI story'),
    ('q', 'quit', 'Quit'),
]


class ConsoleUI:
    """Console user interface for spellmaster application."""

    def __init__(self, store: WordStore, provider: AIProvider, speech: SpeechOutput | None = None):
        self.store = store
        self.provider = provider
        self.speech = speech

    async def _ask(self, prompt: str) -> str:
        loop = asyncio.get_event_loop()
        return (await loop.run_in_executor(None, input, prompt)).strip()

    @property
    def can_speak(self) -> bool:
        return self.speech is not None

    def _commands(self, *items: str) -> str:
        """Join command help, listing "say" only when a speech device is attached."""
        items = list(items)
        if self.can_speak:
            items.insert(len(items) - 1, '"say" to listen')
        return 'Commands: ' + ', '.join(items)

    def _wants_speech(self, command: str) -> bool:
        return self.can_speak and command.lower() == 'say'

    def _say(self, text: str) -> None:
        if not speak(self.speech, text):
            print('(speech unavailable)')

    def print_dashboard(self):
        print('\n' + '=' * 50)
        print('SPELLMASTER')
        print('=' * 50)
        print(f'Words in your list: {len(self.store)} (auto-save enabled)')
        for key, _, label in MENU:
            print(f'  [{key}] {label}')
        print('=' * 50)

    def print_words(self):
        print('-' * 50)
        for entry in self.store.list():
            print(f'  #{entry.id} {entry.word}: {entry.definition}')
            if entry.sentence:
                print(f'      "{entry.sentence}"')
        print('-' * 50)

    async def run(self):
        """Run the main application loop."""
        modes = {
            'manage': self.manage_words,
            'flashcards': self.flashcards,
            'spelling': self.spelling_quiz,
            'meaning': self.meaning_quiz,
            'story': self.story_mode,
        }
        while True:
            self.print_dashboard()
            choice = (await self._ask('==> ')).lower()
            mode = next((name for key, name, _ in MENU if choice in (key, name)), None)
            if mode == 'quit':
                print('Goodbye!')
                return
            if mode is None:
                print('Unknown choice.')
                continue
            await modes[mode]()

    async def manage_words(self):
        session = AddWordSession(self.store, self.provider)
        print('Commands: type a word to add it, "del <id>" to remove, "reset", "back"')
        while True:
            self.print_words()
            command = await self._ask('manage> ')
            if command.lower() == 'back':
                session.close()
                return
            if command.lower() == 'reset':
                confirm = await self._ask('Reset to default words? This clears your custom list. [y/N] ')
                if confirm.lower() == 'y':
                    self.store.reset()
            elif command.lower().startswith('del '):
                try:
                    self.store.remove(int(command[4:].strip()))
                except ValueError:
                    print('Usage: del <id>')
            elif command:
                print('Asking AI...')
                await session.add(command)
                print(session.message)

    async def flashcards(self):
        session = FlashcardSession(self.store)
        if not session.start():
            print('Add words to start Flashcards.')
            return
        print(self._commands('Enter to flip', '"n" next', '"p" previous', '"back"'))
        while True:
            card = session.subject
            print('\n' + '-' * 40)
            print(f'[{session.position}]')
            if session.flipped:
                print(f'  Meaning: {card.definition}')
                print(f'  Example: "{card.sentence}"')
            else:
                print(f'  {card.word}')
            print('-' * 40)
            command = (await self._ask('cards> ')).lower()
            if command == 'back':
                session.close()
                return
            if command == 'n':
                session.next()
            elif command == 'p':
                session.prev()
            elif self._wants_speech(command):
                self._say(card.word)
            else:
                session.flip()
            if session.empty:
                print('No words left.')
                return

    async def spelling_quiz(self):
        session = SpellingSession(self.store, self.provider)
        if not session.start():
            print('Add words to use Spelling Bee.')
            return
        print('Fill in the missing word. ' + self._commands('"hint"', '"back"'))
        while session.phase is not SpellingPhase.IDLE:
            print(f'\nWord {session.subject_index + 1} of {len(session.words)}'
                  f' | attempts: {session.attempts_remaining}/{MAX_ATTEMPTS}')
            print(f'>>> {session.prompt}')
            if session.revealed_hint:
                print(f'Hint: {session.revealed_hint}')

            finished = session.phase in (SpellingPhase.CORRECT, SpellingPhase.EXHAUSTED)
            answer = await self._ask('(Enter for next word) ' if finished else 'spell> ')
            if answer.lower() == 'back':
                session.close()
                return
            if self._wants_speech(answer):
                self._say(session.subject.sentence)
                continue
            if answer.lower() == 'hint':
                if session.can_request_hint:
                    print('Asking AI for a hint...')
                    await session.request_hint()
                else:
                    print('Hints are available after a wrong attempt, once per word.')
                continue

            session.submit(answer)
            if session.feedback:
                print(session.feedback)
        print('Add words to use Spelling Bee.')

    async def meaning_quiz(self):
        session = MeaningSession(self.store, self.provider)
        if not session.start():
            print('Add words to start Meaning Quiz.')
            return
        print('Explain each word in your own words. ' + self._commands('"back"'))
        while not session.empty:
            word = session.subject
            print(f'\nWhat does "{word.word}" mean?')
            answer = await self._ask('meaning> ')
            if answer.lower() == 'back':
                session.close()
                return
            if self._wants_speech(answer):
                self._say(word.word)
                continue
            if not answer:
                continue

            print('Checking with AI...')
            grade = await session.submit(answer)
            if grade is None:
                continue
            print('Great Understanding!' if grade.is_correct else 'Needs Improvement')
            print(grade.feedback)
            if not grade.is_correct:
                print(f'Definition: {word.definition}')
            await self._ask('(Enter for next word) ')
            session.advance()
        print('Add words to start Meaning Quiz.')

    async def story_mode(self):
        session = StorySession(self.store, self.provider)
        if not session.can_generate:
            print(f'Add at least {MIN_STORY_WORDS} words to generate a story.')
            return
        while True:
            if session.phase is StoryPhase.IDLE:
                command = await self._ask('Press Enter to generate a story, or "back": ')
            else:
                listen = ', "say" to listen' if self.can_speak else ''
                command = await self._ask(f'Enter for a new story{listen}, "back": ')
            if command.lower() == 'back':
                session.close()
                return
            if self._wants_speech(command) and session.phase is StoryPhase.READY:
                self._say(session.plain_text())
                continue

            print('Writing your story...')
            if not await session.generate():
                if session.phase is not StoryPhase.FAILED:
                    print(f'Add at least {MIN_STORY_WORDS} words to generate a story.')
                    return
            self.print_story(session)

    def print_story(self, session: StorySession):
        print('\n' + '=' * 60)
        print('YOUR STORY')
        print('=' * 60)
        print(''.join(f'[{text}]' if highlighted else text for text, highlighted in session.segments()))
        print('=' * 60)
