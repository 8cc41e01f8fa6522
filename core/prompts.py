"""Prompt text sent to the language model."""

from .config import HIGHLIGHT_MARKER, HINT_MAX_WORDS, STORY_TARGET_WORDS


def hint_prompt(word: str) -> str:
    return (
        f'The user is trying to spell the word "{word}". '
        'Provide a helpful hint (mnemonic or clue). '
        f'Do NOT reveal the word. Max {HINT_MAX_WORDS} words.'
    )


def grading_prompt(word: str, answer: str, definition: str) -> str:
    return f"""User input meaning for "{word}": "{answer}".
Actual meaning: "{definition}".
Evaluate if the user understands the word.
Return JSON: {{"isCorrect": boolean, "feedback": "string"}}.
Feedback should be encouraging. If wrong, explain why briefly. If right, suggest a small improvement or synonym."""


def story_prompt(words: list[str]) -> str:
    word_list = ', '.join(words)
    m = HIGHLIGHT_MARKER
    return (
        f'Write a short, fun, and creative story (approx {STORY_TARGET_WORDS} words) '
        f'using ALL of these words: {word_list}. '
        f'Highlight the words in the story by wrapping them in asterisks like {m}Word{m}. '
        'Keep the English simple.'
    )


def lookup_prompt(word: str) -> str:
    return (
        f'For the English word "{word}", provide a concise dictionary definition and '
        'one simple example sentence that uses the word. '
        'Return JSON format: {"definition": "...", "sentence": "..."}.'
    )
