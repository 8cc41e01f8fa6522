"""Configuration constants for spellmaster application."""

import os

# AI service
DEFAULT_BASE_URL = 'https://openrouter.ai/api/v1/chat/completions'
DEFAULT_MODEL = 'gpt-4o-mini'
APP_TITLE = 'SpellMaster AI'
AI_TIMEOUT_SECONDS = 30
SYSTEM_INSTRUCTION = (
    'You are a concise English vocabulary tutor for kids practicing spelling and meaning.'
)
CONFIG_FILE = os.path.expanduser('~/.config/spellmaster/config.json')

# Persistence
STORAGE_KEY = 'spellmaster_db_v1'

# Spelling quiz
MAX_ATTEMPTS = 3
MIN_SENTENCE_LENGTH = 5       # Sentences this short or shorter can't make a cloze
BLANK_MARKER = '______'
HINT_MAX_WORDS = 15
PRAISE_PHRASES = ['Excellent!', 'Great Job!', 'Fantastic!', 'Spot on!', 'Perfect!']

# Story generation
MIN_STORY_WORDS = 3
STORY_TARGET_WORDS = 100
HIGHLIGHT_MARKER = '*'

# Fallback messages
HINT_DEFAULT = 'Listen carefully to the syllables.'
HINT_UNAVAILABLE = 'AI hint unavailable. Listen carefully to the syllables.'
GRADE_UNAVAILABLE = 'AI service unavailable.'
STORY_UNAVAILABLE = 'AI service unavailable. Please try again later.'
LOOKUP_FAILED = 'AI could not process this word. Please try again.'
LOOKUP_NOT_CONFIGURED = 'AI request failed. Ensure OPENROUTER_API_KEY is set and try again.'

# Speech
SPEECH_RATE = 0.8
SPEECH_PITCH = 1.0
SPEECH_LANG = 'en-AU'
