"""Best-effort pronunciation through a SpeechOutput device."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .config import SPEECH_LANG, SPEECH_PITCH, SPEECH_RATE
from .interfaces import SpeechOutput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Voice:
    name: str
    lang: str


FEMALE_VOICE_NAMES = ('Female', 'Karen', 'Catherine')

# First match wins
DEFAULT_VOICE_PREFERENCES: list[Callable[[Voice], bool]] = [
    lambda v: v.lang == 'en-AU' and any(n in v.name for n in FEMALE_VOICE_NAMES),
    lambda v: v.lang == 'en-AU',
    lambda v: v.lang == 'en-GB',
]


def pick_voice(voices: list[Voice], preferences=None) -> Optional[Voice]:
    """Return the first voice satisfying the earliest preference, or None."""
    if preferences is None:
        preferences = DEFAULT_VOICE_PREFERENCES
    for prefers in preferences:
        for voice in voices:
            if prefers(voice):
                return voice
    return None


def speak(device: SpeechOutput | None, text: str, preferences=None) -> bool:
    """Read text aloud. Returns False if speech was skipped.

    Speech is optional: a missing or failing device never raises.
    """
    if device is None or not text:
        return False
    try:
        device.cancel()
        voice = pick_voice(device.get_voices(), preferences)
        if voice is not None:
            device.say(text, voice=voice, rate=SPEECH_RATE, pitch=SPEECH_PITCH)
        else:
            device.say(text, lang=SPEECH_LANG, rate=SPEECH_RATE, pitch=SPEECH_PITCH)
    except Exception as e:
        logger.debug(f"Speech unavailable, skipping: {e}")
        return False
    return True
