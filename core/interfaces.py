"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod


class AIProvider(ABC):
    """Abstract base class for the language model gateway."""

    @abstractmethod
    def complete(self, prompt: str, structured: bool = False) -> str | dict:
        """Send one prompt and return the reply.

        Returns stripped text, or a parsed JSON object when structured is True.
        Raises ConfigurationError, TransportError, EmptyResponseError or
        MalformedStructuredResponseError.
        """
        pass


class Storage(ABC):
    """Abstract base class for config and key-value storage."""

    @abstractmethod
    def load_config(self) -> dict:
        """Load configuration. Returns config dict (empty if none exists)."""
        pass

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Get the raw value stored under key. Returns None if absent."""
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store a raw value under key, replacing any previous value."""
        pass


class SpeechOutput(ABC):
    """Abstract base class for a text-to-speech device."""

    @abstractmethod
    def get_voices(self) -> list:
        """Return the available voices as a list of Voice."""
        pass

    @abstractmethod
    def cancel(self) -> None:
        """Stop any utterance in progress."""
        pass

    @abstractmethod
    def say(self, text: str, voice=None, lang: str | None = None,
            rate: float = 1.0, pitch: float = 1.0) -> None:
        """Queue text for playback. Either voice or lang is set."""
        pass
