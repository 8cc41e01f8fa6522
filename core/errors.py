"""Exception types for spellmaster application."""


class SpellMasterError(Exception):
    """Base class for all spellmaster errors."""


class AIError(SpellMasterError):
    """Base class for failures of a language model call."""


class ConfigurationError(AIError):
    """A required credential is missing. Raised before any network attempt."""


class TransportError(AIError):
    """The remote call failed or returned a non-success status."""

    def __init__(self, status: int | None, body: str = ''):
        self.status = status
        self.body = body
        if status is None:
            super().__init__(f"AI request failed: {body}")
        else:
            super().__init__(f"AI API error: {status} {body}".rstrip())


class EmptyResponseError(AIError):
    """The call succeeded but returned no usable content."""


class MalformedStructuredResponseError(AIError):
    """A structured response could not be parsed into the expected shape."""

    def __init__(self, message: str, raw: str = ''):
        super().__init__(message)
        self.raw = raw


class PersistenceParseError(SpellMasterError):
    """A persisted word list could not be decoded."""
