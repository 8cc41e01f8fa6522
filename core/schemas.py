"""Shapes of structured model replies.

The gateway only guarantees a JSON object. Each caller validates the object
against its own model here before using any field.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import MalformedStructuredResponseError


class MeaningGrade(BaseModel):
    """Result of grading a user's explanation of a word."""

    model_config = ConfigDict(populate_by_name=True)

    is_correct: bool = Field(alias='isCorrect')
    feedback: str


class WordLookup(BaseModel):
    """Dictionary data for a newly added word."""

    definition: str
    sentence: str

    @field_validator('definition', 'sentence')
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError('must not be blank')
        return value


def parse_structured(data: dict, schema: type[BaseModel]) -> BaseModel:
    """Validate a structured reply. Raises MalformedStructuredResponseError."""
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise MalformedStructuredResponseError(
            f"Reply does not match {schema.__name__}: {e.error_count()} error(s)", raw=str(data)
        ) from e
