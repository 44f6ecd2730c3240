"""
View models handed to presentation adapters.

These flatten the domain values into plain data so the server and the CLI
render the same content.
"""

from pydantic import BaseModel, Field

from .models import Mood, Suggestion, Trust
from .selection import SelectionState

TRUST_LABEL = "Trust"
TRUST_BLURB = "Whether the person trusts you."
MOOD_LABEL = "Mood"
MOOD_BLURB = "How the person feels."
PLACEHOLDER = (
    "Please select if the person trusts you in this moment, "
    "and the mood they are in."
)


class TrustView(BaseModel):
    """A trust value with its description."""

    value: Trust
    description: str

    @classmethod
    def of(cls, trust: Trust) -> "TrustView":
        return cls(value=trust, description=trust.description)


class MoodView(BaseModel):
    """A mood value with its rank and descriptive text."""

    value: Mood
    rank: int = Field(..., ge=1, le=6)
    symptoms: str
    summary: str
    description: str

    @classmethod
    def of(cls, mood: Mood) -> "MoodView":
        return cls(
            value=mood,
            rank=mood.rank,
            symptoms=mood.symptoms,
            summary=mood.summary,
            description=mood.description,
        )


class SuggestionView(BaseModel):
    """A suggestion with its description split into paragraphs."""

    action: str
    paragraphs: list[str]

    @classmethod
    def of(cls, suggestion: Suggestion) -> "SuggestionView":
        return cls(action=suggestion.action, paragraphs=suggestion.paragraphs())


class TableEntryView(BaseModel):
    """One row of the suggestion table."""

    trust: Trust
    mood: Mood
    suggestion: SuggestionView


class SessionSnapshot(BaseModel):
    """Everything a view needs to render one session."""

    session_id: str | None = Field(None, description="Owning session, if any")
    state: SelectionState
    trust: TrustView | None = None
    mood: MoodView | None = None
    suggestion: SuggestionView | None = None

    @classmethod
    def build(
        cls,
        state: SelectionState,
        trust: Trust | None,
        mood: Mood | None,
        suggestion: Suggestion | None,
        session_id: str | None = None,
    ) -> "SessionSnapshot":
        return cls(
            session_id=session_id,
            state=state,
            trust=TrustView.of(trust) if trust is not None else None,
            mood=MoodView.of(mood) if mood is not None else None,
            suggestion=SuggestionView.of(suggestion) if suggestion else None,
        )
