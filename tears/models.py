"""
Shared data models for the tears service.

This module defines the core domain models used across multiple layers
of the application (suggestion table, selection state, CLI, API).
"""

from collections.abc import Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidValue


class Trust(str, Enum):
    """
    Whether the receiving person trusts you.

    A good indicator of trust is whether the person initiates a conversation
    with you.
    """

    ABSENT = "Absent"
    PRESENT = "Present"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: object) -> "Trust":
        """
        Parse a display name into a Trust value.

        Only exact display names are accepted.

        Raises:
            InvalidValue: if the text is not a known display name
        """
        if isinstance(text, str):
            for trust in cls:
                if trust.value == text:
                    return trust
        raise InvalidValue("trust", text)

    @classmethod
    def all(cls) -> Iterator["Trust"]:
        """Iterate over all values in declaration order."""
        return iter(cls)

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def description(self) -> str:
        return _TRUST_DESCRIPTIONS[self]


_TRUST_DESCRIPTIONS = {
    Trust.ABSENT: "The person has not initiated a conversation with me recently.",
    Trust.PRESENT: (
        "The person has initiated a conversation with me recently, "
        "with no obligation."
    ),
}


class Mood(str, Enum):
    """
    The mood the receiving person is in, from most to least sad.

    Each mood has a rank on a scale of 1 to 10. The ranks stop at 6, since
    bringing someone from joy to more joy is not what this is for.
    """

    ANGUISHED = "Anguished"
    CLOSED = "Closed"
    CAUTIOUS = "Cautious"
    UNSETTLED = "Unsettled"
    CALM = "Calm"
    HOPEFUL = "Hopeful"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: object) -> "Mood":
        """
        Parse a display name into a Mood value.

        Raises:
            InvalidValue: if the text is not a known display name
        """
        if isinstance(text, str):
            for mood in cls:
                if mood.value == text:
                    return mood
        raise InvalidValue("mood", text)

    @classmethod
    def from_rank(cls, rank: object) -> "Mood":
        """
        Look up the Mood with the given rank.

        Raises:
            InvalidValue: if rank is not an integer between 1 and 6
        """
        # bool is an int subclass, but True is not a rank
        if isinstance(rank, int) and not isinstance(rank, bool):
            for mood in cls:
                if _MOOD_RANKS[mood] == rank:
                    return mood
        raise InvalidValue("mood rank", rank)

    @classmethod
    def all(cls) -> Iterator["Mood"]:
        """Iterate over all values, from most to least severe."""
        return iter(cls)

    @property
    def display_name(self) -> str:
        return self.value

    @property
    def rank(self) -> int:
        return _MOOD_RANKS[self]

    @property
    def symptoms(self) -> str:
        return _MOOD_SYMPTOMS[self]

    @property
    def summary(self) -> str:
        return _MOOD_SUMMARIES[self]

    @property
    def description(self) -> str:
        return _MOOD_DESCRIPTIONS[self]


_MOOD_RANKS = {
    Mood.ANGUISHED: 1,
    Mood.CLOSED: 2,
    Mood.CAUTIOUS: 3,
    Mood.UNSETTLED: 4,
    Mood.CALM: 5,
    Mood.HOPEFUL: 6,
}

_MOOD_SYMPTOMS = {
    Mood.ANGUISHED: "Unresponsiveness to any interaction. Outbursts, self-harm.",
    Mood.CLOSED: "Silence, eyes stare blankly. Little movement.",
    Mood.CAUTIOUS: "One word answers, eyes assessing every detail.",
    Mood.UNSETTLED: "Asks for justification / to see evidence.",
    Mood.CALM: "No sad symptoms, smile takes conscious effort.",
    Mood.HOPEFUL: "Smiles subconciously.",
}

_MOOD_SUMMARIES = {
    Mood.ANGUISHED: "The person believes that to live is to suffer.",
    Mood.CLOSED: "The person believes that trust no longer exists.",
    Mood.CAUTIOUS: "The person only trusts people who know how to empathize.",
    Mood.UNSETTLED: "The person is suspicious of people.",
    Mood.CALM: "The person believes life is okay.",
    Mood.HOPEFUL: "The person believes there is good in life.",
}

_MOOD_DESCRIPTIONS = {
    Mood.ANGUISHED: (
        "Being awake is already experienced as emotional pain, so every "
        "stimulus is overwhelming."
    ),
    Mood.CLOSED: (
        'No promise of "better" gets through, usually because past attempts '
        "at improvement have ended in negative experiences. "
        "i.e. Don't make things worse"
    ),
    Mood.CAUTIOUS: (
        "The emotions are in a state that the person will hate doing "
        "anything an untrusted person says."
    ),
    Mood.UNSETTLED: (
        "Trust has been broken, but the person is willing to try and see if "
        "it can be mended."
    ),
    Mood.CALM: (
        "There is little / no bias towards things being positive or negative."
    ),
    Mood.HOPEFUL: (
        "The person believes goodness will happen when one works towards it."
    ),
}


class Suggestion(BaseModel):
    """A suggested action for one trust and mood combination."""

    model_config = ConfigDict(frozen=True)

    action: str = Field(..., description='Action to take, e.g. "Stay away"')
    description: str = Field(
        ..., description="Rationale, paragraphs separated by a blank line"
    )

    def paragraphs(self) -> list[str]:
        """Split the description into its non-empty paragraphs."""
        return [
            paragraph.strip()
            for paragraph in self.description.split("\n\n")
            if paragraph.strip()
        ]
