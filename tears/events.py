"""
Input boundary between presentation adapters and the selection state.

Adapters hand over raw values (display names, or a rank for moods). Values
that don't parse are ignored: the selection keeps whatever it held before.
"""

import logging
from typing import Literal

from pydantic import BaseModel, Field

from .errors import InvalidValue
from .models import Mood, Trust
from .selection import Selection

logger = logging.getLogger(__name__)


class SelectionEvent(BaseModel):
    """A raw selection event emitted by a presentation adapter."""

    field: Literal["trust", "mood"] = Field(..., description="Which cell to change")
    action: Literal["set", "clear"] = Field("set", description="Set or clear")
    value: str | int | None = Field(
        None, description="Display name, or a rank for moods"
    )


def apply_trust_input(selection: Selection, raw: object) -> bool:
    """
    Set the trust from a display name.

    Returns:
        True if the value was recognized, False if it was ignored
    """
    try:
        trust = Trust.parse(raw)
    except InvalidValue as e:
        logger.debug("Ignoring trust input: %s", e)
        return False
    selection.set_trust(trust)
    return True


def apply_mood_input(selection: Selection, raw: object) -> bool:
    """
    Set the mood from a display name, or from a rank when given an int.

    Returns:
        True if the value was recognized, False if it was ignored
    """
    try:
        mood = Mood.from_rank(raw) if isinstance(raw, int) else Mood.parse(raw)
    except InvalidValue as e:
        logger.debug("Ignoring mood input: %s", e)
        return False
    selection.set_mood(mood)
    return True


def apply_event(selection: Selection, event: SelectionEvent) -> bool:
    """
    Apply a raw selection event.

    Returns:
        True if the event was applied, False if its value was ignored
    """
    if event.action == "clear":
        if event.field == "trust":
            selection.clear_trust()
        else:
            selection.clear_mood()
        return True

    if event.field == "trust":
        return apply_trust_input(selection, event.value)
    return apply_mood_input(selection, event.value)
