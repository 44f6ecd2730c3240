"""
Selection state for one session: the chosen trust and mood.

Both cells start unset and are changed independently. Every change is
announced synchronously to subscribers, after the new value is committed.
"""

from collections.abc import Callable
from enum import Enum

from .models import Mood, Trust

SelectionObserver = Callable[["Selection"], None]


class SelectionState(str, Enum):
    """Which of the two cells are currently set."""

    NONE_SELECTED = "none_selected"
    TRUST_ONLY = "trust_only"
    MOOD_ONLY = "mood_only"
    BOTH_SELECTED = "both_selected"


class Selection:
    """
    The current trust and mood choices of a single session.

    Values are expected to already be Trust / Mood members; parsing raw input
    is done in `tears.events`. Setting a cell to the value it already holds,
    or clearing an unset cell, does not notify subscribers.
    """

    def __init__(self) -> None:
        self._trust: Trust | None = None
        self._mood: Mood | None = None
        self._observers: list[SelectionObserver] = []

    @property
    def trust(self) -> Trust | None:
        return self._trust

    @property
    def mood(self) -> Mood | None:
        return self._mood

    @property
    def state(self) -> SelectionState:
        if self._trust is None and self._mood is None:
            return SelectionState.NONE_SELECTED
        if self._mood is None:
            return SelectionState.TRUST_ONLY
        if self._trust is None:
            return SelectionState.MOOD_ONLY
        return SelectionState.BOTH_SELECTED

    def set_trust(self, trust: Trust) -> None:
        if not isinstance(trust, Trust):
            raise TypeError(f"Expected Trust, got {type(trust).__name__}")
        self._update_trust(trust)

    def clear_trust(self) -> None:
        self._update_trust(None)

    def set_mood(self, mood: Mood) -> None:
        if not isinstance(mood, Mood):
            raise TypeError(f"Expected Mood, got {type(mood).__name__}")
        self._update_mood(mood)

    def clear_mood(self) -> None:
        self._update_mood(None)

    def subscribe(self, observer: SelectionObserver) -> Callable[[], None]:
        """
        Call `observer` with this selection after every change.

        Returns:
            A function that removes the observer again
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    # MARK: - Private Helpers

    def _update_trust(self, trust: Trust | None) -> None:
        if trust is self._trust:
            return
        self._trust = trust
        self._notify()

    def _update_mood(self, mood: Mood | None) -> None:
        if mood is self._mood:
            return
        self._mood = mood
        self._notify()

    def _notify(self) -> None:
        for observer in list(self._observers):
            observer(self)
