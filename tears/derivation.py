"""
Derive the current suggestion from a session's selection.
"""

from collections.abc import Callable

from .models import Mood, Suggestion, Trust
from .selection import Selection
from .suggestions import DEFAULT_TABLE, SuggestionTable

SuggestionObserver = Callable[[Suggestion | None], None]


def current_suggestion(
    trust: Trust | None,
    mood: Mood | None,
    table: SuggestionTable = DEFAULT_TABLE,
) -> Suggestion | None:
    """Return the suggestion for the pair, or None if either is unset."""
    if trust is None or mood is None:
        return None
    return table.lookup(trust, mood)


class Derivation:
    """
    Keeps the current suggestion in step with a Selection.

    The suggestion is recomputed inside the selection's change notification,
    so `current` is never stale once a `set_*` / `clear_*` call returns.
    Subscribers are called once per selection change with the new value.
    """

    def __init__(
        self, selection: Selection, table: SuggestionTable = DEFAULT_TABLE
    ) -> None:
        self._selection = selection
        self._table = table
        self._observers: list[SuggestionObserver] = []
        self._current = current_suggestion(selection.trust, selection.mood, table)
        self._unsubscribe = selection.subscribe(self._recompute)

    @property
    def current(self) -> Suggestion | None:
        return self._current

    def subscribe(self, observer: SuggestionObserver) -> Callable[[], None]:
        """
        Call `observer` with the new suggestion after every recomputation.

        Returns:
            A function that removes the observer again
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def close(self) -> None:
        """Stop following the selection."""
        self._unsubscribe()
        self._observers.clear()

    def _recompute(self, selection: Selection) -> None:
        self._current = current_suggestion(selection.trust, selection.mood, self._table)
        for observer in list(self._observers):
            observer(self._current)
