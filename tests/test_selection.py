"""
Tests for selection state, the input boundary and suggestion derivation.

These cover the session state machine and the scenarios a user goes through
while picking a trust level and mood.
"""

import pytest

from tears.derivation import Derivation, current_suggestion
from tears.events import (
    SelectionEvent,
    apply_event,
    apply_mood_input,
    apply_trust_input,
)
from tears.models import Mood, Trust
from tears.selection import Selection, SelectionState
from tears.suggestions import DEFAULT_TABLE


class TestSelection:
    """Test suite for the Selection cells and their notifications."""

    def setup_method(self):
        """Set up a fresh selection with a recording observer."""
        self.selection = Selection()
        self.changes = []
        self.selection.subscribe(
            lambda s: self.changes.append((s.trust, s.mood))
        )

    def test_initial_state(self):
        """Test that nothing is selected at first."""
        assert self.selection.trust is None
        assert self.selection.mood is None
        assert self.selection.state is SelectionState.NONE_SELECTED

    def test_state_machine(self):
        """Test the transitions between the four selection states."""
        self.selection.set_trust(Trust.PRESENT)
        assert self.selection.state is SelectionState.TRUST_ONLY

        self.selection.set_mood(Mood.CALM)
        assert self.selection.state is SelectionState.BOTH_SELECTED

        self.selection.clear_trust()
        assert self.selection.state is SelectionState.MOOD_ONLY

        self.selection.set_trust(Trust.ABSENT)
        self.selection.clear_mood()
        assert self.selection.state is SelectionState.TRUST_ONLY

        self.selection.clear_trust()
        assert self.selection.state is SelectionState.NONE_SELECTED

    def test_cells_are_independent(self):
        """Test that setting one cell never changes the other."""
        self.selection.set_trust(Trust.ABSENT)
        for mood in Mood.all():
            self.selection.set_mood(mood)
            assert self.selection.trust is Trust.ABSENT

        for trust in Trust.all():
            self.selection.set_trust(trust)
            assert self.selection.mood is Mood.HOPEFUL

    def test_observer_sees_committed_value(self):
        """Test that observers run once per change, after the change."""
        self.selection.set_trust(Trust.PRESENT)
        self.selection.set_mood(Mood.CLOSED)
        self.selection.clear_trust()

        assert self.changes == [
            (Trust.PRESENT, None),
            (Trust.PRESENT, Mood.CLOSED),
            (None, Mood.CLOSED),
        ]

    def test_clearing_unset_cell_is_silent(self):
        """Test that clearing an unset cell leaves it unset without notifying."""
        self.selection.clear_trust()
        self.selection.clear_mood()

        assert self.selection.trust is None
        assert self.changes == []

    def test_setting_same_value_is_silent(self):
        """Test that re-selecting the current value does not notify."""
        self.selection.set_mood(Mood.CALM)
        self.selection.set_mood(Mood.CALM)
        assert len(self.changes) == 1

    def test_unsubscribe(self):
        """Test that an unsubscribed observer is no longer called."""
        calls = []
        unsubscribe = self.selection.subscribe(lambda s: calls.append(s.state))
        self.selection.set_trust(Trust.ABSENT)
        unsubscribe()
        self.selection.set_mood(Mood.CALM)

        assert calls == [SelectionState.TRUST_ONLY]

    def test_rejects_raw_values(self):
        """Test that unparsed input cannot reach the selection."""
        with pytest.raises(TypeError):
            self.selection.set_trust("Present")
        with pytest.raises(TypeError):
            self.selection.set_mood(Trust.PRESENT)


class TestInputBoundary:
    """Test suite for applying raw input values to a selection."""

    def setup_method(self):
        """Set up a fresh selection for each test."""
        self.selection = Selection()

    def test_trust_by_name(self):
        """Test that a display name selects the trust value."""
        assert apply_trust_input(self.selection, "Present")
        assert self.selection.trust is Trust.PRESENT

    def test_mood_by_name_or_rank(self):
        """Test that moods can be selected by name or by rank."""
        assert apply_mood_input(self.selection, "Closed")
        assert self.selection.mood is Mood.CLOSED

        assert apply_mood_input(self.selection, 5)
        assert self.selection.mood is Mood.CALM

    def test_invalid_input_keeps_previous_value(self):
        """Test that unrecognized values are ignored, not treated as a clear."""
        apply_trust_input(self.selection, "Absent")
        apply_mood_input(self.selection, "Cautious")

        assert not apply_trust_input(self.selection, "Maybe")
        assert not apply_mood_input(self.selection, "cautious")
        assert not apply_mood_input(self.selection, 7)
        assert not apply_mood_input(self.selection, "3")

        assert self.selection.trust is Trust.ABSENT
        assert self.selection.mood is Mood.CAUTIOUS

    def test_invalid_input_on_unset_cell(self):
        """Test that an ignored value leaves an unset cell unset."""
        assert not apply_mood_input(self.selection, 0)
        assert self.selection.mood is None

    def test_apply_event(self):
        """Test set and clear events for both fields."""
        assert apply_event(self.selection, SelectionEvent(field="trust", value="Absent"))
        assert apply_event(self.selection, SelectionEvent(field="mood", value=2))
        assert self.selection.state is SelectionState.BOTH_SELECTED

        assert apply_event(self.selection, SelectionEvent(field="mood", action="clear"))
        assert self.selection.mood is None
        assert self.selection.trust is Trust.ABSENT

        assert not apply_event(self.selection, SelectionEvent(field="trust", value="?"))
        assert self.selection.trust is Trust.ABSENT


class TestDerivation:
    """Test suite for deriving the current suggestion."""

    def setup_method(self):
        """Set up a fresh selection and derivation for each test."""
        self.selection = Selection()
        self.derivation = Derivation(self.selection)
        self.results = []
        self.derivation.subscribe(self.results.append)

    def test_pure_function(self):
        """Test that a suggestion needs both a trust and a mood."""
        assert current_suggestion(None, None) is None
        assert current_suggestion(Trust.PRESENT, None) is None
        assert current_suggestion(None, Mood.CALM) is None
        assert current_suggestion(Trust.PRESENT, Mood.CALM) == DEFAULT_TABLE.lookup(
            Trust.PRESENT, Mood.CALM
        )

    def test_fresh_session(self):
        """Test that a fresh session has no suggestion."""
        assert self.derivation.current is None

    def test_trust_only(self):
        """Test that selecting only the trust gives no suggestion."""
        self.selection.set_trust(Trust.PRESENT)
        assert self.derivation.current is None

    def test_both_selected(self):
        """Test that selecting both gives the matching suggestion."""
        self.selection.set_trust(Trust.PRESENT)
        self.selection.set_mood(Mood.HOPEFUL)
        assert self.derivation.current.action == "Enjoy yourselves."

    def test_clear_after_both_selected(self):
        """Test that clearing the trust drops the suggestion but keeps the mood."""
        self.selection.set_trust(Trust.PRESENT)
        self.selection.set_mood(Mood.HOPEFUL)
        self.selection.clear_trust()

        assert self.derivation.current is None
        assert self.selection.mood is Mood.HOPEFUL

    def test_mood_by_rank_then_trust(self):
        """Test selecting the mood by rank before the trust."""
        apply_mood_input(self.selection, 1)
        apply_trust_input(self.selection, "Absent")
        assert self.derivation.current.action == "Stay away"

    def test_invalid_input_keeps_suggestion(self):
        """Test that an ignored value does not change the suggestion."""
        apply_trust_input(self.selection, "Present")
        apply_mood_input(self.selection, "Calm")
        before = self.derivation.current

        apply_mood_input(self.selection, "Ecstatic")
        assert self.derivation.current == before
        assert len(self.results) == 2

    def test_never_stale(self):
        """Test that every change is followed by exactly one recomputation."""
        self.selection.set_trust(Trust.ABSENT)
        self.selection.set_mood(Mood.ANGUISHED)
        self.selection.set_trust(Trust.PRESENT)
        self.selection.clear_mood()

        assert self.results == [
            None,
            DEFAULT_TABLE.lookup(Trust.ABSENT, Mood.ANGUISHED),
            DEFAULT_TABLE.lookup(Trust.PRESENT, Mood.ANGUISHED),
            None,
        ]

    def test_idempotent_clear(self):
        """Test that clearing an unset trust produces no recomputation."""
        self.selection.clear_trust()
        assert self.results == []
        assert self.derivation.current is None

    def test_reenterable(self):
        """Test that a session can go around the state machine repeatedly."""
        for _ in range(3):
            self.selection.set_trust(Trust.ABSENT)
            self.selection.set_mood(Mood.CALM)
            assert self.derivation.current.action == "Be calm / hopeful."
            self.selection.clear_mood()
            self.selection.clear_trust()
            assert self.derivation.current is None

    def test_sessions_are_independent(self):
        """Test that two selections never share state."""
        other = Selection()
        other_derivation = Derivation(other)

        self.selection.set_trust(Trust.PRESENT)
        self.selection.set_mood(Mood.HOPEFUL)

        assert other.trust is None
        assert other_derivation.current is None

    def test_close(self):
        """Test that a closed derivation stops following the selection."""
        self.derivation.close()
        self.selection.set_trust(Trust.PRESENT)
        self.selection.set_mood(Mood.HOPEFUL)
        assert self.derivation.current is None
