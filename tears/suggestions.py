"""
The suggestion table: one suggestion for every trust and mood combination.

The table is built once when this module is imported and is never modified
afterwards, so it can be shared freely between sessions.
"""

import logging
from collections.abc import Iterator, Mapping
from types import MappingProxyType

from .errors import MissingTableEntry
from .models import Mood, Suggestion, Trust

logger = logging.getLogger(__name__)

_CAUTIOUS = Suggestion(
    action="Occasionally ask if they want something",
    description=(
        "If you are sure the person wants something (that isn't harmful), "
        'ask "do you want ____"?\n'
        "\n"
        "Make sure the conversation is paced such that they are able to "
        "handle it.\n"
        "\n"
        'Don\'t ask why, don\'t require an answer -- provide a way "out" '
        '(e.g. "you don\'t have to answer"). Asking such questions is '
        'perceived as "justify yourself", and may cause them to hate you '
        "(which they may not vocalize)."
    ),
)

SUGGESTIONS: Mapping[tuple[Trust, Mood], Suggestion] = {
    (Trust.ABSENT, Mood.ANGUISHED): Suggestion(
        action="Stay away",
        description=(
            'As a "stranger", your presence pressurizes the person, and may '
            "aggravate them, even when your motive is pure.\n"
            "\n"
            "It may be best to find someone whom they already trust."
        ),
    ),
    (Trust.ABSENT, Mood.CLOSED): Suggestion(
        action="Stay away",
        description=(
            "Leave a gift if you must (e.g. chocolate), but your presence "
            "pressurizes the person.\n"
            "\n"
            "If they accept the gift in your absence, then that may be the "
            "beginning of trust."
        ),
    ),
    (Trust.ABSENT, Mood.CAUTIOUS): _CAUTIOUS,
    (Trust.ABSENT, Mood.UNSETTLED): Suggestion(
        action='Ask, "would you like to say anything?", then wait.',
        description=(
            "Just listen, don't problem solve -- you haven't established "
            "trust with the person to do so.\n"
            "\n"
            "At this stage, you may have some rational conversation, but "
            "nothing that would introduce too much emotional pressure.\n"
            "\n"
            "Be ready to leave them alone if that is what they want (they may "
            "not say it)."
        ),
    ),
    (Trust.ABSENT, Mood.CALM): Suggestion(
        action="Be calm / hopeful.",
        description=(
            "Find some gentle fun -- the person is ready to explore.\n"
            "\n"
            "Be ready to leave them alone if that is what they want (they may "
            "not say it)."
        ),
    ),
    (Trust.ABSENT, Mood.HOPEFUL): Suggestion(
        action="Enjoy yourselves.",
        description=(
            "Make new happy memories -- the person needs them.\n"
            "\n"
            "This is your chance to help them believe life can be good."
        ),
    ),
    (Trust.PRESENT, Mood.ANGUISHED): Suggestion(
        action="Be fully present with them",
        description=(
            "Simply sit quietly with them and allow them to grieve.\n"
            "\n"
            "Any more than that may overwhelm the person."
        ),
    ),
    (Trust.PRESENT, Mood.CLOSED): Suggestion(
        action="Remain at a small distance",
        description=(
            "Leave a gift if you have one, to show that they are still "
            "someone you care for; but allow a little distance -- your "
            "presence may feel like pressure to the person in the moment.\n"
            "\n"
            "Distance allows them to settle, proximity allows them to feel "
            "cared for."
        ),
    ),
    (Trust.PRESENT, Mood.CAUTIOUS): _CAUTIOUS,
    (Trust.PRESENT, Mood.UNSETTLED): Suggestion(
        action='Ask, "would you like to say anything?", then wait.',
        description=(
            'Listen, and if it feels right you may ask, "Would you like some '
            'help with it?" (if you are able to help).\n'
            "\n"
            "At this stage, you may have some rational conversation, but "
            "nothing that would introduce too much emotional pressure."
        ),
    ),
    (Trust.PRESENT, Mood.CALM): Suggestion(
        action="Be calm / hopeful.",
        description="Find some gentle fun -- the person is ready to explore.",
    ),
    (Trust.PRESENT, Mood.HOPEFUL): Suggestion(
        action="Enjoy yourselves.",
        description=(
            "Make new happy memories -- the person needs them.\n"
            "\n"
            "Help them remember life can be good."
        ),
    ),
}


class SuggestionTable:
    """
    Read-only mapping from every (Trust, Mood) pair to a Suggestion.

    Construction fails if any pair is missing, so a table that exists is
    always complete and lookups cannot fail.
    """

    def __init__(self, entries: Mapping[tuple[Trust, Mood], Suggestion]) -> None:
        missing = [
            (trust, mood)
            for trust in Trust.all()
            for mood in Mood.all()
            if (trust, mood) not in entries
        ]
        if missing:
            pairs = ", ".join(f"({trust}, {mood})" for trust, mood in missing)
            raise MissingTableEntry(f"No suggestion for: {pairs}")

        self._entries = MappingProxyType(
            {
                (trust, mood): entries[(trust, mood)]
                for trust in Trust.all()
                for mood in Mood.all()
            }
        )

    def lookup(self, trust: Trust, mood: Mood) -> Suggestion:
        """Return the suggestion for the given trust and mood."""
        return self._entries[(trust, mood)]

    def items(self) -> Iterator[tuple[tuple[Trust, Mood], Suggestion]]:
        """Iterate over all entries, trust-major in declaration order."""
        return iter(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


def build_table(
    entries: Mapping[tuple[Trust, Mood], Suggestion] = SUGGESTIONS,
) -> SuggestionTable:
    """
    Build the suggestion table.

    Args:
        entries: The authored suggestions, defaults to the built-in ones

    Returns:
        A complete, read-only SuggestionTable

    Raises:
        MissingTableEntry: if any trust and mood pair has no suggestion
    """
    table = SuggestionTable(entries)
    logger.debug("Built suggestion table with %d entries", len(table))
    return table


DEFAULT_TABLE = build_table()
