"""
Plain-text rendering of session snapshots for the terminal.
"""

from .views import (
    MOOD_BLURB,
    MOOD_LABEL,
    PLACEHOLDER,
    TRUST_BLURB,
    TRUST_LABEL,
    MoodView,
    SessionSnapshot,
    TrustView,
)


def render_trust(trust: TrustView | None) -> list[str]:
    lines = [f"{TRUST_LABEL}: {TRUST_BLURB}"]
    if trust is not None:
        lines.append(f"  {trust.value.display_name} - {trust.description}")
    return lines


def render_mood(mood: MoodView | None) -> list[str]:
    lines = [f"{MOOD_LABEL}: {MOOD_BLURB}"]
    if mood is not None:
        lines.append(f"  {mood.rank} {mood.value.display_name}")
        lines.append(f"  Symptoms: {mood.symptoms}")
        lines.append(f"  {mood.summary}")
        lines.append(f"  {mood.description}")
    return lines


def render_snapshot(snapshot: SessionSnapshot) -> str:
    """Render a snapshot the way the web page lays it out, top to bottom."""
    lines = render_trust(snapshot.trust)
    lines.append("")
    lines.extend(render_mood(snapshot.mood))
    lines.append("")

    if snapshot.suggestion is None:
        lines.append(PLACEHOLDER)
    else:
        lines.append(f"Action: {snapshot.suggestion.action}")
        for paragraph in snapshot.suggestion.paragraphs:
            lines.append("")
            lines.append(paragraph)

    return "\n".join(lines)
