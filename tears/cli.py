"""
Command-line interface tools for the tears service.
"""

import asyncio
import json
import logging
import sys
from collections.abc import Coroutine
from typing import Any, Optional

import httpx
import typer
from httpx_sse import ServerSentEvent, aconnect_sse

from .config import Settings
from .derivation import Derivation
from .events import apply_mood_input, apply_trust_input
from .models import Mood
from .render import render_snapshot
from .selection import Selection
from .suggestions import DEFAULT_TABLE
from .views import SessionSnapshot

logger = logging.getLogger(__name__)

app = typer.Typer(help="Tears CLI tools")
session_app = typer.Typer(help="Work with sessions on a running tears server")
app.add_typer(session_app, name="session")

_URL_HELP = "Base URL of the tears service (default: $TEARS_URL)"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(message)s",
        level=level,
        stream=sys.stderr,
    )


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose logging"
    ),
) -> None:
    """Suggestions for approaching someone who is sad."""
    _setup_logging(verbose)


# MARK: - Offline Commands


@app.command()
def suggest(
    trust: Optional[str] = typer.Option(
        None, "--trust", "-t", help="Absent or Present"
    ),
    mood: Optional[str] = typer.Option(None, "--mood", "-m", help="Mood name"),
    rank: Optional[int] = typer.Option(None, "--rank", "-r", help="Mood rank, 1 to 6"),
) -> None:
    """Show the suggestion for a trust level and mood."""
    if mood is not None and rank is not None:
        print("Error: Use either --mood or --rank, not both")
        raise typer.Exit(2)

    selection = Selection()
    derivation = Derivation(selection)

    if trust is not None and not apply_trust_input(selection, trust):
        print(f"Ignoring unrecognized trust: {trust}", file=sys.stderr)
    mood_input = rank if rank is not None else mood
    if mood_input is not None and not apply_mood_input(selection, mood_input):
        print(f"Ignoring unrecognized mood: {mood_input}", file=sys.stderr)

    snapshot = SessionSnapshot.build(
        state=selection.state,
        trust=selection.trust,
        mood=selection.mood,
        suggestion=derivation.current,
    )
    print(render_snapshot(snapshot))


@app.command()
def moods() -> None:
    """List the moods, from most to least severe."""
    for mood in Mood.all():
        print(f"{mood.rank} {mood.display_name:<10} {mood.symptoms}")


@app.command()
def table() -> None:
    """Print the whole suggestion table."""
    for (trust, mood), suggestion in DEFAULT_TABLE.items():
        print(
            f"{trust.display_name:<8} {mood.rank} {mood.display_name:<10} "
            f"{suggestion.action}"
        )


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Interface to bind"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind"),
    reload: Optional[bool] = typer.Option(
        None, "--reload/--no-reload", help="Auto reload"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="uvicorn log level"
    ),
) -> None:
    """Run the tears HTTP server."""
    from .server import main as run_server

    settings = _load_settings(
        {"host": host, "port": port, "reload": reload, "log_level": log_level}
    )
    logger.info("Starting server on %s:%d", settings.host, settings.port)
    run_server(settings)


# MARK: - Session Commands


@session_app.command("new")
def session_new(
    base_url: Optional[str] = typer.Option(None, "--url", "-u", help=_URL_HELP),
) -> None:
    """Start a new session and print its id."""
    base_url = _base_url(base_url)

    async def _new() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.post(f"{base_url}/sessions")
            response.raise_for_status()
            print(response.json()["session_id"])

    _run_with_error_handling(_new(), base_url)


@session_app.command("show")
def session_show(
    session_id: str = typer.Argument(..., help="Session id"),
    base_url: Optional[str] = typer.Option(None, "--url", "-u", help=_URL_HELP),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output raw JSON"),
) -> None:
    """Show the current selection and suggestion of a session."""
    base_url = _base_url(base_url)

    async def _show() -> None:
        async with httpx.AsyncClient() as client:
            response = await client.get(f"{base_url}/sessions/{session_id}")
            response.raise_for_status()
            result = response.json()

            if json_output:
                print(json.dumps(result, indent=2))
                return

            print(render_snapshot(SessionSnapshot.model_validate(result)))

    _run_with_error_handling(_show(), base_url)


@session_app.command("set")
def session_set(
    session_id: str = typer.Argument(..., help="Session id"),
    trust: Optional[str] = typer.Option(
        None, "--trust", "-t", help="Absent or Present"
    ),
    mood: Optional[str] = typer.Option(None, "--mood", "-m", help="Mood name"),
    rank: Optional[int] = typer.Option(None, "--rank", "-r", help="Mood rank, 1 to 6"),
    base_url: Optional[str] = typer.Option(None, "--url", "-u", help=_URL_HELP),
) -> None:
    """Set the trust level and/or mood of a session."""
    if mood is not None and rank is not None:
        print("Error: Use either --mood or --rank, not both")
        raise typer.Exit(2)
    base_url = _base_url(base_url)

    async def _set() -> None:
        async with httpx.AsyncClient() as client:
            url = f"{base_url}/sessions/{session_id}"
            if trust is not None:
                response = await client.put(f"{url}/trust", json={"value": trust})
                _report_change(response, "trust", trust)
            if mood is not None:
                response = await client.put(f"{url}/mood", json={"value": mood})
                _report_change(response, "mood", mood)
            if rank is not None:
                response = await client.put(f"{url}/mood", json={"rank": rank})
                _report_change(response, "mood rank", rank)

    _run_with_error_handling(_set(), base_url)


@session_app.command("clear")
def session_clear(
    session_id: str = typer.Argument(..., help="Session id"),
    trust: bool = typer.Option(False, "--trust", "-t", help="Clear the trust level"),
    mood: bool = typer.Option(False, "--mood", "-m", help="Clear the mood"),
    base_url: Optional[str] = typer.Option(None, "--url", "-u", help=_URL_HELP),
) -> None:
    """Clear the trust level and/or mood of a session (both by default)."""
    base_url = _base_url(base_url)
    fields = [name for name, flag in (("trust", trust), ("mood", mood)) if flag]

    async def _clear() -> None:
        async with httpx.AsyncClient() as client:
            for field in fields or ["trust", "mood"]:
                response = await client.delete(
                    f"{base_url}/sessions/{session_id}/{field}"
                )
                response.raise_for_status()
                print(f"Cleared {field}")

    _run_with_error_handling(_clear(), base_url)


@session_app.command("watch")
def session_watch(
    session_id: str = typer.Argument(..., help="Session id"),
    base_url: Optional[str] = typer.Option(None, "--url", "-u", help=_URL_HELP),
) -> None:
    """Stream suggestion updates of a session in real-time."""
    base_url = _base_url(base_url)

    async def _watch() -> None:
        url = f"{base_url}/sessions/{session_id}/stream"
        print(f"Streaming from {url}... (Ctrl+C to stop)")

        async with httpx.AsyncClient(timeout=None) as client:
            async with aconnect_sse(client, "GET", url) as event_source:
                event_source.response.raise_for_status()
                async for sse in event_source.aiter_sse():
                    _handle_sse_event(sse)

    _run_with_error_handling(_watch(), base_url)


# MARK: - Private Helpers


def _load_settings(overrides: dict) -> Settings:
    try:
        return Settings.load(overrides)
    except ValueError as e:
        print(f"Error: {e}")
        raise typer.Exit(1)


def _base_url(base_url: str | None) -> str:
    return _load_settings({"base_url": base_url}).base_url


def _report_change(response: httpx.Response, field: str, value: object) -> None:
    response.raise_for_status()
    if response.json()["accepted"]:
        print(f"Set {field} to: {value}")
    else:
        print(f"Ignored unrecognized {field}: {value}")


def _handle_sse_event(sse: ServerSentEvent) -> None:
    """Handle a single SSE event."""
    try:
        # Handle error events from server
        if sse.event == "error":
            error_data = json.loads(sse.data)
            print(f"Server error: {error_data.get('error', 'Unknown error')}")
            return

        snapshot = SessionSnapshot.model_validate_json(sse.data)
        print(render_snapshot(snapshot))
        print("-" * 40)

    except ValueError as e:
        print(f"Warning: Could not parse SSE data: {sse.data} - {e}")


def _run_with_error_handling(coro: Coroutine[Any, Any, Any], base_url: str) -> None:
    """Run an async coroutine with standardized error handling."""
    try:
        asyncio.run(coro)
    except KeyboardInterrupt:
        print("\nStopped")
        raise typer.Exit(0)
    except httpx.ConnectError:
        print(f"Error: Could not connect to {base_url}")
        raise typer.Exit(1)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            print("Error: Session not found")
        else:
            print(f"Error: HTTP {e.response.status_code}")
        raise typer.Exit(1)
    except Exception as e:
        error_msg = str(e) if str(e) else f"Unknown error of type {type(e).__name__}"
        print(f"Error: {error_msg}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
