"""
FastAPI server for the tears service.

This module implements the HTTP API for picking a trust level and mood per
session, reading the resulting suggestion, and streaming session changes as
Server-Sent Events. It is a thin adapter: all behavior lives in the core.
"""

import asyncio
import json
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field, StrictInt, model_validator

from .config import Settings
from .events import SelectionEvent
from .models import Mood, Trust
from .store import SessionNotFound, SessionRegistry, SessionStore
from .suggestions import DEFAULT_TABLE
from .views import (
    MoodView,
    SessionSnapshot,
    SuggestionView,
    TableEntryView,
    TrustView,
)

logger = logging.getLogger(__name__)


# API Request/Response Schemas
class TrustUpdate(BaseModel):
    """Payload for trust update requests."""

    value: str = Field(..., description="Trust display name, e.g. Present")


class MoodUpdate(BaseModel):
    """Payload for mood update requests, by display name or by rank."""

    value: str | None = Field(None, description="Mood display name, e.g. Calm")
    rank: StrictInt | None = Field(None, description="Mood rank, 1 to 6")

    @model_validator(mode="after")
    def _exactly_one(self) -> "MoodUpdate":
        if (self.value is None) == (self.rank is None):
            raise ValueError("Provide exactly one of 'value' or 'rank'")
        return self


class SelectionResponse(BaseModel):
    """Response model for selection changes."""

    accepted: bool = Field(..., description="False if the value was ignored")
    session: SessionSnapshot = Field(..., description="The session after the change")


def create_app(registry: SessionRegistry) -> FastAPI:
    """
    Create a FastAPI application with the given session registry.

    Args:
        registry: The SessionRegistry instance to use for the application

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Lifespan context manager for FastAPI application."""
        logger.info("Serving %d suggestions", len(DEFAULT_TABLE))
        yield

    app = FastAPI(
        title="Tears",
        description="Suggestions for approaching someone who is sad",
        version="0.1.0",
        lifespan=lifespan,
    )

    def get_store(session_id: str) -> SessionStore:
        try:
            return registry.get(session_id)
        except SessionNotFound:
            raise HTTPException(status_code=404, detail="Session not found")

    async def change(session_id: str, event: SelectionEvent) -> SelectionResponse:
        store = get_store(session_id)
        accepted, snapshot = await store.apply(event)
        return SelectionResponse(accepted=accepted, session=snapshot)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "tears"}

    @app.get("/trust")
    async def list_trust() -> list[TrustView]:
        """List trust values in declaration order."""
        return [TrustView.of(trust) for trust in Trust.all()]

    @app.get("/moods")
    async def list_moods() -> list[MoodView]:
        """List moods from most to least severe."""
        return [MoodView.of(mood) for mood in Mood.all()]

    @app.get("/suggestions")
    async def list_suggestions() -> list[TableEntryView]:
        """List the whole suggestion table."""
        return [
            TableEntryView(
                trust=trust, mood=mood, suggestion=SuggestionView.of(suggestion)
            )
            for (trust, mood), suggestion in DEFAULT_TABLE.items()
        ]

    @app.post("/sessions", status_code=201)
    async def create_session() -> SessionSnapshot:
        """Start a new session with nothing selected."""
        store = await registry.create()
        return await store.read()

    @app.get("/sessions/{session_id}")
    async def get_session(session_id: str) -> SessionSnapshot:
        """Get the current selection and suggestion of a session."""
        return await get_store(session_id).read()

    @app.delete("/sessions/{session_id}", status_code=204)
    async def delete_session(session_id: str) -> None:
        """End a session."""
        try:
            await registry.close(session_id)
        except SessionNotFound:
            raise HTTPException(status_code=404, detail="Session not found")

    @app.put("/sessions/{session_id}/trust")
    async def set_trust(session_id: str, update: TrustUpdate) -> SelectionResponse:
        """
        Set the trust level of a session.

        Unrecognized values are ignored and leave the selection unchanged.
        """
        event = SelectionEvent(field="trust", value=update.value)
        return await change(session_id, event)

    @app.delete("/sessions/{session_id}/trust")
    async def clear_trust(session_id: str) -> SelectionResponse:
        """Clear the trust level of a session."""
        return await change(session_id, SelectionEvent(field="trust", action="clear"))

    @app.put("/sessions/{session_id}/mood")
    async def set_mood(session_id: str, update: MoodUpdate) -> SelectionResponse:
        """
        Set the mood of a session, by display name or by rank.

        Unrecognized values are ignored and leave the selection unchanged.
        """
        value = update.value if update.value is not None else update.rank
        event = SelectionEvent(field="mood", value=value)
        return await change(session_id, event)

    @app.delete("/sessions/{session_id}/mood")
    async def clear_mood(session_id: str) -> SelectionResponse:
        """Clear the mood of a session."""
        return await change(session_id, SelectionEvent(field="mood", action="clear"))

    @app.get("/sessions/{session_id}/stream")
    async def stream_session(session_id: str) -> StreamingResponse:
        """
        Stream session snapshots via Server-Sent Events.

        The current snapshot is sent immediately upon connection, followed by
        one snapshot per change, until the session ends.

        Returns:
            StreamingResponse with text/event-stream content type
        """
        store = get_store(session_id)

        async def event_generator() -> AsyncGenerator[str, None]:
            """Generate SSE events for session changes."""
            try:
                async with store.stream() as snapshots:
                    async for snapshot in snapshots:
                        yield f"data: {snapshot.model_dump_json()}\n\n"
            except asyncio.CancelledError:
                # Client disconnected
                pass
            except Exception as e:
                logger.exception("Stream for session %s failed", session_id)
                error_data = json.dumps({"error": str(e)})
                yield f"event: error\ndata: {error_data}\n\n"

        return StreamingResponse(
            event_generator(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "Connection": "keep-alive",
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Headers": "*",
            },
        )

    return app


# Default app instance, used by uvicorn
app = create_app(SessionRegistry(max_sessions=Settings.load().max_sessions))


def main(settings: Settings | None = None) -> None:
    """Main entry point for the server."""
    import uvicorn

    settings = settings or Settings.load()
    uvicorn.run(
        "tears.server:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level,
    )


if __name__ == "__main__":
    main()
