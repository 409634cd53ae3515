"""
Stream Events
=============

Everything the agent tells the caller while it works, one variant per kind.
Each event is sent as a Server-Sent-Events frame:

    data: {"type": "text", "content": "Let me check..."}

Exactly one `done` ends every request, including failed ones.
A `tool_call` announced by an attempt that is then retried after a rate
limit gets a failed `tool_result` before the `retrying` event.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class TextEvent(BaseModel):
    type: Literal["text"] = "text"
    content: str


class ToolCallEvent(BaseModel):
    type: Literal["tool_call"] = "tool_call"
    name: str


class ToolResultEvent(BaseModel):
    type: Literal["tool_result"] = "tool_result"
    name: str
    success: bool
    error: str | None = None


class RetryingEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["retrying"] = "retrying"
    wait_seconds: int = Field(serialization_alias="waitSeconds", validation_alias="waitSeconds")


class DoneEvent(BaseModel):
    type: Literal["done"] = "done"


class ErrorEvent(BaseModel):
    type: Literal["error"] = "error"
    message: str


StreamEvent = Annotated[
    Union[TextEvent, ToolCallEvent, ToolResultEvent, RetryingEvent, DoneEvent, ErrorEvent],
    Field(discriminator="type"),
]

_stream_event_adapter = TypeAdapter(StreamEvent)


def to_sse(event: BaseModel) -> str:
    """Render an event as one SSE frame."""
    return f"data: {event.model_dump_json(by_alias=True, exclude_none=True)}\n\n"


def parse_event(payload: str | bytes) -> BaseModel:
    """Parse one event's JSON back into its variant."""
    return _stream_event_adapter.validate_json(payload)
