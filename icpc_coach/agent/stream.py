"""
Turn Streaming
==============

Consumes one streamed model turn.

Per-turn state machine:

    IDLE ──tool call opens──▶ ACCUMULATING_TOOL_CALL
     ▲                          │      │
     └──── next call opens ─────┘      │ (argument fragments append)
                                       │
    any state ──finish_reason──▶ TURN_COMPLETE

- Text fragments are forwarded the moment they arrive, in every state.
- Tool call fragments arriving after TURN_COMPLETE are ignored.
- A tool call's arguments are parsed only once the call closes (the next
  call opens, or the turn finishes).

Rate limits from the provider are retried by `stream_with_retry` with a
linear backoff; anything else propagates.
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable

import openai

from icpc_coach.agent.events import RetryingEvent, TextEvent, ToolCallEvent
from icpc_coach.agent.tools_executor import ToolCall, parse_tool_arguments
from icpc_coach.utils.logger import Logger

logger = Logger("Stream")

TOOL_USE_FINISH_REASON = "tool_calls"

# tool_result error for calls announced in a turn that a retry threw away
RETRY_DISCARDED_ERROR = "Discarded: the model request was retried"


class TurnState(Enum):
    IDLE = "idle"
    ACCUMULATING_TOOL_CALL = "accumulating_tool_call"
    TURN_COMPLETE = "turn_complete"


@dataclass
class _PendingToolCall:
    index: int
    id: str
    name: str
    fragments: list[str] = field(default_factory=list)


class TurnAccumulator:
    """
    Folds a turn's stream chunks into text, tool calls and a stop reason.

    Example:
        turn = TurnAccumulator()
        async for chunk in stream:
            for event in turn.feed(chunk):
                yield event          # text / tool_call events, in order
        turn.finish()
        if turn.wants_tools:
            ...
    """

    def __init__(self):
        self.state = TurnState.IDLE
        self.text_parts: list[str] = []
        self.tool_calls: list[ToolCall] = []
        self.stop_reason: str | None = None
        # Names of every tool call announced to the caller, closed or not
        self.announced_tool_names: list[str] = []
        self._pending: _PendingToolCall | None = None

    @property
    def text(self) -> str:
        return "".join(self.text_parts)

    @property
    def wants_tools(self) -> bool:
        return self.stop_reason == TOOL_USE_FINISH_REASON and bool(self.tool_calls)

    def feed(self, chunk: Any) -> list:
        """Apply one stream chunk; return the events to forward right away."""
        events = []
        for choice in chunk.choices or []:
            delta = choice.delta
            if delta is not None:
                if delta.content:
                    self.text_parts.append(delta.content)
                    events.append(TextEvent(content=delta.content))

                for fragment in delta.tool_calls or []:
                    if self.state is TurnState.TURN_COMPLETE:
                        logger.debug("Ignoring tool call fragment after turn end", {"index": fragment.index})
                        continue
                    if self.state is TurnState.IDLE or fragment.index != self._pending.index:
                        self._close_tool_call()
                        events.append(self._open_tool_call(fragment))
                    function = fragment.function
                    if function is not None and function.arguments:
                        self._pending.fragments.append(function.arguments)

            if choice.finish_reason:
                self.stop_reason = choice.finish_reason
                self.finish()
        return events

    def finish(self) -> None:
        """Close any open tool call and mark the turn complete."""
        self._close_tool_call()
        self.state = TurnState.TURN_COMPLETE

    def assistant_message(self) -> dict:
        """The assistant message to replay in the next request."""
        message: dict[str, Any] = {"role": "assistant", "content": self.text or None}
        if self.tool_calls:
            message["tool_calls"] = [tc.to_openai_tool_call() for tc in self.tool_calls]
        return message

    def _open_tool_call(self, fragment: Any) -> ToolCallEvent:
        function = fragment.function
        name = (function.name if function is not None else None) or ""
        call_id = fragment.id or f"call_{len(self.tool_calls)}_{fragment.index}"
        self._pending = _PendingToolCall(index=fragment.index, id=call_id, name=name)
        self.state = TurnState.ACCUMULATING_TOOL_CALL
        self.announced_tool_names.append(name)
        logger.debug(f"Tool call opened: {name}", {"id": call_id})
        return ToolCallEvent(name=name)

    def _close_tool_call(self) -> None:
        if self.state is not TurnState.ACCUMULATING_TOOL_CALL:
            return
        pending = self._pending
        self.tool_calls.append(ToolCall(
            id=pending.id,
            name=pending.name,
            arguments=parse_tool_arguments("".join(pending.fragments), pending.name),
        ))
        self._pending = None
        self.state = TurnState.IDLE


def is_rate_limit_error(error: BaseException) -> bool:
    """Check whether a provider error is a rate limit (HTTP 429)."""
    if isinstance(error, openai.RateLimitError):
        return True
    if isinstance(error, openai.APIStatusError) and error.status_code == 429:
        return True
    return "rate_limit" in str(error)


def backoff_seconds(attempt: int, base_seconds: int = 15, max_seconds: int = 60) -> int:
    """Linear backoff: base × (attempt + 1), capped."""
    return min(max_seconds, base_seconds * (attempt + 1))


async def stream_with_retry(
    open_stream: Callable[[], Awaitable[AsyncIterator[Any]]],
    max_retries: int = 3,
    base_seconds: int = 15,
    max_seconds: int = 60,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> AsyncIterator[Any]:
    """
    Yield a turn's chunks, reopening the stream after rate limits.

    Before each wait a RetryingEvent is yielded so the caller can both
    notify the user and reset its per-turn state; the reopened stream
    replays the turn from the start.

    Raises:
        The last error once retries are exhausted, or any non rate-limit error
    """
    for attempt in range(max_retries + 1):
        try:
            stream = await open_stream()
            async for chunk in stream:
                yield chunk
            return
        except Exception as e:
            if not is_rate_limit_error(e) or attempt >= max_retries:
                raise
            wait = backoff_seconds(attempt, base_seconds, max_seconds)
            logger.warning(f"Rate limited, retrying in {wait}s", {"attempt": attempt + 1})
            yield RetryingEvent(wait_seconds=wait)
            await sleep(wait)
