"""
Agent Core
==========

The streaming agent loop that answers one request.

Agent Loop:
    Conversation (trimmed)
         │
         ▼
    Streaming model request with tools ◀─────────────┐
         │                                           │
         ├── text fragments ──▶ caller, immediately  │
         ├── tool calls ──▶ caller notified, args    │
         │                  accumulated              │
         ▼                                           │
    ┌─── Stopped for tool use? ───┐                  │
    │                             │                  │
    Yes                           No                 │
    │                             │                  │
    ▼                             ▼                  │
    Execute tools              done                  │
    Add results to context ──────────────────────────┘

Streaming text straight through matters: the model often says "let me
check..." before calling a tool, and holding that back until the tools
finish would make the UI look frozen.

Every request ends with exactly one `done` event. An unexpected failure
sends `error` first; text already streamed is never retracted.
"""

from typing import AsyncIterator

from openai import AsyncOpenAI

from icpc_coach.agent.context import ContextAssembler
from icpc_coach.agent.events import (
    DoneEvent,
    ErrorEvent,
    RetryingEvent,
    StreamEvent,
    ToolResultEvent,
)
from icpc_coach.agent.history import ConversationMessage
from icpc_coach.agent.stream import RETRY_DISCARDED_ERROR, TurnAccumulator, stream_with_retry
from icpc_coach.agent.tools_executor import ToolExecutor
from icpc_coach.tools import ToolRegistry, register_all_tools
from icpc_coach.utils.config import AgentConfig, get_config
from icpc_coach.utils.logger import Logger

logger = Logger("Agent")


class Agent:
    """
    Answers Codeforces questions by streaming a tool-calling model.

    Example:
        agent = Agent()

        async for event in agent.stream([ConversationMessage(role="user", content="Rating of tourist?")]):
            print(event.type)   # text, tool_call, tool_result, ..., done
    """

    def __init__(
        self,
        client: AsyncOpenAI | None = None,
        model: str | None = None,
        registry: ToolRegistry | None = None,
        settings: AgentConfig | None = None,
    ):
        """
        Initialize the agent.

        Args:
            client: OpenAI-compatible async client (built from config if omitted)
            model: Default model (from config if omitted)
            registry: Tool registry (all tools registered if omitted)
            settings: Loop tuning (from config if omitted)
        """
        if client is None or model is None or settings is None:
            config = get_config()
            client = client or AsyncOpenAI(api_key=config.openai.api_key, base_url=config.openai.base_url)
            model = model or config.openai.model
            settings = settings or config.agent

        self.client = client
        self.model = model
        self.settings = settings

        self.registry = registry or register_all_tools()
        self.context_assembler = ContextAssembler(self.registry, settings.max_history_turns)
        self.tool_executor = ToolExecutor(self.registry)

        logger.info(f"Agent initialized with model: {self.model}")

    async def stream(
        self,
        messages: list[ConversationMessage],
        model: str | None = None,
    ) -> AsyncIterator[StreamEvent]:
        """
        Run the loop for one request, yielding events as they happen.

        Args:
            messages: Full conversation, ending with the question to answer
            model: Model override for this request

        Yields:
            StreamEvent variants; the last one is always DoneEvent
        """
        model = model or self.model
        logger.info(f"Processing request ({len(messages)} messages)", {"model": model})

        try:
            async for event in self._run(messages, model):
                yield event
        except Exception as e:
            logger.error("Agent loop failed", e)
            yield ErrorEvent(message=str(e) or type(e).__name__)

        yield DoneEvent()

    async def _run(self, messages: list[ConversationMessage], model: str) -> AsyncIterator[StreamEvent]:
        context = self.context_assembler.assemble(messages)
        conversation = context.to_openai_messages()

        turn_number = 0
        while True:
            turn_number += 1
            turn = TurnAccumulator()

            async def open_stream():
                return await self.client.chat.completions.create(
                    model=model,
                    messages=conversation,
                    tools=context.tools or None,
                    max_tokens=self.settings.max_tokens,
                    stream=True,
                )

            async for item in stream_with_retry(
                open_stream,
                max_retries=self.settings.max_retries,
                base_seconds=self.settings.retry_base_seconds,
                max_seconds=self.settings.retry_max_seconds,
            ):
                if isinstance(item, RetryingEvent):
                    # Calls announced by the abandoned attempt will never run
                    for name in turn.announced_tool_names:
                        yield ToolResultEvent(name=name, success=False, error=RETRY_DISCARDED_ERROR)
                    turn = TurnAccumulator()
                    yield item
                    continue
                for event in turn.feed(item):
                    yield event

            turn.finish()
            logger.debug(
                f"Turn {turn_number} finished",
                {"stop_reason": turn.stop_reason, "tool_calls": len(turn.tool_calls)},
            )

            if not turn.wants_tools:
                return

            conversation.append(turn.assistant_message())
            for result in await self.tool_executor.execute_parallel(turn.tool_calls):
                yield ToolResultEvent(
                    name=result.name,
                    success=result.result.success,
                    error=result.result.error,
                )
                conversation.append(result.to_openai_message())
