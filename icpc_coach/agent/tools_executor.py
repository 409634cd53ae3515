"""
Tool Executor
=============

Runs the tool calls the model requested during one turn.

The executor:
1. Parses the streamed argument JSON of each call
2. Runs the calls concurrently through the registry
3. Matches every result back to its call id
4. Formats results as tool messages for the next model request

A failing call never stops the others: its error is sent back to the
model as the call's result so it can adjust its answer.
"""

import asyncio
import json
from dataclasses import dataclass
from typing import Any

from icpc_coach.tools import ToolRegistry, ToolResult, tool_registry
from icpc_coach.utils.logger import Logger

logger = Logger("ToolExecutor")


@dataclass
class ToolCall:
    """
    A tool call requested by the model.

    Attributes:
        id: The tool call ID (for matching results)
        name: The tool name
        arguments: Parsed arguments dict
    """
    id: str
    name: str
    arguments: dict[str, Any]

    def to_openai_tool_call(self) -> dict:
        """Format for the assistant message that requested the call."""
        return {
            "id": self.id,
            "type": "function",
            "function": {"name": self.name, "arguments": json.dumps(self.arguments)},
        }


@dataclass
class ToolCallResult:
    """
    Result of executing a tool call.

    Attributes:
        tool_call_id: The original tool call ID
        name: The tool name
        result: The tool result
    """
    tool_call_id: str
    name: str
    result: ToolResult

    def to_openai_message(self) -> dict:
        """Format as a tool result message for OpenAI."""
        return {
            "role": "tool",
            "tool_call_id": self.tool_call_id,
            "content": self.result.to_message()
        }


def parse_tool_arguments(raw: str, tool_name: str = "") -> dict[str, Any]:
    """
    Parse accumulated argument JSON.

    Malformed or non-object JSON yields an empty dict instead of failing
    the turn; the tool's own validation then reports what is missing.
    """
    if not raw.strip():
        return {}
    try:
        arguments = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse arguments for {tool_name or 'tool call'}: {e}")
        return {}
    if not isinstance(arguments, dict):
        logger.warning(f"Arguments for {tool_name or 'tool call'} are not an object")
        return {}
    return arguments


class ToolExecutor:
    """
    Executes tools called by the model.

    Example:
        executor = ToolExecutor()
        results = await executor.execute_parallel(turn.tool_calls)
        for result in results:
            messages.append(result.to_openai_message())
    """

    def __init__(self, registry: ToolRegistry | None = None):
        self.registry = registry or tool_registry

    async def execute_one(self, tool_call: ToolCall) -> ToolCallResult:
        """Execute a single tool call. Never raises."""
        result = await self.registry.execute(tool_call.name, tool_call.arguments)

        if result.success:
            logger.debug(f"Tool {tool_call.name} succeeded")
        else:
            logger.warning(f"Tool {tool_call.name} failed: {result.error}")

        return ToolCallResult(
            tool_call_id=tool_call.id,
            name=tool_call.name,
            result=result
        )

    async def execute_parallel(self, tool_calls: list[ToolCall]) -> list[ToolCallResult]:
        """
        Execute the calls of one turn concurrently.

        The Codeforces rate gate still serializes the network calls, so
        completion order is arbitrary; results are matched back by call id
        and returned in request order.
        """
        completed = await asyncio.gather(*(self.execute_one(tc) for tc in tool_calls))
        by_id = {result.tool_call_id: result for result in completed}
        return [by_id[tc.id] for tc in tool_calls]
