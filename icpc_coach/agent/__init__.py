"""
Agent System
============

The agent answers one request by streaming a tool-calling model:
1. Trims the caller's conversation history
2. Streams the model's answer, forwarding text as it arrives
3. Executes the tools the model asks for
4. Feeds the results back until the model is done

This module provides:
- Agent: the streaming agent loop
- ConversationMessage / trim_history: request history handling
- ContextAssembler: builds the first request
- ToolExecutor: runs a turn's tool calls
- Stream events: the closed set of events sent to the caller
"""

from icpc_coach.agent.context import ContextAssembler
from icpc_coach.agent.core import Agent
from icpc_coach.agent.events import (
    DoneEvent,
    ErrorEvent,
    RetryingEvent,
    StreamEvent,
    TextEvent,
    ToolCallEvent,
    ToolResultEvent,
    to_sse,
)
from icpc_coach.agent.history import ConversationMessage, trim_history
from icpc_coach.agent.tools_executor import ToolExecutor

__all__ = [
    "Agent",
    "ContextAssembler",
    "ConversationMessage",
    "DoneEvent",
    "ErrorEvent",
    "RetryingEvent",
    "StreamEvent",
    "TextEvent",
    "ToolCallEvent",
    "ToolExecutor",
    "ToolResultEvent",
    "to_sse",
    "trim_history",
]
