"""
Context Assembly
================

Builds what the model sees on the first turn of a request:
- The system prompt (how to use the tools, how to format answers)
- The trimmed conversation history
- The tool catalog

Token Budget:
    Tool results can be large, so history is capped at a few turns and the
    tools themselves trim their payloads. Only the current request's tool
    exchanges are sent; earlier requests contribute their final prose only.
"""

from dataclasses import dataclass, field

from icpc_coach.agent.history import MAX_HISTORY_TURNS, ConversationMessage, trim_history
from icpc_coach.tools import ToolRegistry
from icpc_coach.utils.logger import Logger

logger = Logger("Context")


SYSTEM_PROMPT = """You are an expert Codeforces assistant. You help competitive programmers query and analyze data from the Codeforces platform.

When answering questions, you MUST:
- Use the available tools to fetch real data before answering
- Format ALL responses as clean, readable **Markdown**
- Use tables when presenting lists of contests, submissions, users, or ratings
- Use code blocks for handles, verdicts, and technical terms when appropriate
- Include relevant statistics and context when available
- Be concise but thorough

For gym simulation questions ("last N gyms a user practiced/simulated"), ALWAYS use the `get_gym_simulations` tool. It does the cross-referencing server-side.
When presenting gym simulation results, format the contest name as a markdown link using the provided `link` field, e.g. `[Contest Name](link)`. Include the `difficulty` field as a column (e.g. ★★★☆☆) when present. Do NOT show a raw contestId column.
Each simulation has a `standingsStatus`: when it is `unmatched` write "not found in standings" for rank and solved; when it is `unavailable` write "standings unavailable". Never present either as a real result.

For "which gym should we do next" questions, use `get_gym_recommendations` with the team's handles and the competitor handles.

Always present data in a helpful, organized way. If a user asks for "last N" items, sort by most recent first."""


@dataclass
class AssembledContext:
    """
    The fully assembled context for the model.

    Attributes:
        system_message: The system prompt
        messages: Trimmed conversation history in OpenAI format
        tools: Tool catalog in OpenAI function format
    """
    system_message: str
    messages: list[dict]
    tools: list[dict] = field(default_factory=list)

    def to_openai_messages(self) -> list[dict]:
        """Format as messages for the OpenAI API."""
        result = [{"role": "system", "content": self.system_message}]
        result.extend(self.messages)
        return result


class ContextAssembler:
    """
    Assembles context for model requests.

    Example:
        assembler = ContextAssembler(tool_registry)
        context = assembler.assemble(messages)

        stream = await openai.chat.completions.create(
            messages=context.to_openai_messages(),
            tools=context.tools,
            stream=True,
        )
    """

    def __init__(
        self,
        registry: ToolRegistry,
        max_history_turns: int = MAX_HISTORY_TURNS,
        system_prompt: str = SYSTEM_PROMPT,
    ):
        self.registry = registry
        self.max_history_turns = max_history_turns
        self.system_prompt = system_prompt

    def assemble(self, messages: list[ConversationMessage]) -> AssembledContext:
        """Trim the history and attach the prompt and tool catalog."""
        trimmed = trim_history(messages, self.max_history_turns)
        logger.debug(f"Sending {len(trimmed)} of {len(messages)} messages")

        return AssembledContext(
            system_message=self.system_prompt,
            messages=[m.to_dict() for m in trimmed],
            tools=self.registry.get_openai_functions(),
        )
