"""
Tools System
============

Tools are the read-only operations the model can call to fetch Codeforces
data before it answers.

- Each tool has a name, a description and a pydantic argument model
- The argument model's JSON schema is what the model sees
- The same model validates the arguments the model actually sends

How Tools Work:
1. Agent sends the catalog with every model request
2. Model picks a tool and streams its arguments
3. Registry validates the arguments and runs the tool
4. Result (or error) goes back to the model as a tool message

This module provides:
- Tool dataclass for defining tools
- ToolResult for standardized responses
- ToolRegistry for lookup, validation and dispatch
- UnknownToolError / ToolInputError for dispatch failures
"""

import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError

from icpc_coach.utils.logger import Logger

logger = Logger("Tools")


class ToolError(Exception):
    """Base class for failures raised while dispatching a tool call."""


class UnknownToolError(ToolError):
    """The model asked for a tool that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown tool: {name}")


class ToolInputError(ToolError):
    """The arguments did not match the tool's declared schema."""

    def __init__(self, name: str, error: ValidationError):
        self.name = name
        problems = "; ".join(
            f"{'.'.join(str(p) for p in item['loc']) or 'arguments'}: {item['msg']}"
            for item in error.errors()
        )
        super().__init__(f"Invalid arguments for {name}: {problems}")


@dataclass
class ToolResult:
    """
    Standardized result from tool execution.

    Attributes:
        success: Whether the tool executed successfully
        data: The result data (varies by tool)
        error: Error message if success is False
    """
    success: bool
    data: Any = None
    error: str | None = None

    def to_message(self) -> str:
        """Format as a message for the LLM."""
        if self.success:
            return json.dumps(self.data, default=str, ensure_ascii=False)
        else:
            return f"Error: {self.error}"


@dataclass
class Tool:
    """
    Definition of a tool.

    Attributes:
        name: Unique identifier for the tool
        description: What the tool does (shown to the model for routing)
        args_model: Pydantic model declaring and validating the arguments
        execute: Async function receiving the validated arguments

    Example:
        class RatingArgs(BaseModel):
            handle: str = Field(description="Codeforces user handle")

        async def get_rating(args: RatingArgs) -> list[dict]:
            return await client.get_user_rating(args.handle)

        tool = Tool(
            name="get_user_rating",
            description="Get the rating history of a user",
            args_model=RatingArgs,
            execute=get_rating,
        )
    """
    name: str
    description: str
    args_model: type[BaseModel]
    execute: Callable[[Any], Awaitable[Any]]

    @property
    def parameters(self) -> dict:
        """JSON Schema of the arguments."""
        return self.args_model.model_json_schema()

    def validate(self, arguments: dict) -> BaseModel:
        """
        Validate raw arguments into the typed argument model.

        Raises:
            ToolInputError: If the arguments do not match the schema
        """
        try:
            return self.args_model.model_validate(arguments)
        except ValidationError as e:
            raise ToolInputError(self.name, e) from e

    def to_openai_function(self) -> dict:
        """Convert to OpenAI function calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters
            }
        }


class ToolRegistry:
    """
    Central registry for all available tools.

    Example:
        registry = ToolRegistry()
        registry.register(my_tool)

        data = await registry.dispatch("my_tool", {"handle": "tourist"})  # raises on failure
        result = await registry.execute("my_tool", {"handle": "tourist"})  # never raises
    """

    def __init__(self):
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """
        Register a tool.

        Raises:
            ValueError: If a tool with this name already exists
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug(f"Registered tool: {tool.name}")

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def get_openai_functions(self) -> list[dict]:
        """Get all tools in OpenAI function format."""
        return [tool.to_openai_function() for tool in self._tools.values()]

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    async def dispatch(self, name: str, arguments: dict) -> Any:
        """
        Validate arguments and run a tool.

        Raises:
            UnknownToolError: If no tool has this name
            ToolInputError: If the arguments are invalid
            Exception: Whatever the tool itself raises
        """
        tool = self.get(name)
        if not tool:
            raise UnknownToolError(name)

        args = tool.validate(arguments)
        logger.info(f"Executing tool: {name}", args.model_dump(by_alias=True))
        return await tool.execute(args)

    async def execute(self, name: str, arguments: dict) -> ToolResult:
        """
        Run a tool and capture any failure as a ToolResult.

        Returns:
            ToolResult with the data, or with the error message
        """
        try:
            data = await self.dispatch(name, arguments)
            return ToolResult(success=True, data=data)
        except Exception as e:
            logger.error(f"Tool execution failed: {name}", e)
            return ToolResult(success=False, error=str(e))


# Global tool registry instance
tool_registry = ToolRegistry()


def register_all_tools() -> ToolRegistry:
    """Import the tool modules; each registers its tools on import."""
    from icpc_coach.tools import codeforces_tools  # noqa: F401
    from icpc_coach.tools import gym_tools  # noqa: F401

    logger.debug(f"{len(tool_registry.list_names())} tools available")
    return tool_registry


__all__ = [
    "Tool",
    "ToolError",
    "ToolInputError",
    "ToolResult",
    "ToolRegistry",
    "UnknownToolError",
    "register_all_tools",
    "tool_registry",
]
