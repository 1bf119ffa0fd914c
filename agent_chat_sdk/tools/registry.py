"""Tool registry with decorator-based registration and OpenAI-compatible schemas."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ValidationError

from agent_chat_sdk.tools.base import Tool, ToolErrorSentinel
from agent_chat_sdk.tools.execution import (
    ToolExecutionConfig,
    resolve_execution_config,
    wrap_tool_with_timeout_retry,
)
from agent_chat_sdk.utils.logging import get_logger

logger = get_logger(__name__)


class UnknownToolError(LookupError):
    """The model asked for a tool that is not registered."""


class ToolRegistry:
    """
    Registry of tools available to the agent.

    Example:
        >>> registry = ToolRegistry()
        >>> @registry.register("echo", "Echo back", execution_config={"retries": 0})
        ... async def echo(msg: str) -> dict:
        ...     return {"msg": msg}
    """

    def __init__(self, tools: Mapping[str, Tool] | None = None) -> None:
        self._tools: dict[str, Tool] = dict(tools or {})

    def register(
        self,
        name: str,
        description: str,
        *,
        display_name: str = "",
        input_model: type[BaseModel] | None = None,
        parameters_schema: dict[str, Any] | None = None,
        execution_config: Mapping[str, Any] | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Decorator to register a tool function."""

        def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
            self._tools[name] = Tool(
                name=name,
                description=description,
                execute=fn,
                display_name=display_name or name,
                input_model=input_model,
                parameters_schema=parameters_schema or {},
                execution_config=execution_config,
            )
            return fn

        return decorator

    def add(self, tool: Tool) -> None:
        """Register an already built Tool (replaces any tool of the same name)."""
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool:
        if name not in self._tools:
            raise UnknownToolError(f"Unknown tool: {name}")
        return self._tools[name]

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    def get_tool_names(self) -> list[str]:
        return list(self._tools)

    def get_tool_schemas(self) -> list[dict[str, Any]]:
        """Return OpenAI function-calling tool schemas."""
        return [
            {
                "type": "function",
                "function": {
                    "name": tool.name,
                    "description": tool.description,
                    "parameters": tool.json_schema(),
                },
            }
            for tool in self._tools.values()
        ]

    def wrapped(
        self,
        global_config: ToolExecutionConfig | Mapping[str, Any] | None = None,
    ) -> "ToolRegistry":
        """Return a new registry whose tools run under the timeout/retry policy and never raise."""
        if not isinstance(global_config, ToolExecutionConfig):
            global_config = resolve_execution_config(global_config)
        return ToolRegistry(
            {
                name: wrap_tool_with_timeout_retry(tool, name, global_config)
                for name, tool in self._tools.items()
            }
        )

    async def execute_tool(self, name: str, arguments: Mapping[str, Any]) -> Any:
        """
        Validate arguments and execute a tool by name.

        Unknown tools and invalid arguments come back as error sentinels rather
        than exceptions; they are not retried. Failures inside the tool are
        handled by the tool's own wrapper (see ``wrapped``).
        """
        try:
            tool = self.get(name)
        except UnknownToolError as e:
            logger.warning("tool_not_found", tool_name=name)
            return ToolErrorSentinel.from_exception(e).to_result()
        if not isinstance(arguments, Mapping):
            message = f"Arguments for tool {name} must be an object, got {type(arguments).__name__}"
            logger.warning("tool_input_invalid", tool_name=name, error=message)
            return ToolErrorSentinel(error_type="ValidationError", error_message=message, error=message).to_result()
        try:
            validated = tool.validate_input(arguments)
        except ValidationError as e:
            logger.warning("tool_input_invalid", tool_name=name, error=str(e))
            return ToolErrorSentinel.from_exception(e).to_result()
        result = tool.execute(**validated)
        if inspect.isawaitable(result):
            result = await result
        return result

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
