"""Tool definition and the structured error result returned in place of a failure."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from agent_chat_sdk.tools.execution import ToolExecutionConfig

TIMEOUT_ERROR_TYPE = "ToolTimeoutError"
RETRY_EXHAUSTED_ERROR_TYPE = "ToolRetryExhaustedError"


class ToolErrorSentinel(BaseModel):
    """
    Failure of a tool call, delivered as a value instead of an exception.

    Serialized by alias to the shape the UI and storage layers inspect::

        {"__toolError": true, "__errorType": "ToolTimeoutError",
         "__errorMessage": "...", "error": "...", "success": false}
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tool_error: Literal[True] = Field(default=True, alias="__toolError")
    error_type: str = Field(alias="__errorType")
    error_message: str = Field(alias="__errorMessage")
    error: str
    success: Literal[False] = False

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ToolErrorSentinel":
        message = str(exc) or exc.__class__.__name__
        return cls(error_type=exc.__class__.__name__, error_message=message, error=message)

    def to_result(self) -> dict[str, Any]:
        """Return the plain dict handed back to the conversation driver."""
        return self.model_dump(by_alias=True)


def is_tool_error(value: Any) -> bool:
    """True when a tool output is an error sentinel (detected by payload shape)."""
    if isinstance(value, ToolErrorSentinel):
        return True
    return isinstance(value, Mapping) and value.get("__toolError") is True


def tool_error_message(value: Any) -> str | None:
    """Human-readable message of an error sentinel, or None for a normal output."""
    if isinstance(value, ToolErrorSentinel):
        return value.error_message
    if is_tool_error(value):
        return value.get("__errorMessage") or value.get("error") or "Unknown error occurred"
    return None


def tool_result_status(output: Any) -> str:
    """Status text for a tool result: distinct for timeouts, exhausted retries and other errors."""
    if is_tool_error(output):
        error_type = output.error_type if isinstance(output, ToolErrorSentinel) else output.get("__errorType")
        if error_type == TIMEOUT_ERROR_TYPE:
            return "Timed out"
        if error_type == RETRY_EXHAUSTED_ERROR_TYPE:
            return "Failed after retries"
        return "Error"
    if output is not None:
        return "Completed"
    return "Running"


@dataclass
class Tool:
    """
    A named operation the agent may invoke.

    Attributes:
        name: Tool name exposed to the model.
        description: Description exposed to the model.
        execute: Async (or plain) callable receiving the validated input as keyword arguments.
        display_name: Short label for UIs ("Reading file").
        input_model: Optional pydantic model used to validate input and derive the JSON schema.
        parameters_schema: JSON schema properties/required used when no input_model is given.
        execution_config: Per-tool timeout/retry overrides, merged over the global policy.
    """

    name: str
    description: str
    execute: Callable[..., Any]
    display_name: str = ""
    input_model: type[BaseModel] | None = None
    parameters_schema: dict[str, Any] = field(default_factory=dict)
    execution_config: Mapping[str, Any] | ToolExecutionConfig | None = None

    def json_schema(self) -> dict[str, Any]:
        if self.input_model is not None:
            return self.input_model.model_json_schema()
        return {
            "type": "object",
            "properties": self.parameters_schema.get("properties", {}),
            "required": self.parameters_schema.get("required", []),
        }

    def validate_input(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        """Validate raw arguments; raises pydantic.ValidationError on bad input."""
        if self.input_model is None:
            return dict(arguments)
        return dict(self.input_model.model_validate(dict(arguments)))


def create_tool(
    name: str,
    description: str,
    execute: Callable[..., Any],
    *,
    display_name: str = "",
    input_model: type[BaseModel] | None = None,
    parameters_schema: dict[str, Any] | None = None,
    execution_config: Mapping[str, Any] | None = None,
) -> Tool:
    """Build a Tool with keyword-only options."""
    return Tool(
        name=name,
        description=description,
        execute=execute,
        display_name=display_name or name,
        input_model=input_model,
        parameters_schema=parameters_schema or {},
        execution_config=execution_config,
    )
