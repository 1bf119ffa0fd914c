"""Tool definitions, execution policy and registry."""

from agent_chat_sdk.tools.base import (
    Tool,
    ToolErrorSentinel,
    create_tool,
    is_tool_error,
    tool_error_message,
    tool_result_status,
)
from agent_chat_sdk.tools.execution import (
    DEFAULT_TOOL_EXECUTION_CONFIG,
    ToolExecutionConfig,
    ToolExecutionError,
    ToolRetryExhaustedError,
    ToolTimeoutError,
    backoff_delay_ms,
    execute_with_retry,
    execute_with_timeout,
    resolve_execution_config,
    wrap_tool_with_timeout_retry,
)
from agent_chat_sdk.tools.registry import ToolRegistry, UnknownToolError

__all__ = [
    "DEFAULT_TOOL_EXECUTION_CONFIG",
    "Tool",
    "ToolErrorSentinel",
    "ToolExecutionConfig",
    "ToolExecutionError",
    "ToolRegistry",
    "ToolRetryExhaustedError",
    "ToolTimeoutError",
    "UnknownToolError",
    "backoff_delay_ms",
    "create_tool",
    "execute_with_retry",
    "execute_with_timeout",
    "is_tool_error",
    "resolve_execution_config",
    "tool_error_message",
    "tool_result_status",
    "wrap_tool_with_timeout_retry",
]
