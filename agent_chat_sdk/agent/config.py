"""Route configuration: tools wrapped with the execution policy, model, auth and storage."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from agent_chat_sdk.llm.base import LLMProvider
from agent_chat_sdk.memory.storage import ChatStorage
from agent_chat_sdk.tools.base import Tool
from agent_chat_sdk.tools.execution import ToolExecutionConfig, resolve_execution_config
from agent_chat_sdk.tools.registry import ToolRegistry

AuthFunc = Callable[[], Awaitable[bool] | bool]
StepCallback = Callable[..., Awaitable[None] | None]

DEFAULT_MAX_STEPS = 5
DEFAULT_TEMPERATURE = 0.3


async def allow_all() -> bool:
    return True


@dataclass
class ModelConfig:
    """
    Model settings for a conversation turn.

    Attributes:
        provider: LLM provider used for every step.
        temperature: Sampling temperature passed to the provider.
        max_steps: Stop after this many model steps even if tools are still being called.
        on_step_finish: Replaces the default assistant-message persister when set.
    """

    provider: LLMProvider
    temperature: float | None = DEFAULT_TEMPERATURE
    max_steps: int = DEFAULT_MAX_STEPS
    on_step_finish: StepCallback | None = None

    @classmethod
    def from_config(cls, config: dict[str, Any], provider: LLMProvider | None = None) -> "ModelConfig":
        from agent_chat_sdk.llm.factory import get_llm_from_config

        agent_cfg = config.get("agent", {})
        return cls(
            provider=provider or get_llm_from_config(config),
            temperature=agent_cfg.get("temperature", DEFAULT_TEMPERATURE),
            max_steps=agent_cfg.get("max_steps", DEFAULT_MAX_STEPS),
        )


@dataclass
class AgentChatRouteConfig:
    """Everything the chat and history routes need. ``tools`` are already wrapped."""

    tools: ToolRegistry
    system_prompt: str
    auth_func: AuthFunc = allow_all
    model: ModelConfig | None = None
    storage: ChatStorage | None = None
    tool_execution_config: ToolExecutionConfig = field(default_factory=ToolExecutionConfig)


def make_agent_chat_route_config(
    system_prompt: str,
    tools: ToolRegistry | Mapping[str, Tool],
    *,
    auth_func: AuthFunc = allow_all,
    tool_execution_config: Mapping[str, Any] | ToolExecutionConfig | None = None,
    model_config: ModelConfig | None = None,
    storage: ChatStorage | None = None,
) -> AgentChatRouteConfig:
    """
    Build the route config, wrapping every tool with timeout/retry.

    The global policy is the defaults overridden by ``tool_execution_config``;
    each tool's own ``execution_config`` is merged over that.
    """
    global_config = resolve_execution_config(tool_execution_config)
    if not isinstance(tools, ToolRegistry):
        tools = ToolRegistry(tools)
    return AgentChatRouteConfig(
        tools=tools.wrapped(global_config),
        system_prompt=system_prompt,
        auth_func=auth_func,
        model=model_config,
        storage=storage,
        tool_execution_config=global_config,
    )
