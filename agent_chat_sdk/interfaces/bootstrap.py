"""Build storage and a route config from the YAML config for the bundled entry points."""

from __future__ import annotations

from typing import Any

from agent_chat_sdk.agent.config import AgentChatRouteConfig, ModelConfig, make_agent_chat_route_config
from agent_chat_sdk.memory.in_memory import MemoryStorage
from agent_chat_sdk.memory.sqlite_storage import SQLiteStorage
from agent_chat_sdk.memory.storage import ChatStorage
from agent_chat_sdk.tools.file_operations import register_file_tools
from agent_chat_sdk.tools.registry import ToolRegistry
from agent_chat_sdk.utils.config import get_tool_execution_config


def build_storage(config: dict[str, Any]) -> ChatStorage | None:
    """Storage backend named by ``storage.backend``: memory, sqlite or none."""
    storage_cfg = config.get("storage", {})
    backend = (storage_cfg.get("backend") or "memory").lower()
    if backend == "memory":
        return MemoryStorage()
    if backend == "sqlite":
        return SQLiteStorage(storage_cfg.get("database_path", "data/agent_chat.db"))
    if backend == "none":
        return None
    raise ValueError(f"Unknown storage backend: {backend}")


def build_demo_route_config(
    config: dict[str, Any],
    storage: ChatStorage | None,
    model_config: ModelConfig | None = None,
) -> AgentChatRouteConfig:
    """Route config exposing the mock file tools, as used by the CLI and API server."""
    registry = ToolRegistry()
    register_file_tools(registry)
    return make_agent_chat_route_config(
        config.get("agent", {}).get("system_prompt", "You are a helpful assistant."),
        registry,
        tool_execution_config=get_tool_execution_config(config),
        model_config=model_config or ModelConfig.from_config(config),
        storage=storage,
    )
