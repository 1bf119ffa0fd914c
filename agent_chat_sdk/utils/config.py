"""Configuration loading from YAML and environment."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from agent_chat_sdk.tools.execution import ToolExecutionConfig, resolve_execution_config

_ENV_INT_OVERRIDES = {
    "AGENT_CHAT_TOOL_TIMEOUT_MS": "timeout_ms",
    "AGENT_CHAT_TOOL_RETRIES": "retries",
    "AGENT_CHAT_TOOL_RETRY_DELAY_MS": "retry_delay_ms",
}


def get_config_path(config_path: str | Path | None = None) -> Path:
    """Return the path to the config file read by load_config."""
    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent.parent / "config" / "agent_chat.yaml"
    return Path(config_path)


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load SDK config from YAML file with optional env var overrides.

    Args:
        config_path: Path to agent_chat.yaml. Defaults to config/agent_chat.yaml.

    Returns:
        Nested config dict.

    Example:
        >>> cfg = load_config()
        >>> cfg["tool_execution"]["retries"]
        3
    """
    path = get_config_path(config_path)
    if path.exists():
        with open(path, encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    else:
        config = _default_config()
    if db_path := os.getenv("AGENT_CHAT_DB"):
        config.setdefault("storage", {})["database_path"] = db_path
    for env_name, field in _ENV_INT_OVERRIDES.items():
        if value := os.getenv(env_name):
            config.setdefault("tool_execution", {})[field] = int(value)
    if api_key := os.getenv("ANTHROPIC_API_KEY"):
        primary = config.setdefault("llm", {}).setdefault("primary", {})
        if primary.get("provider", "anthropic") == "anthropic":
            primary["api_key"] = api_key
    if api_key := os.getenv("OPENAI_API_KEY"):
        primary = config.setdefault("llm", {}).setdefault("primary", {})
        if primary.get("provider") == "openai":
            primary["api_key"] = api_key
    return config


def get_tool_execution_config(config: dict[str, Any] | None = None) -> ToolExecutionConfig:
    """Build the validated global tool execution policy from the ``tool_execution`` section."""
    config = config if config is not None else load_config()
    return resolve_execution_config(config.get("tool_execution"))


def _default_config() -> dict[str, Any]:
    """Default config when no file is present."""
    return {
        "agent": {
            "system_prompt": "You are a helpful assistant.",
            "temperature": 0.3,
            "max_steps": 5,
        },
        "tool_execution": {"timeout_ms": 30000, "retries": 3, "retry_delay_ms": 1000},
        "llm": {
            "primary": {
                "provider": "anthropic",
                "model": "claude-sonnet-4-20250514",
                "max_tokens": 2000,
            }
        },
        "storage": {"backend": "sqlite", "database_path": "./data/agent_chat.db"},
        "api": {"route": "/api/chat", "history_route": "/api/chat/history"},
    }
