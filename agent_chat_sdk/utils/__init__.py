"""Shared utilities."""

from agent_chat_sdk.utils.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
