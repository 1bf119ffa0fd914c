"""CLI chat loop against the configured model, showing each tool call's status."""

from __future__ import annotations

import argparse
import asyncio
import os
import uuid
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from agent_chat_sdk.agent.config import AgentChatRouteConfig
from agent_chat_sdk.agent.runner import StepResult, run_conversation_turn
from agent_chat_sdk.interfaces.bootstrap import build_demo_route_config, build_storage
from agent_chat_sdk.memory.sqlite_storage import SQLiteStorage
from agent_chat_sdk.memory.storage import ChatMessage
from agent_chat_sdk.tools.base import tool_error_message, tool_result_status
from agent_chat_sdk.utils.config import load_config
from agent_chat_sdk.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def format_step(step: StepResult) -> list[str]:
    """One line per tool call: ``[Timed out] read_file {...}`` plus the error, if any."""
    lines = []
    for call, result in zip(step.tool_calls, step.tool_results):
        lines.append(f"  [{tool_result_status(result.output)}] {call.tool_name} {call.input}")
        if result.is_error:
            lines.append(f"    Error: {tool_error_message(result.output)}")
    return lines


async def _chat(route_config: AgentChatRouteConfig, conversation_id: str) -> None:
    history: list[dict[str, Any]] = []
    print("Agent chat. Commands: /quit, /history")
    print(f"Conversation: {conversation_id}\n")

    while True:
        try:
            user_input = input("You: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye.")
            break
        if not user_input:
            continue
        if user_input.lower() == "/quit":
            print("Bye.")
            break
        if user_input.lower() == "/history":
            await _print_history(route_config, conversation_id)
            continue

        history.append({"role": "user", "content": user_input})
        if route_config.storage is not None:
            try:
                await route_config.storage.save_message(
                    conversation_id,
                    ChatMessage(id=str(uuid.uuid4()), role="user", content=user_input),
                )
            except Exception as e:
                logger.warning("user_message_save_failed", error=str(e))
        try:
            turn = await run_conversation_turn(route_config, history, conversation_id)
        except Exception as e:
            logger.exception("agent_run_failed", error=str(e))
            print("Agent error:", e)
            history.pop()
            continue
        history.extend(turn.messages)
        for step in turn.steps:
            for line in format_step(step):
                print(line)
        print("Agent:", turn.text or "(No response)")


async def _print_history(route_config: AgentChatRouteConfig, conversation_id: str) -> None:
    if route_config.storage is None:
        print("History not available - storage not configured")
        return
    conversation = await route_config.storage.get_conversation(conversation_id)
    if conversation is None:
        print("No messages yet.")
        return
    for message in conversation.messages:
        print(f"{message.timestamp:%H:%M:%S} {message.role}: {message.content}")


async def run_conversation_loop(conversation_id: str | None = None) -> None:
    config = load_config()
    storage = build_storage(config)
    route_config = build_demo_route_config(config, storage)
    conversation_id = conversation_id or str(uuid.uuid4())
    if isinstance(storage, SQLiteStorage):
        async with storage:
            await _chat(route_config, conversation_id)
    else:
        await _chat(route_config, conversation_id)


def run_cli() -> None:
    """Entry point for the agent-chat script."""
    parser = argparse.ArgumentParser(description="Chat with a tool-using agent")
    parser.add_argument("--conversation-id", help="Resume or name a conversation")
    args = parser.parse_args()
    load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")
    setup_logging(level=os.getenv("LOG_LEVEL", "WARNING"))
    asyncio.run(run_conversation_loop(args.conversation_id))


if __name__ == "__main__":
    run_cli()
