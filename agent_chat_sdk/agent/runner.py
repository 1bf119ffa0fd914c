"""Conversation driver: model steps, concurrent tool calls and history persistence."""

from __future__ import annotations

import asyncio
import inspect
import time
import uuid
from dataclasses import dataclass, field
from typing import Any

from agent_chat_sdk.agent.config import AgentChatRouteConfig, ModelConfig
from agent_chat_sdk.agent.errors import NotAuthenticatedError, StorageNotConfiguredError
from agent_chat_sdk.agent.requests import ChatRequest, HistoryRequest
from agent_chat_sdk.llm.base import LLMResponse
from agent_chat_sdk.memory.storage import ChatMessage, Conversation, ToolCall, ToolResult
from agent_chat_sdk.tools.base import is_tool_error, tool_error_message
from agent_chat_sdk.utils.logging import get_logger
from agent_chat_sdk.utils.monitoring import record_llm_latency

logger = get_logger(__name__)


@dataclass
class StepResult:
    """One model step with the tool calls it made and their results."""

    text: str
    tool_calls: list[ToolCall] = field(default_factory=list)
    tool_results: list[ToolResult] = field(default_factory=list)
    finish_reason: str | None = None


@dataclass
class TurnResult:
    """Outcome of a conversation turn; ``messages`` are the model messages added by it."""

    conversation_id: str | None
    text: str
    steps: list[StepResult]
    messages: list[dict[str, Any]]


def _default_model() -> ModelConfig:
    from agent_chat_sdk.llm.anthropic import AnthropicProvider

    return ModelConfig(provider=AnthropicProvider())


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def _is_authenticated(config: AgentChatRouteConfig) -> bool:
    return bool(await _maybe_await(config.auth_func()))


def _build_step(response: LLMResponse, outputs: list[Any]) -> StepResult:
    tool_calls = [
        ToolCall(tool_call_id=tc.id, tool_name=tc.name, input=tc.arguments)
        for tc in response.tool_calls
    ]
    tool_results = [
        ToolResult(
            tool_call_id=tc.id,
            tool_name=tc.name,
            output=output,
            error=tool_error_message(output),
            is_error=is_tool_error(output),
        )
        for tc, output in zip(response.tool_calls, outputs)
    ]
    return StepResult(
        text=response.content,
        tool_calls=tool_calls,
        tool_results=tool_results,
        finish_reason=response.finish_reason,
    )


def _step_messages(response: LLMResponse, step: StepResult) -> list[dict[str, Any]]:
    """Assistant message plus one tool message per result, in OpenAI chat shape."""
    assistant: dict[str, Any] = {"role": "assistant", "content": response.content}
    if not response.tool_calls:
        return [assistant]
    assistant["tool_calls"] = [
        {"id": tc.id, "type": "function", "function": {"name": tc.name, "arguments": tc.arguments}}
        for tc in response.tool_calls
    ]
    return [assistant] + [
        {
            "role": "tool",
            "tool_call_id": result.tool_call_id,
            "content": result.output,
            "is_error": result.is_error,
        }
        for result in step.tool_results
    ]


async def save_step(config: AgentChatRouteConfig, conversation_id: str | None, step: StepResult) -> None:
    """Persist a step as an assistant message. Storage errors are logged, never raised."""
    if config.storage is None or not conversation_id:
        return
    if not step.text and not step.tool_calls:
        return
    message = ChatMessage(
        id=str(uuid.uuid4()),
        role="assistant",
        content=step.text,
        tool_calls=step.tool_calls or None,
        tool_results=step.tool_results or None,
    )
    try:
        await config.storage.save_message(conversation_id, message)
    except Exception as e:
        logger.exception("assistant_message_save_failed", conversation_id=conversation_id, error=str(e))


async def _finish_step(
    config: AgentChatRouteConfig,
    model: ModelConfig,
    conversation_id: str | None,
    step: StepResult,
) -> None:
    if model.on_step_finish is None:
        await save_step(config, conversation_id, step)
        return
    try:
        await _maybe_await(model.on_step_finish(step))
    except Exception as e:
        logger.exception("on_step_finish_failed", error=str(e))


async def run_conversation_turn(
    config: AgentChatRouteConfig,
    messages: list[dict[str, Any]],
    conversation_id: str | None = None,
) -> TurnResult:
    """
    Run model steps until the model stops calling tools or ``max_steps`` is reached.

    Tool calls of one step run concurrently. Wrapped tools never raise, so a
    failed tool shows up as an error result and the turn carries on.
    """
    model = config.model or _default_model()
    history = list(messages)
    added: list[dict[str, Any]] = []
    steps: list[StepResult] = []
    schemas = config.tools.get_tool_schemas() or None
    kwargs: dict[str, Any] = {}
    if model.temperature is not None:
        kwargs["temperature"] = model.temperature

    for step_index in range(model.max_steps):
        start = time.perf_counter()
        response = await model.provider.generate(history, schemas, system=config.system_prompt, **kwargs)
        record_llm_latency(model.provider.name, time.perf_counter() - start)

        outputs = await asyncio.gather(
            *[config.tools.execute_tool(tc.name, tc.arguments) for tc in response.tool_calls]
        )
        step = _build_step(response, list(outputs))
        steps.append(step)
        step_messages = _step_messages(response, step)
        history.extend(step_messages)
        added.extend(step_messages)
        logger.info(
            "step_finished",
            step=step_index + 1,
            tool_calls=len(step.tool_calls),
            tool_errors=sum(1 for r in step.tool_results if r.is_error),
        )
        await _finish_step(config, model, conversation_id, step)
        if not response.tool_calls:
            break
    else:
        logger.warning("max_steps_reached", max_steps=model.max_steps)

    text = "\n\n".join(s.text for s in steps if s.text)
    return TurnResult(conversation_id=conversation_id, text=text, steps=steps, messages=added)


async def stream_message(config: AgentChatRouteConfig, request: ChatRequest) -> TurnResult:
    """
    Authenticate, persist the incoming user message and run a turn.

    Raises:
        NotAuthenticatedError: ``auth_func`` returned False.
    """
    if not await _is_authenticated(config):
        logger.error("not_authenticated")
        raise NotAuthenticatedError("Unauthorized")

    user_message = request.last_user_message()
    if config.storage is not None and request.conversation_id and user_message is not None:
        try:
            await config.storage.save_message(
                request.conversation_id,
                ChatMessage(
                    id=str(uuid.uuid4()),
                    role="user",
                    content=ChatRequest.stored_content(user_message),
                ),
            )
        except Exception as e:
            logger.exception("user_message_save_failed", conversation_id=request.conversation_id, error=str(e))

    return await run_conversation_turn(config, request.to_model_messages(), request.conversation_id)


async def get_chat_history(config: AgentChatRouteConfig, request: HistoryRequest) -> Conversation | None:
    """
    Load a stored conversation.

    Raises:
        NotAuthenticatedError: ``auth_func`` returned False.
        StorageNotConfiguredError: The route has no storage backend.
    """
    if not await _is_authenticated(config):
        logger.error("not_authenticated")
        raise NotAuthenticatedError("Unauthorized")
    if config.storage is None:
        raise StorageNotConfiguredError("Chat history not available - storage not configured")
    return await config.storage.get_conversation(request.conversation_id)
