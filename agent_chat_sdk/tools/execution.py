"""Timeout, retry and error-result policy applied around every tool invocation.

Layers, innermost first:

- ``execute_with_timeout`` races one attempt against a deadline.
- ``execute_with_retry`` runs attempts sequentially with exponential backoff;
  a timeout ends the loop at once.
- ``wrap_tool_with_timeout_retry`` turns any terminal failure into a
  ``ToolErrorSentinel`` value so the conversation driver never sees an exception.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import replace
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from agent_chat_sdk.tools.base import Tool, ToolErrorSentinel
from agent_chat_sdk.utils.logging import get_logger
from agent_chat_sdk.utils.monitoring import record_tool_attempt, record_tool_execution

logger = get_logger(__name__)

T = TypeVar("T")


class ToolExecutionConfig(BaseModel):
    """
    Per-attempt timeout and retry policy. Immutable once built.

    Attributes:
        timeout_ms: Max wall-clock duration of a single attempt.
        retries: Additional attempts after the first.
        retry_delay_ms: Delay before the first retry; doubles for each later retry.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    timeout_ms: int = Field(default=30000, gt=0)
    retries: int = Field(default=3, ge=0)
    retry_delay_ms: int = Field(default=1000, ge=0)

    def merge(self, overrides: Mapping[str, Any] | ToolExecutionConfig | None) -> ToolExecutionConfig:
        """Return a new config with each non-None field of ``overrides`` replacing ours."""
        if overrides is None:
            return self
        if isinstance(overrides, ToolExecutionConfig):
            overrides = overrides.model_dump()
        updates = {k: v for k, v in overrides.items() if v is not None}
        return ToolExecutionConfig.model_validate({**self.model_dump(), **updates})


DEFAULT_TOOL_EXECUTION_CONFIG = ToolExecutionConfig()


def resolve_execution_config(
    *overrides: Mapping[str, Any] | ToolExecutionConfig | None,
) -> ToolExecutionConfig:
    """Merge overrides left to right over the defaults, e.g. global then per-tool."""
    config = DEFAULT_TOOL_EXECUTION_CONFIG
    for override in overrides:
        config = config.merge(override)
    return config


class ToolExecutionError(Exception):
    """Base class for failures raised by the execution policy itself."""

    def __init__(self, tool_name: str, message: str) -> None:
        super().__init__(message)
        self.tool_name = tool_name


class ToolTimeoutError(ToolExecutionError):
    """An attempt did not settle within ``timeout_ms``. Never retried."""

    def __init__(self, tool_name: str, timeout_ms: int) -> None:
        super().__init__(tool_name, f'Tool "{tool_name}" timed out after {timeout_ms}ms')
        self.timeout_ms = timeout_ms


class ToolRetryExhaustedError(ToolExecutionError):
    """Every attempt failed; ``last_error`` is the final underlying failure."""

    def __init__(self, tool_name: str, retries: int, last_error: BaseException) -> None:
        super().__init__(
            tool_name,
            f'Tool "{tool_name}" failed after {retries} retries. Last error: {last_error}',
        )
        self.retries = retries
        self.last_error = last_error


# Timed-out attempts keep running on their own; hold a reference until they finish.
_abandoned: set[asyncio.Future[Any]] = set()


def _release_abandoned(task: asyncio.Future[Any]) -> None:
    _abandoned.discard(task)
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug("abandoned_tool_attempt_failed", error=str(error))


async def _invoke(fn: Callable[[], Awaitable[T] | T]) -> T:
    if inspect.iscoroutinefunction(fn):
        return await fn()
    # Plain callables may block; keep them off the event loop so the deadline can fire
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(None, fn)
    if inspect.isawaitable(result):
        result = await result
    return result


async def execute_with_timeout(
    fn: Callable[[], Awaitable[T]],
    timeout_ms: int,
    tool_name: str,
) -> T:
    """
    Run one attempt of ``fn`` against a deadline of ``timeout_ms``.

    If the attempt settles first its result is returned (or its exception
    re-raised) unchanged. If the deadline fires first, ToolTimeoutError is
    raised and the attempt is abandoned: it is not cancelled and its eventual
    outcome is discarded. Plain (non-async) callables run in the default
    executor.

    Raises:
        ToolTimeoutError: The deadline elapsed first.
        ToolExecutionError: The attempt cancelled itself.
    """
    task = asyncio.ensure_future(_invoke(fn))
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout_ms / 1000)
    except asyncio.CancelledError:
        task.cancel()
        raise
    if task in done:
        if task.cancelled():
            raise ToolExecutionError(tool_name, f'Tool "{tool_name}" was cancelled')
        return task.result()
    _abandoned.add(task)
    task.add_done_callback(_release_abandoned)
    logger.warning("tool_timeout", tool_name=tool_name, timeout_ms=timeout_ms)
    raise ToolTimeoutError(tool_name, timeout_ms)


def backoff_delay_ms(retry_delay_ms: int, retry_index: int) -> int:
    """Delay before retry ``retry_index`` (0 = first retry): d, 2d, 4d, ..."""
    return retry_delay_ms * 2**retry_index


async def execute_with_retry(
    fn: Callable[[], Awaitable[T]],
    config: ToolExecutionConfig,
    tool_name: str,
    *,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """
    Run ``fn`` up to ``config.retries + 1`` times, each attempt under the timeout guard.

    Args:
        fn: Zero-argument callable producing the operation; called once per attempt.
        config: Timeout and retry policy.
        tool_name: Label used in errors and logs.
        sleep: Backoff sleeper, seconds in. Replaceable in tests.

    Raises:
        ToolTimeoutError: An attempt timed out; no further attempts are made.
        ToolRetryExhaustedError: All attempts failed with other errors.
    """
    max_attempts = config.retries + 1
    last_error: Exception | None = None
    for attempt in range(max_attempts):
        if attempt > 0:
            delay_ms = backoff_delay_ms(config.retry_delay_ms, attempt - 1)
            logger.info(
                "tool_retry_scheduled",
                tool_name=tool_name,
                attempt=attempt + 1,
                max_attempts=max_attempts,
                delay_ms=delay_ms,
            )
            await sleep(delay_ms / 1000)
        try:
            result = await execute_with_timeout(fn, config.timeout_ms, tool_name)
        except ToolTimeoutError:
            record_tool_attempt(tool_name, "timeout")
            raise
        except Exception as e:
            record_tool_attempt(tool_name, "error")
            logger.warning(
                "tool_attempt_failed",
                tool_name=tool_name,
                attempt=attempt + 1,
                max_attempts=max_attempts,
                error=str(e),
            )
            last_error = e
            continue
        record_tool_attempt(tool_name, "success")
        return result
    raise ToolRetryExhaustedError(tool_name, config.retries, last_error) from last_error


def _disposition(error: Exception) -> str:
    if isinstance(error, ToolTimeoutError):
        return "timeout"
    if isinstance(error, ToolRetryExhaustedError):
        return "retry_exhausted"
    return "error"


def wrap_tool_with_timeout_retry(
    tool: Tool,
    tool_name: str,
    global_config: ToolExecutionConfig,
) -> Tool:
    """
    Return a copy of ``tool`` whose ``execute`` never raises.

    The tool's own ``execution_config`` is merged over ``global_config`` field
    by field. On success the original value is returned unchanged; on any
    failure the result is a ``ToolErrorSentinel`` dict.
    """
    final_config = global_config.merge(tool.execution_config)
    operation = tool.execute

    async def execute(**arguments: Any) -> Any:
        try:
            result = await execute_with_retry(
                functools.partial(operation, **arguments),
                final_config,
                tool_name,
            )
        except Exception as e:
            sentinel = ToolErrorSentinel.from_exception(e)
            logger.error(
                "tool_failed_returning_error_result",
                tool_name=tool_name,
                error_type=sentinel.error_type,
                error=sentinel.error_message,
            )
            record_tool_execution(tool_name, _disposition(e))
            return sentinel.to_result()
        record_tool_execution(tool_name, "success")
        return result

    return replace(tool, execute=execute, execution_config=final_config)
