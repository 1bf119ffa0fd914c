"""FastAPI chat and history routes."""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from agent_chat_sdk.agent.config import AgentChatRouteConfig
from agent_chat_sdk.agent.errors import NotAuthenticatedError, StorageNotConfiguredError
from agent_chat_sdk.agent.requests import ChatRequest, HistoryRequest
from agent_chat_sdk.agent.runner import get_chat_history, stream_message
from agent_chat_sdk.memory.sqlite_storage import SQLiteStorage
from agent_chat_sdk.utils.logging import get_logger

logger = get_logger(__name__)

_project_root = Path(__file__).resolve().parent.parent.parent


def create_app(
    route_config: AgentChatRouteConfig,
    route: str = "/api/chat",
    history_route: str = "/api/chat/history",
) -> FastAPI:
    """
    Build the app serving ``POST route`` (one conversation turn) and
    ``GET history_route?conversation_id=...`` (stored conversation).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        storage = route_config.storage
        if isinstance(storage, SQLiteStorage):
            async with storage:
                yield
        else:
            yield

    app = FastAPI(title="Agent Chat API", version="0.1.0", lifespan=lifespan)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/tools")
    async def list_tools() -> dict[str, Any]:
        schemas = route_config.tools.get_tool_schemas()
        return {"tools": [s["function"]["name"] for s in schemas], "schemas": schemas}

    @app.post(route)
    async def chat(request: Request) -> Any:
        try:
            chat_request = ChatRequest.model_validate(await request.json())
        except (ValueError, ValidationError) as e:
            logger.error("chat_request_invalid", error=str(e))
            raise HTTPException(status_code=400, detail="Bad Request")
        try:
            turn = await stream_message(route_config, chat_request)
        except NotAuthenticatedError:
            raise HTTPException(status_code=401, detail="Unauthorized")
        except Exception as e:
            logger.exception("chat_handler_failed", error=str(e))
            raise HTTPException(status_code=500, detail="Internal Server Error")
        return jsonable_encoder(
            {
                "conversation_id": turn.conversation_id,
                "text": turn.text,
                "steps": turn.steps,
                "messages": turn.messages,
            }
        )

    @app.get(history_route)
    async def chat_history(conversation_id: str | None = None) -> Any:
        try:
            history_request = HistoryRequest(conversation_id=conversation_id)
        except ValidationError as e:
            logger.error("history_request_invalid", error=str(e))
            raise HTTPException(status_code=400, detail="Bad Request")
        try:
            conversation = await get_chat_history(route_config, history_request)
        except NotAuthenticatedError:
            raise HTTPException(status_code=401, detail="Unauthorized")
        except StorageNotConfiguredError as e:
            raise HTTPException(status_code=501, detail=str(e))
        except Exception as e:
            logger.exception("chat_history_failed", error=str(e))
            raise HTTPException(status_code=500, detail="Internal Server Error")
        if conversation is None:
            raise HTTPException(status_code=404, detail="Conversation not found")
        return conversation.model_dump(mode="json")

    return app


def run_api(host: str = "0.0.0.0", port: int = 8000) -> None:
    """Serve the demo file tools with uvicorn. Entry point for the agent-chat-api script."""
    import uvicorn

    from agent_chat_sdk.interfaces.bootstrap import build_demo_route_config, build_storage
    from agent_chat_sdk.utils.config import load_config
    from agent_chat_sdk.utils.logging import setup_logging

    load_dotenv(_project_root / ".env")
    setup_logging(level=os.getenv("LOG_LEVEL", "INFO"), json_logs=os.getenv("LOG_JSON") == "1")
    config = load_config()
    metrics_port = os.getenv("PROMETHEUS_METRICS_PORT", "")
    if metrics_port.isdigit():
        try:
            from agent_chat_sdk.utils.monitoring import start_metrics_server

            start_metrics_server(int(metrics_port))
            logger.info("prometheus_metrics_started", port=int(metrics_port))
        except OSError as e:
            logger.warning("prometheus_metrics_failed", error=str(e))
    route_config = build_demo_route_config(config, build_storage(config))
    api_cfg = config.get("api", {})
    app = create_app(
        route_config,
        route=api_cfg.get("route", "/api/chat"),
        history_route=api_cfg.get("history_route", "/api/chat/history"),
    )
    port = int(os.getenv("AGENT_CHAT_API_PORT", port))
    uvicorn.run(app, host=host, port=port)
