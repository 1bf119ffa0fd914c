"""File tools over an in-memory mock file system: read_file, edit_file, list_files."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, Field

from agent_chat_sdk.tools.registry import ToolRegistry
from agent_chat_sdk.utils.logging import get_logger

logger = get_logger(__name__)

# Read/list answer quickly or not at all
FAST_TOOL_CONFIG = {"timeout_ms": 5000, "retries": 1, "retry_delay_ms": 2000}

SAMPLE_FILES = {
    "README.md": "# My Project\n\nThis is a sample project with some files.\n\n"
    "## Features\n- File reading\n- File editing\n- Chat interface",
    "package.json": '{\n  "name": "sample-project",\n  "version": "1.0.0",\n'
    '  "description": "A sample project",\n  "main": "index.js"\n}',
    "src/index.js": "console.log('Hello, World!');\n\nfunction greet(name) {\n"
    "  return `Hello, ${name}!`;\n}\n\nmodule.exports = { greet };",
}


class ReadFileInput(BaseModel):
    file_path: str = Field(description="The path to the file to read")


class EditFileInput(BaseModel):
    file_path: str = Field(description="The path to the file to edit")
    content: str = Field(description="The new content for the file")


class ListFilesInput(BaseModel):
    pass


def register_file_tools(
    registry: ToolRegistry,
    files: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Register read_file, edit_file and list_files against a fresh mock file system.

    Returns the backing dict so callers can inspect or seed it.
    """
    file_system: dict[str, str] = dict(SAMPLE_FILES if files is None else files)

    @registry.register(
        name="read_file",
        description="Read the contents of a file",
        display_name="Reading file",
        input_model=ReadFileInput,
        execution_config=FAST_TOOL_CONFIG,
    )
    async def read_file(file_path: str) -> dict:
        logger.info("tool_executed", tool_name="read_file", file_path=file_path)
        content = file_system.get(file_path)
        if content is None:
            return {"error": f"File not found: {file_path}", "available_files": list(file_system)}
        return {"file_path": file_path, "content": content}

    @registry.register(
        name="edit_file",
        description="Edit a file by replacing its entire contents",
        display_name="Editing file",
        input_model=EditFileInput,
    )
    async def edit_file(file_path: str, content: str) -> dict:
        logger.info("tool_executed", tool_name="edit_file", file_path=file_path, content_length=len(content))
        file_system[file_path] = content
        return {
            "file_path": file_path,
            "message": f"Successfully updated {file_path}",
            "content_length": len(content),
        }

    @registry.register(
        name="list_files",
        description="List all available files in the mock file system",
        display_name="Listing files",
        input_model=ListFilesInput,
        execution_config=FAST_TOOL_CONFIG,
    )
    async def list_files() -> dict:
        return {"files": list(file_system), "count": len(file_system)}

    return file_system
