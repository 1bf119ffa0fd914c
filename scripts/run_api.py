"""Run the agent chat HTTP API."""

from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from agent_chat_sdk.interfaces.api import run_api

if __name__ == "__main__":
    run_api()
