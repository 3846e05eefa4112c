"""MCP server exposing media discovery as a tool."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from mcp.server.fastmcp import FastMCP

from .config import ProbeConfig
from .crawler import extract
from .session import BrowserSession

logger = logging.getLogger("media_probe.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="media-probe")

_session: Optional[BrowserSession] = None


def get_session() -> BrowserSession:
    global _session
    if _session is None:
        _session = BrowserSession(ProbeConfig.from_env())
    return _session


@mcp.tool()
async def discover_media(url: str) -> Dict[str, Any]:
    """Load a web page in headless Chromium and list its video, audio and image URLs."""
    session = get_session()
    result = await extract(session, url)
    return result.to_dict()


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
