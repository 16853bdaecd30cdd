"""Reclaim Recovery MCP Server: application factory.

This module provides:
- create_app() for testability (integration tests create fresh server instances)
- Module-level `mcp` variable for FastMCP discovery
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from fastmcp import FastMCP

from reclaim.core.config.settings import get_settings
from reclaim.domains.recovery.prompts.recovery_prompts import register_recovery_prompts
from reclaim.domains.recovery.tools.recovery_tools import register_recovery_tools

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def create_app(*, clock_override: Callable[[], datetime] | None = None) -> FastMCP:
    """Create and configure the Reclaim Recovery MCP server.

    Args:
        clock_override: Source of "now" for tools called without an explicit
            ``now``. Defaults to the UTC wall clock.
    """
    settings = get_settings()
    clock = clock_override or _utc_now

    server = FastMCP(
        "Reclaim Recovery",
        instructions=(
            "Recovery tracking server. Computes money saved, quantity avoided, "
            "time recovered, dopamine level, clean streaks, savings projections "
            "and gamification points from a user's substance profile."
        ),
    )

    @server.tool
    def health_check() -> dict:
        """Check server health and return basic status information."""
        return {
            "status": "ok",
            "server": "Reclaim Recovery",
            "version": "0.1.0",
            "default_currency": settings.default_currency,
            "projection_horizons": list(settings.projection_horizons),
        }

    register_recovery_tools(server, settings, clock)
    logger.info("Recovery metric tools registered")

    register_recovery_prompts(server)

    return server


# Module-level instance for FastMCP discovery.
# Lazy: only created when this module is loaded directly (not when tests import create_app).
def __getattr__(name: str):
    if name == "mcp":
        global mcp  # noqa: PLW0603
        mcp = create_app()
        return mcp
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
