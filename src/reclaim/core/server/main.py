"""Reclaim server entry point: ``python -m reclaim.core.server.main``."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from reclaim.core.config.settings import Settings, get_settings
from reclaim.core.server.app import create_app

logger = logging.getLogger(__name__)


def _is_loopback_host(host: str) -> bool:
    if host in {"localhost"}:
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def _check_metrics_defaults(settings: Settings) -> None:
    """Refuse to serve projections over non-positive horizons or a malformed currency."""
    bad = [h for h in settings.projection_horizons if h <= 0]
    if bad:
        raise RuntimeError(f"PROJECTION_HORIZONS must be positive day counts, got {bad}")
    if not settings.default_currency.strip() or len(settings.default_currency) > 3:
        raise RuntimeError(
            f"DEFAULT_CURRENCY must be a code of at most 3 characters, "
            f"got {settings.default_currency!r}"
        )


def run() -> None:
    """Start the Reclaim MCP server with Streamable HTTP transport."""
    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.reclaim_log_level.upper(), logging.INFO))

    if not settings.reclaim_allow_insecure_bind and not _is_loopback_host(settings.reclaim_host):
        raise RuntimeError(
            "Refusing to bind Reclaim server to a non-loopback host without an auth layer. "
            "Set RECLAIM_ALLOW_INSECURE_BIND=true to override (unsafe)."
        )
    _check_metrics_defaults(settings)

    logger.info(
        "Starting Reclaim Recovery server on %s:%d (currency %s, projections at %s days)",
        settings.reclaim_host,
        settings.reclaim_port,
        settings.default_currency,
        ", ".join(str(h) for h in settings.projection_horizons) or "no",
    )

    mcp = create_app()
    mcp.run(
        transport="streamable-http",
        host=settings.reclaim_host,
        port=settings.reclaim_port,
    )


if __name__ == "__main__":
    run()
