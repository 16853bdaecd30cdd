"""MCP Prompts: interaction templates for recovery check-ins."""

from __future__ import annotations

from fastmcp import FastMCP


def register_recovery_prompts(mcp: FastMCP) -> None:
    """Register recovery domain MCP prompts."""

    @mcp.prompt()
    def recovery_progress_prompt() -> str:
        """Prompt template for reviewing overall recovery progress."""
        return """I'd like to review my recovery progress. Please show me:

1. How many days I've been clean and my current streak
2. How much money I've saved and what I've avoided
3. My current dopamine level and how close I am to the next one
4. What I'd save if I keep going for another week, month and year

Keep it encouraging and concrete."""

    @mcp.prompt()
    def daily_checkin_prompt(mood: int = 5, craving: int = 5) -> str:
        """Prompt template for a daily mood and craving check-in."""
        return f"""Here is my check-in for today: mood {mood}/10, craving {craving}/10.

Please score this check-in, tell me whether it counts as a healthy day,
and suggest one thing I can do in the next hour if my craving is high."""
