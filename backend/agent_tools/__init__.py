"""Agent-facing tools exposed by this service."""

from agent_tools.email import build_send_email_tool

__all__ = ["build_send_email_tool"]
