"""
HTTP surface for the coach: the SSE chat endpoint and the static UI.
"""

from icpc_coach.server.app import ChatRequest, create_app

__all__ = ["ChatRequest", "create_app"]
