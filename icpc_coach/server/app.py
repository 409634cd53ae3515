"""
HTTP Server
===========

Routes:
- POST /api/chat   stream an answer as Server-Sent Events
- GET  /health     liveness check
- /                the static chat UI, when the directory exists

Request body:
    {"messages": [{"role": "user", "content": "..."}], "model": "optional"}

Response frames:
    data: {"type": "text", "content": "..."}
    ...
    data: {"type": "done"}
"""

from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import StreamingResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from icpc_coach import __version__
from icpc_coach.agent import Agent, ConversationMessage, to_sse
from icpc_coach.utils.logger import Logger

logger = Logger("Server")


class ChatRequest(BaseModel):
    messages: list[ConversationMessage] = Field(min_length=1)
    model: str | None = None


SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # disable nginx buffering
}


def create_app(agent: Agent | None = None, static_dir: Path | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        agent: Agent to answer with (created on first request if omitted)
        static_dir: Directory with the chat UI, mounted at / if it exists
    """
    app = FastAPI(
        title="ICPC Coach API",
        description="Ask questions about Codeforces data",
        version=__version__,
    )
    app.state.agent = agent

    def get_agent(request: Request) -> Agent:
        if request.app.state.agent is None:
            request.app.state.agent = Agent()
        return request.app.state.agent

    @app.get("/health")
    async def health():
        """Health check endpoint"""
        return {"status": "healthy"}

    @app.post("/api/chat")
    async def chat(body: ChatRequest, request: Request):
        """Stream the agent's answer to the conversation"""
        agent = get_agent(request)
        logger.info(f"Chat request with {len(body.messages)} messages", {"model": body.model})

        async def frames() -> AsyncIterator[str]:
            async for event in agent.stream(body.messages, body.model):
                yield to_sse(event)

        return StreamingResponse(frames(), media_type="text/event-stream", headers=SSE_HEADERS)

    if static_dir is not None and static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info(f"Serving static files from {static_dir}")

    return app
