"""FastAPI entry point for the chat gateway."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from .config import ChatConfig
from .gateway import ChatGateway
from .mock_data import seed_mock_chats
from .service import ChatService
from .utils import setup_logging

logger = logging.getLogger(__name__)


class GraphQLRequest(BaseModel):
    query: str = Field(..., description="GraphQL document to execute.")
    operationName: Optional[str] = Field(None, description="Operation to run when the document holds several.")
    variables: Optional[Dict[str, Any]] = Field(None, description="Values for the operation's variables.")

    @field_validator("query")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("query must not be empty")
        return value


def create_app(
    chat_config: Optional[ChatConfig] = None,
    *,
    service: Optional[ChatService] = None,
    log_dir: Optional[str] = None,
) -> FastAPI:
    if log_dir:
        setup_logging(log_dir, logging.INFO)

    config = chat_config or (service.config if service else ChatConfig())
    service = service or ChatService(config)
    if config.mock_chats:
        seed_mock_chats(service.store, count=config.mock_chats)
    gateway = ChatGateway(service)

    app = FastAPI(title="Twin Chat", version="0.1.0")
    app.state.service = service
    app.state.gateway = gateway

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        logger.debug("Health check requested")
        return {"status": "ok", "chats": len(app.state.service.store)}

    @app.post("/graphql")
    async def graphql(request: GraphQLRequest) -> JSONResponse:
        logger.info("Received GraphQL request (operation=%s)", request.operationName or "<anonymous>")
        status, body = await run_in_threadpool(
            app.state.gateway.execute,
            request.query,
            request.variables,
            request.operationName,
        )
        return JSONResponse(status_code=status, content=body)

    return app
