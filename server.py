"""Command-line entry point serving the chat GraphQL API with uvicorn."""

from __future__ import annotations

import argparse
import logging
from typing import Optional

import uvicorn

from twin_chat import ChatConfig, GenerationConfig
from twin_chat.api import create_app

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the chat GraphQL server.")
    parser.add_argument("--host", default="0.0.0.0", help="Host interface to bind.")
    parser.add_argument("--port", type=int, default=4000, help="Port to bind.")
    parser.add_argument("--log_dir", default="./logs", help="Directory for application logs.")
    parser.add_argument(
        "--llm_endpoint",
        default="http://localhost:11434/api/generate",
        help="Text-generation endpoint.",
    )
    parser.add_argument("--llm_model", default="llama3", help="Model name for completions.")
    parser.add_argument("--request_timeout", type=int, default=60, help="Timeout for generation calls (seconds).")
    parser.add_argument("--page_size", type=int, default=10, help="Chats returned by getChats when 'first' is omitted.")
    parser.add_argument("--fallback_text", default="no response", help="Reply text used when generation fails.")
    parser.add_argument("--mock_chats", type=int, default=0, help="Number of demo chats to seed at startup.")
    parser.add_argument("--document_cache_size", type=int, default=256, help="Parsed GraphQL documents kept in memory.")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    chat_cfg = ChatConfig(
        generation=GenerationConfig(
            endpoint=args.llm_endpoint,
            model=args.llm_model,
            request_timeout=args.request_timeout,
        ),
        default_page_size=args.page_size,
        fallback_text=args.fallback_text,
        mock_chats=args.mock_chats,
        document_cache_size=args.document_cache_size,
    )

    app = create_app(chat_cfg, log_dir=args.log_dir)
    logger.info("Starting chat server on %s:%d", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
