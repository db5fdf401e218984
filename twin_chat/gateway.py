"""GraphQL gateway exposing the chat service as queries and mutations.

The gateway owns no business logic: it parses and validates documents,
binds schema fields to :class:`~twin_chat.service.ChatService` calls,
serializes the returned entities and maps service errors onto GraphQL
error codes.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from graphql import DocumentNode, GraphQLError, build_schema, execute_sync, parse, validate

from .errors import InvalidArgument, NotFound
from .service import ChatService
from .singleflight import SingleFlightCache
from .wire import encode_chat, encode_message

logger = logging.getLogger(__name__)

SCHEMA_SDL = """
scalar DateTime
scalar JSON

enum Role {
  USER
  ASSISTANT
}

type Message {
  id: ID!
  text: String
  role: Role!
  imageUrls: [String!]!
  content: [JSON!]!
  toolCalls: [ToolCall!]!
  toolResults: [String!]!
  createdAt: DateTime!
}

type ToolCallResult {
  content: String
  imageUrls: [String!]!
}

type ToolCall {
  id: String!
  name: String!
  isCompleted: Boolean!
  messageId: String!
  result: ToolCallResult
}

type Chat {
  id: ID!
  name: String!
  messages: [Message!]!
  createdAt: DateTime!
}

type Query {
  getChats(first: Int! = 10, offset: Int! = 0): [Chat!]!
  getChat(id: ID!): Chat!
}

type Mutation {
  createChat(name: String): Chat!
  sendMessage(chatId: ID!, text: String!): Message!
  deleteChat(chatId: ID!): Chat!
}
"""

ERROR_CODES = {
    InvalidArgument: "BAD_USER_INPUT",
    NotFound: "NOT_FOUND",
}


def _is_request_error(error: GraphQLError) -> bool:
    """True when the error comes from GraphQL itself rather than from a resolver."""
    return error.original_error is None or isinstance(error.original_error, GraphQLError)


def _empty_list(_source: Any, _info: Any) -> List[Any]:
    return []


class DocumentRejected(Exception):
    """A GraphQL document failed to parse or validate."""

    def __init__(self, errors: List[GraphQLError], code: str) -> None:
        super().__init__(errors[0].message if errors else code)
        self.errors = errors
        self.code = code


class ChatGateway:
    """Executes GraphQL requests against a chat service."""

    def __init__(self, service: ChatService, *, documents: Optional[SingleFlightCache[DocumentNode]] = None) -> None:
        self.service = service
        self.schema = build_schema(SCHEMA_SDL)
        if documents is None:
            documents = SingleFlightCache(max_entries=service.config.document_cache_size)
        self.documents: SingleFlightCache[DocumentNode] = documents
        self._bind_resolvers()

    def _bind_resolvers(self) -> None:
        query = self.schema.query_type.fields
        query["getChats"].resolve = self._get_chats
        query["getChat"].resolve = self._get_chat

        mutation = self.schema.mutation_type.fields
        mutation["createChat"].resolve = self._create_chat
        mutation["sendMessage"].resolve = self._send_message
        mutation["deleteChat"].resolve = self._delete_chat

        # Tool calls are part of the client contract but never produced here.
        message = self.schema.type_map["Message"].fields
        message["toolCalls"].resolve = _empty_list
        message["toolResults"].resolve = _empty_list

    def execute(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None,
        operation_name: Optional[str] = None,
    ) -> Tuple[int, Dict[str, Any]]:
        """Run a request and return ``(http_status, response_body)``."""
        try:
            document = self.documents.get(query, lambda: self._parse_and_validate(query))
        except DocumentRejected as exc:
            logger.warning("Rejected GraphQL document (%s): %s", exc.code, exc)
            return 400, {"errors": [self._format_error(error, exc.code) for error in exc.errors]}

        logger.info("Executing GraphQL operation %s", operation_name or "<anonymous>")
        result = execute_sync(
            self.schema,
            document,
            variable_values=variables,
            operation_name=operation_name,
        )

        body: Dict[str, Any] = {"data": result.data}
        if result.errors:
            body["errors"] = [self._format_error(error) for error in result.errors]
        # Requests that never reached a resolver (bad variables, unknown
        # operation) are client errors; resolver failures keep HTTP 200.
        rejected = result.data is None and all(_is_request_error(error) for error in result.errors or [])
        return (400 if rejected else 200), body

    def _parse_and_validate(self, query: str) -> DocumentNode:
        try:
            document = parse(query)
        except GraphQLError as exc:
            raise DocumentRejected([exc], "GRAPHQL_PARSE_FAILED") from exc

        errors = validate(self.schema, document)
        if errors:
            raise DocumentRejected(list(errors), "GRAPHQL_VALIDATION_FAILED")
        logger.debug("Cached parsed GraphQL document (%d characters)", len(query))
        return document

    @staticmethod
    def _format_error(error: GraphQLError, code: Optional[str] = None) -> Dict[str, Any]:
        payload = dict(error.formatted)
        original = error.original_error
        if code is None:
            if _is_request_error(error):
                code = "BAD_USER_INPUT"
            else:
                code = next(
                    (value for kind, value in ERROR_CODES.items() if isinstance(original, kind)),
                    "INTERNAL_SERVER_ERROR",
                )
        if code == "INTERNAL_SERVER_ERROR":
            logger.error("Unhandled error while resolving %s", error.path, exc_info=original)
            payload["message"] = "Internal server error"
        payload["extensions"] = {**(error.extensions or {}), "code": code}
        return payload

    # ---------- Resolvers ----------
    def _get_chats(self, _root: Any, _info: Any, **args: Any) -> List[Dict[str, Any]]:
        chats = self.service.list_chats(args.get("first"), args.get("offset"))
        return [encode_chat(chat) for chat in chats]

    def _get_chat(self, _root: Any, _info: Any, **args: Any) -> Dict[str, Any]:
        return encode_chat(self.service.get_chat(args["id"]))

    def _create_chat(self, _root: Any, _info: Any, **args: Any) -> Dict[str, Any]:
        return encode_chat(self.service.create_chat(args.get("name")))

    def _send_message(self, _root: Any, _info: Any, **args: Any) -> Dict[str, Any]:
        return encode_message(self.service.send_message(args["chatId"], args["text"]))

    def _delete_chat(self, _root: Any, _info: Any, **args: Any) -> Dict[str, Any]:
        return encode_chat(self.service.delete_chat(args["chatId"]))
