"""Model Context Protocol server exposing Kaggle API tools over JSON-RPC."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, TextIO

from .client import KaggleClient
from .errors import JsonError, KaggleMcpError
from .models import AuthenticationResponse, Competition

log = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "kaggle-mcp"
SERVER_VERSION = "0.1.0"
INSTRUCTIONS = (
    "This server provides access to the Kaggle API through MCP. "
    "First authenticate using the 'authenticate' tool with your Kaggle credentials."
)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

_I32_MIN, _I32_MAX = -(2**31), 2**31 - 1


def _object(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise JsonError(f"invalid type: expected a JSON object, got {type(data).__name__}")
    return data


def _string(data: Mapping[str, Any], key: str, default: str | None = None) -> str:
    if key not in data:
        if default is None:
            raise JsonError(f"missing field `{key}`")
        return default
    value = data[key]
    if not isinstance(value, str):
        raise JsonError(f"invalid type for field `{key}`: expected str, got {type(value).__name__}")
    return value


def _int32(data: Mapping[str, Any], key: str, default: int) -> int:
    if key not in data:
        return default
    value = data[key]
    if not isinstance(value, int) or isinstance(value, bool):
        raise JsonError(f"invalid type for field `{key}`: expected int, got {type(value).__name__}")
    if not _I32_MIN <= value <= _I32_MAX:
        raise JsonError(f"value {value} out of range for field `{key}`")
    return value


def _rfc3339(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    micro = value.microsecond
    if micro:
        text += f".{micro // 1000:03d}" if micro % 1000 == 0 else f".{micro:06d}"
    return f"{text}+00:00"


def _competition_json(competition: Competition) -> dict[str, Any]:
    return {
        "ref": competition.ref,
        "title": competition.title,
        "url": competition.url,
        "category": competition.category,
        "deadline": None if competition.deadline is None else _rfc3339(competition.deadline),
        "reward": competition.reward,
        "teamCount": competition.team_count,
        "userHasEntered": competition.user_has_entered,
        "description": competition.description,
    }


def _text_result(text: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": False}


@dataclass
class AuthenticateParams:
    """Arguments of the authenticate tool."""

    kaggle_username: str
    kaggle_key: str

    def to_dict(self) -> dict[str, Any]:
        return {"kaggle_username": self.kaggle_username, "kaggle_key": self.kaggle_key}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AuthenticateParams:
        data = _object(data)
        return cls(
            kaggle_username=_string(data, "kaggle_username"),
            kaggle_key=_string(data, "kaggle_key"),
        )


@dataclass
class CompetitionsListParams:
    """Arguments of the competitions_list tool; every field has a default."""

    search: str = ""
    category: str = "all"
    group: str = "general"
    sort_by: str = "latestDeadline"
    page: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "search": self.search,
            "category": self.category,
            "group": self.group,
            "sort_by": self.sort_by,
            "page": self.page,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CompetitionsListParams:
        data = _object(data)
        return cls(
            search=_string(data, "search", ""),
            category=_string(data, "category", "all"),
            group=_string(data, "group", "general"),
            sort_by=_string(data, "sort_by", "latestDeadline"),
            page=_int32(data, "page", 1),
        )


class ToolError(Exception):
    """A protocol error answered to the client as a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def __str__(self) -> str:
        return self.message

    @classmethod
    def internal_error(cls, message: str, data: Any = None) -> ToolError:
        return cls(INTERNAL_ERROR, message, data)

    @classmethod
    def invalid_params(cls, message: str, data: Any = None) -> ToolError:
        return cls(INVALID_PARAMS, message, data)

    def to_dict(self) -> dict[str, Any]:
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


_AUTHENTICATE_SCHEMA = {
    "title": "AuthenticateParams",
    "type": "object",
    "properties": {
        "kaggle_username": {"type": "string", "description": "Your Kaggle username"},
        "kaggle_key": {"type": "string", "description": "Your Kaggle API key"},
    },
    "required": ["kaggle_key", "kaggle_username"],
}

_COMPETITIONS_LIST_SCHEMA = {
    "title": "CompetitionsListParams",
    "type": "object",
    "properties": {
        "search": {"type": "string", "default": "", "description": "Term(s) to search for"},
        "category": {
            "type": "string",
            "default": "all",
            "description": "Filter by category (all, featured, research, recruitment, "
            "gettingStarted, masters, playground)",
        },
        "group": {
            "type": "string",
            "default": "general",
            "description": "Filter by group (general, entered, inClass)",
        },
        "sort_by": {
            "type": "string",
            "default": "latestDeadline",
            "description": "Sort by (grouped, prize, earliestDeadline, latestDeadline, "
            "numberOfTeams, recentlyCreated)",
        },
        "page": {
            "type": "integer",
            "format": "int32",
            "default": 1,
            "description": "Page number for results paging",
        },
    },
}


class KaggleMcpServer:
    """Serves the Kaggle tools to an MCP client."""

    def __init__(self, client: KaggleClient | None = None) -> None:
        self.client = client if client is not None else KaggleClient()

    def get_info(self) -> dict[str, Any]:
        """Return the server description sent in reply to ``initialize``."""
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            "instructions": INSTRUCTIONS,
        }

    def initialize(self, params: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Try to load stored credentials, then describe the server."""
        try:
            self.client.load_credentials()
        except KaggleMcpError as exc:
            log.debug("No stored credentials loaded: %s", exc)
        return self.get_info()

    def authenticate(self, params: AuthenticateParams) -> dict[str, Any]:
        """Authenticate with the Kaggle API using a username and API key."""
        try:
            self.client.authenticate(params.kaggle_username, params.kaggle_key)
        except KaggleMcpError as exc:
            raise ToolError.internal_error(str(exc)) from exc
        response = AuthenticationResponse(
            success=True,
            message="Successfully authenticated with Kaggle API",
            username=params.kaggle_username,
        )
        return _text_result(json.dumps(response.to_dict(), indent=2, ensure_ascii=False))

    def competitions_list(self, params: CompetitionsListParams) -> dict[str, Any]:
        """List Kaggle competitions with filtering and sorting."""
        if not self.client.is_authenticated():
            raise ToolError.internal_error(
                "Not authenticated. Please use the authenticate tool first."
            )
        try:
            competitions = self.client.list_competitions(
                params.search, params.category, params.group, params.sort_by, params.page
            )
        except KaggleMcpError as exc:
            raise ToolError.internal_error(f"Error listing competitions: {exc}") from exc
        result = [_competition_json(competition) for competition in competitions]
        return _text_result(json.dumps(result, indent=2, sort_keys=True, ensure_ascii=False))

    def list_tools(self) -> list[dict[str, Any]]:
        """Describe the tools this server offers."""
        return [
            {
                "name": "authenticate",
                "description": "Authenticate with the Kaggle API using your username and API key",
                "inputSchema": _AUTHENTICATE_SCHEMA,
            },
            {
                "name": "competitions_list",
                "description": "List available Kaggle competitions with filtering and sorting options",
                "inputSchema": _COMPETITIONS_LIST_SCHEMA,
            },
        ]

    def call_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Run the named tool with the given arguments."""
        tools: dict[str, tuple[Any, Callable[[Any], dict[str, Any]]]] = {
            "authenticate": (AuthenticateParams, self.authenticate),
            "competitions_list": (CompetitionsListParams, self.competitions_list),
        }
        try:
            params_type, handler = tools[name]
        except KeyError:
            raise ToolError.invalid_params("tool not found") from None
        try:
            params = params_type.from_dict(arguments if arguments is not None else {})
        except JsonError as exc:
            raise ToolError.invalid_params(str(exc)) from exc
        return handler(params)

    def _dispatch(self, method: str, params: Mapping[str, Any]) -> Any:
        if method == "initialize":
            return self.initialize(params)
        if method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": self.list_tools()}
        if method == "tools/call":
            name = params.get("name")
            if not isinstance(name, str):
                raise ToolError.invalid_params("missing tool name")
            arguments = params.get("arguments")
            if arguments is not None and not isinstance(arguments, Mapping):
                raise ToolError.invalid_params("tool arguments must be an object")
            return self.call_tool(name, arguments)
        raise ToolError(METHOD_NOT_FOUND, "Method not found", {"method": method})

    def handle_message(self, message: Any) -> dict[str, Any] | None:
        """Answer one JSON-RPC message; notifications get no answer."""
        if not isinstance(message, Mapping):
            return _error_response(None, ToolError(INVALID_REQUEST, "Invalid request"))
        request_id = message.get("id")
        method = message.get("method")
        if method is None and ("result" in message or "error" in message):
            return None
        is_notification = "id" not in message
        if message.get("jsonrpc") != "2.0" or not isinstance(method, str):
            if is_notification:
                return None
            return _error_response(request_id, ToolError(INVALID_REQUEST, "Invalid request"))
        if is_notification:
            log.debug("Received notification: %s", method)
            return None
        params = message.get("params")
        if params is None:
            params = {}
        try:
            if not isinstance(params, Mapping):
                raise ToolError.invalid_params("params must be an object")
            result = self._dispatch(method, params)
        except ToolError as exc:
            return _error_response(request_id, exc)
        except Exception as exc:  # noqa: BLE001 - every failure must reach the client
            log.exception("Unexpected error handling %s", method)
            return _error_response(request_id, ToolError.internal_error(str(exc)))
        return {"jsonrpc": "2.0", "id": request_id, "result": result}

    def serve(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        """Read line-delimited JSON-RPC messages until end of input."""
        source = stdin if stdin is not None else sys.stdin
        sink = stdout if stdout is not None else sys.stdout
        for line in source:
            line = line.strip()
            if not line:
                continue
            try:
                message = json.loads(line)
            except ValueError as exc:
                response: dict[str, Any] | None = _error_response(
                    None, ToolError(PARSE_ERROR, f"Parse error: {exc}")
                )
            else:
                response = self.handle_message(message)
            if response is not None:
                sink.write(json.dumps(response, ensure_ascii=False) + "\n")
                sink.flush()


def _error_response(request_id: Any, error: ToolError) -> dict[str, Any]:
    return {"jsonrpc": "2.0", "id": request_id, "error": error.to_dict()}