"""Data types of the Model Context Protocol and its JSON-RPC framing."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

PROTOCOL_VERSION = "2024-11-05"
_TRUNC_MAX_CHARS = 200


class JsonRpcError(Exception):
    """An error object returned by a JSON-RPC server."""

    def __init__(self, code: int, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class ToolParam:
    """One parameter taken from a tool's input schema."""

    name: str
    type: str = ""
    description: str = ""
    required: bool = False


@dataclass(frozen=True)
class ToolContent:
    """One content block of a tool call result."""

    type: str
    text: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> ToolContent:
        if not isinstance(data, Mapping):
            raise ValueError("tool content must be an object")
        kind = data.get("type") or ""
        text = data.get("text") or ""
        if not isinstance(kind, str) or not isinstance(text, str):
            raise ValueError("tool content fields must be strings")
        return cls(kind, text)


def _optional_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


@dataclass(frozen=True)
class Tool:
    """A tool exposed by an MCP server; ``input_schema`` is raw JSON text."""

    name: str
    description: str = ""
    input_schema: str | bytes | None = None

    @classmethod
    def from_dict(cls, data: Any) -> Tool:
        if not isinstance(data, Mapping):
            raise ValueError("tool must be an object")
        schema = data.get("inputSchema")
        return cls(
            name=_optional_str(data, "name"),
            description=_optional_str(data, "description"),
            input_schema=None if schema is None else json.dumps(schema),
        )

    def extract_params(self) -> list[ToolParam] | None:
        """Flatten the input schema's properties into parameters.

        Returns None when there is no schema or it cannot be read.
        """
        if not self.input_schema:
            return None
        try:
            schema = json.loads(self.input_schema)
        except ValueError:
            return None
        if schema is None:
            return []
        if not isinstance(schema, Mapping):
            return None

        properties = schema.get("properties") or {}
        required = schema.get("required") or []
        if not isinstance(properties, Mapping) or not isinstance(required, list):
            return None
        if not all(isinstance(r, str) for r in required):
            return None
        required_set = set(required)

        params = []
        for name, prop in properties.items():
            prop = prop or {}
            if not isinstance(prop, Mapping):
                return None
            try:
                kind = _optional_str(prop, "type")
                description = _optional_str(prop, "description")
            except ValueError:
                return None
            params.append(ToolParam(name, kind, description, name in required_set))
        return params


def extract_texts(contents: Iterable[ToolContent]) -> str:
    """Join the non-empty text blocks with newlines."""
    return "\n".join(c.text for c in contents if c.type == "text" and c.text)


def trunc_raw(raw: bytes | str) -> str:
    """Return ``raw`` as text, cut to 200 characters plus '...' if longer."""
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    if len(text) <= _TRUNC_MAX_CHARS:
        return text
    return text[:_TRUNC_MAX_CHARS] + "..."