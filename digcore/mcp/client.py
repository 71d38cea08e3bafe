"""JSON-RPC 2.0 client for one MCP server process spoken to over stdio."""

from __future__ import annotations

import itertools
import json
import os
import queue
import subprocess
import threading
from collections.abc import Mapping, Sequence
from typing import Any

from digcore.mcp.types import (
    PROTOCOL_VERSION,
    JsonRpcError,
    Tool,
    ToolContent,
    extract_texts,
    trunc_raw,
)

CLIENT_NAME = "catpaw"
CLIENT_VERSION = "1.0"

_EOF = object()


class McpError(Exception):
    """A failure talking to an MCP server."""


class McpClient:
    """Starts an MCP server and exchanges JSON-RPC messages with it.

    Requests are serialised: each call writes one request and waits for its
    response. Timeouts are in seconds; None waits indefinitely.
    """

    def __init__(
        self,
        name: str,
        command: str,
        args: Sequence[str] = (),
        env: Mapping[str, str] | None = None,
    ) -> None:
        self.name = name
        try:
            self._proc = subprocess.Popen(
                [command, *args],
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env={**os.environ, **(env or {})},
            )
        except FileNotFoundError as exc:
            raise McpError(
                f'mcp {name}: start "{command}": {exc} (hint: use absolute path, e.g. run `which {command}`)'
            ) from exc
        except OSError as exc:
            raise McpError(f'mcp {name}: start "{command}": {exc}') from exc

        self._ids = itertools.count(1)
        self._call_lock = threading.Lock()
        self._close_lock = threading.Lock()
        self._closed = False
        self._lines: queue.Queue[Any] = queue.Queue()
        self._stderr_parts: list[bytes] = []
        self._stderr_lock = threading.Lock()
        self._stdout_thread = threading.Thread(target=self._read_stdout, daemon=True)
        self._stderr_thread = threading.Thread(target=self._read_stderr, daemon=True)
        self._stdout_thread.start()
        self._stderr_thread.start()

    def __enter__(self) -> McpClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def stderr(self) -> str:
        """Everything the server has written to its standard error so far."""
        with self._stderr_lock:
            return b"".join(self._stderr_parts).decode("utf-8", errors="replace")

    # --- public protocol methods ---

    def initialize(self, timeout: float | None = None) -> None:
        """Perform the handshake: initialize, then notifications/initialized."""
        params = {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {},
            "clientInfo": {"name": CLIENT_NAME, "version": CLIENT_VERSION},
        }
        try:
            self._call("initialize", params, timeout)
        except (McpError, JsonRpcError, TimeoutError) as exc:
            raise McpError(f"mcp {self.name}: initialize: {exc}") from exc
        self._notify("notifications/initialized")

    def list_tools(self, timeout: float | None = None) -> list[Tool]:
        """Return the tools the server offers."""
        try:
            result = self._call("tools/list", None, timeout)
            return self._decode_tools(result)
        except (McpError, JsonRpcError, TimeoutError, ValueError) as exc:
            raise McpError(f"mcp {self.name}: tools/list: {exc}") from exc

    def call_tool(
        self,
        tool_name: str,
        arguments: Mapping[str, Any] | None = None,
        timeout: float | None = None,
    ) -> str:
        """Invoke a tool and return its text output.

        Raises McpError when the call fails or the tool reports an error.
        """
        params: dict[str, Any] = {"name": tool_name}
        if arguments:
            params["arguments"] = dict(arguments)
        try:
            result = self._call("tools/call", params, timeout)
            contents, is_error = self._decode_call_result(result)
        except (McpError, JsonRpcError, TimeoutError, ValueError) as exc:
            raise McpError(f"mcp {self.name}: tools/call {tool_name}: {exc}") from exc

        texts = extract_texts(contents)
        if is_error:
            if texts:
                raise McpError(f"mcp tool {tool_name} error: {texts}")
            raise McpError(f"mcp tool {tool_name} returned an error")
        return texts

    def close(self) -> int | None:
        """Close the server's input and wait for it to exit.

        Returns the exit code, or None if the client was already closed.
        """
        with self._close_lock:
            if self._closed:
                return None
            self._closed = True
        try:
            self._proc.stdin.close()
        except OSError:
            pass
        code = self._proc.wait()
        self._stdout_thread.join(timeout=5)
        self._stderr_thread.join(timeout=5)
        self._proc.stdout.close()
        self._proc.stderr.close()
        return code

    # --- internals ---

    def _check_open(self) -> None:
        with self._close_lock:
            if self._closed:
                raise McpError("client closed")

    def _call(self, method: str, params: Any, timeout: float | None) -> Any:
        with self._call_lock:
            self._check_open()
            request_id = next(self._ids)
            request: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "method": method}
            if params is not None:
                request["params"] = params
            self._send(request)
            return self._recv(request_id, timeout)

    def _notify(self, method: str, params: Any = None) -> None:
        with self._call_lock:
            self._check_open()
            request: dict[str, Any] = {"jsonrpc": "2.0", "method": method}
            if params is not None:
                request["params"] = params
            self._send(request)

    def _send(self, request: dict[str, Any]) -> None:
        try:
            data = json.dumps(request, ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise McpError(f"marshal request: {exc}") from exc
        try:
            self._proc.stdin.write(data + b"\n")
            self._proc.stdin.flush()
        except (OSError, ValueError) as exc:
            raise McpError(f"write request: {exc}") from exc

    def _recv(self, expected_id: int, timeout: float | None) -> Any:
        try:
            line = self._lines.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError("timed out waiting for response") from None
        if line is _EOF:
            self._lines.put(_EOF)
            raise McpError("read response: EOF")

        try:
            response = json.loads(line)
        except ValueError as exc:
            raise McpError(f"unmarshal response: {exc} (raw: {trunc_raw(line)})") from exc
        response_id = response.get("id") if isinstance(response, dict) else None
        if not isinstance(response_id, int) or isinstance(response_id, bool):
            raise McpError(f"unmarshal response: invalid id (raw: {trunc_raw(line)})")
        if response_id != expected_id:
            raise McpError(f"response id mismatch: got {response_id}, want {expected_id}")

        error = response.get("error")
        if error is not None:
            if not isinstance(error, dict):
                raise McpError(f"unmarshal response: invalid error (raw: {trunc_raw(line)})")
            code = error.get("code", 0)
            message = error.get("message", "")
            raise JsonRpcError(code if isinstance(code, int) else 0, str(message))
        return response.get("result")

    @staticmethod
    def _decode_tools(result: Any) -> list[Tool]:
        if result is None:
            return []
        if not isinstance(result, dict):
            raise ValueError("tools/list result must be an object")
        tools = result.get("tools") or []
        if not isinstance(tools, list):
            raise ValueError("tools must be a list")
        return [Tool.from_dict(t) for t in tools]

    @staticmethod
    def _decode_call_result(result: Any) -> tuple[list[ToolContent], bool]:
        if result is None:
            return [], False
        if not isinstance(result, dict):
            raise ValueError("tools/call result must be an object")
        content = result.get("content") or []
        if not isinstance(content, list):
            raise ValueError("content must be a list")
        is_error = result.get("isError") or False
        if not isinstance(is_error, bool):
            raise ValueError("isError must be a boolean")
        return [ToolContent.from_dict(c) for c in content], is_error

    def _read_stdout(self) -> None:
        for raw in self._proc.stdout:
            if not raw.endswith(b"\n"):
                break
            line = raw.rstrip(b"\r\n")
            # Servers often print banners or logs before the JSON-RPC stream.
            if not line.startswith(b"{"):
                continue
            try:
                peek = json.loads(line)
            except ValueError:
                peek = None
            else:
                if isinstance(peek, dict) and peek.get("id") is None:
                    continue
            self._lines.put(line)
        self._lines.put(_EOF)

    def _read_stderr(self) -> None:
        for chunk in iter(lambda: self._proc.stderr.read1(4096), b""):
            with self._stderr_lock:
                self._stderr_parts.append(chunk)