"""Run external commands with a timeout."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from digcore.shellquote import quote_split

MAX_STDERR_BYTES = 512


@dataclass(frozen=True)
class CommandResult:
    """Output and exit status of a finished command."""

    stdout: bytes
    stderr: bytes
    returncode: int


class CommandTimeoutError(TimeoutError):
    """A command ran past its timeout and was killed."""


def _kill(proc: subprocess.Popen[bytes]) -> None:
    if os.name == "nt":
        proc.kill()
        return
    import signal

    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass


def run_timeout(args: Sequence[str], timeout: float) -> CommandResult:
    """Run ``args`` and wait up to ``timeout`` seconds.

    On POSIX the command runs in its own process group so that the whole
    group is killed on timeout. Raises CommandTimeoutError on timeout.
    """
    extra = {} if os.name == "nt" else {"process_group": 0}
    with subprocess.Popen(
        list(args),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        **extra,
    ) as proc:
        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            _kill(proc)
            proc.communicate()
            raise CommandTimeoutError(
                f"command timed out after {timeout}s: {list(args)!r}"
            ) from None
    return CommandResult(stdout, stderr, proc.returncode)


def command_run(command: str, timeout: float) -> CommandResult:
    """Split ``command`` by shell rules and run it with a timeout.

    Raises ValueError if the command cannot be parsed and
    CommandTimeoutError if it runs too long.
    """
    try:
        args = quote_split(command)
    except ValueError as exc:
        raise ValueError(f"exec: unable to parse command, {exc}") from exc
    if not args:
        raise ValueError("exec: unable to parse command, empty command")

    try:
        result = run_timeout(args, timeout)
    except CommandTimeoutError as exc:
        raise CommandTimeoutError(f"exec {command} timeout") from exc

    return CommandResult(
        remove_windows_carriage_returns(result.stdout),
        remove_windows_carriage_returns(result.stderr),
        result.returncode,
    )


def truncate_stderr(data: bytes) -> bytes:
    """Keep at most the first line of the first 512 bytes, marking cuts with '...'."""
    truncated = False
    if len(data) > MAX_STDERR_BYTES:
        data = data[:MAX_STDERR_BYTES]
        truncated = True
    newline = data.find(b"\n")
    if newline > 0:
        if newline < len(data) - 1:
            truncated = True
        data = data[:newline]
    if truncated:
        data += b"..."
    return data


def remove_windows_carriage_returns(data: bytes) -> bytes:
    """Strip every carriage return when running on Windows; elsewhere return as is."""
    if sys.platform == "win32":
        return data.replace(b"\r", b"")
    return data