"""Reconnect policy for the server connection: error kinds, backoff and headers."""

from __future__ import annotations

import logging
import random
import uuid
from collections.abc import Callable, Iterator
from dataclasses import dataclass

logger = logging.getLogger(__name__)

NORMAL_MIN = 1.0
NORMAL_MAX = 300.0
AUTH_MIN = 60.0
AUTH_MAX = 1800.0

PROTO_VERSION = "1"

LogFn = Callable[[BaseException, float], None]


class AuthFailedError(Exception):
    """The server rejected the agent token (HTTP 401)."""

    def __init__(self, message: str = "authentication failed") -> None:
        super().__init__(message)


class ConnectionLostError(Exception):
    """An established connection was lost."""

    def __init__(self, message: str = "connection lost") -> None:
        super().__init__(message)


class DisconnectError(Exception):
    """The server asked the agent to disconnect and retry later."""

    def __init__(self, retry_after_sec: int = 0) -> None:
        self.retry_after_sec = retry_after_sec
        super().__init__(f"server requested disconnect (retry_after_sec={retry_after_sec})")


class ReconnectError(Exception):
    """Wraps another error and says whether the backoff should start over."""

    def __init__(self, error: BaseException, reset_backoff: bool = False) -> None:
        self.error = error
        self.reset_backoff = reset_backoff
        super().__init__(str(error))

    def __str__(self) -> str:
        return str(self.error)


@dataclass(frozen=True)
class ReconnectStep:
    """What to do after a connection attempt ended.

    ``wait`` and ``next_backoff`` are in seconds; ``log`` reports the
    failure, or is None when there is nothing to report.
    """

    wait: float
    next_backoff: float
    log: LogFn | None


def _chain(error: BaseException) -> Iterator[BaseException]:
    """Yield ``error`` and every error it wraps."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if isinstance(current, ReconnectError):
            current = current.error
        else:
            current = current.__cause__


def _find(error: BaseException, kind: type[BaseException]) -> BaseException | None:
    return next((e for e in _chain(error) if isinstance(e, kind)), None)


def clamp_backoff(value: float, minimum: float, maximum: float) -> float:
    """Limit ``value`` to the range [minimum, maximum]."""
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def _log_disconnect_retry(error: BaseException, wait: float) -> None:
    logger.info("server_disconnect_retry: error=%s retry_in=%.1fs", error, wait)


def _log_auth_failed(error: BaseException, wait: float) -> None:
    logger.error("server_auth_failed: error=%s retry_in=%.1fs", error, wait)


def _log_disconnected(error: BaseException, wait: float) -> None:
    logger.warning("server_disconnected: error=%s retry_in=%.1fs", error, wait)


def next_reconnect_state(
    error: BaseException | None,
    backoff: float,
    normal_min: float = NORMAL_MIN,
    normal_max: float = NORMAL_MAX,
    auth_min: float = AUTH_MIN,
    auth_max: float = AUTH_MAX,
) -> ReconnectStep:
    """Decide how long to wait before reconnecting and the next backoff.

    A server-requested disconnect waits as asked (at least ``normal_min``)
    and resets the backoff. An authentication failure uses the slower auth
    range. Otherwise the backoff doubles within the normal range, starting
    over when the error asks for a reset.
    """
    if error is None:
        return ReconnectStep(0.0, backoff, None)

    disconnect = _find(error, DisconnectError)
    if isinstance(disconnect, DisconnectError):
        wait = max(float(disconnect.retry_after_sec), normal_min)
        return ReconnectStep(wait, normal_min, _log_disconnect_retry)

    if _find(error, AuthFailedError) is not None:
        backoff = max(backoff, auth_min)
        return ReconnectStep(backoff, clamp_backoff(backoff * 2, auth_min, auth_max), _log_auth_failed)

    reconnect = _find(error, ReconnectError)
    if isinstance(reconnect, ReconnectError) and reconnect.reset_backoff:
        backoff = normal_min

    return ReconnectStep(backoff, clamp_backoff(backoff * 2, normal_min, normal_max), _log_disconnected)


def jitter(duration: float, pct: float) -> float:
    """Return ``duration`` moved randomly by up to ``pct`` of itself either way."""
    delta = duration * pct
    return duration + random.uniform(-1.0, 1.0) * delta


def build_headers(agent_token: str, agent_id: uuid.UUID | str) -> dict[str, str]:
    """Headers sent when opening the connection to the server."""
    headers: dict[str, str] = {}
    if agent_token:
        headers["X-Agent-Token"] = agent_token
    headers["X-Agent-ID"] = str(agent_id)
    headers["X-Proto-Version"] = PROTO_VERSION
    return headers