# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Per-client request rate limiting.

A sliding-window counter kept in process memory, keyed by client IP.  With
several worker processes each one counts independently, so the effective cap
is ``max_requests * workers``.

Client identity
---------------
The key is the socket peer address.  ``X-Forwarded-For`` is only consulted
when the peer is one of the configured trusted proxies; the chain is then
walked right to left and the first hop that is not itself a trusted proxy
is used.  Entries further left are client-supplied and never trusted.

Memory
------
Buckets live in an LRU-ordered map.  A bucket whose timestamps have all
aged out is dropped by a sweep that runs at most once per window.  The
map never holds more than ``max_buckets`` keys.
"""

import ipaddress
import threading
import time
from collections import OrderedDict, deque
from typing import Callable, Iterable, Optional, Union

from fastapi import Request
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from core.errors import AppError, ErrorKind

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


class InMemoryRateLimiter:
    def __init__(
        self,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        max_buckets: int = 10_000,
    ):
        self._limit = max(1, int(limit))
        self._window = max(0.001, float(window_seconds))
        self._clock = clock
        self._max_buckets = max(1, int(max_buckets))
        self._buckets: "OrderedDict[str, deque[float]]" = OrderedDict()
        self._lock = threading.Lock()
        self._last_sweep = clock()

    @property
    def window_seconds(self) -> float:
        return self._window

    def __len__(self) -> int:
        return len(self._buckets)

    def _prune(self, bucket: deque, now: float) -> None:
        # Drop timestamps that fell out of the window
        while bucket and (now - bucket[0]) >= self._window:
            bucket.popleft()

    def _sweep(self, now: float) -> None:
        # Least recently used first; stop at the first bucket still in use
        for key in list(self._buckets):
            bucket = self._buckets[key]
            self._prune(bucket, now)
            if bucket:
                break
            del self._buckets[key]

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self._clock()
            if now - self._last_sweep >= self._window:
                self._sweep(now)
                self._last_sweep = now

            bucket = self._buckets.get(key)
            if bucket is None:
                if len(self._buckets) >= self._max_buckets:
                    self._buckets.popitem(last=False)
                bucket = self._buckets[key] = deque()
            else:
                self._buckets.move_to_end(key)
                self._prune(bucket, now)

            if len(bucket) >= self._limit:
                return False
            bucket.append(now)
            return True


def parse_trusted_proxies(values: Iterable[str]) -> tuple[IPNetwork, ...]:
    """Turn ``["10.0.0.1", "172.16.0.0/12"]`` into network objects."""
    return tuple(ipaddress.ip_network(value.strip(), strict=False) for value in values if value.strip())


def _is_trusted(address: str, trusted: tuple[IPNetwork, ...]) -> bool:
    try:
        ip = ipaddress.ip_address(address)
    except ValueError:
        return False
    return any(ip in network for network in trusted)


def get_client_ip(request: Request, trusted_proxies: Optional[tuple[IPNetwork, ...]] = None) -> str:
    """
    Extract the client IP address from the request.
    X-Forwarded-For is honoured only when the direct peer is a trusted proxy.
    """
    peer = request.client.host if request.client else "unknown"
    if not trusted_proxies or not _is_trusted(peer, trusted_proxies):
        return peer

    forwarded = request.headers.get("X-Forwarded-For")
    if not forwarded:
        return peer
    hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
    for hop in reversed(hops):
        if not _is_trusted(hop, trusted_proxies):
            return hop
    # Every hop is one of ours; the left-most is the closest to the client
    return hops[0] if hops else peer


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests beyond the per-client cap with 429 and Retry-After."""

    def __init__(
        self,
        app,
        limiter: InMemoryRateLimiter,
        trusted_proxies: tuple[IPNetwork, ...] = (),
        exempt_paths: frozenset[str] = frozenset({"/health"}),
    ):
        super().__init__(app)
        self._limiter = limiter
        self._trusted = trusted_proxies
        self._exempt = exempt_paths

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in self._exempt:
            return await call_next(request)

        if not self._limiter.allow(get_client_ip(request, self._trusted)):
            response = AppError(ErrorKind.RATE_LIMITED).to_response()
            response.headers["Retry-After"] = str(int(self._limiter.window_seconds))
            return response
        return await call_next(request)
