from collections import deque
from collections.abc import Awaitable
from collections.abc import Callable
from threading import RLock
from time import monotonic

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


class CalendarRateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding-window rate limiter for calendar requests, keyed by client IP.

    Every calendar request fans out into one GitHub call per account and
    year, so only that path is limited. Windows of idle clients are swept
    once per window, and at most `max_clients` windows are tracked, the
    least recently seen client being dropped first.
    """

    def __init__(
        self,
        app,
        requests_per_window: int = 30,
        window_seconds: int = 60,
        limited_path: str = "/calendar",
        max_clients: int = 10_000,
    ) -> None:
        super().__init__(app)
        self.max_requests = max(1, requests_per_window)
        self.window_seconds = max(1, window_seconds)
        self.limited_path = limited_path
        self.max_clients = max(1, max_clients)
        # Insertion order doubles as recency order: a client is re-inserted
        # on every request.
        self._client_windows: dict[str, deque[float]] = {}
        self._last_sweep = monotonic()
        self._lock = RLock()

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        if request.method != "GET" or request.url.path != self.limited_path:
            return await call_next(request)

        retry_after = self.register_request(self._client_key(request), monotonic())
        if retry_after is not None:
            return JSONResponse(
                status_code=429,
                content={"detail": "Too Many Requests"},
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)

    @property
    def tracked_clients(self) -> int:
        with self._lock:
            return len(self._client_windows)

    def register_request(self, client: str, now: float) -> int | None:
        """Count a request for client at time now.

        Returns the Retry-After delay in seconds when the client is over its
        limit, otherwise None.
        """

        cutoff = now - self.window_seconds
        with self._lock:
            if now - self._last_sweep >= self.window_seconds:
                self._sweep(cutoff)
                self._last_sweep = now

            window = self._client_windows.pop(client, None) or deque()
            while window and window[0] <= cutoff:
                window.popleft()

            if len(window) >= self.max_requests:
                self._client_windows[client] = window
                return max(1, int(self.window_seconds - (now - window[0])))

            window.append(now)
            self._client_windows[client] = window
            while len(self._client_windows) > self.max_clients:
                del self._client_windows[next(iter(self._client_windows))]

        return None

    def _sweep(self, cutoff: float) -> None:
        expired = [
            client
            for client, window in self._client_windows.items()
            if not window or window[-1] <= cutoff
        ]
        for client in expired:
            del self._client_windows[client]

    @staticmethod
    def _client_key(request: Request) -> str:
        # Reverse proxies put the original client first in X-Forwarded-For.
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip() or "unknown"

        if request.client and request.client.host:
            return request.client.host

        return "unknown"
