"""
Custom middleware for request logging and rate limiting.
"""
import time
import logging
from typing import Callable, Dict, List, Optional, Tuple

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from pinboard.core.exceptions import RateLimitExceededException

logger = logging.getLogger(__name__)


def client_ip(request: Request) -> str:
    """Client address, honouring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    One log line when a request arrives and one when it finishes.

    The finishing line names the authenticated user (set on
    ``request.state.user_id`` by the auth dependency) and the elapsed time,
    which is also returned in ``X-Process-Time`` next to ``X-Request-ID``.
    A request id sent by the client is reused so traces can be joined.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        started = time.perf_counter()
        request_id = request.headers.get("X-Request-ID") or str(time.time_ns())
        request.state.request_id = request_id
        label = f"[{request_id}] {request.method} {request.url.path}"

        logger.info(f"{label} from {client_ip(request)}")
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"{label} failed after {time.perf_counter() - started:.4f}s: {e}")
            raise

        elapsed = time.perf_counter() - started
        user = getattr(request.state, "user_id", None) or "anonymous"
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(level, f"{label} -> {response.status_code} user={user} in {elapsed:.4f}s")

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed-window in-memory rate limiting, keyed by client address.

    Each client gets ``requests_per_window`` requests per window; the
    window starts with the client's first request and resets once
    ``window_seconds`` have elapsed. Counters live in process memory, so
    every worker process enforces its own limit.
    """

    def __init__(
        self,
        app,
        requests_per_window: int = 100,
        window_seconds: int = 15 * 60,
        exclude_paths: Optional[List[str]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(app)
        self.requests_limit = requests_per_window
        self.window_seconds = window_seconds
        self.exclude_paths = exclude_paths or ["/health", "/api/health"]
        self.clock = clock
        # client -> (window start, requests seen in window)
        self.windows: Dict[str, Tuple[float, int]] = {}

    def _prune(self, now: float) -> None:
        """Forget clients whose window has run out."""
        expired = [
            client for client, (start, _) in self.windows.items()
            if now - start >= self.window_seconds
        ]
        for client in expired:
            del self.windows[client]

    def _hit(self, client_id: str, now: float) -> Tuple[int, float]:
        """Count one request; returns (count in window, seconds until reset)."""
        start, count = self.windows.get(client_id, (now, 0))
        if now - start >= self.window_seconds or count == 0:
            self._prune(now)
            start, count = now, 0
        count += 1
        self.windows[client_id] = (start, count)
        return count, self.window_seconds - (now - start)

    def _is_excluded(self, path: str) -> bool:
        # An excluded path also covers its sub-paths (/api/health/ready)
        return any(path == p or path.startswith(p.rstrip("/") + "/") for p in self.exclude_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self._is_excluded(request.url.path):
            return await call_next(request)

        client_id = client_ip(request)
        count, reset_in = self._hit(client_id, self.clock())

        if count > self.requests_limit:
            retry_after = max(1, int(reset_in + 0.999))
            logger.warning(f"Rate limit exceeded for client: {client_id}")
            exc = RateLimitExceededException(retry_after=retry_after)
            return JSONResponse(
                status_code=exc.status_code,
                content=exc.to_dict(),
                headers={"Retry-After": str(retry_after)}
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.requests_limit)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.requests_limit - count))

        return response
