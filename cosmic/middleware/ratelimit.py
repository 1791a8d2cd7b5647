import os
import time
from collections import defaultdict
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

WINDOW_SECONDS = 60

_counters = defaultdict(list)


def _prune(now: float) -> None:
    # drop clients with no request inside the window
    for key in [k for k, hits in _counters.items() if not hits or hits[-1] <= now - WINDOW_SECONDS]:
        del _counters[key]


class RateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if os.getenv("RATE_LIMIT_ENABLED", "false").lower() != "true":
            return await call_next(request)

        host = request.client.host if request.client else "unknown"
        key = getattr(request.state, "api_key", None) or host
        limit = int(os.getenv("RATE_LIMIT_PER_MINUTE", "10"))
        now = time.time()

        _prune(now)
        window = [t for t in _counters[key] if t > now - WINDOW_SECONDS]
        window.append(now)
        _counters[key] = window

        if len(window) > limit:
            return JSONResponse({"detail": "Rate limit exceeded"}, status_code=429)

        return await call_next(request)
