"""Rate limiting for the credential endpoints — Redis fixed window.

Learn: Only /api/login and /api/register are limited; they are the
password-guessing and account-spraying surface. Each IP gets a counter
key like "taskhub:rl:{ip}:{minute}" that expires after two minutes.

No Redis configured (or Redis down) means no limiting — the request goes
straight through. That is what happens in tests.
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

logger = structlog.get_logger()

LIMITED_PATHS = ("/api/login", "/api/register")


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Per-IP, per-minute limit on login and registration."""

    def __init__(self, app, auth_rpm: int = 10):
        super().__init__(app)
        self.auth_rpm = auth_rpm

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path not in LIMITED_PATHS:
            return await call_next(request)

        redis = getattr(request.app.state, "redis", None)
        if redis is None:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        window = int(time.time() // 60)
        key = f"taskhub:rl:{client_ip}:{window}"

        try:
            count = await redis.incr(key)
            if count == 1:
                await redis.expire(key, 120)
        except Exception as e:
            logger.warning("rate_limit.redis_error", error=str(e))
            return await call_next(request)

        if count > self.auth_rpm:
            logger.warning("rate_limit.exceeded", client_ip=client_ip)
            return JSONResponse(
                status_code=429,
                content={"message": "Too many attempts. Try again later."},
                headers={"Retry-After": "60"},
            )

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(self.auth_rpm)
        response.headers["X-RateLimit-Remaining"] = str(max(0, self.auth_rpm - count))
        return response
