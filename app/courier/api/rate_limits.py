"""Per-client request limits for the HTTP API.

Submitting a notification blocks a worker until the dispatch settles, so
the submit route gets its own, tighter limit than the read-only routes.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

SUBMIT_LIMIT = "120/minute"
READ_LIMIT = "50/minute"


def client_key(request: Request) -> str:
    """Client address, preferring the first X-Forwarded-For hop."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first_hop = forwarded.split(",")[0].strip()
    return first_hop or get_remote_address(request)


limiter = Limiter(key_func=client_key)


async def rate_limit_handler(_request: Request, exc: Exception):
    """Return a 429 naming the limit that was hit."""
    if isinstance(exc, RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"message": "Rate limit exceeded", "limit": str(exc.detail)},
        )


def setup_rate_limiter(app: FastAPI):
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


def get_limiter() -> Limiter:
    return limiter
