from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from LISTINGS.core.config import RATE_LIMIT_ENABLED

# ✅ Create a limiter instance, keyed on the client address
limiter = Limiter(
    key_func=get_remote_address,
    enabled=RATE_LIMIT_ENABLED,
)


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    retry_after = exc.limit.limit.get_expiry()
    response = JSONResponse(
        status_code=429,
        content={
            "detail": "Too many requests. Please slow down.",
            "limit": str(exc.detail),
            "retry_after_seconds": retry_after,
        },
    )
    response.headers["Retry-After"] = str(retry_after)
    return response
