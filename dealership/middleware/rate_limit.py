"""Per-IP rate limiting (slowapi). Limits are applied per route with @limiter.limit(...)."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from dealership.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
