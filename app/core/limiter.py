"""
Shared slowapi rate limiter.

One instance for the whole process so every route shares the same in-memory
counters. Mounted in app.main (app.state.limiter + SlowAPIMiddleware) and
applied per route with @limiter.limit() / admin_limit.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    storage_uri="memory://",
    enabled=settings.RATE_LIMIT_ENABLED,
)

# One bucket shared by every admin endpoint.
admin_limit = limiter.shared_limit(settings.ADMIN_RATE_LIMIT, scope="admin")
