"""Rate limiting utilities"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from ..config import settings

# Per-client limiter; swap RATE_LIMIT_STORAGE_URI to redis:// for multi-worker deployments
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)
