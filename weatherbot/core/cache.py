from datetime import UTC, datetime
from typing import Callable, Optional

import redis

from weatherbot.core.config import settings


Clock = Callable[[], datetime]

_client: Optional[redis.Redis] = None


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def get_redis() -> redis.Redis:
    global _client
    if _client is None:
        _client = redis.from_url(settings.redis_url, decode_responses=True)
    return _client
