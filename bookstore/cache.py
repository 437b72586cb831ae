import redis
from bookstore.config import settings

# Connections are opened lazily by the pool on first command.
redis_client = redis.Redis.from_url(settings.redis_url, decode_responses=True)


def get_redis() -> redis.Redis:
    return redis_client
