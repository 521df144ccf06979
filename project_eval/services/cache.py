"""
Cache Service Singleton - Project Evaluation Platform
project_eval/services/cache.py

Redis read-through cache for stored evaluations and project listings.
Gracefully handles Redis unavailability.
"""
import logging
from typing import Optional, Type, TypeVar

import redis
from pydantic import BaseModel

from project_eval.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

KEY_PREFIX = "project_eval"


def evaluation_key(evaluation_id: str) -> str:
    return f"{KEY_PREFIX}:evaluation:{evaluation_id}"


def project_list_key(project_id: str, page: int, page_size: int) -> str:
    return f"{KEY_PREFIX}:project:{project_id}:evaluations:{page}:{page_size}"


def project_pattern(project_id: str) -> str:
    return f"{KEY_PREFIX}:project:{project_id}:*"


class EvaluationCache:
    """Pydantic-aware wrapper around a Redis client."""

    def __init__(self, url: Optional[str] = None):
        self.client = redis.from_url(
            url or settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )

    def get(self, key: str, model: Type[T]) -> Optional[T]:
        """Get cached item and deserialize to Pydantic model."""
        data = self.client.get(key)
        if data:
            return model.model_validate_json(data)
        return None

    def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Cache Pydantic model with TTL."""
        self.client.setex(key, ttl_seconds, value.model_dump_json())

    def delete(self, key: str) -> None:
        self.client.delete(key)

    def delete_pattern(self, pattern: str) -> None:
        for key in self.client.scan_iter(match=pattern):
            self.client.delete(key)

    def invalidate_evaluation(self, evaluation_id: str, project_id: Optional[str] = None) -> None:
        """Drop a record and every cached listing page of its project."""
        self.delete(evaluation_key(evaluation_id))
        if project_id:
            self.delete_pattern(project_pattern(project_id))


# Singleton instance
_cache: Optional[EvaluationCache] = None


def get_cache() -> Optional[EvaluationCache]:
    """
    Get or create the Redis cache instance.

    Returns:
        EvaluationCache if caching is enabled and Redis answers, None otherwise.
    """
    global _cache
    if not settings.CACHE_ENABLED:
        return None
    if _cache is None:
        try:
            _cache = EvaluationCache()
            _cache.client.ping()
        except (redis.RedisError, ConnectionError) as e:
            logger.warning(f"Redis unavailable, caching disabled for this call: {e}")
            _cache = None
    return _cache


def reset_cache() -> None:
    """Reset the cache singleton."""
    global _cache
    _cache = None
