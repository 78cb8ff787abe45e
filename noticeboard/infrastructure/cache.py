import json
import redis
import structlog
from typing import Optional, Any
from ..config import settings

logger = structlog.get_logger()

_redis_client: Optional[redis.Redis] = None

def get_redis() -> redis.Redis:
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
            socket_timeout=5,
            retry_on_timeout=True
        )
    return _redis_client

def get_cache(key: str) -> Optional[Any]:
    """Получить значение из кэша"""
    if not settings.CACHE_ENABLED:
        return None
    try:
        client = get_redis()
        value = client.get(key)
        if value:
            return json.loads(value)
    except Exception as exc:
        # Если Redis недоступен, работаем как при промахе
        logger.warning("cache_unavailable", op="get", key=key, error=str(exc))
    return None

def set_cache(key: str, value: Any, ttl: int = None) -> bool:
    """Сохранить значение в кэш"""
    if not settings.CACHE_ENABLED:
        return False
    try:
        client = get_redis()
        ttl = ttl or settings.CACHE_TTL
        client.setex(key, ttl, json.dumps(value, ensure_ascii=False))
        return True
    except Exception as exc:
        logger.warning("cache_unavailable", op="set", key=key, error=str(exc))
        return False

def get_generation(namespace: str) -> Optional[int]:
    """Текущее поколение пространства ключей; None - кэш не используется"""
    if not settings.CACHE_ENABLED:
        return None
    try:
        value = get_redis().get(f"{namespace}:generation")
        return int(value) if value else 0
    except Exception as exc:
        logger.warning("cache_unavailable", op="generation", namespace=namespace, error=str(exc))
        return None

def bump_generation(namespace: str) -> Optional[int]:
    """Сдвигает поколение: все ранее записанные ключи больше не читаются"""
    if not settings.CACHE_ENABLED:
        return None
    try:
        return get_redis().incr(f"{namespace}:generation")
    except Exception as exc:
        logger.warning("cache_unavailable", op="bump", namespace=namespace, error=str(exc))
        return None
