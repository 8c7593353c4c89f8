# ============================================================================
# FILE: vibeshare/core/cache.py
# Search result cache: in-process TTL mapping or Redis
# ============================================================================
import json
import threading
import time
from typing import Optional, Any, Callable, Dict, Tuple
from vibeshare.config import settings
import logging

logger = logging.getLogger(__name__)

class MemoryCache:
    """Thread-safe in-process cache with wall-clock expiry"""
    
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[float, Any]] = {}
    
    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value
    
    def set(self, key: str, value: Any, ttl: int) -> bool:
        with self._lock:
            now = self._clock()
            self._purge_expired(now)
            self._entries[key] = (now + ttl, value)
        return True
    
    def _purge_expired(self, now: float) -> None:
        # Caller holds the lock
        expired = [key for key, (expires_at, _) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
    
    def size(self) -> int:
        with self._lock:
            return len(self._entries)
    
    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

class NullCache:
    """Cache that never stores anything"""
    
    def get(self, key: str) -> Optional[Any]:
        return None
    
    def set(self, key: str, value: Any, ttl: int) -> bool:
        return False
    
    def clear(self) -> None:
        pass

class RedisCache:
    """Redis cache helper class"""
    
    def __init__(self, url: str = None):
        import redis
        try:
            self.redis_client = redis.from_url(url or settings.REDIS_URL, decode_responses=True)
            self.redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning(f"Redis connection failed: {e}. Caching disabled.")
            self.redis_client = None
    
    def set(self, key: str, value: Any, ttl: int) -> bool:
        """Set a cache value with expiration"""
        if not self.redis_client:
            return False
        
        try:
            self.redis_client.setex(key, ttl, json.dumps(value))
            return True
        except Exception as e:
            logger.error(f"Cache set error: {e}")
            return False
    
    def get(self, key: str) -> Optional[Any]:
        """Get a cache value"""
        if not self.redis_client:
            return None
        
        try:
            value = self.redis_client.get(key)
            if value:
                return json.loads(value)
            return None
        except Exception as e:
            logger.error(f"Cache get error: {e}")
            return None
    
    def clear(self) -> None:
        if not self.redis_client:
            return
        try:
            for key in self.redis_client.scan_iter("search:*"):
                self.redis_client.delete(key)
        except Exception as e:
            logger.error(f"Cache clear error: {e}")

def create_search_cache():
    if settings.SEARCH_CACHE_BACKEND == "redis":
        return RedisCache()
    return MemoryCache()

# Singleton instance
search_cache = create_search_cache()

def get_search_cache():
    """Dependency hook so tests can swap the cache"""
    return search_cache
