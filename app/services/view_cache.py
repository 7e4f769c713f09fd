import json

import redis
from redis.exceptions import RedisError
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
from app.utils.settings import REDIS_URL, CATALOG_CACHE_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

ORDERS_VIEW = "orders"
INVENTORY_VIEW = "inventory"

#tenacity retry: chwilowe bledy redis (odczyt, zapis, uniewaznianie widoku) ponawiane 3x,
#po wyczerpaniu RedisError leci dalej: katalog czyta wtedy z bazy, task celery konczy sie bledem
def redis_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(RedisError),
    )

class ViewCache:
    """
    -cache widokow (katalog, listy zamowien) w redis jako JSON
    -uniewaznianie calego widoku po zmianie zamowien / stanow
    """

    def __init__(self, url: str | None = None, ttl: int | None = None):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.ttl = ttl or CATALOG_CACHE_TTL_SECONDS

    @staticmethod
    def key(view: str, suffix: str | None = None) -> str:
        return f"view:{view}:{suffix}" if suffix else f"view:{view}"

    @redis_retry()
    def get(self, view: str, suffix: str | None = None):
        raw = self.redis.get(self.key(view, suffix))
        return json.loads(raw) if raw is not None else None

    @redis_retry()
    def set(self, view: str, value, suffix: str | None = None) -> None:
        self.redis.set(self.key(view, suffix), json.dumps(value), ex=self.ttl)

    @redis_retry()
    def invalidate(self, view: str) -> int:
        # sam widok + jego warianty (view:orders:user:3), bez view:ordersarchive
        keys = [self.key(view), *self.redis.scan_iter(match=f"{self.key(view)}:*")]
        removed = self.redis.delete(*keys)
        logger.info(f"Invalidated view {view} ({removed} keys)")
        return int(removed)
