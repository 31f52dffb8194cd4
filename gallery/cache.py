# gallery/cache.py

"""Single-slot in-memory cache for the product catalog."""

import time
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from gallery.logger import get_logger
from gallery.models import ProductCard

log = get_logger(__name__)


def monotonic_ms() -> float:
  return time.monotonic() * 1000


@dataclass(frozen=True)
class CacheEntry:
  """Result of one catalog fetch of size `limit`."""

  items: Tuple[ProductCard, ...]
  limit: int
  expires_at: float


class CatalogCache:
  """
  Holds at most one CacheEntry. A new write replaces it.

  An entry serves any request whose limit is <= the limit it was fetched
  with. With ttl_ms == 0 nothing is ever fresh, but the entry is still
  available through get_stale_products.
  """

  def __init__(self, ttl_ms: int, clock: Callable[[], float] = monotonic_ms):
    self.ttl_ms = max(0, ttl_ms)
    self._clock = clock
    self._entry: Optional[CacheEntry] = None

  @property
  def entry(self) -> Optional[CacheEntry]:
    return self._entry

  def _covering_entry(self, limit: int) -> Optional[CacheEntry]:
    entry = self._entry
    if entry is None or entry.limit < limit:
      return None
    return entry

  def get_cached_products(self, limit: int) -> Optional[List[ProductCard]]:
    """Fresh items for `limit`, or None on a miss."""
    entry = self._covering_entry(limit)
    if entry is None or self.ttl_ms <= 0:
      return None
    if self._clock() >= entry.expires_at:
      log.debug(f"[CACHE] Entry for limit={entry.limit} expired")
      return None
    return list(entry.items[:limit])

  def get_stale_products(self, limit: int) -> Optional[List[ProductCard]]:
    """Items for `limit` regardless of age. Only meant as a fallback."""
    entry = self._covering_entry(limit)
    if entry is None:
      return None
    return list(entry.items[:limit])

  def set_cache(self, items: Sequence[ProductCard], limit: int) -> None:
    self._entry = CacheEntry(items=tuple(items), limit=limit, expires_at=self._clock() + self.ttl_ms)
    log.debug(f"[CACHE] Stored {len(items)} products for limit={limit} (ttl={self.ttl_ms} ms)")

  def clear(self) -> None:
    self._entry = None
