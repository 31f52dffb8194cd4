# gallery/catalog_service.py

from typing import List, Optional

import requests

from gallery.cache import CatalogCache
from gallery.logger import get_logger
from gallery.mapper import ProductMapper
from gallery.models import ProductCard
from gallery.wp_client import WordPressClient
import gallery.exceptions as ex

log = get_logger(__name__)

PRODUCTS_PATH = "/wc/v3/products"
PRODUCT_FIELDS = "id,name,slug,permalink,images,price,regular_price,dimensions,description,attributes"
DEFAULT_LIMIT = 100


class CatalogService:
  """
  Product catalog for the gallery pages: upstream fetch, mapping and caching.
  Public methods never raise; failures degrade to stale data, [] or None.
  """

  def __init__(self, client: WordPressClient, cache: CatalogCache, mapper: Optional[ProductMapper] = None):
    self.client = client
    self.cache = cache
    self.mapper = mapper or ProductMapper()

  def get_products(self, limit: int = DEFAULT_LIMIT) -> List[ProductCard]:
    """
    Latest products, newest first.

    Args:
      limit (int): Maximum number of products to request upstream

    Returns:
      List[ProductCard]: Cards with an image. Stale cache or [] when upstream fails.
    """
    if not self.client.configured:
      return []

    cached = self.cache.get_cached_products(limit)
    if cached is not None:
      log.debug(f"[CATALOG] Cache hit for limit={limit} ({len(cached)} products)")
      return cached

    stale = self.cache.get_stale_products(limit)
    params = {
      "per_page": limit,
      "order": "desc",
      "orderby": "date",
      "_fields": PRODUCT_FIELDS,
    }

    try:
      items = self._fetch_items(params)
      products = self._map_items(items)
    except ex.CatalogException as e:
      log.warning(f"[CATALOG] Products fetch failed: {e}")
      return self._fallback(stale)
    except Exception as e:
      log.warning(f"[CATALOG] Unexpected products fetch error: {e}", exc_info=True)
      return self._fallback(stale)

    self.cache.set_cache(products, limit)
    log.info(f"[CATALOG] Fetched {len(items)} items, kept {len(products)} products (limit={limit})")
    return products

  def get_product_by_slug(self, slug: str) -> Optional[ProductCard]:
    """Single product by exact slug, uncached. None if missing, imageless or on any failure."""
    if not self.client.configured or not slug:
      return None

    params = {
      "slug": slug,
      "per_page": 1,
      "_fields": PRODUCT_FIELDS,
    }

    try:
      items = self._fetch_items(params)
      products = self._map_items(items[:1])
    except ex.CatalogException as e:
      log.warning(f"[CATALOG] Product fetch failed for slug '{slug}': {e}")
      return None
    except Exception as e:
      log.warning(f"[CATALOG] Unexpected product fetch error for slug '{slug}': {e}", exc_info=True)
      return None

    if not products:
      log.info(f"[CATALOG] No displayable product for slug '{slug}'")
      return None
    return products[0]

  def _fallback(self, stale: Optional[List[ProductCard]]) -> List[ProductCard]:
    if stale is not None:
      log.warning(f"[CATALOG] Serving {len(stale)} stale products")
      return stale
    return []

  def _fetch_items(self, params: dict) -> list:
    try:
      response = self.client.get(PRODUCTS_PATH, params=params)
    except requests.exceptions.Timeout as e:
      raise ex.UpstreamTimeoutError(f"Request timed out: {e}")
    except requests.exceptions.ConnectionError as e:
      raise ex.UpstreamConnectionError(f"Connection error: {e}")
    except requests.exceptions.RequestException as e:
      raise ex.CatalogException(f"Request failure: {e}")

    if not response.ok:
      raise ex.UpstreamHTTPError(status_code=response.status_code, message=f"HTTP {response.status_code} {response.reason}")

    try:
      items = response.json()
    except ValueError as e:
      raise ex.UpstreamParseError(f"Invalid JSON body: {e}")
    if not isinstance(items, list):
      raise ex.UpstreamParseError(f"Expected a JSON array, got {type(items).__name__}")
    return items

  def _map_items(self, items: list) -> List[ProductCard]:
    products = list()
    for item in items:
      product = self.mapper.map_product(item)
      if product is None or not product.image:
        continue
      products.append(product)
    return products
