# tests/test_catalog_service.py

import logging

import requests

from conftest import FakeResponse, FakeSession, raw_product
from gallery.cache import CatalogCache
from gallery.catalog_service import PRODUCT_FIELDS, CatalogService
from gallery.wp_client import WordPressClient


def test_get_products_without_base_url_returns_empty(cache):
  session = FakeSession(FakeResponse([raw_product(1)]))
  service = CatalogService(client=WordPressClient(None, session=session), cache=cache)
  assert service.get_products() == []
  assert session.calls == []


def test_get_products_requests_latest_products(service, session):
  products = service.get_products(50)

  assert [p.id for p in products] == [1, 2]
  call = session.calls[0]
  assert call["url"] == "https://shop.example.com/wp-json/wc/v3/products"
  assert call["params"] == {"per_page": 50, "order": "desc", "orderby": "date", "_fields": PRODUCT_FIELDS}
  assert call["headers"]["Accept"] == "application/json"
  assert call["headers"]["Authorization"].startswith("Basic ")
  assert call["timeout"] == 5


def test_get_products_drops_items_without_image(service, session):
  session.responses = [FakeResponse([
    raw_product(1),
    raw_product(2, image=None, description="<p>no picture</p>"),
    raw_product(3, name=""),
    raw_product(4, image=None, description='<img src="https://cdn.example.com/4.jpg">'),
  ])]
  assert [p.id for p in service.get_products(50)] == [1, 4]


def test_get_products_is_served_from_cache_within_ttl(service, session):
  first = service.get_products(50)
  second = service.get_products(50)
  assert first == second
  assert len(session.calls) == 1


def test_get_products_smaller_limit_uses_cache(service, session):
  service.get_products(50)
  assert [p.id for p in service.get_products(1)] == [1]
  assert len(session.calls) == 1


def test_get_products_larger_limit_refetches(service, session):
  service.get_products(10)
  service.get_products(50)
  assert len(session.calls) == 2
  assert session.calls[1]["params"]["per_page"] == 50


def test_get_products_refetches_after_expiry(service, session, clock):
  service.get_products(50)
  clock.advance(60_000)
  service.get_products(50)
  assert len(session.calls) == 2


def test_get_products_falls_back_to_stale_on_http_error(service, session, clock, caplog):
  cached = service.get_products(50)
  clock.advance(120_000)
  session.responses = [FakeResponse(None, status_code=500, reason="Internal Server Error")]

  with caplog.at_level(logging.WARNING):
    assert service.get_products(50) == cached
  assert any("Products fetch failed" in message for message in caplog.messages)


def test_get_products_falls_back_to_stale_on_transport_error(service, session, clock, timeout_error):
  cached = service.get_products(50)
  clock.advance(120_000)
  session.responses = [timeout_error]
  assert service.get_products(50) == cached


def test_get_products_falls_back_to_stale_on_bad_json(service, session, clock):
  cached = service.get_products(50)
  clock.advance(120_000)
  session.responses = [FakeResponse(body_error=ValueError("Expecting value"))]
  assert service.get_products(50) == cached


def test_get_products_without_stale_returns_empty_on_failure(service, session):
  session.responses = [requests.exceptions.ConnectionError("refused")]
  assert service.get_products(50) == []


def test_get_products_unexpected_payload_returns_empty(service, session):
  session.responses = [FakeResponse({"code": "rest_no_route"})]
  assert service.get_products(50) == []


def test_get_products_stale_needs_covering_limit(service, session, clock):
  service.get_products(10)
  clock.advance(120_000)
  session.responses = [FakeResponse(None, status_code=503)]
  assert service.get_products(50) == []


def test_get_products_zero_ttl_always_fetches(client, session, clock):
  service = CatalogService(client=client, cache=CatalogCache(ttl_ms=0, clock=clock))
  cached = service.get_products(50)
  service.get_products(50)
  assert len(session.calls) == 2

  session.responses = [FakeResponse(None, status_code=502)]
  assert service.get_products(50) == cached


def test_failed_fetch_keeps_previous_cache_entry(service, session, clock):
  service.get_products(50)
  entry = service.cache.entry
  clock.advance(120_000)
  session.responses = [FakeResponse(None, status_code=500)]
  service.get_products(50)
  assert service.cache.entry is entry


def test_get_product_by_slug(service, session):
  session.responses = [FakeResponse([raw_product(9)])]
  product = service.get_product_by_slug("product-9")

  assert product.id == 9
  assert session.calls[0]["params"] == {"slug": "product-9", "per_page": 1, "_fields": PRODUCT_FIELDS}


def test_get_product_by_slug_is_not_cached(service, session):
  session.responses = [FakeResponse([raw_product(9)])]
  service.get_product_by_slug("product-9")
  service.get_product_by_slug("product-9")
  assert len(session.calls) == 2
  assert service.cache.entry is None


def test_get_product_by_slug_no_match(service, session):
  session.responses = [FakeResponse([])]
  assert service.get_product_by_slug("missing") is None


def test_get_product_by_slug_without_image(service, session):
  session.responses = [FakeResponse([raw_product(9, image=None, description="")])]
  assert service.get_product_by_slug("product-9") is None


def test_get_product_by_slug_failure(service, session, timeout_error):
  session.responses = [timeout_error]
  assert service.get_product_by_slug("product-9") is None
  session.responses = [FakeResponse(None, status_code=404)]
  assert service.get_product_by_slug("product-9") is None


def test_get_product_by_slug_unconfigured(cache):
  service = CatalogService(client=WordPressClient(""), cache=cache)
  assert service.get_product_by_slug("anything") is None
