# tests/conftest.py

import pytest
import requests

from gallery.cache import CatalogCache
from gallery.catalog_service import CatalogService
from gallery.wp_client import WordPressClient


class FakeResponse:
  """Minimal stand-in for requests.Response."""

  def __init__(self, payload=None, status_code=200, reason="OK", body_error=None):
    self._payload = payload
    self.status_code = status_code
    self.reason = reason
    self._body_error = body_error

  @property
  def ok(self):
    return 200 <= self.status_code < 400

  def json(self):
    if self._body_error is not None:
      raise self._body_error
    return self._payload


class FakeSession:
  """Records GET calls and replays queued responses (or raises queued exceptions)."""

  def __init__(self, *responses):
    self.responses = list(responses)
    self.calls = list()

  def queue(self, *responses):
    self.responses.extend(responses)

  def get(self, url, params=None, headers=None, timeout=None):
    self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
    response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
    if isinstance(response, Exception):
      raise response
    return response

  def close(self):
    pass


class FakeClock:
  def __init__(self, start=1_000_000.0):
    self.now = start

  def advance(self, ms):
    self.now += ms

  def __call__(self):
    return self.now


def raw_product(product_id=1, name="Paisaje 40x50", image="http://cdn.example.com/wp/img-300x200.jpg", **extra):
  item = {
    "id": product_id,
    "name": name,
    "slug": f"product-{product_id}",
    "permalink": f"https://shop.example.com/product/product-{product_id}/",
    "images": [{"src": image}] if image else [],
    "price": "45",
    "regular_price": "60",
    "dimensions": {"width": "", "height": "", "length": ""},
    "description": "<p>Olio su tela</p>",
    "attributes": [],
  }
  item.update(extra)
  return item


@pytest.fixture
def clock():
  return FakeClock()


@pytest.fixture
def session():
  return FakeSession(FakeResponse([raw_product(1), raw_product(2)]))


@pytest.fixture
def client(session):
  return WordPressClient("https://shop.example.com/wp-json/", "editor", "app pass", timeout=5, session=session)


@pytest.fixture
def cache(clock):
  return CatalogCache(ttl_ms=60_000, clock=clock)


@pytest.fixture
def service(client, cache):
  return CatalogService(client=client, cache=cache)


@pytest.fixture
def timeout_error():
  return requests.exceptions.Timeout("read timed out")
