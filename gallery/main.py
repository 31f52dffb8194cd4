# gallery/main.py

import asyncio
from contextlib import asynccontextmanager
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from gallery.auth import check_credentials, get_credentials, get_token_secret, issue_token
from gallery.cache import CatalogCache
from gallery.catalog_service import DEFAULT_LIMIT, CatalogService
from gallery.config import resolve_cache_ttl
from gallery.mapper import ProductMapper
from gallery.models import LoginRequest, LoginResponse, ProductCard
from gallery.wp_client import WordPressClient

from gallery.logger import configure_logging, get_logger
configure_logging()

log = get_logger(__name__)
log.info("FastAPI application is starting...")

# Seconds to wait before answering a failed login
FAILED_LOGIN_DELAY = 0.6


def build_catalog_service() -> CatalogService:
  """One client, one cache slot and one mapper for the whole process."""
  ttl_ms = resolve_cache_ttl()
  log.info(f"Catalog cache TTL: {ttl_ms} ms")
  return CatalogService(
    client=WordPressClient.from_env(),
    cache=CatalogCache(ttl_ms=ttl_ms),
    mapper=ProductMapper.from_env(),
  )


@asynccontextmanager
async def lifespan(app: FastAPI):
  # Application startup
  app.state.catalog_service = build_catalog_service()
  yield
  app.state.catalog_service.client.session.close()


app = FastAPI(title="Gallery Catalog",
              lifespan=lifespan,
              description="Product catalog proxy for the gallery website: WooCommerce products as display-ready cards, plus the COA login.",
              version="1.0.0")


def get_catalog_service(request: Request) -> CatalogService:
  service = getattr(request.app.state, "catalog_service", None)
  if service is None:
    service = request.app.state.catalog_service = build_catalog_service()
  return service


@app.get("/products", response_model=List[ProductCard])
def list_products(
  limit: int = Query(DEFAULT_LIMIT, description="Maximum number of products (1-100)", ge=1, le=100),
  catalog: CatalogService = Depends(get_catalog_service)
  ) -> List[ProductCard]:
  """
  Latest products as display cards. Never fails because of the upstream API:
  an outage gives the last cached cards or an empty list.
  """
  log.info(f"/products endpoint called with limit={limit}")
  return catalog.get_products(limit)


@app.get("/products/{slug}", response_model=ProductCard)
def product_detail(slug: str, catalog: CatalogService = Depends(get_catalog_service)) -> ProductCard:
  product = catalog.get_product_by_slug(slug)
  if product is None:
    raise HTTPException(status_code=404, detail=f"No product found for slug '{slug}'")
  return product


def login_reply(status_code: int, **fields) -> JSONResponse:
  return JSONResponse(status_code=status_code, content=LoginResponse(**fields).model_dump(exclude_none=True))


@app.post("/api/coa-auth")
async def coa_auth(request: Request):
  """
  Exchange the COA user/password for a signed token valid 8 hours.
  Answers {ok, token, expires} or {ok: false, error}.
  """
  try:
    body = LoginRequest.model_validate(await request.json())
  except (ValueError, ValidationError) as e:
    log.warning(f"[AUTH] Invalid login request: {e}")
    return login_reply(400, ok=False, error="Invalid request")

  expected_user, expected_password = get_credentials()
  if not expected_user or not expected_password:
    log.error("[AUTH] COA_USER / COA_PASSWORD are not configured")
    return login_reply(503, ok=False, error="COA auth not configured")

  if not check_credentials(body.user, body.password, expected_user, expected_password):
    log.warning("[AUTH] Rejected login attempt")
    await asyncio.sleep(FAILED_LOGIN_DELAY)
    return login_reply(401, ok=False, error="Invalid credentials")

  token, expires = issue_token(get_token_secret())
  log.info("[AUTH] Token issued")
  return login_reply(200, ok=True, token=token, expires=expires)


@app.get("/")
def root():
  return {"messages": "Gallery Catalog API - endpoints: /products?limit=..., /products/{slug}, POST /api/coa-auth"}


@app.get("/health")
def healthcheck():
  return {"status": "ok"}


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    log.error(f"Global Exception Unhandled Exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"},
    )
