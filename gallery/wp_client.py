# gallery/wp_client.py

import base64
from typing import Optional

import requests

from gallery.config import get_env_value, resolve_request_timeout
from gallery.logger import get_logger
import gallery.exceptions as ex

# Get the logger for this module. Its name will be 'gallery.wp_client'.
log = get_logger(__name__)

headers = {
  "Accept": "application/json",
}


class WordPressClient:
  """
  Authenticated GET access to the WordPress / WooCommerce REST API.
  Returns raw responses: no JSON parsing and no retries here.
  """

  def __init__(self, base_url: Optional[str], username: Optional[str] = None,
               app_password: Optional[str] = None, timeout: float = 10.0,
               session: Optional[requests.Session] = None):
    self.base_url = (base_url or "").rstrip("/")
    self.timeout = timeout
    self.session = session or requests.Session()
    self.auth_header = build_auth_header(username, app_password)

  @classmethod
  def from_env(cls, session: Optional[requests.Session] = None) -> "WordPressClient":
    client = cls(
      base_url=get_env_value(["WP_API_BASE", "PUBLIC_WP_API_BASE"]),
      username=get_env_value("WP_USERNAME"),
      app_password=get_env_value("WP_APP_PASSWORD"),
      timeout=resolve_request_timeout(),
      session=session,
    )
    if not client.configured:
      log.warning("[WP] WP_API_BASE is not set, catalog requests are disabled")
    else:
      log.info(f"[WP] Client configured for {client.base_url} (auth: {bool(client.auth_header)})")
    return client

  @property
  def configured(self) -> bool:
    return bool(self.base_url)

  def build_url(self, path: str) -> str:
    if not self.base_url:
      raise ex.ConfigurationError("Missing WP_API_BASE")
    if path.startswith("http"):
      return path
    return f"{self.base_url}{path}"

  def request_headers(self) -> dict:
    request_headers = dict(headers)
    if self.auth_header:
      request_headers["Authorization"] = self.auth_header
    return request_headers

  def get(self, path: str, params: Optional[dict] = None) -> requests.Response:
    """
    Issue one GET against the API.

    Args:
      path (str): Path relative to the base URL (e.g. '/wc/v3/products') or an absolute URL
      params (Optional[dict]): Query string parameters

    Returns:
      requests.Response: The raw response, whatever its status
    """
    url = self.build_url(path)
    log.debug(f"[WP] GET {url} params={params}")
    return self.session.get(url, params=params, headers=self.request_headers(), timeout=self.timeout)


def build_auth_header(username: Optional[str], app_password: Optional[str]) -> Optional[str]:
  """Basic auth header from a WordPress application password, None unless both parts are set."""
  if not username or not app_password:
    return None
  token = base64.b64encode(f"{username}:{app_password}".encode("utf-8")).decode("ascii")
  return f"Basic {token}"
