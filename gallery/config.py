# gallery/config.py

import math
import os
from typing import Iterable, Optional, Union

from dotenv import dotenv_values

from gallery.logger import get_logger

log = get_logger(__name__)

DEFAULT_CACHE_TTL_MS = 5 * 60 * 1000
DEFAULT_REQUEST_TIMEOUT = 10.0

FALSE_VALUES = {"false", "0", "off", "no"}

# Build-time layer: values of the env file, looked up before the process environment.
# os.environ is not touched.
ENV_FILE = os.getenv("APP_ENV_FILE", ".env")
build_env = dotenv_values(ENV_FILE) if os.path.exists(ENV_FILE) else {}


def _to_list(keys: Union[str, Iterable[str]]) -> list:
  return [keys] if isinstance(keys, str) else list(keys)


def get_env_value(keys: Union[str, Iterable[str]]) -> Optional[str]:
  """
  Return the first defined value for the given key names.

  Every key is looked up in the env file layer first, then in os.environ.
  An empty string counts as defined.

  Args:
    keys (str | Iterable[str]): One key name or candidate names in priority order

  Returns:
    Optional[str]: The value, or None when no key is defined anywhere
  """
  for key in _to_list(keys):
    value = build_env.get(key)
    if value is None:
      value = os.environ.get(key)
    if value is not None:
      return str(value)
  return None


def get_boolean_env(keys: Union[str, Iterable[str]], default: bool = True) -> bool:
  """'false', '0', 'off', 'no' (any case, trimmed) mean False; other defined values mean True."""
  raw = get_env_value(keys)
  if raw is None:
    return default
  return raw.strip().lower() not in FALSE_VALUES


def _parse_number(raw: Optional[str]) -> Optional[float]:
  if raw is None:
    return None
  try:
    value = float(raw.strip())
  except ValueError:
    return None
  if not math.isfinite(value):
    return None
  return value


def resolve_cache_ttl() -> int:
  """Catalog cache TTL in milliseconds. Unparsable -> default, negative -> 0."""
  raw = get_env_value(["WP_CACHE_TTL_MS", "WP_CACHE_TTL"])
  value = _parse_number(raw)
  if value is None:
    if raw is not None:
      log.warning(f"[CONFIG] Invalid cache TTL '{raw}', using default {DEFAULT_CACHE_TTL_MS} ms")
    return DEFAULT_CACHE_TTL_MS
  return max(0, int(value))


def resolve_request_timeout() -> float:
  """Upstream request timeout in seconds."""
  raw = get_env_value("WP_REQUEST_TIMEOUT")
  value = _parse_number(raw)
  if value is None or value <= 0:
    return DEFAULT_REQUEST_TIMEOUT
  return value
