# gallery/auth.py

import hashlib
import hmac
import secrets
import time
from typing import Optional, Tuple

from gallery.config import get_env_value
from gallery.logger import get_logger

log = get_logger(__name__)

TOKEN_TTL_MS = 8 * 60 * 60 * 1000

# Fallback secret, generated once per process when COA_SECRET is not configured
_process_secret: Optional[str] = None


def now_ms() -> int:
  return int(time.time() * 1000)


def get_token_secret() -> str:
  """
  COA_SECRET, or a random secret kept for the lifetime of the process.
  Tokens signed with the fallback secret stop verifying after a restart.
  """
  global _process_secret
  configured = get_env_value("COA_SECRET")
  if configured:
    return configured
  if _process_secret is None:
    _process_secret = secrets.token_hex(16)
    log.warning("[AUTH] COA_SECRET is not set, using a per-process random secret")
  return _process_secret


def get_credentials() -> Tuple[Optional[str], Optional[str]]:
  return get_env_value("COA_USER"), get_env_value("COA_PASSWORD")


def check_credentials(user: str, password: str, expected_user: str, expected_password: str) -> bool:
  """User is compared trimmed, password as is. Both comparisons run in constant time."""
  user_match = hmac.compare_digest(user.strip().encode("utf-8"), expected_user.strip().encode("utf-8"))
  pass_match = hmac.compare_digest(password.encode("utf-8"), expected_password.encode("utf-8"))
  return user_match and pass_match


def _sign(payload: str, secret: str) -> str:
  return hmac.new(secret.encode("utf-8"), payload.encode("utf-8"), hashlib.sha256).hexdigest()


def issue_token(secret: str, issued_at_ms: Optional[int] = None, ttl_ms: int = TOKEN_TTL_MS) -> Tuple[str, int]:
  """
  Create a signed token '<expires>.<nonce>.<signature>'.

  Args:
    secret (str): HMAC key
    issued_at_ms (Optional[int]): Issue time, epoch milliseconds (defaults to now)
    ttl_ms (int): Validity in milliseconds

  Returns:
    Tuple[str, int]: The token and its expiry in epoch milliseconds
  """
  issued_at_ms = now_ms() if issued_at_ms is None else issued_at_ms
  expires = issued_at_ms + ttl_ms
  nonce = secrets.token_hex(8)
  payload = f"{expires}.{nonce}"
  return f"{payload}.{_sign(payload, secret)}", expires


def verify_token(token: str, secret: str, at_ms: Optional[int] = None) -> bool:
  """True when the token is well formed, signed with `secret` and not expired."""
  parts = token.split(".") if isinstance(token, str) else []
  if len(parts) != 3:
    return False
  expires_text, nonce, signature = parts
  if not expires_text.isdigit() or not nonce:
    return False
  expected = _sign(f"{expires_text}.{nonce}", secret)
  if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8")):
    return False
  at_ms = now_ms() if at_ms is None else at_ms
  return at_ms < int(expires_text)
