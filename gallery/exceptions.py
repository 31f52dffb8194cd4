# gallery/exceptions.py

class CatalogException(Exception):
  """All catalog errors"""
  pass

class ConfigurationError(CatalogException):
  """Required setting (e.g. WP_API_BASE) missing"""
  pass

class UpstreamTimeoutError(CatalogException):
  """Upstream request timeout raise"""
  pass

class UpstreamConnectionError(CatalogException):
  """Upstream connection error raise"""

class UpstreamHTTPError(CatalogException):
  """Upstream answered with a non 2xx status code"""
  def __init__(self, status_code: int, message: str = None):
    self.status_code = status_code
    self.message = message or f"HTTP error {status_code}"
    super().__init__(self.message)

class UpstreamParseError(CatalogException):
  """Upstream body is not JSON or not a product list"""
  pass
