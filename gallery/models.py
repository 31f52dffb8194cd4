# gallery/models.py

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional


class ProductCard(BaseModel):
  """Display-ready catalog item. JSON keys are camelCase (priceText)."""
  model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

  id: int
  title: str
  slug: str = ""
  link: str = ""
  image: Optional[str] = None
  price_text: Optional[str] = None
  dimensions: Optional[str] = None
  medium: Optional[str] = None
  description: Optional[str] = None


class LoginRequest(BaseModel):
  user: str = ""
  password: str = ""


class LoginResponse(BaseModel):
  ok: bool
  token: Optional[str] = None
  expires: Optional[int] = Field(default=None, description="Expiry, epoch milliseconds")
  error: Optional[str] = None
