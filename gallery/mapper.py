# gallery/mapper.py

from typing import Any, Optional

from gallery.config import get_boolean_env
from gallery.logger import get_logger
from gallery.models import ProductCard
from gallery.normalizer import (
  derive_dimensions,
  extract_first_image_src,
  first_present,
  format_price,
  get_dimensions_from_attributes,
  get_medium_from_attributes,
  normalize_image,
  normalize_medium_text,
  strip_tags,
)

log = get_logger(__name__)


def _rendered(value: Any) -> Optional[str]:
  """wp/v2 wraps text as {'rendered': ...}; wc/v3 sends plain strings."""
  if isinstance(value, dict):
    value = value.get("rendered")
  return value if isinstance(value, str) else None


def _first_image_src(images: Any) -> Optional[str]:
  if isinstance(images, list) and images and isinstance(images[0], dict):
    return images[0].get("src")
  return None


def _text(value: Any) -> str:
  return value if isinstance(value, str) else ""


def _to_int(value: Any) -> Optional[int]:
  if isinstance(value, bool):
    return None
  try:
    return int(value)
  except (TypeError, ValueError):
    return None


class ProductMapper:
  """
  Turns one raw upstream product into a ProductCard.

  Accepts every field set the site has used over time: wc/v3 products
  (name, permalink, description, attributes, images, prices) as well as
  wp/v2 product posts (title.rendered, link, content.rendered).
  """

  def __init__(self, with_units: bool = False):
    self.with_units = with_units

  @classmethod
  def from_env(cls) -> "ProductMapper":
    return cls(with_units=get_boolean_env("WP_DIMENSION_UNITS", default=False))

  def map_product(self, raw: Any) -> Optional[ProductCard]:
    """
    Map a raw item. Returns None when the item has no usable title or id.
    The card may still lack an image; callers filter those out.
    """
    if not isinstance(raw, dict):
      log.debug(f"[MAPPER] Skipping non-object item: {type(raw).__name__}")
      return None

    product_id = _to_int(raw.get("id"))
    raw_name = first_present(_rendered(raw.get("name")), lambda: _rendered(raw.get("title")))
    title = normalize_medium_text(strip_tags(raw_name))
    if not title or product_id is None:
      log.debug(f"[MAPPER] Skipping item id={raw.get('id')!r}: missing title or id")
      return None

    attributes = raw.get("attributes")
    dimensions = get_dimensions_from_attributes(attributes)
    if dimensions is None:
      dimensions, title = derive_dimensions(title, raw.get("dimensions"), with_units=self.with_units)
    medium = get_medium_from_attributes(attributes)

    price_text = format_price(raw.get("price"), raw.get("regular_price"))

    description_html = first_present(_rendered(raw.get("description")), lambda: _rendered(raw.get("content")))
    image = first_present(
      lambda: normalize_image(_first_image_src(raw.get("images"))),
      lambda: extract_first_image_src(description_html),
    )
    description = normalize_medium_text(strip_tags(description_html)) or None

    return ProductCard(
      id=product_id,
      title=title,
      slug=_text(raw.get("slug")),
      link=_text(first_present(raw.get("permalink"), raw.get("link"))),
      image=image,
      price_text=price_text,
      dimensions=dimensions,
      medium=medium,
      description=description,
    )


default_mapper = ProductMapper()


def map_product(raw: Any) -> Optional[ProductCard]:
  return default_mapper.map_product(raw)
