# gallery/normalizer.py

import math
import re
import warnings
from typing import Any, Optional, Tuple

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from gallery.logger import get_logger

log = get_logger(__name__)

# Short product titles ("image.jpg", "x.com") are text here, not paths
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

whitespace_pattern = re.compile(r"\s+")
olio_pattern = re.compile(r"\bolio\b", re.IGNORECASE)
size_suffix_pattern = re.compile(r"-\d+x\d+(?=\.(?:jpe?g|png|gif|webp|avif)(?:[?#]|$))", re.IGNORECASE)
title_dimensions_pattern = re.compile(r"(?<!\d)(\d{2,3})\s*x\s*(\d{2,3})(?!\d)", re.IGNORECASE)
currency_pattern = r"[$€£\s ,]+"


def is_blank(value: Any) -> bool:
  """None and empty / whitespace-only strings both mean 'no value'."""
  return value is None or (isinstance(value, str) and not value.strip())


def first_present(*candidates):
  """
  Evaluate candidates in order and return the first one with a value.

  A candidate is either a plain value or a zero-argument callable, called only
  when every earlier candidate came back blank (see is_blank).
  """
  for candidate in candidates:
    value = candidate() if callable(candidate) else candidate
    if not is_blank(value):
      return value
  return None


def strip_tags(value: Optional[str]) -> str:
  """Text content of an HTML fragment on a single line. None -> ''."""
  if not value:
    return ""
  text = BeautifulSoup(str(value), "html.parser").get_text()
  return whitespace_pattern.sub(" ", text).strip()


def _accented_olio(match: re.Match) -> str:
  word = match.group(0)
  if word.isupper():
    return "ÓLEO"
  if word[0].isupper():
    return "Óleo"
  return "óleo"


def normalize_medium_text(text: Optional[str]) -> str:
  """'olio' -> 'óleo' as a standalone word, keeping the casing pattern."""
  if not text:
    return ""
  return olio_pattern.sub(_accented_olio, text)


def normalize_image(url: Optional[str], full_size: bool = True) -> Optional[str]:
  """
  Clean an image URL for display.

  Args:
    url (Optional[str]): Raw image URL
    full_size (bool): Strip WordPress thumbnail suffixes ('-300x200.jpg' -> '.jpg')

  Returns:
    Optional[str]: https URL, or None when empty
  """
  if is_blank(url):
    return None
  url = str(url).strip()
  if url.startswith("http://"):
    url = "https://" + url[len("http://"):]
  if full_size:
    url = size_suffix_pattern.sub("", url)
  return url


def _to_number(value: Any) -> Optional[float]:
  if value is None or isinstance(value, bool):
    return None
  if isinstance(value, (int, float)):
    number = float(value)
  else:
    cleaned = re.sub(currency_pattern, "", str(value))
    if not cleaned:
      return None
    try:
      number = float(cleaned)
    except ValueError:
      log.debug(f"[NORMALIZER] Could not convert price '{value}' to float")
      return None
  return number if math.isfinite(number) else None


def format_price(price: Any, regular_price: Any = None) -> Optional[str]:
  """
  USD display price, sale price first, regular price as fallback.

  format_price("45", "60") -> "$45 USD"
  format_price(None, "1234.5") -> "$1,234.5 USD"
  """
  amount = _to_number(price)
  if amount is None:
    amount = _to_number(regular_price)
  if amount is None:
    return None
  text = f"{amount:,.2f}"
  text = text.rstrip("0").rstrip(".")
  return f"${text} USD"


def _scrub_title(title: str, match: re.Match) -> str:
  before = re.sub(r"[\s(\[\-–—,]*$", "", title[:match.start()])
  after = re.sub(r"^\s*(?:in(?:ch(?:es)?)?\b\.?|cm\b|\"|'')?[\s)\]\-–—,]*", "", title[match.end():])
  scrubbed = whitespace_pattern.sub(" ", f"{before} {after}").strip()
  return scrubbed or title


def derive_dimensions(title: Optional[str], dimensions: Optional[dict] = None,
                      with_units: bool = False) -> Tuple[Optional[str], str]:
  """
  Work out the artwork size.

  Structured width/height win; otherwise the first '24x36'-like pattern in the
  title is used. With with_units, ' in' is appended and a size found in the
  title is cut out of the returned title.

  Args:
    title (Optional[str]): Display title
    dimensions (Optional[dict]): Upstream {width, height, length}
    with_units (bool): Append the unit and scrub the title

  Returns:
    Tuple[Optional[str], str]: (dimensions text or None, display title)
  """
  title = title or ""
  dimensions = dimensions if isinstance(dimensions, dict) else {}
  suffix = " in" if with_units else ""

  width = dimensions.get("width")
  height = dimensions.get("height")
  if not is_blank(width) and not is_blank(height):
    return f"{str(width).strip()} x {str(height).strip()}{suffix}", title

  match = title_dimensions_pattern.search(title)
  if not match:
    return None, title

  text = f"{match.group(1)} x {match.group(2)}{suffix}"
  if with_units:
    title = _scrub_title(title, match)
  return text, title


def _attribute_records(attributes: Any) -> list:
  if not isinstance(attributes, list):
    return []
  return [attribute for attribute in attributes if isinstance(attribute, dict)]


def get_dimensions_from_attributes(attributes: Any) -> Optional[str]:
  for attribute in _attribute_records(attributes):
    name = strip_tags(attribute.get("name"))
    if name:
      return name
  return None


def get_medium_from_attributes(attributes: Any) -> Optional[str]:
  for attribute in _attribute_records(attributes):
    options = attribute.get("options")
    if not isinstance(options, list):
      continue
    for option in options:
      if not isinstance(option, str):
        continue
      cleaned = strip_tags(option)
      if cleaned:
        return normalize_medium_text(cleaned)
  return None


def extract_first_image_src(html: Optional[str]) -> Optional[str]:
  """First <img src> of an HTML fragment, normalized; None without one."""
  if not html:
    return None
  soup = BeautifulSoup(str(html), "html.parser")
  for img in soup.find_all("img"):
    src = img.get("src")
    if not is_blank(src):
      return normalize_image(src)
  return None
