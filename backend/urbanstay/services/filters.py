"""Normalization of raw search input into the shared property criteria.

Both the live search endpoint (query-string values) and saved alerts (JSON
bodies) go through :func:`normalize_criteria`, so the two always agree on
what a property "matches". Bad input never raises: a value that cannot be
parsed is dropped and the query behaves as if it had not been given.
"""

import math
import re
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from urbanstay.models.property import Furnishing, ListingType, PropertyType

_PLUS_SUFFIX = re.compile(r"^\s*(\d+)\s*\+\s*$")
_TRUE_VALUES = {"true", "1", "yes", "on"}

# Field name to the query-string key it is read from.
_WIRE_KEYS = (
    ("listing_type", "listingType"),
    ("property_types", "propertyTypes"),
    ("cities", "cities"),
    ("min_price", "minPrice"),
    ("max_price", "maxPrice"),
    ("bedrooms", "bedrooms"),
    ("min_bedrooms", "minBedrooms"),
    ("min_area", "minArea"),
    ("max_area", "maxArea"),
    ("furnishing", "furnishing"),
    ("amenities", "amenities"),
    ("search", "search"),
    ("featured_only", "featured"),
    ("verified_only", "verified"),
)


class SortKey(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    PRICE_LOW = "price_low"
    PRICE_HIGH = "price_high"
    POPULAR = "popular"


class PropertyCriteria(BaseModel):
    """Typed, normalized search criteria shared by search and alerts.

    Unset fields mean "no constraint". ``bedrooms`` is an exact match while
    ``min_bedrooms`` is the ``N+`` form.
    """

    model_config = ConfigDict(frozen=True)

    listing_type: Optional[ListingType] = None
    property_types: List[PropertyType] = []
    cities: List[str] = []
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    bedrooms: Optional[int] = None
    min_bedrooms: Optional[int] = None
    min_area: Optional[float] = None
    max_area: Optional[float] = None
    furnishing: Optional[Furnishing] = None
    amenities: List[str] = []
    search: Optional[str] = None
    featured_only: bool = False
    verified_only: bool = False

    def to_storage(self) -> dict:
        """Compact dict with unset constraints omitted entirely."""
        return self.model_dump(mode="json", exclude_defaults=True)

    def to_wire(self) -> dict:
        """Same keys :func:`normalize_criteria` accepts, unset constraints omitted."""
        stored = self.to_storage()
        wire = {}
        for field, key in _WIRE_KEYS:
            if field in stored:
                wire[key] = stored[field]
        return wire

    def is_empty(self) -> bool:
        return not self.to_storage()


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    return False


def parse_number(value: Any) -> Optional[float]:
    """Parse a finite number or return ``None``."""
    if _is_blank(value) or isinstance(value, bool):
        return None
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_int(value: Any) -> Optional[int]:
    number = parse_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def parse_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if _is_blank(value):
        return False
    return str(value).strip().lower() in _TRUE_VALUES


def _as_list(value: Any) -> List[str]:
    if _is_blank(value):
        return []
    if isinstance(value, str):
        items: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set)):
        items = value
    else:
        items = [value]
    cleaned = []
    for item in items:
        if item is None:
            continue
        text = str(item).strip()
        if text and text not in cleaned:
            cleaned.append(text)
    return cleaned


def _as_enum(enum_cls, value: Any):
    if _is_blank(value):
        return None
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return None


def _parse_bedrooms(value: Any) -> dict:
    """``"5+"`` means five or more, a plain number is exact."""
    if _is_blank(value):
        return {}
    match = _PLUS_SUFFIX.match(str(value))
    if match:
        return {"min_bedrooms": int(match.group(1))}
    exact = parse_int(value)
    if exact is None or exact < 0:
        return {}
    return {"bedrooms": exact}


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and not _is_blank(raw[key]):
            return raw[key]
    return None


def normalize_criteria(raw: Optional[Mapping[str, Any]]) -> PropertyCriteria:
    """Map raw wire values onto :class:`PropertyCriteria`.

    Accepted keys: ``listingType, propertyType, propertyTypes, city, cities,
    minPrice, maxPrice, bedrooms, minBedrooms, minArea, maxArea, furnishing,
    amenities, search, featured, verified``. Unknown keys are ignored.
    """
    raw = raw or {}
    values: dict = {}

    listing_type = _as_enum(ListingType, _first(raw, "listingType"))
    if listing_type is not None:
        values["listing_type"] = listing_type

    property_types = []
    for item in _as_list(raw.get("propertyType")) + _as_list(raw.get("propertyTypes")):
        parsed = _as_enum(PropertyType, item)
        if parsed is not None and parsed not in property_types:
            property_types.append(parsed)
    if property_types:
        values["property_types"] = property_types

    cities = []
    for city in _as_list(raw.get("city")) + _as_list(raw.get("cities")):
        if city.lower() not in [c.lower() for c in cities]:
            cities.append(city)
    if cities:
        values["cities"] = cities

    for key, field in (
        ("minPrice", "min_price"),
        ("maxPrice", "max_price"),
        ("minArea", "min_area"),
        ("maxArea", "max_area"),
    ):
        number = parse_number(raw.get(key))
        if number is not None:
            values[field] = number

    values.update(_parse_bedrooms(raw.get("bedrooms")))
    min_bedrooms = parse_int(raw.get("minBedrooms"))
    if min_bedrooms is not None and "min_bedrooms" not in values:
        values["min_bedrooms"] = min_bedrooms

    furnishing = _as_enum(Furnishing, _first(raw, "furnishing"))
    if furnishing is not None:
        values["furnishing"] = furnishing

    amenities = _as_list(raw.get("amenities"))
    if amenities:
        values["amenities"] = amenities

    search = _first(raw, "search")
    if search is not None:
        values["search"] = str(search).strip()

    if parse_flag(raw.get("featured")):
        values["featured_only"] = True
    if parse_flag(raw.get("verified")):
        values["verified_only"] = True

    return PropertyCriteria(**values)


def criteria_from_storage(data: Optional[Mapping[str, Any]]) -> PropertyCriteria:
    """Rebuild criteria persisted with :meth:`PropertyCriteria.to_storage`."""
    return PropertyCriteria.model_validate(dict(data or {}))


def normalize_sort(value: Any) -> Optional[SortKey]:
    """Unknown sort keys fall back to the default ordering."""
    if _is_blank(value):
        return None
    try:
        return SortKey(str(value).strip().lower())
    except ValueError:
        return None
