"""Listing filter, sort and pagination.

Every read fetches the full sorted working set first and paginates or
truncates in memory, so ``total_pages`` always reflects the whole filtered set.

Condition and brand values are matched as literal, case-insensitive
substrings: the input is escaped before it reaches ``$regex``, so
``carBrand=toyota|honda`` looks for that exact text rather than either brand.
"""
import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..errors import ValidationError

log = logging.getLogger("uvicorn.error")

ALL = "all"
# The lowest selectable price bucket has no upper cap.
MIN_ONLY_PRICE_FLOOR = 8000
HOME_SLICE_SIZE = 8

NEWEST_FIRST = [("_id", -1)]
MOST_BIDS_FIRST = [("totalBids", -1)]


@dataclass
class ListingQuery:
    per_page: int
    page: int
    condition: str = ALL
    brand: str = ALL
    price_range: str = ALL


@dataclass
class ListingPage:
    total_pages: int
    items: List[Dict[str, Any]]


def _contains_ci(value: str) -> Dict[str, str]:
    return {"$regex": re.escape(value), "$options": "i"}


def parse_price_range(raw: str) -> Optional[Dict[str, int]]:
    """``"min-max"`` -> price clause. ``"all"`` -> None."""
    if raw == ALL:
        return None
    bounds = str(raw).split("-")
    try:
        low = int(bounds[0])
    except ValueError:
        raise ValidationError(f"invalid price range: {raw!r}")
    if low == MIN_ONLY_PRICE_FLOOR:
        return {"$gte": low}
    try:
        high = int(bounds[1])
    except (IndexError, ValueError):
        raise ValidationError(f"invalid price range: {raw!r}")
    return {"$gte": low, "$lte": high}


def build_listing_filter(q: ListingQuery) -> Dict[str, Any]:
    query: Dict[str, Any] = {}
    if q.condition != ALL:
        query["carCondition"] = _contains_ci(q.condition)
    if q.brand != ALL:
        query["carBrand"] = _contains_ci(q.brand)
    price = parse_price_range(q.price_range)
    if price is not None:
        query["price"] = price
    return query


def parse_page_number(raw: Optional[str], name: str) -> int:
    if raw is None or str(raw).strip() == "":
        raise ValidationError(f"{name} is required")
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def _check_paging(per_page: int, page: int) -> None:
    if per_page < 1:
        raise ValidationError("listingPerPage must be at least 1")
    if page < 1:
        raise ValidationError("currentPage must be at least 1")


def paginate(items: List[Dict[str, Any]], per_page: int, page: int) -> ListingPage:
    _check_paging(per_page, page)
    total_pages = math.ceil(len(items) / per_page)
    start = (page - 1) * per_page
    return ListingPage(total_pages=total_pages, items=items[start:start + per_page])


async def _fetch_sorted(coll, query: Dict[str, Any], sort) -> List[Dict[str, Any]]:
    return await coll.find(query).sort(sort).to_list(length=None)


async def query_listings(coll, q: ListingQuery) -> ListingPage:
    _check_paging(q.per_page, q.page)
    query = build_listing_filter(q)
    log.debug("filtered listings query=%s page=%s per_page=%s", query, q.page, q.per_page)
    matched = await _fetch_sorted(coll, query, NEWEST_FIRST)
    return paginate(matched, q.per_page, q.page)


async def newest_listings(coll, limit: int = HOME_SLICE_SIZE) -> List[Dict[str, Any]]:
    docs = await _fetch_sorted(coll, {}, NEWEST_FIRST)
    return docs[:limit]


async def top_bid_listings(coll, limit: int = HOME_SLICE_SIZE) -> List[Dict[str, Any]]:
    docs = await _fetch_sorted(coll, {}, MOST_BIDS_FIRST)
    return docs[:limit]
