"""Bid recording with a denormalized ``totalBids`` counter on the listing.

The counter increment must succeed before the bid is stored; a bid is never
written for a listing that vanished between lookup and increment.
"""
import logging
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from ..documents import parse_object_id
from ..errors import NotFound

log = logging.getLogger("uvicorn.error")


class BidLedger:
    def __init__(self, listings, bids) -> None:
        self.listings = listings
        self.bids = bids

    async def place_bid(self, bid: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Record ``bid`` and bump the listing counter.

        Returns the stored bid, or ``None`` when the counter update matched
        nothing (a concurrent delete); that case is routine, not an error.
        """
        oid = parse_object_id(bid.get("productId"))
        if await self.listings.find_one({"_id": oid}, {"_id": 1}) is None:
            raise NotFound("Listing not found")
        updated = await self.listings.find_one_and_update(
            {"_id": oid},
            {"$inc": {"totalBids": 1}},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            log.info("bid counter update matched no listing: productId=%s", oid)
            return None
        doc = dict(bid)
        try:
            res = await self.bids.insert_one(doc)
        except PyMongoError:
            # keep totalBids equal to the stored bid count
            await self.listings.update_one({"_id": oid}, {"$inc": {"totalBids": -1}})
            log.warning("bid insert failed; counter rolled back: productId=%s", oid)
            raise
        doc["_id"] = res.inserted_id
        return doc

    async def bids_for_listing(self, listing_id: str) -> List[Dict[str, Any]]:
        return await self.bids.find({"productId": listing_id}).to_list(length=None)
