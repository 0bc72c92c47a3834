import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends

from ..documents import parse_object_id
from ..mongo import BIDS_COLLECTION, LISTINGS_COLLECTION, require_mongo_db
from .bid_ledger import BidLedger
from .listing_filter import ListingPage, ListingQuery, newest_listings, query_listings, top_bid_listings

log = logging.getLogger("uvicorn.error")

# Fields written by a full listing update. Omitted ones are stored as null.
REPLACEABLE_LISTING_FIELDS = (
    "carName",
    "carBrand",
    "carType",
    "price",
    "carCondition",
    "purchasingDate",
    "description",
    "photo",
    "approvalStatus",
    "addingDate",
    "manufactureYear",
    "engineCapacity",
    "totalRun",
    "fuelType",
    "transmissionType",
    "registeredYear",
    "sellerPhone",
)


class ListingService:
    def __init__(self, mdb) -> None:
        self.listings = mdb[LISTINGS_COLLECTION]
        self.ledger = BidLedger(self.listings, mdb[BIDS_COLLECTION])

    # --- reads ---
    async def all_listings(self) -> List[Dict[str, Any]]:
        return await self.listings.find({}).to_list(length=None)

    async def single_listing(self, listing_id: str) -> Optional[Dict[str, Any]]:
        return await self.listings.find_one({"_id": parse_object_id(listing_id)})

    async def seller_listings(self, email: str) -> List[Dict[str, Any]]:
        return await self.listings.find({"sellerEmail": email}).to_list(length=None)

    async def filtered_listings(self, q: ListingQuery) -> ListingPage:
        return await query_listings(self.listings, q)

    async def home_listings(self) -> List[Dict[str, Any]]:
        return await newest_listings(self.listings)

    async def top_bid_home_listings(self) -> List[Dict[str, Any]]:
        return await top_bid_listings(self.listings)

    async def bids_for_listing(self, listing_id: str) -> List[Dict[str, Any]]:
        return await self.ledger.bids_for_listing(listing_id)

    # --- writes ---
    async def create_listing(self, doc: Dict[str, Any]):
        doc = dict(doc)
        if doc.get("totalBids") is None:
            doc["totalBids"] = 0
        return await self.listings.insert_one(doc)

    async def update_listing(self, listing_id: str, fields: Dict[str, Any]):
        """Full replace-or-insert of the listing's editable fields.

        Any field missing from ``fields`` is overwritten with null; callers
        must send the complete listing.
        """
        update = {k: fields.get(k) for k in REPLACEABLE_LISTING_FIELDS}
        return await self.listings.update_one(
            {"_id": parse_object_id(listing_id)}, {"$set": update}, upsert=True
        )

    async def update_sell_status(self, listing_id: str, sell_status: Optional[str]):
        return await self.listings.update_one(
            {"_id": parse_object_id(listing_id)}, {"$set": {"sellStatus": sell_status}}, upsert=True
        )

    async def delete_listing(self, listing_id: str):
        return await self.listings.delete_one({"_id": parse_object_id(listing_id)})

    async def update_seller_verification(self, seller_id: str, status: Optional[str]):
        res = await self.listings.update_many(
            {"sellerId": seller_id}, {"$set": {"sellerVerificationStatus": status}}
        )
        log.info("seller %s verification -> %s (%s listings)", seller_id, status, res.modified_count)
        return res

    async def place_bid(self, bid: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        return await self.ledger.place_bid(bid)


async def get_listing_service(mdb=Depends(require_mongo_db)) -> ListingService:
    return ListingService(mdb)
