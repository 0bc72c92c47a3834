from fastapi import APIRouter, Depends

from ..documents import serialize_document
from ..schemas.bids import BidCreate
from ..services.access import Principal, verify_token
from ..services.listing_service import ListingService, get_listing_service

router = APIRouter()


@router.post("/newBid")
async def place_bid(
    payload: BidCreate,
    _: Principal = Depends(verify_token),
    svc: ListingService = Depends(get_listing_service),
):
    bid = await svc.place_bid(payload.model_dump(mode="json"))
    if bid is None:
        return False
    return serialize_document(bid)


@router.get("/allBidsForProduct/{listing_id}")
async def bids_for_product(listing_id: str, svc: ListingService = Depends(get_listing_service)):
    return [serialize_document(d) for d in await svc.bids_for_listing(listing_id)]
