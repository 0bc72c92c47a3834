from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..documents import delete_result, insert_result, serialize_document, update_result
from ..schemas.listings import (
    FilteredListingsResponse,
    ListingCreate,
    ListingUpdate,
    SellerVerificationUpdate,
    SellStatusUpdate,
)
from ..services.access import Principal, verify_admin, verify_token
from ..services.listing_filter import ALL, ListingQuery, parse_page_number
from ..services.listing_service import ListingService, get_listing_service

router = APIRouter()


@router.post("/newCarSellByUser")
async def create_listing(
    payload: ListingCreate,
    _: Principal = Depends(verify_token),
    svc: ListingService = Depends(get_listing_service),
):
    res = await svc.create_listing(payload.model_dump(mode="json"))
    return insert_result(res)


@router.get("/allListings")
async def all_listings(svc: ListingService = Depends(get_listing_service)):
    return [serialize_document(d) for d in await svc.all_listings()]


@router.get("/filteredListings", response_model=FilteredListingsResponse)
async def filtered_listings(
    listingPerPage: Optional[str] = Query(None),
    currentPage: str = Query("1"),
    carCondition: str = Query(ALL),
    carBrand: str = Query(ALL),
    carPrice: str = Query(ALL),
    svc: ListingService = Depends(get_listing_service),
):
    page = await svc.filtered_listings(
        ListingQuery(
            per_page=parse_page_number(listingPerPage, "listingPerPage"),
            page=parse_page_number(currentPage, "currentPage"),
            condition=carCondition,
            brand=carBrand,
            price_range=carPrice,
        )
    )
    return FilteredListingsResponse(
        totalPages=page.total_pages,
        filteredListings=[serialize_document(d) for d in page.items],
    )


@router.get("/homeListings")
async def home_listings(svc: ListingService = Depends(get_listing_service)):
    return [serialize_document(d) for d in await svc.home_listings()]


@router.get("/topBidHomeListings")
async def top_bid_home_listings(svc: ListingService = Depends(get_listing_service)):
    return [serialize_document(d) for d in await svc.top_bid_home_listings()]


@router.get("/listings/{email}")
async def seller_listings(
    email: str,
    _: Principal = Depends(verify_token),
    svc: ListingService = Depends(get_listing_service),
):
    return [serialize_document(d) for d in await svc.seller_listings(email)]


@router.get("/singleListing/{listing_id}")
async def single_listing(listing_id: str, svc: ListingService = Depends(get_listing_service)):
    return serialize_document(await svc.single_listing(listing_id))


@router.put("/updateSellerVerification/{seller_id}")
async def update_seller_verification(
    seller_id: str,
    payload: SellerVerificationUpdate,
    _: Principal = Depends(verify_admin),
    svc: ListingService = Depends(get_listing_service),
):
    res = await svc.update_seller_verification(seller_id, payload.updatedVerifyStatus)
    return update_result(res)


@router.put("/updateListing/{listing_id}")
async def update_listing(
    listing_id: str,
    payload: ListingUpdate,
    _: Principal = Depends(verify_token),
    svc: ListingService = Depends(get_listing_service),
):
    res = await svc.update_listing(listing_id, payload.model_dump(mode="json"))
    return update_result(res)


@router.put("/updateSellStatus/{listing_id}")
async def update_sell_status(
    listing_id: str,
    payload: SellStatusUpdate,
    _: Principal = Depends(verify_token),
    svc: ListingService = Depends(get_listing_service),
):
    res = await svc.update_sell_status(listing_id, payload.sellStatus)
    return update_result(res)


@router.delete("/api/deleteSingleListing/{listing_id}")
async def delete_listing(
    listing_id: str,
    _: Principal = Depends(verify_token),
    svc: ListingService = Depends(get_listing_service),
):
    res = await svc.delete_listing(listing_id)
    return delete_result(res)
