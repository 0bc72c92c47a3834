from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

Number = Union[int, float]


class ListingCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    sellerEmail: str
    sellerId: Optional[str] = None
    carName: Optional[str] = None
    carBrand: Optional[str] = None
    carType: Optional[str] = None
    carCondition: Optional[str] = None
    price: Optional[Number] = None
    totalBids: Number = 0
    sellStatus: Optional[str] = None
    approvalStatus: Optional[str] = None
    sellerVerificationStatus: Optional[str] = None


class ListingUpdate(BaseModel):
    """Full listing update. Every field is written; omitted ones become null."""

    carName: Optional[str] = None
    carBrand: Optional[str] = None
    carType: Optional[str] = None
    price: Optional[Number] = None
    carCondition: Optional[str] = None
    purchasingDate: Optional[str] = None
    description: Optional[str] = None
    photo: Optional[str] = None
    approvalStatus: Optional[str] = None
    addingDate: Optional[str] = None
    manufactureYear: Optional[Union[int, str]] = None
    engineCapacity: Optional[Union[Number, str]] = None
    totalRun: Optional[Union[Number, str]] = None
    fuelType: Optional[str] = None
    transmissionType: Optional[str] = None
    registeredYear: Optional[Union[int, str]] = None
    sellerPhone: Optional[str] = None


class SellStatusUpdate(BaseModel):
    sellStatus: Optional[str] = None


class SellerVerificationUpdate(BaseModel):
    updatedVerifyStatus: Optional[str] = None


class FilteredListingsResponse(BaseModel):
    totalPages: int
    filteredListings: List[dict]
