from typing import Optional

from fastapi import APIRouter, Depends

from ..documents import delete_result, insert_result, serialize_document
from ..mongo import SAVED_ADS_COLLECTION, require_mongo_db
from ..schemas.records import SavedAdCreate

router = APIRouter()


@router.post("/newSavedAd")
async def create_saved_ad(payload: SavedAdCreate, mdb=Depends(require_mongo_db)):
    res = await mdb[SAVED_ADS_COLLECTION].insert_one(payload.model_dump(mode="json"))
    return insert_result(res)


@router.get("/getSingleSavedAd/{ad_id}")
async def single_saved_ad(ad_id: str, email: Optional[str] = None, mdb=Depends(require_mongo_db)):
    doc = await mdb[SAVED_ADS_COLLECTION].find_one({"singleAdId": ad_id, "userEmail": email})
    return serialize_document(doc)


@router.get("/savedAdsList/{email}")
async def saved_ads_for_user(email: str, mdb=Depends(require_mongo_db)):
    docs = await mdb[SAVED_ADS_COLLECTION].find({"userEmail": email}).to_list(length=None)
    return [serialize_document(d) for d in docs]


@router.delete("/removedSavedAd/{ad_id}")
async def remove_saved_ad(ad_id: str, email: Optional[str] = None, mdb=Depends(require_mongo_db)):
    res = await mdb[SAVED_ADS_COLLECTION].delete_one({"singleAdId": ad_id, "userEmail": email})
    return delete_result(res)
