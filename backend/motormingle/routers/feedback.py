from fastapi import APIRouter, Depends

from ..documents import insert_result, serialize_document
from ..mongo import FEEDBACK_COLLECTION, require_mongo_db
from ..schemas.records import FeedbackCreate

router = APIRouter()

LATEST_FEEDBACK_COUNT = 5


@router.post("/userFeedback")
async def create_feedback(payload: FeedbackCreate, mdb=Depends(require_mongo_db)):
    res = await mdb[FEEDBACK_COLLECTION].insert_one(payload.model_dump(mode="json"))
    return insert_result(res)


@router.get("/allFeedbacks")
async def latest_feedback(mdb=Depends(require_mongo_db)):
    docs = await mdb[FEEDBACK_COLLECTION].find({}).sort([("_id", -1)]).to_list(length=None)
    return [serialize_document(d) for d in docs[:LATEST_FEEDBACK_COUNT]]


@router.get("/singleFeedback/{user_id}")
async def single_feedback(user_id: str, mdb=Depends(require_mongo_db)):
    return serialize_document(await mdb[FEEDBACK_COLLECTION].find_one({"feedbackBy": user_id}))
