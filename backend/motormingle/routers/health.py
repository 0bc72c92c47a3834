from fastapi import APIRouter, Depends

from ..mongo import get_mongo_db

router = APIRouter()


@router.get("/")
def root():
    return {"status": "ok"}


@router.get("/db")
async def db_health(mdb=Depends(get_mongo_db)):
    if mdb is None:
        return {"status": "degraded", "database": "none", "detail": "MongoDB not configured"}
    try:
        await mdb.command("ping")
        return {"status": "ok", "database": "mongo"}
    except Exception as e:
        return {"status": "error", "database": "mongo", "detail": str(e)}
