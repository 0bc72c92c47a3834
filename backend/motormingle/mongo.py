import os
import threading
from typing import Optional

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from .errors import StoreUnavailable

MONGODB_URI = os.getenv("MONGODB_URI")
MONGODB_DB_NAME = os.getenv("MONGODB_DB_NAME", "carCollection")

USERS_COLLECTION = os.getenv("MONGODB_USERS_COLLECTION", "usersList")
LISTINGS_COLLECTION = os.getenv("MONGODB_LISTINGS_COLLECTION", "oldCarsByUsers")
SAVED_ADS_COLLECTION = os.getenv("MONGODB_SAVED_ADS_COLLECTION", "savedAdsList")
FEEDBACK_COLLECTION = os.getenv("MONGODB_FEEDBACK_COLLECTION", "allFeedbacks")
BIDS_COLLECTION = os.getenv("MONGODB_BIDS_COLLECTION", "allBids")

# Allow disabling Mongo for local/dev runs by setting MONGO_ENABLED=false
_MONGO_ENABLED = os.getenv("MONGO_ENABLED", "true").lower() in {"1", "true", "yes"}

_mongo_client: Optional[AsyncIOMotorClient] = None
_mongo_client_lock = threading.Lock()


def mongo_enabled() -> bool:
    return bool(MONGODB_URI) and _MONGO_ENABLED


def get_mongo_client() -> Optional[AsyncIOMotorClient]:
    """Return the process-wide client, creating it once on first use."""
    global _mongo_client
    if _mongo_client is None and mongo_enabled():
        with _mongo_client_lock:
            if _mongo_client is None:
                _mongo_client = AsyncIOMotorClient(MONGODB_URI)
    return _mongo_client


def close_mongo_client() -> None:
    global _mongo_client
    with _mongo_client_lock:
        if _mongo_client is not None:
            _mongo_client.close()
            _mongo_client = None


async def get_mongo_db() -> Optional[AsyncIOMotorDatabase]:
    client = get_mongo_client()
    if client is None:
        return None
    return client[MONGODB_DB_NAME]


async def require_mongo_db(mdb=Depends(get_mongo_db)) -> AsyncIOMotorDatabase:
    if mdb is None:
        raise StoreUnavailable()
    return mdb


async def ensure_indexes(mdb) -> None:
    await mdb[USERS_COLLECTION].create_index([("email", 1)], unique=True, name="unique_email")
    await mdb[BIDS_COLLECTION].create_index([("productId", 1)], name="bids_by_product")
    await mdb[LISTINGS_COLLECTION].create_index([("sellerEmail", 1)], name="listings_by_seller_email")
    await mdb[LISTINGS_COLLECTION].create_index([("sellerId", 1)], name="listings_by_seller_id")
