import logging
from typing import Any, Dict, List, Optional

from fastapi import Depends
from pymongo.errors import DuplicateKeyError
from pymongo.results import UpdateResult

from ..documents import parse_object_id
from ..mongo import USERS_COLLECTION, require_mongo_db
from .access import UserType, is_admin

log = logging.getLogger("uvicorn.error")

# request key -> stored field, for the selective user-detail merge
USER_DETAIL_FIELDS = {
    "requestUpdate": "verificationRequest",
    "updatedVerifyStatus": "verifyStatus",
    "phone": "phone",
    "address": "address",
}


class UserService:
    def __init__(self, mdb) -> None:
        self.users = mdb[USERS_COLLECTION]

    async def create_user(self, doc: Dict[str, Any]) -> Optional[Any]:
        """Insert the user unless the email is taken. Returns the new id or None."""
        if await self.users.find_one({"email": doc.get("email")}):
            return None
        doc = dict(doc)
        try:
            res = await self.users.insert_one(doc)
        except DuplicateKeyError:
            log.info("concurrent registration for %s; keeping existing user", doc.get("email"))
            return None
        return res.inserted_id

    async def current_user(self, email: Optional[str]) -> Optional[Dict[str, Any]]:
        return await self.users.find_one({"email": email})

    async def is_admin(self, email: str) -> bool:
        return await is_admin(self.users, email)

    async def non_admin_users(self) -> List[Dict[str, Any]]:
        return await self.users.find({"userType": UserType.USER.value}).to_list(length=None)

    async def update_user_details(self, user_id: str, payload: Dict[str, Any]):
        """Merge only the verification fields present (and non-empty) in ``payload``."""
        oid = parse_object_id(user_id)
        updates = {field: payload[key] for key, field in USER_DETAIL_FIELDS.items() if payload.get(key)}
        if not updates:
            found = await self.users.find_one({"_id": oid}, {"_id": 1})
            return UpdateResult({"n": 1 if found else 0, "nModified": 0}, acknowledged=True)
        return await self.users.update_one({"_id": oid}, {"$set": updates}, upsert=True)


async def get_user_service(mdb=Depends(require_mongo_db)) -> UserService:
    return UserService(mdb)
