"""Bearer-token authentication and role checks.

Authorization always runs after authentication: ``verify_admin`` depends on
``verify_token``, and the admin role is re-read from the users collection on
every request so role changes apply on the next call.
"""
import logging
import time
from enum import Enum
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, Header
from pydantic import BaseModel, Field

from ..config import access_token_secret, access_token_ttl_seconds
from ..errors import Forbidden, Unauthorized
from ..mongo import USERS_COLLECTION, require_mongo_db

log = logging.getLogger("uvicorn.error")

ALGORITHM = "HS256"


class UserType(str, Enum):
    USER = "user"
    ADMIN = "admin"


def role_of(user_doc: Optional[Dict[str, Any]]) -> UserType:
    if not user_doc:
        return UserType.USER
    try:
        return UserType(user_doc.get("userType"))
    except ValueError:
        return UserType.USER


class Principal(BaseModel):
    email: str
    claims: Dict[str, Any] = Field(default_factory=dict)


def issue_token(claims: Dict[str, Any], ttl_seconds: Optional[int] = None) -> str:
    now = int(time.time())
    ttl = access_token_ttl_seconds() if ttl_seconds is None else ttl_seconds
    payload = dict(claims)
    payload["iat"] = now
    payload["exp"] = now + ttl
    return jwt.encode(payload, access_token_secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        return jwt.decode(token, access_token_secret(), algorithms=[ALGORITHM])
    except jwt.PyJWTError:
        return None


def authenticate(authorization: Optional[str]) -> Principal:
    if not authorization:
        raise Unauthorized()
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise Unauthorized()
    claims = decode_token(parts[1])
    if claims is None or not claims.get("email"):
        raise Unauthorized()
    return Principal(email=str(claims["email"]), claims=claims)


async def authorize_admin(users, principal: Principal) -> Principal:
    user = await users.find_one({"email": principal.email})
    if role_of(user) is not UserType.ADMIN:
        log.info("admin check denied for %s", principal.email)
        raise Forbidden()
    return principal


async def is_admin(users, email: str) -> bool:
    return role_of(await users.find_one({"email": email})) is UserType.ADMIN


async def verify_token(authorization: Optional[str] = Header(default=None)) -> Principal:
    return authenticate(authorization)


async def verify_admin(principal: Principal = Depends(verify_token), mdb=Depends(require_mongo_db)) -> Principal:
    return await authorize_admin(mdb[USERS_COLLECTION], principal)
