from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..services.access import UserType


class UserCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: str
    userType: UserType = UserType.USER
    phone: Optional[str] = None
    address: Optional[str] = None


class UserDetailsUpdate(BaseModel):
    requestUpdate: Optional[str] = None
    updatedVerifyStatus: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class AdminCheck(BaseModel):
    admin: bool
