from typing import Optional

from fastapi import APIRouter, Depends

from ..documents import serialize_document, update_result
from ..schemas.users import AdminCheck, UserCreate, UserDetailsUpdate
from ..services.access import Principal, verify_admin, verify_token
from ..services.users import UserService, get_user_service

router = APIRouter()


@router.post("/newUserApi")
async def create_user(payload: UserCreate, users: UserService = Depends(get_user_service)):
    inserted_id = await users.create_user(payload.model_dump(mode="json"))
    if inserted_id is None:
        return {"message": "User already exists", "insertedId": None}
    return {"acknowledged": True, "insertedId": str(inserted_id)}


@router.get("/user/admin/{email}", response_model=AdminCheck)
async def check_admin(email: str, _: Principal = Depends(verify_token), users: UserService = Depends(get_user_service)):
    return AdminCheck(admin=await users.is_admin(email))


@router.get("/allUsers")
async def all_users(_: Principal = Depends(verify_admin), users: UserService = Depends(get_user_service)):
    return [serialize_document(d) for d in await users.non_admin_users()]


@router.get("/currentUser")
async def current_user(email: Optional[str] = None, users: UserService = Depends(get_user_service)):
    return serialize_document(await users.current_user(email))


@router.put("/updateUserDetails/{user_id}")
async def update_user_details(
    user_id: str,
    payload: UserDetailsUpdate,
    _: Principal = Depends(verify_token),
    users: UserService = Depends(get_user_service),
):
    res = await users.update_user_details(user_id, payload.model_dump())
    return update_result(res)
