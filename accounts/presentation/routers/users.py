from typing import Annotated, Callable

from fastapi import APIRouter, Depends

from accounts.application.activate_user import activate_user
from accounts.application.cached_users import CachedUserRepository
from accounts.application.delete_user import delete_user
from accounts.application.find_users import (
    find_all_users,
    find_user_by_email,
    find_user_by_id,
)
from accounts.application.register_user import register_user
from accounts.application.request_otp import request_new_otp
from accounts.application.start_session import start_session
from accounts.application.update_user import update_user
from accounts.domain.ports.notifier import NotifierPort
from accounts.domain.ports.unit_of_work import UnitOfWorkPort
from accounts.presentation.dependencies import (
    get_hash_password,
    get_notifier,
    get_otp_length,
    get_uow,
    get_users,
    get_verify_password,
)
from accounts.schemas.requests import (
    OtpRequestIn,
    UserCreateIn,
    UserOtpIn,
    UserSessionIn,
    UserUpdateIn,
)
from accounts.schemas.responses import ApiResponse, UserOut

router = APIRouter(prefix="/users", tags=["Users"])

Uow = Annotated[UnitOfWorkPort, Depends(get_uow)]
Users = Annotated[CachedUserRepository, Depends(get_users)]
Notifier = Annotated[NotifierPort, Depends(get_notifier)]


def ok(data=None) -> ApiResponse:
    return ApiResponse(code=200, status="OK", data=data)


@router.get("", response_model=ApiResponse[list[UserOut]])
async def get_users_list(uow: Uow, users: Users):
    found = await find_all_users(uow, users)
    return ok([UserOut.from_user(u) for u in found])


@router.get("/email/{email}", response_model=ApiResponse[UserOut])
async def get_user_by_email(email: str, uow: Uow, users: Users):
    user = await find_user_by_email(uow, users, email)
    return ok(UserOut.from_user(user))


@router.get("/{user_id}", response_model=ApiResponse[UserOut])
async def get_user(user_id: int, uow: Uow, users: Users):
    user = await find_user_by_id(uow, users, user_id)
    return ok(UserOut.from_user(user))


@router.post("", response_model=ApiResponse[UserOut])
async def post_create_user(
    body: UserCreateIn,
    uow: Uow,
    users: Users,
    notifier: Notifier,
    hash_password: Annotated[Callable[..., str], Depends(get_hash_password)],
    otp_length: Annotated[int, Depends(get_otp_length)],
):
    user = await register_user(
        uow=uow,
        users=users,
        notifier=notifier,
        email=body.email,
        password=body.password,
        hash_password=hash_password,
        first_name=body.first_name,
        last_name=body.last_name,
        bio=body.bio,
        otp_length=otp_length,
    )
    return ok(UserOut.from_user(user))


@router.put("", response_model=ApiResponse[UserOut])
async def put_update_user(body: UserUpdateIn, uow: Uow, users: Users):
    user = await update_user(
        uow=uow,
        users=users,
        user_id=body.id,
        email=body.email,
        first_name=body.first_name,
        last_name=body.last_name,
        bio=body.bio,
    )
    return ok(UserOut.from_user(user))


@router.delete("/{user_id}", response_model=ApiResponse[None])
async def delete_user_route(user_id: int, uow: Uow, users: Users):
    await delete_user(uow, users, user_id)
    return ok()


@router.post("/session", response_model=ApiResponse[UserOut])
async def post_session(
    body: UserSessionIn,
    uow: Uow,
    users: Users,
    verify_password: Annotated[Callable[[str, str], bool], Depends(get_verify_password)],
):
    user = await start_session(
        uow=uow,
        users=users,
        email=body.email,
        password=body.password,
        verify_password=verify_password,
    )
    return ok(UserOut.from_user(user))


@router.post("/otp", response_model=ApiResponse[UserOut])
async def post_verify_otp(body: UserOtpIn, uow: Uow, users: Users):
    user = await activate_user(uow=uow, users=users, email=body.email, code=body.otp)
    return ok(UserOut.from_user(user))


@router.post("/otp/request-otp", response_model=ApiResponse[None])
async def post_request_otp(
    body: OtpRequestIn,
    uow: Uow,
    users: Users,
    notifier: Notifier,
    otp_length: Annotated[int, Depends(get_otp_length)],
):
    await request_new_otp(
        uow=uow,
        users=users,
        notifier=notifier,
        email=body.email,
        otp_length=otp_length,
    )
    return ok()
