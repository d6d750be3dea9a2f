# backend/timekeeper/api/endpoints/user/account.py

from fastapi import APIRouter, Depends, status

from timekeeper.api.deps import get_current_token, get_current_user, get_user_service
from timekeeper.models.user import User
from timekeeper.schemas.patch import PatchOperation
from timekeeper.schemas.user import (
    ActivateRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordMailRequest,
    ResetPasswordRequest,
    SuccessMessage,
    UserRead,
)
from timekeeper.services.users import UserService

router = APIRouter(prefix="/user", tags=["User"])


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, service: UserService = Depends(get_user_service)):
    user = await service.register(payload.name, payload.email, payload.password)
    return UserRead.from_user(user)


@router.post("/activate", response_model=UserRead)
async def activate(payload: ActivateRequest, service: UserService = Depends(get_user_service)):
    user = await service.activate(payload.name, payload.activation_token)
    return UserRead.from_user(user)


@router.post("/login", response_model=UserRead)
async def login(payload: LoginRequest, service: UserService = Depends(get_user_service)):
    """
    Returns the user with a fresh session token ("token").
    Send it back as `Authorization: Bearer <token>`.
    """
    user = await service.login(payload.name, payload.password)
    return UserRead.from_user(user, with_token=True)


@router.post("/reset-password-mail", response_model=SuccessMessage)
async def send_reset_password_mail(
    payload: ResetPasswordMailRequest,
    service: UserService = Depends(get_user_service),
):
    await service.send_reset_password_mail(payload.email)
    return SuccessMessage(message="Reset password mail sent")


@router.post("/reset-password", response_model=SuccessMessage)
async def reset_password(payload: ResetPasswordRequest, service: UserService = Depends(get_user_service)):
    await service.reset_password(payload.name, payload.reset_password_token, payload.password)
    return SuccessMessage(message="Password changed")


# ---------- /user/me (session token required) ----------

@router.get("/me", response_model=UserRead)
async def read_me(user: User = Depends(get_current_user)):
    return UserRead.from_user(user)


@router.patch("/me", response_model=UserRead)
async def patch_me(
    operation: PatchOperation,
    token: str = Depends(get_current_token),
    service: UserService = Depends(get_user_service),
):
    """[request] {"op": "replace", "path": "/selectedTask", "value": "<task id>"}"""
    user = await service.apply_patch(token, operation)
    return UserRead.from_user(user)


@router.delete("/me", status_code=status.HTTP_204_NO_CONTENT)
async def delete_me(
    user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    await service.delete_user(user.id)
    return None
