# backend/timekeeper/api/endpoints/web/sessions.py
from typing import List

from fastapi import APIRouter, Depends, status

from timekeeper.api.deps import get_current_user, get_session_service
from timekeeper.models.session import Session
from timekeeper.models.user import User
from timekeeper.schemas.patch import PatchOperation
from timekeeper.services.sessions import SessionService

router = APIRouter(prefix="/sessions", tags=["Sessions"])


# READ ALL
@router.get("/", response_model=List[Session])
async def read_sessions(service: SessionService = Depends(get_session_service)):
    return await service.get_all()


# READ MINE
@router.get("/me", response_model=List[Session])
async def read_my_sessions(
    user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return await service.get_sessions_from_user(user.id)


# READ ONE
@router.get("/{session_id}", response_model=Session)
async def read_session(session_id: str, service: SessionService = Depends(get_session_service)):
    return await service.get_by_id(session_id)


# CREATE (booked on the logged-in user)
@router.post("/", response_model=Session, status_code=status.HTTP_201_CREATED)
async def create_session(
    session: Session,
    user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return await service.add_session(session.model_copy(update={"user_id": user.id}))


# REPLACE (id in body)
@router.put("/", response_model=Session)
async def update_session(session: Session, service: SessionService = Depends(get_session_service)):
    return await service.update_session(session)


# PATCH (single field)
@router.patch("/{session_id}", response_model=Session)
async def patch_session(
    session_id: str,
    operation: PatchOperation,
    service: SessionService = Depends(get_session_service),
):
    return await service.apply_patch(session_id, operation)


# DELETE
@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, service: SessionService = Depends(get_session_service)):
    await service.delete_session(session_id)
    return None
