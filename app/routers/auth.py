"""Authentication router: register, login, logout and the current profile."""
from __future__ import annotations
import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import login_session, logout_session, require_user
from app.core.exceptions import AuthenticationRequired
from app.db.config import get_session
from app.models.account import LoginRequest, UserCreate, UserOut, UserUpdate
from app.models.persisted_user import UserRecord
from app.repositories.user_repo import UserRepository
from app.utils.feature_flags import require_feature

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


async def _get_repo(
    session: AsyncSession = Depends(get_session),
) -> UserRepository:
    return UserRepository(session)


@router.post(
    "/register",
    response_model=UserOut,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_feature("registration"))],
)
async def register(
    request: Request,
    payload: UserCreate,
    repo: UserRepository = Depends(_get_repo),
):
    user = await repo.create(**payload.to_columns())
    login_session(request, user)
    return user.to_dict()


@router.post("/login", response_model=UserOut)
async def login(
    request: Request,
    payload: LoginRequest,
    repo: UserRepository = Depends(_get_repo),
):
    user = await repo.authenticate(payload.username, payload.password)
    if user is None:
        logger.info("Failed login for %r", payload.username)
        raise AuthenticationRequired("Invalid username or password")
    login_session(request, user)
    return user.to_dict()


@router.post("/logout")
async def logout(request: Request):
    logout_session(request)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserOut)
async def get_current_user(user: UserRecord = Depends(require_user)):
    return user.to_dict()


@router.put("/user", response_model=UserOut)
async def update_current_user(
    payload: UserUpdate,
    user: UserRecord = Depends(require_user),
    repo: UserRepository = Depends(_get_repo),
):
    updated = await repo.update(user.id, **payload.to_columns(partial=True))
    return updated.to_dict()
