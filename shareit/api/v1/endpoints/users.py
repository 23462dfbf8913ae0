"""
User endpoints - registration, login, profile lookup and account management.
"""

from fastapi import APIRouter, HTTPException, status

from shareit.core.dependencies import CurrentUserId
from shareit.core.security import create_access_token, hash_password, verify_password
from shareit.db.models.user import User
from shareit.db.repositories.booking_repository import BookingRepository
from shareit.db.repositories.user_repository import UserRepository
from shareit.db.session import DbSession
from shareit.schemas.user import LoginRequest, TokenResponse, UserCreate, UserResponse, UserUpdate
from shareit.services.user_service import UserService

router = APIRouter()


def _get_user_service(session: DbSession) -> UserService:
    return UserService(UserRepository(session), BookingRepository(session))


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(session: DbSession, data: UserCreate):
    """Create new user. Returns user without password."""
    repo = UserRepository(session)
    if await repo.get_by_email(data.email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )
    user = await repo.add(
        User(
            email=data.email,
            hashed_password=hash_password(data.password),
            name=data.name,
        )
    )
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(session: DbSession, data: LoginRequest):
    """Authenticate and return JWT."""
    user = await UserRepository(session).get_by_email(data.email)
    if not user or not verify_password(data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return TokenResponse(access_token=create_access_token(user.id), user_id=user.id)


@router.get("/me", response_model=UserResponse)
async def me(session: DbSession, user_id: CurrentUserId):
    user = await UserRepository(session).get_by_id(user_id)
    return UserResponse.model_validate(user)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(session: DbSession, user_id: int, _: CurrentUserId):
    user = await UserRepository(session).get_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.model_validate(user)


@router.get("", response_model=list[UserResponse])
async def list_users(session: DbSession, _: CurrentUserId):
    return await _get_user_service(session).list_all()


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(session: DbSession, user_id: int, data: UserUpdate, requester_id: CurrentUserId):
    """Own account only. Email must stay unique."""
    return await _get_user_service(session).update(user_id, requester_id, data)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(session: DbSession, user_id: int, requester_id: CurrentUserId):
    """Own account only; removes the user's items, bookings, comments and requests."""
    await _get_user_service(session).delete(user_id, requester_id)
