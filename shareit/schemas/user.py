"""User request/response schemas - API contract and validation."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1, max_length=255)


class UserCreate(UserBase):
    # bcrypt accepts max 72 bytes; longer passwords cause 500. Validate here for clear 422.
    password: str = Field(..., min_length=1, max_length=72)


class UserUpdate(BaseModel):
    """Partial profile update. Omitted fields are left unchanged."""

    email: EmailStr | None = None
    name: str | None = Field(None, min_length=1, max_length=255)


class LoginRequest(BaseModel):
    email: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int


class UserShort(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class UserResponse(UserBase):
    id: int
    is_active: bool
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
