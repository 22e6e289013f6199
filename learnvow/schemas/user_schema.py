from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from learnvow.models.enums import UserRole

class UserBase(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=255)
    role: Optional[str] = 'Customer'

# Used to create the local user row AFTER Firebase has authenticated the caller
class UserCreateInternal(UserBase):
    firebase_uid: str

class UserDisplay(UserBase):
    id: int
    firebase_uid: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# Data decoded from a verified Firebase ID token
class TokenData(BaseModel):
    firebase_uid: str
    email: EmailStr
    name: Optional[str] = None


# Body of /auth/register; the client signs up with Firebase first
class UserRegisterRequest(BaseModel):
    firebase_id_token: str
    name: Optional[str] = Field(None, max_length=255, description="Display name; falls back to the token's name claim")


class UserLoginRequest(BaseModel):
    firebase_id_token: str

class AuthResponse(BaseModel):
    message: str
    user: Optional[UserDisplay] = None


# --- Admin Specific Schemas ---
class AdminUserUpdate(BaseModel):
    """Fields an Admin may change on a user."""
    name: Optional[str] = Field(None, max_length=255)
    role: Optional[UserRole] = None
