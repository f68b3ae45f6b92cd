from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from pulsa.models.enums import UserRole

class UserBase(BaseModel):
    email: EmailStr
    name: Optional[str] = Field(None, max_length=255)
    role: UserRole = UserRole.LEARNER

# Schema for creating a user in our database AFTER Firebase authentication
class UserCreateInternal(UserBase):
    firebase_uid: str

# Schema for displaying user information (sending data back to client)
class UserDisplay(UserBase):
    id: int
    firebase_uid: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

# Data decoded from a Firebase ID token
class TokenData(BaseModel):
    firebase_uid: str
    email: EmailStr
    name: Optional[str] = None
    # Role is managed by our DB, not read from token claims.

# Request body for /register: the client's Firebase ID token
class UserRegisterRequest(BaseModel):
    firebase_id_token: str
    name: Optional[str] = Field(None, max_length=255, description="Display name, overrides the token's name claim")

class UserLoginRequest(BaseModel):
    firebase_id_token: str

class AuthResponse(BaseModel):
    message: str
    user: Optional[UserDisplay] = None
