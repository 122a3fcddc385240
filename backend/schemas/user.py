from datetime import datetime
from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional, List, Literal


class ORMBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

# Schema for registration requests; presence is checked by the route
class UserCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None

# Schema for user authentication credentials
class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None

# Schema for profile updates (name and email only)
class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None

# Public part of an account, never includes the password hash
class UserPublic(ORMBase):
    id: int
    name: str
    email: str
    role: str

class UserResponse(UserPublic):
    created_at: Optional[datetime] = None

class UserEnvelope(BaseModel):
    user: UserResponse

class UserList(BaseModel):
    users: List[UserResponse]

# Returned by /register and /login
class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserPublic

# Claims carried inside a signed token
class TokenData(BaseModel):
    id: int
    email: str
    name: str
    role: str

# Schema for administrative role updates
class RoleUpdate(BaseModel):
    role: Literal["user", "admin"]
