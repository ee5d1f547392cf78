from pydantic import BaseModel, EmailStr, Field, ConfigDict
from typing import Optional
from datetime import datetime


class UserBase(BaseModel):
    """Base schema for User with common fields"""
    username: str = Field(..., min_length=3, max_length=50, description="Unique username for the operator")
    email: Optional[EmailStr] = Field(None, description="Email address of the operator")
    name: str = Field(..., min_length=1, max_length=255, description="Display name of the operator")


class UserCreate(UserBase):
    """Schema for creating a new operator"""
    password: str = Field(..., min_length=8, description="Password for the operator (plain text, will be hashed)")
    superuser: bool = Field(default=False, description="Whether the operator can manage other operators")


class UserUpdate(BaseModel):
    """Schema for updating an existing operator"""
    email: Optional[EmailStr] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    password: Optional[str] = Field(None, min_length=8, description="New password (plain text, will be hashed)")
    superuser: Optional[bool] = None
    is_active: Optional[bool] = None


class UserResponse(UserBase):
    """Schema for operator response"""
    id: int
    superuser: bool
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserLogin(BaseModel):
    """Schema for login request"""
    username: str = Field(..., description="Username or email address")
    password: str = Field(..., description="Password for authentication (plain text)")


class UserLoginResponse(BaseModel):
    """Schema for login response with token and user info"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class TokenData(BaseModel):
    """Schema for token payload data"""
    username: Optional[str] = None
    user_id: Optional[int] = None
