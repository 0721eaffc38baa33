from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: str = ""
    email: str


class LoginRequest(BaseModel):
    username: str
    password: str


class UserResponse(BaseModel):
    id: int
    username: str
    name: str
    email: str
    is_admin: bool
    created_at: datetime


class LoginResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    user: UserResponse
