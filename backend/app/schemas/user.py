"""Pydantic schemas for user profiles."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from app.models.user import UserRole


class UserCreate(BaseModel):
    name: str
    email: str
    phone_number: Optional[str] = None
    role: UserRole = UserRole.member


class PhoneNumberUpdate(BaseModel):
    phone_number: Optional[str] = None


class UserOut(BaseModel):
    user_id: str
    name: str
    email: str
    phone_number: Optional[str] = None
    role: str
    created_at: datetime

    model_config = {"from_attributes": True}
