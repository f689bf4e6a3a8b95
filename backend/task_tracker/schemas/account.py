# backend/task_tracker/schemas/account.py
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field
from .base import BaseSchema

class AccountCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class Account(BaseSchema):
    id: str
    email: EmailStr
    created_at: datetime

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
