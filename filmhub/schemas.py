"""
Pydantic schemas for the FastAPI backend.
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field

from filmhub.types import SubmissionStatus


class CreateUserRequest(BaseModel):
    email: str = Field(..., max_length=254)
    first_name: str = Field(..., max_length=128)
    last_name: str = Field(..., max_length=128)
    username: str = Field(..., max_length=64)
    affiliation: Optional[str] = None
    social_links: list[str] = Field(default_factory=list)
    account_type: Literal["filmmaker"] = "filmmaker"
    bio: Optional[str] = None
    is_lmu: bool


class CreateUserResponse(BaseModel):
    success: bool
    user_id: Optional[str] = None
    message: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    username: str
    affiliation: Optional[str] = None
    social_links: list[str]
    account_type: str
    bio: Optional[str] = None
    profile_photo_url: Optional[str] = None
    is_approved: bool
    is_lmu: Optional[bool] = None
    created_at: float


class WaitlistEntryResponse(BaseModel):
    id: str
    email: str
    first_name: str
    last_name: str
    affiliation: Optional[str] = None
    account_type: str
    is_lmu: bool
    created_at: float


class CreateSubmissionRequest(BaseModel):
    title: str
    description: str
    video_url: str
    genre: str
    budget: Optional[str] = None
    funding_goal: Optional[str] = None
    # Accepted for compatibility with older clients; never stored.
    status: Optional[SubmissionStatus] = None


class CreateSubmissionResponse(BaseModel):
    success: bool
    submission_id: str


class SubmissionResponse(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    video_url: str
    genre: str
    budget: Optional[str] = None
    funding_goal: Optional[str] = None
    status: SubmissionStatus
    created_at: float


class UpdateStatusRequest(BaseModel):
    status: SubmissionStatus


class SuccessResponse(BaseModel):
    success: bool


class GenresResponse(BaseModel):
    genres: list[str]
