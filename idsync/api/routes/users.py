"""
User endpoints.

Creates the profile row for a freshly verified sign-up and answers
one-shot username availability queries.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, EmailStr

from idsync.modules.profiles.exceptions import ProfileAlreadyExistsError
from idsync.modules.profiles.models import ProfileCreate, ProfileRecord
from idsync.modules.profiles.repository import ProfileRepository
from idsync.modules.store.exceptions import StoreError
from idsync.modules.validation.rules import (
    UsernameRules,
    check_username_format,
    normalize_username,
)
from idsync.modules.validation.service import MSG_AVAILABLE, MSG_LOOKUP_FAILED, MSG_TAKEN

from ..dependencies import get_profile_repository, get_username_rules

router = APIRouter()


class CreateUserRequest(BaseModel):
    """Profile fields posted by the sign-up screen after verification."""

    clerk_id: str
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None


class AvailabilityResponse(BaseModel):
    """Username availability answer."""

    username: str
    available: bool
    message: str


@router.post("", response_model=ProfileRecord, status_code=201)
async def create_user(
    request: CreateUserRequest,
    profiles: ProfileRepository = Depends(get_profile_repository),
    rules: UsernameRules = Depends(get_username_rules),
) -> ProfileRecord:
    """Create the profile row for a new user."""
    username = normalize_username(request.username)
    reason = check_username_format(username, rules) if username else "Username is required"
    if reason is not None:
        raise HTTPException(status_code=422, detail=reason)

    try:
        return await profiles.create(
            ProfileCreate(
                clerk_id=request.clerk_id,
                username=username,
                first_name=request.first_name,
                last_name=request.last_name,
                email=request.email,
            )
        )
    except ProfileAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=e.message)
    except StoreError:
        raise HTTPException(status_code=502, detail="Could not create user")


@router.get("/availability", response_model=AvailabilityResponse)
async def check_availability(
    username: str = Query(..., description="Candidate username"),
    profiles: ProfileRepository = Depends(get_profile_repository),
    rules: UsernameRules = Depends(get_username_rules),
) -> AvailabilityResponse:
    """Check a username against the format rules and the users table."""
    candidate = normalize_username(username)
    reason = check_username_format(candidate, rules) if candidate else "Username is required"
    if reason is not None:
        return AvailabilityResponse(username=candidate, available=False, message=reason)

    try:
        existing = await profiles.get_by_username(candidate)
    except StoreError:
        raise HTTPException(status_code=502, detail=MSG_LOOKUP_FAILED)

    if existing is not None:
        return AvailabilityResponse(
            username=candidate, available=False, message=MSG_TAKEN
        )
    return AvailabilityResponse(
        username=candidate, available=True, message=MSG_AVAILABLE
    )
