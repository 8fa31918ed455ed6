"""
HTTP routes for the film community API.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from filmhub import submissions as submission_service
from filmhub import users as user_service
from filmhub.db import DbClient
from filmhub.dependencies import get_db_client
from filmhub.identity import Identity, get_identity
from filmhub.schemas import (
    CreateSubmissionRequest,
    CreateSubmissionResponse,
    CreateUserRequest,
    CreateUserResponse,
    GenresResponse,
    SubmissionResponse,
    SuccessResponse,
    UpdateStatusRequest,
    UserResponse,
    WaitlistEntryResponse,
)
from filmhub.types import GENRE_SUGGESTIONS, SubmissionStatus

router = APIRouter()


@router.get("/health")
def health():
    return {"status": "ok"}


@router.post("/users", response_model=CreateUserResponse, status_code=201)
def create_user(
    payload: CreateUserRequest,
    response: Response,
    db: DbClient = Depends(get_db_client),
):
    """
    Register a filmmaker. LMU registrants get an account (201); everyone
    else is waitlisted (202) and gets no user id back.
    """
    outcome = user_service.create_user(
        db,
        user_service.RegistrationRequest(
            email=payload.email,
            first_name=payload.first_name,
            last_name=payload.last_name,
            username=payload.username,
            is_lmu=payload.is_lmu,
            affiliation=payload.affiliation,
            social_links=payload.social_links,
            account_type=payload.account_type,
            bio=payload.bio,
        ),
    )
    if isinstance(outcome, user_service.Registered):
        return CreateUserResponse(
            success=True, user_id=outcome.user.id, message=outcome.message
        )
    response.status_code = 202
    return CreateUserResponse(success=False, message=outcome.message)


@router.get("/users", response_model=list[UserResponse])
def list_users(db: DbClient = Depends(get_db_client)):
    return [user.as_dict() for user in user_service.get_all_users(db)]


@router.get("/users/by-email", response_model=UserResponse)
def get_user_by_email(
    email: str = Query(..., min_length=1),
    db: DbClient = Depends(get_db_client),
):
    user = user_service.get_user_by_email(db, email)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user.as_dict()


@router.get("/users/lmu", response_model=list[UserResponse])
def list_lmu_users(db: DbClient = Depends(get_db_client)):
    return [user.as_dict() for user in user_service.get_lmu_users(db)]


@router.get("/users/non-lmu", response_model=list[UserResponse])
def list_non_lmu_users(db: DbClient = Depends(get_db_client)):
    return [user.as_dict() for user in user_service.get_non_lmu_users(db)]


@router.get("/waitlist", response_model=list[WaitlistEntryResponse])
def list_waitlist(db: DbClient = Depends(get_db_client)):
    return [entry.as_dict() for entry in user_service.get_waitlist(db)]


@router.post(
    "/submissions", response_model=CreateSubmissionResponse, status_code=201
)
def create_submission(
    payload: CreateSubmissionRequest,
    identity: Identity = Depends(get_identity),
    db: DbClient = Depends(get_db_client),
):
    submission = submission_service.create_submission(
        db,
        identity.user_id,
        submission_service.SubmissionRequest(
            title=payload.title,
            description=payload.description,
            video_url=payload.video_url,
            genre=payload.genre,
            budget=payload.budget,
            funding_goal=payload.funding_goal,
        ),
    )
    return CreateSubmissionResponse(success=True, submission_id=submission.id)


@router.get("/submissions", response_model=list[SubmissionResponse])
def list_submissions(
    status: SubmissionStatus | None = Query(None),
    db: DbClient = Depends(get_db_client),
):
    if status is not None:
        items = submission_service.get_submissions_by_status(db, status)
    else:
        items = submission_service.get_all_submissions(db)
    return [item.as_dict() for item in items]


@router.get(
    "/users/{user_id}/submissions", response_model=list[SubmissionResponse]
)
def list_user_submissions(user_id: str, db: DbClient = Depends(get_db_client)):
    return [
        item.as_dict()
        for item in submission_service.get_user_submissions(db, user_id)
    ]


@router.patch("/submissions/{submission_id}/status", response_model=SuccessResponse)
def update_submission_status(
    submission_id: str,
    payload: UpdateStatusRequest,
    db: DbClient = Depends(get_db_client),
):
    submission_service.update_submission_status(db, submission_id, payload.status)
    return SuccessResponse(success=True)


@router.get("/genres", response_model=GenresResponse)
def list_genres():
    return GenresResponse(genres=list(GENRE_SUGGESTIONS))
