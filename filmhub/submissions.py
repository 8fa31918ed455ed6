"""
Film submission management.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from filmhub.db import DbClient, SubmissionRecord
from filmhub.errors import InvalidVideoHostError, MissingFieldError, NotFoundError
from filmhub.types import SubmissionStatus, is_accepted_video_url

logger = logging.getLogger(__name__)


@dataclass
class SubmissionRequest:
    title: str
    description: str
    video_url: str
    genre: str
    budget: Optional[str] = None
    funding_goal: Optional[str] = None


def missing_submission_fields(
    title: str, description: str, video_url: str, genre: str
) -> list[str]:
    values = {
        "title": title,
        "description": description,
        "video_url": video_url,
        "genre": genre,
    }
    return [name for name, value in values.items() if not value]


def create_submission(
    db: DbClient, user_id: str, request: SubmissionRequest
) -> SubmissionRecord:
    """
    Store a new film submission for ``user_id``.

    The status always starts at SUBMITTED. ``user_id`` is not checked
    against the users table, and identical submissions are accepted.
    """
    missing = missing_submission_fields(
        request.title, request.description, request.video_url, request.genre
    )
    if missing:
        logger.warning("Submission rejected, missing fields: %s", missing)
        raise MissingFieldError(missing)
    if not is_accepted_video_url(request.video_url):
        logger.warning("Submission rejected, video url %s", request.video_url)
        raise InvalidVideoHostError()

    submission = SubmissionRecord(
        user_id=user_id,
        title=request.title,
        description=request.description,
        video_url=request.video_url,
        genre=request.genre,
        budget=request.budget,
        funding_goal=request.funding_goal,
        status=SubmissionStatus.SUBMITTED,
    )
    db.insert_submission(submission)
    logger.info("User %s submitted film %s", user_id, submission.id)
    return submission


def get_user_submissions(db: DbClient, user_id: str) -> list[SubmissionRecord]:
    return db.list_submissions(user_id=user_id)


def get_all_submissions(db: DbClient) -> list[SubmissionRecord]:
    return db.list_submissions()


def get_submissions_by_status(
    db: DbClient, status: SubmissionStatus
) -> list[SubmissionRecord]:
    return db.list_submissions(status=status)


def update_submission_status(
    db: DbClient, submission_id: str, status: SubmissionStatus
) -> None:
    # Any status may follow any other; the review workflow is not enforced.
    previous = db.get_submission(submission_id)
    if previous is None:
        raise NotFoundError(f"Submission {submission_id} not found")
    previous_status = previous.status
    db.update_submission_status(submission_id, status)
    logger.info(
        "Submission %s status %s -> %s",
        submission_id,
        previous_status.value,
        status.value,
    )
