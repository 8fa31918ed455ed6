"""
User registration and waitlist management.

LMU registrants with a verified email suffix get an approved account right
away. Everyone else lands on the waitlist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from filmhub.db import DbClient, UserRecord, WaitlistRecord
from filmhub.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    InvalidDomainError,
    MissingFieldError,
    MultipleResultsError,
)
from filmhub.types import ACCOUNT_TYPE_FILMMAKER, AffiliationStatus, is_lmu_email

logger = logging.getLogger(__name__)

REGISTERED_MESSAGE = "Account created successfully"
WAITLISTED_MESSAGE = "Added to waitlist"


@dataclass
class RegistrationRequest:
    email: str
    first_name: str
    last_name: str
    username: str
    is_lmu: bool
    affiliation: Optional[str] = None
    social_links: List[str] = field(default_factory=list)
    account_type: str = ACCOUNT_TYPE_FILMMAKER
    bio: Optional[str] = None


@dataclass
class Registered:
    user: UserRecord
    success = True
    message = REGISTERED_MESSAGE


@dataclass
class Waitlisted:
    entry: WaitlistRecord
    success = False
    message = WAITLISTED_MESSAGE


RegistrationOutcome = Union[Registered, Waitlisted]


def missing_registration_fields(
    email: str, first_name: str, last_name: str, username: str
) -> list[str]:
    values = {
        "email": email,
        "first_name": first_name,
        "last_name": last_name,
        "username": username,
    }
    return [name for name, value in values.items() if not value]


def create_user(db: DbClient, request: RegistrationRequest) -> RegistrationOutcome:
    """
    Register a filmmaker.

    Duplicate email/username checks run against the users table for every
    request, before the LMU branch. The waitlist itself is not deduplicated.

    Raises:
        MissingFieldError: a required field is empty.
        DuplicateEmailError: a user with the same email exists.
        DuplicateUsernameError: the username is taken.
        InvalidDomainError: ``is_lmu`` is set but the email is not an LMU address.
    """
    missing = missing_registration_fields(
        request.email, request.first_name, request.last_name, request.username
    )
    if missing:
        logger.warning("Registration rejected, missing fields: %s", missing)
        raise MissingFieldError(missing)

    if get_user_by_email(db, request.email):
        logger.warning("Registration rejected, duplicate email %s", request.email)
        raise DuplicateEmailError()
    if db.find_users_by_username(request.username):
        logger.warning(
            "Registration rejected, duplicate username %s", request.username
        )
        raise DuplicateUsernameError()

    if request.is_lmu:
        if not is_lmu_email(request.email):
            logger.warning("Registration rejected, non-LMU email %s", request.email)
            raise InvalidDomainError()

        user = UserRecord(
            email=request.email,
            first_name=request.first_name,
            last_name=request.last_name,
            username=request.username,
            affiliation=request.affiliation,
            social_links=list(request.social_links),
            account_type=request.account_type,
            bio=request.bio,
            is_approved=True,
            is_lmu=True,
        )
        db.insert_user(user)
        logger.info("Registered user %s (%s)", user.id, user.username)
        return Registered(user=user)

    entry = WaitlistRecord(
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
        affiliation=request.affiliation,
        account_type=request.account_type,
        is_lmu=request.is_lmu,
    )
    db.insert_waitlist_entry(entry)
    logger.info("Added %s to waitlist", entry.email)
    return Waitlisted(entry=entry)


def get_user_by_email(db: DbClient, email: str) -> Optional[UserRecord]:
    users = db.find_users_by_email(email)
    if len(users) > 1:
        raise MultipleResultsError(f"Multiple users found for email {email}")
    return users[0] if users else None


def get_all_users(db: DbClient) -> list[UserRecord]:
    return db.list_users()


def get_waitlist(db: DbClient) -> list[WaitlistRecord]:
    return db.list_waitlist()


def get_lmu_users(db: DbClient) -> list[UserRecord]:
    return db.list_users(AffiliationStatus.LMU)


def get_non_lmu_users(db: DbClient) -> list[UserRecord]:
    return db.list_users(AffiliationStatus.NON_LMU)


def backfill_affiliation_flag(db: DbClient) -> int:
    """
    Derive ``is_lmu`` from the email suffix for users created before the
    flag existed.

    Returns the number of users scanned, which includes users that already
    had the flag and were left untouched.
    """
    users = db.list_users()
    patched = 0
    for user in users:
        if user.is_lmu is not None:
            continue
        db.set_user_affiliation(user.id, is_lmu_email(user.email))
        patched += 1
    logger.info("Scanned %d users, patched %d", len(users), patched)
    return len(users)
