"""
Form controllers for the registration and film submission screens.

These hold the screen state without any rendering: field values, the
``loading`` flag, and the alert the screen should show after a submit.
Validation mirrors the server so obvious mistakes never leave the device.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from filmhub.client import ApiError, FilmHubClient
from filmhub.submissions import missing_submission_fields
from filmhub.types import (
    GENRE_SUGGESTIONS,
    LMU_EMAIL_SUFFIXES,
    is_accepted_video_url,
    is_lmu_email,
)
from filmhub.users import missing_registration_fields

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"
RECENT_SUBMISSIONS_LIMIT = 3


@dataclass(frozen=True)
class Alert:
    title: str
    message: str


class _FormController:
    """Tracks the single in-flight call a screen may have."""

    def __init__(self, client: FilmHubClient):
        self.client = client
        self.loading = False
        self._in_flight = threading.Lock()

    def _begin(self) -> bool:
        if not self._in_flight.acquire(blocking=False):
            return False
        self.loading = True
        return True

    def _end(self) -> None:
        self.loading = False
        self._in_flight.release()


@dataclass
class RegistrationFields:
    email: str = ""
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    affiliation: str = ""
    bio: str = ""
    is_lmu: bool = True


class RegistrationForm(_FormController):
    def __init__(self, client: FilmHubClient):
        super().__init__(client)
        self.fields = RegistrationFields()

    def validate(self) -> Optional[Alert]:
        f = self.fields
        if missing_registration_fields(f.email, f.first_name, f.last_name, f.username):
            return Alert("Error", REQUIRED_FIELDS_MESSAGE)
        if f.is_lmu and not is_lmu_email(f.email):
            suffixes = " or ".join(LMU_EMAIL_SUFFIXES)
            return Alert("Error", f"Please use your LMU email address ({suffixes})")
        return None

    def submit(self) -> Optional[Alert]:
        """
        Validate and register. Returns the alert to show, or ``None`` when a
        registration is already in flight and this press was ignored.
        """
        invalid = self.validate()
        if invalid:
            return invalid
        if not self._begin():
            return None
        try:
            f = self.fields
            result = self.client.create_user(
                email=f.email,
                first_name=f.first_name,
                last_name=f.last_name,
                username=f.username,
                is_lmu=f.is_lmu,
                affiliation=f.affiliation or None,
                social_links=[],
                bio=f.bio or None,
            )
        except ApiError as exc:
            logger.info("Registration failed: %s", exc.message)
            return Alert("Error", exc.message or "Failed to create account")
        finally:
            self._end()

        if result.get("success"):
            # The next screen submits films as this user.
            self.client.user_id = result.get("user_id")
            return Alert("Success!", "Your account has been created successfully")
        return Alert(
            "Added to Waitlist",
            "You've been added to our waitlist. LMU students get priority access!",
        )


@dataclass
class SubmissionFields:
    title: str = ""
    description: str = ""
    video_url: str = ""
    genre: str = ""
    budget: str = ""
    funding_goal: str = ""


class SubmissionForm(_FormController):
    genres = GENRE_SUGGESTIONS

    def __init__(self, client: FilmHubClient):
        super().__init__(client)
        self.fields = SubmissionFields()

    def validate(self) -> Optional[Alert]:
        f = self.fields
        if missing_submission_fields(f.title, f.description, f.video_url, f.genre):
            return Alert("Error", REQUIRED_FIELDS_MESSAGE)
        if not is_accepted_video_url(f.video_url):
            return Alert("Error", "Please provide a valid YouTube or Vimeo URL")
        return None

    def submit(self) -> Optional[Alert]:
        invalid = self.validate()
        if invalid:
            return invalid
        if not self._begin():
            return None
        try:
            f = self.fields
            self.client.create_submission(
                title=f.title,
                description=f.description,
                video_url=f.video_url,
                genre=f.genre,
                budget=f.budget or None,
                funding_goal=f.funding_goal or None,
            )
        except ApiError as exc:
            logger.info("Submission failed: %s", exc.message)
            return Alert("Error", exc.message or "Failed to submit film")
        finally:
            self._end()

        self.fields = SubmissionFields()
        return Alert("Success!", "Your film has been submitted successfully!")

    def recent_submissions(self) -> list[dict]:
        if self.client.user_id:
            items = self.client.get_user_submissions(self.client.user_id)
        else:
            items = self.client.get_all_submissions()
        return items[:RECENT_SUBMISSIONS_LIMIT]
