"""
Shared enums and constants.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

ACCOUNT_TYPE_FILMMAKER = "filmmaker"

USER_ID_HEADER = "X-User-Id"

LMU_EMAIL_SUFFIXES = ("@lmu.edu", "@lion.lmu.edu")

ACCEPTED_VIDEO_HOSTS = ("youtube.com", "youtu.be", "vimeo.com")

GENRE_SUGGESTIONS = (
    "Drama",
    "Comedy",
    "Action",
    "Horror",
    "Documentary",
    "Animation",
    "Thriller",
    "Romance",
    "Sci-Fi",
    "Fantasy",
)


class SubmissionStatus(str, Enum):
    """Review status of a film submission."""

    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    FEATURED = "featured"


class AffiliationStatus(Enum):
    """
    Tri-state view of a user's LMU flag.

    Legacy user rows may have no flag at all; UNKNOWN keeps those rows out
    of both the LMU and non-LMU listings.
    """

    LMU = "lmu"
    NON_LMU = "non_lmu"
    UNKNOWN = "unknown"

    @classmethod
    def from_flag(cls, is_lmu: Optional[bool]) -> "AffiliationStatus":
        if is_lmu is None:
            return cls.UNKNOWN
        return cls.LMU if is_lmu else cls.NON_LMU


def is_lmu_email(email: str) -> bool:
    # Exact, case-sensitive suffix match.
    return email.endswith(LMU_EMAIL_SUFFIXES)


def is_accepted_video_url(video_url: str) -> bool:
    # Substring containment, not host parsing.
    return any(host in video_url for host in ACCEPTED_VIDEO_HOSTS)
