"""
HTTP client for the film community API.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from filmhub.config import get_settings
from filmhub.types import USER_ID_HEADER

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed API call. ``message`` is safe to show to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: requests.Response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    if isinstance(detail, str) and detail:
        return detail
    # FastAPI request validation errors come back as a list.
    if isinstance(detail, list) and detail:
        return str(detail[0].get("msg", "Invalid request"))
    return f"Request failed with status {response.status_code}"


class FilmHubClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        user_id: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        settings = get_settings()
        base = (base_url or settings.api_base_url).rstrip("/")
        self.base_url = f"{base}{settings.api_prefix}"
        self.user_id = user_id
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.user_id:
            headers[USER_ID_HEADER] = self.user_id
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError("Unable to reach the server") from exc
        if response.status_code >= 400:
            raise ApiError(_error_message(response), response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("%s %s returned a non-JSON body", method, url)
            raise ApiError(
                "Unexpected response from server", response.status_code
            ) from exc

    def create_user(
        self,
        *,
        email: str,
        first_name: str,
        last_name: str,
        username: str,
        is_lmu: bool,
        affiliation: Optional[str] = None,
        social_links: Optional[list[str]] = None,
        bio: Optional[str] = None,
    ) -> dict:
        return self._request(
            "POST",
            "/users",
            json={
                "email": email,
                "first_name": first_name,
                "last_name": last_name,
                "username": username,
                "affiliation": affiliation,
                "social_links": social_links or [],
                "account_type": "filmmaker",
                "bio": bio,
                "is_lmu": is_lmu,
            },
        )

    def get_user_by_email(self, email: str) -> Optional[dict]:
        try:
            return self._request("GET", "/users/by-email", params={"email": email})
        except ApiError as exc:
            if exc.status_code == 404:
                return None
            raise

    def get_all_users(self) -> list[dict]:
        return self._request("GET", "/users")

    def get_waitlist(self) -> list[dict]:
        return self._request("GET", "/waitlist")

    def get_lmu_users(self) -> list[dict]:
        return self._request("GET", "/users/lmu")

    def get_non_lmu_users(self) -> list[dict]:
        return self._request("GET", "/users/non-lmu")

    def create_submission(
        self,
        *,
        title: str,
        description: str,
        video_url: str,
        genre: str,
        budget: Optional[str] = None,
        funding_goal: Optional[str] = None,
    ) -> dict:
        return self._request(
            "POST",
            "/submissions",
            json={
                "title": title,
                "description": description,
                "video_url": video_url,
                "genre": genre,
                "budget": budget,
                "funding_goal": funding_goal,
            },
        )

    def get_user_submissions(self, user_id: str) -> list[dict]:
        return self._request("GET", f"/users/{user_id}/submissions")

    def get_all_submissions(self) -> list[dict]:
        return self._request("GET", "/submissions")

    def get_submissions_by_status(self, status: str) -> list[dict]:
        return self._request("GET", "/submissions", params={"status": status})

    def update_submission_status(self, submission_id: str, status: str) -> dict:
        return self._request(
            "PATCH",
            f"/submissions/{submission_id}/status",
            json={"status": status},
        )
