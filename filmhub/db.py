"""
Database abstraction for Postgres and an in-memory test implementation.
"""

from __future__ import annotations

import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Float,
    Integer,
    String,
    create_engine,
    select,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from filmhub.errors import (
    DuplicateEmailError,
    DuplicateUsernameError,
    NotFoundError,
)
from filmhub.types import (
    ACCOUNT_TYPE_FILMMAKER,
    AffiliationStatus,
    SubmissionStatus,
)


class DbClient(Protocol):
    """Interface for database access."""

    def insert_user(self, user: "UserRecord") -> str:
        ...

    def get_user(self, user_id: str) -> Optional["UserRecord"]:
        ...

    def find_users_by_email(self, email: str) -> list["UserRecord"]:
        ...

    def find_users_by_username(self, username: str) -> list["UserRecord"]:
        ...

    def list_users(
        self, affiliation: Optional[AffiliationStatus] = None
    ) -> list["UserRecord"]:
        ...

    def set_user_affiliation(self, user_id: str, is_lmu: bool) -> None:
        ...

    def insert_waitlist_entry(self, entry: "WaitlistRecord") -> str:
        ...

    def list_waitlist(self) -> list["WaitlistRecord"]:
        ...

    def insert_submission(self, submission: "SubmissionRecord") -> str:
        ...

    def get_submission(self, submission_id: str) -> Optional["SubmissionRecord"]:
        ...

    def list_submissions(
        self,
        *,
        user_id: Optional[str] = None,
        status: Optional[SubmissionStatus] = None,
        descending: bool = True,
    ) -> list["SubmissionRecord"]:
        ...

    def update_submission_status(
        self, submission_id: str, status: SubmissionStatus
    ) -> None:
        ...


def _new_id() -> str:
    return uuid.uuid4().hex


# SQLite reports "users.username", Postgres "users_username_key" and a
# "Key (username)=" detail line. Matching a bare "username" would also hit
# duplicated email values that contain the word.
_USERNAME_VIOLATION_MARKERS = ("users.username", "users_username_key", "(username)=")


def _is_username_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return any(marker in message for marker in _USERNAME_VIOLATION_MARKERS)


@dataclass
class UserRecord:
    email: str
    first_name: str
    last_name: str
    username: str
    affiliation: Optional[str] = None
    social_links: List[str] = field(default_factory=list)
    account_type: str = ACCOUNT_TYPE_FILMMAKER
    bio: Optional[str] = None
    profile_photo_url: Optional[str] = None
    is_approved: bool = False
    is_lmu: Optional[bool] = None
    id: str = field(default_factory=_new_id)
    created_at: float = field(default_factory=lambda: time.time())

    @property
    def affiliation_status(self) -> AffiliationStatus:
        return AffiliationStatus.from_flag(self.is_lmu)

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "username": self.username,
            "affiliation": self.affiliation,
            "social_links": list(self.social_links),
            "account_type": self.account_type,
            "bio": self.bio,
            "profile_photo_url": self.profile_photo_url,
            "is_approved": self.is_approved,
            "is_lmu": self.is_lmu,
            "created_at": self.created_at,
        }


@dataclass
class WaitlistRecord:
    email: str
    first_name: str
    last_name: str
    is_lmu: bool
    affiliation: Optional[str] = None
    account_type: str = ACCOUNT_TYPE_FILMMAKER
    id: str = field(default_factory=_new_id)
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "affiliation": self.affiliation,
            "account_type": self.account_type,
            "is_lmu": self.is_lmu,
            "created_at": self.created_at,
        }


@dataclass
class SubmissionRecord:
    user_id: str
    title: str
    description: str
    video_url: str
    genre: str
    budget: Optional[str] = None
    funding_goal: Optional[str] = None
    status: SubmissionStatus = SubmissionStatus.SUBMITTED
    id: str = field(default_factory=_new_id)
    created_at: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "title": self.title,
            "description": self.description,
            "video_url": self.video_url,
            "genre": self.genre,
            "budget": self.budget,
            "funding_goal": self.funding_goal,
            "status": self.status.value,
            "created_at": self.created_at,
        }


class InMemoryDbClient:
    """Simple in-memory database for development and tests."""

    def __init__(self):
        # Dicts keep insertion order, which doubles as creation order.
        self.users: Dict[str, UserRecord] = {}
        self.waitlist: Dict[str, WaitlistRecord] = {}
        self.submissions: Dict[str, SubmissionRecord] = {}
        self._lock = threading.RLock()

    def insert_user(self, user: UserRecord) -> str:
        with self._lock:
            if self.find_users_by_email(user.email):
                raise DuplicateEmailError()
            if self.find_users_by_username(user.username):
                raise DuplicateUsernameError()
            self.users[user.id] = user
            return user.id

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        return self.users.get(user_id)

    def find_users_by_email(self, email: str) -> list[UserRecord]:
        with self._lock:
            return [u for u in self.users.values() if u.email == email]

    def find_users_by_username(self, username: str) -> list[UserRecord]:
        with self._lock:
            return [u for u in self.users.values() if u.username == username]

    def list_users(
        self, affiliation: Optional[AffiliationStatus] = None
    ) -> list[UserRecord]:
        with self._lock:
            users = list(self.users.values())
        if affiliation is None:
            return users
        return [u for u in users if u.affiliation_status == affiliation]

    def set_user_affiliation(self, user_id: str, is_lmu: bool) -> None:
        with self._lock:
            user = self.users.get(user_id)
            if not user:
                raise NotFoundError(f"User {user_id} not found")
            user.is_lmu = is_lmu

    def insert_waitlist_entry(self, entry: WaitlistRecord) -> str:
        with self._lock:
            self.waitlist[entry.id] = entry
            return entry.id

    def list_waitlist(self) -> list[WaitlistRecord]:
        with self._lock:
            return list(self.waitlist.values())

    def insert_submission(self, submission: SubmissionRecord) -> str:
        with self._lock:
            self.submissions[submission.id] = submission
            return submission.id

    def get_submission(self, submission_id: str) -> Optional[SubmissionRecord]:
        return self.submissions.get(submission_id)

    def list_submissions(
        self,
        *,
        user_id: Optional[str] = None,
        status: Optional[SubmissionStatus] = None,
        descending: bool = True,
    ) -> list[SubmissionRecord]:
        with self._lock:
            items = list(self.submissions.values())
        if user_id is not None:
            items = [s for s in items if s.user_id == user_id]
        if status is not None:
            items = [s for s in items if s.status == status]
        if descending:
            items.reverse()
        return items

    def update_submission_status(
        self, submission_id: str, status: SubmissionStatus
    ) -> None:
        with self._lock:
            submission = self.submissions.get(submission_id)
            if not submission:
                raise NotFoundError(f"Submission {submission_id} not found")
            submission.status = status


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        engine_kwargs = {"future": True, "pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs["pool_recycle"] = 1800
        self.engine = create_engine(database_url, **engine_kwargs)
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _to_user_record(self, row: "UserRow") -> UserRecord:
        return UserRecord(
            id=row.id,
            email=row.email,
            first_name=row.first_name,
            last_name=row.last_name,
            username=row.username,
            affiliation=row.affiliation,
            social_links=list(row.social_links or []),
            account_type=row.account_type,
            bio=row.bio,
            profile_photo_url=row.profile_photo_url,
            is_approved=row.is_approved,
            is_lmu=row.is_lmu,
            created_at=row.created_at,
        )

    def _to_waitlist_record(self, row: "WaitlistRow") -> WaitlistRecord:
        return WaitlistRecord(
            id=row.id,
            email=row.email,
            first_name=row.first_name,
            last_name=row.last_name,
            affiliation=row.affiliation,
            account_type=row.account_type,
            is_lmu=row.is_lmu,
            created_at=row.created_at,
        )

    def _to_submission_record(self, row: "SubmissionRow") -> SubmissionRecord:
        return SubmissionRecord(
            id=row.id,
            user_id=row.user_id,
            title=row.title,
            description=row.description,
            video_url=row.video_url,
            genre=row.genre,
            budget=row.budget,
            funding_goal=row.funding_goal,
            status=SubmissionStatus(row.status),
            created_at=row.created_at,
        )

    def insert_user(self, user: UserRecord) -> str:
        with self.Session() as session:
            # Re-check inside the transaction; the unique constraints catch
            # anything that slips in between.
            if session.execute(
                select(UserRow.seq).where(UserRow.email == user.email)
            ).first():
                raise DuplicateEmailError()
            if session.execute(
                select(UserRow.seq).where(UserRow.username == user.username)
            ).first():
                raise DuplicateUsernameError()
            session.add(
                UserRow(
                    id=user.id,
                    email=user.email,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    username=user.username,
                    affiliation=user.affiliation,
                    social_links=list(user.social_links),
                    account_type=user.account_type,
                    bio=user.bio,
                    profile_photo_url=user.profile_photo_url,
                    is_approved=user.is_approved,
                    is_lmu=user.is_lmu,
                    created_at=user.created_at,
                )
            )
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if _is_username_violation(exc):
                    raise DuplicateUsernameError() from exc
                raise DuplicateEmailError() from exc
            return user.id

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        with self.Session() as session:
            row = session.execute(
                select(UserRow).where(UserRow.id == user_id)
            ).scalar_one_or_none()
            return self._to_user_record(row) if row else None

    def find_users_by_email(self, email: str) -> list[UserRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(UserRow).where(UserRow.email == email).order_by(UserRow.seq)
            ).scalars()
            return [self._to_user_record(row) for row in rows]

    def find_users_by_username(self, username: str) -> list[UserRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(UserRow)
                .where(UserRow.username == username)
                .order_by(UserRow.seq)
            ).scalars()
            return [self._to_user_record(row) for row in rows]

    def list_users(
        self, affiliation: Optional[AffiliationStatus] = None
    ) -> list[UserRecord]:
        stmt = select(UserRow).order_by(UserRow.seq)
        if affiliation == AffiliationStatus.LMU:
            stmt = stmt.where(UserRow.is_lmu.is_(True))
        elif affiliation == AffiliationStatus.NON_LMU:
            stmt = stmt.where(UserRow.is_lmu.is_(False))
        elif affiliation == AffiliationStatus.UNKNOWN:
            stmt = stmt.where(UserRow.is_lmu.is_(None))
        with self.Session() as session:
            rows = session.execute(stmt).scalars()
            return [self._to_user_record(row) for row in rows]

    def set_user_affiliation(self, user_id: str, is_lmu: bool) -> None:
        with self.Session() as session:
            row = session.execute(
                select(UserRow).where(UserRow.id == user_id)
            ).scalar_one_or_none()
            if not row:
                raise NotFoundError(f"User {user_id} not found")
            row.is_lmu = is_lmu
            session.commit()

    def insert_waitlist_entry(self, entry: WaitlistRecord) -> str:
        with self.Session() as session:
            session.add(
                WaitlistRow(
                    id=entry.id,
                    email=entry.email,
                    first_name=entry.first_name,
                    last_name=entry.last_name,
                    affiliation=entry.affiliation,
                    account_type=entry.account_type,
                    is_lmu=entry.is_lmu,
                    created_at=entry.created_at,
                )
            )
            session.commit()
            return entry.id

    def list_waitlist(self) -> list[WaitlistRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(WaitlistRow).order_by(WaitlistRow.seq)
            ).scalars()
            return [self._to_waitlist_record(row) for row in rows]

    def insert_submission(self, submission: SubmissionRecord) -> str:
        with self.Session() as session:
            session.add(
                SubmissionRow(
                    id=submission.id,
                    user_id=submission.user_id,
                    title=submission.title,
                    description=submission.description,
                    video_url=submission.video_url,
                    genre=submission.genre,
                    budget=submission.budget,
                    funding_goal=submission.funding_goal,
                    status=submission.status.value,
                    created_at=submission.created_at,
                )
            )
            session.commit()
            return submission.id

    def get_submission(self, submission_id: str) -> Optional[SubmissionRecord]:
        with self.Session() as session:
            row = session.execute(
                select(SubmissionRow).where(SubmissionRow.id == submission_id)
            ).scalar_one_or_none()
            return self._to_submission_record(row) if row else None

    def list_submissions(
        self,
        *,
        user_id: Optional[str] = None,
        status: Optional[SubmissionStatus] = None,
        descending: bool = True,
    ) -> list[SubmissionRecord]:
        stmt = select(SubmissionRow)
        if user_id is not None:
            stmt = stmt.where(SubmissionRow.user_id == user_id)
        if status is not None:
            stmt = stmt.where(SubmissionRow.status == status.value)
        stmt = stmt.order_by(
            SubmissionRow.seq.desc() if descending else SubmissionRow.seq.asc()
        )
        with self.Session() as session:
            rows = session.execute(stmt).scalars()
            return [self._to_submission_record(row) for row in rows]

    def update_submission_status(
        self, submission_id: str, status: SubmissionStatus
    ) -> None:
        with self.Session() as session:
            row = session.execute(
                select(SubmissionRow).where(SubmissionRow.id == submission_id)
            ).scalar_one_or_none()
            if not row:
                raise NotFoundError(f"Submission {submission_id} not found")
            row.status = status.value
            session.commit()


Base = declarative_base()


class UserRow(Base):
    __tablename__ = "users"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False, unique=True)
    email = Column(String, nullable=False, unique=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    username = Column(String, nullable=False, unique=True)
    affiliation = Column(String, nullable=True)
    social_links = Column(JSON, nullable=False, default=list)
    account_type = Column(String, nullable=False, default=ACCOUNT_TYPE_FILMMAKER)
    bio = Column(String, nullable=True)
    profile_photo_url = Column(String, nullable=True)
    is_approved = Column(Boolean, nullable=False, default=False)
    is_lmu = Column(Boolean, nullable=True)
    created_at = Column(Float, nullable=False)


class WaitlistRow(Base):
    __tablename__ = "waitlist"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False, unique=True)
    email = Column(String, nullable=False, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    affiliation = Column(String, nullable=True)
    account_type = Column(String, nullable=False, default=ACCOUNT_TYPE_FILMMAKER)
    is_lmu = Column(Boolean, nullable=False)
    created_at = Column(Float, nullable=False)


class SubmissionRow(Base):
    __tablename__ = "film_submissions"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, nullable=False, unique=True)
    user_id = Column(String, nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False)
    video_url = Column(String, nullable=False)
    genre = Column(String, nullable=False)
    budget = Column(String, nullable=True)
    funding_goal = Column(String, nullable=True)
    status = Column(String, nullable=False, index=True)
    created_at = Column(Float, nullable=False)
