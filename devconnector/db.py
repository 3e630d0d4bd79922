"""
Document store for users, profiles and posts.

Two implementations share the ``DocumentStore`` interface: an in-memory
store for development and tests, and a SQLAlchemy-backed store that keeps
each document as a JSON column next to the columns it is looked up by.
"""

from __future__ import annotations

import copy
import re
import time
import uuid
from dataclasses import asdict, dataclass, field
from typing import Dict, Optional, Protocol

from sqlalchemy import JSON, Column, Float, String, create_engine, delete, select
from sqlalchemy.orm import Session, declarative_base, sessionmaker

ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def new_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(value: str) -> bool:
    """Malformed identifiers can never match a document."""
    return bool(value and ID_PATTERN.match(value))


class DocumentStore(Protocol):
    """Interface for document access."""

    def create_user(
        self, name: str, email: str, password: str, avatar: str
    ) -> "UserRecord":
        ...

    def get_user(self, user_id: str) -> Optional["UserRecord"]:
        ...

    def get_user_by_email(self, email: str) -> Optional["UserRecord"]:
        ...

    def delete_user(self, user_id: str) -> bool:
        ...

    def get_profile_by_user(self, user_id: str) -> Optional["ProfileRecord"]:
        ...

    def list_profiles(self) -> list["ProfileRecord"]:
        ...

    def save_profile(self, profile: "ProfileRecord") -> "ProfileRecord":
        ...

    def delete_profile_by_user(self, user_id: str) -> bool:
        ...

    def save_post(self, post: "PostRecord") -> "PostRecord":
        ...

    def get_post(self, post_id: str) -> Optional["PostRecord"]:
        ...

    def list_posts(self) -> list["PostRecord"]:
        ...

    def delete_post(self, post_id: str) -> bool:
        ...

    def delete_posts_by_user(self, user_id: str) -> int:
        ...


@dataclass
class UserRecord:
    id: str
    name: str
    email: str
    password: str
    avatar: str
    date: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "UserRecord":
        return cls(**data)


@dataclass
class ExperienceEntry:
    title: str
    company: str
    from_date: str
    location: Optional[str] = None
    to_date: Optional[str] = None
    current: bool = False
    description: Optional[str] = None
    id: str = field(default_factory=new_id)


@dataclass
class EducationEntry:
    school: str
    degree: str
    field_of_study: str
    from_date: str
    to_date: Optional[str] = None
    current: bool = False
    description: Optional[str] = None
    id: str = field(default_factory=new_id)


@dataclass
class SocialLinks:
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


@dataclass
class ProfileRecord:
    user_id: str
    status: str
    skills: list[str]
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    github_username: Optional[str] = None
    social: SocialLinks = field(default_factory=SocialLinks)
    experience: list[ExperienceEntry] = field(default_factory=list)
    education: list[EducationEntry] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    date: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ProfileRecord":
        data = dict(data)
        data["social"] = SocialLinks(**(data.get("social") or {}))
        data["experience"] = [
            ExperienceEntry(**item) for item in data.get("experience") or []
        ]
        data["education"] = [
            EducationEntry(**item) for item in data.get("education") or []
        ]
        return cls(**data)


@dataclass
class Like:
    user_id: str


@dataclass
class Comment:
    user_id: str
    text: str
    name: str
    avatar: Optional[str] = None
    id: str = field(default_factory=new_id)
    date: float = field(default_factory=lambda: time.time())


@dataclass
class PostRecord:
    user_id: str
    text: str
    name: str
    avatar: Optional[str] = None
    likes: list[Like] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    date: float = field(default_factory=lambda: time.time())

    def as_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "PostRecord":
        data = dict(data)
        data["likes"] = [Like(**item) for item in data.get("likes") or []]
        data["comments"] = [Comment(**item) for item in data.get("comments") or []]
        return cls(**data)

    def find_like(self, user_id: str) -> int:
        for index, like in enumerate(self.likes):
            if like.user_id == user_id:
                return index
        return -1

    def find_comment(self, comment_id: str) -> int:
        for index, comment in enumerate(self.comments):
            if comment.id == comment_id:
                return index
        return -1


class InMemoryDocumentStore:
    """Simple in-memory document store for development and tests.

    Documents are copied on the way in and out so callers mutate their own
    copy until they save it, as they would with a real store.
    """

    def __init__(self):
        self.users: Dict[str, UserRecord] = {}
        self.profiles: Dict[str, ProfileRecord] = {}
        self.posts: Dict[str, PostRecord] = {}

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        self.users.clear()
        self.profiles.clear()
        self.posts.clear()

    def create_user(
        self, name: str, email: str, password: str, avatar: str
    ) -> UserRecord:
        record = UserRecord(
            id=new_id(), name=name, email=email, password=password, avatar=avatar
        )
        self.users[record.id] = record
        return copy.deepcopy(record)

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        return copy.deepcopy(self.users.get(user_id))

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        for user in self.users.values():
            if user.email == email:
                return copy.deepcopy(user)
        return None

    def delete_user(self, user_id: str) -> bool:
        return self.users.pop(user_id, None) is not None

    def get_profile_by_user(self, user_id: str) -> Optional[ProfileRecord]:
        for profile in self.profiles.values():
            if profile.user_id == user_id:
                return copy.deepcopy(profile)
        return None

    def list_profiles(self) -> list[ProfileRecord]:
        return [copy.deepcopy(profile) for profile in self.profiles.values()]

    def save_profile(self, profile: ProfileRecord) -> ProfileRecord:
        self.profiles[profile.id] = copy.deepcopy(profile)
        return profile

    def delete_profile_by_user(self, user_id: str) -> bool:
        for profile_id, profile in list(self.profiles.items()):
            if profile.user_id == user_id:
                del self.profiles[profile_id]
                return True
        return False

    def save_post(self, post: PostRecord) -> PostRecord:
        self.posts[post.id] = copy.deepcopy(post)
        return post

    def get_post(self, post_id: str) -> Optional[PostRecord]:
        return copy.deepcopy(self.posts.get(post_id))

    def list_posts(self) -> list[PostRecord]:
        posts = sorted(self.posts.values(), key=lambda post: post.date, reverse=True)
        return [copy.deepcopy(post) for post in posts]

    def delete_post(self, post_id: str) -> bool:
        return self.posts.pop(post_id, None) is not None

    def delete_posts_by_user(self, user_id: str) -> int:
        doomed = [pid for pid, post in self.posts.items() if post.user_id == user_id]
        for post_id in doomed:
            del self.posts[post_id]
        return len(doomed)


class SqlDocumentStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlDocumentStore")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def create_user(
        self, name: str, email: str, password: str, avatar: str
    ) -> UserRecord:
        record = UserRecord(
            id=new_id(), name=name, email=email, password=password, avatar=avatar
        )
        with self.Session() as session:
            session.add(
                UserRow(
                    id=record.id,
                    email=record.email,
                    created_at=record.date,
                    doc=record.as_dict(),
                )
            )
            session.commit()
        return record

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        with self.Session() as session:
            row = session.get(UserRow, user_id)
            return UserRecord.from_dict(row.doc) if row else None

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self.Session() as session:
            stmt = select(UserRow).where(UserRow.email == email).limit(1)
            row = session.execute(stmt).scalar_one_or_none()
            return UserRecord.from_dict(row.doc) if row else None

    def delete_user(self, user_id: str) -> bool:
        with self.Session() as session:
            result = session.execute(delete(UserRow).where(UserRow.id == user_id))
            session.commit()
            return bool(result.rowcount)

    def get_profile_by_user(self, user_id: str) -> Optional[ProfileRecord]:
        with self.Session() as session:
            stmt = select(ProfileRow).where(ProfileRow.user_id == user_id).limit(1)
            row = session.execute(stmt).scalar_one_or_none()
            return ProfileRecord.from_dict(row.doc) if row else None

    def list_profiles(self) -> list[ProfileRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(ProfileRow).order_by(ProfileRow.created_at.asc())
            ).scalars()
            return [ProfileRecord.from_dict(row.doc) for row in rows]

    def save_profile(self, profile: ProfileRecord) -> ProfileRecord:
        with self.Session() as session:
            row = session.get(ProfileRow, profile.id)
            if row:
                row.doc = profile.as_dict()
            else:
                session.add(
                    ProfileRow(
                        id=profile.id,
                        user_id=profile.user_id,
                        created_at=profile.date,
                        doc=profile.as_dict(),
                    )
                )
            session.commit()
        return profile

    def delete_profile_by_user(self, user_id: str) -> bool:
        with self.Session() as session:
            result = session.execute(
                delete(ProfileRow).where(ProfileRow.user_id == user_id)
            )
            session.commit()
            return bool(result.rowcount)

    def save_post(self, post: PostRecord) -> PostRecord:
        with self.Session() as session:
            row = session.get(PostRow, post.id)
            if row:
                row.doc = post.as_dict()
            else:
                session.add(
                    PostRow(
                        id=post.id,
                        user_id=post.user_id,
                        created_at=post.date,
                        doc=post.as_dict(),
                    )
                )
            session.commit()
        return post

    def get_post(self, post_id: str) -> Optional[PostRecord]:
        with self.Session() as session:
            row = session.get(PostRow, post_id)
            return PostRecord.from_dict(row.doc) if row else None

    def list_posts(self) -> list[PostRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(PostRow).order_by(PostRow.created_at.desc())
            ).scalars()
            return [PostRecord.from_dict(row.doc) for row in rows]

    def delete_post(self, post_id: str) -> bool:
        with self.Session() as session:
            result = session.execute(delete(PostRow).where(PostRow.id == post_id))
            session.commit()
            return bool(result.rowcount)

    def delete_posts_by_user(self, user_id: str) -> int:
        with self.Session() as session:
            result = session.execute(delete(PostRow).where(PostRow.user_id == user_id))
            session.commit()
            return result.rowcount or 0


Base = declarative_base()


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, unique=True, index=True)
    created_at = Column(Float, nullable=False)
    doc = Column(JSON, nullable=False)


class ProfileRow(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, unique=True, index=True)
    created_at = Column(Float, nullable=False)
    doc = Column(JSON, nullable=False)


class PostRow(Base):
    __tablename__ = "posts"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    created_at = Column(Float, nullable=False)
    doc = Column(JSON, nullable=False)
