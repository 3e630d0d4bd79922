"""
Pydantic schemas for the DevConnector API.

Request and response bodies use camelCase keys on the wire.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from devconnector.db import (
    Comment,
    EducationEntry,
    ExperienceEntry,
    Like,
    PostRecord,
    ProfileRecord,
    UserRecord,
)


def _require(value, message: str):
    if value is None or (isinstance(value, (str, list)) and not value):
        raise ValueError(message)
    return value


def _blank_to_none(value):
    # Browser forms send "" for untouched date inputs.
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# Requests


class RegisterRequest(ApiModel):
    name: Optional[str] = Field(default=None, validate_default=True)
    email: Optional[str] = Field(default=None, validate_default=True)
    password: Optional[str] = Field(default=None, validate_default=True)
    password_confirm: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_required(cls, value):
        return _require(value, "Name is required")

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value):
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def _password_length(cls, value):
        if not value or len(value) < 6:
            raise ValueError("Please enter a password with 6 or more characters")
        return value

    @field_validator("password_confirm")
    @classmethod
    def _passwords_match(cls, value, info: ValidationInfo):
        password = info.data.get("password")
        if value is not None and password is not None and value != password:
            raise ValueError("Passwords do not match")
        return value


class LoginRequest(ApiModel):
    email: Optional[str] = Field(default=None, validate_default=True)
    password: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("email")
    @classmethod
    def _valid_email(cls, value):
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def _password_required(cls, value):
        return _require(value, "Password is required")


def _normalize_email(value: Optional[str]) -> str:
    try:
        validate_email(value or "", check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("Please include a valid email")
    return value.strip().lower()


class ProfileRequest(ApiModel):
    status: Optional[str] = Field(default=None, validate_default=True)
    skills: Optional[Union[str, list[str]]] = Field(
        default=None, validate_default=True
    )
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    github_username: Optional[str] = None
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None

    @field_validator("status")
    @classmethod
    def _status_required(cls, value):
        return _require(value, "Status is required")

    @field_validator("skills")
    @classmethod
    def _skills_required(cls, value):
        return _require(value, "Skills is required")

    def skill_list(self) -> list[str]:
        raw = self.skills.split(",") if isinstance(self.skills, str) else self.skills
        return [skill.strip() for skill in raw if skill and skill.strip()]


class ExperienceRequest(ApiModel):
    title: Optional[str] = Field(default=None, validate_default=True)
    company: Optional[str] = Field(default=None, validate_default=True)
    from_date: Optional[date] = Field(
        default=None, alias="from", validate_default=True
    )
    to_date: Optional[date] = Field(default=None, alias="to")
    location: Optional[str] = None
    current: bool = False
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _title_required(cls, value):
        return _require(value, "Title is required")

    @field_validator("company")
    @classmethod
    def _company_required(cls, value):
        return _require(value, "Company is required")

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def _blank_dates(cls, value):
        return _blank_to_none(value)

    @field_validator("from_date")
    @classmethod
    def _from_required(cls, value):
        return _require(value, "From date is required")


class EducationRequest(ApiModel):
    school: Optional[str] = Field(default=None, validate_default=True)
    degree: Optional[str] = Field(default=None, validate_default=True)
    field_of_study: Optional[str] = Field(default=None, validate_default=True)
    from_date: Optional[date] = Field(
        default=None, alias="from", validate_default=True
    )
    to_date: Optional[date] = Field(default=None, alias="to")
    current: bool = False
    description: Optional[str] = None

    @field_validator("school")
    @classmethod
    def _school_required(cls, value):
        return _require(value, "School is required")

    @field_validator("degree")
    @classmethod
    def _degree_required(cls, value):
        return _require(value, "Degree is required")

    @field_validator("field_of_study")
    @classmethod
    def _field_required(cls, value):
        return _require(value, "The field of study is required")

    @field_validator("from_date", "to_date", mode="before")
    @classmethod
    def _blank_dates(cls, value):
        return _blank_to_none(value)

    @field_validator("from_date")
    @classmethod
    def _from_required(cls, value):
        return _require(value, "The 'From' date of study is required")


class TextRequest(ApiModel):
    """Body for new posts and comments."""

    text: Optional[str] = Field(default=None, validate_default=True)
    name: Optional[str] = None

    @field_validator("text")
    @classmethod
    def _text_required(cls, value):
        return _require(value, "Text is required")


# Responses


class TokenResponse(ApiModel):
    token: str


class MessageResponse(ApiModel):
    msg: str


class UserResponse(ApiModel):
    id: str
    name: str
    email: str
    avatar: str
    date: datetime

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            avatar=user.avatar,
            date=user.date,
        )


class UserSummary(ApiModel):
    id: str
    name: str
    avatar: str


class ExperienceResponse(ApiModel):
    id: str
    title: str
    company: str
    location: Optional[str] = None
    from_date: date = Field(alias="from")
    to_date: Optional[date] = Field(default=None, alias="to")
    current: bool = False
    description: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: ExperienceEntry) -> "ExperienceResponse":
        return cls(
            id=entry.id,
            title=entry.title,
            company=entry.company,
            location=entry.location,
            from_date=entry.from_date,
            to_date=entry.to_date,
            current=entry.current,
            description=entry.description,
        )


class EducationResponse(ApiModel):
    id: str
    school: str
    degree: str
    field_of_study: str
    from_date: date = Field(alias="from")
    to_date: Optional[date] = Field(default=None, alias="to")
    current: bool = False
    description: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: EducationEntry) -> "EducationResponse":
        return cls(
            id=entry.id,
            school=entry.school,
            degree=entry.degree,
            field_of_study=entry.field_of_study,
            from_date=entry.from_date,
            to_date=entry.to_date,
            current=entry.current,
            description=entry.description,
        )


class SocialResponse(ApiModel):
    youtube: Optional[str] = None
    twitter: Optional[str] = None
    facebook: Optional[str] = None
    linkedin: Optional[str] = None
    instagram: Optional[str] = None


class ProfileResponse(ApiModel):
    id: str
    user: Optional[UserSummary] = None
    status: str
    skills: list[str]
    company: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    github_username: Optional[str] = None
    social: SocialResponse
    experience: list[ExperienceResponse]
    education: list[EducationResponse]
    date: datetime

    @classmethod
    def from_record(
        cls, profile: ProfileRecord, owner: Optional[UserRecord]
    ) -> "ProfileResponse":
        user = None
        if owner is not None:
            user = UserSummary(id=owner.id, name=owner.name, avatar=owner.avatar)
        return cls(
            id=profile.id,
            user=user,
            status=profile.status,
            skills=profile.skills,
            company=profile.company,
            website=profile.website,
            location=profile.location,
            bio=profile.bio,
            github_username=profile.github_username,
            social=SocialResponse(**vars(profile.social)),
            experience=[ExperienceResponse.from_entry(e) for e in profile.experience],
            education=[EducationResponse.from_entry(e) for e in profile.education],
            date=profile.date,
        )


class LikeResponse(ApiModel):
    user: str

    @classmethod
    def from_like(cls, like: Like) -> "LikeResponse":
        return cls(user=like.user_id)


class CommentResponse(ApiModel):
    id: str
    user: str
    text: str
    name: str
    avatar: Optional[str] = None
    date: datetime

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            user=comment.user_id,
            text=comment.text,
            name=comment.name,
            avatar=comment.avatar,
            date=comment.date,
        )


class PostResponse(ApiModel):
    id: str
    user: str
    text: str
    name: str
    avatar: Optional[str] = None
    likes: list[LikeResponse]
    comments: list[CommentResponse]
    date: datetime

    @classmethod
    def from_record(cls, post: PostRecord) -> "PostResponse":
        return cls(
            id=post.id,
            user=post.user_id,
            text=post.text,
            name=post.name,
            avatar=post.avatar,
            likes=[LikeResponse.from_like(like) for like in post.likes],
            comments=[CommentResponse.from_comment(c) for c in post.comments],
            date=post.date,
        )
