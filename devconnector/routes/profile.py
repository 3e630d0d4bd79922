"""
Profile routes: upsert, lookups, account deletion, experience/education
sub-lists and the GitHub repository listing.

Sub-list edits are read-modify-write on the whole profile document; two
concurrent edits of the same profile can lose one of them.
"""

from __future__ import annotations

import logging

import requests
from fastapi import APIRouter, Depends, HTTPException

from devconnector.auth import get_current_user_id
from devconnector.db import (
    DocumentStore,
    EducationEntry,
    ExperienceEntry,
    ProfileRecord,
    SocialLinks,
    is_valid_id,
)
from devconnector.dependencies import get_document_store, get_github_client
from devconnector.github import GithubClient
from devconnector.schemas import (
    EducationRequest,
    ExperienceRequest,
    MessageResponse,
    ProfileRequest,
    ProfileResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profile", tags=["profile"])

PROFILE_FIELDS = (
    "company",
    "website",
    "location",
    "bio",
    "status",
    "github_username",
)
SOCIAL_FIELDS = ("youtube", "twitter", "facebook", "linkedin", "instagram")


def _to_response(db: DocumentStore, profile: ProfileRecord) -> ProfileResponse:
    return ProfileResponse.from_record(profile, db.get_user(profile.user_id))


def _own_profile(db: DocumentStore, user_id: str) -> ProfileRecord:
    profile = db.get_profile_by_user(user_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return profile


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
):
    profile = db.get_profile_by_user(user_id)
    if not profile:
        raise HTTPException(
            status_code=400, detail="There is no profile for this user"
        )
    return _to_response(db, profile)


@router.post("", response_model=ProfileResponse)
def upsert_profile(
    payload: ProfileRequest,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
):
    """
    Create the caller's profile, or update it in place if one exists.

    Only non-empty fields are written, so omitted fields keep their stored
    values. Social links are replaced by whatever the request carries.
    """
    profile = db.get_profile_by_user(user_id)
    if profile is None:
        profile = ProfileRecord(
            user_id=user_id, status=payload.status, skills=payload.skill_list()
        )
    for name in PROFILE_FIELDS:
        value = getattr(payload, name)
        if value:
            setattr(profile, name, value)
    profile.skills = payload.skill_list()
    profile.social = SocialLinks(
        **{name: getattr(payload, name) or None for name in SOCIAL_FIELDS}
    )
    db.save_profile(profile)
    return _to_response(db, profile)


@router.get("", response_model=list[ProfileResponse])
def list_profiles(db: DocumentStore = Depends(get_document_store)):
    return [_to_response(db, profile) for profile in db.list_profiles()]


@router.get("/user/{user_id}", response_model=ProfileResponse)
def get_profile_by_user(
    user_id: str, db: DocumentStore = Depends(get_document_store)
):
    profile = db.get_profile_by_user(user_id) if is_valid_id(user_id) else None
    if not profile:
        raise HTTPException(status_code=404, detail="Profile not found")
    return _to_response(db, profile)


@router.delete("", response_model=MessageResponse)
def delete_account(
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
):
    removed_posts = db.delete_posts_by_user(user_id)
    db.delete_profile_by_user(user_id)
    db.delete_user(user_id)
    logger.info("Deleted user %s and %d posts", user_id, removed_posts)
    return MessageResponse(msg="User deleted from database")


@router.api_route(
    "/experience", methods=["PATCH", "PUT"], response_model=ProfileResponse
)
def add_experience(
    payload: ExperienceRequest,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
):
    profile = _own_profile(db, user_id)
    profile.experience.insert(
        0,
        ExperienceEntry(
            title=payload.title,
            company=payload.company,
            location=payload.location,
            from_date=payload.from_date.isoformat(),
            to_date=payload.to_date.isoformat() if payload.to_date else None,
            current=payload.current,
            description=payload.description,
        ),
    )
    db.save_profile(profile)
    return _to_response(db, profile)


@router.delete("/experience/{exp_id}", response_model=ProfileResponse)
def delete_experience(
    exp_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
):
    profile = _own_profile(db, user_id)
    ids = [entry.id for entry in profile.experience]
    if exp_id not in ids:
        raise HTTPException(status_code=404, detail="Experience not found")
    profile.experience.pop(ids.index(exp_id))
    db.save_profile(profile)
    return _to_response(db, profile)


@router.api_route(
    "/education", methods=["PATCH", "PUT"], response_model=ProfileResponse
)
def add_education(
    payload: EducationRequest,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
):
    profile = _own_profile(db, user_id)
    profile.education.insert(
        0,
        EducationEntry(
            school=payload.school,
            degree=payload.degree,
            field_of_study=payload.field_of_study,
            from_date=payload.from_date.isoformat(),
            to_date=payload.to_date.isoformat() if payload.to_date else None,
            current=payload.current,
            description=payload.description,
        ),
    )
    db.save_profile(profile)
    return _to_response(db, profile)


@router.delete("/education/{edu_id}", response_model=ProfileResponse)
def delete_education(
    edu_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
):
    profile = _own_profile(db, user_id)
    ids = [entry.id for entry in profile.education]
    if edu_id not in ids:
        raise HTTPException(status_code=404, detail="Education not found")
    profile.education.pop(ids.index(edu_id))
    db.save_profile(profile)
    return _to_response(db, profile)


@router.get("/github/{username}")
def github_repos(
    username: str, github: GithubClient = Depends(get_github_client)
):
    try:
        repos = github.list_repos(username)
    except requests.RequestException:
        logger.exception("GitHub request failed for %s", username)
        raise HTTPException(status_code=500, detail="Server error")
    if repos is None:
        raise HTTPException(status_code=404, detail="Github profile not found")
    return repos
