"""
User registration.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from devconnector.db import DocumentStore
from devconnector.dependencies import get_document_store
from devconnector.schemas import RegisterRequest, TokenResponse
from devconnector.security import create_access_token, gravatar_url, hash_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=TokenResponse)
def register(
    payload: RegisterRequest, db: DocumentStore = Depends(get_document_store)
):
    if db.get_user_by_email(payload.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=[{"msg": "User already exists"}],
        )
    user = db.create_user(
        name=payload.name,
        email=payload.email,
        password=hash_password(payload.password),
        avatar=gravatar_url(payload.email),
    )
    logger.info("Registered user %s", user.id)
    return TokenResponse(token=create_access_token(user.id))
