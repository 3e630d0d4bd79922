"""
Login and current-user lookup.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from devconnector.auth import get_current_user_id
from devconnector.db import DocumentStore
from devconnector.dependencies import get_document_store
from devconnector.schemas import LoginRequest, TokenResponse, UserResponse
from devconnector.security import create_access_token, verify_password

router = APIRouter(prefix="/auth", tags=["auth"])

INVALID_CREDENTIALS = [{"msg": "Invalid credentials"}]


@router.get("", response_model=UserResponse)
def load_user(
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
):
    user = db.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return UserResponse.from_record(user)


@router.post("", response_model=TokenResponse)
def login(payload: LoginRequest, db: DocumentStore = Depends(get_document_store)):
    user = db.get_user_by_email(payload.email)
    # Same answer for unknown email and wrong password.
    if not user or not verify_password(payload.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=INVALID_CREDENTIALS
        )
    return TokenResponse(token=create_access_token(user.id))
