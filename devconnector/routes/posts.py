"""
Post routes: create/read/delete, likes and comments.

Every successful mutation is pushed to the broadcast channel. A failed
broadcast is logged and does not affect the response.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder

from devconnector.auth import get_current_user_id
from devconnector.broadcast import Broadcaster
from devconnector.config import get_settings
from devconnector.db import Comment, DocumentStore, Like, PostRecord, is_valid_id
from devconnector.dependencies import get_broadcaster, get_document_store
from devconnector.schemas import (
    CommentResponse,
    LikeResponse,
    MessageResponse,
    PostResponse,
    TextRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


def _notify(broadcaster: Broadcaster, event: str, payload: Any) -> None:
    channel = get_settings().broadcast_channel
    try:
        broadcaster.trigger(channel, event, jsonable_encoder(payload))
    except Exception:
        logger.exception("Broadcast %s on %s failed", event, channel)


def _load_post(db: DocumentStore, post_id: str) -> PostRecord:
    post = db.get_post(post_id) if is_valid_id(post_id) else None
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


def _likes(post: PostRecord) -> list[LikeResponse]:
    return [LikeResponse.from_like(like) for like in post.likes]


def _comments(post: PostRecord) -> list[CommentResponse]:
    return [CommentResponse.from_comment(comment) for comment in post.comments]


@router.post("", response_model=PostResponse)
def create_post(
    payload: TextRequest,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    user = db.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    post = PostRecord(
        user_id=user_id,
        text=payload.text,
        name=payload.name or user.name,
        avatar=user.avatar,
    )
    db.save_post(post)
    response = PostResponse.from_record(post)
    _notify(broadcaster, "new-post", response)
    return response


@router.get("", response_model=list[PostResponse])
def list_posts(
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
):
    return [PostResponse.from_record(post) for post in db.list_posts()]


@router.get("/{post_id}", response_model=PostResponse)
def get_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
):
    return PostResponse.from_record(_load_post(db, post_id))


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    post = _load_post(db, post_id)
    if post.user_id != user_id:
        raise HTTPException(
            status_code=401, detail="You can only delete your own posts"
        )
    db.delete_post(post.id)
    _notify(broadcaster, "delete-post", {"id": post.id})
    return MessageResponse(msg="Post successfully deleted")


@router.put("/like/{post_id}", response_model=list[LikeResponse])
def like_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    post = _load_post(db, post_id)
    if post.find_like(user_id) >= 0:
        raise HTTPException(status_code=400, detail="Posts can be liked only once")
    post.likes.insert(0, Like(user_id=user_id))
    db.save_post(post)
    likes = _likes(post)
    _notify(broadcaster, "update-likes", {"id": post.id, "likes": likes})
    return likes


@router.put("/unlike/{post_id}", response_model=list[LikeResponse])
def unlike_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    post = _load_post(db, post_id)
    index = post.find_like(user_id)
    if index < 0:
        raise HTTPException(status_code=400, detail="Post has not yet been liked")
    post.likes.pop(index)
    db.save_post(post)
    likes = _likes(post)
    _notify(broadcaster, "update-likes", {"id": post.id, "likes": likes})
    return likes


@router.post("/comment/{post_id}", response_model=list[CommentResponse])
def add_comment(
    post_id: str,
    payload: TextRequest,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    post = _load_post(db, post_id)
    user = db.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    post.comments.insert(
        0,
        Comment(
            user_id=user_id,
            text=payload.text,
            name=payload.name or user.name,
            avatar=user.avatar,
        ),
    )
    db.save_post(post)
    comments = _comments(post)
    _notify(broadcaster, "add-comment", {"id": post.id, "comments": comments})
    return comments


@router.delete(
    "/comment/{post_id}/{comment_id}", response_model=list[CommentResponse]
)
def remove_comment(
    post_id: str,
    comment_id: str,
    user_id: str = Depends(get_current_user_id),
    db: DocumentStore = Depends(get_document_store),
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    post = _load_post(db, post_id)
    index = post.find_comment(comment_id)
    if index < 0:
        raise HTTPException(status_code=404, detail="Comment does not exist")
    if post.comments[index].user_id != user_id:
        raise HTTPException(status_code=401, detail="User not authorized")
    post.comments.pop(index)
    db.save_post(post)
    comments = _comments(post)
    _notify(broadcaster, "remove-comment", {"id": post.id, "comments": comments})
    return comments
