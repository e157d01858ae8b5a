# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lahap.auth import get_db, get_optional_context, get_request_context
from lahap.schemas.forum_schemas import ForumContentRequest, VoteRequest
from lahap.services import forum_service
from lahap.utils.auth_utils import RequestContext
from lahap.utils.errors import InternalError, LahapError
from lahap.utils.validation_utils import parse_limit

router = APIRouter(prefix="/forum", tags=["Forum"])
logger = logging.getLogger(__name__)

POSTS_LIMIT_DEFAULT = 50
POSTS_LIMIT_MAX = 100
TRENDING_LIMIT_DEFAULT = 5
TRENDING_LIMIT_MAX = 50


# ---------------------- 📝 POSTS ----------------------
@router.get("")
def list_posts(
    limit: Optional[str] = None,
    mine: Optional[str] = None,
    db: Session = Depends(get_db),
    ctx: Optional[RequestContext] = Depends(get_optional_context)
):
    posts = forum_service.list_posts(
        db,
        ctx,
        limit=parse_limit(limit, POSTS_LIMIT_DEFAULT, POSTS_LIMIT_MAX),
        mine=(mine or "").lower() == "true",
    )
    return {"posts": posts}


@router.post("", status_code=201)
def create_post(
    payload: ForumContentRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    return {"post": forum_service.create_post(db, ctx, payload.content)}


# Declared before /{post_id} so "trending" is never read as an id
@router.get("/trending")
def trending(
    limit: Optional[str] = None,
    db: Session = Depends(get_db),
    ctx: Optional[RequestContext] = Depends(get_optional_context)
):
    limit = parse_limit(limit, TRENDING_LIMIT_DEFAULT, TRENDING_LIMIT_MAX)
    return {"posts": forum_service.trending_posts(db, ctx, limit)}


@router.get("/{post_id}")
def get_post(post_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    return {"post": forum_service.get_post(db, ctx, post_id)}


@router.put("/{post_id}")
def update_post(
    post_id: int,
    payload: ForumContentRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    return {"post": forum_service.update_post(db, ctx, post_id, payload.content)}


@router.delete("/{post_id}")
def delete_post(post_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    forum_service.delete_post(db, ctx, post_id)
    return {"message": "Post deleted successfully"}


# ---------------------- 💬 COMMENTS ----------------------
@router.get("/{post_id}/comments")
def list_comments(post_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    return {"comments": forum_service.list_comments(db, ctx, post_id)}


@router.post("/{post_id}/comments", status_code=201)
def create_comment(
    post_id: int,
    payload: ForumContentRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    return {"comment": forum_service.create_comment(db, ctx, post_id, payload.content)}


# ---------------------- 👍 LIKES & VOTES ----------------------
@router.post("/{post_id}/like")
def toggle_like(post_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    try:
        return forum_service.toggle_like(db, ctx, post_id)
    except LahapError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"🛑 Error toggling like on post {post_id}: {e}", exc_info=True)
        raise InternalError("Failed to toggle like")


@router.post("/{post_id}/vote")
def vote(
    post_id: int,
    payload: VoteRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    try:
        return forum_service.set_vote(db, ctx, post_id, payload.value)
    except LahapError:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"🛑 Error voting on post {post_id}: {e}", exc_info=True)
        raise InternalError("Failed to vote")
