# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


import logging
from typing import Dict, List, Optional, Set, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from lahap.models.forum import ForumPost, ForumComment, ForumPostLike, ForumPostVote
from lahap.models.user import User
from lahap.utils.auth_utils import RequestContext
from lahap.utils.errors import Forbidden, NotFound, Unauthorized, ValidationFailed
from lahap.utils.time_utils import isoformat_or_none, today_range

logger = logging.getLogger(__name__)

VALID_VOTES = (-1, 0, 1)

# resolve_vote actions
VOTE_NOOP = "noop"
VOTE_INSERT = "insert"
VOTE_UPDATE = "update"
VOTE_DELETE = "delete"


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


def author_brief(user: Optional[User]) -> Optional[dict]:
    if user is None:
        return None
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "profilePicture": user.profile_picture,
    }


# ---------------------- AGGREGATES ----------------------
def post_scores(db: Session, post_ids: List[int]) -> Dict[int, int]:
    if not post_ids:
        return {}
    rows = (
        db.query(ForumPostVote.post_id, func.sum(ForumPostVote.value))
        .filter(ForumPostVote.post_id.in_(post_ids))
        .group_by(ForumPostVote.post_id)
        .all()
    )
    return {post_id: int(total or 0) for post_id, total in rows}


def _count_by_post(db: Session, model, post_ids: List[int]) -> Dict[int, int]:
    if not post_ids:
        return {}
    rows = (
        db.query(model.post_id, func.count(model.id))
        .filter(model.post_id.in_(post_ids))
        .group_by(model.post_id)
        .all()
    )
    return {post_id: count for post_id, count in rows}


def like_counts(db: Session, post_ids: List[int]) -> Dict[int, int]:
    return _count_by_post(db, ForumPostLike, post_ids)


def comment_counts(db: Session, post_ids: List[int]) -> Dict[int, int]:
    return _count_by_post(db, ForumComment, post_ids)


def viewer_state(db: Session, ctx: Optional[RequestContext], post_ids: List[int]) -> Tuple[Set[int], Dict[int, int]]:
    """Posts the viewer liked, and the viewer's vote per post."""
    if ctx is None or not post_ids:
        return set(), {}

    liked = {
        row.post_id
        for row in db.query(ForumPostLike.post_id)
        .filter(ForumPostLike.user_id == ctx.user_id, ForumPostLike.post_id.in_(post_ids))
        .all()
    }
    votes = {
        row.post_id: row.value
        for row in db.query(ForumPostVote.post_id, ForumPostVote.value)
        .filter(ForumPostVote.user_id == ctx.user_id, ForumPostVote.post_id.in_(post_ids))
        .all()
    }
    return liked, votes


def serialize_posts(db: Session, ctx: Optional[RequestContext], posts: List[ForumPost], collapse: bool = False) -> List[dict]:
    post_ids = [p.id for p in posts]
    scores = post_scores(db, post_ids)
    likes = like_counts(db, post_ids)
    comments = comment_counts(db, post_ids)
    liked, votes = viewer_state(db, ctx, post_ids)

    return [
        {
            "id": p.id,
            "content": normalize_whitespace(p.content) if collapse else p.content,
            "author": author_brief(p.author),
            "createdAt": isoformat_or_none(p.created_at),
            "updatedAt": isoformat_or_none(p.updated_at),
            "commentsCount": comments.get(p.id, 0),
            "likesCount": likes.get(p.id, 0),
            "score": scores.get(p.id, 0),
            "isLiked": p.id in liked,
            "userVote": votes.get(p.id, 0),
        }
        for p in posts
    ]


def serialize_comment(comment: ForumComment) -> dict:
    user = comment.user
    return {
        "id": comment.id,
        "postId": comment.post_id,
        "content": comment.content,
        "createdAt": isoformat_or_none(comment.created_at),
        "user": {"id": user.id, "name": user.name, "email": user.email} if user else None,
    }


def _get_post(db: Session, post_id: int) -> ForumPost:
    post = db.query(ForumPost).filter(ForumPost.id == post_id).first()
    if not post:
        raise NotFound("Post not found")
    return post


def _require_content(content: Optional[str]) -> str:
    content = content.strip() if isinstance(content, str) else ""
    if not content:
        raise ValidationFailed("Content is required")
    return content


# ---------------------- POSTS ----------------------
def list_posts(db: Session, ctx: Optional[RequestContext], limit: int, mine: bool = False) -> List[dict]:
    if mine and ctx is None:
        raise Unauthorized("Unauthorized")

    query = db.query(ForumPost)
    if mine:
        query = query.filter(ForumPost.author_id == ctx.user_id)
    posts = query.order_by(ForumPost.created_at.desc(), ForumPost.id.desc()).limit(limit).all()
    return serialize_posts(db, ctx, posts, collapse=True)


def create_post(db: Session, ctx: RequestContext, content: Optional[str]) -> dict:
    post = ForumPost(author_id=ctx.user_id, content=_require_content(content))
    db.add(post)
    db.commit()
    db.refresh(post)
    return serialize_posts(db, ctx, [post])[0]


def get_post(db: Session, ctx: RequestContext, post_id: int) -> dict:
    post = _get_post(db, post_id)
    return serialize_posts(db, ctx, [post])[0]


def _get_editable_post(db: Session, ctx: RequestContext, post_id: int) -> ForumPost:
    post = _get_post(db, post_id)
    if post.author_id != ctx.user_id and not ctx.is_admin:
        raise Forbidden("Forbidden")
    return post


def update_post(db: Session, ctx: RequestContext, post_id: int, content: Optional[str]) -> dict:
    content = _require_content(content)
    post = _get_editable_post(db, ctx, post_id)
    post.content = content
    db.commit()
    db.refresh(post)
    return serialize_posts(db, ctx, [post])[0]


def delete_post(db: Session, ctx: RequestContext, post_id: int) -> None:
    post = _get_editable_post(db, ctx, post_id)
    db.delete(post)
    db.commit()
    logger.info(f"🗑️ Forum post {post_id} deleted by user {ctx.user_id}")


# ---------------------- COMMENTS ----------------------
def list_comments(db: Session, ctx: RequestContext, post_id: int) -> List[dict]:
    post = _get_post(db, post_id)
    comments = (
        db.query(ForumComment)
        .filter(ForumComment.post_id == post.id)
        .order_by(ForumComment.created_at.desc(), ForumComment.id.desc())
        .all()
    )
    return [serialize_comment(c) for c in comments]


def create_comment(db: Session, ctx: RequestContext, post_id: int, content: Optional[str]) -> dict:
    content = _require_content(content)
    post = _get_post(db, post_id)
    comment = ForumComment(post_id=post.id, user_id=ctx.user_id, content=content)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return serialize_comment(comment)


# ---------------------- LIKES ----------------------
def toggle_like(db: Session, ctx: RequestContext, post_id: int) -> dict:
    post = _get_post(db, post_id)

    existing = db.query(ForumPostLike).filter_by(user_id=ctx.user_id, post_id=post.id).first()
    if existing:
        db.delete(existing)
        is_liked = False
    else:
        db.add(ForumPostLike(user_id=ctx.user_id, post_id=post.id))
        is_liked = True
    db.commit()

    likes_count = db.query(ForumPostLike).filter(ForumPostLike.post_id == post.id).count()
    return {"isLiked": is_liked, "likesCount": likes_count}


# ---------------------- VOTES ----------------------
def parse_vote(value) -> int:
    if isinstance(value, bool):
        raise ValidationFailed("Invalid vote value")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValidationFailed("Invalid vote value")
    if not isinstance(value, int) or value not in VALID_VOTES:
        raise ValidationFailed("Invalid vote value")
    return value


def resolve_vote(existing: Optional[int], target: int) -> Tuple[str, int]:
    """
    Decide what to do with a user's vote row.

    Returns (action, resulting vote). Re-sending the current non-zero vote
    clears it, so voting +1 twice leaves the user neutral.
    """
    if existing is None:
        if target == 0:
            return VOTE_NOOP, 0
        return VOTE_INSERT, target
    if target == 0 or existing == target:
        return VOTE_DELETE, 0
    return VOTE_UPDATE, target


def post_score(db: Session, post_id: int) -> int:
    return post_scores(db, [post_id]).get(post_id, 0)


def set_vote(db: Session, ctx: RequestContext, post_id: int, value) -> dict:
    target = parse_vote(value)
    post = _get_post(db, post_id)

    existing = db.query(ForumPostVote).filter_by(user_id=ctx.user_id, post_id=post.id).first()
    action, user_vote = resolve_vote(existing.value if existing else None, target)

    if action == VOTE_INSERT:
        db.add(ForumPostVote(user_id=ctx.user_id, post_id=post.id, value=target))
    elif action == VOTE_DELETE:
        db.delete(existing)
    elif action == VOTE_UPDATE:
        existing.value = target

    if action != VOTE_NOOP:
        db.commit()

    return {"userVote": user_vote, "score": post_score(db, post.id)}


# ---------------------- TRENDING ----------------------
def trending_posts(db: Session, ctx: RequestContext, limit: int) -> List[dict]:
    """Posts with the most comments today, busiest first, ties by post id."""
    start, end = today_range()
    today_count = func.count(ForumComment.id)

    grouped = (
        db.query(ForumComment.post_id, today_count)
        .filter(ForumComment.created_at >= start, ForumComment.created_at < end)
        .group_by(ForumComment.post_id)
        .order_by(today_count.desc(), ForumComment.post_id.asc())
        .limit(limit)
        .all()
    )
    if not grouped:
        return []

    post_ids = [post_id for post_id, _ in grouped]
    posts_by_id = {
        p.id: p for p in db.query(ForumPost).filter(ForumPost.id.in_(post_ids)).all()
    }
    ordered = [posts_by_id[post_id] for post_id in post_ids if post_id in posts_by_id]

    today_counts = dict(grouped)
    results = serialize_posts(db, ctx, ordered)
    for entry in results:
        entry["todayComments"] = today_counts.get(entry["id"], 0)
    return results
