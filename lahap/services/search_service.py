# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy import or_
from sqlalchemy.orm import Session

from lahap.models.content import Recipe, Article, ContentStatus
from lahap.models.forum import ForumPost
from lahap.utils.auth_utils import RequestContext

MIN_QUERY_LENGTH = 2
SCOPES = ("all", "recipes", "articles", "forum")


def excerpt(text: str, max_len: int) -> str:
    s = " ".join(text.split())
    return f"{s[:max_len]}…" if len(s) > max_len else s


def search_all(db: Session, ctx: RequestContext, q: str, scope: str, limit: int) -> dict:
    """Quick header search across recipes, articles and forum posts."""
    q = (q or "").strip()
    results = {"recipes": [], "articles": [], "forum": []}
    if len(q) < MIN_QUERY_LENGTH:
        return results

    scope = scope if scope in SCOPES else "all"
    pattern = f"%{q}%"

    if scope in ("all", "recipes"):
        query = db.query(Recipe).filter(
            or_(Recipe.name.ilike(pattern), Recipe.description.ilike(pattern), Recipe.category.ilike(pattern))
        )
        if not ctx.is_admin:
            query = query.filter(Recipe.status == ContentStatus.PUBLISHED)
        results["recipes"] = [
            {"id": r.id, "title": r.name, "subtitle": r.category, "image": r.image, "href": f"/recipes/{r.id}"}
            for r in query.order_by(Recipe.created_at.desc()).limit(limit).all()
        ]

    if scope in ("all", "articles"):
        query = db.query(Article).filter(or_(Article.title.ilike(pattern), Article.content.ilike(pattern)))
        if not ctx.is_admin:
            query = query.filter(Article.status == ContentStatus.PUBLISHED)
        results["articles"] = [
            {
                "id": a.id,
                "title": a.title,
                "subtitle": a.category.value,
                "image": a.thumbnail_image,
                "href": f"/articles/{a.id}",
            }
            for a in query.order_by(Article.created_at.desc()).limit(limit).all()
        ]

    if scope in ("all", "forum"):
        posts = (
            db.query(ForumPost)
            .filter(ForumPost.content.ilike(pattern))
            .order_by(ForumPost.created_at.desc())
            .limit(limit)
            .all()
        )
        results["forum"] = [
            {
                "id": p.id,
                "title": excerpt(p.content, 80),
                "subtitle": f"by {p.author.name}" if p.author and p.author.name else "Forum post",
                "image": None,
                "href": f"/forum/{p.id}",
            }
            for p in posts
        ]

    return results
