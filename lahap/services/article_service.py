# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


import re
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from lahap.models.content import Article, FavoriteArticle, ArticleCategory, ContentStatus
from lahap.schemas.content_schemas import ArticleRequest
from lahap.services.forum_service import author_brief
from lahap.services.recipe_service import require_admin
from lahap.utils.auth_utils import RequestContext
from lahap.utils.errors import NotFound, ValidationFailed
from lahap.utils.time_utils import isoformat_or_none
from lahap.utils.validation_utils import parse_enum, parse_optional_enum

DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_date_only(value: Optional[str]) -> Optional[datetime]:
    # Browser date inputs send YYYY-MM-DD
    if not value or not DATE_ONLY.match(value):
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return None


def parse_categories(value: Optional[str]) -> List[ArticleCategory]:
    if not value:
        return []
    parsed = [parse_optional_enum(ArticleCategory, c.strip().upper()) for c in value.split(",") if c.strip()]
    return [c for c in parsed if c is not None]


def serialize_article(article: Article, favorites_count: int, is_favorited: bool) -> dict:
    return {
        "id": article.id,
        "title": article.title,
        "content": article.content,
        "category": article.category.value,
        "status": article.status.value,
        "thumbnailImage": article.thumbnail_image,
        "heroImage": article.hero_image,
        "views": article.views,
        "author": author_brief(article.author),
        "createdAt": isoformat_or_none(article.created_at),
        "updatedAt": isoformat_or_none(article.updated_at),
        "favoritesCount": favorites_count,
        "isFavorited": is_favorited,
    }


def _favorite_counts(db: Session, article_ids: List[int]) -> dict:
    if not article_ids:
        return {}
    rows = (
        db.query(FavoriteArticle.article_id, func.count(FavoriteArticle.id))
        .filter(FavoriteArticle.article_id.in_(article_ids))
        .group_by(FavoriteArticle.article_id)
        .all()
    )
    return dict(rows)


def _favorited_ids(db: Session, ctx: Optional[RequestContext]) -> set:
    if ctx is None:
        return set()
    rows = db.query(FavoriteArticle.article_id).filter(FavoriteArticle.user_id == ctx.user_id).all()
    return {row.article_id for row in rows}


def list_articles(
    db: Session,
    ctx: Optional[RequestContext],
    category: Optional[str] = None,
    search: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    favorites: bool = False,
) -> List[dict]:
    query = db.query(Article)
    if ctx is None or not ctx.is_admin:
        query = query.filter(Article.status == ContentStatus.PUBLISHED)

    categories = parse_categories(category)
    if categories:
        query = query.filter(Article.category.in_(categories))

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(Article.title.ilike(pattern), Article.content.ilike(pattern)))

    start = parse_date_only(date_from)
    end = parse_date_only(date_to)
    # "to" is inclusive, a reversed range is read the other way round
    if start and end and start > end:
        start, end = end, start
    if start:
        query = query.filter(Article.created_at >= start)
    if end:
        query = query.filter(Article.created_at < end + timedelta(days=1))

    favorited = _favorited_ids(db, ctx)
    if favorites and ctx is not None:
        query = query.filter(Article.id.in_(favorited or [-1]))

    articles = query.order_by(Article.created_at.desc(), Article.id.desc()).all()
    counts = _favorite_counts(db, [a.id for a in articles])
    return [serialize_article(a, counts.get(a.id, 0), a.id in favorited) for a in articles]


def _get_visible_article(db: Session, ctx: Optional[RequestContext], article_id: int) -> Article:
    article = db.query(Article).filter(Article.id == article_id).first()
    if not article:
        raise NotFound("Article not found")
    if article.status != ContentStatus.PUBLISHED and (ctx is None or not ctx.is_admin):
        raise NotFound("Article not found")
    return article


def get_article(db: Session, ctx: Optional[RequestContext], article_id: int, no_view: bool = False) -> dict:
    article = _get_visible_article(db, ctx, article_id)

    # Admins previewing from the editor don't inflate the counter
    if not (no_view and ctx is not None and ctx.is_admin):
        article.views = (article.views or 0) + 1
        db.commit()
        db.refresh(article)

    counts = _favorite_counts(db, [article.id])
    return serialize_article(article, counts.get(article.id, 0), article.id in _favorited_ids(db, ctx))


def create_article(db: Session, ctx: Optional[RequestContext], payload: ArticleRequest) -> dict:
    ctx = require_admin(ctx)

    category = parse_optional_enum(ArticleCategory, (payload.category or "").upper())
    if not payload.title or not payload.content or category is None:
        raise ValidationFailed("Missing required fields")
    status = parse_enum(ContentStatus, (payload.status or "DRAFT").upper(), "Invalid status")

    article = Article(
        author_id=ctx.user_id,
        title=payload.title,
        content=payload.content,
        category=category,
        status=status,
        thumbnail_image=payload.thumbnail_image,
        hero_image=payload.hero_image,
    )
    db.add(article)
    db.commit()
    db.refresh(article)
    return serialize_article(article, 0, False)


def update_article(db: Session, ctx: Optional[RequestContext], article_id: int, payload: ArticleRequest) -> dict:
    ctx = require_admin(ctx)
    article = db.query(Article).filter(Article.id == article_id).first()
    if not article:
        raise NotFound("Article not found")

    changes = payload.model_dump(exclude_unset=True)
    if "category" in changes:
        changes["category"] = parse_enum(ArticleCategory, (changes["category"] or "").upper(), "Invalid category")
    if "status" in changes:
        changes["status"] = parse_enum(ContentStatus, (changes["status"] or "").upper(), "Invalid status")
    for field, value in changes.items():
        if value is None and field in ("title", "content"):
            continue
        setattr(article, field, value)

    db.commit()
    db.refresh(article)
    counts = _favorite_counts(db, [article.id])
    return serialize_article(article, counts.get(article.id, 0), article.id in _favorited_ids(db, ctx))


def delete_article(db: Session, ctx: Optional[RequestContext], article_id: int) -> None:
    require_admin(ctx)
    article = db.query(Article).filter(Article.id == article_id).first()
    if not article:
        raise NotFound("Article not found")
    db.delete(article)
    db.commit()


def toggle_favorite(db: Session, ctx: RequestContext, article_id: int) -> dict:
    article = _get_visible_article(db, ctx, article_id)

    existing = db.query(FavoriteArticle).filter_by(user_id=ctx.user_id, article_id=article.id).first()
    if existing:
        db.delete(existing)
        db.commit()
        return {"message": "Article unfavorited", "isFavorited": False}

    db.add(FavoriteArticle(user_id=ctx.user_id, article_id=article.id))
    db.commit()
    return {"message": "Article favorited", "isFavorited": True}
