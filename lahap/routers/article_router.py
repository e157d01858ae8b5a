# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from lahap.auth import get_db, get_optional_context, get_request_context
from lahap.schemas.content_schemas import ArticleRequest
from lahap.services import article_service
from lahap.utils.auth_utils import RequestContext

router = APIRouter(prefix="/articles", tags=["Articles"])


@router.get("")
def list_articles(
    category: Optional[str] = None,
    search: Optional[str] = None,
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    favorites: Optional[str] = None,
    db: Session = Depends(get_db),
    ctx: Optional[RequestContext] = Depends(get_optional_context)
):
    articles = article_service.list_articles(
        db,
        ctx,
        category=category,
        search=search,
        date_from=date_from,
        date_to=date_to,
        favorites=(favorites or "").lower() == "true",
    )
    return {"articles": articles}


@router.post("", status_code=201)
def create_article(
    payload: ArticleRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    return {"article": article_service.create_article(db, ctx, payload)}


@router.get("/{article_id}")
def get_article(
    article_id: int,
    no_view: Optional[str] = Query(None, alias="noView"),
    db: Session = Depends(get_db),
    ctx: Optional[RequestContext] = Depends(get_optional_context)
):
    no_view = (no_view or "").lower() in ("1", "true")
    return {"article": article_service.get_article(db, ctx, article_id, no_view=no_view)}


@router.put("/{article_id}")
def update_article(
    article_id: int,
    payload: ArticleRequest,
    db: Session = Depends(get_db),
    ctx: RequestContext = Depends(get_request_context)
):
    return {"article": article_service.update_article(db, ctx, article_id, payload)}


@router.delete("/{article_id}")
def delete_article(article_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    article_service.delete_article(db, ctx, article_id)
    return {"message": "Article deleted successfully"}


@router.post("/{article_id}/favorite")
def toggle_favorite(article_id: int, db: Session = Depends(get_db), ctx: RequestContext = Depends(get_request_context)):
    return article_service.toggle_favorite(db, ctx, article_id)
