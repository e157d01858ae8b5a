# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from sqlalchemy import Column, Integer, String, Text, DateTime, Enum, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from lahap.models.database import Base
import enum

class ContentStatus(enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"

class Difficulty(enum.Enum):
    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"

class ArticleCategory(enum.Enum):
    FEEDING = "FEEDING"
    NUTRITION = "NUTRITION"
    HEALTH = "HEALTH"
    DEVELOPMENT = "DEVELOPMENT"
    TIPS = "TIPS"


class Recipe(Base):
    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    name = Column(String, nullable=False)
    category = Column(String, nullable=False)  # e.g. "Soup", "Main Course"
    description = Column(Text, nullable=False)
    image = Column(String, nullable=True)
    prep_time = Column(Integer, nullable=False)  # minutes
    cook_time = Column(Integer, nullable=False)  # minutes
    difficulty = Column(Enum(Difficulty), nullable=False)
    servings = Column(Integer, nullable=False)
    ingredients = Column(JSON, default=list)   # [{name, amount, unit}]
    instructions = Column(JSON, default=list)  # [{step, description}]
    nutrition = Column(JSON, nullable=True)    # {calories, fat, protein, ...}
    status = Column(Enum(ContentStatus), default=ContentStatus.DRAFT, nullable=False)
    source = Column(String, nullable=True)
    tags = Column(JSON, default=list)
    views = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    author = relationship("User")
    favorited_by = relationship("FavoriteRecipe", back_populates="recipe", cascade="all, delete-orphan")


class FavoriteRecipe(Base):
    __tablename__ = "favorite_recipes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    recipe = relationship("Recipe", back_populates="favorited_by")

    __table_args__ = (UniqueConstraint("user_id", "recipe_id", name="uq_favorite_recipe"),)


class Article(Base):
    __tablename__ = "articles"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(Enum(ArticleCategory), nullable=False)
    status = Column(Enum(ContentStatus), default=ContentStatus.DRAFT, nullable=False)
    thumbnail_image = Column(String, nullable=True)
    hero_image = Column(String, nullable=True)
    views = Column(Integer, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    author = relationship("User")
    favorited_by = relationship("FavoriteArticle", back_populates="article", cascade="all, delete-orphan")


class FavoriteArticle(Base):
    __tablename__ = "favorite_articles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    article_id = Column(Integer, ForeignKey("articles.id"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    article = relationship("Article", back_populates="favorited_by")

    __table_args__ = (UniqueConstraint("user_id", "article_id", name="uq_favorite_article"),)
