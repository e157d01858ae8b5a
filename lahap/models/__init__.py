# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.


from .user import User, PasswordResetToken
from .child import Child
from .meal_log import MealLog
from .report import Report
from .forum import ForumPost, ForumComment, ForumPostLike, ForumPostVote
from .content import Recipe, FavoriteRecipe, Article, FavoriteArticle
