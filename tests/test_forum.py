# Copyright (c) 2025 The Lahap Authors
# This file is part of the Lahap - Child Feeding Tracker project.
# Licensed under the MIT License - see the LICENSE file for details.

from datetime import timedelta

import pytest

from lahap.models.forum import ForumPost, ForumComment
from lahap.services.forum_service import (
    VOTE_DELETE,
    VOTE_INSERT,
    VOTE_NOOP,
    VOTE_UPDATE,
    parse_vote,
    resolve_vote,
)
from lahap.utils.errors import ValidationFailed
from lahap.utils.time_utils import today_range
from tests.helpers import auth_headers


def _post(db, author, content="How do I get my toddler to eat greens?"):
    post = ForumPost(author_id=author.id, content=content)
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def _comment(db, post, author, created_at=None):
    comment = ForumComment(post_id=post.id, user_id=author.id, content="Try smoothies")
    if created_at is not None:
        comment.created_at = created_at
    db.add(comment)
    db.commit()
    return comment


# ---------------------- VOTE POLICY ----------------------
@pytest.mark.parametrize(
    "existing, target, expected",
    [
        (None, 0, (VOTE_NOOP, 0)),
        (None, 1, (VOTE_INSERT, 1)),
        (None, -1, (VOTE_INSERT, -1)),
        (1, 1, (VOTE_DELETE, 0)),
        (-1, -1, (VOTE_DELETE, 0)),
        (1, 0, (VOTE_DELETE, 0)),
        (1, -1, (VOTE_UPDATE, -1)),
        (-1, 1, (VOTE_UPDATE, 1)),
    ],
)
def test_resolve_vote(existing, target, expected):
    assert resolve_vote(existing, target) == expected


def test_parse_vote():
    assert parse_vote(1) == 1
    assert parse_vote("-1") == -1
    assert parse_vote(" 0 ") == 0
    for bad in (2, "up", None, True, 0.5):
        with pytest.raises(ValidationFailed):
            parse_vote(bad)


# ---------------------- LIKES ----------------------
def test_like_toggles(client, db, user, other_user):
    post = _post(db, user)
    url = f"/forum/{post.id}/like"

    assert client.post(url, headers=auth_headers(user)).json() == {"isLiked": True, "likesCount": 1}
    assert client.post(url, headers=auth_headers(other_user)).json() == {"isLiked": True, "likesCount": 2}
    assert client.post(url, headers=auth_headers(user)).json() == {"isLiked": False, "likesCount": 1}


def test_like_unknown_post(client, user):
    assert client.post("/forum/999/like", headers=auth_headers(user)).status_code == 404


# ---------------------- VOTES ----------------------
def test_voting_same_value_twice_clears_vote(client, db, user):
    post = _post(db, user)
    url = f"/forum/{post.id}/vote"

    assert client.post(url, json={"value": 1}, headers=auth_headers(user)).json() == {"userVote": 1, "score": 1}
    assert client.post(url, json={"value": 1}, headers=auth_headers(user)).json() == {"userVote": 0, "score": 0}


def test_switching_vote_moves_score_by_two(client, db, user, other_user):
    post = _post(db, user)
    url = f"/forum/{post.id}/vote"

    client.post(url, json={"value": 1}, headers=auth_headers(other_user))
    assert client.post(url, json={"value": 1}, headers=auth_headers(user)).json()["score"] == 2
    assert client.post(url, json={"value": "-1"}, headers=auth_headers(user)).json() == {"userVote": -1, "score": 0}


def test_invalid_vote_value(client, db, user):
    post = _post(db, user)
    res = client.post(f"/forum/{post.id}/vote", json={"value": 5}, headers=auth_headers(user))
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid vote value"}


def test_post_reflects_viewer_state(client, db, user, other_user):
    post = _post(db, user)
    client.post(f"/forum/{post.id}/like", headers=auth_headers(user))
    client.post(f"/forum/{post.id}/vote", json={"value": -1}, headers=auth_headers(user))
    _comment(db, post, other_user)

    mine = client.get(f"/forum/{post.id}", headers=auth_headers(user)).json()["post"]
    assert mine["isLiked"] is True
    assert mine["userVote"] == -1
    assert mine["score"] == -1
    assert mine["likesCount"] == 1
    assert mine["commentsCount"] == 1

    theirs = client.get(f"/forum/{post.id}", headers=auth_headers(other_user)).json()["post"]
    assert theirs["isLiked"] is False
    assert theirs["userVote"] == 0


# ---------------------- POSTS & COMMENTS ----------------------
def test_create_and_list_posts(client, user, other_user):
    res = client.post("/forum", json={"content": "  First   post\n here "}, headers=auth_headers(user))
    assert res.status_code == 201
    client.post("/forum", json={"content": "Second"}, headers=auth_headers(other_user))

    posts = client.get("/forum").json()["posts"]
    assert len(posts) == 2
    assert "First post here" in [p["content"] for p in posts]

    mine = client.get("/forum?mine=true", headers=auth_headers(user)).json()["posts"]
    assert [p["author"]["id"] for p in mine] == [user.id]

    assert client.get("/forum?mine=true").status_code == 401
    assert len(client.get("/forum?limit=1").json()["posts"]) == 1


def test_empty_post_rejected(client, user):
    res = client.post("/forum", json={"content": "   "}, headers=auth_headers(user))
    assert res.status_code == 400
    assert res.json() == {"error": "Content is required"}


def test_only_author_or_admin_can_edit(client, db, user, other_user, admin):
    post = _post(db, user)

    assert client.put(f"/forum/{post.id}", json={"content": "hijack"}, headers=auth_headers(other_user)).status_code == 403
    assert client.put(f"/forum/{post.id}", json={"content": "edited"}, headers=auth_headers(user)).status_code == 200
    assert client.delete(f"/forum/{post.id}", headers=auth_headers(admin)).status_code == 200
    assert client.get(f"/forum/{post.id}", headers=auth_headers(user)).status_code == 404


def test_comments(client, db, user, other_user):
    post = _post(db, user)
    res = client.post(f"/forum/{post.id}/comments", json={"content": "Same here"}, headers=auth_headers(other_user))
    assert res.status_code == 201
    assert res.json()["comment"]["user"]["id"] == other_user.id

    comments = client.get(f"/forum/{post.id}/comments", headers=auth_headers(user)).json()["comments"]
    assert [c["content"] for c in comments] == ["Same here"]


# ---------------------- TRENDING ----------------------
def test_trending_ranks_by_todays_comments(client, db, user, other_user):
    quiet = _post(db, user, "quiet")
    busy = _post(db, user, "busy")
    tied = _post(db, other_user, "tied")

    start, _ = today_range()
    yesterday = start - timedelta(hours=1)

    for _ in range(3):
        _comment(db, busy, other_user)
    _comment(db, quiet, other_user)
    _comment(db, tied, user)
    for _ in range(5):
        _comment(db, quiet, other_user, created_at=yesterday)

    posts = client.get("/forum/trending", headers=auth_headers(user)).json()["posts"]

    assert [p["id"] for p in posts] == [busy.id, quiet.id, tied.id]
    assert [p["todayComments"] for p in posts] == [3, 1, 1]
    # total comment count still covers every day
    assert posts[1]["commentsCount"] == 6


def test_trending_limit(client, db, user):
    for i in range(7):
        _comment(db, _post(db, user, f"post {i}"), user)

    assert len(client.get("/forum/trending").json()["posts"]) == 5
    assert len(client.get("/forum/trending?limit=2").json()["posts"]) == 2
    # out of range falls back to the default
    assert len(client.get("/forum/trending?limit=0").json()["posts"]) == 5
    assert len(client.get("/forum/trending?limit=500").json()["posts"]) == 5


def test_trending_is_empty_without_comments_today(client, db, user):
    _post(db, user)
    assert client.get("/forum/trending").json() == {"posts": []}


@pytest.mark.parametrize("value", [True, False, 1.0, None, [1]])
def test_non_integer_vote_rejected(client, db, user, value):
    post = _post(db, user)
    res = client.post(f"/forum/{post.id}/vote", json={"value": value}, headers=auth_headers(user))

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid vote value"}
    assert client.get(f"/forum/{post.id}", headers=auth_headers(user)).json()["post"]["score"] == 0


def test_trending_non_finite_limit(client, db, user):
    for i in range(6):
        _comment(db, _post(db, user, f"post {i}"), user)

    res = client.get("/forum/trending?limit=inf")
    assert res.status_code == 200
    assert len(res.json()["posts"]) == 5
