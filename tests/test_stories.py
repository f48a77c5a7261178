from datetime import timedelta

import pytest

from alumni_server.core import stories
from alumni_server.core.errors import Forbidden, NotFound, ValidationError
from alumni_server.core.media import MediaFile
from alumni_server.core.utils import utcnow
from alumni_server.models.content import Story, story_likes
from alumni_server.models.media import Media
from conftest import ctx_for, headers_for, make_user

PIXEL = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="


def _story(db, author, title="T", description="D", **kwargs):
    return stories.create_story(db, ctx_for(author), title, description, **kwargs)


# -------------------------------
# Creation & retrieval
# -------------------------------

def test_create_story_via_api(client, alice):
    payload = {
        "title": "  From Campus to CEO  ",
        "description": "My journey",
        "mediaFiles": [{"type": "image/png", "data": f"data:image/png;base64,{PIXEL}"}],
    }
    response = client.post("/api/stories", json=payload, headers=headers_for(alice))

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "From Campus to CEO"
    assert data["author"]["username"] == "alice"
    assert data["likes"] == 0
    assert data["comments"] == 0
    assert data["mediaUrls"] == [f"data:image/png;base64,{PIXEL}"]


def test_create_story_requires_token(client):
    response = client.post("/api/stories", json={"title": "T", "description": "D"})

    assert response.status_code == 401


def test_create_story_rejects_bad_media(db, alice):
    with pytest.raises(ValidationError):
        _story(db, alice, media_files=[MediaFile(type="image/png", data="***not base64***")])


def test_rejected_story_update_is_not_saved_later(db, alice):
    story = _story(db, alice)
    files = [MediaFile(type="image/png", data=PIXEL), MediaFile(type="image/png", data="***not base64***")]

    with pytest.raises(ValidationError):
        stories.update_story(db, ctx_for(alice), story["id"], title="Changed", media_files=files)
    db.commit()

    db.expire_all()
    row = db.get(Story, story["id"])
    assert row.title == "T"
    assert row.media_ids == []
    assert db.query(Media).count() == 0


def test_unknown_media_ids_are_skipped(db, alice):
    created = _story(db, alice, media_files=[MediaFile(type="image/png", data=PIXEL)])
    story = db.get(Story, created["id"])
    story.media_ids = ["missing-id"] + list(story.media_ids)
    db.commit()

    view = stories.get_story(db, story.id)
    assert view["mediaIds"][0] == "missing-id"
    assert view["mediaUrls"] == [f"data:image/png;base64,{PIXEL}"]


def test_get_story_includes_comments(client, alice, bob, db):
    story = _story(db, alice)
    client.post(f"/api/stories/{story['id']}/comments", json={"content": "Congrats!"}, headers=headers_for(bob))

    response = client.get(f"/api/stories/{story['id']}")
    assert response.status_code == 200
    data = response.json()
    assert data["commentCount"] == 1
    assert data["comments"][0]["content"] == "Congrats!"
    assert data["comments"][0]["author"]["username"] == "bob"
    assert "liked" not in data


def test_get_story_reports_viewer_like(client, alice, bob, db):
    story = _story(db, alice)
    client.post(f"/api/stories/{story['id']}/like", headers=headers_for(bob))

    data = client.get(f"/api/stories/{story['id']}", headers=headers_for(bob)).json()
    assert data["liked"] is True
    assert data["likes"] == 1


# -------------------------------
# Listing
# -------------------------------

def test_pagination_metadata(client, db, alice):
    for i in range(25):
        _story(db, alice, title=f"Story {i}")

    first = client.get("/api/stories", params={"page": 1, "limit": 10}).json()
    assert first["total"] == 25
    assert first["pages"] == 3
    assert first["hasMore"] is True
    assert len(first["stories"]) == 10
    assert first["stories"][0]["title"] == "Story 24"

    last = client.get("/api/stories", params={"page": 3, "limit": 10}).json()
    assert last["hasMore"] is False
    assert len(last["stories"]) == 5
    assert last["stories"][-1]["title"] == "Story 0"


def test_pagination_rejects_page_zero(client):
    response = client.get("/api/stories", params={"page": 0})

    assert response.status_code == 400


def test_featured_orders_by_likes_then_newest(db):
    author = make_user(db, "author")
    likers = [make_user(db, f"liker{i}") for i in range(9)]

    ids = []
    for title, like_count in (("five", 5), ("one", 1), ("nine", 9)):
        story = _story(db, author, title=title)
        ids.append(story["id"])
        for liker in likers[:like_count]:
            stories.toggle_like(db, ctx_for(liker), story["id"])

    featured = stories.featured_stories(db)
    assert [s["likes"] for s in featured] == [9, 5, 1]
    assert [s["title"] for s in featured] == ["nine", "five", "one"]


def test_featured_tie_goes_to_newest(db, alice):
    older = _story(db, alice, title="older")
    newer = _story(db, alice, title="newer")
    row = db.get(Story, older["id"])
    row.created_at = utcnow() - timedelta(days=1)
    db.commit()

    featured = stories.featured_stories(db)
    assert [s["id"] for s in featured] == [newer["id"], older["id"]]


def test_stories_by_author(client, db, alice, bob):
    _story(db, alice, title="mine")
    _story(db, bob, title="theirs")

    response = client.get(f"/api/users/{alice.id}/stories", headers=headers_for(bob))
    assert [s["title"] for s in response.json()] == ["mine"]


# -------------------------------
# Authorization & soft delete
# -------------------------------

def test_only_author_can_update(client, db, alice, bob, admin):
    story = _story(db, alice)

    response = client.put(f"/api/stories/{story['id']}", json={"title": "Hijacked"}, headers=headers_for(bob))
    assert response.status_code == 403

    with pytest.raises(Forbidden):
        stories.update_story(db, ctx_for(admin), story["id"], title="Admin edit")

    updated = stories.update_story(
        db, ctx_for(alice), story["id"],
        title="New title",
        media_files=[MediaFile(type="image/png", data=PIXEL)],
    )
    assert updated["title"] == "New title"
    assert updated["description"] == "D"
    assert len(updated["mediaIds"]) == 1


def test_soft_delete_hides_story(client, db, alice, bob):
    story = _story(db, alice)

    assert client.delete(f"/api/stories/{story['id']}", headers=headers_for(bob)).status_code == 403

    response = client.delete(f"/api/stories/{story['id']}", headers=headers_for(alice))
    assert response.status_code == 200

    assert client.get(f"/api/stories/{story['id']}").status_code == 404
    assert client.get("/api/stories").json()["total"] == 0
    assert stories.featured_stories(db) == []

    db.expire_all()
    row = db.get(Story, story["id"])
    assert row.is_deleted is True
    assert row.deleted_at is not None


def test_admin_can_delete_any_story(db, alice, admin):
    story = _story(db, alice)
    stories.delete_story(db, ctx_for(admin), story["id"])

    with pytest.raises(NotFound):
        stories.get_story(db, story["id"])


# -------------------------------
# Likes & comments
# -------------------------------

def test_like_toggle_scenario(client, db, alice, bob):
    story = _story(db, alice)

    first = client.post(f"/api/stories/{story['id']}/like", headers=headers_for(bob)).json()
    assert first == {"likes": 1, "liked": True}

    second = client.post(f"/api/stories/{story['id']}/like", headers=headers_for(bob)).json()
    assert second == {"likes": 0, "liked": False}


def test_repeated_likes_never_duplicate(db, alice, bob):
    story = _story(db, alice)
    for _ in range(7):
        stories.toggle_like(db, ctx_for(bob), story["id"])

    rows = db.execute(story_likes.select().where(story_likes.c.story_id == story["id"])).all()
    assert len(rows) == 1


def test_like_missing_story(client, alice):
    response = client.post("/api/stories/999/like", headers=headers_for(alice))

    assert response.status_code == 404
    assert response.json() == {"message": "Story not found"}


def test_comment_on_deleted_story(db, alice, bob):
    story = _story(db, alice)
    stories.delete_story(db, ctx_for(alice), story["id"])

    with pytest.raises(NotFound):
        stories.add_comment(db, ctx_for(bob), story["id"], "Too late")


def test_comment_requires_content(db, alice):
    story = _story(db, alice)

    with pytest.raises(ValidationError):
        stories.add_comment(db, ctx_for(alice), story["id"], "   ")


def test_comment_count_in_list(client, db, alice, bob):
    story = _story(db, alice)
    for text in ("one", "two"):
        stories.add_comment(db, ctx_for(bob), story["id"], text)

    listed = client.get("/api/stories").json()["stories"][0]
    assert listed["comments"] == 2
