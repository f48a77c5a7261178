from datetime import timedelta

import pytest

from alumni_server.core import friends, identity, stories, events
from alumni_server.core.errors import Conflict, Forbidden, NotFound, Unauthenticated, ValidationError
from alumni_server.core.security import verify_password
from alumni_server.core.utils import utcnow
from alumni_server.models.user import AlumniProfile, User
from conftest import ctx_for, headers_for, make_user

PIXEL = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="


# -------------------------------
# Friendship
# -------------------------------

def test_friend_toggle_scenario(client, alice, bob):
    first = client.post(f"/api/users/{bob.id}/friend", headers=headers_for(alice))
    assert first.status_code == 200
    assert first.json()["isFriend"] is True

    second = client.post(f"/api/users/{bob.id}/friend", headers=headers_for(alice))
    assert second.json()["isFriend"] is False


def test_friendship_is_one_directional(db, alice, bob):
    friends.toggle_friend(db, ctx_for(alice), bob.id)

    assert identity.user_detail(db, alice.id)["friendCount"] == 1
    assert identity.user_detail(db, bob.id)["friendCount"] == 0


def test_cannot_befriend_admin_or_missing_user(db, alice, admin):
    with pytest.raises(NotFound):
        friends.toggle_friend(db, ctx_for(alice), admin.id)
    with pytest.raises(NotFound):
        friends.toggle_friend(db, ctx_for(alice), 12345)


def test_admin_has_no_alumni_profile(db, admin, bob):
    assert db.query(AlumniProfile).filter_by(user_id=admin.id).first() is None

    with pytest.raises(NotFound, match="Alumni profile not found"):
        friends.toggle_friend(db, ctx_for(admin), bob.id)


def test_caller_without_profile(db, alice, bob):
    db.query(AlumniProfile).filter_by(user_id=alice.id).delete()
    db.commit()

    with pytest.raises(NotFound):
        friends.toggle_friend(db, ctx_for(alice), bob.id)


def test_cannot_befriend_self(client, alice):
    response = client.post(f"/api/users/{alice.id}/friend", headers=headers_for(alice))

    assert response.status_code == 400


# -------------------------------
# Profile
# -------------------------------

def test_update_profile(client, alice):
    payload = {
        "firstname": "Alicia",
        "lastname": "",
        "email": "Alicia@Example.com",
        "profileImage": f"data:image/png;base64,{PIXEL}",
    }
    response = client.put("/api/users/profile", json=payload, headers=headers_for(alice))

    assert response.status_code == 200
    data = response.json()
    assert data["firstname"] == "Alicia"
    assert data["lastname"] == "Tester"
    assert data["email"] == "alicia@example.com"
    assert data["profileImage"] == f"data:image/png;base64,{PIXEL}"


def test_update_profile_email_conflict(db, alice, bob):
    with pytest.raises(Conflict):
        identity.update_profile(db, alice.id, email="BOB@example.com")


def test_rejected_profile_update_is_not_saved_later(db, alice, bob):
    with pytest.raises(Conflict):
        identity.update_profile(db, alice.id, firstname="Mallory", email="bob@example.com")
    with pytest.raises(ValidationError):
        identity.update_profile(db, alice.id, lastname="Mallory", profile_image="not base64!")

    stories.create_story(db, ctx_for(alice), "T", "D")

    db.expire_all()
    user = db.get(User, alice.id)
    assert user.firstname == "Alice"
    assert user.lastname == "Tester"
    assert user.email == "alice@example.com"
    assert user.profile_image_id is None


def test_profile_image_shows_on_authored_content(db, alice):
    identity.update_profile(db, alice.id, profile_image=f"data:image/png;base64,{PIXEL}")
    story = stories.create_story(db, ctx_for(alice), "T", "D")

    assert story["author"]["profileImage"] == f"data:image/png;base64,{PIXEL}"


def test_change_password(client, db, alice):
    bad = client.put(
        "/api/users/password",
        json={"currentPassword": "wrong", "newPassword": "newpass456"},
        headers=headers_for(alice),
    )
    assert bad.status_code == 401

    good = client.put(
        "/api/users/password",
        json={"currentPassword": "password123", "newPassword": "newpass456"},
        headers=headers_for(alice),
    )
    assert good.status_code == 200

    db.expire_all()
    assert verify_password("newpass456", db.get(User, alice.id).hashed_password)
    with pytest.raises(Unauthenticated):
        identity.authenticate(db, "alice@example.com", "password123")


# -------------------------------
# Administration
# -------------------------------

def test_list_users_admin_only(client, alice, admin):
    assert client.get("/api/users", headers=headers_for(alice)).status_code == 403

    response = client.get("/api/users", headers=headers_for(admin))
    assert response.status_code == 200
    usernames = [u["username"] for u in response.json()]
    assert set(usernames) == {"alice", "admin"}
    assert all("hashed_password" not in u for u in response.json())


def test_set_status(client, db, alice, admin):
    response = client.put(f"/api/users/{alice.id}/status", json={"status": "inactive"}, headers=headers_for(admin))
    assert response.status_code == 200
    assert response.json()["status"] == "inactive"

    with pytest.raises(ValidationError):
        identity.set_status(db, ctx_for(admin), alice.id, "banned")
    with pytest.raises(Forbidden):
        identity.set_status(db, ctx_for(alice), alice.id, "active")
    with pytest.raises(NotFound):
        identity.set_status(db, ctx_for(admin), 12345, "active")


# -------------------------------
# Directory & detail
# -------------------------------

def test_alumni_directory(client, db, admin):
    for name in ("carol", "dave", "erin"):
        make_user(db, name)
    inactive = make_user(db, "frank")
    identity.set_status(db, ctx_for(admin), inactive.id, "inactive")

    data = client.get("/api/users/alumni", params={"limit": 2}, headers=headers_for(admin)).json()
    assert [a["username"] for a in data["alumni"]] == ["carol", "dave"]
    assert data["total"] == 3
    assert data["pages"] == 2
    assert data["hasMore"] is True

    found = client.get("/api/users/alumni", params={"search": "ERI"}, headers=headers_for(admin)).json()
    assert [a["username"] for a in found["alumni"]] == ["erin"]


def test_user_detail_counts(client, db, alice, bob, admin):
    stories.create_story(db, ctx_for(alice), "Kept", "D")
    removed = stories.create_story(db, ctx_for(alice), "Removed", "D")
    stories.delete_story(db, ctx_for(alice), removed["id"])
    event = events.create_event(db, ctx_for(admin), "Gala", "D", utcnow() + timedelta(days=30), "Hall")
    events.toggle_registration(db, ctx_for(alice), event["id"])
    friends.toggle_friend(db, ctx_for(alice), bob.id)

    data = client.get(f"/api/users/{alice.id}", headers=headers_for(bob)).json()
    assert data["storyCount"] == 1
    assert data["eventCount"] == 1
    assert data["friendCount"] == 1


def test_user_detail_missing(client, alice):
    response = client.get("/api/users/999", headers=headers_for(alice))

    assert response.status_code == 404
    assert response.json() == {"message": "User not found"}
