from alumni_server import seed
from alumni_server.models.content import Event, Story
from alumni_server.models.user import AlumniProfile, User


def test_seed_users_gives_profiles_to_alumni_only(db):
    users = seed.seed_users(db)

    admins = [u for u in users if u.usertype == "admin"]
    alumni = [u for u in users if u.usertype == "alumni"]
    assert [u.email for u in admins] == ["admin@example.com"]
    assert len(alumni) == len(seed.USERS) - 1

    assert db.query(AlumniProfile).filter_by(user_id=admins[0].id).first() is None
    assert db.query(AlumniProfile).count() == len(alumni)


def test_seed_content_and_rerun(db):
    users = seed.seed_users(db)
    seed.seed_content(db, users)

    assert db.query(Story).count() == len(seed.STORIES)
    assert db.query(Event).count() == len(seed.EVENTS)

    assert seed.seed_users(db) == []
    assert db.query(User).count() == len(seed.USERS)
