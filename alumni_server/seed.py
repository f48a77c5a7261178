# alumni_server/seed.py

"""
Fills an empty database with sample users, stories and events.

    python -m alumni_server.seed

Users that already exist (by email) are left untouched, so the script can be
re-run safely; stories and events are only created for newly seeded users.
"""

import logging
from datetime import timedelta
from sqlalchemy.orm import Session

from alumni_server.core import identity
from alumni_server.core.media import store_media
from alumni_server.core.utils import utcnow
from alumni_server.database import SessionLocal, init_db
from alumni_server.models.content import Story, Event
from alumni_server.models.user import User


logger = logging.getLogger(__name__)

# 1x1 transparent PNG
PLACEHOLDER_PIXEL = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)

SEED_PASSWORD = "password123"

USERS = [
    {"username": "admin1", "email": "admin@example.com", "firstname": "Admin", "lastname": "User", "usertype": "admin"},
    {"username": "jsmith", "email": "john@example.com", "firstname": "John", "lastname": "Smith"},
    {"username": "sjohnson", "email": "sarah@example.com", "firstname": "Sarah", "lastname": "Johnson"},
    {"username": "mwong", "email": "michael@example.com", "firstname": "Michael", "lastname": "Wong"},
    {"username": "edavis", "email": "emma@example.com", "firstname": "Emma", "lastname": "Davis"},
]

STORIES = [
    ("From Campus to CEO: My Journey",
     "After graduating, I founded a tech startup. Here's how my university experience shaped my entrepreneurial journey."),
    ("Breaking Barriers in Medical Research",
     "My research team just received a major grant to continue our work on cancer treatment."),
    ("Building Schools Across Africa",
     "My nonprofit has built 15 schools in rural communities, using leadership skills I gained at university."),
    ("My Olympic Gold Medal Journey",
     "From university athletics to Olympic gold: a story of perseverance and the support of my alma mater."),
]

EVENTS = [
    ("Annual Alumni Gala", "An evening of celebration with fellow graduates.", 30, "Grand Ballroom, Main Campus"),
    ("Tech Industry Networking Night", "Meet alumni working across the technology sector.", 14, "Innovation Hub"),
    ("Career Mentorship Workshop", "Alumni mentors share advice with recent graduates.", 45, "Library Auditorium"),
]


def placeholder_media(db: Session) -> list[str]:
    return [store_media(db, PLACEHOLDER_PIXEL, "image/png")]


def seed_users(db: Session) -> list[User]:
    created = []
    for entry in USERS:
        if identity.find_by_email(db, entry["email"]):
            logger.info("Skipping existing user %s", entry["email"])
            continue
        create = identity.create_admin if entry.get("usertype") == "admin" else identity.register
        user = create(db, entry["username"], entry["email"], entry["firstname"], entry["lastname"], SEED_PASSWORD)
        created.append(user)
    return created


def seed_content(db: Session, users: list[User]):
    alumni = [u for u in users if u.usertype == "alumni"]
    admins = [u for u in users if u.usertype == "admin"]

    for author, (title, description) in zip(alumni, STORIES):
        db.add(Story(title=title, description=description, author_id=author.id, media_ids=placeholder_media(db)))

    if admins:
        now = utcnow()
        for title, description, days_ahead, location in EVENTS:
            db.add(Event(
                title=title,
                description=description,
                author_id=admins[0].id,
                media_ids=placeholder_media(db),
                event_date=now + timedelta(days=days_ahead),
                location=location,
            ))
    db.commit()


def seed():
    init_db()
    db = SessionLocal()
    try:
        users = seed_users(db)
        seed_content(db, users)
        logger.info("Seeded %d user(s)", len(users))
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed()
