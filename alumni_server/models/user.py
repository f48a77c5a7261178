# alumni_server/models/user.py

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Table, CheckConstraint
from sqlalchemy.orm import relationship
from alumni_server.core.utils import utcnow
from . import Base


USER_TYPES = ("alumni", "admin")
USER_STATUSES = ("active", "inactive", "pending")


# -------------------------------
# Friend edges (profile -> user)
# -------------------------------

alumni_friends = Table(
    "alumni_friends",
    Base.metadata,
    Column("profile_id", Integer, ForeignKey("alumni_profiles.id"), primary_key=True),
    Column("friend_id", Integer, ForeignKey("users.id"), primary_key=True),
    Column("created_at", DateTime, default=utcnow, nullable=False),
)


# -------------------------------
# User Model
# -------------------------------

class User(Base):
    """
    Database model for application users.
    Email is stored lower-cased so uniqueness is case-insensitive.
    """
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(f"usertype IN {USER_TYPES}", name="ck_users_usertype"),
        CheckConstraint(f"status IN {USER_STATUSES}", name="ck_users_status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    firstname = Column(String, nullable=False)
    lastname = Column(String, nullable=False)
    hashed_password = Column(String, nullable=False)
    usertype = Column(String, default="alumni", nullable=False)
    status = Column(String, default="active", nullable=False)
    profile_image_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    alumni_profile = relationship("AlumniProfile", back_populates="user", uselist=False)

    @property
    def is_admin(self) -> bool:
        return self.usertype == "admin"


class AlumniProfile(Base):
    """
    Alumni extension of a user. Friend edges are stored only on the
    initiating profile, so friendship is not symmetric.
    """
    __tablename__ = "alumni_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, index=True, nullable=False)
    status = Column(String, default="active", nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    user = relationship("User", back_populates="alumni_profile")
    friends = relationship("User", secondary=alumni_friends, order_by=alumni_friends.c.created_at)
